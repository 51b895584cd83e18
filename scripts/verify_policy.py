#!/usr/bin/env python3
"""
Fetch a tenant's signed policy and verify it the way an agent does.

    POLICY_HMAC_SECRET=... python scripts/verify_policy.py acme --base-url http://localhost:8080
"""
import argparse
import json
import os
import sys

import requests

from policy_server.errors import EnvelopeError
from policy_server.services.signer import verify_envelope


def main():
    parser = argparse.ArgumentParser(description="Verify a signed tenant policy envelope")
    parser.add_argument("tenant_id")
    parser.add_argument("--base-url", default=os.getenv("BASE_URL", "http://127.0.0.1:8080"))
    parser.add_argument("--secret", default=os.getenv("POLICY_HMAC_SECRET"),
                        help="HMAC secret (defaults to POLICY_HMAC_SECRET)")
    parser.add_argument("--timeout", type=float, default=5.0)
    args = parser.parse_args()

    if not args.secret:
        parser.error("no secret given and POLICY_HMAC_SECRET is unset")

    resp = requests.get(f"{args.base_url.rstrip('/')}/policies/{args.tenant_id}", timeout=args.timeout)
    resp.raise_for_status()
    envelope = resp.json()

    try:
        policy = verify_envelope(envelope, args.secret)
    except EnvelopeError as e:
        print(f"REJECTED: {e}", file=sys.stderr)
        sys.exit(2)

    print(f"verified: tenant={envelope['tenantId']} expires={envelope['expiresAtUtc']}")
    print(json.dumps(policy, indent=2))


if __name__ == "__main__":
    main()
