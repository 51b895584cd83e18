#!/usr/bin/env python3
"""
Smoke test for the policy server using urllib.request (no external deps)
"""
import json
import os
import sys
import urllib.error
import urllib.request

BASE_URL = os.getenv("BASE_URL", "http://127.0.0.1:8080")


def test_endpoint(path, expected_status=200, check_keys=()):
    """Test an endpoint and return success status"""
    url = f"{BASE_URL}{path}"
    try:
        with urllib.request.urlopen(url) as response:
            if response.status != expected_status:
                print(f"FAIL {path}: expected status {expected_status}, got {response.status}")
                return False
            data = json.loads(response.read().decode("utf-8"))
            missing = [k for k in check_keys if k not in data]
            if missing:
                print(f"FAIL {path}: missing keys {missing}")
                return False
            print(f"ok   {path}: status {response.status}")
            return True
    except urllib.error.HTTPError as e:
        if e.code == expected_status:
            print(f"ok   {path}: status {e.code} (expected)")
            return True
        print(f"FAIL {path}: expected status {expected_status}, got {e.code}")
        return False
    except (urllib.error.URLError, ValueError) as e:
        print(f"FAIL {path}: error - {e}")
        return False


def main():
    print("Running smoke tests against", BASE_URL)
    tests = [
        ("/health", 200, ("ok",)),
        ("/policies/default", 200, ("tenantId", "issuedAtUtc", "expiresAtUtc", "policyJson", "signature")),
        ("/admin/tenants", 401, ()),
    ]
    failed = sum(0 if test_endpoint(*t) else 1 for t in tests)
    if failed:
        print(f"\n{failed} check(s) failed")
        sys.exit(1)
    print("\nAll smoke checks passed")


if __name__ == "__main__":
    main()
