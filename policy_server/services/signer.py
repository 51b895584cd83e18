"""
Envelope signing and verification.

The HMAC covers the serialized policy only. Issue/expiry timestamps sit
beside it in the envelope and are not bound into the signature; freshness is
enforced by the verifier comparing ``now`` against ``expiresAtUtc``.
"""

import base64
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from ..errors import EnvelopeExpired, MalformedEnvelope, SignatureMismatch
from ..schemas import SignedPolicyEnvelope


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def compute_signature(secret: str, policy_json: str) -> str:
    """base64(HMAC-SHA256(secret, policy_json)) over the UTF-8 bytes"""
    digest = hmac.new(
        secret.encode("utf-8"),
        policy_json.encode("utf-8"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def sign_policy(
    tenant_id: str,
    policy_json: str,
    secret: str,
    ttl: timedelta,
    now: Optional[datetime] = None,
) -> SignedPolicyEnvelope:
    issued_at = now or utcnow()
    return SignedPolicyEnvelope(
        tenant_id=tenant_id,
        issued_at_utc=issued_at,
        expires_at_utc=issued_at + ttl,
        policy_json=policy_json,
        signature=compute_signature(secret, policy_json),
    )


def verify_envelope(
    envelope: Union[SignedPolicyEnvelope, Dict[str, Any]],
    secret: str,
    now: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Check signature and freshness; return the decoded policy document.

    Raises ``MalformedEnvelope``, ``SignatureMismatch`` or ``EnvelopeExpired``.
    """
    if not isinstance(envelope, SignedPolicyEnvelope):
        try:
            envelope = SignedPolicyEnvelope.model_validate(envelope)
        except PydanticValidationError as e:
            raise MalformedEnvelope(f"malformed policy envelope: {e.error_count()} invalid field(s)") from e

    expected = compute_signature(secret, envelope.policy_json)
    if not hmac.compare_digest(expected.encode("ascii"), envelope.signature.encode("ascii", "replace")):
        raise SignatureMismatch(f"signature mismatch for tenant {envelope.tenant_id}")

    now = now or utcnow()
    expires_at = envelope.expires_at_utc
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if now > expires_at:
        raise EnvelopeExpired(f"policy for tenant {envelope.tenant_id} expired at {expires_at.isoformat()}")

    return json.loads(envelope.policy_json)


class EnvelopeSigner:
    """Signs with one process-wide secret and TTL"""

    def __init__(self, secret: str, ttl_seconds: int, clock: Callable[[], datetime] = utcnow):
        self._secret = secret
        self.ttl = timedelta(seconds=ttl_seconds)
        self._clock = clock

    def sign(self, tenant_id: str, policy_json: str) -> SignedPolicyEnvelope:
        return sign_policy(tenant_id, policy_json, self._secret, self.ttl, now=self._clock())
