# tests/test_signer.py
import base64
import hashlib
import hmac
import json
from datetime import datetime, timedelta, timezone

import pytest

from policy_server.errors import EnvelopeError, EnvelopeExpired, MalformedEnvelope, SignatureMismatch
from policy_server.services.signer import EnvelopeSigner, compute_signature, sign_policy, verify_envelope

SECRET = "unit-test-secret"
POLICY = '{"tenantId":"acme","global":{"killAll":false},"endpoints":{}}'
ISSUED = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _independent_hmac(secret, body):
    return base64.b64encode(hmac.new(secret.encode(), body.encode(), hashlib.sha256).digest()).decode()


def test_signature_matches_independent_hmac():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    assert env.policy_json == POLICY
    assert env.signature == _independent_hmac(SECRET, env.policy_json)


def test_mutating_one_byte_breaks_signature():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    tampered = env.policy_json.replace("false", "true", 1)
    assert tampered != env.policy_json
    assert _independent_hmac(SECRET, tampered) != env.signature


def test_different_secret_different_signature():
    assert compute_signature("a", POLICY) != compute_signature("b", POLICY)


def test_expiry_is_issued_plus_ttl():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    assert env.issued_at_utc == ISSUED
    assert env.expires_at_utc - env.issued_at_utc == timedelta(seconds=60)


def test_signer_uses_clock_and_ttl():
    signer = EnvelopeSigner(SECRET, 90, clock=lambda: ISSUED)
    env = signer.sign("acme", POLICY)
    assert env.tenant_id == "acme"
    assert env.expires_at_utc == ISSUED + timedelta(seconds=90)


def test_default_clock_is_utc():
    env = EnvelopeSigner(SECRET, 60).sign("acme", POLICY)
    assert env.issued_at_utc.utcoffset() == timedelta(0)


def test_verify_returns_policy_document():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    doc = verify_envelope(env, SECRET, now=ISSUED + timedelta(seconds=30))
    assert doc == json.loads(POLICY)


def test_verify_accepts_wire_dict():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    wire = json.loads(env.model_dump_json(by_alias=True))
    assert set(wire) == {"tenantId", "issuedAtUtc", "expiresAtUtc", "policyJson", "signature"}
    assert verify_envelope(wire, SECRET, now=ISSUED)["tenantId"] == "acme"


def test_verify_rejects_expired():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    verify_envelope(env, SECRET, now=ISSUED + timedelta(seconds=60))
    with pytest.raises(EnvelopeExpired):
        verify_envelope(env, SECRET, now=ISSUED + timedelta(seconds=61))


def test_verify_rejects_tampered_policy():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    forged = env.model_copy(update={"policy_json": POLICY.replace("false", "true")})
    with pytest.raises(SignatureMismatch):
        verify_envelope(forged, SECRET, now=ISSUED)


def test_verify_rejects_wrong_secret():
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    with pytest.raises(SignatureMismatch):
        verify_envelope(env, "other-secret", now=ISSUED)


def test_timestamps_are_not_covered_by_signature():
    # Known limitation: moving expiresAtUtc does not invalidate the MAC
    env = sign_policy("acme", POLICY, SECRET, timedelta(seconds=60), now=ISSUED)
    stretched = env.model_copy(update={"expires_at_utc": ISSUED + timedelta(days=1)})
    assert verify_envelope(stretched, SECRET, now=ISSUED + timedelta(hours=1)) == json.loads(POLICY)


@pytest.mark.parametrize("wire", [
    {},
    {"tenantId": "acme", "policyJson": POLICY},
    {"tenantId": "acme", "issuedAtUtc": "yesterday", "expiresAtUtc": "tomorrow",
     "policyJson": POLICY, "signature": "x"},
])
def test_verify_rejects_malformed_envelope(wire):
    with pytest.raises(MalformedEnvelope):
        verify_envelope(wire, SECRET, now=ISSUED)


def test_malformed_envelope_is_an_envelope_error():
    with pytest.raises(EnvelopeError):
        verify_envelope({"tenantId": "acme"}, SECRET, now=ISSUED)
