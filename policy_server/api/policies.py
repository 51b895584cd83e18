"""
Agent-facing policy fetch. Unauthenticated: agents trust the signature, not
the transport.
"""

from fastapi import APIRouter, Depends

from ..dependencies import get_composer, get_signer
from ..schemas import SignedPolicyEnvelope
from ..services.composer import PolicyComposer
from ..services.prometheus_metrics import prometheus_metrics
from ..services.signer import EnvelopeSigner

router = APIRouter(tags=["policies"])


@router.get("/policies/{tenant_id}", response_model=SignedPolicyEnvelope)
def fetch_policy(
    tenant_id: str,
    composer: PolicyComposer = Depends(get_composer),
    signer: EnvelopeSigner = Depends(get_signer),
):
    """Compose the tenant's current policy and return it signed"""
    policy_json = composer.compose_json(tenant_id)
    envelope = signer.sign(tenant_id, policy_json)
    prometheus_metrics.increment_policy_fetch()
    return envelope
