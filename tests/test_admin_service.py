# tests/test_admin_service.py
import pytest

from policy_server.errors import ValidationError
from policy_server.schemas import EndpointRuleView, TenantView
from policy_server.services.admin import AdminService, normalize_feature


@pytest.fixture
def admin(store):
    return AdminService(store)


@pytest.mark.parametrize("tenant_id", [None, "", "   ", "\t\n"])
def test_upsert_tenant_requires_tenant_id(admin, store, tenant_id):
    with pytest.raises(ValidationError) as exc:
        admin.upsert_tenant(tenant_id, kill_all=True)
    assert exc.value.message == "tenantId required"
    assert store.list_tenants() == []


def test_upsert_tenant_trims_and_clamps(admin, store):
    admin.upsert_tenant("  acme  ", kill_all=True, default_rate_limit_per_minute=-10,
                        enable_audit=False, enable_pii=True)
    assert store.list_tenants() == [
        TenantView(tenant_id="acme", kill_all=True, default_rate_limit_per_minute=0,
                   enable_audit=False, enable_pii=True)
    ]


def test_upsert_tenant_idempotent(admin, store):
    args = ("acme", True, 25, False, False)
    admin.upsert_tenant(*args)
    first = store.list_tenants()
    admin.upsert_tenant(*args)
    assert store.list_tenants() == first


@pytest.mark.parametrize("tenant_id,endpoint_id", [(None, "e"), ("t", None), (" ", "e"), ("t", "  ")])
def test_upsert_endpoint_rule_requires_ids(admin, store, tenant_id, endpoint_id):
    with pytest.raises(ValidationError) as exc:
        admin.upsert_endpoint_rule(tenant_id, endpoint_id)
    assert exc.value.message == "tenantId and endpointId required"
    assert store.list_endpoint_rules("t") == []


def test_upsert_endpoint_rule_clamps_negative_rate(admin, store):
    admin.upsert_endpoint_rule(tenant_id="t", endpoint_id="e", disabled=False,
                               rate_limit_per_minute=-5, requires_feature=None)
    [rule] = store.list_endpoint_rules("t")
    assert rule.rate_limit_per_minute == 0


def test_upsert_endpoint_rule_normalizes(admin, store):
    admin.upsert_endpoint_rule(" t ", " /orders ", disabled=True, rate_limit_per_minute=9,
                               requires_feature="  beta  ")
    [rule] = store.list_endpoint_rules("t")
    assert (rule.endpoint_id, rule.disabled, rule.rate_limit_per_minute, rule.requires_feature) == \
        ("/orders", True, 9, "beta")


@pytest.mark.parametrize("raw,expected", [(None, None), ("", None), ("   ", None), (" x ", "x")])
def test_normalize_feature(raw, expected):
    assert normalize_feature(raw) == expected


def test_delete_endpoint_rule_idempotent(admin, store):
    admin.upsert_endpoint_rule("t", "keep")
    admin.delete_endpoint_rule("t", "missing")
    admin.delete_endpoint_rule("t", "missing")
    assert [r.endpoint_id for r in store.list_endpoint_rules("t")] == ["keep"]


def test_delete_endpoint_rule_removes(admin):
    admin.upsert_endpoint_rule("t", "e")
    admin.delete_endpoint_rule("t", "e")
    assert admin.list_endpoint_rules("t") == []


def test_delete_endpoint_rule_requires_ids(admin):
    with pytest.raises(ValidationError):
        admin.delete_endpoint_rule("t", " ")


def test_list_endpoint_rules_returns_views(admin):
    admin.upsert_endpoint_rule("t", "b", rate_limit_per_minute=2)
    admin.upsert_endpoint_rule("t", "a", requires_feature="f")
    assert admin.list_endpoint_rules(" t ") == [
        EndpointRuleView(endpoint_id="a", requires_feature="f"),
        EndpointRuleView(endpoint_id="b", rate_limit_per_minute=2),
    ]


def test_list_endpoint_rules_rejects_blank_tenant(admin):
    with pytest.raises(ValidationError):
        admin.list_endpoint_rules("  ")
