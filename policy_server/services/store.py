"""
Data access for tenants and endpoint rules.

Every write is a single-row statement (or a single transaction touching one
table) so concurrent writers converge to last-writer-wins at row level.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.dialects import postgresql, sqlite

from ..db import Database
from ..models import EndpointRule, Tenant
from ..schemas import EndpointRuleRecord, TenantView

logger = logging.getLogger(__name__)

_DIALECT_INSERTS = {
    "sqlite": sqlite.insert,
    "postgresql": postgresql.insert,
}


def _tenant_view(row: Tenant) -> TenantView:
    return TenantView(
        tenant_id=row.tenant_id,
        kill_all=bool(row.kill_all),
        default_rate_limit_per_minute=row.default_rate_limit,
        enable_audit=bool(row.enable_audit),
        enable_pii=bool(row.enable_pii),
    )


def _rule_record(row: EndpointRule) -> EndpointRuleRecord:
    return EndpointRuleRecord(
        tenant_id=row.tenant_id,
        endpoint_id=row.endpoint_id,
        disabled=bool(row.disabled),
        rate_limit_per_minute=row.rate_limit,
        requires_feature=row.requires_feature,
    )


class PolicyStore:
    """Tenant and endpoint-rule persistence over a SQLAlchemy ``Database``"""

    def __init__(self, database: Database):
        try:
            self._insert = _DIALECT_INSERTS[database.dialect]
        except KeyError:
            raise RuntimeError(f"Unsupported database dialect for policy store: {database.dialect}")
        self.database = database

    # ----- tenants -----

    def get_tenant(self, tenant_id: str) -> Optional[TenantView]:
        with self.database.SessionLocal() as session:
            row = session.get(Tenant, tenant_id)
            return _tenant_view(row) if row is not None else None

    def list_tenants(self) -> List[TenantView]:
        with self.database.SessionLocal() as session:
            rows = session.scalars(select(Tenant).order_by(Tenant.tenant_id)).all()
            return [_tenant_view(r) for r in rows]

    def upsert_tenant(self, tenant: TenantView) -> None:
        """Full-row replace keyed by tenant id"""
        values = {
            "tenant_id": tenant.tenant_id,
            "kill_all": tenant.kill_all,
            "default_rate_limit": tenant.default_rate_limit_per_minute,
            "enable_audit": tenant.enable_audit,
            "enable_pii": tenant.enable_pii,
        }
        stmt = self._insert(Tenant).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[Tenant.tenant_id],
            set_={k: stmt.excluded[k] for k in values if k != "tenant_id"},
        )
        with self.database.SessionLocal.begin() as session:
            session.execute(stmt)

    def ensure_tenant_exists(self, tenant_id: str) -> bool:
        """Insert a default-valued tenant row if absent. Returns True if created."""
        defaults = TenantView(tenant_id=tenant_id)
        stmt = self._insert(Tenant).values(
            tenant_id=tenant_id,
            kill_all=defaults.kill_all,
            default_rate_limit=defaults.default_rate_limit_per_minute,
            enable_audit=defaults.enable_audit,
            enable_pii=defaults.enable_pii,
        ).on_conflict_do_nothing(index_elements=[Tenant.tenant_id])
        with self.database.SessionLocal.begin() as session:
            result = session.execute(stmt)
            return result.rowcount == 1

    # ----- endpoint rules -----

    def list_endpoint_rules(self, tenant_id: str) -> List[EndpointRuleRecord]:
        with self.database.SessionLocal() as session:
            rows = session.scalars(
                select(EndpointRule)
                .where(EndpointRule.tenant_id == tenant_id)
                .order_by(EndpointRule.endpoint_id)
            ).all()
            return [_rule_record(r) for r in rows]

    def upsert_endpoint_rule(self, rule: EndpointRuleRecord) -> None:
        """Replace the rule for (tenant, endpoint), endpoint compared without case.

        A stored rule whose id differs only by case is replaced, and the new
        spelling is kept.
        """
        values = {
            "tenant_id": rule.tenant_id,
            "endpoint_id": rule.endpoint_id,
            "disabled": rule.disabled,
            "rate_limit": rule.rate_limit_per_minute,
            "requires_feature": rule.requires_feature,
        }
        stmt = self._insert(EndpointRule).values(**values)
        stmt = stmt.on_conflict_do_update(
            index_elements=[EndpointRule.tenant_id, EndpointRule.endpoint_id],
            set_={k: stmt.excluded[k] for k in ("disabled", "rate_limit", "requires_feature")},
        )
        with self.database.SessionLocal.begin() as session:
            replaced = session.execute(
                delete(EndpointRule).where(
                    EndpointRule.tenant_id == rule.tenant_id,
                    func.lower(EndpointRule.endpoint_id) == func.lower(rule.endpoint_id),
                    EndpointRule.endpoint_id != rule.endpoint_id,
                ).execution_options(synchronize_session=False)
            ).rowcount
            session.execute(stmt)
        if replaced:
            logger.info(
                "endpoint rule %s/%s replaced %d case variant(s)",
                rule.tenant_id, rule.endpoint_id, replaced,
                extra={"tenant_id": rule.tenant_id, "component": "store"},
            )

    def delete_endpoint_rule(self, tenant_id: str, endpoint_id: str) -> int:
        """Delete the rule ignoring endpoint case. Returns rows removed (0 is fine)."""
        with self.database.SessionLocal.begin() as session:
            result = session.execute(
                delete(EndpointRule).where(
                    EndpointRule.tenant_id == tenant_id,
                    func.lower(EndpointRule.endpoint_id) == func.lower(endpoint_id),
                ).execution_options(synchronize_session=False)
            )
            return result.rowcount
