#!/usr/bin/env python3
"""
Seed script to create or reset the default tenant
"""
import os

from policy_server.config import load_settings
from policy_server.db import Database
from policy_server.services.admin import AdminService
from policy_server.services.store import PolicyStore

if __name__ == "__main__":
    # Allow disabling seeding entirely (prod)
    if os.getenv("SEED_DEFAULT_TENANT", "1") in ("0", "false", "False"):
        print("Seeding disabled via SEED_DEFAULT_TENANT=0")
        raise SystemExit(0)

    settings = load_settings()
    database = Database(settings.database_url)
    try:
        database.init_schema()
        store = PolicyStore(database)
        if store.get_tenant("default") is not None and os.getenv("SEED_RESET", "0") not in ("1", "true", "True"):
            print("Default tenant exists (set SEED_RESET=1 to reset it)")
            raise SystemExit(0)

        AdminService(store).upsert_tenant(
            "default",
            kill_all=False,
            default_rate_limit_per_minute=int(os.getenv("SEED_DEFAULT_RATE_LIMIT", "0")),
            enable_audit=True,
            enable_pii=True,
        )
        print("Default tenant written")
    finally:
        database.dispose()
