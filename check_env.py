#!/usr/bin/env python3
"""Helper script to check (and template) the .env configuration."""

import sys
from pathlib import Path

TEMPLATE = """# Token signing (Required outside development; at least 32 characters)
CID_JWT_SECRET=replace-with-a-long-random-secret-value
CID_JWT_EXPIRATION_SECONDS=3600

# Supabase storage (Optional - customers are kept in memory when unset)
# Apply sql/schema.sql to the project before enabling.
CID_SUPABASE_URL=
CID_SUPABASE_KEY=

# Order service enrichment (Optional - orders are empty when unset)
CID_ORDER_SERVICE_URL=
CID_ORDER_SERVICE_TIMEOUT_SECONDS=2.0

# API Configuration
CID_API_PREFIX=/api
"""


def _mask(value: str) -> str:
    return value[:6] + "..." + value[-4:] if len(value) > 12 else "***"


def main() -> int:
    project_root = Path(__file__).parent
    env_file = project_root / ".env"

    if not env_file.exists():
        env_file.write_text(TEMPLATE, encoding="utf-8")
        print(f"Created template .env file at: {env_file}")
        print("Edit it and run this script again.")
        return 1

    sys.path.insert(0, str(project_root / "src"))
    try:
        from customer_identity.config import DEFAULT_JWT_SECRET, Settings

        settings = Settings()
    except Exception as e:
        print(f"Error loading config: {e}")
        return 1

    ok = True
    if settings.jwt_secret == DEFAULT_JWT_SECRET:
        print("CID_JWT_SECRET: not set (development secret in use)")
        ok = False
    else:
        print(f"CID_JWT_SECRET: {_mask(settings.jwt_secret)}")

    if settings.supabase_configured:
        print(f"Storage: Supabase at {settings.supabase_url}")
    else:
        print("Storage: in memory (CID_SUPABASE_URL / CID_SUPABASE_KEY not set)")

    if settings.order_service_url:
        print(f"Order service: {settings.order_service_url} (timeout {settings.order_service_timeout_seconds}s)")
    else:
        print("Order service: not configured")

    return 0 if ok else 1


if __name__ == "__main__":
    sys.exit(main())
