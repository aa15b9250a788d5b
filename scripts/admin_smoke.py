#!/usr/bin/env python
"""
One-shot admin API verification script.

Exercises the read-only helpers (plus cache invalidation) against a running
server so connection settings can be checked before a test run.

Usage:
    # Uses ADMIN_API_URL / ADMIN_API_TOKEN (or username/password) from env/.env
    python scripts/admin_smoke.py

    # Also require a license, uploading the fixture license if missing
    python scripts/admin_smoke.py --require-license

    # Require a specific feature
    python scripts/admin_smoke.py --feature LDAP

Expected output:
    - Connection config summary
    - Client license summary
    - A few config values and analytics rows
"""

import argparse
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from adminapi import settings  # noqa: E402
from adminapi.client import AdminApiClient  # noqa: E402
from adminapi.errors import AdminApiClientError  # noqa: E402


def main():
    parser = argparse.ArgumentParser(description="Smoke-test the admin API client against a server")
    parser.add_argument("--require-license", action="store_true", help="Upload the fixture license if missing")
    parser.add_argument("--feature", help="Require a license feature flag, e.g. LDAP")
    parser.add_argument("--invalidate-cache", action="store_true", help="Also invalidate server caches")
    parser.add_argument("--verbose", "-v", action="store_true", help="Log every API call")
    args = parser.parse_args()

    if args.verbose:
        settings.configure_logging()

    token = settings.ADMIN_API_TOKEN
    token_preview = f"{token[:4]}...{token[-4:]}" if len(token) > 8 else "(not set)"

    print("=" * 60)
    print("ADMIN API SMOKE TEST")
    print("=" * 60)
    print("\nEnvironment:")
    print(f"  ADMIN_API_URL: {settings.ADMIN_API_URL}")
    print(f"  ADMIN_API_TOKEN: {token_preview}")
    print(f"  ADMIN_API_USERNAME: {settings.ADMIN_API_USERNAME}")
    print(f"  ADMIN_API_FIXTURES_DIR: {settings.ADMIN_API_FIXTURES_DIR}")

    try:
        with AdminApiClient.from_settings() as client:
            if args.feature:
                license = client.require_license_for_feature(args.feature).license
            elif args.require_license:
                license = client.require_license().license
            else:
                license = client.get_client_license().license

            print("\nLicense:")
            print(f"  Licensed: {license.is_licensed}")
            print(f"  SKU: {license.sku_short_name or '-'}")
            print(f"  Expires: {license.expires_at or '-'}")
            print(f"  Features: {', '.join(license.active_features()) or '-'}")

            config = client.get_config().config
            print("\nConfig:")
            print(f"  ServiceSettings.SiteURL: {config.get('ServiceSettings.SiteURL', '-')}")
            print(f"  TeamSettings.SiteName: {config.get('TeamSettings.SiteName', '-')}")

            analytics = client.get_analytics().analytics
            print(f"\nAnalytics ({len(analytics)} rows):")
            for row in analytics[:10]:
                print(f"  {row.name}: {row.value:g}")

            if args.invalidate_cache:
                status = client.invalidate_cache()
                print(f"\nCache invalidation: {status.status}")
    except AdminApiClientError as e:
        print(f"\nFAILED: {e}")
        return 1

    print("\n" + "=" * 60)
    print("OK")
    return 0


if __name__ == "__main__":
    sys.exit(main())
