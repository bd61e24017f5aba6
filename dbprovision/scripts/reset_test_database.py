#!/usr/bin/env python3
"""
Reset the test database - USE WITH CAUTION!

Drops and recreates the configured test database (or drops every object in
it when the platform cannot create databases), exactly as the test suite
does on its first connection.
"""

import argparse
import sys
from pathlib import Path

from dotenv import load_dotenv

from dbprovision.core.config import Settings, TestDatabaseConfig
from dbprovision.core.logging import setup_logging
from dbprovision.testing.coordinator import TestDatabaseCoordinator


def reset_test_database(env_file: Path | None = None) -> bool:
    """Run the destructive reset. Returns True on success."""
    if env_file is not None:
        load_dotenv(env_file)

    settings = Settings()
    setup_logging(settings.DB_LOG_LEVEL)
    config = TestDatabaseConfig.from_environment(settings=settings)

    if not config.has_required_connection_params:
        print("ℹ️  No db_driver configured; the fallback SQLite database needs no reset.")
        return True

    coordinator = TestDatabaseCoordinator(config)
    params = config.main_connection_params()
    print("🔄 Resetting test database...")
    print(f"   Driver: {params.get('driver')}")
    print(f"   Database: {params.get('dbname', '(none)')}")

    try:
        coordinator.get_connection_params()
    except Exception as e:
        print(f"\n❌ Failed to reset test database: {e}")
        return False

    print("\n✅ Test database reset successfully!")
    return True


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.strip().splitlines()[0])
    parser.add_argument("--env-file", type=Path, default=Path(".env.test"))
    parser.add_argument("--yes", action="store_true", help="Skip the confirmation prompt")
    args = parser.parse_args(argv)

    if not args.yes:
        response = input(
            "⚠️  WARNING: This will DROP the test database. Are you sure? (type 'yes' to confirm): "
        )
        if response.lower() != "yes":
            print("Aborted.")
            return 1

    env_file = args.env_file if args.env_file.exists() else None
    return 0 if reset_test_database(env_file) else 1


if __name__ == "__main__":
    sys.exit(main())
