#!/usr/bin/env python3
"""
Seed the tax_rules table from a YAML rule set.

Loads the rule set (bundled sets/tax_rules.yaml by default), optionally
creates the tables, and inserts every rule version that is not already
present.  Re-running is safe: existing versions are skipped.

Usage:
    python3 scripts/seed_tax_rules.py --database-url postgresql://... --create-tables
    FISCAL_DATABASE_URL=sqlite:///rules.db python3 scripts/seed_tax_rules.py
"""

import argparse
import sys
from pathlib import Path

# ---------------------------------------------------------------------------
# Project root on sys.path
# ---------------------------------------------------------------------------
ROOT = Path(__file__).resolve().parent.parent
sys.path.insert(0, str(ROOT))

from fiscal_config import get_settings, load_rule_set  # noqa: E402
from fiscal_kernel.db.engine import (  # noqa: E402
    create_tables,
    init_engine_from_url,
    session_scope,
)
from fiscal_kernel.logging_config import configure_logging, get_logger  # noqa: E402
from fiscal_kernel.services.tax_rule_service import TaxRuleService  # noqa: E402

logger = get_logger("scripts.seed_tax_rules")


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Seed versioned tax rules.")
    parser.add_argument(
        "--database-url",
        default=settings.database_url,
        help="Target database (default: $FISCAL_DATABASE_URL)",
    )
    parser.add_argument(
        "--rules",
        type=Path,
        default=settings.tax_rules_path,
        help="YAML rule set (default: bundled sets/tax_rules.yaml)",
    )
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Log level (default: $FISCAL_LOG_LEVEL or INFO)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(level=args.log_level.upper())

    if not args.database_url:
        print("error: no database URL (use --database-url or FISCAL_DATABASE_URL)",
              file=sys.stderr)
        return 2

    rule_set = load_rule_set(args.rules)
    init_engine_from_url(args.database_url)
    if args.create_tables:
        create_tables()

    with session_scope() as session:
        inserted = TaxRuleService.add_rules(session, rule_set.rules, skip_existing=True)

    logger.info("seed_completed", extra={
        "rule_set_version": rule_set.version,
        "checksum": rule_set.checksum,
        "inserted": inserted,
        "skipped": len(rule_set.rules) - inserted,
    })
    print(f"Seeded {inserted} of {len(rule_set.rules)} rules "
          f"(rule set {rule_set.version})")
    return 0


if __name__ == "__main__":
    sys.exit(main())
