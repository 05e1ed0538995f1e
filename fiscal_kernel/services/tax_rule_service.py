"""
TaxRuleService -- Database-backed rule store and rule seeding.

Responsibility:
    Implements the ``TaxRuleStore`` protocol on top of the tax_rules table
    for long-lived engines, and writes new rule versions for the seeding
    tooling.

Architecture position:
    Kernel > Services -- imperative shell.
    The country strategies hold a TaxRuleService (as their TaxRuleStore)
    for the lifetime of the process; each read opens its own short-lived
    session from the factory, so concurrent callers never share a Session.

Invariants enforced:
    - Reads delegate to TaxRuleSelector and return TaxRule DTOs.
    - add_rules() flushes within the caller's session and never commits.
    - A repeated (country, category, effective_from) is rejected with
      DuplicateTaxRuleError, unless skip_existing is set.

Failure modes:
    - DuplicateTaxRuleError: rule version already present.
    - SQLAlchemy errors from the database propagate unchanged.
"""

from collections.abc import Iterable
from datetime import date

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, sessionmaker

from fiscal_kernel.domain.values import TaxRule
from fiscal_kernel.exceptions import DuplicateTaxRuleError
from fiscal_kernel.logging_config import get_logger
from fiscal_kernel.models.tax_rule import TaxRuleModel
from fiscal_kernel.selectors.tax_rule_selector import TaxRuleSelector

logger = get_logger("services.tax_rule")


class TaxRuleService:
    """
    Rule store over the database.

    Contract:
        ``find_applicable_rule`` and ``find_applicable_rules`` satisfy the
        TaxRuleStore protocol.  Each call is a single synchronous read.

    Non-goals:
        - No caching: a rule inserted by the seeding tool is visible on the
          next call.
        - No retry or timeout policy; callers own that.
    """

    def __init__(self, session_factory: sessionmaker[Session]):
        self._session_factory = session_factory

    def find_applicable_rule(
        self, country: str, tax_category: str, as_of: date
    ) -> TaxRule | None:
        with self._session_factory() as session:
            rule = TaxRuleSelector(session).find_applicable_rule(
                country, tax_category, as_of
            )
        logger.debug(
            "tax_rule_lookup",
            extra={
                "country_code": country,
                "tax_category": tax_category,
                "as_of": as_of.isoformat(),
                "found": rule is not None,
            },
        )
        return rule

    def find_applicable_rules(
        self, country: str, tax_category: str, as_of: date
    ) -> list[TaxRule]:
        with self._session_factory() as session:
            return TaxRuleSelector(session).find_applicable_rules(
                country, tax_category, as_of
            )

    @staticmethod
    def add_rules(
        session: Session,
        rules: Iterable[TaxRule],
        skip_existing: bool = False,
    ) -> int:
        """
        Insert rule versions in the caller's transaction.

        Args:
            session: Open session; the caller commits.
            rules: Rules to insert.
            skip_existing: If True, versions already present are skipped
                instead of raising.

        Returns:
            Number of rows inserted.

        Raises:
            DuplicateTaxRuleError: If a version exists and skip_existing is False.
        """
        selector = TaxRuleSelector(session)
        inserted = 0
        for rule in rules:
            if selector.exists(rule):
                if skip_existing:
                    logger.info(
                        "tax_rule_seed_skipped",
                        extra={
                            "country_code": rule.country,
                            "tax_category": rule.tax_category,
                            "effective_from": rule.effective_from.isoformat(),
                        },
                    )
                    continue
                raise DuplicateTaxRuleError(
                    rule.country, rule.tax_category, rule.effective_from
                )

            session.add(TaxRuleModel.from_dto(rule))
            try:
                session.flush()
            except IntegrityError as e:
                raise DuplicateTaxRuleError(
                    rule.country, rule.tax_category, rule.effective_from
                ) from e
            inserted += 1

        logger.info("tax_rules_added", extra={"inserted": inserted})
        return inserted
