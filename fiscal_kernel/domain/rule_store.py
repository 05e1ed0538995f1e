"""
Rule store -- Contract for date-effective tax rule lookup.

Responsibility:
    Declares the two reads the tax engine performs against its rule store
    and provides an in-memory implementation used by the default engine and
    the test suite.  The database-backed implementation lives in
    ``fiscal_kernel.services.tax_rule_service``.

Architecture position:
    Kernel > Domain -- zero I/O.  Strategies depend on the ``TaxRuleStore``
    protocol only, never on a concrete store.

Invariants enforced:
    - The rule in force on a date is the one with the greatest
      ``effective_from`` that is not after that date.
    - History queries return every rule already in force on the date,
      newest first.
    - The in-memory index is built once and never mutated.
"""

from __future__ import annotations

import bisect
from collections import defaultdict
from collections.abc import Iterable
from datetime import date
from types import MappingProxyType
from typing import Protocol, runtime_checkable

from fiscal_kernel.domain.values import TaxRule
from fiscal_kernel.exceptions import DuplicateTaxRuleError


@runtime_checkable
class TaxRuleStore(Protocol):
    """Read-only source of versioned tax rules."""

    def find_applicable_rule(
        self, country: str, tax_category: str, as_of: date
    ) -> TaxRule | None:
        """Return the single rule in force on ``as_of``, or None."""
        ...

    def find_applicable_rules(
        self, country: str, tax_category: str, as_of: date
    ) -> list[TaxRule]:
        """Return all rules already in force on ``as_of``, newest first."""
        ...


class InMemoryTaxRuleStore:
    """
    TaxRuleStore backed by a sorted in-memory index.

    Contract:
        Rules are grouped by (country, category) and sorted by
        ``effective_from``.  Lookups bisect on the date.

    Guarantees:
        - Safe for concurrent reads (the index is immutable).
        - Raises DuplicateTaxRuleError at construction when two rules share
          (country, category, effective_from).
    """

    def __init__(self, rules: Iterable[TaxRule] = ()):
        grouped: dict[tuple[str, str], list[TaxRule]] = defaultdict(list)
        for rule in rules:
            grouped[(rule.country, rule.tax_category)].append(rule)

        index: dict[tuple[str, str], tuple[tuple[date, ...], tuple[TaxRule, ...]]] = {}
        for key, versions in grouped.items():
            versions.sort(key=lambda r: r.effective_from)
            dates = tuple(r.effective_from for r in versions)
            for previous, current in zip(dates, dates[1:]):
                if previous == current:
                    raise DuplicateTaxRuleError(key[0], key[1], current)
            index[key] = (dates, tuple(versions))

        self._index = MappingProxyType(index)

    def _versions_in_force(
        self, country: str, tax_category: str, as_of: date
    ) -> tuple[TaxRule, ...]:
        entry = self._index.get((country.strip().upper(), tax_category))
        if entry is None:
            return ()
        dates, versions = entry
        return versions[: bisect.bisect_right(dates, as_of)]

    def find_applicable_rule(
        self, country: str, tax_category: str, as_of: date
    ) -> TaxRule | None:
        in_force = self._versions_in_force(country, tax_category, as_of)
        return in_force[-1] if in_force else None

    def find_applicable_rules(
        self, country: str, tax_category: str, as_of: date
    ) -> list[TaxRule]:
        return list(reversed(self._versions_in_force(country, tax_category, as_of)))

    @property
    def rule_count(self) -> int:
        return sum(len(versions) for _, versions in self._index.values())
