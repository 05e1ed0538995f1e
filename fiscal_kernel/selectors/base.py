"""
Module: fiscal_kernel.selectors.base
Responsibility: Common base for read-only query objects.
Architecture position: Kernel > Selectors.  May import from db/ and
    models/.  MUST NOT import from services/ or outer layers.

Invariants enforced:
    - Selectors never add, delete, flush or commit; the caller owns the
      session and its transaction.
    - Selectors return frozen domain values, never ORM rows.
"""

from typing import Generic, TypeVar

from sqlalchemy.orm import Session

from fiscal_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(Generic[ModelType]):
    """Wraps the caller's session for one model's queries."""

    def __init__(self, session: Session):
        self.session = session
