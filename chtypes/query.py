"""A query's SQL text together with its identifier."""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Callable


@dataclass(frozen=True)
class Query:
    """SQL text and an optional query id."""

    sql: str
    id: str = ""

    def with_id(self, id: str) -> Query:
        """Return a copy carrying ``id``."""
        return replace(self, id=str(id))

    def map_sql(self, f: Callable[[str], str]) -> Query:
        """Return a copy whose SQL is ``f`` applied to this one's."""
        return replace(self, sql=f(self.sql))