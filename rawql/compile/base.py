"""Compiler abstractions: CompiledSQL and the ParamStyle ABC.

The Strategy pattern is used:
- ``ParamStyle`` defines how the k-th positional marker is spelled.
- ``DollarParamStyle``, ``QmarkParamStyle`` and friends implement the
  DB-API paramstyles; the binding stage never needs to know which one is in
  use.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CompiledSQL:
    """The output of a successful compilation.

    Unpacks as a ``(sql, params)`` pair so callers can write::

        sql, args = builder.build()

    Attributes:
        sql: The compiled SQL string with positional markers.
        params: Values for the markers, in marker order.  ``params[k - 1]``
            is bound to the k-th marker.
        style: Name of the parameter style used for the markers.
    """

    sql: str
    params: list[Any] = field(default_factory=list)
    style: str = "numeric_dollar"

    def __iter__(self) -> Iterator[Any]:
        yield self.sql
        yield self.params

    def as_tuple(self) -> tuple[Any, ...]:
        """Return the params as a tuple, the shape most DB-API drivers expect."""
        return tuple(self.params)


class ParamStyle(ABC):
    """Abstract base for positional parameter marker styles."""

    @abstractmethod
    def marker(self, index: int) -> str:
        """Return the SQL marker for the parameter at ``index``.

        Args:
            index: 1-based position of the parameter in the argument list.

        Returns:
            Style-specific marker string.
        """

    def escape_literal(self, sql: str) -> str:
        """Escape template text between markers for the driver.

        Args:
            sql: SQL text containing no markers.

        Returns:
            ``sql`` unchanged; styles whose drivers interpolate the whole
            statement override this.
        """
        return sql

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the canonical style name (e.g. ``'numeric_dollar'``)."""
