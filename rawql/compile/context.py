"""Compilation context passed through the pipeline stages.

A single :class:`CompilationContext` is created per ``build()`` call and
handed to every stage in order.  Stages rewrite ``sql`` in place; the loop
stage also registers synthetic parameters that the binding stage reads
later, so the stages cannot be reordered or run independently.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, NamedTuple

from rawql.compile.base import ParamStyle


class FragmentKey(NamedTuple):
    """Typed key for the fragment map.

    A fallback is stored under ``FragmentKey(name, fallback=True)``, so a
    fragment literally named ``"x_fallback"`` is unrelated to the fallback
    of ``"x"``.
    """

    name: str
    fallback: bool = False


@dataclass
class CompilationContext:
    """Mutable state for a single compilation run.

    Attributes:
        sql: Template text, rewritten by each stage in turn.
        fragments: Registered fragment texts keyed by :class:`FragmentKey`.
        params: Named parameter values; the loop stage adds to it.
        style: Positional marker style used by the binding stage.
        args: Positional argument list filled by the binding stage.
    """

    sql: str
    fragments: dict[FragmentKey, str]
    params: dict[str, Any]
    style: ParamStyle
    args: list[Any] = field(default_factory=list)

    def has_param(self, name: str) -> bool:
        return name in self.params

    def get_param(self, name: str, default: Any = None) -> Any:
        return self.params.get(name, default)

    def set_param(self, name: str, value: Any) -> None:
        self.params[name] = value

    def get_fragment(self, name: str) -> str | None:
        return self.fragments.get(FragmentKey(name))

    def get_fallback(self, name: str) -> str | None:
        return self.fragments.get(FragmentKey(name, fallback=True))

    def fragment_names(self) -> list[str]:
        """Return the sorted names of all registered primary fragments."""
        return sorted(key.name for key in self.fragments if not key.fallback)

    def bind(self, value: Any) -> str:
        """Append ``value`` to ``args`` and return its positional marker."""
        self.args.append(value)
        return self.style.marker(len(self.args))
