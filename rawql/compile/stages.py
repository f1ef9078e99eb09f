"""The three text-rewriting stages of the compilation pipeline.

Each stage takes the shared :class:`~rawql.compile.context.CompilationContext`
and rewrites ``ctx.sql`` in place.  They must run in :data:`PIPELINE` order:

1. :func:`expand_or_loops` - ``{{#or_loop ids}} body {{/or_loop}}`` becomes
   one OR-joined clause per element of ``ids``.  Every ``{{ id }}`` in the
   body is renamed to a per-element parameter, which is registered on the
   context for stage 3.
2. :func:`substitute_fragments` - ``{{# name }}`` becomes the registered
   fragment text.  Placeholders inside the fragment are left for stage 3.
3. :func:`bind_params` - ``{{ name }}`` becomes a positional marker and the
   parameter value is appended to ``ctx.args``.
"""
from __future__ import annotations

import itertools
import logging
import re
from collections.abc import Callable, Mapping, Sequence
from typing import Any

from rawql.compile.context import CompilationContext
from rawql.errors import (
    FragmentNotFoundError,
    InvalidTemplateError,
    MissingParamError,
    ParamTypeError,
)

_log = logging.getLogger(__name__)

VARIABLE_RE = re.compile(r"\{\{\s*([^#{}]+?)\s*\}\}")
FRAGMENT_RE = re.compile(r"\{\{\s*#\s*([^}]*)\}\}")
OR_LOOP_RE = re.compile(
    r"\{\{\s*#or_loop\b([^}]*)\}\}(.*?)\{\{\s*/or_loop\s*\}\}",
    re.DOTALL,
)

#: Placeholder name bound to the current element inside a loop body.
LOOP_ID = "id"

#: Substituted for a loop over an empty array when no fallback is registered.
EMPTY_LOOP_SQL = "TRUE = TRUE"

LOOP_SEPARATOR = " OR "

Stage = Callable[[CompilationContext], None]


def _placeholder(name: str) -> str:
    return "{{ " + name + " }}"


# ---------------------------------------------------------------------------
# Stage 1: loop expansion
# ---------------------------------------------------------------------------


def expand_or_loops(ctx: CompilationContext) -> None:
    """Replace every ``or_loop`` block with its OR-joined expansion."""
    ctx.sql = OR_LOOP_RE.sub(lambda m: _expand_loop(ctx, m), ctx.sql)


def _expand_loop(ctx: CompilationContext, match: re.Match[str]) -> str:
    raw = match.group(0)

    array_name = match.group(1).strip()
    if not array_name:
        raise InvalidTemplateError("Iterator's array name is not valid!", raw)

    body = match.group(2).strip()
    if not body:
        raise InvalidTemplateError("Iterator's body is not valid!", raw)

    fragment_name: str | None = None
    if body.startswith("#"):
        fragment_name = body[1:].strip()
        if not fragment_name:
            raise InvalidTemplateError("Iterator's fragment name is not valid!", raw)

    values = _loop_values(ctx, array_name)

    if len(values) == 0:
        fallback = ctx.get_fallback(fragment_name) if fragment_name else None
        _log.debug(
            "or_loop over empty '%s' reduced to %s",
            array_name,
            "fallback fragment" if fallback else EMPTY_LOOP_SQL,
        )
        return fallback or EMPTY_LOOP_SQL

    body_sql = _require_fragment(ctx, fragment_name) if fragment_name else body

    clauses = [
        _expand_element(ctx, array_name, i, value, body_sql)
        for i, value in enumerate(values)
    ]
    return LOOP_SEPARATOR.join(clauses)


def _loop_values(ctx: CompilationContext, array_name: str) -> Sequence[Any]:
    if not ctx.has_param(array_name):
        raise MissingParamError(array_name)

    values = ctx.get_param(array_name)
    # str and bytes are sequences of characters, not lists of values.
    if isinstance(values, (str, bytes, bytearray, Mapping)) or not isinstance(
        values, Sequence
    ):
        raise ParamTypeError(array_name, values)
    return values


def _expand_element(
    ctx: CompilationContext,
    array_name: str,
    index: int,
    value: Any,
    body_sql: str,
) -> str:
    """Render ``body_sql`` for one element, giving each ``{{ id }}`` its own name."""
    element_key = f"{array_name}-{index}"
    ctx.set_param(element_key, value)
    counter = itertools.count()

    def rename(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if not name:
            raise InvalidTemplateError("Loop param name is not specified!", match.group(0))

        if name != LOOP_ID:
            return _placeholder(name)

        sub_key = f"{element_key}_{next(counter)}"
        ctx.set_param(sub_key, value)
        return _placeholder(sub_key)

    return VARIABLE_RE.sub(rename, body_sql)


# ---------------------------------------------------------------------------
# Stage 2: fragment substitution
# ---------------------------------------------------------------------------


def substitute_fragments(ctx: CompilationContext) -> None:
    """Replace every ``{{# name }}`` with the registered fragment text."""

    def replace(match: re.Match[str]) -> str:
        name = match.group(1).strip()
        if not name:
            raise InvalidTemplateError("Fragment name is not valid!", match.group(0))
        return _require_fragment(ctx, name)

    ctx.sql = FRAGMENT_RE.sub(replace, ctx.sql)


def _require_fragment(ctx: CompilationContext, name: str) -> str:
    fragment_sql = ctx.get_fragment(name)
    if fragment_sql is None:
        raise FragmentNotFoundError(name, ctx.fragment_names())
    return fragment_sql


# ---------------------------------------------------------------------------
# Stage 3: parameter binding
# ---------------------------------------------------------------------------


def bind_params(ctx: CompilationContext) -> None:
    """Replace every ``{{ name }}`` with a positional marker, left to right.

    A parameter that was never added is bound as ``None`` and logged; a
    present value is bound as-is even when it is falsy.  Text between
    markers is passed through the style's ``escape_literal``.
    """
    escape = ctx.style.escape_literal
    parts: list[str] = []
    pos = 0

    for match in VARIABLE_RE.finditer(ctx.sql):
        name = match.group(1).strip()
        if not name:
            raise InvalidTemplateError("Param name is not specified!", match.group(0))

        if not ctx.has_param(name):
            _log.warning("Parameter '%s' was not provided; binding None", name)
        parts.append(escape(ctx.sql[pos:match.start()]))
        parts.append(ctx.bind(ctx.get_param(name)))
        pos = match.end()

    parts.append(escape(ctx.sql[pos:]))
    ctx.sql = "".join(parts)


PIPELINE: tuple[Stage, ...] = (expand_or_loops, substitute_fragments, bind_params)
