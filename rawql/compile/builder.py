"""Template → positional SQL compilation.

``RawQueryBuilder`` collects the template text, fragments and parameters for
one statement, then drives the stage pipeline defined in
:mod:`rawql.compile.stages`.  Marker spelling is delegated to the injected
:class:`~rawql.compile.base.ParamStyle`.

Example::

    sql, args = (
        RawQueryBuilder()
        .set_sql("SELECT id FROM videos WHERE {{#or_loop ids}} #by_id {{/or_loop}}")
        .add_fragment("by_id", "(id = {{ id }} AND alias = {{ alias }})")
        .add_params({"ids": [1, 2], "alias": "a"})
        .build()
    )
    # sql  == "SELECT id FROM videos WHERE (id = $1 AND alias = $2) OR (id = $3 AND alias = $4)"
    # args == [1, "a", 2, "a"]

Runtime context sharing
-----------------------
A single :class:`~rawql.compile.context.CompilationContext` is created per
``build()`` call and threaded through every stage.  The loop stage writes
synthetic parameters into it and the binding stage reads them back, so a
builder should be treated as single-use.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from rawql.compile.base import CompiledSQL, ParamStyle
from rawql.compile.context import CompilationContext, FragmentKey
from rawql.compile.registry import ParamStyleFactory
from rawql.compile.stages import PIPELINE

_log = logging.getLogger(__name__)


class RawQueryBuilder:
    """Compiles a SQL template with fragments and loops to positional SQL.

    Args:
        style: Positional marker style, as a :class:`ParamStyle` or a
            registered style name.  Defaults to ``numeric_dollar`` (``$1``).
    """

    def __init__(self, style: ParamStyle | str | None = None) -> None:
        self._style = ParamStyleFactory.resolve(style)
        self._sql = ""
        self._fragments: dict[FragmentKey, str] = {}
        self._params: dict[str, Any] = {}

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    def set_sql(self, sql: str) -> RawQueryBuilder:
        """Set the template text (surrounding whitespace is stripped)."""
        self._sql = sql.strip()
        return self

    def add_fragment(
        self,
        name: str,
        sql: str,
        fallback_sql: str | None = None,
    ) -> RawQueryBuilder:
        """Register a named fragment, replacing any earlier one of that name.

        Args:
            name: Name used in ``{{# name }}`` references and loop bodies.
            sql: Fragment text.
            fallback_sql: Text substituted for an ``or_loop`` over an empty
                array whose body is ``#name``.  Blank text registers no
                fallback.
        """
        name = name.strip()
        self._fragments[FragmentKey(name)] = sql.strip()

        fallback_sql = (fallback_sql or "").strip()
        if fallback_sql:
            self._fragments[FragmentKey(name, fallback=True)] = fallback_sql

        return self

    def add_params(self, params: Mapping[str, Any] | None = None) -> RawQueryBuilder:
        """Merge ``params`` into the parameter set; later values win."""
        self._params.update(params or {})
        return self

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    @property
    def style(self) -> ParamStyle:
        return self._style

    def get_param_value(self, name: str) -> Any:
        return self._params.get(name)

    def get_fragment_sql(self, name: str) -> str | None:
        return self._fragments.get(FragmentKey(name))

    def get_fallback_fragment_sql(self, name: str) -> str | None:
        return self._fragments.get(FragmentKey(name, fallback=True))

    # ------------------------------------------------------------------
    # Compilation
    # ------------------------------------------------------------------

    def build(self) -> CompiledSQL:
        """Run the stage pipeline over the template.

        Returns:
            :class:`~rawql.compile.base.CompiledSQL` with positional ``sql``
            and ``params`` in marker order.

        Raises:
            InvalidTemplateError: If a name, loop array, or loop body is empty.
            MissingParamError: If an ``or_loop`` array parameter is absent.
            ParamTypeError: If an ``or_loop`` array parameter is not a sequence.
            FragmentNotFoundError: If a referenced fragment is not registered.
        """
        ctx = CompilationContext(
            sql=self._sql,
            fragments=self._fragments,
            params=self._params,
            style=self._style,
        )
        for stage in PIPELINE:
            stage(ctx)
            _log.debug("Stage %s done", stage.__name__)

        return CompiledSQL(sql=ctx.sql, params=ctx.args, style=self._style.name)
