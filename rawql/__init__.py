"""rawql - raw SQL templates compiled to positional, parameter-bound SQL.

Write the SQL yourself. Let rawql number the placeholders.

Template language
-----------------
``{{ name }}``
    Named parameter, compiled to a positional marker (``$1``, ``$2``, ...).
``{{# name }}``
    Reference to a registered fragment, inlined verbatim.
``{{#or_loop ids}} body {{/or_loop}}``
    One copy of ``body`` per element of ``ids``, joined with ``OR``.  Each
    ``{{ id }}`` inside the body binds the current element; other
    placeholders bind shared parameters.  ``body`` may be ``#fragment``.
    An empty ``ids`` compiles to the fragment's fallback or ``TRUE = TRUE``.

Public API
----------
``RawQueryBuilder``
    Register template, fragments and params, then ``build()``.

``compile_template``
    One-call shortcut around ``RawQueryBuilder``.

``TemplateSource``
    Discovers ``*.template.sql`` / ``*.fragment.sql`` files by glob.

Re-exported types
-----------------
``CompiledSQL``, ``ParamStyle``, ``TemplateSourceConfig`` and all error
classes.

Extensibility
-------------
New marker styles can be registered via::

    from rawql.compile.registry import ParamStyleFactory

    @ParamStyleFactory.register("at_numeric")
    class AtNumericParamStyle(ParamStyle):
        ...

After registration, ``RawQueryBuilder("at_numeric")`` picks it up.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from rawql.compile import (
    CompiledSQL,
    DollarParamStyle,
    FormatParamStyle,
    NumericParamStyle,
    ParamStyle,
    ParamStyleFactory,
    QmarkParamStyle,
    RawQueryBuilder,
)
from rawql.errors import (
    CompilationError,
    FragmentNotFoundError,
    InvalidTemplateError,
    MissingParamError,
    ParamTypeError,
    RawQLError,
    SourceConfigError,
    SourceNotFoundError,
    TemplateError,
)
from rawql.source import TemplateSource, TemplateSourceConfig, TextCache

__all__ = [
    # Core pipeline
    "compile_template",
    "RawQueryBuilder",
    "CompiledSQL",
    # Parameter styles
    "ParamStyle",
    "ParamStyleFactory",
    "DollarParamStyle",
    "FormatParamStyle",
    "NumericParamStyle",
    "QmarkParamStyle",
    # Template source
    "TemplateSource",
    "TemplateSourceConfig",
    "TextCache",
    # Errors
    "RawQLError",
    "TemplateError",
    "InvalidTemplateError",
    "MissingParamError",
    "ParamTypeError",
    "FragmentNotFoundError",
    "SourceNotFoundError",
    "SourceConfigError",
    "CompilationError",
]


def compile_template(
    template: str,
    params: Mapping[str, Any] | None = None,
    fragments: Mapping[str, str | tuple[str, str]] | None = None,
    style: ParamStyle | str | None = None,
) -> CompiledSQL:
    """Compile ``template`` in one call::

        sql, args = rawql.compile_template(
            "SELECT * FROM videos WHERE {{#or_loop ids}} #by_id {{/or_loop}}",
            params={"ids": [1, 2]},
            fragments={"by_id": ("(id = {{ id }})", "FALSE")},
        )
        cursor.execute(sql, args)

    Args:
        template: SQL template text.
        params: Named parameter values.
        fragments: Fragment name to text, or to a ``(text, fallback_text)``
            pair.
        style: Positional marker style; defaults to ``numeric_dollar``.

    Returns:
        ``CompiledSQL`` with positional ``sql`` and ordered ``params``.

    Raises:
        TemplateError: (or subclass) if the template cannot be compiled.
    """
    query = RawQueryBuilder(style).set_sql(template).add_params(params)

    for name, fragment in (fragments or {}).items():
        if isinstance(fragment, tuple):
            query.add_fragment(name, *fragment)
        else:
            query.add_fragment(name, fragment)

    return query.build()
