"""Helpers for running compiled SQL through SQLAlchemy.

The compiled statement is already positional, so it is handed to the DB-API
driver unchanged via :meth:`sqlalchemy.engine.Connection.exec_driver_sql`.
The builder must therefore emit the marker style the driver understands;
:func:`param_style_for` picks it from the engine's dialect.

Install the optional dependency before using this module::

    pip install "rawql[sqlalchemy]"

Example::

    from sqlalchemy import create_engine
    from rawql import RawQueryBuilder
    from rawql.execute import execute, param_style_for

    engine = create_engine("sqlite:///videos.db")
    compiled = (
        RawQueryBuilder(param_style_for(engine.dialect))
        .set_sql("SELECT * FROM videos WHERE {{#or_loop ids}} id = {{ id }} {{/or_loop}}")
        .add_params({"ids": [1, 2, 3]})
        .build()
    )
    with engine.connect() as conn:
        rows = execute(conn, compiled).fetchall()
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rawql.compile.base import CompiledSQL
from rawql.errors import CompilationError

if TYPE_CHECKING:
    from sqlalchemy.engine import Connection, CursorResult, Dialect

# DB-API paramstyle -> registered rawql style.  Named styles accept
# positional ``:1`` markers as well, so they map to ``numeric``.
_DBAPI_STYLES: dict[str, str] = {
    "qmark": "qmark",
    "numeric": "numeric",
    "named": "numeric",
    "format": "format",
    "pyformat": "format",
    "numeric_dollar": "numeric_dollar",
}


def param_style_for(dialect: Dialect) -> str:
    """Return the rawql style name matching a SQLAlchemy dialect's paramstyle.

    Raises:
        CompilationError: If the dialect uses a paramstyle rawql cannot emit.
    """
    paramstyle = dialect.paramstyle
    style = _DBAPI_STYLES.get(paramstyle)
    if style is None:
        raise CompilationError(
            f"Dialect '{dialect.name}' uses unsupported paramstyle '{paramstyle}'."
        )
    return style


def execute(connection: Connection, compiled: CompiledSQL) -> CursorResult:
    """Execute ``compiled`` on ``connection`` with its positional arguments."""
    return connection.exec_driver_sql(compiled.sql, compiled.as_tuple())
