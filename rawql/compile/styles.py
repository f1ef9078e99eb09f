"""Built-in DB-API parameter styles."""

from __future__ import annotations

from rawql.compile.base import ParamStyle


class DollarParamStyle(ParamStyle):
    """``$1, $2, ...`` - native PostgreSQL markers used by asyncpg."""

    @property
    def name(self) -> str:
        return "numeric_dollar"

    def marker(self, index: int) -> str:
        return f"${index}"


class QmarkParamStyle(ParamStyle):
    """``?`` - sqlite3 and pyodbc.

    The marker carries no index; order alone determines binding.
    """

    @property
    def name(self) -> str:
        return "qmark"

    def marker(self, index: int) -> str:
        return "?"


class NumericParamStyle(ParamStyle):
    """``:1, :2, ...`` - oracledb."""

    @property
    def name(self) -> str:
        return "numeric"

    def marker(self, index: int) -> str:
        return f":{index}"


class FormatParamStyle(ParamStyle):
    """``%s`` - psycopg and pymysql positional execution.

    These drivers %-interpolate the whole statement, so literal ``%`` in the
    template (``LIKE 'a%'``, modulo) is doubled.
    """

    @property
    def name(self) -> str:
        return "format"

    def marker(self, index: int) -> str:
        return "%s"

    def escape_literal(self, sql: str) -> str:
        return sql.replace("%", "%%")
