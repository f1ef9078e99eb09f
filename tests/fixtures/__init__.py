"""Test fixtures: sample SQL template/fragment files and DDL."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

FIXTURES_DIR = Path(__file__).parent


def load_ddl(target: Literal["sqlite", "postgres"] = "sqlite") -> list[str]:
    """Return the sample DDL for ``target`` split into single statements.

    Args:
        target: ``'sqlite'`` (default) or ``'postgres'``.

    Returns:
        Statements in file order, ready to execute one at a time.
    """
    ddl = (FIXTURES_DIR / f"ddl_{target}.sql").read_text()
    return [stmt.strip() for stmt in ddl.split(";") if stmt.strip()]
