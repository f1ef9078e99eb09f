"""Shared pytest fixtures for rawql unit and integration tests."""
from __future__ import annotations

import pytest

from rawql.compile.builder import RawQueryBuilder
from rawql.source.loader import TemplateSource
from tests.fixtures import FIXTURES_DIR

TEMPLATE_PATTERNS = ["sql/**/*.template.sql"]
FRAGMENT_PATTERNS = ["sql/fragments/*.fragment.sql"]


@pytest.fixture(scope="session")
def source() -> TemplateSource:
    """Template source over every sample template and fragment."""
    return TemplateSource(
        {
            "templates": TEMPLATE_PATTERNS,
            "fragments": FRAGMENT_PATTERNS,
            "base_dir": FIXTURES_DIR,
        }
    )


@pytest.fixture()
def builder() -> RawQueryBuilder:
    """Fresh builder with the default ``$k`` marker style."""
    return RawQueryBuilder()
