"""Unit tests for TemplateSource file discovery and loading."""

from __future__ import annotations

import logging

import pytest

from rawql.errors import SourceConfigError, SourceNotFoundError
from rawql.source.cache import TextCache
from rawql.source.config import TemplateSourceConfig
from rawql.source.loader import TemplateSource
from tests.fixtures import FIXTURES_DIR

SIMPLE_QUERY = "SELECT * FROM videos WHERE id = {{ id }} AND alias = {{ alias }};"


def _source(templates=(), fragments=(), **kwargs) -> TemplateSource:
    config = TemplateSourceConfig(
        templates=list(templates), fragments=list(fragments), base_dir=FIXTURES_DIR
    )
    return TemplateSource(config, **kwargs)


def test_empty_config_finds_nothing():
    source = TemplateSource()
    assert source.files_count == 0
    assert source.templates_count == 0
    assert source.fragments_count == 0


def test_detects_templates_in_folder_and_subfolders():
    source = _source(templates=["sql/**/*.template.sql"])
    assert source.template_names() == ["channel-videos", "conditional-query", "simple-query"]
    assert source.fragments_count == 0


def test_detects_templates_in_listed_folders():
    source = _source(
        templates=["sql/simple/*.template.sql", "sql/conditional/*.template.sql"]
    )
    assert source.templates_count == 2
    assert source.has_template("simple-query")
    assert source.has_template("conditional-query")
    assert not source.has_template("channel-videos")


def test_detects_fragments():
    source = _source(fragments=["sql/fragments/*.fragment.sql"])
    assert source.fragment_names() == ["any-channel", "by-channel", "condition_fragment"]
    assert source.templates_count == 0


def test_loads_template_text():
    source = _source(templates=["sql/simple/*.template.sql"])
    assert source.get_template("simple-query") == SIMPLE_QUERY


def test_loads_fragment_text(source):
    assert source.get_fragment("by-channel") == "(channel_id = {{ id }})\n"


def test_unknown_names_raise(source):
    assert not source.has_template("nope")
    with pytest.raises(SourceNotFoundError) as exc_info:
        source.get_template("nope")
    assert exc_info.value.name == "nope"
    assert exc_info.value.kind == "template"

    with pytest.raises(SourceNotFoundError, match='Fragment "simple-query" not found'):
        source.get_fragment("simple-query")


def test_template_pattern_requires_marker():
    with pytest.raises(SourceConfigError) as exc_info:
        TemplateSource({"templates": ["sql/**/*.sql"]})
    assert exc_info.value.pattern == "sql/**/*.sql"
    assert exc_info.value.marker == ".template"


def test_fragment_pattern_requires_marker():
    with pytest.raises(SourceConfigError, match="Incorrect fragment path"):
        TemplateSource({"fragments": ["sql/fragments/*.sql"]})


def test_config_rejects_unknown_keys():
    with pytest.raises(ValueError):
        TemplateSourceConfig.model_validate({"templatez": ["a.template.sql"]})


def test_content_is_cached(tmp_path):
    path = tmp_path / "q.template.sql"
    path.write_text("SELECT 1")
    cache = TextCache()
    source = TemplateSource({"templates": ["*.template.sql"], "base_dir": tmp_path}, cache=cache)

    assert len(cache) == 0
    assert source.get_template("q") == "SELECT 1"
    assert path in cache

    path.write_text("SELECT 2")
    assert source.get_template("q") == "SELECT 1"
    assert len(cache) == 1


def test_shared_cache_keeps_same_named_files_apart(tmp_path):
    (tmp_path / "a").mkdir()
    (tmp_path / "b").mkdir()
    (tmp_path / "a" / "q.template.sql").write_text("SELECT 'a'")
    (tmp_path / "b" / "q.template.sql").write_text("SELECT 'b'")
    cache = TextCache()
    first = TemplateSource(
        {"templates": ["*.template.sql"], "base_dir": tmp_path / "a"}, cache=cache
    )
    second = TemplateSource(
        {"templates": ["*.template.sql"], "base_dir": tmp_path / "b"}, cache=cache
    )

    assert first.get_template("q") == "SELECT 'a'"
    assert second.get_template("q") == "SELECT 'b'"
    assert len(cache) == 2


def test_directories_matching_pattern_are_skipped(tmp_path):
    (tmp_path / "odd.template.sql").mkdir()
    (tmp_path / "real.template.sql").write_text("SELECT 1")
    source = TemplateSource({"templates": ["*.template.sql"], "base_dir": tmp_path})
    assert source.template_names() == ["real"]


def test_duplicate_names_warn_and_last_wins(tmp_path, caplog):
    for folder, sql in (("a", "SELECT 'a'"), ("b", "SELECT 'b'")):
        (tmp_path / folder).mkdir()
        (tmp_path / folder / "q.template.sql").write_text(sql)

    with caplog.at_level(logging.WARNING, logger="rawql"):
        source = TemplateSource({"templates": ["**/*.template.sql"], "base_dir": tmp_path})

    assert source.templates_count == 1
    assert source.get_template("q") == "SELECT 'b'"
    assert "'q' is defined by both" in caplog.text


def test_builder_from_source(source):
    compiled = source.builder(
        "conditional-query", fragments=["condition_fragment"]
    ).add_params({"ids": [1, 2], "alias": "a"}).build()
    assert compiled.sql == (
        "SELECT id\nFROM videos\nWHERE (id = $1 AND alias = $2) OR (id = $3 AND alias = $4);"
    )
    assert compiled.params == [1, "a", 2, "a"]


def test_builder_from_source_with_fallback(source):
    query = source.builder(
        "channel-videos",
        fragments=["by-channel"],
        fallbacks={"by-channel": "any-channel"},
        style="qmark",
    )
    compiled = query.add_params({"channel_ids": []}).build()
    assert compiled.sql == "SELECT id, title\nFROM videos\nWHERE channel_id IS NOT NULL\nORDER BY id"
    assert compiled.params == []


def test_builder_from_source_unknown_fragment(source):
    with pytest.raises(SourceNotFoundError):
        source.builder("channel-videos", fragments=["missing"])
