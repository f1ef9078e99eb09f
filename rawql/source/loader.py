"""Discovers SQL template and fragment files and serves them by logical name.

Files are classified by a marker segment in their name::

    sql/videos/list-videos.template.sql   -> template "list-videos"
    sql/fragments/by-channel.fragment.sql -> fragment "by-channel"

Discovery happens once, when the source is constructed; file contents are
read on first access and cached for the lifetime of the source.
"""
from __future__ import annotations

import glob
import logging
import os
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from rawql.compile.base import ParamStyle
from rawql.compile.builder import RawQueryBuilder
from rawql.errors import SourceNotFoundError
from rawql.source.cache import TextCache
from rawql.source.config import FRAGMENT_MARKER, TEMPLATE_MARKER, TemplateSourceConfig

_log = logging.getLogger(__name__)


class TemplateSource:
    """Read-only catalogue of SQL templates and fragments on disk.

    Args:
        config: Glob patterns to scan, as a :class:`TemplateSourceConfig` or
            a mapping accepted by it.  Defaults to an empty source.
        cache: Cache for file contents.  A fresh :class:`TextCache` is
            created when omitted.

    Raises:
        SourceConfigError: If a pattern lacks its marker segment.  Raised
            before any file is touched.
    """

    def __init__(
        self,
        config: TemplateSourceConfig | Mapping[str, Any] | None = None,
        cache: TextCache | None = None,
    ) -> None:
        if config is None:
            config = TemplateSourceConfig()
        elif not isinstance(config, TemplateSourceConfig):
            config = TemplateSourceConfig.model_validate(config)

        config.check_markers()

        self._config = config
        self._cache = cache if cache is not None else TextCache()
        self._template_paths: dict[str, Path] = {}
        self._fragment_paths: dict[str, Path] = {}

        self._scan()

    # ------------------------------------------------------------------
    # Catalogue
    # ------------------------------------------------------------------

    @property
    def templates_count(self) -> int:
        return len(self._template_paths)

    @property
    def fragments_count(self) -> int:
        return len(self._fragment_paths)

    @property
    def files_count(self) -> int:
        return self.templates_count + self.fragments_count

    def template_names(self) -> list[str]:
        return sorted(self._template_paths)

    def fragment_names(self) -> list[str]:
        return sorted(self._fragment_paths)

    def has_template(self, name: str) -> bool:
        return name in self._template_paths

    def has_fragment(self, name: str) -> bool:
        return name in self._fragment_paths

    # ------------------------------------------------------------------
    # Content
    # ------------------------------------------------------------------

    def get_template(self, name: str) -> str:
        """Return the raw text of template ``name``.

        Raises:
            SourceNotFoundError: If no template file has that logical name.
        """
        return self._read("template", name, self._template_paths)

    def get_fragment(self, name: str) -> str:
        """Return the raw text of fragment ``name``.

        Raises:
            SourceNotFoundError: If no fragment file has that logical name.
        """
        return self._read("fragment", name, self._fragment_paths)

    def builder(
        self,
        template_name: str,
        fragments: Iterable[str] = (),
        fallbacks: Mapping[str, str] | None = None,
        style: ParamStyle | str | None = None,
    ) -> RawQueryBuilder:
        """Return a :class:`RawQueryBuilder` preloaded from this source.

        Args:
            template_name: Logical name of the template to compile.
            fragments: Logical names of fragments to register under the same
                name.
            fallbacks: Maps a fragment name to the logical name of the
                fragment file holding its empty-loop fallback.
            style: Positional marker style for the builder.

        Raises:
            SourceNotFoundError: If any named template or fragment is unknown.
        """
        fallbacks = fallbacks or {}
        query = RawQueryBuilder(style).set_sql(self.get_template(template_name))
        for name in fragments:
            fallback_name = fallbacks.get(name)
            fallback_sql = self.get_fragment(fallback_name) if fallback_name else None
            query.add_fragment(name, self.get_fragment(name), fallback_sql)
        return query

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _read(self, kind: str, name: str, paths: dict[str, Path]) -> str:
        path = paths.get(name)
        if path is None:
            raise SourceNotFoundError(kind, name)
        return self._cache.get_or_load(path, lambda p: p.read_text(encoding="utf-8"))

    def _scan(self) -> None:
        patterns = self._config.resolved_patterns()
        if not patterns:
            return

        files: list[str] = []
        for pattern in patterns:
            files.extend(sorted(glob.glob(pattern, recursive=True)))

        for file in files:
            if not os.path.isfile(file):
                continue
            path = Path(file)
            stem = path.stem

            if FRAGMENT_MARKER in stem:
                self._register(self._fragment_paths, stem.replace(FRAGMENT_MARKER, ""), path)
            else:
                self._register(self._template_paths, stem.replace(TEMPLATE_MARKER, ""), path)

        _log.debug(
            "Discovered %d templates and %d fragments from %d patterns",
            self.templates_count,
            self.fragments_count,
            len(patterns),
        )

    @staticmethod
    def _register(paths: dict[str, Path], name: str, path: Path) -> None:
        previous = paths.get(name)
        if previous is not None and previous != path:
            _log.warning("'%s' is defined by both %s and %s; using the latter", name, previous, path)
        paths[name] = path
