"""Pydantic model for TemplateSource configuration.

Template and fragment files are classified by a marker segment embedded in
their file name, and every configured glob pattern must spell that marker
out so a pattern can never silently pick up unrelated ``.sql`` files::

    from rawql.source import TemplateSourceConfig

    config = TemplateSourceConfig(
        templates=["sql/**/*.template.sql"],
        fragments=["sql/fragments/*.fragment.sql"],
        base_dir="app",
    )
"""
from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from rawql.errors import SourceConfigError

#: Marker that must appear in every template file name and pattern.
TEMPLATE_MARKER = ".template"

#: Marker that must appear in every fragment file name and pattern.
FRAGMENT_MARKER = ".fragment"


class TemplateSourceConfig(BaseModel):
    """Where a :class:`~rawql.source.loader.TemplateSource` looks for files.

    Attributes:
        templates: Glob patterns for template files (``**`` recurses).
        fragments: Glob patterns for fragment files.
        base_dir: Directory relative patterns are resolved against.
            Defaults to the current working directory.
    """

    model_config = ConfigDict(extra="forbid")

    templates: list[str] = Field(default_factory=list)
    fragments: list[str] = Field(default_factory=list)
    base_dir: Path | None = None

    def check_markers(self) -> None:
        """Reject patterns that do not contain their marker segment.

        Raises:
            SourceConfigError: On the first offending pattern.
        """
        for pattern in self.templates:
            if TEMPLATE_MARKER + "." not in pattern:
                raise SourceConfigError(
                    f"Incorrect template path: {pattern!r}. A template file name should "
                    f'include "{TEMPLATE_MARKER}" in it, e.g. "my-query.template.sql".',
                    pattern=pattern,
                    marker=TEMPLATE_MARKER,
                )

        for pattern in self.fragments:
            if FRAGMENT_MARKER + "." not in pattern:
                raise SourceConfigError(
                    f"Incorrect fragment path: {pattern!r}. A fragment file name should "
                    f'include "{FRAGMENT_MARKER}" in it, e.g. "my-fragment.fragment.sql".',
                    pattern=pattern,
                    marker=FRAGMENT_MARKER,
                )

    def resolved_patterns(self) -> list[str]:
        """Return all patterns, deduplicated, made absolute against ``base_dir``."""
        patterns: list[str] = []
        for pattern in [*self.templates, *self.fragments]:
            if self.base_dir is not None and not Path(pattern).is_absolute():
                pattern = str(self.base_dir / pattern)
            if pattern not in patterns:
                patterns.append(pattern)
        return patterns
