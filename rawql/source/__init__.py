"""rawql template source: file discovery and cached loading."""
from rawql.source.cache import TextCache
from rawql.source.config import FRAGMENT_MARKER, TEMPLATE_MARKER, TemplateSourceConfig
from rawql.source.loader import TemplateSource

__all__ = [
    "FRAGMENT_MARKER",
    "TEMPLATE_MARKER",
    "TemplateSource",
    "TemplateSourceConfig",
    "TextCache",
]
