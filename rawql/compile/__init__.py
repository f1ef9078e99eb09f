"""rawql compilation layer: SQL template → positional SQL."""
from rawql.compile.base import CompiledSQL, ParamStyle
from rawql.compile.builder import RawQueryBuilder
from rawql.compile.registry import ParamStyleFactory
from rawql.compile.styles import (
    DollarParamStyle,
    FormatParamStyle,
    NumericParamStyle,
    QmarkParamStyle,
)

ParamStyleFactory.register_class("numeric_dollar", DollarParamStyle)
ParamStyleFactory.register_class("qmark", QmarkParamStyle)
ParamStyleFactory.register_class("numeric", NumericParamStyle)
ParamStyleFactory.register_class("format", FormatParamStyle)

__all__ = [
    "CompiledSQL",
    "ParamStyle",
    "ParamStyleFactory",
    "DollarParamStyle",
    "FormatParamStyle",
    "NumericParamStyle",
    "QmarkParamStyle",
    "RawQueryBuilder",
]
