"""Parameter style registry (Open/Closed Principle).

``ParamStyleFactory``
    Central registry for :class:`~rawql.compile.base.ParamStyle`
    implementations.  Register a style once; builders look it up by name.

Usage::

    from rawql.compile.registry import ParamStyleFactory

    @ParamStyleFactory.register("at_numeric")
    class AtNumericParamStyle(ParamStyle):
        ...
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from rawql.compile.base import ParamStyle
from rawql.errors import CompilationError


class ParamStyleFactory:
    """Registry mapping style names to :class:`ParamStyle` classes.

    Example::

        @ParamStyleFactory.register("at_numeric")
        class AtNumericParamStyle(ParamStyle):
            ...

        style = ParamStyleFactory.create("at_numeric")
    """

    _styles: ClassVar[dict[str, type[ParamStyle]]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[ParamStyle]], type[ParamStyle]]:
        """Decorator that registers a style class under ``name``.

        Args:
            name: The style name (e.g. ``"qmark"``).

        Returns:
            A decorator that registers and returns the style class.
        """

        def decorator(style_cls: type[ParamStyle]) -> type[ParamStyle]:
            cls._styles[name] = style_cls
            return style_cls

        return decorator

    @classmethod
    def register_class(cls, name: str, style_cls: type[ParamStyle]) -> None:
        """Register a style class without using the decorator form."""
        cls._styles[name] = style_cls

    @classmethod
    def create(cls, name: str) -> ParamStyle:
        """Instantiate the style registered for ``name``.

        Raises:
            CompilationError: If no style is registered for ``name``.
        """
        style_cls = cls._styles.get(name)
        if style_cls is None:
            registered = sorted(cls._styles)
            raise CompilationError(
                f"Unsupported parameter style: '{name}'. Registered styles: {registered}."
            )
        return style_cls()

    @classmethod
    def resolve(cls, style: ParamStyle | str | None) -> ParamStyle:
        """Return ``style`` as a :class:`ParamStyle` instance.

        ``None`` selects the default ``numeric_dollar`` style; strings are
        looked up in the registry; instances pass through unchanged.
        """
        if style is None:
            return cls.create("numeric_dollar")
        if isinstance(style, str):
            return cls.create(style)
        return style

    @classmethod
    def registered_styles(cls) -> list[str]:
        """Return the sorted list of registered style names."""
        return sorted(cls._styles)
