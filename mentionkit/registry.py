"""Explicit name-to-factory registry of recognizers."""

from typing import Any, Callable

from mentionkit.pipeline.interfaces import RecognizerInterface

RecognizerFactory = Callable[..., RecognizerInterface]


class RecognizerRegistry:
    """Maps recognizer names to the callables that build them.

    Example:
        ```python
        registry = RecognizerRegistry()
        registry.register("nero", lambda **kw: CommandTaggedRecognizer("nero", ["nero"], **kw))
        nero = registry.create("nero", config=load_config())
        ```
    """

    def __init__(self):
        self._factories: dict[str, RecognizerFactory] = {}

    def register(self, name: str, factory: RecognizerFactory) -> None:
        """Register ``factory`` under ``name``.

        Raises:
            ValueError: If ``name`` is already registered.
        """
        if name in self._factories:
            raise ValueError(f"Recognizer {name!r} is already registered")
        self._factories[name] = factory

    def create(self, name: str, **kwargs: Any) -> RecognizerInterface:
        """Build a new instance of the recognizer registered under ``name``.

        Raises:
            KeyError: If no recognizer is registered under ``name``.
        """
        try:
            factory = self._factories[name]
        except KeyError as e:
            raise KeyError(f"Unknown recognizer {name!r}; known: {', '.join(self.names()) or 'none'}") from e
        return factory(**kwargs)

    def names(self) -> list[str]:
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        return name in self._factories
