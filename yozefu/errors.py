"""Exceptions raised by the library."""


class YozefuError(Exception):
    """Base class of every error raised by the library."""

    _prefix = ""

    def __str__(self) -> str:
        return f"{self._prefix}{super().__str__()}"


class KafkaError(YozefuError):
    """An error reported while talking to the Kafka cluster."""

    _prefix = "Kafka Error: "


class ThemeError(YozefuError):
    """An error in the definition of a theme."""

    _prefix = "Theme Error: "


class SchemaRegistryError(YozefuError):
    """An error reported while talking to the schema registry."""

    _prefix = "Schema registry Error: "


class SearchParseError(YozefuError):
    """A search query could not be parsed."""

    def __init__(self, remaining: str) -> None:
        super().__init__(f"Cannot parse the search query at '{remaining}'")
        self.remaining = remaining