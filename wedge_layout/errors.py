"""Exceptions raised by the wedge layout engine."""


class LayoutError(Exception):
    """Base class for all wedge_layout errors."""


class MissingParameterError(LayoutError, KeyError):
    """A required key is absent from a named parameter map.

    Raised by the throwing accessors; aborts the layout of one part instance.
    """

    def __init__(self, map_name: str, key: str):
        self.map_name = map_name
        self.key = key
        super().__init__(f"{map_name}: missing required key '{key}'")

    def __str__(self) -> str:
        # KeyError would quote the whole message
        return self.args[0]


class RuleFileError(LayoutError):
    """Declarative rule source is unreadable or does not match the schema."""


class ConfigError(LayoutError):
    """Layout configuration is missing a required section."""


class PartLoadError(LayoutError):
    """Part dimension source cannot be read."""
