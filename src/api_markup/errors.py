"""Error taxonomy for the conversion pipeline.

Every error names the stage that failed and, where there is one, the entity
(definition, operation, file) responsible for it.
"""


class MarkupError(Exception):
    """Base class for all conversion failures."""

    stage = "convert"

    def __init__(self, message: str, entity: str | None = None):
        super().__init__(message)
        self.message = message
        self.entity = entity

    def describe(self) -> str:
        """Human-readable one-liner: stage, entity and message."""
        if self.entity:
            return f"[{self.stage}] {self.entity}: {self.message}"
        return f"[{self.stage}] {self.message}"


class ParseError(MarkupError):
    """The input document is unreadable or is not a Swagger 2.0 document."""

    stage = "parse"


class ResolutionError(MarkupError):
    """A reference could not be resolved, or a synthesized name collides."""

    stage = "resolve"


class GroupingError(MarkupError):
    """An operation lacks the key required by the grouping strategy."""

    stage = "group"


class ExtensionError(MarkupError):
    """An extension could not produce its content."""

    stage = "extension"

    def __init__(self, message: str, entity: str | None = None, position: str | None = None):
        super().__init__(message, entity)
        self.position = position


class ConfigError(MarkupError):
    stage = "config"


class OutputError(MarkupError):
    """Writing the document tree to disk failed."""

    stage = "output"
