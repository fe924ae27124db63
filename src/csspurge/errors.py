"""Error hierarchy for the CSS purge pipeline."""

from __future__ import annotations


class PurgeError(Exception):
    """Base error for all csspurge errors."""


class ModuleParseError(PurgeError):
    """Raised when a tracked module cannot be parsed into a syntax tree.

    This is fatal for the build pass: the host handed us code it considers
    valid, so a failure here means the pipeline is inconsistent upstream.
    """

    def __init__(
        self,
        message: str,
        module_id: str | None = None,
        line: int | None = None,
        column: int | None = None,
    ):
        self.module_id = module_id
        self.line = line
        self.column = column
        super().__init__(message)

    def with_module(self, module_id: str) -> ModuleParseError:
        """Return a copy of this error that names *module_id*."""
        location = ""
        if self.line is not None:
            location = f":{self.line}:{self.column}"
        return ModuleParseError(
            f"Failed to parse module {module_id}{location}: {self}",
            module_id=module_id,
            line=self.line,
            column=self.column,
        )


class SelectorSyntaxError(PurgeError):
    """Raised when text does not parse as a CSS selector list."""


class ConfigError(PurgeError):
    """Raised when a purge option mapping is malformed."""
