"""
Takein error taxonomy.

NotFound is deliberately absent: a missing source is a classification
recorded on the plan, not an exception.
"""


class TakeinError(Exception):
    """Base class for every error raised by takein."""


class TokenizationError(TakeinError, ValueError):
    """Fragment/key count mismatch, or more than one key divider."""


class ResolutionError(TakeinError, ValueError):
    """Destination pattern could not be expanded for a source."""

    def __init__(self, message: str, variable: str = ""):
        super().__init__(message)
        self.variable = variable


class FilesystemError(TakeinError, OSError):
    """Unexpected I/O or permission failure. Always fatal."""

    def __init__(self, message: str, path: str = ""):
        super().__init__(message)
        self.path = path


class StateError(TakeinError, RuntimeError):
    """Operation attempted from the wrong batch state."""


class ConfigError(TakeinError, ValueError):
    pass
