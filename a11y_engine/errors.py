"""Exception types raised by the accessibility engine."""


class A11yEngineError(Exception):
    """Base class for engine errors."""


class SelectorError(A11yEngineError):
    """Raised when a checker's selection query cannot be evaluated."""

    def __init__(self, selector: str, reason: str):
        self.selector = selector
        self.reason = reason
        super().__init__(f"Invalid selector {selector!r}: {reason}")


class ConfigurationError(A11yEngineError):
    """Raised when engine configuration cannot be loaded or validated."""

    def __init__(self, message: str, config_file: str | None = None):
        self.config_file = config_file
        super().__init__(message)


class RenderError(A11yEngineError):
    """Raised when a page cannot be rendered in a browser."""
