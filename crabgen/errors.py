"""
Exception hierarchy for code generation and the in-process bridge.

Every failure carries a message plus a context dict (module, method,
parameter, file) so callers can report where it happened.
"""


class CodegenError(Exception):
    """Base exception for all generation errors"""

    def __init__(self, message: str, context: dict = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def to_dict(self) -> dict:
        """Convert exception to structured log format"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "context": self.context,
        }

    def __str__(self) -> str:
        if not self.context:
            return self.message
        details = ", ".join(f"{key}={value}" for key, value in self.context.items())
        return f"{self.message} ({details})"


class SchemaError(CodegenError):
    """Raised when a schema document is malformed"""
    pass


class UnsupportedTypeError(CodegenError):
    """Raised when a type annotation has no mapping for the requested target"""
    pass


class DuplicateSymbolError(CodegenError):
    """Raised when two generated symbols would share one name"""
    pass


class ConfigError(CodegenError):
    """Raised when craby.toml is missing or invalid"""
    pass


class BridgeError(CodegenError):
    """Raised by the in-process bridge when a call cannot be dispatched or the host fails"""
    pass
