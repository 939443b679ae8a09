"""
Error types raised while compiling and rendering a script.

Every error aborts the whole run; nothing here is meant to be caught and
retried inside the engine.
"""


class MDLError(Exception):
    """Base class for all interpreter failures."""


class MDLSyntaxError(MDLError, ValueError):
    """A script line could not be parsed."""

    def __init__(self, message: str, line_number: int | None = None) -> None:
        if line_number is not None:
            message = f"line {line_number}: {message}"
        super().__init__(message)
        self.line_number = line_number


class ConfigurationError(MDLError, ValueError):
    """The animation directives of a script contradict each other."""


class StructuralError(MDLError):
    """The operation list cannot be executed as written."""


class StackUnderflowError(StructuralError, IndexError):
    """A pop would remove the last coordinate system."""


class InvalidOperandError(StructuralError, ValueError):
    """An operation carries an operand outside its valid range."""


class UnresolvedKnobError(MDLError, LookupError):
    """A knob reference names a symbol that was never declared."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Knob '{name}' is not defined.")
        self.name = name
