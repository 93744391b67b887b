"""
Translation error hierarchy for sqlvariant.
"""

from __future__ import annotations

from typing import Any, Sequence


class TranslationError(ValueError):
    """Base error for failures while turning expressions into SQL."""


class UnknownFunctionError(TranslationError):
    """
    Raised when a function name is absent from the whole registry chain.
    """

    def __init__(self, name: str, context: str | None = None) -> None:
        self.name = name
        self.context = context
        where = f" in {context} context" if context else ""
        super().__init__(f"No translation available for function '{name}'{where}.")


class UnsupportedArgumentError(TranslationError):
    """
    Raised when an argument value lies outside what the dialect can express.
    """

    def __init__(self, argument: str, allowed: Any, dialect: str | None = None) -> None:
        self.argument = argument
        self.allowed = allowed
        self.dialect = dialect
        backend = f" on {dialect}" if dialect else ""
        super().__init__(
            f"Argument '{argument}' is not supported{backend}; allowed: {_describe(allowed)}."
        )


class InvalidArgumentError(TranslationError):
    """
    Raised when a structural argument (method, format, arity) is invalid.
    """

    def __init__(self, argument: str, allowed: Any = None, message: str | None = None) -> None:
        self.argument = argument
        self.allowed = allowed
        if message is None:
            message = f"Invalid value for '{argument}'; must be one of {_describe(allowed)}."
        super().__init__(message)


class TranslationAmbiguityError(TranslationError):
    """
    Raised when a function is deliberately unsupported in one evaluation context.
    """

    def __init__(self, name: str, context: str, dialect: str | None = None) -> None:
        self.name = name
        self.context = context
        self.dialect = dialect
        backend = f" by {dialect}" if dialect else ""
        super().__init__(f"'{name}' is not supported in {context} context{backend}.")


class RegistryFrozenError(TranslationError):
    """Raised when registering into a registry after dialect construction."""


class DialectConfigurationError(TranslationError):
    """Raised when a dialect or translation option is configured inconsistently."""


def _describe(allowed: Any) -> str:
    if allowed is None:
        return "no value (argument must be omitted)"
    if isinstance(allowed, str):
        return repr(allowed)
    if isinstance(allowed, Sequence):
        return ", ".join(repr(value) for value in allowed)
    return repr(allowed)
