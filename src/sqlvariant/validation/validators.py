"""
Argument validators applied to translation rule parameters.

A validator returns the (possibly coerced) value or raises ``ValueError``.
Its ``allowed`` attribute describes the accepted values and is reported in
``UnsupportedArgumentError``.
"""

from __future__ import annotations

import numbers
from typing import Any, Iterable, Mapping, Protocol, Tuple

from ..query.expressions import Expression, is_static, static_value


class ArgumentValidator(Protocol):
    allowed: Any

    def __call__(self, value: Any) -> Any: ...


def _literal(value: Any) -> Any:
    if not is_static(value):
        raise ValueError("Value must be known at translation time, not a SQL expression.")
    return static_value(value)


class BooleanArgument:
    allowed = (True, False)

    def __call__(self, value: Any) -> bool:
        value = _literal(value)
        if not isinstance(value, bool):
            raise ValueError(f"Expected a literal boolean, got {value!r}.")
        return value


class WholeNumberArgument:
    def __init__(self, allow_none: bool = False, minimum: int | None = None, maximum: int | None = None) -> None:
        self.allow_none = allow_none
        self.minimum = minimum
        self.maximum = maximum
        if minimum is not None and maximum is not None:
            self.allowed: Any = tuple(range(minimum, maximum + 1))
        else:
            self.allowed = "a whole number"

    def __call__(self, value: Any) -> int | None:
        value = _literal(value)
        if value is None and self.allow_none:
            return None
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError(f"Expected a whole number, got {value!r}.")
        if int(value) != value:
            raise ValueError(f"Expected a whole number, got {value!r}.")
        number = int(value)
        if self.minimum is not None and number < self.minimum:
            raise ValueError(f"Ensure value is greater than or equal to {self.minimum}.")
        if self.maximum is not None and number > self.maximum:
            raise ValueError(f"Ensure value is less than or equal to {self.maximum}.")
        return number


class NumberArgument:
    def __init__(self, minimum: float | None = None, maximum: float | None = None) -> None:
        self.minimum = minimum
        self.maximum = maximum
        if minimum is not None and maximum is not None:
            self.allowed: Any = f"a number between {minimum} and {maximum}"
        else:
            self.allowed = "a numeric literal"

    def __call__(self, value: Any) -> Any:
        value = _literal(value)
        if isinstance(value, bool) or not isinstance(value, numbers.Real):
            raise ValueError(f"Expected a number, got {value!r}.")
        if self.minimum is not None and value < self.minimum:
            raise ValueError(f"Ensure value is greater than or equal to {self.minimum}.")
        if self.maximum is not None and value > self.maximum:
            raise ValueError(f"Ensure value is less than or equal to {self.maximum}.")
        return value


class AllowedValues:
    """
    Accept only a fixed set of values; everything else is unsupported.

    With no values, the argument must be omitted (left at ``None``).
    """

    def __init__(self, *values: Any, allow_none: bool = False) -> None:
        self.values: Tuple[Any, ...] = values
        self.allow_none = allow_none or not values
        self.allowed: Any = values[0] if len(values) == 1 else (values or None)

    def __call__(self, value: Any) -> Any:
        if isinstance(value, Expression) and not is_static(value):
            raise ValueError("Value must be a literal.")
        value = static_value(value)
        if value is None and self.allow_none:
            return None
        for candidate in self.values:
            if type(candidate) is bool or type(value) is bool:
                if value is candidate:
                    return value
            elif value == candidate:
                return value
        raise ValueError(f"Value {value!r} is not supported.")


class Choice:
    """
    A string drawn from an enumerated set, with optional aliases.
    """

    def __init__(self, values: Iterable[str], aliases: Mapping[str, str] | None = None) -> None:
        self.values: Tuple[str, ...] = tuple(values)
        self.aliases = dict(aliases or {})
        self.allowed = self.values

    def __call__(self, value: Any) -> str:
        value = _literal(value)
        if not isinstance(value, str):
            raise ValueError(f"Expected a string, got {value!r}.")
        value = self.aliases.get(value, value)
        if value not in self.values:
            raise ValueError(f"Value {value!r} is not one of {self.values}.")
        return value
