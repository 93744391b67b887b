"""
Expression builder: validates rule arguments and applies rule templates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping, Sequence

from ..config import DEFAULT_OPTIONS, TranslationOptions
from ..errors import InvalidArgumentError, UnsupportedArgumentError
from ..query.expressions import Expression, WindowSpec
from .registry import EvaluationContext, TranslationRule

if TYPE_CHECKING:
    from ..dialects.base import Dialect


@dataclass(frozen=True)
class TranslationContext:
    """
    Read-only state handed to every rule template.
    """

    dialect: "Dialect"
    context: EvaluationContext = EvaluationContext.SCALAR
    window: WindowSpec = field(default_factory=WindowSpec)
    options: TranslationOptions = DEFAULT_OPTIONS

    @property
    def backend(self) -> str:
        return self.dialect.display_name


class ExpressionBuilder:
    """
    Bind arguments to a rule, validate them, then build the expression.
    """

    def __init__(self, dialect: "Dialect") -> None:
        self.dialect = dialect

    def build(
        self,
        rule: TranslationRule,
        args: Sequence[Any],
        kwargs: Mapping[str, Any],
        ctx: TranslationContext,
    ) -> Expression:
        bound = self._bind(rule, args, kwargs)
        for name, validators in rule.validators.items():
            if name not in bound.arguments:
                continue
            value = bound.arguments[name]
            for validator in validators:
                try:
                    value = validator(value)
                except ValueError as exc:
                    raise UnsupportedArgumentError(
                        name, validator.allowed, dialect=self.dialect.display_name
                    ) from exc
            bound.arguments[name] = value

        result = rule.template(ctx, *bound.args, **bound.kwargs)
        if not isinstance(result, Expression):
            raise TypeError(
                f"Rule '{rule.name}' returned {type(result).__name__}, expected an Expression"
            )
        return result

    # Helpers -----------------------------------------------------------
    @staticmethod
    def _bind(rule: TranslationRule, args: Sequence[Any], kwargs: Mapping[str, Any]):
        try:
            bound = rule.signature.bind(*args, **kwargs)
        except TypeError as exc:
            minimum, maximum = rule.arity
            expected = f"{minimum}+" if maximum is None else f"{minimum}-{maximum}"
            raise InvalidArgumentError(
                rule.name,
                rule.parameters,
                message=f"Invalid arguments for '{rule.name}' ({expected} positional): {exc}",
            ) from exc
        bound.apply_defaults()
        return bound
