"""
Function-name to translation-rule registries with parent fallback.
"""

from __future__ import annotations

import enum
import inspect
from dataclasses import dataclass, field, replace
from types import MappingProxyType
from typing import Any, Callable, Dict, Iterator, List, Mapping, Optional, Tuple, Union

from ..errors import RegistryFrozenError, UnknownFunctionError


class EvaluationContext(str, enum.Enum):
    SCALAR = "scalar"
    AGGREGATE = "aggregate"
    WINDOW = "window"


@dataclass(frozen=True)
class TranslationRule:
    """
    A single function translation.

    ``template`` is called as ``template(ctx, *args, **kwargs)``; its
    signature (after the context parameter) declares the rule's parameter
    names, defaults and arity. ``validators`` maps parameter names to the
    argument validators run before the template.
    """

    name: str
    template: Callable[..., Any]
    validators: Mapping[str, Tuple[Any, ...]] = field(default_factory=dict)
    signature: inspect.Signature = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        signature = inspect.signature(self.template)
        params = list(signature.parameters.values())[1:]
        object.__setattr__(self, "signature", signature.replace(parameters=params))
        object.__setattr__(
            self,
            "validators",
            MappingProxyType({key: tuple(value) for key, value in self.validators.items()}),
        )
        unknown = set(self.validators) - set(signature.parameters)
        if unknown:
            raise ValueError(
                f"Rule '{self.name}' declares validators for unknown parameters: {sorted(unknown)}"
            )

    @property
    def parameters(self) -> Tuple[str, ...]:
        return tuple(self.signature.parameters)

    @property
    def arity(self) -> Tuple[int, Optional[int]]:
        """(minimum, maximum) positional arguments; maximum is None when variadic."""
        minimum = 0
        maximum: Optional[int] = 0
        for param in self.signature.parameters.values():
            if param.kind is inspect.Parameter.VAR_POSITIONAL:
                maximum = None
            elif param.kind in (
                inspect.Parameter.POSITIONAL_ONLY,
                inspect.Parameter.POSITIONAL_OR_KEYWORD,
            ):
                if maximum is not None:
                    maximum += 1
                if param.default is inspect.Parameter.empty:
                    minimum += 1
        return minimum, maximum

    def defaults(self) -> Dict[str, Any]:
        return {
            name: param.default
            for name, param in self.signature.parameters.items()
            if param.default is not inspect.Parameter.empty
        }


RuleLike = Union[TranslationRule, Callable[..., Any]]


class Registry:
    """
    Ordered name -> rule table.

    Lookup falls back to ``parent`` when a name is not registered locally, so
    local rules shadow inherited ones. Registries are populated while a
    dialect is built and frozen afterwards.
    """

    def __init__(
        self,
        name: str,
        parent: Optional["Registry"] = None,
        rules: Optional[Mapping[str, RuleLike]] = None,
    ) -> None:
        self.name = name
        self.parent = parent
        self._rules: Dict[str, TranslationRule] = {}
        self._frozen = False
        if rules:
            self.update(rules)

    @property
    def frozen(self) -> bool:
        return self._frozen

    def register(self, name: str, rule: RuleLike) -> TranslationRule:
        if self._frozen:
            raise RegistryFrozenError(f"Registry '{self.name}' is read-only; cannot register '{name}'.")
        if not isinstance(rule, TranslationRule):
            rule = TranslationRule(name, rule)
        elif rule.name != name:
            rule = replace(rule, name=name)
        self._rules[name] = rule
        return rule

    def update(self, rules: Mapping[str, RuleLike]) -> None:
        for name, rule in rules.items():
            self.register(name, rule)

    def freeze(self) -> "Registry":
        self._frozen = True
        return self

    def get(self, name: str) -> Optional[TranslationRule]:
        registry: Optional[Registry] = self
        while registry is not None:
            rule = registry._rules.get(name)
            if rule is not None:
                return rule
            registry = registry.parent
        return None

    def resolve(self, name: str) -> TranslationRule:
        rule = self.get(name)
        if rule is None:
            raise UnknownFunctionError(name, self.name)
        return rule

    def names(self) -> List[str]:
        """All resolvable names, local rules first."""
        seen: Dict[str, None] = {}
        registry: Optional[Registry] = self
        while registry is not None:
            for name in registry._rules:
                seen.setdefault(name, None)
            registry = registry.parent
        return list(seen)

    def local_names(self) -> List[str]:
        return list(self._rules)

    def __contains__(self, name: object) -> bool:
        return isinstance(name, str) and self.get(name) is not None

    def __iter__(self) -> Iterator[str]:
        return iter(self.names())

    def __repr__(self) -> str:
        parent = self.parent.name if self.parent else None
        return f"Registry({self.name!r}, rules={len(self._rules)}, parent={parent!r})"


@dataclass(frozen=True)
class SqlVariant:
    """
    The three registries of one dialect, one per evaluation context.
    """

    scalar: Registry
    aggregate: Registry
    window: Registry

    def registry_for(self, context: Union[EvaluationContext, str]) -> Registry:
        context = EvaluationContext(context)
        if context is EvaluationContext.SCALAR:
            return self.scalar
        if context is EvaluationContext.AGGREGATE:
            return self.aggregate
        return self.window

    def resolve(self, name: str, context: Union[EvaluationContext, str]) -> TranslationRule:
        """
        Look ``name`` up in the context's registry, then in the scalar one.

        Aggregate and window translations are layered over the scalar table,
        so operators and scalar functions resolve in every context.
        """

        registry = self.registry_for(context)
        rule = registry.get(name)
        if rule is None and registry is not self.scalar:
            rule = self.scalar.get(name)
        if rule is None:
            raise UnknownFunctionError(name, registry.name)
        return rule

    def freeze(self) -> "SqlVariant":
        for registry in (self.scalar, self.aggregate, self.window):
            registry.freeze()
        return self
