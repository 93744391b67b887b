"""
Translator facade turning host expressions into SQL expressions and text.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Iterable, Mapping, Optional, Sequence, Tuple, Union

from ..config import DEFAULT_OPTIONS, TranslationOptions
from ..query.compiler import ExpressionCompiler
from ..query.expressions import Expression, Ident, Literal, WindowSpec
from ..utils import get_logger
from .builder import ExpressionBuilder, TranslationContext
from .host import FixedPattern, HostCall, HostColumn
from .registry import EvaluationContext

if TYPE_CHECKING:
    from ..dialects.base import Dialect

ContextLike = Union[EvaluationContext, str]


class Translator:
    """
    Translate host expressions for one dialect.

    The caller picks the evaluation context and nested arguments are
    translated in the same context, so aggregate and window calls compose
    with operators and scalar functions at any depth. Translation is pure:
    the same input always yields the same SQL.
    """

    def __init__(self, dialect: "Dialect", options: TranslationOptions | None = None) -> None:
        self.dialect = dialect
        self.options = options or DEFAULT_OPTIONS
        self.builder = ExpressionBuilder(dialect)
        self.compiler = ExpressionCompiler(dialect)
        self.logger = get_logger("translate")

    def translate(
        self,
        expr: Any,
        context: ContextLike = EvaluationContext.SCALAR,
        window: Optional[WindowSpec] = None,
    ) -> Expression:
        if isinstance(expr, HostCall):
            return self.translate_call(
                expr.name, expr.args, dict(expr.kwargs), context=context, window=window
            )
        if isinstance(expr, HostColumn):
            return Ident(expr.name, expr.table)
        if isinstance(expr, Expression):
            return expr
        if isinstance(expr, FixedPattern):
            raise TypeError("fixed() can only be used as a pattern argument")
        return Literal(expr)

    def translate_call(
        self,
        name: str,
        args: Sequence[Any] = (),
        kwargs: Optional[Mapping[str, Any]] = None,
        *,
        context: ContextLike = EvaluationContext.SCALAR,
        window: Optional[WindowSpec] = None,
    ) -> Expression:
        context = EvaluationContext(context)
        rule = self.dialect.variant.resolve(name, context)
        self.logger.debug(
            "Resolved %s in %s context for %s", name, context.value, self.dialect.display_name
        )
        ctx = TranslationContext(
            dialect=self.dialect,
            context=context,
            window=window or WindowSpec(),
            options=self.options,
        )
        translated_args = [self._translate_arg(arg, context, window) for arg in args]
        translated_kwargs = {
            key: self._translate_arg(value, context, window) for key, value in (kwargs or {}).items()
        }
        return self.builder.build(rule, translated_args, translated_kwargs, ctx)

    def to_sql(
        self,
        expr: Any,
        context: ContextLike = EvaluationContext.SCALAR,
        window: Optional[WindowSpec] = None,
    ) -> str:
        return self.compiler.compile(self.translate(expr, context=context, window=window))

    def window_spec(
        self,
        partition_by: Iterable[Any] = (),
        order_by: Iterable[Any] = (),
        frame: Optional[Tuple[Optional[int], Optional[int]]] = None,
        name: Optional[str] = None,
    ) -> WindowSpec:
        """Build a window from column names or host expressions."""
        return WindowSpec(
            partition_by=tuple(self._window_key(key) for key in partition_by),
            order_by=tuple(self._window_key(key) for key in order_by),
            frame=frame,
            name=name,
        )

    # Helpers -----------------------------------------------------------
    def _translate_arg(
        self, value: Any, context: EvaluationContext, window: Optional[WindowSpec]
    ) -> Any:
        if isinstance(value, (HostCall, HostColumn)):
            return self.translate(value, context=context, window=window)
        if isinstance(value, FixedPattern):
            return FixedPattern(self._translate_arg(value.pattern, context, window))
        if isinstance(value, (list, tuple)):
            return tuple(self._translate_arg(item, context, window) for item in value)
        return value

    def _window_key(self, key: Any) -> Expression:
        if isinstance(key, str):
            return Ident(key)
        return self.translate(key)
