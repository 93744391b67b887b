import pytest

from sqlvariant.dialects import PostgresDialect
from sqlvariant.errors import InvalidArgumentError, UnsupportedArgumentError
from sqlvariant.query.expressions import Ident, call
from sqlvariant.translate.builder import ExpressionBuilder, TranslationContext
from sqlvariant.translate.registry import TranslationRule
from sqlvariant.validation import BooleanArgument, WholeNumberArgument


def _round(ctx, x, digits=0):
    return call("ROUND", x, digits)


ROUND = TranslationRule("round", _round, validators={"digits": (WholeNumberArgument(),)})


@pytest.fixture
def builder():
    return ExpressionBuilder(PostgresDialect())


@pytest.fixture
def ctx():
    return TranslationContext(dialect=PostgresDialect())


def test_build_applies_template(builder, ctx):
    expr = builder.build(ROUND, [Ident("x"), 2], {}, ctx)
    assert builder.dialect.render(expr) == "ROUND(x, 2)"


def test_build_coerces_whole_numbers(builder, ctx):
    expr = builder.build(ROUND, [Ident("x")], {"digits": 3.0}, ctx)
    assert expr.args[1].value == 3
    assert isinstance(expr.args[1].value, int)


def test_build_validates_defaults(builder, ctx):
    expr = builder.build(ROUND, [Ident("x")], {}, ctx)
    assert builder.dialect.render(expr) == "ROUND(x, 0)"


def test_build_reports_unsupported_value(builder, ctx):
    with pytest.raises(UnsupportedArgumentError) as excinfo:
        builder.build(ROUND, [Ident("x"), 2.5], {}, ctx)
    assert excinfo.value.argument == "digits"
    assert excinfo.value.dialect == "PostgreSQL"


def test_build_rejects_expression_for_literal_parameter(builder, ctx):
    with pytest.raises(UnsupportedArgumentError):
        builder.build(ROUND, [Ident("x"), Ident("d")], {}, ctx)


@pytest.mark.parametrize(
    "args, kwargs",
    [
        ([], {}),
        ([Ident("x"), 1, 2], {}),
        ([Ident("x")], {"places": 2}),
    ],
)
def test_build_rejects_bad_arity(builder, ctx, args, kwargs):
    with pytest.raises(InvalidArgumentError) as excinfo:
        builder.build(ROUND, args, kwargs, ctx)
    assert excinfo.value.argument == "round"


def test_build_requires_expression_result(builder, ctx):
    rule = TranslationRule("broken", lambda ctx, x: "x")
    with pytest.raises(TypeError):
        builder.build(rule, [Ident("x")], {}, ctx)


def test_boolean_validator_rejects_integers(builder, ctx):
    def template(ctx, x, flag=False):
        return call("F", x)

    rule = TranslationRule("f", template, validators={"flag": (BooleanArgument(),)})
    with pytest.raises(UnsupportedArgumentError) as excinfo:
        builder.build(rule, [Ident("x")], {"flag": 1}, ctx)
    assert excinfo.value.allowed == (True, False)
