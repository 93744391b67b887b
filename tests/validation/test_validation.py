import pytest

from sqlvariant.query.expressions import Ident, Literal
from sqlvariant.validation import (
    AllowedValues,
    BooleanArgument,
    Choice,
    NumberArgument,
    WholeNumberArgument,
)


def test_boolean_argument():
    validator = BooleanArgument()
    assert validator(True) is True
    assert validator(Literal(False)) is False
    for value in (1, "true", None, Ident("flag")):
        with pytest.raises(ValueError):
            validator(value)


def test_whole_number_argument_coerces():
    validator = WholeNumberArgument()
    assert validator(2) == 2
    assert validator(2.0) == 2
    assert isinstance(validator(2.0), int)
    for value in (2.5, True, "2", Ident("n")):
        with pytest.raises(ValueError):
            validator(value)


def test_whole_number_bounds_and_none():
    validator = WholeNumberArgument(allow_none=True, minimum=1, maximum=7)
    assert validator(None) is None
    assert validator.allowed == (1, 2, 3, 4, 5, 6, 7)
    with pytest.raises(ValueError):
        validator(0)
    with pytest.raises(ValueError):
        validator(8)
    with pytest.raises(ValueError):
        WholeNumberArgument()(None)


def test_number_argument_range():
    validator = NumberArgument(minimum=0, maximum=1)
    assert validator(0.5) == 0.5
    assert validator(1) == 1
    with pytest.raises(ValueError):
        validator(-0.1)
    with pytest.raises(ValueError):
        validator(False)


def test_allowed_values_single():
    validator = AllowedValues("day")
    assert validator.allowed == "day"
    assert validator("day") == "day"
    with pytest.raises(ValueError):
        validator("week")
    with pytest.raises(ValueError):
        validator(None)


def test_allowed_values_distinguishes_booleans():
    assert AllowedValues(1)(1) == 1
    with pytest.raises(ValueError):
        AllowedValues(1)(True)
    assert AllowedValues(False)(False) is False
    with pytest.raises(ValueError):
        AllowedValues(False)(0)


def test_allowed_values_empty_means_omitted():
    validator = AllowedValues()
    assert validator.allowed is None
    assert validator(None) is None
    with pytest.raises(ValueError):
        validator("UTC")


def test_allowed_values_rejects_expressions():
    with pytest.raises(ValueError):
        AllowedValues("day")(Ident("unit"))


def test_choice_with_aliases():
    validator = Choice(("second", "minute"), aliases={"seconds": "second"})
    assert validator("seconds") == "second"
    assert validator("minute") == "minute"
    assert validator.allowed == ("second", "minute")
    with pytest.raises(ValueError):
        validator("hour")
    with pytest.raises(ValueError):
        validator(1)
