"""
Validation utilities exposed at the package level.
"""

from .validators import (
    AllowedValues,
    ArgumentValidator,
    BooleanArgument,
    Choice,
    NumberArgument,
    WholeNumberArgument,
)

__all__ = [
    "ArgumentValidator",
    "AllowedValues",
    "BooleanArgument",
    "Choice",
    "NumberArgument",
    "WholeNumberArgument",
]
