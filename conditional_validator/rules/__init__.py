"""Validation rules — the base rule and the built-in rule set."""

from conditional_validator.rules.base import BaseRule
from conditional_validator.rules.builtin import (
    LengthRule,
    PatternRule,
    PredicateRule,
    RangeRule,
    RequiredRule,
)

__all__ = [
    "BaseRule",
    "RequiredRule",
    "LengthRule",
    "RangeRule",
    "PatternRule",
    "PredicateRule",
]
