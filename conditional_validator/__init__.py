"""Conditional Validator — declarative object validation with per-rule disable policies.

Usage:
    from conditional_validator import validator, ValidationContext

    outcome = validator.validate_object(person, validate_all_members=True)
    if not outcome.is_valid:
        # outcome.errors holds failures in evaluation order
"""

from conditional_validator.context import ValidationContext
from conditional_validator.engine import Validator, can_be_assigned
from conditional_validator.errors import (
    ContextMismatch,
    InvalidArgument,
    TypeMismatch,
    ValidationException,
    ValidatorError,
)
from conditional_validator.log_config import configure_logging
from conditional_validator.metadata import RuleStore, default_store
from conditional_validator.models import ValidationError, ValidationOutcome, ValidationResult
from conditional_validator.policy import (
    CallableDisablePolicy,
    DisablePolicy,
    MemberDisablePolicy,
    RuleTypeDisablePolicy,
)
from conditional_validator.rules import (
    BaseRule,
    LengthRule,
    PatternRule,
    PredicateRule,
    RangeRule,
    RequiredRule,
)

# Module-level singleton
validator = Validator()

__all__ = [
    "Validator",
    "validator",
    "can_be_assigned",
    "ValidationContext",
    "RuleStore",
    "default_store",
    "ValidationResult",
    "ValidationError",
    "ValidationOutcome",
    "ValidatorError",
    "InvalidArgument",
    "TypeMismatch",
    "ContextMismatch",
    "ValidationException",
    "DisablePolicy",
    "CallableDisablePolicy",
    "RuleTypeDisablePolicy",
    "MemberDisablePolicy",
    "BaseRule",
    "RequiredRule",
    "LengthRule",
    "RangeRule",
    "PatternRule",
    "PredicateRule",
    "configure_logging",
]
