"""Validation Engine — evaluates the rules attached to values, members and objects.

This is the main entry point for validation. Rules are looked up in a
RuleStore, each evaluation is offered to the context's disable policy
first, and failures are either collected or returned on the first hit.

Usage:
    validator = Validator()
    outcome = validator.validate_object(person, validate_all_members=True)
    if not outcome.is_valid:
        for error in outcome.errors:
            print(error.error_message)

Ordering rules:
    - A presence (required) rule runs before every other rule on the same
      value; if it fails, nothing else is evaluated for that value.
    - Object validation checks members first; type-level rules only run
      when no member failed.
"""

import time
import types
from typing import Annotated, Any, Literal, Optional, TypeVar, Union, get_args, get_origin

import structlog

from conditional_validator.config import Settings, get_settings
from conditional_validator.context import ValidationContext
from conditional_validator.errors import ContextMismatch, InvalidArgument, TypeMismatch
from conditional_validator.metadata import RuleStore, default_store
from conditional_validator.models import ValidationError, ValidationOutcome, ValidationResult
from conditional_validator.rules.base import BaseRule

logger = structlog.get_logger()

_UNION_TYPES = (Union, types.UnionType)


class Validator:
    """Runs rules from a RuleStore and aggregates their failures.

    Holds no per-call state; one instance can serve concurrent callers as
    long as each call's instance is not mutated while it is validated.
    """

    def __init__(self, store: Optional[RuleStore] = None, settings: Optional[Settings] = None):
        """Initialize with the default store or a custom one.

        Args:
            store: Rule store to read metadata from. If None, uses the module default.
            settings: Engine settings. If None, read from the environment.
        """
        self.store = store if store is not None else default_store
        self.settings = settings or get_settings()

    # ── Collect-mode entry points ──

    def validate_value(
        self,
        value: Any,
        context: ValidationContext,
        rules: list[BaseRule],
        collect_all: bool = True,
    ) -> ValidationOutcome:
        """Validate a standalone value against an explicit list of rules."""
        if context is None:
            raise InvalidArgument("validation context must not be None")
        return ValidationOutcome.build(self._get_validation_errors(value, context, rules, not collect_all))

    def validate_member(self, value: Any, context: ValidationContext, collect_all: bool = True) -> ValidationOutcome:
        """Validate a value destined for ``context.member_name`` using that member's rules.

        Raises:
            TypeMismatch: if the value cannot be assigned to the member's declared type
        """
        rules = self._member_rules_checked(value, context)
        return ValidationOutcome.build(self._get_validation_errors(value, context, rules, not collect_all))

    def validate_object(
        self,
        instance: Any,
        context: Optional[ValidationContext] = None,
        validate_all_members: Optional[bool] = None,
        collect_all: bool = True,
    ) -> ValidationOutcome:
        """Validate an object's members, then (if they are clean) its type-level rules.

        Args:
            instance: Object to validate
            context: Context whose instance must be ``instance``; created if None
            validate_all_members: Run every member rule (True) or only required rules (False).
                None uses ``Settings.VALIDATE_ALL_MEMBERS``.
            collect_all: Gather every failure (True) or stop at the first (False)

        Returns:
            ValidationOutcome with failures in evaluation order
        """
        context = self._object_context(instance, context)
        if validate_all_members is None:
            validate_all_members = self.settings.VALIDATE_ALL_MEMBERS

        start_time = time.perf_counter()
        errors = self._get_object_validation_errors(instance, context, validate_all_members, not collect_all)
        duration = (time.perf_counter() - start_time) * 1000

        logger.debug(
            "validation_complete",
            type=context.object_type.__name__,
            valid=not errors,
            failures=len(errors),
            validate_all_members=validate_all_members,
            duration_ms=round(duration, 2),
        )

        return ValidationOutcome.build(errors)

    # ── Boolean entry points ──
    # ``results`` of None means fail-fast; a list switches to collect-all and receives every result.

    def try_validate_value(
        self,
        value: Any,
        context: ValidationContext,
        rules: list[BaseRule],
        results: Optional[list[ValidationResult]] = None,
    ) -> bool:
        outcome = self.validate_value(value, context, rules, collect_all=results is not None)
        return _report(outcome, results)

    def try_validate_member(
        self,
        value: Any,
        context: ValidationContext,
        results: Optional[list[ValidationResult]] = None,
    ) -> bool:
        outcome = self.validate_member(value, context, collect_all=results is not None)
        return _report(outcome, results)

    def try_validate_object(
        self,
        instance: Any,
        context: Optional[ValidationContext] = None,
        results: Optional[list[ValidationResult]] = None,
        validate_all_members: Optional[bool] = None,
    ) -> bool:
        outcome = self.validate_object(instance, context, validate_all_members, collect_all=results is not None)
        return _report(outcome, results)

    # ── Strict entry points ──

    def assert_value(self, value: Any, context: ValidationContext, rules: list[BaseRule]) -> None:
        """Raise ValidationException for the first failing rule."""
        _raise_first(self.validate_value(value, context, rules, collect_all=False))

    def assert_member(self, value: Any, context: ValidationContext) -> None:
        _raise_first(self.validate_member(value, context, collect_all=False))

    def assert_object(
        self,
        instance: Any,
        context: Optional[ValidationContext] = None,
        validate_all_members: Optional[bool] = None,
    ) -> None:
        _raise_first(self.validate_object(instance, context, validate_all_members, collect_all=False))

    # ── Single rule ──

    def evaluate_one(self, value: Any, context: ValidationContext, rule: BaseRule) -> Optional[ValidationError]:
        """Evaluate one rule unless the context's disable policy suppresses it."""
        if context is None:
            raise InvalidArgument("validation context must not be None")

        policy = context.get_disable_policy()
        if policy is not None and policy.is_disabled(value, context, rule):
            logger.debug("rule_disabled", rule=rule.name, member=context.member_name)
            return None

        result = rule.evaluate(value, context)
        if result is None:
            return None

        logger.debug("rule_failed", rule=rule.name, member=context.member_name, message=result.error_message)
        return ValidationError(rule=rule, value=value, result=result)

    # ── Internals ──

    def _get_validation_errors(
        self,
        value: Any,
        context: ValidationContext,
        rules: list[BaseRule],
        break_on_first_error: bool,
    ) -> list[ValidationError]:
        if context is None:
            raise InvalidArgument("validation context must not be None")
        rules = list(rules or ())

        # A failed required rule makes the rest meaningless
        required = _find_required(rules)
        if required is not None:
            error = self.evaluate_one(value, context, required)
            if error is not None:
                return [error]

        errors: list[ValidationError] = []
        for rule in rules:
            if rule is required:
                continue
            error = self.evaluate_one(value, context, rule)
            if error is not None:
                errors.append(error)
                if break_on_first_error:
                    break

        return errors

    def _get_object_validation_errors(
        self,
        instance: Any,
        context: ValidationContext,
        validate_all_members: bool,
        break_on_first_error: bool,
    ) -> list[ValidationError]:
        # Step 1: member rules
        errors = self._get_member_validation_errors(instance, context, validate_all_members, break_on_first_error)

        # Step 2 only runs against well-formed members
        if errors:
            return errors

        rules = self.store.type_rules(context)
        return self._get_validation_errors(instance, context, rules, break_on_first_error)

    def _get_member_validation_errors(
        self,
        instance: Any,
        context: ValidationContext,
        validate_all_members: bool,
        break_on_first_error: bool,
    ) -> list[ValidationError]:
        errors: list[ValidationError] = []

        for name, value in self.store.members_of(instance):
            member_context = context.derive(instance, name)
            rules = self.store.member_rules(member_context)

            if validate_all_members:
                errors.extend(self._get_validation_errors(value, member_context, rules, break_on_first_error))
            else:
                required = _find_required(rules)
                if required is not None:
                    error = self.evaluate_one(value, member_context, required)
                    if error is not None:
                        errors.append(error)

            if break_on_first_error and errors:
                break

        return errors

    def _member_rules_checked(self, value: Any, context: ValidationContext) -> list[BaseRule]:
        if context is None:
            raise InvalidArgument("validation context must not be None")

        # Not a validation failure: the caller passed the wrong kind of value
        member_type = self.store.member_type(context)
        if not can_be_assigned(member_type, value):
            raise TypeMismatch(context.member_name, member_type, value)

        return self.store.member_rules(context)

    @staticmethod
    def _object_context(instance: Any, context: Optional[ValidationContext]) -> ValidationContext:
        if instance is None:
            raise InvalidArgument("instance must not be None")
        if context is None:
            return ValidationContext(instance)
        if context.instance is not instance:
            raise ContextMismatch("The instance provided must match the instance of the validation context")
        return context


def can_be_assigned(declared: Any, value: Any) -> bool:
    """Whether ``value`` may be stored in a member annotated as ``declared``."""
    if value is None:
        return _accepts_none(declared)
    return _accepts_value(declared, value)


def _accepts_none(declared: Any) -> bool:
    declared = _unwrap_annotated(declared)
    if declared in (Any, object, None, type(None)) or isinstance(declared, TypeVar):
        return True
    origin = get_origin(declared)
    if origin in _UNION_TYPES:
        return any(_accepts_none(arg) for arg in get_args(declared))
    if origin is Literal:
        return None in get_args(declared)
    return False


def _accepts_value(declared: Any, value: Any) -> bool:
    declared = _unwrap_annotated(declared)
    if declared in (Any, object) or isinstance(declared, TypeVar):
        return True

    origin = get_origin(declared)
    if origin in _UNION_TYPES:
        return any(_accepts_value(arg, value) for arg in get_args(declared))
    if origin is Literal:
        return value in get_args(declared)
    if origin is not None:
        declared = origin

    if not isinstance(declared, type):
        return True

    # int is acceptable where float/complex is declared
    if declared is float and isinstance(value, int):
        return True
    if declared is complex and isinstance(value, (int, float)):
        return True

    try:
        return isinstance(value, declared)
    except TypeError:
        # Protocols without @runtime_checkable cannot be checked
        return True


def _unwrap_annotated(declared: Any) -> Any:
    while get_origin(declared) is Annotated:
        declared = get_args(declared)[0]
    return declared


def _find_required(rules: list[BaseRule]) -> Optional[BaseRule]:
    return next((rule for rule in rules if rule.is_presence_check), None)


def _report(outcome: ValidationOutcome, results: Optional[list[ValidationResult]]) -> bool:
    if results is not None:
        results.extend(outcome.results)
    return outcome.is_valid


def _raise_first(outcome: ValidationOutcome) -> None:
    if outcome.first is not None:
        outcome.first.raise_exception()
