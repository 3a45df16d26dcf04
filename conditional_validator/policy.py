"""Disable policies — caller-supplied switches that suppress individual rule evaluations.

A policy is consulted before every rule, including the required rule. A
policy returning True makes that evaluation count as a success without
running the rule.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Callable

if TYPE_CHECKING:
    from conditional_validator.context import ValidationContext
    from conditional_validator.rules.base import BaseRule


class DisablePolicy(ABC):
    """Decides per evaluation whether a rule should be skipped."""

    @abstractmethod
    def is_disabled(self, value: Any, context: "ValidationContext", rule: "BaseRule") -> bool:
        ...


class CallableDisablePolicy(DisablePolicy):
    """Adapts a plain ``func(value, context, rule) -> bool``."""

    def __init__(self, func: Callable[[Any, "ValidationContext", "BaseRule"], bool]):
        self.func = func

    def is_disabled(self, value: Any, context: "ValidationContext", rule: "BaseRule") -> bool:
        return bool(self.func(value, context, rule))


class RuleTypeDisablePolicy(DisablePolicy):
    """Disables every rule that is an instance of one of the given rule classes."""

    def __init__(self, *rule_types: type):
        self.rule_types = rule_types

    def is_disabled(self, value: Any, context: "ValidationContext", rule: "BaseRule") -> bool:
        return isinstance(rule, self.rule_types)


class MemberDisablePolicy(DisablePolicy):
    """Disables all rules evaluated for the named members."""

    def __init__(self, *member_names: str):
        self.member_names = frozenset(member_names)

    def is_disabled(self, value: Any, context: "ValidationContext", rule: "BaseRule") -> bool:
        return context.member_name in self.member_names
