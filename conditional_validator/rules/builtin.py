"""Built-in rules.

Apart from RequiredRule, every rule treats None as valid: checking for an
absent value is RequiredRule's job, and it always runs first.
"""

import re
from typing import TYPE_CHECKING, Any, Callable, Optional

from conditional_validator.rules.base import BaseRule

if TYPE_CHECKING:
    from conditional_validator.context import ValidationContext


class RequiredRule(BaseRule):
    """Value must be present; strings must also be non-blank unless allowed."""

    is_presence_check = True
    default_message = "The {name} field is required."

    def __init__(self, allow_empty_strings: bool = False, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.allow_empty_strings = allow_empty_strings

    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        if value is None:
            return False
        if isinstance(value, str) and not self.allow_empty_strings:
            return value.strip() != ""
        return True


class LengthRule(BaseRule):
    """Sized value must have between min_length and max_length items."""

    default_message = "The field {name} must have a length between {min_length} and {max_length}."

    def __init__(self, max_length: int, min_length: int = 0, error_message: Optional[str] = None):
        if max_length < 0 or min_length < 0 or min_length > max_length:
            raise ValueError(f"Invalid length bounds: min={min_length}, max={max_length}")
        super().__init__(error_message)
        self.max_length = max_length
        self.min_length = min_length

    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        if value is None:
            return True
        return self.min_length <= len(value) <= self.max_length

    def _message_args(self) -> dict[str, Any]:
        return {"min_length": self.min_length, "max_length": self.max_length}


class RangeRule(BaseRule):
    """Comparable value must fall within [minimum, maximum]."""

    default_message = "The field {name} must be between {minimum} and {maximum}."

    def __init__(self, minimum: Any, maximum: Any, error_message: Optional[str] = None):
        if minimum > maximum:
            raise ValueError(f"Range minimum {minimum!r} is greater than maximum {maximum!r}")
        super().__init__(error_message)
        self.minimum = minimum
        self.maximum = maximum

    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        if value is None:
            return True
        return self.minimum <= value <= self.maximum

    def _message_args(self) -> dict[str, Any]:
        return {"minimum": self.minimum, "maximum": self.maximum}


class PatternRule(BaseRule):
    """String value must match the regular expression in full."""

    default_message = "The field {name} must match the regular expression '{pattern}'."

    def __init__(self, pattern: str, flags: int = 0, error_message: Optional[str] = None):
        super().__init__(error_message)
        self.pattern = pattern
        self._regex = re.compile(pattern, flags)

    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        if value is None:
            return True
        if not isinstance(value, str):
            return False
        return self._regex.fullmatch(value) is not None

    def _message_args(self) -> dict[str, Any]:
        return {"pattern": self.pattern}


class PredicateRule(BaseRule):
    """Wraps an arbitrary predicate.

    ``func(value)`` by default, ``func(value, context)`` with ``takes_context=True``.
    Used for type-level invariants that look at several members at once.
    """

    def __init__(
        self,
        func: Callable[..., Any],
        error_message: Optional[str] = None,
        takes_context: bool = False,
    ):
        super().__init__(error_message)
        self.func = func
        self.takes_context = takes_context

    @property
    def name(self) -> str:
        return getattr(self.func, "__name__", type(self).__name__)

    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        if self.takes_context:
            return bool(self.func(value, context))
        return bool(self.func(value))
