"""Exception taxonomy.

Programmer errors (bad arguments, wrong value types, mismatched contexts)
derive from ``ValidatorError``. A rule violation surfaced by a strict entry
point is a ``ValidationException`` and deliberately sits outside that
hierarchy so callers can tell the two apart.
"""

from typing import Any, Optional


class ValidatorError(Exception):
    """Base for errors that signal misuse of the validator."""


class InvalidArgument(ValidatorError, ValueError):
    """A required argument was None or otherwise unusable."""


class TypeMismatch(ValidatorError, TypeError):
    """A value cannot be assigned to the member's declared type."""

    def __init__(self, member_name: str, member_type: Any, value: Any):
        self.member_name = member_name
        self.member_type = member_type
        self.value = value
        super().__init__(
            f"The value for member '{member_name}' must be of type '{_type_name(member_type)}', "
            f"got {type(value).__name__}"
        )

    def __reduce__(self):
        return type(self), (self.member_name, self.member_type, self.value)


class ContextMismatch(ValidatorError, ValueError):
    """The context's instance is not the instance being validated."""


class ValidationException(Exception):
    """Raised by the strict entry points for the first failing rule."""

    def __init__(self, result: Any, rule: Optional[Any] = None, value: Any = None):
        self.result = result
        self.rule = rule
        self.value = value
        super().__init__(result.error_message)

    def __reduce__(self):
        return type(self), (self.result, self.rule, self.value)

    @property
    def error_message(self) -> str:
        return self.result.error_message

    @property
    def member_names(self) -> list[str]:
        return list(self.result.member_names)


def _type_name(tp: Any) -> str:
    return getattr(tp, "__name__", None) or repr(tp)
