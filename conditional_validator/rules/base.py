"""Base rule — abstract class implementing the Strategy Pattern.

Each rule is a standalone, independently testable unit bound to an error
message template. Rules are shared and read-only once declared.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from conditional_validator.models import ValidationError, ValidationOutcome, ValidationResult

if TYPE_CHECKING:
    from conditional_validator.context import ValidationContext


class BaseRule(ABC):
    """Abstract base for all validation rules.

    Contract:
        - is_valid() decides pass/fail for one value
        - evaluate() returns None on success, a ValidationResult on failure
        - exceptions raised by is_valid() propagate to the caller

    Subclasses that check presence set ``is_presence_check = True``; the
    engine evaluates such a rule before any other rule on the same value.
    """

    is_presence_check: bool = False
    default_message: str = "The {name} field is invalid."

    def __init__(self, error_message: Optional[str] = None):
        self.error_message = error_message or self.default_message

    @property
    def name(self) -> str:
        """Human-readable name for logging."""
        return type(self).__name__

    @abstractmethod
    def is_valid(self, value: Any, context: "ValidationContext") -> bool:
        ...

    def format_error_message(self, display_name: str) -> str:
        return self.error_message.format(name=display_name, **self._message_args())

    def evaluate(self, value: Any, context: "ValidationContext") -> Optional[ValidationResult]:
        """Run the rule; None means success."""
        if self.is_valid(value, context):
            return None

        member_names = [context.member_name] if context.member_name else []
        return ValidationResult(
            error_message=self.format_error_message(context.display_name),
            member_names=member_names,
        )

    # ── Helper Methods ──

    def _message_args(self) -> dict[str, Any]:
        """Extra placeholders available to the message template."""
        return {}

    def __repr__(self) -> str:
        args = ", ".join(f"{k}={v!r}" for k, v in self._message_args().items())
        return f"{self.name}({args})"


# The failure descriptor's rule field needs BaseRule, defined above
ValidationError.model_rebuild()
ValidationOutcome.model_rebuild()
