"""Validation models — rule results, failure descriptors, and the outcome of a run."""

from typing import TYPE_CHECKING, Any, Optional

from pydantic import BaseModel, ConfigDict, Field

from conditional_validator.errors import ValidationException

if TYPE_CHECKING:
    from conditional_validator.rules.base import BaseRule


class ValidationResult(BaseModel):
    """Message produced by a failing rule and the member(s) it applies to."""

    model_config = ConfigDict(frozen=True)

    error_message: str
    member_names: list[str] = Field(default_factory=list)


class ValidationError(BaseModel):
    """A single failed rule evaluation.

    Keeps the rule that failed and the value it rejected next to the result,
    so strict callers can raise with full detail.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rule: "BaseRule"  # resolved in rules.base
    value: Any = None
    result: ValidationResult

    @property
    def error_message(self) -> str:
        return self.result.error_message

    def raise_exception(self) -> None:
        raise ValidationException(self.result, self.rule, self.value)


class ValidationOutcome(BaseModel):
    """Ordered failures of one validation call (empty = valid)."""

    model_config = ConfigDict(frozen=True)

    errors: list[ValidationError] = Field(default_factory=list)

    @classmethod
    def build(cls, errors: list[ValidationError]) -> "ValidationOutcome":
        return cls(errors=list(errors))

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def results(self) -> list[ValidationResult]:
        return [err.result for err in self.errors]

    @property
    def first(self) -> Optional[ValidationError]:
        return self.errors[0] if self.errors else None
