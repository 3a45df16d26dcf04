"""Validation context — per-call state threaded through the engine."""

from typing import Any, Mapping, Optional

from conditional_validator.policy import DisablePolicy


class ValidationContext:
    """Describes what is being validated and carries caller-supplied state.

    Attributes:
        instance: The object under validation.
        member_name: Active member, or None when validating the object itself.
        items: Free-form key/value bag passed through to rules and policies.
        disable_policy: Optional policy able to suppress individual rule evaluations.
        services: Capability lookup (type -> instance) for rules that need collaborators.
    """

    def __init__(
        self,
        instance: Any,
        member_name: Optional[str] = None,
        items: Optional[Mapping[str, Any]] = None,
        disable_policy: Optional[DisablePolicy] = None,
        services: Optional[Mapping[type, Any]] = None,
        display_name: Optional[str] = None,
    ):
        self.instance = instance
        self.member_name = member_name
        self.items: dict[str, Any] = dict(items or {})
        self.disable_policy = disable_policy
        self.services: dict[type, Any] = dict(services or {})
        self._display_name = display_name

    @property
    def object_type(self) -> type:
        return type(self.instance)

    @property
    def display_name(self) -> str:
        if self._display_name:
            return self._display_name
        if self.member_name:
            return self.member_name
        return self.object_type.__name__

    @display_name.setter
    def display_name(self, value: Optional[str]) -> None:
        self._display_name = value

    def get_service(self, service_type: type) -> Optional[Any]:
        """Return the registered service for a capability type, or None."""
        return self.services.get(service_type)

    def add_service(self, service_type: type, service: Any) -> None:
        self.services[service_type] = service

    def get_disable_policy(self) -> Optional[DisablePolicy]:
        """Explicit policy first, then one registered as a service."""
        if self.disable_policy is not None:
            return self.disable_policy

        return self.get_service(DisablePolicy)

    def derive(self, instance: Any, member_name: Optional[str] = None) -> "ValidationContext":
        """Copy with a new instance and member name; items, services and policy carry over."""
        return ValidationContext(
            instance,
            member_name=member_name,
            items=self.items,
            disable_policy=self.disable_policy,
            services=self.services,
        )

    def for_member(self, member_name: str) -> "ValidationContext":
        return self.derive(self.instance, member_name)

    def __repr__(self) -> str:
        return (
            f"ValidationContext(type={self.object_type.__name__}, "
            f"member_name={self.member_name!r}, items={list(self.items)})"
        )
