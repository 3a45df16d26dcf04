"""Rule store — finds the rules attached to a type and its members.

Rules can be declared three ways, and all three are merged:

    @dataclass
    class Person:
        __validation_rules__ = (PredicateRule(lambda p: p.age >= 18, "Must be an adult"),)

        name: Annotated[str, RequiredRule(), LengthRule(max_length=40)]
        age: int

    default_store.add_member_rules(Person, "age", RangeRule(0, 150))
    default_store.add_type_rules(Person, PredicateRule(...))

Nothing is cached: every lookup re-reads the type, so rules added after
the first validation are picked up.
"""

import inspect
import types
from typing import TYPE_CHECKING, Annotated, Any, Union, get_args, get_origin, get_type_hints

import structlog

from conditional_validator.errors import InvalidArgument
from conditional_validator.rules.base import BaseRule

if TYPE_CHECKING:
    from conditional_validator.context import ValidationContext

logger = structlog.get_logger()

TYPE_RULES_ATTR = "__validation_rules__"
_UNION_TYPES = (Union, types.UnionType)


class RuleStore:
    """Metadata provider and member enumerator for validated types.

    Registration is a setup step; after that the store is only read and can
    be shared between threads.
    """

    def __init__(self):
        self._type_rules: dict[type, list[BaseRule]] = {}
        self._member_rules: dict[type, dict[str, list[BaseRule]]] = {}

    # ── Registration ──

    def add_type_rules(self, cls: type, *rules: BaseRule) -> None:
        """Attach rules to the type itself (evaluated against the whole instance)."""
        self._type_rules.setdefault(cls, []).extend(rules)

    def add_member_rules(self, cls: type, member_name: str, *rules: BaseRule) -> None:
        """Attach rules to one member of a type."""
        self._member_rules.setdefault(cls, {}).setdefault(member_name, []).extend(rules)

    # ── Lookup ──

    def type_rules(self, context: "ValidationContext") -> list[BaseRule]:
        """Rules declared on the context's type, base classes first."""
        mro = list(reversed(context.object_type.__mro__))
        rules: list[BaseRule] = []
        for klass in mro:
            rules.extend(vars(klass).get(TYPE_RULES_ATTR, ()))
        for klass in mro:
            rules.extend(self._type_rules.get(klass, ()))
        return rules

    def member_rules(self, context: "ValidationContext") -> list[BaseRule]:
        """Rules declared on the context's active member; empty if it has none."""
        if not context.member_name:
            raise InvalidArgument("The validation context must name a member")
        return self._rules_for(context.object_type, context.member_name, _annotated_hints(context.object_type))

    def member_type(self, context: "ValidationContext") -> Any:
        """Declared type of the context's active member.

        Raises:
            InvalidArgument: if the type has no such member
        """
        cls = context.object_type
        name = context.member_name
        if not name:
            raise InvalidArgument("The validation context must name a member")

        hints = _annotated_hints(cls)
        if name in hints:
            return _strip_annotated(hints[name])

        attr = inspect.getattr_static(cls, name, None)
        if isinstance(attr, property):
            return _return_hint(attr)

        if attr is not None or self._registered_rules(cls, name):
            return Any

        raise InvalidArgument(f"The type '{cls.__name__}' does not contain a public member named '{name}'")

    def members_of(self, instance: Any) -> list[tuple[str, Any]]:
        """(name, current value) for every member that has at least one rule.

        Annotated members come first in declaration order, followed by members
        that only have registered rules. A member missing from the instance
        reads as None.
        """
        cls = type(instance)
        hints = _annotated_hints(cls)

        names = list(hints)
        for klass in reversed(cls.__mro__):
            for name in self._member_rules.get(klass, {}):
                if name not in names:
                    names.append(name)

        return [
            (name, getattr(instance, name, None))
            for name in names
            if self._rules_for(cls, name, hints)
        ]

    # ── Helpers ──

    def _rules_for(self, cls: type, name: str, hints: dict[str, Any]) -> list[BaseRule]:
        rules = _rules_in_hint(hints[name]) if name in hints else []
        rules.extend(self._registered_rules(cls, name))
        return rules

    def _registered_rules(self, cls: type, name: str) -> list[BaseRule]:
        rules: list[BaseRule] = []
        for klass in reversed(cls.__mro__):
            rules.extend(self._member_rules.get(klass, {}).get(name, ()))
        return rules


def _annotated_hints(cls: type) -> dict[str, Any]:
    try:
        return get_type_hints(cls, include_extras=True)
    except NameError as e:
        logger.warning("unresolved_annotations", type=cls.__name__, error=str(e))
        return {}


def _rules_in_hint(hint: Any) -> list[BaseRule]:
    origin = get_origin(hint)
    if origin in _UNION_TYPES:
        # Optional[Annotated[T, ...]] declares rules on the non-None arm
        return [rule for arg in get_args(hint) for rule in _rules_in_hint(arg)]
    if origin is not Annotated:
        return []
    return [meta for meta in hint.__metadata__ if isinstance(meta, BaseRule)] + _rules_in_hint(get_args(hint)[0])


def _strip_annotated(hint: Any) -> Any:
    if get_origin(hint) is Annotated:
        return get_args(hint)[0]
    return hint


def _return_hint(prop: property) -> Any:
    if prop.fget is None:
        return Any
    try:
        return get_type_hints(prop.fget).get("return", Any)
    except NameError:
        return Any


# Module-level default
default_store = RuleStore()
