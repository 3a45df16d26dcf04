"""Tests for the rule store."""

from dataclasses import dataclass
from typing import Annotated, Any, Optional

import pytest

from conditional_validator.context import ValidationContext
from conditional_validator.errors import InvalidArgument
from conditional_validator.rules import LengthRule, PredicateRule, RangeRule, RequiredRule

IS_ADULT = PredicateRule(lambda p: p.age >= 18, "Must be an adult")
NAME_REQUIRED = RequiredRule()
NAME_LENGTH = LengthRule(max_length=40)
TITLE_LENGTH = LengthRule(max_length=3)


@dataclass
class Customer:
    __validation_rules__ = (IS_ADULT,)

    name: Annotated[str, NAME_REQUIRED, NAME_LENGTH]
    age: int
    notes: Optional[str] = None


@dataclass
class VipCustomer(Customer):
    tier: Annotated[int, RangeRule(1, 3)] = 1


@dataclass
class Listing:
    title: Optional[Annotated[str, TITLE_LENGTH]] = None


class Thermostat:
    target: Annotated[float, RangeRule(5.0, 30.0)]

    def __init__(self, target=None, mode="auto"):
        if target is not None:
            self.target = target
        self.mode = mode

    @property
    def label(self) -> str:
        return f"thermostat ({self.mode})"


class TestRuleLookup:
    """Test type and member rule lookup."""

    def test_annotated_member_rules_in_order(self, store):
        """Test that Annotated metadata is read in declaration order."""
        context = ValidationContext(Customer("Ann", 30), member_name="name")
        assert store.member_rules(context) == [NAME_REQUIRED, NAME_LENGTH]

    def test_member_without_rules_is_empty(self, store):
        """Test that an unruled member yields an empty list."""
        context = ValidationContext(Customer("Ann", 30), member_name="notes")
        assert store.member_rules(context) == []

    def test_registered_member_rules_follow_annotations(self, store):
        """Test that registered rules come after Annotated ones."""
        extra = PredicateRule(str.istitle)
        store.add_member_rules(Customer, "name", extra)

        context = ValidationContext(Customer("Ann", 30), member_name="name")
        assert store.member_rules(context) == [NAME_REQUIRED, NAME_LENGTH, extra]

    def test_type_rules_from_class_attribute_and_registry(self, store):
        """Test that class-declared rules come before registered ones."""
        registered = PredicateRule(lambda c: True)
        store.add_type_rules(Customer, registered)

        assert store.type_rules(ValidationContext(Customer("Ann", 30))) == [IS_ADULT, registered]

    def test_rules_inherited_by_subclass(self, store):
        """Test that base class rules apply to subclasses, base first."""
        base_rule = PredicateRule(lambda c: True)
        sub_rule = PredicateRule(lambda c: True)
        store.add_type_rules(Customer, base_rule)
        store.add_type_rules(VipCustomer, sub_rule)

        context = ValidationContext(VipCustomer("Ann", 30))
        assert store.type_rules(context) == [IS_ADULT, base_rule, sub_rule]

    def test_registration_is_per_store(self, store):
        """Test that stores do not share registrations."""
        from conditional_validator.metadata import RuleStore

        store.add_member_rules(Customer, "age", RangeRule(0, 150))
        context = ValidationContext(Customer("Ann", 30), member_name="age")

        assert RuleStore().member_rules(context) == []
        assert len(store.member_rules(context)) == 1

    def test_member_rules_need_member_name(self, store):
        """Test that a context without a member is rejected."""
        with pytest.raises(InvalidArgument):
            store.member_rules(ValidationContext(Customer("Ann", 30)))


class TestMemberType:
    """Test declared member type resolution."""

    def test_annotated_type_is_stripped(self, store):
        """Test that Annotated wrappers are removed."""
        context = ValidationContext(Customer("Ann", 30), member_name="name")
        assert store.member_type(context) is str

    def test_plain_annotation(self, store):
        """Test an annotation with no rules."""
        context = ValidationContext(Customer("Ann", 30), member_name="notes")
        assert store.member_type(context) == Optional[str]

    def test_property_return_annotation(self, store):
        """Test that properties report their return type."""
        context = ValidationContext(Thermostat(20.0), member_name="label")
        assert store.member_type(context) is str

    def test_registered_member_without_annotation(self, store):
        """Test that an unannotated registered member accepts anything."""
        store.add_member_rules(Thermostat, "mode", RequiredRule())
        context = ValidationContext(Thermostat(20.0), member_name="mode")
        assert store.member_type(context) is Any

    def test_unknown_member(self, store):
        """Test that a missing member is an argument error."""
        with pytest.raises(InvalidArgument):
            store.member_type(ValidationContext(Thermostat(20.0), member_name="humidity"))


class TestMembersOf:
    """Test member enumeration."""

    def test_only_members_with_rules(self, store):
        """Test that members without rules are omitted."""
        assert store.members_of(Customer("Ann", 30)) == [("name", "Ann")]

    def test_annotated_inside_optional(self, store):
        """Test that rules on an Optional-wrapped Annotated member are found."""
        assert store.members_of(Listing("abcdef")) == [("title", "abcdef")]

        context = ValidationContext(Listing(), member_name="title")
        assert store.member_rules(context) == [TITLE_LENGTH]
        assert store.member_type(context) == Optional[Annotated[str, TITLE_LENGTH]]

    def test_registered_members_after_annotated(self, store):
        """Test ordering of annotated and registration-only members."""
        store.add_member_rules(Thermostat, "mode", RequiredRule())
        store.add_member_rules(Thermostat, "label", LengthRule(max_length=40))

        members = store.members_of(Thermostat(20.0, mode="eco"))

        assert members == [("target", 20.0), ("mode", "eco"), ("label", "thermostat (eco)")]

    def test_subclass_members(self, store):
        """Test that inherited annotated members are enumerated."""
        names = [name for name, _ in store.members_of(VipCustomer("Ann", 30, tier=2))]
        assert names == ["name", "tier"]

    def test_unset_member_reads_as_none(self, store):
        """Test that a declared but unset attribute is treated as absent."""
        assert store.members_of(Thermostat()) == [("target", None)]

    def test_rules_added_later_are_seen(self, store):
        """Test that nothing about a type is cached between calls."""
        customer = Customer("Ann", 30)
        assert [n for n, _ in store.members_of(customer)] == ["name"]

        store.add_member_rules(Customer, "age", RangeRule(0, 150))
        assert [n for n, _ in store.members_of(customer)] == ["name", "age"]
