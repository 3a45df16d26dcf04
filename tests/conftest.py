"""Shared fixtures for the validator test suite."""

import pytest

from conditional_validator.config import Settings
from conditional_validator.engine import Validator
from conditional_validator.metadata import RuleStore


@pytest.fixture
def settings():
    """Settings that ignore the environment's engine defaults."""
    return Settings(VALIDATE_ALL_MEMBERS=False)


@pytest.fixture
def store():
    """An empty, isolated rule store."""
    return RuleStore()


@pytest.fixture
def engine(store, settings):
    """Validator bound to the isolated store."""
    return Validator(store=store, settings=settings)
