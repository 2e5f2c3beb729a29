"""
Pytest configuration and fixtures for admitguard tests

This module provides shared fixtures for unit and integration tests.
"""
import os
from typing import Any

import pytest

from admitguard.core.models import RuleSet
from admitguard.core.rules import load_default_rule_set
from admitguard.intake import IntakeSession
from admitguard.storage.audit import SubmissionRecorder
from admitguard.storage.kv_store import InMemoryStore, JsonFileStore


# =======================
# PYTEST CONFIGURATION
# =======================

def pytest_configure(config):
    """Configure pytest with custom markers"""
    config.addinivalue_line(
        "markers", "unit: Unit tests that don't require external services"
    )
    config.addinivalue_line(
        "markers", "integration: Integration tests that touch the filesystem or the CLI"
    )


# =======================
# RULE FIXTURES
# =======================

@pytest.fixture(scope="session")
def rule_set() -> RuleSet:
    """
    Packaged default rule set

    Returns:
        RuleSet loaded from default_rules.yaml
    """
    return load_default_rule_set()


# =======================
# STORAGE FIXTURES
# =======================

@pytest.fixture(scope="function")
def memory_store() -> InMemoryStore:
    """Empty in-memory key-value store"""
    return InMemoryStore()


@pytest.fixture(scope="function")
def file_store(tmp_path) -> JsonFileStore:
    """
    JSON file store in a temporary directory

    Args:
        tmp_path: pytest tmp_path fixture

    Returns:
        JsonFileStore whose file does not exist yet
    """
    return JsonFileStore(tmp_path / "store.json")


@pytest.fixture(scope="function")
def recorder(memory_store) -> SubmissionRecorder:
    return SubmissionRecorder(memory_store)


# =======================
# FORM FIXTURES
# =======================

@pytest.fixture(scope="function")
def valid_form() -> dict[str, Any]:
    """
    Form values that pass every rule without warnings

    Returns:
        Field name -> raw value
    """
    return {
        "full_name": "Asha Verma",
        "email": "asha@example.com",
        "phone": "9876543210",
        "dob": "2000-05-10",
        "qualification": "B.Tech",
        "grad_year": "2020",
        "score": "75",
        "screening_score": "65",
        "status": "Cleared",
        "aadhaar": "123456789012",
        "offer_sent": False,
    }


@pytest.fixture(scope="function")
def session(rule_set, valid_form) -> IntakeSession:
    """Intake session pre-filled with the valid form"""
    intake = IntakeSession(rule_set)
    intake.update(valid_form)
    return intake


# =======================
# CONFIGURATION FIXTURES
# =======================

@pytest.fixture(scope="session")
def test_env_vars():
    """
    Set test environment variables

    This fixture loads config/test.env and sets environment variables
    """
    from dotenv import load_dotenv

    env_path = os.path.join(
        os.path.dirname(os.path.dirname(__file__)),
        "config",
        "test.env"
    )

    if os.path.exists(env_path):
        load_dotenv(env_path, override=True)
