"""
Unit tests for PasswordPolicy
"""
import bcrypt
import pytest

from account_security.app.services.password_policy import PasswordPolicy


@pytest.fixture
def policy():
    return PasswordPolicy(work_factor=4)


@pytest.mark.parametrize(
    "password",
    ["Password1", "Abcdefg1", "P@ssw0rd!", "correctHorse9battery"],
)
def test_strong_passwords_are_valid(policy, password):
    result = policy.validate(password)

    assert result.valid is True
    assert result.message == "Password meets requirements"


@pytest.mark.parametrize(
    "password",
    [
        "short1",  # too short, no uppercase
        "Abcdef1",  # 7 characters
        "alllowercase1",  # no uppercase
        "ALLUPPERCASE1",  # no lowercase
        "NoDigitsHere",  # no digit
        "",
    ],
)
def test_weak_passwords_are_rejected(policy, password):
    result = policy.validate(password)

    assert result.valid is False
    assert "at least 8 characters" in result.message


def test_special_character_is_reported_but_not_required(policy):
    """Special characters show up in the requirements yet never block a password"""
    without_special = policy.validate("Password1")
    with_special = policy.validate("Password1!")

    assert without_special.valid is True
    assert without_special.requirements.has_special is False
    assert with_special.requirements.has_special is True


def test_requirements_describe_each_rule(policy):
    requirements = policy.validate("short1").requirements

    assert requirements.min_length == 8
    assert requirements.has_upper is False
    assert requirements.has_lower is True
    assert requirements.has_digit is True
    assert requirements.has_special is False


def test_hash_is_bcrypt_with_configured_cost(policy):
    hashed = policy.hash("Password1")

    assert hashed.startswith("$2b$04$")
    assert len(hashed) == 60
    assert bcrypt.checkpw("Password1".encode("utf-8"), hashed.encode("utf-8"))


def test_hash_is_salted(policy):
    assert policy.hash("Password1") != policy.hash("Password1")
