"""
Password Policy

Strength validation and bcrypt hashing for new passwords.
"""

import re

import bcrypt
from pydantic import BaseModel

MIN_PASSWORD_LENGTH = 8
SPECIAL_CHARACTERS = re.compile(r'[!@#$%^&*(),.?":{}|<>]')


class PasswordRequirements(BaseModel):
    """Which rules a candidate password satisfies"""

    min_length: int
    has_upper: bool
    has_lower: bool
    has_digit: bool
    has_special: bool


class PasswordValidationResult(BaseModel):
    valid: bool
    requirements: PasswordRequirements
    message: str


class PasswordPolicy:
    """
    Password strength rules.

    Business Rules:
    - At least 8 characters
    - Uppercase, lowercase and digit are required
    - Special characters are reported but NOT required for validity
    - Accepted passwords are hashed with bcrypt (cost factor 12 by default)
    """

    def __init__(self, work_factor: int = 12):
        self.work_factor = work_factor

    def validate(self, password: str) -> PasswordValidationResult:
        requirements = PasswordRequirements(
            min_length=MIN_PASSWORD_LENGTH,
            has_upper=re.search(r"[A-Z]", password) is not None,
            has_lower=re.search(r"[a-z]", password) is not None,
            has_digit=re.search(r"\d", password) is not None,
            has_special=SPECIAL_CHARACTERS.search(password) is not None,
        )

        valid = (
            len(password) >= MIN_PASSWORD_LENGTH
            and requirements.has_upper
            and requirements.has_lower
            and requirements.has_digit
        )

        return PasswordValidationResult(
            valid=valid,
            requirements=requirements,
            message=(
                "Password meets requirements"
                if valid
                else "Password must be at least 8 characters long and contain "
                "uppercase, lowercase, and numbers"
            ),
        )

    def hash(self, password: str) -> str:
        return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt(self.work_factor)).decode(
            "utf-8"
        )
