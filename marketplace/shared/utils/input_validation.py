# marketplace/shared/utils/input_validation.py

import re
from typing import Optional, Tuple


class InputValidator:
    """
    Validation and normalisation of user input,
    complementing the Pydantic field constraints.
    """

    MIN_USERNAME_LENGTH = 3
    MAX_USERNAME_LENGTH = 50
    MIN_PASSWORD_LENGTH = 8
    MAX_PASSWORD_LENGTH = 72  # bcrypt ignores anything past 72 bytes
    MAX_EMAIL_LENGTH = 255

    # Letters, digits, dots, underscores and hyphens
    USERNAME_PATTERN = re.compile(r'^[A-Za-z0-9._-]+$')
    EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')

    @classmethod
    def validate_username(cls, username: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a username.

        Args:
            username: Username to validate

        Returns:
            Tuple (valid, error_message)
        """
        if not username or not username.strip():
            return False, "Username cannot be empty"

        if not cls.MIN_USERNAME_LENGTH <= len(username) <= cls.MAX_USERNAME_LENGTH:
            return False, (
                f"Username must be between {cls.MIN_USERNAME_LENGTH} "
                f"and {cls.MAX_USERNAME_LENGTH} characters"
            )

        if not cls.USERNAME_PATTERN.match(username):
            return False, "Username may only contain letters, numbers, '.', '_' and '-'"

        return True, None

    @classmethod
    def validate_password(cls, password: str) -> Tuple[bool, Optional[str]]:
        """
        Validate a password length.

        Args:
            password: Password to validate

        Returns:
            Tuple (valid, error_message)
        """
        if not password:
            return False, "Password cannot be empty"

        if len(password) < cls.MIN_PASSWORD_LENGTH:
            return False, f"Password must be at least {cls.MIN_PASSWORD_LENGTH} characters"

        if len(password.encode("utf-8")) > cls.MAX_PASSWORD_LENGTH:
            return False, f"Password is too long (maximum {cls.MAX_PASSWORD_LENGTH} bytes)"

        return True, None

    @classmethod
    def validate_email(cls, email: str) -> Tuple[bool, Optional[str]]:
        """
        Validate email format and length.

        Args:
            email: Email to validate

        Returns:
            Tuple (valid, error_message)
        """
        if not email:
            return False, "Email cannot be empty"

        if len(email) > cls.MAX_EMAIL_LENGTH:
            return False, f"Email is too long (maximum {cls.MAX_EMAIL_LENGTH} characters)"

        if not cls.EMAIL_PATTERN.match(email):
            return False, "Invalid email format"

        return True, None

    @staticmethod
    def normalize_email(email: str) -> str:
        return email.strip().lower()
