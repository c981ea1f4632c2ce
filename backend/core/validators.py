"""
Password validators used by AUTH_PASSWORD_VALIDATORS
"""
import re

from django.core.exceptions import ValidationError


class PasswordComplexityValidator:
    """
    Require at least one uppercase letter, one lowercase letter, one digit
    and one special character. Length is enforced by MinimumLengthValidator.
    """

    rules = [
        (r'[A-Z]', 'password_no_upper', 'Password must contain at least one uppercase letter'),
        (r'[a-z]', 'password_no_lower', 'Password must contain at least one lowercase letter'),
        (r'[0-9]', 'password_no_digit', 'Password must contain at least one number'),
        (r'[^A-Za-z0-9]', 'password_no_special', 'Password must contain at least one special character'),
    ]

    def validate(self, password, user=None):
        errors = [
            ValidationError(message, code=code)
            for pattern, code, message in self.rules
            if not re.search(pattern, password or '')
        ]
        if errors:
            raise ValidationError(errors)

    def get_help_text(self):
        return 'Your password must contain uppercase and lowercase letters, a number and a special character.'
