"""
Field checks for the member-facing registration, login and subscription forms.

Each validate_* function returns a ValidationResult keyed by field name.
"""

import re

from .types import ValidationResult


MIN_PASSWORD_LENGTH = 8
MIN_LOGIN_PASSWORD_LENGTH = 6
MIN_NAME_LENGTH = 2

EMAIL_PATTERN = re.compile(r'\S+@\S+\.\S+')
PHONE_PATTERN = re.compile(r'^[\d\s\-+()]+$')


def password_checks(password):
    """
    Report which strength rules a password satisfies.

    Returns:
        Dict with boolean 'length', 'uppercase', 'lowercase' and 'number' keys
    """
    return {
        'length': len(password) >= MIN_PASSWORD_LENGTH,
        'uppercase': re.search(r'[A-Z]', password) is not None,
        'lowercase': re.search(r'[a-z]', password) is not None,
        'number': re.search(r'[0-9]', password) is not None,
    }


def _check_email(email, errors):
    if not email.strip():
        errors['email'] = 'Email is required'
    elif not EMAIL_PATTERN.search(email):
        errors['email'] = 'Please enter a valid email'


def validate_registration(name, email, password, confirm_password):
    errors = {}

    if not name.strip():
        errors['name'] = 'Name is required'
    elif len(name.strip()) < MIN_NAME_LENGTH:
        errors['name'] = f'Name must be at least {MIN_NAME_LENGTH} characters'

    _check_email(email, errors)

    if not password:
        errors['password'] = 'Password is required'
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors['password'] = f'Password must be at least {MIN_PASSWORD_LENGTH} characters'

    if not confirm_password:
        errors['confirm_password'] = 'Please confirm your password'
    elif password != confirm_password:
        errors['confirm_password'] = 'Passwords do not match'

    return ValidationResult(errors=errors)


def validate_login(email, password):
    errors = {}
    _check_email(email, errors)

    if not password:
        errors['password'] = 'Password is required'
    elif len(password) < MIN_LOGIN_PASSWORD_LENGTH:
        errors['password'] = f'Password must be at least {MIN_LOGIN_PASSWORD_LENGTH} characters'

    return ValidationResult(errors=errors)


def validate_subscription(full_name, phone, gender, date_of_birth, payment_method):
    """Check the personal details entered when subscribing to a plan."""
    errors = {}

    if not full_name.strip():
        errors['full_name'] = 'Full name is required'

    if not phone.strip():
        errors['phone'] = 'Phone number is required'
    elif not PHONE_PATTERN.match(phone):
        errors['phone'] = 'Enter a valid phone number'

    if not gender:
        errors['gender'] = 'Please select your gender'
    if not date_of_birth:
        errors['date_of_birth'] = 'Date of birth is required'
    if not payment_method:
        errors['payment_method'] = 'Select a payment method'

    return ValidationResult(errors=errors)
