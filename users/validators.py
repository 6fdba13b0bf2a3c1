# ==================== USERS/VALIDATORS.PY ====================
import re

import phonenumbers
from django.conf import settings
from django.core.exceptions import ValidationError
from django.utils.translation import gettext as _

NAME_PATTERN = re.compile(r'^[A-Z][a-zA-Z]*$')
SPECIAL_CHARACTERS = '@$!%*?&'

MIN_AGE = 18
MAX_AGE = 120


def capitalize_first_letter(value):
    if not value:
        return value
    return value[0].upper() + value[1:]


def format_phone_number(value):
    """Keep digits only, at most 10 of them"""
    return re.sub(r'\D', '', value or '')[:10]


def validate_age(age):
    return MIN_AGE <= age <= MAX_AGE


def validate_person_name(value):
    if not value:
        raise ValidationError(_('This field is required.'))
    if not NAME_PATTERN.match(value):
        raise ValidationError(_('First letter must be capital'))


def normalize_phone_number(value):
    """Parse a 10 digit (optionally +91 prefixed) mobile into E.164"""
    digits = re.sub(r'[\s\-()]', '', value or '')
    if digits.startswith('+91'):
        digits = digits[3:]
    if not re.fullmatch(r'\d{10}', digits):
        raise ValidationError(_('Phone number must be 10 digits'))

    try:
        parsed = phonenumbers.parse(digits, settings.PHONE_DEFAULT_REGION)
    except phonenumbers.NumberParseException:
        raise ValidationError(_('Enter a valid phone number'))
    if not phonenumbers.is_valid_number(parsed):
        raise ValidationError(_('Enter a valid phone number'))
    return phonenumbers.format_number(parsed, phonenumbers.PhoneNumberFormat.E164)


def validate_e164_phone(value):
    try:
        parsed = phonenumbers.parse(value, None)
    except phonenumbers.NumberParseException:
        raise ValidationError(_('Enter a valid phone number'))
    if not phonenumbers.is_valid_number(parsed):
        raise ValidationError(_('Enter a valid phone number'))


def password_requirements(password):
    requirements = {
        'length': len(password) >= 8,
        'uppercase': bool(re.search(r'[A-Z]', password)),
        'lowercase': bool(re.search(r'[a-z]', password)),
        'number': bool(re.search(r'\d', password)),
        'special': any(char in SPECIAL_CHARACTERS for char in password),
    }
    return {
        'is_valid': all(requirements.values()),
        'requirements': requirements,
    }


class PasswordComplexityValidator:
    """Require upper and lower case letters, a digit and a special character"""

    message = _(
        'Password must contain at least one uppercase letter, one lowercase letter, '
        'one number, and one special character'
    )

    def validate(self, password, user=None):
        if not password_requirements(password)['is_valid']:
            raise ValidationError(self.message, code='password_too_simple')

    def get_help_text(self):
        return self.message
