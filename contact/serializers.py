"""
Contact Form Serializers

Field rules for the public contact form. Every failure of a field maps to a
single plain-language message so the validator can report one line per field.
"""
from rest_framework import serializers


PHONE_REGEX = r'^[0-9\s+\-()]{8,}$'
EMAIL_REGEX = r'^[^\s@]+@[^\s@]+\.[^\s@]+$'

CONSENT_VALUES = ('on', 'true', 'yes', '1')


def _messages(missing, invalid=None):
    """Build an error_messages dict where every failure mode has a fixed text."""
    invalid = invalid or missing
    return {
        'required': missing,
        'null': missing,
        'blank': missing,
        'not_a_string': missing,
        'invalid': invalid,
        'min_length': invalid,
        'max_length': invalid,
    }


class StrictCharField(serializers.CharField):
    """
    CharField that only accepts real strings.

    DRF's CharField coerces numbers to text; a number where text is expected
    counts as a missing value here.
    """

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('not_a_string')
        return super().to_internal_value(data)


class StrictRegexField(serializers.RegexField):
    """RegexField with the same string-only rule as StrictCharField."""

    def to_internal_value(self, data):
        if not isinstance(data, str):
            self.fail('not_a_string')
        return super().to_internal_value(data)


class ConsentField(serializers.Field):
    """Accepts only an explicit affirmative: True, or 'on'/'true'/'yes'/'1'."""

    default_error_messages = {
        'required': 'You must agree to be contacted',
        'null': 'You must agree to be contacted',
        'invalid': 'You must agree to be contacted',
    }

    def to_internal_value(self, data):
        if data is True:
            return True
        if isinstance(data, str) and data.strip().lower() in CONSENT_VALUES:
            return True
        self.fail('invalid')

    def to_representation(self, value):
        return bool(value)


class ContactFormSubmitSerializer(serializers.Serializer):
    """
    Public contact form submission serializer.

    Field declaration order is the order errors are reported in.
    """

    name = StrictCharField(
        min_length=2,
        error_messages=_messages('Name is required and must be at least 2 characters long'),
        help_text="Full name of the person contacting us"
    )

    phone = StrictRegexField(
        PHONE_REGEX,
        error_messages=_messages(
            'Phone number is required',
            invalid='Please enter a valid phone number',
        ),
        help_text="Digits, spaces, +, - and parentheses; at least 8 characters"
    )

    email = StrictRegexField(
        EMAIL_REGEX,
        error_messages=_messages(
            'Email address is required',
            invalid='Please enter a valid email address',
        ),
        help_text="Address the reply will be sent to"
    )

    reason = StrictCharField(
        error_messages=_messages('Please select a reason for contact'),
        help_text="Inquiry category chosen on the form"
    )

    description = StrictCharField(
        min_length=10,
        error_messages=_messages('Message must be at least 10 characters long'),
        help_text="Message content (at least 10 characters)"
    )

    consent = ConsentField(
        help_text="Agreement to be contacted"
    )
