"""
Contact Form Validation

Sanitizing and validating raw contact form input. Both functions are pure:
they never touch the network, the cache or the mail backend.
"""
from collections.abc import Mapping

from .serializers import ContactFormSubmitSerializer


DEFAULT_MAX_FIELD_LENGTH = 1000


def _as_dict(data):
    """Flatten request data (dict or QueryDict) into a plain dict."""
    if not isinstance(data, Mapping):
        return {}
    if hasattr(data, 'dict'):
        # QueryDict: keep the last value submitted for each key
        return data.dict()
    return dict(data)


def sanitize_submission(data, max_length=DEFAULT_MAX_FIELD_LENGTH):
    """
    Trim every text value and cut it to ``max_length`` characters.

    Non-text values pass through unchanged. Returns a new dict.
    """
    sanitized = {}
    for key, value in _as_dict(data).items():
        if isinstance(value, str):
            sanitized[key] = value.strip()[:max_length]
        else:
            sanitized[key] = value
    return sanitized


def validate_contact_form(data):
    """
    Return the list of problems with a contact form submission.

    Messages follow field order (name, phone, email, reason, description,
    consent), one per failing field. An empty list means the submission is
    valid. Missing or wrongly typed values fail their own field's rule.
    """
    serializer = ContactFormSubmitSerializer(data=_as_dict(data))
    if serializer.is_valid():
        return []

    errors = []
    for field_name in serializer.fields:
        field_errors = serializer.errors.get(field_name)
        if field_errors:
            errors.append(str(field_errors[0]))
    return errors
