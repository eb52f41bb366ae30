"""
Contact Form Exceptions

Failures surfaced by the contact submission flow. Validation problems are
returned as a list of messages rather than raised.
"""


class ContactError(Exception):
    """Base class for contact form errors."""
    pass


class DispatchError(ContactError):
    """Raised when the email backend fails to deliver a composed message."""

    def __init__(self, message, original=None):
        super().__init__(message)
        self.original = original


class RateLimitExceeded(ContactError):
    """Raised when a client has used up its submissions for the current window."""

    def __init__(self, retry_after):
        super().__init__(f"Rate limit exceeded, retry after {retry_after}s")
        self.retry_after = retry_after
