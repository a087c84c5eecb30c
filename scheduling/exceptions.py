"""
Validation errors raised when a session form cannot be turned into a time window,
or when subscription details fail the form checks.
"""


class SessionValidationError(ValueError):
    """Base class for rejected session form submissions."""

    code = 'invalid_session'
    default_message = 'Invalid session.'

    def __init__(self, message=None):
        self.message = message or self.default_message
        super().__init__(self.message)


class EmptyName(SessionValidationError):
    """Session name is blank after trimming."""

    code = 'empty_name'
    default_message = 'Session name is required'


class InvalidTimeOrder(SessionValidationError):
    """End time is not strictly after start time."""

    code = 'invalid_time_order'
    default_message = 'End time must be after start time'


class SubscriptionValidationError(ValueError):
    """Subscription details failed the form checks; errors is keyed by field."""

    code = 'invalid_subscription'

    def __init__(self, errors, message='Please fix the errors in the form'):
        self.errors = errors
        self.message = message
        super().__init__(message)
