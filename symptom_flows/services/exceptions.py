"""
Service Layer Exceptions

Custom exceptions for the FlowService and related orchestration logic.
"""


class FlowNotFoundError(Exception):
    """Raised when no flow configuration exists for the requested ID."""
    pass


class SessionNotFoundError(Exception):
    """Raised when a flow session does not exist or has already finished."""
    pass


class FieldNotRenderedError(Exception):
    """Raised when a change targets a field that is not rendered on the current step."""
    pass


class InvalidFieldChangeError(Exception):
    """Raised when a field change or action does not match what the field accepts."""
    pass
