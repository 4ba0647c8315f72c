"""Errors raised by registration, approval and event management.

Every error carries the HTTP status and a stable machine-readable code, so the
single handler in ``app.main`` can render it without routes catching anything.
"""


class RegistrationError(Exception):
    """Base class for expected, user-facing failures."""

    status_code = 500
    code = "ERROR"
    message = "Request failed"

    def __init__(self, message: str | None = None):
        self.message = message or self.message
        super().__init__(self.message)


# Not found


class NotFoundError(RegistrationError):
    status_code = 404
    code = "NOT_FOUND"
    message = "Not found"


class EventNotFoundError(NotFoundError):
    code = "EVENT_NOT_FOUND"
    message = "Event not found"


class AttendeeNotFoundError(NotFoundError):
    code = "ATTENDEE_NOT_FOUND"
    message = "Attendee not found"


class UserNotFoundError(NotFoundError):
    code = "USER_NOT_FOUND"
    message = "User not found"


class AdminNotFoundError(NotFoundError):
    code = "ADMIN_NOT_FOUND"
    message = "Admin not found"


class TicketNotFoundError(NotFoundError):
    code = "TICKET_NOT_FOUND"
    message = "Invalid ticket"


# Authorization


class UnauthorizedError(RegistrationError):
    status_code = 403
    code = "UNAUTHORIZED"
    message = "Unauthorized access to event"


# Business rules


class BusinessRuleError(RegistrationError):
    status_code = 400
    code = "BUSINESS_RULE"


class EventFullError(BusinessRuleError):
    code = "EVENT_FULL"
    message = "Event has reached maximum capacity"


class AlreadyRegisteredError(BusinessRuleError):
    code = "ALREADY_REGISTERED"
    message = "You are already registered for this event"


class AttendeeNotApprovedError(BusinessRuleError):
    code = "ATTENDEE_NOT_APPROVED"
    message = "Attendee is not approved"


class InvalidEventTypeError(BusinessRuleError):
    code = "INVALID_EVENT_TYPE"
    message = "Check-in is only available for venue events"


class AlreadyTeamMemberError(BusinessRuleError):
    code = "ALREADY_TEAM_MEMBER"
    message = "User is already in the event team"


# User input


class InvalidEventDataError(RegistrationError):
    status_code = 400
    code = "INVALID_INPUT"
    message = "Invalid input data"
