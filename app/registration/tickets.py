"""Identifier generation for tickets and events."""
import secrets
import string
from uuid import uuid4

# URL-safe alphabet, 64 symbols
TICKET_CODE_ALPHABET = string.ascii_letters + string.digits + "_-"
TICKET_CODE_LENGTH = 18

EVENT_ID_ALPHABET = string.digits + string.ascii_uppercase + string.ascii_lowercase
EVENT_ID_LENGTH = 12


def _random_code(alphabet: str, length: int) -> str:
    return "".join(secrets.choice(alphabet) for _ in range(length))


def new_ticket() -> tuple[str, str]:
    """Return a fresh ``(ticket_id, ticket_code)`` pair.

    The id is an opaque UUID used in ticket URLs; the code is what gets
    printed on the ticket and scanned at the door.
    """
    return str(uuid4()), _random_code(TICKET_CODE_ALPHABET, TICKET_CODE_LENGTH)


def new_event_id() -> str:
    """Short public identifier for an event."""
    return _random_code(EVENT_ID_ALPHABET, EVENT_ID_LENGTH)
