
SERVER_ERROR_MESSAGE = "Server error"
CONFLICT_MESSAGE = "This slot is already booked. Please choose a different time."


class SchedulingApiError(RuntimeError):
    """Raised by Scheduling API adapters (HTTP errors, timeouts, bad payloads)."""

    def __init__(self, message: str | None = None, status_code: int | None = None, error_code: str | None = None) -> None:
        super().__init__(message or SERVER_ERROR_MESSAGE)
        self.message = message
        self.status_code = status_code
        self.error_code = error_code


class BookingError(Exception):
    """Base for errors surfaced to the user by the booking lifecycle."""

    def __init__(self, user_message: str) -> None:
        super().__init__(user_message)
        self.user_message = user_message


class ValidationError(BookingError):
    """Required booking fields missing; raised before any network call."""

    def __init__(self, messages: list[str]) -> None:
        super().__init__("Please fill in all required fields:\n" + "\n".join(messages))
        self.messages = list(messages)


class ConflictError(BookingError):
    """Server rejected slot creation because the time is already taken."""

    def __init__(self, server_message: str | None = None) -> None:
        super().__init__(CONFLICT_MESSAGE)
        self.server_message = server_message


class NetworkOrServerError(BookingError):
    """Any other create/pay/cancel failure. The user may retry."""

    def __init__(self, message: str | None = None, status_code: int | None = None) -> None:
        super().__init__(message or SERVER_ERROR_MESSAGE)
        self.status_code = status_code


class CancellationNotAllowed(BookingError):
    """Slot is already cancelled, completed or elapsed."""
    pass
