"""Domain exceptions, mapped to HTTP responses by the handler in main.py"""


class GlamflowError(Exception):
    """Base error carrying the HTTP status it should surface as"""

    status_code = 500

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class StoreUnavailableError(GlamflowError):
    """The record store could not be reached, timed out or refused the call"""

    status_code = 503


class BookingValidationError(GlamflowError):
    status_code = 422


class SlotUnavailableError(GlamflowError):
    """Slot is blocked or already held by a non-cancelled appointment"""

    status_code = 409


class InvalidTransitionError(GlamflowError):
    status_code = 409


class AppointmentNotFoundError(GlamflowError):
    status_code = 404


class BookingClosedError(GlamflowError):
    status_code = 503
