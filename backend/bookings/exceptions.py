class BookingError(Exception):
    """Base class for failures in the booking-and-payment workflow."""

    default_message = "Booking failed."

    def __init__(self, message: str = ""):
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self):
        return self.message


class ValidationError(BookingError):
    default_message = "Invalid booking request."


class NotFoundError(BookingError):
    default_message = "Hotel not found"


class AuthenticationError(BookingError):
    default_message = "Not authenticated"


class PaymentProcessorError(BookingError):
    default_message = "Payment processor error."


class PersistenceError(BookingError):
    default_message = "Booking could not be saved."


class WorkflowStateError(BookingError):
    default_message = "Operation not allowed in the current booking state."
