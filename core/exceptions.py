"""
Domain exceptions.

Each exception carries the HTTP status the API answers with; the handler in
main.py turns them into ``{"detail": ...}`` responses.
"""


class BookingCoreError(Exception):
    status_code = 400
    default_detail = "Invalid operation."

    def __init__(self, detail=None):
        self.detail = detail or self.default_detail
        super().__init__(self.detail)


class DuplicateDateError(BookingCoreError):
    status_code = 409
    default_detail = "Date already exists. Please choose a different date."

    def __init__(self, date: str):
        self.date = date
        super().__init__(f"Date {date} already exists. Please choose a different date.")


class DuplicateTimeError(BookingCoreError):
    status_code = 409
    default_detail = "Time slot already exists for this date."

    def __init__(self, date: str, time: str):
        self.date = date
        self.time = time
        super().__init__(f"Time slot {time} already exists for {date}.")


class MissingRequiredFieldError(BookingCoreError):
    status_code = 400

    def __init__(self, field: str, message: str = None):
        self.field = field
        super().__init__(message or f"{field} is required")


class InvalidStatusError(BookingCoreError):
    status_code = 400

    def __init__(self, status: str):
        self.status = status
        super().__init__(f"Unknown booking status '{status}'.")


class DateNotFoundError(BookingCoreError):
    status_code = 404
    default_detail = "Date not found."


class SlotNotFoundError(BookingCoreError):
    status_code = 404
    default_detail = "Time slot not found."


class CapacityExceededError(BookingCoreError):
    status_code = 400

    def __init__(self, requested: int, available: int):
        self.requested = requested
        self.available = available
        super().__init__(f"Only {available} spots left, {requested} requested.")


class StoreUnavailableError(BookingCoreError):
    status_code = 503
    default_detail = "Storage temporarily unavailable, try again later."
