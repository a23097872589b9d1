# camp_scheduling/core/exceptions.py
"""
Error taxonomy for the scheduling and booking core.

Every rejected operation surfaces as a SchedulingError subclass carrying a
stable error code, a human readable message and the HTTP status the API
layer answers with. Store-level failures are not wrapped here; they
propagate as-is and become opaque 500s.
"""

from typing import Optional


class SchedulingError(Exception):
    """Base exception for all classified scheduling failures."""

    def __init__(
        self,
        message: str,
        error_code: str = "SCHEDULING_ERROR",
        status_code: int = 400,
        details: Optional[dict] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(SchedulingError):
    """An entity id did not resolve."""

    def __init__(self, entity: str, entity_id: str):
        super().__init__(
            message=f"{entity} {entity_id} not found",
            error_code="NOT_FOUND",
            status_code=404,
            details={"entity": entity, "id": entity_id},
        )


class InvalidWindowError(SchedulingError):
    """End time is not after start time."""

    def __init__(self, start_time, end_time):
        super().__init__(
            message="End time must be after start time",
            error_code="INVALID_WINDOW",
            details={"start_time": str(start_time), "end_time": str(end_time)},
        )


class InvalidPatternError(SchedulingError):
    """A recurrence pattern violates its own invariants."""

    def __init__(self, message: str):
        super().__init__(message=message, error_code="INVALID_PATTERN")


class SlotNotAvailableError(SchedulingError):
    def __init__(self, slot_id: str, status: str):
        super().__init__(
            message="Slot is not available for booking",
            error_code="NOT_AVAILABLE",
            details={"slot_id": slot_id, "status": status},
        )


class SlotFullError(SchedulingError):
    def __init__(self, slot_id: str, max_bookings: int):
        super().__init__(
            message="Slot is already fully booked",
            error_code="FULL",
            details={"slot_id": slot_id, "max_bookings": max_bookings},
        )


class DuplicateBookingError(SchedulingError):
    def __init__(self, slot_id: str, child_id: str):
        super().__init__(
            message="Child already has a confirmed booking for this slot",
            error_code="DUPLICATE_BOOKING",
            details={"slot_id": slot_id, "child_id": child_id},
        )


class AlreadyCancelledError(SchedulingError):
    def __init__(self, booking_id: str):
        super().__init__(
            message="Booking is already cancelled",
            error_code="ALREADY_CANCELLED",
            details={"booking_id": booking_id},
        )


class SlotHasBookingsError(SchedulingError):
    def __init__(self, slot_id: str, current_bookings: int):
        super().__init__(
            message="Cannot delete a slot with existing bookings. Cancel the bookings first.",
            error_code="HAS_BOOKINGS",
            details={"slot_id": slot_id, "current_bookings": current_bookings},
        )


class CapacityBelowBookingsError(SchedulingError):
    def __init__(self, slot_id: str, requested: int, confirmed: int):
        super().__init__(
            message=(
                f"Cannot set capacity to {requested}: slot already has "
                f"{confirmed} confirmed bookings"
            ),
            error_code="CAPACITY_BELOW_BOOKINGS",
            details={
                "slot_id": slot_id,
                "requested": requested,
                "confirmed": confirmed,
            },
        )
