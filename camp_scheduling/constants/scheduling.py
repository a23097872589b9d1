# camp_scheduling/constants/scheduling.py
"""
Constants for slot, booking, session and recurrence values.

Provides type-safe constants to replace hardcoded strings throughout the codebase.
"""


class SlotStatus:
    """Availability slot status values. Derived from the booking count."""
    AVAILABLE = "available"
    BOOKED = "booked"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.AVAILABLE, cls.BOOKED]

    @classmethod
    def for_count(cls, confirmed: int, max_bookings: int) -> str:
        """Status a slot must have when it holds `confirmed` bookings."""
        return cls.BOOKED if confirmed >= max_bookings else cls.AVAILABLE


class BookingStatus:
    """Slot booking status values. CONFIRMED -> CANCELLED is one-way."""
    CONFIRMED = "confirmed"
    CANCELLED = "cancelled"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.CONFIRMED, cls.CANCELLED]


class SessionStatus:
    ACTIVE = "active"
    CANCELLED = "cancelled"
    RESCHEDULED = "rescheduled"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.ACTIVE, cls.CANCELLED, cls.RESCHEDULED]


class ExceptionStatus:
    """Schedule exception status values."""
    ACTIVE = "active"
    CANCELLED = "cancelled"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.ACTIVE, cls.CANCELLED]


class PatternType:
    ALL_DAYS = "all_days"
    WEEKDAYS = "weekdays"
    WEEKENDS = "weekends"
    SPECIFIC_DAYS = "specific_days"
    CUSTOM = "custom"

    @classmethod
    def all_values(cls) -> list[str]:
        return [
            cls.ALL_DAYS,
            cls.WEEKDAYS,
            cls.WEEKENDS,
            cls.SPECIFIC_DAYS,
            cls.CUSTOM,
        ]


class RepeatType:
    DAILY = "daily"
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    CUSTOM = "custom"

    @classmethod
    def all_values(cls) -> list[str]:
        return [cls.DAILY, cls.WEEKLY, cls.BIWEEKLY, cls.CUSTOM]


# Days of week are stored 0=Sunday .. 6=Saturday
SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)
