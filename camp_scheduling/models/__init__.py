# camp_scheduling/models/__init__.py
# Importing every model here registers it on Base.metadata.

from .camp import Camp
from .camp_schedule import CampSchedule
from .schedule_exception import ScheduleException
from .recurrence_pattern import RecurrencePattern
from .camp_session import CampSession
from .availability_slot import AvailabilitySlot
from .slot_booking import SlotBooking
