# camp_scheduling/crud/__init__.py

from .crud_camp import camp
from .crud_availability_slot import availability_slot
from .crud_slot_booking import slot_booking
from .crud_recurrence_pattern import recurrence_pattern
from .crud_camp_session import camp_session
from .crud_schedule import schedule
