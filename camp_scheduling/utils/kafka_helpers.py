# camp_scheduling/utils/kafka_helpers.py
"""
Kafka helper functions for publishing booking events to the messaging service.
Uses the singleton producer from camp_scheduling.core.kafka_producer.
"""
import logging
from datetime import datetime, timezone
from typing import Optional

from camp_scheduling.core.config import settings
from camp_scheduling.core.kafka_producer import get_kafka_singleton

logger = logging.getLogger(__name__)

SLOT_BOOKED = "SLOT_BOOKED"
SLOT_BOOKING_CANCELLED = "SLOT_BOOKING_CANCELLED"
SLOT_BOOKING_RESCHEDULED = "SLOT_BOOKING_RESCHEDULED"


def publish_slot_booking_event(
    event_type: str,
    *,
    booking_id: str,
    slot_id: Optional[str],
    camp_id: Optional[str],
    child_id: str,
    parent_id: str,
    slot_date: Optional[str] = None,
    start_time: Optional[str] = None,
    end_time: Optional[str] = None,
    cancel_reason: Optional[str] = None,
    rescheduled_from_id: Optional[str] = None,
) -> bool:
    """
    Publish a booking lifecycle event for the messaging service.

    Fire-and-forget: a missing producer or a failed send is logged and
    reported as False, never raised, so a booking is never undone by a
    notification problem.

    Returns:
        bool: True if published successfully, False otherwise
    """
    try:
        producer = get_kafka_singleton()

        if producer is None:
            logger.warning(f"Kafka producer unavailable, skipping {event_type} for booking {booking_id}")
            return False

        event_data = {
            "type": event_type,
            "bookingId": booking_id,
            "slotId": slot_id,
            "campId": camp_id,
            "childId": child_id,
            "parentId": parent_id,
            "slotDate": slot_date,
            "startTime": start_time,
            "endTime": end_time,
            "cancelReason": cancel_reason,
            "rescheduledFromId": rescheduled_from_id,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

        future = producer.send(settings.SLOT_EVENTS_TOPIC, value=event_data)
        # Best-effort delivery: wait briefly for confirmation but don't block long
        future.get(timeout=5)

        logger.info(f"Published {event_type} event for booking {booking_id}")
        return True

    except Exception as e:
        logger.error(f"Failed to publish {event_type} event for booking {booking_id}: {e}", exc_info=True)
        return False


def booking_event_kwargs(booking, slot) -> dict:
    """Flatten a booking and its slot into publish_slot_booking_event kwargs."""
    return {
        "booking_id": booking.id,
        "slot_id": booking.slot_id,
        "camp_id": slot.camp_id if slot is not None else None,
        "child_id": booking.child_id,
        "parent_id": booking.parent_id,
        "slot_date": slot.slot_date.isoformat() if slot is not None else None,
        "start_time": slot.start_time.isoformat() if slot is not None else None,
        "end_time": slot.end_time.isoformat() if slot is not None else None,
        "cancel_reason": booking.cancel_reason,
        "rescheduled_from_id": booking.rescheduled_from_id,
    }
