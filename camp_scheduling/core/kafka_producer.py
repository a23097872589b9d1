# camp_scheduling/core/kafka_producer.py

import json
import logging
import threading
from typing import Optional

from kafka import KafkaProducer
from kafka.errors import KafkaError

from camp_scheduling.core.config import settings

logger = logging.getLogger(__name__)

_producer: Optional[KafkaProducer] = None
_producer_lock = threading.Lock()


def get_kafka_singleton() -> Optional[KafkaProducer]:
    """
    Return the process-wide Kafka producer, creating it on first use.

    Returns None when no bootstrap servers are configured or the brokers
    cannot be reached, so callers can skip publishing.
    """
    global _producer

    if _producer is not None:
        return _producer

    if not settings.KAFKA_BOOTSTRAP_SERVERS:
        return None

    with _producer_lock:
        if _producer is None:
            try:
                _producer = KafkaProducer(
                    bootstrap_servers=settings.KAFKA_BOOTSTRAP_SERVERS,
                    value_serializer=lambda v: json.dumps(v, default=str).encode("utf-8"),
                    # Fail fast so a dead broker never stalls a request
                    request_timeout_ms=5000,
                )
            except KafkaError as e:
                logger.error(f"Could not create Kafka producer: {e}", exc_info=True)
                return None
    return _producer
