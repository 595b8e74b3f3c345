# blog_api/utils/datetime_utils.py
"""
Centralised date/time helpers used across the project.

Every timestamp the backend writes is a timezone-aware UTC datetime so that
Firestore stores it as a proper Timestamp, and every timestamp read back from
Firestore is normalised to the same form before it reaches a service.
"""

import logging
from datetime import datetime, date, time, timezone
from typing import Any

logger = logging.getLogger(__name__)


class DateTimeUtils:
    """Date/time helpers shared by repositories, services and schemas."""

    @staticmethod
    def now() -> datetime:
        """Current time as a UTC timezone-aware datetime."""
        return datetime.now(timezone.utc)

    @staticmethod
    def for_firestore(obj: Any) -> Any:
        """
        Prepare a value for a Firestore write.

        - date -> datetime at 00:00 UTC
        - naive datetime -> UTC aware datetime
        - dict / list values are converted recursively
        """
        if isinstance(obj, datetime):
            if obj.tzinfo is None:
                return obj.replace(tzinfo=timezone.utc)
            return obj.astimezone(timezone.utc)

        if isinstance(obj, date):
            return datetime.combine(obj, time.min).replace(tzinfo=timezone.utc)

        if isinstance(obj, dict):
            return {k: DateTimeUtils.for_firestore(v) for k, v in obj.items()}

        if isinstance(obj, list):
            return [DateTimeUtils.for_firestore(item) for item in obj]

        return obj

    @staticmethod
    def from_firestore(obj: Any) -> Any:
        """
        Normalise a value read from Firestore.

        Firestore hands back ``DatetimeWithNanoseconds`` (a datetime subclass);
        these are turned into plain UTC datetimes. dict / list values are
        converted recursively. Values that fail to convert are returned as is.
        """
        try:
            if isinstance(obj, datetime):
                if obj.tzinfo is None:
                    obj = obj.replace(tzinfo=timezone.utc)
                dt = obj.astimezone(timezone.utc)
                return datetime(
                    dt.year, dt.month, dt.day,
                    dt.hour, dt.minute, dt.second, dt.microsecond,
                    tzinfo=timezone.utc
                )

            if isinstance(obj, dict):
                return {k: DateTimeUtils.from_firestore(v) for k, v in obj.items()}

            if isinstance(obj, list):
                return [DateTimeUtils.from_firestore(item) for item in obj]

            return obj
        except Exception as e:
            logger.error(f"Firestore read conversion failed: {obj} ({type(obj)}) - {e}")
            return obj


def now() -> datetime:
    """Current UTC time."""
    return DateTimeUtils.now()


def for_firestore(obj: Any) -> Any:
    return DateTimeUtils.for_firestore(obj)


def from_firestore(obj: Any) -> Any:
    return DateTimeUtils.from_firestore(obj)
