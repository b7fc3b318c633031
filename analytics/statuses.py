"""
ANALYTICS App - Container Status Derivation

Derives the four operational states of a container relative to a
reference day. Every function here is pure: the same (date, today)
pair always yields the same status and nothing is written back.

Thresholds (days until the event):
    < 0  → reached / overdue
    < 1  → today
    < 4  → soon (3-day window)
    else → default state
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from django.db import models

from jobs.utils import parse_date


SECONDS_PER_DAY = 86400
TODAY_THRESHOLD = 1
SOON_THRESHOLD = 4


class ArrivalStatus(models.TextChoices):
    ARRIVED = 'ARRIVED', 'Arrived'
    ARRIVING_TODAY = 'ARRIVING_TODAY', 'Arriving Today'
    ARRIVING_SOON_3_DAYS = 'ARRIVING_SOON_3_DAYS', 'Arriving Soon'
    PENDING_ARRIVAL = 'PENDING_ARRIVAL', 'Pending'


class RailOutStatus(models.TextChoices):
    COMPLETED = 'COMPLETED', 'Completed'
    SCHEDULED = 'SCHEDULED', 'Scheduled'
    OVERDUE = 'OVERDUE', 'Overdue'
    NOT_SET = 'NOT_SET', 'Not Set'


class DoValidityStatus(models.TextChoices):
    EXPIRED = 'EXPIRED', 'Expired'
    EXPIRES_TODAY = 'EXPIRES_TODAY', 'Expires Today'
    EXPIRES_SOON_3_DAYS = 'EXPIRES_SOON_3_DAYS', 'Expires Soon'
    VALID = 'VALID', 'Valid'


class DetentionStatus(models.TextChoices):
    ON_DETENTION = 'ON_DETENTION', 'On Detention'
    STARTS_TODAY = 'STARTS_TODAY', 'Starts Today'
    STARTS_SOON_3_DAYS = 'STARTS_SOON_3_DAYS', 'Starts Soon'
    SAFE = 'SAFE', 'Safe'


@dataclass(frozen=True)
class ContainerStatus:
    """Derived status of one container on a given day."""
    arrival: str
    rail_out: str
    do_validity: str
    detention: str
    days_until_arrival: Optional[float]
    days_until_rail_out: Optional[float]
    days_until_do_expiry: Optional[float]
    days_until_detention: Optional[float]
    is_rail_out_today: bool


def days_until(event: Optional[datetime], today: datetime) -> Optional[float]:
    """Fractional days from today's midnight to the event, None when unknown."""
    if event is None:
        return None
    return (event - today).total_seconds() / SECONDS_PER_DAY


def _threshold_status(days: Optional[float], reached: str, due_today: str, soon: str, default: str) -> str:
    if days is None:
        return default
    if days < 0:
        return reached
    if days < TODAY_THRESHOLD:
        return due_today
    if days < SOON_THRESHOLD:
        return soon
    return default


def arrival_status(days: Optional[float]) -> str:
    return _threshold_status(
        days,
        ArrivalStatus.ARRIVED,
        ArrivalStatus.ARRIVING_TODAY,
        ArrivalStatus.ARRIVING_SOON_3_DAYS,
        ArrivalStatus.PENDING_ARRIVAL,
    )


def do_validity_status(days: Optional[float]) -> str:
    return _threshold_status(
        days,
        DoValidityStatus.EXPIRED,
        DoValidityStatus.EXPIRES_TODAY,
        DoValidityStatus.EXPIRES_SOON_3_DAYS,
        DoValidityStatus.VALID,
    )


def detention_status(days: Optional[float]) -> str:
    return _threshold_status(
        days,
        DetentionStatus.ON_DETENTION,
        DetentionStatus.STARTS_TODAY,
        DetentionStatus.STARTS_SOON_3_DAYS,
        DetentionStatus.SAFE,
    )


def rail_out_status(days: Optional[float], arrival: str) -> str:
    """
    Rail-out state.

    A dated rail-out is COMPLETED once past and SCHEDULED otherwise.
    Without a date, an arrived container is OVERDUE.
    """
    if days is not None:
        return RailOutStatus.COMPLETED if days < 0 else RailOutStatus.SCHEDULED
    if arrival == ArrivalStatus.ARRIVED:
        return RailOutStatus.OVERDUE
    return RailOutStatus.NOT_SET


def derive_container_status(container, today: datetime) -> ContainerStatus:
    """
    Compute all four states for a container.

    Args:
        container: object exposing the raw container date strings
            (a jobs.Container instance or anything shaped like one)
        today: reference day, normalised to midnight

    Returns:
        ContainerStatus
    """
    arrival_days = days_until(parse_date(getattr(container, 'arrival_date', None)), today)
    rail_out_date = parse_date(getattr(container, 'container_rail_out_date', None))
    rail_out_days = days_until(rail_out_date, today)
    do_days = days_until(parse_date(getattr(container, 'do_validity_upto_container_level', None)), today)
    detention_days = days_until(parse_date(getattr(container, 'detention_from', None)), today)

    arrival = arrival_status(arrival_days)

    return ContainerStatus(
        arrival=arrival,
        rail_out=rail_out_status(rail_out_days, arrival),
        do_validity=do_validity_status(do_days),
        detention=detention_status(detention_days),
        days_until_arrival=arrival_days,
        days_until_rail_out=rail_out_days,
        days_until_do_expiry=do_days,
        days_until_detention=detention_days,
        is_rail_out_today=rail_out_date is not None and rail_out_date.date() == today.date(),
    )
