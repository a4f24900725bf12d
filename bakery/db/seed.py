"""Database seeding helpers."""

import logging

from sqlalchemy.orm import Session

from bakery.core.config import settings
from bakery.models import DeliverySchedule
from bakery.services.fulfillment_calendar import DAY_NAMES

logger = logging.getLogger(__name__)


def ensure_delivery_settings_seed(session: Session) -> int:
    """Create one delivery schedule per default fulfillment day when none exist.

    Returns the number of schedules created.
    """
    if not settings.seed_delivery_settings:
        return 0

    if session.query(DeliverySchedule.id).first() is not None:
        return 0

    cutoff_time = settings.default_cutoff_time.strftime("%H:%M")
    created = 0
    for day in settings.default_fulfillment_days:
        session.add(
            DeliverySchedule(
                name=f"{DAY_NAMES[day]} delivery",
                day_of_week=day,
                cutoff_day=settings.default_cutoff_day,
                cutoff_time=cutoff_time,
                lead_time_days=settings.default_lead_time_days,
                is_active=True,
            )
        )
        created += 1
    session.commit()
    logger.info(
        "[BOOTSTRAP] seeded %d delivery schedules (cutoff %s %s)",
        created,
        DAY_NAMES[settings.default_cutoff_day],
        cutoff_time,
    )
    return created
