"""Mappers from registrant models to JSON payloads."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from securefeedback.domains.registrants.models.registrant_models import Registrant
from securefeedback.domains.registrants.schemas.registrant_schemas import (
    RegistrantCreated,
    RegistrantListItem,
)

DISPLAY_TIMESTAMP_FORMAT = "%d/%m/%Y %H:%M"


def format_timestamp(value: Optional[datetime]) -> Optional[str]:
    if value is None:
        return None
    return value.strftime(DISPLAY_TIMESTAMP_FORMAT)


def map_created(registrant: Registrant) -> dict:
    return RegistrantCreated(
        id=registrant.id,
        first_name=registrant.first_name,
        last_name=registrant.last_name,
        email=registrant.email,
    ).model_dump(by_alias=True)


def map_registrant(registrant: Registrant) -> dict:
    return RegistrantListItem(
        id=registrant.id,
        first_name=registrant.first_name,
        last_name=registrant.last_name,
        email=registrant.email,
        phone=registrant.phone,
        country=registrant.country,
        registered_at=format_timestamp(registrant.registered_at),
    ).model_dump(by_alias=True)
