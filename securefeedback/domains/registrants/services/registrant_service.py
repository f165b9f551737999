"""Registrant service layer."""

from __future__ import annotations

from typing import List

from sqlalchemy import select
from sqlalchemy.orm import Session

from securefeedback.core.db.pool import PoolManager
from securefeedback.core.db.storage import StorageResult, run_in_session
from securefeedback.domains.registrants.models.registrant_models import Registrant
from securefeedback.domains.registrants.schemas.registrant_schemas import RegistrationRequest


def create_registrant(manager: PoolManager, payload: RegistrationRequest) -> StorageResult[Registrant]:
    """Insert a registrant; payload must already be validated and sanitized."""

    def _insert(session: Session) -> Registrant:
        registrant = Registrant(
            first_name=payload.first_name,
            last_name=payload.last_name,
            email=payload.email,
            phone=payload.phone,
            country=payload.country,
        )
        session.add(registrant)
        session.commit()
        return registrant

    return run_in_session(manager, _insert, description="Registrant insert")


def list_registrants(manager: PoolManager) -> StorageResult[List[Registrant]]:
    """All registrants, most recently registered first."""

    def _query(session: Session) -> List[Registrant]:
        stmt = select(Registrant).order_by(
            Registrant.registered_at.desc(), Registrant.id.desc()
        )
        return list(session.scalars(stmt))

    return run_in_session(manager, _query, description="Registrant listing")
