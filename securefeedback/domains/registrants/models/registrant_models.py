"""Registrant model."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Integer, String, func
from sqlalchemy.orm import Mapped, mapped_column

from securefeedback.core.db.models import Base


class Registrant(Base):
    __tablename__ = "usuarios"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    first_name: Mapped[str] = mapped_column("nombre", String(100), nullable=False)
    last_name: Mapped[str] = mapped_column("apellido", String(100), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    phone: Mapped[Optional[str]] = mapped_column("telefono", String(20))
    country: Mapped[Optional[str]] = mapped_column("pais", String(100))
    registered_at: Mapped[datetime] = mapped_column(
        "fecha_registro", DateTime, server_default=func.now()
    )
