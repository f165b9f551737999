"""Registrant schemas and DTOs."""

from __future__ import annotations

import re
from typing import List, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from securefeedback.core.utils.sanitize import clean_optional, clean_text

NAME_PATTERN = re.compile(r"[a-zA-ZáéíóúÁÉÍÓÚñÑüÜ\s]+")
PHONE_PATTERN = re.compile(r"[\d\s\-+()]{7,20}")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
EMAIL_MAX_LENGTH = 255
COUNTRY_MAX_LENGTH = 100


def _check_person_name(value: str, label: str) -> str:
    if not NAME_MIN_LENGTH <= len(value) <= NAME_MAX_LENGTH:
        raise PydanticCustomError(
            "length",
            f"El {label} debe tener entre {NAME_MIN_LENGTH} y {NAME_MAX_LENGTH} caracteres",
        )
    if not NAME_PATTERN.fullmatch(value):
        raise PydanticCustomError(
            "letters_only", f"El {label} solo puede contener letras y espacios"
        )
    return value


class RegistrationRequest(BaseModel):
    """Incoming registration form; wire names are the Spanish field names."""

    first_name: str = Field(default="", alias="nombre", validate_default=True)
    last_name: str = Field(default="", alias="apellido", validate_default=True)
    email: str = Field(default="", validate_default=True)
    phone: Optional[str] = Field(default=None, alias="telefono")
    country: Optional[str] = Field(default=None, alias="pais")

    @field_validator("first_name", "last_name", "email", mode="before")
    @classmethod
    def _coerce_required(cls, value):
        if value is None:
            return ""
        return str(value).strip()

    @field_validator("phone", "country", mode="before")
    @classmethod
    def _coerce_optional(cls, value):
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("first_name")
    @classmethod
    def _check_first_name(cls, value: str) -> str:
        return _check_person_name(value, "nombre")

    @field_validator("last_name")
    @classmethod
    def _check_last_name(cls, value: str) -> str:
        return _check_person_name(value, "apellido")

    @field_validator("email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        try:
            normalized = validate_email(value, check_deliverability=False).normalized
        except EmailNotValidError:
            raise PydanticCustomError("email", "Ingrese un correo electrónico válido")
        if len(normalized) > EMAIL_MAX_LENGTH:
            raise PydanticCustomError(
                "email_length", "El correo no puede exceder 255 caracteres"
            )
        return normalized.lower()

    @field_validator("phone")
    @classmethod
    def _check_phone(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not PHONE_PATTERN.fullmatch(value):
            raise PydanticCustomError("phone", "Ingrese un número de teléfono válido")
        return value

    @field_validator("country")
    @classmethod
    def _check_country(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return value
        if len(value) > COUNTRY_MAX_LENGTH:
            raise PydanticCustomError(
                "length", "El país no puede exceder 100 caracteres"
            )
        if not NAME_PATTERN.fullmatch(value):
            raise PydanticCustomError(
                "letters_only", "El país solo puede contener letras y espacios"
            )
        return value

    def sanitized(self) -> "RegistrationRequest":
        """
        Copy with the free-text fields HTML-escaped.

        The email is left as normalized: the address grammar enforced by
        email-validator already excludes markup, and escaping would corrupt it.
        """
        return self.model_copy(
            update={
                "first_name": clean_text(self.first_name),
                "last_name": clean_text(self.last_name),
                "phone": clean_optional(self.phone),
                "country": clean_optional(self.country),
            }
        )


def validation_messages(exc: ValidationError) -> List[str]:
    """Flatten a pydantic ValidationError into human-readable messages."""
    return [error["msg"] for error in exc.errors()]


class RegistrantCreated(BaseModel):
    id: int
    first_name: str = Field(serialization_alias="nombre")
    last_name: str = Field(serialization_alias="apellido")
    email: str


class RegistrantListItem(BaseModel):
    id: int
    first_name: str = Field(serialization_alias="nombre")
    last_name: str = Field(serialization_alias="apellido")
    email: str
    phone: Optional[str] = Field(default=None, serialization_alias="telefono")
    country: Optional[str] = Field(default=None, serialization_alias="pais")
    registered_at: Optional[str] = Field(default=None, serialization_alias="fecha_registro")
