"""Tests for the registrants API endpoints."""

from datetime import datetime

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session

pytestmark = pytest.mark.integration

from securefeedback.core.db.storage import ErrorKind, StorageResult
from securefeedback.domains.registrants.models.registrant_models import Registrant
from securefeedback.domains.registrants.services import registrant_service


def _row_count(pool_manager) -> int:
    with Session(pool_manager.acquire().engine) as session:
        return session.scalar(select(func.count()).select_from(Registrant))


def _seed(pool_manager, **fields) -> int:
    with Session(pool_manager.acquire().engine) as session:
        registrant = Registrant(**fields)
        session.add(registrant)
        session.commit()
        return registrant.id


class TestCreateRegistrant:
    def test_valid_registration_returns_created_record(self, client, registration_payload):
        resp = client.post("/api/users", json=registration_payload)

        assert resp.status_code == 201
        body = resp.get_json()
        assert body["success"] is True
        assert body["message"] == "Usuario registrado exitosamente"
        assert body["data"] == {
            "id": body["data"]["id"],
            "nombre": "María José",
            "apellido": "Núñez",
            "email": "maria.nunez@example.com",
        }
        assert isinstance(body["data"]["id"], int)

    def test_created_id_is_listed(self, client, registration_payload):
        created = client.post("/api/users", json=registration_payload).get_json()["data"]

        listing = client.get("/api/users").get_json()

        assert listing["count"] == 1
        row = listing["data"][0]
        assert row["id"] == created["id"]
        assert row["email"] == "maria.nunez@example.com"
        assert row["telefono"] == "+34 (600) 123-456"
        assert row["pais"] == "España"

    def test_email_with_special_characters_is_stored_unescaped(self, client, registration_payload):
        payload = dict(registration_payload, email="o'brien&co@example.com")

        resp = client.post("/api/users", json=payload)

        assert resp.status_code == 201
        assert resp.get_json()["data"]["email"] == "o'brien&co@example.com"
        listed = client.get("/api/users").get_json()["data"][0]
        assert listed["email"] == "o'brien&co@example.com"

    def test_form_encoded_submission(self, client):
        resp = client.post(
            "/api/users",
            data={"nombre": "Luis", "apellido": "Gómez", "email": "luis@example.com"},
        )

        assert resp.status_code == 201
        assert resp.get_json()["data"]["nombre"] == "Luis"

    def test_duplicate_email_conflicts_without_new_row(self, client, pool_manager, registration_payload):
        assert client.post("/api/users", json=registration_payload).status_code == 201
        again = dict(registration_payload, nombre="Otra", email="MARIA.NUNEZ@example.com")

        resp = client.post("/api/users", json=again)

        assert resp.status_code == 409
        assert resp.get_json() == {
            "success": False,
            "message": "El correo electrónico ya está registrado",
        }
        assert _row_count(pool_manager) == 1

    def test_name_with_digits_is_rejected(self, client, pool_manager, registration_payload):
        resp = client.post("/api/users", json=dict(registration_payload, nombre="Mar1a$"))

        assert resp.status_code == 400
        body = resp.get_json()
        assert body["success"] is False
        assert body["message"] == "Error de validación"
        assert "El nombre solo puede contener letras y espacios" in body["errors"]
        assert _row_count(pool_manager) == 0

    def test_non_object_json_is_treated_as_empty(self, client):
        resp = client.post("/api/users", json=["nombre", "apellido"])

        assert resp.status_code == 400
        assert len(resp.get_json()["errors"]) == 3

    def test_unclassified_failure_hides_detail(self, client, monkeypatch, registration_payload):
        failure = StorageResult.failure(ErrorKind.UNKNOWN, RuntimeError("secret table detail"))
        monkeypatch.setattr(registrant_service, "create_registrant", lambda *a, **kw: failure)

        resp = client.post("/api/users", json=registration_payload)

        assert resp.status_code == 500
        body = resp.get_json()
        assert body == {
            "success": False,
            "message": "Error interno del servidor. Intente nuevamente.",
        }
        assert "secret" not in resp.get_data(as_text=True)

    def test_database_outage_is_server_error(self, client, pool_manager, monkeypatch, registration_payload):
        def _down():
            raise OperationalError("connect", {}, Exception("login timeout"))

        monkeypatch.setattr(pool_manager, "acquire", _down)

        resp = client.post("/api/users", json=registration_payload)

        assert resp.status_code == 500


class TestListRegistrants:
    def test_empty_listing(self, client):
        resp = client.get("/api/users")

        assert resp.status_code == 200
        assert resp.get_json() == {"success": True, "count": 0, "data": []}

    def test_most_recent_first_with_display_timestamp(self, client, pool_manager):
        _seed(
            pool_manager,
            first_name="Primero",
            last_name="Uno",
            email="uno@example.com",
            registered_at=datetime(2024, 3, 1, 9, 5),
        )
        _seed(
            pool_manager,
            first_name="Tercero",
            last_name="Tres",
            email="tres@example.com",
            registered_at=datetime(2024, 3, 3, 18, 30),
        )
        _seed(
            pool_manager,
            first_name="Segundo",
            last_name="Dos",
            email="dos@example.com",
            registered_at=datetime(2024, 3, 2, 12, 0),
        )

        body = client.get("/api/users").get_json()

        assert body["count"] == 3
        assert [row["email"] for row in body["data"]] == [
            "tres@example.com",
            "dos@example.com",
            "uno@example.com",
        ]
        assert body["data"][0]["fecha_registro"] == "03/03/2024 18:30"
        assert body["data"][2]["telefono"] is None

    def test_listing_failure_is_generic(self, client, monkeypatch):
        failure = StorageResult.failure(ErrorKind.CONNECTIVITY, OperationalError("SELECT", {}, Exception("x")))
        monkeypatch.setattr(registrant_service, "list_registrants", lambda *a, **kw: failure)

        resp = client.get("/api/users")

        assert resp.status_code == 500
        assert resp.get_json() == {"success": False, "message": "Error interno del servidor"}
