"""Tests for the HTTP API."""

from presupuestos.domain.entities import QuoteStatus
from presupuestos.domain.quote_import import DEMO_CSV_ENV

IMPORT_OPTIONS = {"compareWithPrevious": True, "autoFinalizeMissing": True}


def test_health(api_client):
    """Test the health endpoint."""
    response = api_client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_list_budgets_uses_camel_case(api_client, imported_budgets):
    """Test budget listing and JSON key style."""
    response = api_client.get("/api/budgets")

    assert response.status_code == 200
    budgets = response.json()
    assert [b["id"] for b in budgets] == ["P-1", "P-2", "P-3", "P-4"]
    first = budgets[0]
    assert first["fechaCreacion"] == "17/10/2026 09:30"
    assert first["tipoSeguimiento"] == "Confirmación"
    assert first["montoTotal"] == 211.25
    assert first["diasRestantes"] == 27
    assert first["contacto"] == {"nombre": "Ana Pérez", "email": "ana@norte.com", "telefono": None}
    assert "fecha_creacion" not in first


def test_get_budget(api_client, imported_budgets):
    """Test fetching one budget."""
    response = api_client.get("/api/budgets/P-4")

    assert response.status_code == 200
    assert response.json()["esLicitacion"] is True


def test_get_budget_not_found(api_client):
    """Test 404 for unknown budgets."""
    response = api_client.get("/api/budgets/NOPE")

    assert response.status_code == 404
    assert "NOPE" in response.json()["message"]


def test_get_budget_items(api_client, imported_budgets):
    """Test listing line items."""
    response = api_client.get("/api/budgets/P-1/items")

    assert response.status_code == 200
    assert response.json() == [
        {"codigo": "AB-1", "descripcion": "Switch 24p", "cantidad": 2, "precio": 100.5},
        {"codigo": "AB-2", "descripcion": "Patch cord", "cantidad": 1, "precio": 10.25},
    ]


def test_get_items_not_found(api_client):
    """Test 404 for items of an unknown budget."""
    assert api_client.get("/api/budgets/NOPE/items").status_code == 404


def test_patch_budget(api_client, imported_budgets, temp_db):
    """Test partial update with camelCase fields."""
    response = api_client.patch(
        "/api/budgets/P-1",
        json={
            "notas": "Pidió descuento",
            "estado": "Aprobado",
            "fechaEstado": "2026-10-19",
            "historialAcciones": [{"accion": "Llamada", "fecha": "2026-10-19"}],
        },
    )

    assert response.status_code == 200
    body = response.json()
    assert body["notas"] == "Pidió descuento"
    assert body["estado"] == "Aprobado"
    assert body["historialAcciones"] == [{"accion": "Llamada", "fecha": "2026-10-19", "comentario": None}]
    stored = temp_db.get_budget("P-1")
    assert stored.estado == QuoteStatus.APROBADO
    assert stored.empresa == "Comercial Norte SA"


def test_patch_budget_invalid_value(api_client, imported_budgets):
    """Test 400 for an invalid enum value."""
    response = api_client.patch("/api/budgets/P-1", json={"estado": "Perdido"})

    assert response.status_code == 400
    assert "Perdido" in response.json()["message"]


def test_patch_budget_unknown_field(api_client, imported_budgets):
    """Test 400 for unknown fields in the body."""
    response = api_client.patch("/api/budgets/P-1", json={"color": "rojo"})

    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Invalid request"
    assert body["errors"]


def test_patch_budget_not_found(api_client):
    """Test 404 when patching an unknown budget."""
    response = api_client.patch("/api/budgets/NOPE", json={"notas": "x"})

    assert response.status_code == 404


def test_contacts(api_client, imported_budgets):
    """Test listing, saving and fetching contacts."""
    response = api_client.post(
        "/api/contacts",
        json={"budgetId": "P-2", "nombre": "Marta Gil", "email": "mgil@sur.com"},
    )
    assert response.status_code == 200
    assert response.json() == {"nombre": "Marta Gil", "email": "mgil@sur.com", "telefono": None}

    listed = api_client.get("/api/contacts").json()
    assert [c["budgetId"] for c in listed] == ["P-1", "P-2", "P-4"]

    assert api_client.get("/api/contacts/P-2").json()["nombre"] == "Marta Gil"


def test_get_contact_not_found(api_client, imported_budgets):
    """Test 404 for budgets without contact."""
    assert api_client.get("/api/contacts/P-3").status_code == 404


def test_save_contact_invalid_email(api_client, imported_budgets):
    """Test 400 for malformed email."""
    response = api_client.post(
        "/api/contacts", json={"budgetId": "P-2", "nombre": "Marta", "email": "nope"}
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body.email"
    assert api_client.get("/api/contacts/P-2").status_code == 404


def test_save_contact_missing_budget(api_client):
    """Test 404 when the budget doesn't exist."""
    response = api_client.post("/api/contacts", json={"budgetId": "NOPE", "nombre": "Marta"})

    assert response.status_code == 404


def test_import(api_client, sample_csv, temp_db):
    """Test importing CSV text."""
    response = api_client.post("/api/import", json={"csvData": sample_csv, "options": IMPORT_OPTIONS})

    assert response.status_code == 200
    assert response.json() == {"added": 4, "updated": 0, "deleted": 0, "total": 4}
    assert len(temp_db.get_all_budgets()) == 4


def test_import_with_options(api_client, imported_budgets, sample_csv):
    """Test that options are honored."""
    csv_text = "\n".join(line for line in sample_csv.splitlines() if not line.startswith("P-2,"))

    response = api_client.post(
        "/api/import",
        json={"csvData": csv_text, "options": {"compareWithPrevious": True, "autoFinalizeMissing": False}},
    )

    assert response.status_code == 200
    assert response.json() == {"added": 0, "updated": 3, "deleted": 0, "total": 3}


def test_import_malformed_body(api_client):
    """Test 400 when csvData is missing."""
    response = api_client.post("/api/import", json={"options": IMPORT_OPTIONS})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"].endswith("csvData")


def test_import_requires_options(api_client, imported_budgets, sample_csv, temp_db):
    """Test 400 and no writes when options are left out."""
    csv_text = "\n".join(line for line in sample_csv.splitlines() if not line.startswith("P-2,"))

    response = api_client.post("/api/import", json={"csvData": csv_text})

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body.options"
    assert not temp_db.get_budget("P-2").finalizado
    assert len(temp_db.list_import_logs()) == 1


def test_import_requires_both_option_flags(api_client, sample_csv):
    """Test 400 when an option flag is missing."""
    response = api_client.post(
        "/api/import", json={"csvData": sample_csv, "options": {"compareWithPrevious": True}}
    )

    assert response.status_code == 400
    assert response.json()["errors"][0]["field"] == "body.options.autoFinalizeMissing"


def test_import_with_leading_blank_line(api_client, sample_csv):
    """Test that a blank first line does not hide the header."""
    response = api_client.post(
        "/api/import", json={"csvData": "\n" + sample_csv, "options": IMPORT_OPTIONS}
    )

    assert response.status_code == 200
    assert response.json()["added"] == 4


def test_import_malformed_csv(api_client, temp_db):
    """Test 400 and no writes for a CSV without required columns."""
    response = api_client.post(
        "/api/import", json={"csvData": "ID,Empresa\nP-1,ACME", "options": IMPORT_OPTIONS}
    )

    assert response.status_code == 400
    assert "NetoItems_USD" in response.json()["message"]
    assert temp_db.list_import_logs() == []


def test_import_demo(api_client, fixtures_dir, monkeypatch):
    """Test importing the demo file."""
    monkeypatch.setenv(DEMO_CSV_ENV, str(fixtures_dir / "budgets_semicolon.csv"))

    response = api_client.post("/api/import/demo", json={"options": IMPORT_OPTIONS})

    assert response.status_code == 200
    assert response.json()["added"] == 2


def test_import_demo_requires_options(api_client, temp_db):
    """Test 400 for the demo import without a body."""
    response = api_client.post("/api/import/demo")

    assert response.status_code == 400
    assert temp_db.list_import_logs() == []


def test_import_logs(api_client, imported_budgets):
    """Test listing import logs."""
    response = api_client.get("/api/import-logs")

    assert response.status_code == 200
    logs = response.json()
    assert logs[0]["fileName"] == "sample.csv"
    assert logs[0]["recordsImported"] == 4


def test_stats(api_client, imported_budgets):
    """Test dashboard statistics."""
    response = api_client.get("/api/stats")

    assert response.status_code == 200
    stats = response.json()
    assert stats["total"] == 4
    assert stats["expiringSoon"] == 1
    assert stats["byStage"]["Vencido"] == 1
    assert stats["byManufacturer"]["Cisco"] == 1


def test_requests_open_their_own_session(tmp_path, monkeypatch, sample_csv):
    """Test that the default database dependency shares an engine, not a session."""
    from fastapi.testclient import TestClient
    from presupuestos.api.app import app
    from presupuestos.database.factories import DB_PATH_ENV

    monkeypatch.setenv(DB_PATH_ENV, str(tmp_path / "api.db"))
    client = TestClient(app)
    try:
        response = client.post("/api/import", json={"csvData": sample_csv, "options": IMPORT_OPTIONS})
        assert response.status_code == 200
        assert len(client.get("/api/budgets").json()) == 4

        shared = app.state.db
        assert shared.database_url.endswith("api.db")
        assert shared._session is None
    finally:
        if hasattr(app.state, "db"):
            del app.state.db
