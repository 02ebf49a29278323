"""Shared pytest fixtures for presupuestos tests."""

import tempfile
import os
from datetime import datetime
from decimal import Decimal
from pathlib import Path
import pytest

from presupuestos.database.factories import create_sqlite_database
from presupuestos.domain.budget import BudgetService
from presupuestos.domain.contact import ContactService
from presupuestos.domain.entities import (
    FollowUpStage,
    ImportOptions,
    Priority,
    Quote,
    QuoteItem,
)
from presupuestos.domain.quote_import import QuoteImportService
from presupuestos.domain.summary import SummaryService

CSV_HEADER = (
    "ID,Empresa,FechaCreacion,NroItem,Cantidad,Codigo_Producto,Descripcion,"
    "Fabricante,NetoItems_USD,Descuento,Validez,Nombre_Contacto,Direccion"
)

# Noon, so a quote created d days ago has d + 1 elapsed days
NOW = datetime(2026, 10, 19, 12, 0)

SAMPLE_CSV = "\n".join(
    [
        CSV_HEADER,
        'P-1,Comercial Norte SA,17/10/2026 09:30,1,2,AB-1,Switch 24p,Cisco,"100,50",5,30,Ana Pérez,ana@norte.com',
        'P-1,Comercial Norte SA,17/10/2026 09:30,2,1,AB-2,Patch cord,Cisco,"10,25",5,30,Ana Pérez,ana@norte.com',
        'P-2,Logística Sur SRL,09/10/2026 14:00,1,1,SRV-1,Servidor,Dell,"5000,00",0,15,,',
        'P-3,Estudio Ferreyra,19/09/2026 08:00,1,3,LIC-1,Licencia,Microsoft,"240,00",0,30,,',
        'P-4,Municipalidad de Rosario,29/09/2026 10:00,1,1,FW-1,Firewall,Fortinet,"5600,00",0,90,Juan Díaz,',
    ]
)


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    # Create a temporary file for the database
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Create database
    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def now():
    """Fixed classification time."""
    return NOW


@pytest.fixture
def sample_csv():
    """CSV text with four quotes (five rows) relative to NOW."""
    return SAMPLE_CSV


@pytest.fixture
def import_service(temp_db):
    """Create a QuoteImportService with a temporary database."""
    return QuoteImportService(temp_db)


@pytest.fixture
def budget_service(temp_db):
    """Create a BudgetService with a temporary database."""
    return BudgetService(temp_db)


@pytest.fixture
def contact_service(temp_db):
    """Create a ContactService with a temporary database."""
    return ContactService(temp_db)


@pytest.fixture
def summary_service(temp_db):
    """Create a SummaryService with a temporary database."""
    return SummaryService(temp_db)


@pytest.fixture
def imported_budgets(import_service, sample_csv, now):
    """Import the sample CSV and return the import result."""
    return import_service.import_csv_text(sample_csv, ImportOptions(), file_name="sample.csv", now=now)


@pytest.fixture
def make_quote():
    """Factory for Quote entities with sensible defaults."""

    def _make(quote_id="Q-1", **overrides):
        values = dict(
            id=quote_id,
            empresa="Empresa Test",
            fabricante="Fabricante Test",
            fecha_creacion="17/10/2026 09:30",
            tipo_seguimiento=FollowUpStage.CONFIRMACION,
            accion="Confirmar recepción del presupuesto y aclarar dudas iniciales",
            prioridad=Priority.MEDIA,
            validez=30,
            items=(QuoteItem(codigo="X-1", descripcion="Item", cantidad=2, precio=Decimal("10.50")),),
            monto_total=Decimal("21.00"),
            dias_transcurridos=3,
            dias_restantes=27,
        )
        values.update(overrides)
        return Quote(**values)

    return _make


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()


@pytest.fixture
def api_client(temp_db):
    """Create a FastAPI TestClient bound to the temporary database."""
    from fastapi.testclient import TestClient
    from presupuestos.api.app import app, get_db

    app.dependency_overrides[get_db] = lambda: temp_db
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def fixtures_dir():
    """Return the path to the test fixtures directory."""
    return Path(__file__).parent / "fixtures"
