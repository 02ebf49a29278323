"""FastAPI application exposing budgets, contacts, imports and stats."""

import logging
from contextlib import asynccontextmanager
from typing import Iterator

from fastapi import Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from presupuestos.api.schemas import (
    BudgetContactOut,
    BudgetOut,
    BudgetPatch,
    ContactIn,
    ContactOut,
    DemoImportRequest,
    ImportLogOut,
    ImportRequest,
    ImportResultOut,
    QuoteItemOut,
    StatsOut,
)
from presupuestos.database.base import Database
from presupuestos.database.factories import create_sqlite_database
from presupuestos.database.sqlalchemy_db import SQLAlchemyDatabase
from presupuestos.domain.budget import BudgetService
from presupuestos.domain.contact import ContactService
from presupuestos.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    contact_not_found,
)
from presupuestos.domain.quote_import import QuoteImportService
from presupuestos.domain.summary import SummaryService
from presupuestos.logging_config import configure_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield
    shared = getattr(app.state, "db", None)
    if shared is not None:
        shared.disconnect()


app = FastAPI(title="Presupuestos API", lifespan=lifespan)


def get_db(request: Request) -> Iterator[Database]:
    """Yield a database with its own session for one request.

    The engine is opened on first use and shared by later requests. Tests
    replace this dependency through ``app.dependency_overrides``.
    """
    shared = getattr(request.app.state, "db", None)
    if shared is None:
        shared = create_sqlite_database()
        shared.initialize_schema()
        request.app.state.db = shared

    db = SQLAlchemyDatabase(shared.database_url, session_factory=shared.session_factory)
    try:
        yield db
    finally:
        db.disconnect()


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return JSONResponse(status_code=400, content={"message": "Invalid request", "errors": errors})


@app.exception_handler(ValidationError)
async def domain_validation_handler(request: Request, exc: ValidationError):
    return JSONResponse(status_code=400, content={"message": str(exc), "errors": []})


@app.exception_handler(NotFoundError)
async def not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"message": str(exc)})


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/budgets", response_model=list[BudgetOut])
def list_budgets(db: Database = Depends(get_db)):
    return [BudgetOut.from_domain(quote) for quote in BudgetService(db).list_budgets()]


@app.get("/api/budgets/{budget_id}", response_model=BudgetOut)
def get_budget(budget_id: str, db: Database = Depends(get_db)):
    quote = BudgetService(db).get_budget(budget_id)
    if quote is None:
        raise NotFoundError(budget_not_found(budget_id))
    return BudgetOut.from_domain(quote)


@app.get("/api/budgets/{budget_id}/items", response_model=list[QuoteItemOut])
def get_budget_items(budget_id: str, db: Database = Depends(get_db)):
    return [QuoteItemOut.from_domain(item) for item in BudgetService(db).get_items(budget_id)]


@app.patch("/api/budgets/{budget_id}", response_model=BudgetOut)
def update_budget(budget_id: str, patch: BudgetPatch, db: Database = Depends(get_db)):
    quote = BudgetService(db).update_budget(budget_id, **patch.to_fields())
    return BudgetOut.from_domain(quote)


@app.get("/api/contacts", response_model=list[BudgetContactOut])
def list_contacts(db: Database = Depends(get_db)):
    return [
        BudgetContactOut(
            budget_id=budget_id,
            nombre=contact.nombre,
            email=contact.email,
            telefono=contact.telefono,
        )
        for budget_id, contact in ContactService(db).list_contacts()
    ]


@app.get("/api/contacts/{budget_id}", response_model=ContactOut)
def get_contact(budget_id: str, db: Database = Depends(get_db)):
    contact = ContactService(db).get_contact(budget_id)
    if contact is None:
        raise NotFoundError(contact_not_found(budget_id))
    return ContactOut.from_domain(contact)


@app.post("/api/contacts", response_model=ContactOut)
def save_contact(body: ContactIn, db: Database = Depends(get_db)):
    contact = ContactService(db).save_contact(
        body.budget_id, body.nombre, email=body.email, telefono=body.telefono
    )
    return ContactOut.from_domain(contact)


@app.post("/api/import", response_model=ImportResultOut)
def import_csv(body: ImportRequest, db: Database = Depends(get_db)):
    result = QuoteImportService(db).import_csv_text(body.csv_data, body.options.to_domain())
    return ImportResultOut.from_domain(result)


@app.post("/api/import/demo", response_model=ImportResultOut)
def import_demo(body: DemoImportRequest, db: Database = Depends(get_db)):
    result = QuoteImportService(db).import_demo(body.options.to_domain())
    return ImportResultOut.from_domain(result)


@app.get("/api/import-logs", response_model=list[ImportLogOut])
def list_import_logs(db: Database = Depends(get_db)):
    return [ImportLogOut.from_domain(log) for log in db.list_import_logs()]


@app.get("/api/stats", response_model=StatsOut)
def get_stats(db: Database = Depends(get_db)):
    return StatsOut.from_domain(SummaryService(db).get_stats())
