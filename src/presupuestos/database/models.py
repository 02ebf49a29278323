"""SQLAlchemy models for presupuestos database."""

from datetime import datetime, UTC
from sqlalchemy import (
    Column,
    Integer,
    String,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    JSON,
    create_engine,
)
from sqlalchemy.orm import declarative_base, relationship, sessionmaker, Session

from presupuestos.domain.entities import DEFAULT_CURRENCY

Base = declarative_base()


class Budget(Base):
    """Quote (presupuesto) model."""

    __tablename__ = "budgets"

    id = Column(String, primary_key=True)
    empresa = Column(String, nullable=False)
    fecha_creacion = Column(String, nullable=False)
    fabricante = Column(String, nullable=False)
    moneda = Column(String, default=DEFAULT_CURRENCY, nullable=False)
    descuento = Column(Integer, default=0, nullable=False)
    validez = Column(Integer, default=0, nullable=False)
    monto_total = Column(Numeric(15, 2), nullable=False)
    dias_transcurridos = Column(Integer, default=0, nullable=False)
    dias_restantes = Column(Integer, default=0, nullable=False)
    tipo_seguimiento = Column(String, nullable=False)
    accion = Column(String, nullable=False)
    prioridad = Column(String, nullable=False)
    alertas = Column(JSON, default=list, nullable=False)
    es_licitacion = Column(Boolean, default=False, nullable=False)

    # User-owned fields
    notas = Column(String, default="", nullable=False)
    completado = Column(Boolean, default=False, nullable=False)
    fecha_completado = Column(String, nullable=True)
    estado = Column(String, default="Pendiente", nullable=False)
    fecha_estado = Column(String, nullable=True)
    finalizado = Column(Boolean, default=False, nullable=False)
    fecha_finalizado = Column(String, nullable=True)
    historial_etapas = Column(JSON, default=list, nullable=False)
    historial_acciones = Column(JSON, default=list, nullable=False)

    imported_at = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)

    # Relationships
    items = relationship(
        "BudgetItem",
        back_populates="budget",
        cascade="all, delete-orphan",
        order_by="BudgetItem.position",
    )
    contact = relationship(
        "ContactInfo", back_populates="budget", uselist=False, cascade="all, delete-orphan"
    )


class BudgetItem(Base):
    """Line item of a quote."""

    __tablename__ = "budget_items"

    id = Column(Integer, primary_key=True)
    budget_id = Column(String, ForeignKey("budgets.id"), nullable=False)
    position = Column(Integer, default=0, nullable=False)
    codigo = Column(String, nullable=True)
    descripcion = Column(String, nullable=False)
    precio = Column(Numeric(15, 2), nullable=False)
    cantidad = Column(Integer, default=1, nullable=False)

    # Relationships
    budget = relationship("Budget", back_populates="items")


class ContactInfo(Base):
    """Contact person for a quote."""

    __tablename__ = "contact_info"

    id = Column(Integer, primary_key=True)
    budget_id = Column(String, ForeignKey("budgets.id"), unique=True, nullable=False)
    nombre = Column(String, nullable=False)
    email = Column(String, nullable=True)
    telefono = Column(String, nullable=True)

    # Relationships
    budget = relationship("Budget", back_populates="contact")


class ImportLog(Base):
    """Append-only import audit record."""

    __tablename__ = "import_logs"

    id = Column(Integer, primary_key=True)
    timestamp = Column(DateTime, default=lambda: datetime.now(UTC), nullable=False)
    file_name = Column(String, nullable=False)
    records_imported = Column(Integer, nullable=False)
    records_updated = Column(Integer, default=0, nullable=False)
    records_deleted = Column(Integer, default=0, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory."""
    # Pooled connections are handed to whichever API worker thread serves a request
    connect_args = {"check_same_thread": False} if database_url.startswith("sqlite") else {}
    engine = create_engine(database_url, echo=False, connect_args=connect_args)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
