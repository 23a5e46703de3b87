import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy.orm import Session

from models.categories import Category, TransactionType
from models.communes import Commune
from models.document_types import DocumentType
from models.payment_types import PaymentType
from models.regions import Region
from models.status import Status
from models.tax_rates import TaxRate

logger = logging.getLogger("reference_data")


def get_regions(db: Session):
    return db.query(Region).order_by(Region.id.asc()).all()


def get_communes(db: Session, region_id: Optional[int] = None):
    query = db.query(Commune)
    if region_id is not None:
        query = query.filter(Commune.region_id == region_id)
    return query.order_by(Commune.id.asc()).all()


def get_payment_types(db: Session):
    return db.query(PaymentType).order_by(PaymentType.name.asc()).all()


def get_payment_type(db: Session, payment_type_id: int):
    return db.query(PaymentType).filter(PaymentType.id == payment_type_id).first()


def get_statuses(db: Session):
    return db.query(Status).order_by(Status.name.asc()).all()


def get_status(db: Session, status_id: int):
    return db.query(Status).filter(Status.id == status_id).first()


DEFAULT_STATUSES = [
    {"name": "Pendiente", "description": "Awaiting payment"},
    {"name": "Pagado", "description": "Fully settled"},
    {"name": "Anulado", "description": "Voided document"},
]

DEFAULT_PAYMENT_TYPES = [
    {"name": "Efectivo", "description": "Cash"},
    {"name": "Transferencia", "description": "Bank transfer"},
    {"name": "Cheque", "description": "Cheque"},
    {"name": "Tarjeta", "description": "Debit or credit card"},
]

DEFAULT_DOCUMENT_TYPES = [
    {"code": "33", "name": "Factura Electrónica", "is_electronic": True},
    {"code": "34", "name": "Factura No Afecta o Exenta Electrónica", "is_electronic": True},
    {"code": "39", "name": "Boleta Electrónica", "is_electronic": True},
    {"code": "61", "name": "Nota de Crédito Electrónica", "is_electronic": True},
]

DEFAULT_TAX_RATES = [
    {"name": "IVA", "rate": Decimal("19.00"), "description": "Impuesto al Valor Agregado", "is_default": True},
    {"name": "Exento", "rate": Decimal("0.00"), "description": "Exempt", "is_default": False},
]

DEFAULT_CATEGORIES = [
    {"name": "Ventas", "type": TransactionType.income, "description": "Sales"},
    {"name": "Servicios", "type": TransactionType.income, "description": "Services rendered"},
    {"name": "Insumos", "type": TransactionType.expense, "description": "Supplies"},
    {"name": "Arriendo", "type": TransactionType.expense, "description": "Rent"},
    {"name": "Servicios Básicos", "type": TransactionType.expense, "description": "Utilities"},
]

DEFAULT_REGIONS = [
    {"name": "Región Metropolitana de Santiago", "code": "RM", "communes": ["Santiago", "Providencia", "Las Condes", "Ñuñoa"]},
    {"name": "Región de Valparaíso", "code": "V", "communes": ["Valparaíso", "Viña del Mar"]},
    {"name": "Región del Biobío", "code": "VIII", "communes": ["Concepción", "Talcahuano"]},
]


def seed_reference_data(db: Session):
    """Insert the default catalog rows that are missing. Idempotent; never
    overwrites existing rows."""
    created = []

    existing = {name for (name,) in db.query(Status.name)}
    for data in DEFAULT_STATUSES:
        if data["name"] not in existing:
            db.add(Status(**data))
            created.append(f"status:{data['name']}")

    existing = {name for (name,) in db.query(PaymentType.name)}
    for data in DEFAULT_PAYMENT_TYPES:
        if data["name"] not in existing:
            db.add(PaymentType(**data))
            created.append(f"payment_type:{data['name']}")

    existing = {code for (code,) in db.query(DocumentType.code)}
    for data in DEFAULT_DOCUMENT_TYPES:
        if data["code"] not in existing:
            db.add(DocumentType(**data))
            created.append(f"document_type:{data['code']}")

    existing = {name for (name,) in db.query(TaxRate.name)}
    has_default = db.query(TaxRate).filter(TaxRate.is_default.is_(True)).first() is not None
    for data in DEFAULT_TAX_RATES:
        if data["name"] not in existing:
            db.add(TaxRate(**{**data, "is_default": data["is_default"] and not has_default}))
            created.append(f"tax_rate:{data['name']}")

    existing = {(name, type_) for (name, type_) in db.query(Category.name, Category.type)}
    for data in DEFAULT_CATEGORIES:
        if (data["name"], data["type"]) not in existing:
            db.add(Category(**data, is_default=True))
            created.append(f"category:{data['name']}")

    existing = {name for (name,) in db.query(Region.name)}
    for data in DEFAULT_REGIONS:
        if data["name"] in existing:
            continue
        region = Region(name=data["name"], code=data["code"])
        region.communes = [Commune(name=name) for name in data["communes"]]
        db.add(region)
        created.append(f"region:{data['name']}")

    db.commit()
    if created:
        logger.info(f"Seeded reference data: {created}")
    return created
