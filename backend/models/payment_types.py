from sqlalchemy import Column, Integer, String, Text
from database import Base
from models.audit_mixin import TimestampMixin


class PaymentType(Base, TimestampMixin):
    __tablename__ = "payment_types"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)  # e.g. "Transferencia", "Efectivo", "Cheque"
    description = Column(Text, nullable=True)
