from sqlalchemy import Column, Integer, String, Text
from database import Base
from models.audit_mixin import TimestampMixin


class Status(Base, TimestampMixin):
    __tablename__ = "status"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)  # e.g. "Pendiente", "Pagado", "Anulado"
    description = Column(Text, nullable=True)
