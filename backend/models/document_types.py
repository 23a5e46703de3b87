from sqlalchemy import Column, Integer, String, Text, Boolean
from database import Base
from models.audit_mixin import TimestampMixin


class DocumentType(Base, TimestampMixin):
    __tablename__ = "document_types"

    id = Column(Integer, primary_key=True, index=True)
    code = Column(String(20), nullable=False, unique=True, index=True)  # SII document code, e.g. "33"
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    is_electronic = Column(Boolean, default=True, nullable=False)
