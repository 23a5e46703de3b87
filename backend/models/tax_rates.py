from sqlalchemy import Column, Integer, String, Text, Boolean, Numeric
from database import Base
from models.audit_mixin import TimestampMixin


class TaxRate(Base, TimestampMixin):
    __tablename__ = "tax_rates"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    rate = Column(Numeric(5, 2), nullable=False)  # percentage, e.g. 19.00
    description = Column(Text, nullable=True)
    # At most one row carries is_default = true; enforced by crud.tax_rates
    is_default = Column(Boolean, default=False, nullable=False)
