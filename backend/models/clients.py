from sqlalchemy import Column, Integer, String, Text, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Client(Base, TimestampMixin):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    tax_id = Column(String(20), nullable=False, unique=True, index=True)  # canonical RUT, e.g. 12.345.678-5
    business_activity = Column(String(200), nullable=True)
    contact_name = Column(String(200), nullable=True)
    email = Column(String(200), nullable=True)
    phone = Column(String(50), nullable=True)
    address = Column(Text, nullable=True)
    region_id = Column(Integer, ForeignKey("regions.id"), nullable=False)
    commune_id = Column(Integer, ForeignKey("communes.id"), nullable=False)
    notes = Column(Text, nullable=True)
    user_id = Column(String, nullable=False, index=True)

    region = relationship("Region")
    commune = relationship("Commune")

    @property
    def region_name(self):
        return self.region.name if self.region else None

    @property
    def commune_name(self):
        return self.commune.name if self.commune else None
