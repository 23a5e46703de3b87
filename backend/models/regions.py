from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from database import Base


class Region(Base):
    __tablename__ = "regions"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False, unique=True)
    code = Column(String(10), nullable=True)

    communes = relationship("Commune", back_populates="region", order_by="Commune.id")
