from sqlalchemy import Column, Integer, String, Text, Boolean, ForeignKey, UniqueConstraint
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class Company(Base, TimestampMixin):
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    tax_id = Column(String(20), nullable=False, unique=True, index=True)
    address = Column(Text, nullable=True)
    city = Column(String(100), nullable=True)
    country = Column(String(100), nullable=True)
    phone = Column(String(50), nullable=True)
    email = Column(String(200), nullable=True)

    members = relationship("CompanyUser", back_populates="company", cascade="all, delete-orphan")
    transactions = relationship("Transaction", back_populates="company")


class CompanyUser(Base, TimestampMixin):
    __tablename__ = "company_users"
    __table_args__ = (UniqueConstraint('company_id', 'user_id', name='_company_user_uc'),)

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String, nullable=False, index=True)
    is_admin = Column(Boolean, default=False, nullable=False)

    company = relationship("Company", back_populates="members")
