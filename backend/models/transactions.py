from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey, Enum
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin
from models.categories import TransactionType


class Transaction(Base, TimestampMixin):
    __tablename__ = "transactions"

    id = Column(String(36), primary_key=True)  # uuid4, generated by crud.transactions
    document_number = Column(String(50), nullable=False, unique=True, index=True)
    document_type_id = Column(Integer, ForeignKey("document_types.id"), nullable=False)
    transaction_date = Column(Date, nullable=False, index=True)
    description = Column(Text, nullable=True)
    amount_net = Column(Numeric(15, 2), nullable=False)
    tax_amount = Column(Numeric(15, 2), default=0, nullable=False)
    tax_rate_id = Column(Integer, ForeignKey("tax_rates.id"), nullable=True)
    # Expected to equal amount_net + tax_amount; supplied by the caller
    amount_total = Column(Numeric(15, 2), nullable=False)
    category_id = Column(Integer, ForeignKey("categories.id"), nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    status_id = Column(Integer, ForeignKey("status.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=True)
    user_id = Column(String, nullable=False, index=True)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)

    # Relationships
    category = relationship("Category")
    vendor = relationship("Vendor", back_populates="transactions")
    status = relationship("Status")
    document_type = relationship("DocumentType")
    applied_tax_rate = relationship("TaxRate")
    company = relationship("Company", back_populates="transactions")
    payments = relationship(
        "TransactionPayment",
        back_populates="transaction",
        cascade="all, delete-orphan",
        order_by="TransactionPayment.payment_date.desc()",
    )

    # Joined display fields
    @property
    def category_name(self):
        return self.category.name if self.category else None

    @property
    def vendor_name(self):
        return self.vendor.name if self.vendor else None

    @property
    def status_name(self):
        return self.status.name if self.status else None

    @property
    def document_type_code(self):
        return self.document_type.code if self.document_type else None

    @property
    def document_type_name(self):
        return self.document_type.name if self.document_type else None

    @property
    def tax_rate_name(self):
        return self.applied_tax_rate.name if self.applied_tax_rate else None

    @property
    def tax_rate(self):
        return self.applied_tax_rate.rate if self.applied_tax_rate else None

    @property
    def company_name(self):
        return self.company.name if self.company else None
