from sqlalchemy import Column, Integer, String, Text, Numeric, Date, ForeignKey
from sqlalchemy.orm import relationship
from database import Base
from models.audit_mixin import TimestampMixin


class TransactionPayment(Base, TimestampMixin):
    __tablename__ = "transaction_payments"

    id = Column(Integer, primary_key=True, index=True)
    # Owned through the parent transaction; there is no user column here
    transaction_id = Column(String(36), ForeignKey("transactions.id", ondelete="CASCADE"), nullable=False, index=True)
    payment_type_id = Column(Integer, ForeignKey("payment_types.id"), nullable=False)
    amount = Column(Numeric(15, 2), nullable=False)
    payment_date = Column(Date, nullable=False)
    reference_number = Column(String(100), nullable=True)  # transfer id, cheque number etc.
    notes = Column(Text, nullable=True)

    # Relationships
    transaction = relationship("Transaction", back_populates="payments")
    payment_type = relationship("PaymentType")

    @property
    def payment_type_name(self):
        return self.payment_type.name if self.payment_type else None
