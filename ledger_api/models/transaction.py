# ledger_api/models/transaction.py
import enum
import uuid
from sqlalchemy import CheckConstraint, Column, String, ForeignKey, Float, DateTime, Enum, Uuid
from sqlalchemy.orm import relationship
from ledger_api.core.database import Base, utc_now

class TransactionType(str, enum.Enum):
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"

class Transaction(Base):
    __tablename__ = "transactions"
    __table_args__ = (
        CheckConstraint("amount > 0", name="ck_transactions_amount_positive"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False, index=True)
    concept = Column(String(length=255), nullable=False)
    amount = Column(Float, nullable=False)
    date = Column(DateTime, nullable=False, index=True)
    type = Column(Enum(TransactionType, name="transaction_type"), nullable=False)

    created_at = Column(DateTime, nullable=False, default=utc_now)
    updated_at = Column(DateTime, nullable=False, default=utc_now, onupdate=utc_now)

    user = relationship("User", back_populates="transactions", lazy="joined")

    def __repr__(self):
        return f"<Transaction type={self.type} amount={self.amount} date={self.date} user_id={self.user_id}>"
