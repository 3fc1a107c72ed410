from sqlalchemy import Column, Date, DateTime, ForeignKey, Integer, Numeric, String, Text
from sqlalchemy.orm import relationship

from importhub.database import Base
from importhub.model.base import utcnow
from importhub.schemas.import_order import ImportStatus


class ImportOrder(Base):
    __tablename__ = "imports"
    id = Column(Integer, primary_key=True, autoincrement=True)
    import_code = Column(String(40), unique=True, nullable=False)       # IMP-<base36 ts>-<5 chars>
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=False)
    status = Column(String(20), nullable=False, default=ImportStatus.PENDING.value, index=True)
    total_amount = Column(Numeric(12, 2), nullable=False, default=0)    # fixed at creation
    import_date = Column(Date, nullable=True)
    estimated_arrival = Column(Date, nullable=True)
    tracking_number = Column(String(100), nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)
    updated_at = Column(DateTime, nullable=False, default=utcnow)

    # only used for cascade on delete; items are read with explicit queries
    items = relationship(
        "ImportItem",
        cascade="all, delete-orphan",
        passive_deletes=True,
        lazy="raise",
    )


class ImportItem(Base):
    __tablename__ = "import_items"
    id = Column(Integer, primary_key=True, autoincrement=True)
    import_id = Column(Integer, ForeignKey("imports.id", ondelete="CASCADE"), nullable=False, index=True)
    product_id = Column(Integer, ForeignKey("products.id"), nullable=False)
    quantity = Column(Integer, nullable=False)
    unit_price = Column(Numeric(10, 2), nullable=False)                 # price captured at order time
    total_price = Column(Numeric(12, 2), nullable=False)                # quantity * unit_price
    created_at = Column(DateTime, nullable=False, default=utcnow)
