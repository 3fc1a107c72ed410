from sqlalchemy import Column, DateTime, ForeignKey, Integer, Numeric, String, Text

from importhub.database import Base
from importhub.model.base import utcnow


class Product(Base):
    __tablename__ = "products"
    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text, nullable=True)
    price = Column(Numeric(10, 2), nullable=False)           # catalog price, not used for import lines
    category = Column(String(100), nullable=False)
    supplier_id = Column(Integer, ForeignKey("suppliers.id"), nullable=True)
    stock = Column(Integer, nullable=False, default=0)
    hs_code = Column(String(20), nullable=True)              # customs tariff code
    weight = Column(Numeric(8, 2), nullable=True)
    created_at = Column(DateTime, nullable=False, default=utcnow)
    updated_at = Column(DateTime, nullable=False, default=utcnow)
