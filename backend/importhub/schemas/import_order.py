# importhub/schemas/import_order.py
from __future__ import annotations

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ImportStatus(str, Enum):
    """Logistics stage of an import order. Any label may follow any other."""
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    IN_TRANSIT = "in_transit"
    CUSTOMS = "customs"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


# (Input) one product line. Range checks (> 0) are applied by the service so that
# the same rules hold for callers that do not go through HTTP.
class ImportItemCreate(BaseModel):
    product_id: int = Field(..., description="products.id (positive)")
    quantity: int = Field(..., description="Units ordered (> 0)")
    unit_price: Decimal = Field(..., description="Agreed unit price (> 0), locked at creation")

    @field_validator("unit_price", mode="before")
    @classmethod
    def _price_from_text(cls, v):
        # JSON numbers arrive as float; go through str so 19.99 stays 19.99
        if isinstance(v, float):
            return Decimal(str(v))
        return v


# (Input) POST /api/imports
class ImportCreate(BaseModel):
    supplier_id: int = Field(..., description="suppliers.id (positive)")
    import_date: date
    estimated_arrival: Optional[date] = None
    notes: Optional[str] = Field(None, description="Free text, at most 500 characters")
    items: List[ImportItemCreate] = Field(default_factory=list, description="At least one line")


# (Input) PUT /api/imports/{id}/status
class StatusUpdate(BaseModel):
    status: str = Field(..., description="One of: " + ", ".join(s.value for s in ImportStatus))
    tracking_number: Optional[str] = Field(None, max_length=100, description="Omitting it clears the stored value")


class ImportOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    import_code: str
    user_id: int
    supplier_id: int
    status: ImportStatus
    total_amount: Decimal
    import_date: Optional[date] = None
    estimated_arrival: Optional[date] = None
    tracking_number: Optional[str] = None
    notes: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    # joined display fields
    supplier_name: Optional[str] = None
    supplier_country: Optional[str] = None
    created_by: Optional[str] = None


class ImportItemOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    import_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    total_price: Decimal
    created_at: Optional[datetime] = None
    product_name: Optional[str] = None
    product_description: Optional[str] = None


class ImportDetailOut(ImportOut):
    items: List[ImportItemOut] = Field(default_factory=list)


class ImportEnvelope(BaseModel):
    """`{"message": ..., "import": {...}}` as returned by create and status update."""
    model_config = ConfigDict(populate_by_name=True)

    message: str
    import_: ImportOut = Field(..., alias="import")
