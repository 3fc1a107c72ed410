# importhub/services/imports_service.py
"""
Import order lifecycle: creation, status transitions and retrieval.

Every public function takes the request's AsyncSession and the calling Principal.
Validation and authorization always run before anything is written.
"""
from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.config import settings as default_settings
from importhub.core.errors import (
    AuthorizationError,
    ConflictError,
    InternalError,
    NotFoundError,
    ValidationError,
)
from importhub.core.security import can_update_status, can_view_all_imports
from importhub.database import transaction
from importhub.model.base import utcnow
from importhub.model.import_order import ImportItem, ImportOrder
from importhub.model.product import Product
from importhub.model.supplier import Supplier
from importhub.model.user import User
from importhub.repositories import directory
from importhub.schemas.import_order import (
    ImportCreate,
    ImportDetailOut,
    ImportItemCreate,
    ImportItemOut,
    ImportOut,
    ImportStatus,
)
from importhub.schemas.principal import Principal
from importhub.services.import_codes import generate_import_code

logger = logging.getLogger("importhub.imports")

CENT = Decimal("0.01")
NOTES_MAX_LENGTH = 500
# largest value a Numeric(10, 2) unit_price column holds
MAX_UNIT_PRICE = Decimal("99999999.99")

__all__ = [
    "line_total",
    "calc_total",
    "parse_status",
    "validate_new_import",
    "create_import",
    "update_status",
    "list_imports",
    "get_import",
]


# ──────────────────────────────────────────────────────────────────────────────
# Money & validation
# ──────────────────────────────────────────────────────────────────────────────

def line_total(quantity: int, unit_price: Decimal) -> Decimal:
    return (Decimal(quantity) * Decimal(unit_price)).quantize(CENT, rounding=ROUND_HALF_UP)


def calc_total(items: Iterable[ImportItemCreate]) -> Decimal:
    return sum((line_total(it.quantity, it.unit_price) for it in items), Decimal("0.00"))


def parse_status(raw: Any) -> ImportStatus:
    """Membership check only; there is no transition graph between labels."""
    try:
        return ImportStatus(raw)
    except ValueError:
        allowed = ", ".join(s.value for s in ImportStatus)
        raise ValidationError("status", f"Invalid status '{raw}'. Allowed: {allowed}")


def validate_new_import(payload: ImportCreate) -> None:
    """Field checks that need no database access. Raises ValidationError naming the field."""
    if payload.supplier_id is None or payload.supplier_id <= 0:
        raise ValidationError("supplier_id", "supplier_id must be a positive integer")
    if payload.notes is not None and len(payload.notes) > NOTES_MAX_LENGTH:
        raise ValidationError("notes", f"notes must be at most {NOTES_MAX_LENGTH} characters")
    if not payload.items:
        raise ValidationError("items", "items must contain at least 1 entry")

    for i, item in enumerate(payload.items):
        if item.product_id <= 0:
            raise ValidationError(f"items[{i}].product_id", "product_id must be a positive integer")
        if item.quantity <= 0:
            raise ValidationError(f"items[{i}].quantity", "quantity must be a positive integer")
        price = item.unit_price
        if not price.is_finite() or price <= 0:
            raise ValidationError(f"items[{i}].unit_price", "unit_price must be a positive number")
        if price > MAX_UNIT_PRICE:
            raise ValidationError(f"items[{i}].unit_price", f"unit_price must be at most {MAX_UNIT_PRICE}")
        if price != price.quantize(CENT):
            raise ValidationError(f"items[{i}].unit_price", "unit_price must have at most 2 decimal places")


async def _check_references(session: AsyncSession, payload: ImportCreate) -> None:
    if await directory.get_supplier(session, payload.supplier_id) is None:
        raise ValidationError("supplier_id", f"Supplier {payload.supplier_id} does not exist")

    missing = await directory.missing_product_ids(session, (it.product_id for it in payload.items))
    if missing:
        index = next(i for i, it in enumerate(payload.items) if it.product_id == missing[0])
        raise ValidationError(f"items[{index}].product_id", f"Product {missing[0]} does not exist")


def _is_code_conflict(exc: IntegrityError) -> bool:
    return "import_code" in str(exc.orig)


# ──────────────────────────────────────────────────────────────────────────────
# Read helpers
# ──────────────────────────────────────────────────────────────────────────────

def _header_query():
    return (
        select(
            ImportOrder,
            Supplier.name.label("supplier_name"),
            Supplier.country.label("supplier_country"),
            User.username.label("created_by"),
        )
        .outerjoin(Supplier, ImportOrder.supplier_id == Supplier.id)
        .outerjoin(User, ImportOrder.user_id == User.id)
    )


def _order_to_dict(order: ImportOrder) -> Dict[str, Any]:
    return {col.name: getattr(order, col.name) for col in ImportOrder.__table__.columns}


def _row_to_out(row) -> ImportOut:
    order, supplier_name, supplier_country, created_by = row
    return ImportOut(
        **_order_to_dict(order),
        supplier_name=supplier_name,
        supplier_country=supplier_country,
        created_by=created_by,
    )


async def _fetch_header(session: AsyncSession, import_id: int) -> Optional[ImportOut]:
    result = await session.execute(_header_query().where(ImportOrder.id == import_id))
    row = result.first()
    return _row_to_out(row) if row is not None else None


async def _fetch_items(session: AsyncSession, import_id: int) -> List[ImportItemOut]:
    result = await session.execute(
        select(ImportItem, Product.name, Product.description)
        .outerjoin(Product, ImportItem.product_id == Product.id)
        .where(ImportItem.import_id == import_id)
        .order_by(ImportItem.id)
    )
    items = []
    for item, product_name, product_description in result.all():
        out = ImportItemOut.model_validate(item)
        out.product_name = product_name
        out.product_description = product_description
        items.append(out)
    return items


# ──────────────────────────────────────────────────────────────────────────────
# Operations
# ──────────────────────────────────────────────────────────────────────────────

async def create_import(
    session: AsyncSession,
    principal: Principal,
    payload: ImportCreate,
    max_attempts: Optional[int] = None,
) -> ImportOut:
    """
    Creates the order header and all of its lines in one transaction.

    The generated import code is only probabilistically unique, so a unique-constraint
    conflict on it rolls the transaction back and the insert is retried with a new code.
    """
    validate_new_import(payload)
    await _check_references(session, payload)

    total = calc_total(payload.items)
    attempts = max_attempts or default_settings.import_code_max_attempts

    order = None
    for attempt in range(1, attempts + 1):
        code = generate_import_code()
        try:
            async with transaction(session):
                order = ImportOrder(
                    import_code=code,
                    user_id=principal.id,
                    supplier_id=payload.supplier_id,
                    status=ImportStatus.PENDING.value,
                    total_amount=total,
                    import_date=payload.import_date,
                    estimated_arrival=payload.estimated_arrival,
                    notes=payload.notes,
                )
                session.add(order)
                await session.flush()

                session.add_all([
                    ImportItem(
                        import_id=order.id,
                        product_id=it.product_id,
                        quantity=it.quantity,
                        unit_price=it.unit_price,
                        total_price=line_total(it.quantity, it.unit_price),
                    )
                    for it in payload.items
                ])
                await session.flush()
        except IntegrityError as exc:
            if _is_code_conflict(exc):
                logger.warning("Import code %s already taken (attempt %d/%d)", code, attempt, attempts)
                order = None
                continue
            logger.exception("Integrity error while creating import for user %s", principal.id)
            raise InternalError("Failed to create import") from exc
        except SQLAlchemyError as exc:
            logger.exception("Storage error while creating import for user %s", principal.id)
            raise InternalError("Failed to create import") from exc
        break

    if order is None:
        raise ConflictError(f"Could not allocate a unique import code after {attempts} attempts")

    logger.info(
        "Import %s created (id=%s, user=%s, items=%d, total=%s)",
        order.import_code, order.id, principal.id, len(payload.items), total,
    )
    created = await _fetch_header(session, order.id)
    if created is None:
        raise InternalError(f"Import {order.id} vanished after commit")
    return created


async def update_status(
    session: AsyncSession,
    principal: Principal,
    import_id: int,
    status: Any,
    tracking_number: Optional[str] = None,
) -> ImportOut:
    """
    Sets any of the known status labels regardless of the current one.
    The tracking number is overwritten: passing None clears it.
    """
    if not can_update_status(principal):
        raise AuthorizationError("Admin privilege required.")
    new_status = parse_status(status)

    try:
        async with transaction(session):
            order = await session.get(ImportOrder, import_id)
            if order is None:
                raise NotFoundError()
            previous = order.status
            order.status = new_status.value
            order.tracking_number = tracking_number or None
            order.updated_at = utcnow()
    except SQLAlchemyError as exc:
        logger.exception("Storage error while updating status of import %s", import_id)
        raise InternalError("Failed to update import status") from exc

    logger.info("Import %s status %s -> %s by user %s", import_id, previous, new_status.value, principal.id)
    updated = await _fetch_header(session, import_id)
    if updated is None:
        raise NotFoundError()
    return updated


async def list_imports(
    session: AsyncSession,
    principal: Principal,
    status: Optional[str] = None,
    supplier_id: Optional[int] = None,
) -> List[ImportOut]:
    """Newest first. Callers without the view-all capability only see their own orders."""
    q = _header_query()
    if not can_view_all_imports(principal):
        q = q.where(ImportOrder.user_id == principal.id)
    if status:
        q = q.where(ImportOrder.status == parse_status(status).value)
    if supplier_id is not None:
        q = q.where(ImportOrder.supplier_id == supplier_id)
    q = q.order_by(ImportOrder.created_at.desc(), ImportOrder.id.desc())

    result = await session.execute(q)
    return [_row_to_out(row) for row in result.all()]


async def get_import(session: AsyncSession, principal: Principal, import_id: int) -> ImportDetailOut:
    """Unknown ids and other users' ids give the same NotFoundError."""
    q = _header_query().where(ImportOrder.id == import_id)
    if not can_view_all_imports(principal):
        q = q.where(ImportOrder.user_id == principal.id)

    row = (await session.execute(q)).first()
    if row is None:
        raise NotFoundError()

    header = _row_to_out(row)
    items = await _fetch_items(session, import_id)
    return ImportDetailOut(**header.model_dump(), items=items)
