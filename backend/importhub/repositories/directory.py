"""
Read-only lookups into tables owned by the users and products services.
"""
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.model.product import Product
from importhub.model.supplier import Supplier
from importhub.model.user import User


async def get_user(session: AsyncSession, user_id: int) -> Optional[User]:
    return await session.get(User, user_id)


async def get_supplier(session: AsyncSession, supplier_id: int) -> Optional[Supplier]:
    return await session.get(Supplier, supplier_id)


async def list_suppliers(session: AsyncSession) -> List[Supplier]:
    result = await session.execute(select(Supplier).order_by(Supplier.name, Supplier.id))
    return list(result.scalars().all())


async def missing_product_ids(session: AsyncSession, product_ids: Iterable[int]) -> List[int]:
    """Ids from `product_ids` that have no products row, in input order."""
    wanted = list(dict.fromkeys(product_ids))
    if not wanted:
        return []
    result = await session.execute(select(Product.id).where(Product.id.in_(wanted)))
    found = set(result.scalars().all())
    return [pid for pid in wanted if pid not in found]


def _product_query():
    return (
        select(Product, Supplier.name.label("supplier_name"))
        .outerjoin(Supplier, Product.supplier_id == Supplier.id)
    )


def _product_row(product: Product, supplier_name: Optional[str]) -> Dict[str, Any]:
    return {
        "id": product.id,
        "name": product.name,
        "description": product.description,
        "price": product.price,
        "category": product.category,
        "supplier_id": product.supplier_id,
        "supplier_name": supplier_name,
        "stock": product.stock,
        "hs_code": product.hs_code,
        "weight": product.weight,
        "created_at": product.created_at,
        "updated_at": product.updated_at,
    }


async def list_products(
    session: AsyncSession,
    category: Optional[str] = None,
    supplier_id: Optional[int] = None,
) -> List[Dict[str, Any]]:
    q = _product_query()
    if category:
        q = q.where(Product.category == category)
    if supplier_id is not None:
        q = q.where(Product.supplier_id == supplier_id)
    q = q.order_by(Product.created_at.desc(), Product.id.desc())

    result = await session.execute(q)
    return [_product_row(product, supplier_name) for product, supplier_name in result.all()]


async def get_product(session: AsyncSession, product_id: int) -> Optional[Dict[str, Any]]:
    result = await session.execute(_product_query().where(Product.id == product_id))
    row = result.first()
    if row is None:
        return None
    return _product_row(row[0], row[1])
