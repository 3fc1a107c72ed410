# importhub/routers/directory.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.core.auth import get_principal
from importhub.core.errors import NotFoundError
from importhub.database import get_session
from importhub.repositories import directory
from importhub.schemas.directory import ProductOut, SupplierOut

# Read-only views of the supplier directory and product catalog, used by clients
# to fill the import order form.
router = APIRouter(prefix="/api", tags=["Directory"], dependencies=[Depends(get_principal)])


@router.get("/suppliers", response_model=List[SupplierOut], summary="List Suppliers")
async def list_suppliers(session: AsyncSession = Depends(get_session)):
    return await directory.list_suppliers(session)


@router.get("/products", response_model=List[ProductOut], summary="List Products")
async def list_products(
    category: Optional[str] = Query(None, description="Product category (optional)"),
    supplier_id: Optional[int] = Query(None, description="suppliers.id (optional)"),
    session: AsyncSession = Depends(get_session),
):
    return await directory.list_products(session, category=category, supplier_id=supplier_id)


@router.get("/products/{product_id}", response_model=ProductOut, summary="Product Detail")
async def get_product(product_id: int = Path(...), session: AsyncSession = Depends(get_session)):
    product = await directory.get_product(session, product_id)
    if product is None:
        raise NotFoundError("Product not found")
    return product
