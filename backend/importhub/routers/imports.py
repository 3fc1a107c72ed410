"""
# `importhub/routers/imports.py` — Import order endpoints

All endpoints require `Authorization: Bearer <token>`.

### `GET /api/imports`
Lists orders, newest first. Optional `status` and `supplier_id` filters (combined with AND).
Non-admin callers only get their own orders.

### `GET /api/imports/stats/dashboard`
Status breakdown, monthly trend (last 12 months) and top 5 suppliers over all orders.

### `GET /api/imports/{import_id}`
One order with its lines. Unknown ids and other users' ids both return `404`.

### `POST /api/imports`
Creates an order with at least one line; the total is computed server side. `201`.

### `PUT /api/imports/{import_id}/status`
Admin only. Sets any of: pending, processing, shipped, in_transit, customs, delivered,
cancelled. `tracking_number` is replaced by the supplied value (omitted → cleared).
"""
from typing import List, Optional

from fastapi import APIRouter, Depends, Path, Query, Request, status
from sqlalchemy.ext.asyncio import AsyncSession

from importhub.core.auth import get_principal
from importhub.core.security import require_admin
from importhub.database import get_session
from importhub.schemas.dashboard import DashboardOut
from importhub.schemas.import_order import (
    ImportCreate,
    ImportDetailOut,
    ImportEnvelope,
    ImportOut,
    StatusUpdate,
)
from importhub.schemas.principal import Principal
from importhub.services import dashboard_service, imports_service

router = APIRouter(prefix="/api/imports", tags=["Imports"])


@router.get("", response_model=List[ImportOut], summary="List Imports")
@router.get("/", response_model=List[ImportOut], include_in_schema=False)
async def list_imports(
    status_filter: Optional[str] = Query(None, alias="status", description="pending, shipped, ..."),
    supplier_id: Optional[int] = Query(None, description="suppliers.id"),
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await imports_service.list_imports(session, principal, status=status_filter, supplier_id=supplier_id)


@router.get("/stats/dashboard", response_model=DashboardOut, summary="Import Dashboard")
async def get_dashboard(
    request: Request,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await dashboard_service.dashboard_stats(
        session, top_limit=request.app.state.settings.dashboard_top_suppliers
    )


@router.get("/{import_id}", response_model=ImportDetailOut, summary="Import Detail")
async def get_import(
    import_id: int = Path(...),
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    return await imports_service.get_import(session, principal, import_id)


@router.post("", response_model=ImportEnvelope, status_code=status.HTTP_201_CREATED, summary="Create Import")
@router.post("/", response_model=ImportEnvelope, status_code=status.HTTP_201_CREATED, include_in_schema=False)
async def create_import(
    payload: ImportCreate,
    request: Request,
    principal: Principal = Depends(get_principal),
    session: AsyncSession = Depends(get_session),
):
    created = await imports_service.create_import(
        session,
        principal,
        payload,
        max_attempts=request.app.state.settings.import_code_max_attempts,
    )
    return {"message": "Import created successfully", "import": created}


@router.put("/{import_id}/status", response_model=ImportEnvelope, summary="Update Import Status")
async def update_import_status(
    body: StatusUpdate,
    import_id: int = Path(...),
    principal: Principal = Depends(require_admin),
    session: AsyncSession = Depends(get_session),
):
    updated = await imports_service.update_status(
        session,
        principal,
        import_id,
        body.status,
        tracking_number=body.tracking_number,
    )
    return {"message": "Status updated successfully", "import": updated}
