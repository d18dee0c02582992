import json
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request, Response
from fastapi.responses import JSONResponse
from starlette.concurrency import run_in_threadpool

from inventoria.core.errors import ValidationError
from inventoria.dependencies import get_audit, get_backup, get_store
from inventoria.services.export_service import (
    XLSX_MEDIA_TYPE,
    activity_filename_parts,
    build_activity_workbook,
    build_inventory_workbook,
    export_filename,
    inventory_filename_parts,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/database", tags=["Database"])


def _attachment(filename):
    return {"Content-Disposition": 'attachment; filename="{}"'.format(filename)}


async def _read_backup_payload(request: Request):
    content_type = request.headers.get("content-type", "")
    if content_type.startswith("multipart/form-data"):
        form = await request.form()
        upload = form.get("backup")
        if upload is None or isinstance(upload, str):
            raise ValidationError("No backup file uploaded")
        raw = await upload.read()
    else:
        raw = await request.body()
    try:
        return json.loads(raw)
    except (UnicodeDecodeError, ValueError) as exc:
        raise ValidationError("Invalid JSON format in backup file") from exc


@router.get("/backup/export")
def export_backup(backup=Depends(get_backup)):
    snapshot = backup.export_snapshot()
    filename = export_filename("inventoria_backup", extension="json")
    return JSONResponse(content=snapshot, headers=_attachment(filename))


@router.post("/backup/import")
async def import_backup(request: Request, backup=Depends(get_backup)):
    payload = await _read_backup_payload(request)
    result = await run_in_threadpool(backup.import_snapshot, payload)
    return {"message": "Backup imported successfully", **result}


@router.get("/export/inventory")
def export_inventory(
    category: Optional[str] = Query(None),
    status: Optional[str] = Query(None),
    rentable: Optional[str] = Query(None),
    expirable: Optional[str] = Query(None),
    low_stock: Optional[str] = Query(None, alias="lowStock"),
    expired: Optional[str] = Query(None),
    store=Depends(get_store),
):
    filters = {
        "category": category,
        "status": status,
        "rentable": rentable,
        "expirable": expirable,
        "low_stock": low_stock,
        "expired": expired,
    }
    content = build_inventory_workbook(
        store.items.get_all(),
        store.categories.get_all(),
        filters,
    )
    filename = export_filename("inventory_export", inventory_filename_parts(filters))
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment(filename))


@router.get("/export/activity")
def export_activity(
    kind: Optional[str] = Query(None, alias="type"),
    user_id: Optional[str] = Query(None, alias="userId"),
    item_id: Optional[str] = Query(None, alias="itemId"),
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    days: Optional[str] = Query(None),
    store=Depends(get_store),
):
    filters = {
        "type": kind,
        "user_id": user_id,
        "item_id": item_id,
        "date_from": date_from,
        "date_to": date_to,
        "days": days,
    }
    content = build_activity_workbook(
        store.transactions.get_all(),
        store.items.get_all(),
        store.users.get_all(),
        filters,
    )
    filename = export_filename("activity_export", activity_filename_parts(filters))
    return Response(content=content, media_type=XLSX_MEDIA_TYPE, headers=_attachment(filename))


@router.post("/flush-activity")
def flush_activity(audit=Depends(get_audit)):
    removed = audit.flush()
    return {"message": "Activity logs flushed successfully", "removed": removed}


__all__ = ["router"]
