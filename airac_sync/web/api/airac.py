#!/usr/bin/env python3

from fastapi import APIRouter, HTTPException
from typing import Optional, Union
import logging

from airac_sync.errors import ApplyTransactionError, InputError, ScopeNotFoundError
from airac_sync.models.diff import ImportKind
from airac_sync.sync.importer import AiracImporter
from airac_sync.sync.selection import Selection
from .models import ApplyResponse, ImportRequest, PreviewBody, PreviewResponse

logger = logging.getLogger(__name__)

router = APIRouter()

# Global importer reference
importer: Optional[AiracImporter] = None


def set_importer(i: Optional[AiracImporter]):
    """Set the global importer reference."""
    global importer
    importer = i


def _selection(kind: ImportKind, body: ImportRequest) -> Selection:
    """Build the selection of a confirm request; 422 when a required list is missing."""
    if body.selected_add is None:
        raise HTTPException(status_code=422, detail="selectedAdd is required when confirm is true")
    if kind.updates and body.selected_update is None:
        raise HTTPException(status_code=422, detail="selectedUpdate is required when confirm is true")
    return Selection(
        add=body.selected_add,
        update=body.selected_update if kind.updates else [],
        delete=body.selected_delete if kind.deletes else [],
    )


def _run_import(kind: ImportKind, body: ImportRequest) -> Union[PreviewResponse, ApplyResponse]:
    if importer is None:
        raise HTTPException(status_code=500, detail="Importer not initialised")

    try:
        if body.confirm:
            selection = _selection(kind, body)
            result = importer.confirm(kind, body.content, fir_id=body.fir_id, selection=selection)
            return ApplyResponse.from_result(result)

        preview = importer.preview(kind, body.content, fir_id=body.fir_id)
        return PreviewResponse(preview=PreviewBody.from_preview(preview))
    except ScopeNotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except InputError as e:
        logger.info(f"Rejected {kind.value} import: {e}")
        raise HTTPException(status_code=400, detail=e.message)
    except ApplyTransactionError as e:
        raise HTTPException(status_code=409, detail=e.message)


@router.post("/fixes", response_model=Union[PreviewResponse, ApplyResponse], response_model_exclude_none=True)
def import_fixes(body: ImportRequest):
    """Preview or apply a FIX file (authoritative replace of the scope)."""
    return _run_import(ImportKind.FIX, body)


@router.post("/vors", response_model=Union[PreviewResponse, ApplyResponse], response_model_exclude_none=True)
def import_vors(body: ImportRequest):
    """Preview or apply a VOR file (authoritative replace of the scope)."""
    return _run_import(ImportKind.VOR, body)


@router.post("/ndbs", response_model=Union[PreviewResponse, ApplyResponse], response_model_exclude_none=True)
def import_ndbs(body: ImportRequest):
    """Preview or apply an NDB file (authoritative replace of the scope)."""
    return _run_import(ImportKind.NDB, body)


@router.post("/boundaries", response_model=Union[PreviewResponse, ApplyResponse], response_model_exclude_none=True)
def import_boundaries(body: ImportRequest):
    """Preview or apply a frequency boundary file."""
    return _run_import(ImportKind.BOUNDARY, body)


@router.post("/airports", response_model=Union[PreviewResponse, ApplyResponse], response_model_exclude_none=True)
def import_airports(body: ImportRequest):
    """Preview or apply an airport file; airports are added or updated, never deleted."""
    return _run_import(ImportKind.AIRPORT, body)
