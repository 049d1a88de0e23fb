#!/usr/bin/env python3

"""
Pydantic models for the AIRAC import API.

JSON uses camelCase names; Python code may use the snake_case field names.
"""

from pydantic import BaseModel, ConfigDict, Field
from typing import Dict, List, Optional

from airac_sync.sync.apply_engine import ApplyResult
from airac_sync.sync.importer import ImportPreview


class ImportRequest(BaseModel):
    """Body of every import endpoint, for both preview and confirm."""
    model_config = ConfigDict(populate_by_name=True)

    content: str = Field(..., description="Full text of the AIRAC file")
    fir_id: Optional[str] = Field(None, alias="firId", description="FIR id or ICAO code; omit for global", max_length=64)
    confirm: bool = Field(False, description="Apply the selected changes instead of previewing")
    selected_add: Optional[List[str]] = Field(None, alias="selectedAdd", description="Accepted keys from toAdd")
    selected_update: Optional[List[str]] = Field(None, alias="selectedUpdate", description="Accepted keys from toUpdate")
    selected_delete: Optional[List[str]] = Field(
        None, alias="selectedDelete", description="Accepted keys from toDelete; omit to accept all"
    )


class PreviewBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    to_add: List[str] = Field(default_factory=list, alias="toAdd")
    to_update: Optional[List[str]] = Field(None, alias="toUpdate")
    to_delete: Optional[List[str]] = Field(None, alias="toDelete")
    changes: Optional[Dict[str, List[str]]] = None
    skipped: int = 0
    warnings: List[str] = Field(default_factory=list)

    @classmethod
    def from_preview(cls, preview: ImportPreview):
        """Create PreviewBody from an ImportPreview."""
        return cls.model_validate(preview.to_dict())


class PreviewResponse(BaseModel):
    preview: PreviewBody


class ApplyResponse(BaseModel):
    applied: bool
    added: int
    updated: int
    deleted: int

    @classmethod
    def from_result(cls, result: ApplyResult):
        return cls(**result.to_dict())
