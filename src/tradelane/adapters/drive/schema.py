"""Pydantic models describing Drive API file listings."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class DriveBaseModel(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class DriveFile(DriveBaseModel):
    id: str
    name: str
    mime_type: str | None = Field(default=None, alias="mimeType")
    modified_time: datetime | None = Field(default=None, alias="modifiedTime")


class DriveFileList(DriveBaseModel):
    files: list[DriveFile] = Field(default_factory=list[DriveFile])
    next_page_token: str | None = Field(default=None, alias="nextPageToken")


class DriveErrorDetail(DriveBaseModel):
    code: int | None = None
    message: str = "Unknown Drive API error"


class DriveErrorResponse(DriveBaseModel):
    error: DriveErrorDetail
