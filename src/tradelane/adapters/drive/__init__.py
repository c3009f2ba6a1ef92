"""Public interface for the remote file-store adapter."""

from __future__ import annotations

from .client import DriveClient, DriveCsvSource, DriveRequestError
from .schema import DriveFile, DriveFileList

__all__ = [
    "DriveClient",
    "DriveCsvSource",
    "DriveFile",
    "DriveFileList",
    "DriveRequestError",
]
