# API routes

from dataclasses import asdict, is_dataclass
from datetime import timedelta
from typing import Any, Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Query, UploadFile
from pydantic import BaseModel

from gcs_drive.storage.adapter import StorageAdapter, StorageError
from gcs_drive.storage.manager import get_drive

router = APIRouter(prefix="/gcs", tags=["gcs"])


class TransferRequest(BaseModel):
    dest: str
    dest_bucket: Optional[str] = None
    public: bool = False


def get_disk() -> StorageAdapter:
    """Resolve the default disk, 404 if it is not registered."""
    try:
        return get_drive()
    except StorageError as e:
        raise HTTPException(status_code=404, detail=str(e))


def describe_object(obj: Any) -> dict:
    """Flatten a backend object descriptor into a JSON-friendly dict."""
    if is_dataclass(obj):
        return asdict(obj)

    bucket = getattr(obj, "bucket", None)
    return {
        "bucket": getattr(bucket, "name", bucket),
        "name": obj.name,
        "size": obj.size,
        "content_type": obj.content_type,
        "updated": obj.updated,
        "etag": getattr(obj, "etag", None),
        "generation": getattr(obj, "generation", None),
        "metadata": getattr(obj, "metadata", None),
    }


@router.post("")
def upload(
    file: UploadFile = File(...),
    public: bool = Form(False),
    drive: StorageAdapter = Depends(get_disk),
):
    """Upload a file under its client-side name."""
    url = drive.put(file.filename, file.file, public=public)
    return {"url": url}


@router.get("/{filename}/exists")
def exists(filename: str, drive: StorageAdapter = Depends(get_disk)):
    return {"exists": drive.exists(filename)}


@router.get("/{filename}/url")
def public_url(filename: str, drive: StorageAdapter = Depends(get_disk)):
    return {"url": drive.get_url(filename)}


@router.get("/{filename}/signUrl")
def sign_url(
    filename: str,
    expires_in: int = Query(3600, gt=0, description="Lifetime in seconds"),
    drive: StorageAdapter = Depends(get_disk),
):
    signed_url = drive.get_signed_url(filename, timedelta(seconds=expires_in))
    return {"signedUrl": signed_url}


@router.get("/{filename}/object")
def get_object(filename: str, drive: StorageAdapter = Depends(get_disk)):
    return describe_object(drive.get_object(filename))


@router.get("/{filename}/download")
def download(filename: str, drive: StorageAdapter = Depends(get_disk)):
    return {"path": drive.download(filename)}


@router.delete("/{filename}")
def delete(filename: str, drive: StorageAdapter = Depends(get_disk)):
    return {"isDeleted": drive.delete(filename)}


@router.put("/{filename}/copy")
def copy(filename: str, body: TransferRequest, drive: StorageAdapter = Depends(get_disk)):
    url = drive.copy(filename, body.dest, body.dest_bucket, public=body.public)
    return {"isCopied": url}


@router.put("/{filename}/move")
def move(filename: str, body: TransferRequest, drive: StorageAdapter = Depends(get_disk)):
    url = drive.move(filename, body.dest, body.dest_bucket, public=body.public)
    return {"isMoved": url}
