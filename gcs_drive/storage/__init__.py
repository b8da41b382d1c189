"""
Drive abstraction over object storage.

Provides the Google Cloud Storage driver, its backends and the drive
registry.
"""

from gcs_drive.storage.adapter import BackendError, StorageAdapter, StorageError
from gcs_drive.storage.bucket import BucketSelector
from gcs_drive.storage.object_store import ObjectStore
from gcs_drive.storage.filesystem import FilesystemObjectStore, ObjectInfo
from gcs_drive.storage.google_cloud import GoogleCloudObjectStore
from gcs_drive.storage.gcs import GCSConfig, GoogleCloudStorage
from gcs_drive.storage.manager import (
    DriveManager,
    get_drive,
    get_drive_manager,
    reset_drive_manager,
)

__all__ = [
    "StorageAdapter",
    "StorageError",
    "BackendError",
    "BucketSelector",
    "ObjectStore",
    "FilesystemObjectStore",
    "ObjectInfo",
    "GoogleCloudObjectStore",
    "GCSConfig",
    "GoogleCloudStorage",
    "DriveManager",
    "get_drive",
    "get_drive_manager",
    "reset_drive_manager",
]
