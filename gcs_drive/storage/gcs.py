"""
Google Cloud Storage drive.

Implements the StorageAdapter interface by delegating every call to an
ObjectStore for the bucket picked by a BucketSelector. URLs are built
locally, not returned by the backend:

    https://storage.googleapis.com/{bucket}/{location}
"""

import copy
import logging
import mimetypes
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, BinaryIO, Optional

from gcs_drive.common.logging_config import PerformanceTracker
from gcs_drive.common.metrics import track_storage_operation
from gcs_drive.storage.adapter import Expiry, StorageAdapter
from gcs_drive.storage.bucket import BucketSelector
from gcs_drive.storage.google_cloud import GoogleCloudObjectStore
from gcs_drive.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

PUBLIC_URL_BASE = "https://storage.googleapis.com"


@dataclass(frozen=True)
class GCSConfig:
    """Construction-time options of the GCS drive."""
    bucket: str
    key_filename: Optional[str] = None


class GoogleCloudStorage(StorageAdapter):
    """
    Google Cloud Storage driver.

    Each operation resolves its bucket exactly once, before any request:
    the ``bucket`` keyword wins, then a pending override set through
    ``bucket()``, then the configured default.
    """

    def __init__(
        self,
        config: GCSConfig,
        store: Optional[ObjectStore] = None,
        download_dir: str = "tmp",
        signed_url_version: str = "v4",
    ):
        """
        Initialize the drive.

        Args:
            config: Default bucket and credentials path
            store: Backend to delegate to; a GoogleCloudObjectStore built
                from ``config`` when omitted
            download_dir: Directory that ``download()`` writes into
            signed_url_version: Signing scheme for the default backend
        """
        self.config = config
        self.store = store or GoogleCloudObjectStore(
            key_filename=config.key_filename,
            signed_url_version=signed_url_version,
        )
        self.download_dir = download_dir
        self._bucket = BucketSelector(config.bucket)

    def bucket(self, name: str) -> "GoogleCloudStorage":
        # The override lives on a clone, so calls on this instance are unaffected
        chained = copy.copy(self)
        chained._bucket = BucketSelector(self._bucket.default_bucket)
        chained._bucket.set_override(name)
        return chained

    def _build_url(self, bucket: str, location: str) -> str:
        return f"{PUBLIC_URL_BASE}/{bucket}/{location}"

    @track_storage_operation("exists")
    def exists(self, location: str, bucket: Optional[str] = None) -> bool:
        return self.store.exists(self._bucket.resolve(bucket), location)

    def get_url(self, location: str, bucket: Optional[str] = None) -> str:
        return self._build_url(self._bucket.resolve(bucket), location)

    @track_storage_operation("get_signed_url")
    def get_signed_url(self, location: str, expiry: Expiry, bucket: Optional[str] = None) -> str:
        return self.store.signed_url(self._bucket.resolve(bucket), location, expiry)

    @track_storage_operation("put")
    def put(
        self,
        location: str,
        content: Any,
        public: bool = False,
        metadata: Optional[dict] = None,
        bucket: Optional[str] = None,
    ) -> str:
        bucket = self._bucket.resolve(bucket)
        content_type, _ = mimetypes.guess_type(location)

        with PerformanceTracker("drive.put", logger, bucket=bucket, location=location):
            self.store.upload(
                bucket,
                location,
                content,
                content_type=content_type,
                public=public,
                metadata=metadata,
            )
        return self._build_url(bucket, location)

    @track_storage_operation("delete")
    def delete(self, location: str, bucket: Optional[str] = None) -> bool:
        bucket = self._bucket.resolve(bucket)
        self.store.delete(bucket, location)
        logger.info(f"Deleted {bucket}/{location}")
        return True

    @track_storage_operation("copy")
    def copy(
        self,
        src: str,
        dest: str,
        dest_bucket: Optional[str] = None,
        public: bool = False,
        bucket: Optional[str] = None,
    ) -> str:
        bucket = self._bucket.resolve(bucket)
        if dest_bucket is None:
            dest_bucket = bucket

        self.store.copy(bucket, src, dest_bucket, dest)
        logger.info(f"Copied {bucket}/{src} to {dest_bucket}/{dest}")

        # Not compensated: a failure here leaves the copy in place
        if public:
            self.make_public(dest, bucket=dest_bucket)
        return self._build_url(dest_bucket, dest)

    @track_storage_operation("move")
    def move(
        self,
        src: str,
        dest: str,
        dest_bucket: Optional[str] = None,
        public: bool = False,
        bucket: Optional[str] = None,
    ) -> str:
        bucket = self._bucket.resolve(bucket)
        if dest_bucket is None:
            dest_bucket = bucket

        self.store.move(bucket, src, dest_bucket, dest)
        logger.info(f"Moved {bucket}/{src} to {dest_bucket}/{dest}")

        if public:
            self.make_public(dest, bucket=dest_bucket)
        return self._build_url(dest_bucket, dest)

    @track_storage_operation("make_public")
    def make_public(self, location: str, bucket: Optional[str] = None) -> bool:
        self.store.make_public(self._bucket.resolve(bucket), location)
        return True

    @track_storage_operation("make_private")
    def make_private(self, location: str, bucket: Optional[str] = None) -> bool:
        self.store.make_private(self._bucket.resolve(bucket), location)
        return True

    def get_stream(self, location: str, bucket: Optional[str] = None) -> BinaryIO:
        return self.store.open_reader(self._bucket.resolve(bucket), location)

    @track_storage_operation("get_object")
    def get_object(self, location: str, bucket: Optional[str] = None) -> Any:
        return self.store.stat(self._bucket.resolve(bucket), location)

    @track_storage_operation("download")
    def download(self, location: str, bucket: Optional[str] = None) -> str:
        bucket = self._bucket.resolve(bucket)
        dest = f"{self.download_dir}/{int(time.time() * 1000)}-{location}"

        # location may contain "/"
        Path(dest).parent.mkdir(parents=True, exist_ok=True)

        with PerformanceTracker("drive.download", logger, bucket=bucket, location=location):
            self.store.download_to(bucket, location, dest)
        return dest
