"""
Google Cloud Storage backend.

Implements ObjectStore on top of the ``google-cloud-storage`` client.
Every client failure is re-raised as ``BackendError`` without
transformation or retry.
"""

import io
import logging
import os
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Any, BinaryIO, Iterator, Optional

from google.cloud import storage

from gcs_drive.storage.adapter import BackendError, Expiry
from gcs_drive.storage.object_store import ObjectStore

logger = logging.getLogger(__name__)

PUBLIC_READ_ACL = "publicRead"


@contextmanager
def _backend_errors(operation: str, bucket: str, name: str) -> Iterator[None]:
    """Re-raise anything the client throws as BackendError."""
    try:
        yield
    except BackendError:
        raise
    except Exception as e:
        logger.debug(f"{operation} failed for gs://{bucket}/{name}: {e}")
        raise BackendError(f"Failed to {operation} gs://{bucket}/{name}: {e}", original=e) from e


class _BlobStreamReader(io.RawIOBase):
    """Raw reader over a BlobReader that re-raises read failures as BackendError."""

    def __init__(self, reader: BinaryIO, bucket: str, name: str):
        self._reader = reader
        self._bucket = bucket
        self._name = name

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        with _backend_errors("read", self._bucket, self._name):
            data = self._reader.read(len(buffer))
        buffer[: len(data)] = data
        return len(data)

    def close(self) -> None:
        if not self.closed:
            self._reader.close()
        super().close()


class GoogleCloudObjectStore(ObjectStore):
    """
    ObjectStore backed by Google Cloud Storage.

    The client is built lazily so that a missing credential only fails
    the first operation, not construction.
    """

    def __init__(
        self,
        key_filename: Optional[str] = None,
        client: Optional[storage.Client] = None,
        signed_url_version: str = "v4",
    ):
        """
        Initialize the backend.

        Args:
            key_filename: Path to a service-account JSON key; application
                default credentials are used when omitted
            client: Pre-built client (takes precedence over key_filename)
            signed_url_version: Signing scheme for signed URLs ("v2" or "v4")
        """
        self.key_filename = key_filename
        self.signed_url_version = signed_url_version
        self._client = client

    @property
    def client(self) -> storage.Client:
        if self._client is None:
            try:
                if self.key_filename:
                    self._client = storage.Client.from_service_account_json(self.key_filename)
                else:
                    self._client = storage.Client()
            except Exception as e:
                raise BackendError(f"Failed to create storage client: {e}", original=e) from e
        return self._client

    def _blob(self, bucket: str, name: str) -> storage.Blob:
        return self.client.bucket(bucket).blob(name)

    def exists(self, bucket: str, name: str) -> bool:
        with _backend_errors("check existence of", bucket, name):
            return self._blob(bucket, name).exists()

    def upload(
        self,
        bucket: str,
        name: str,
        content: Any,
        content_type: Optional[str] = None,
        public: bool = False,
        metadata: Optional[dict] = None,
    ) -> None:
        with _backend_errors("upload", bucket, name):
            blob = self._blob(bucket, name)
            if metadata:
                blob.metadata = metadata

            kwargs = {"content_type": content_type}
            if public:
                kwargs["predefined_acl"] = PUBLIC_READ_ACL

            if isinstance(content, (bytes, bytearray)):
                blob.upload_from_string(bytes(content), **kwargs)
            elif isinstance(content, (str, os.PathLike)):
                blob.upload_from_filename(os.fspath(content), **kwargs)
            else:
                blob.upload_from_file(content, **kwargs)

        logger.debug(f"Uploaded gs://{bucket}/{name} ({content_type})")

    def delete(self, bucket: str, name: str) -> None:
        with _backend_errors("delete", bucket, name):
            self._blob(bucket, name).delete()

    def copy(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        with _backend_errors("copy", src_bucket, src):
            source = self.client.bucket(src_bucket)
            source.copy_blob(source.blob(src), self.client.bucket(dest_bucket), new_name=dest)

    def move(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        with _backend_errors("move", src_bucket, src):
            source = self.client.bucket(src_bucket)
            blob = source.blob(src)
            source.copy_blob(blob, self.client.bucket(dest_bucket), new_name=dest)
            # Moving onto itself leaves the single copy in place
            if (src_bucket, src) != (dest_bucket, dest):
                blob.delete()

    def make_public(self, bucket: str, name: str) -> None:
        with _backend_errors("make public", bucket, name):
            self._blob(bucket, name).make_public()

    def make_private(self, bucket: str, name: str) -> None:
        with _backend_errors("make private", bucket, name):
            self._blob(bucket, name).make_private()

    def open_reader(self, bucket: str, name: str) -> BinaryIO:
        # BlobReader fetches on first read
        with _backend_errors("open", bucket, name):
            reader = self._blob(bucket, name).open("rb")
        return io.BufferedReader(_BlobStreamReader(reader, bucket, name))

    def stat(self, bucket: str, name: str) -> storage.Blob:
        with _backend_errors("fetch metadata of", bucket, name):
            blob = self._blob(bucket, name)
            blob.reload()
            return blob

    def download_to(self, bucket: str, name: str, path: str) -> None:
        with _backend_errors("download", bucket, name):
            self._blob(bucket, name).download_to_filename(path)

    def signed_url(self, bucket: str, name: str, expiry: Expiry) -> str:
        # The client reads a bare int as a lifetime, not a timestamp
        if isinstance(expiry, int):
            expiry = datetime.fromtimestamp(expiry, tz=timezone.utc)

        with _backend_errors("sign URL for", bucket, name):
            return self._blob(bucket, name).generate_signed_url(
                expiration=expiry,
                method="GET",
                version=self.signed_url_version,
            )
