"""
Object-store capability interface.

The primitives a drive needs from a backend, addressed by
``(bucket, name)``. Implementations translate their own failures into
``BackendError``.
"""

from abc import ABC, abstractmethod
from typing import Any, BinaryIO, Optional

from gcs_drive.storage.adapter import Expiry


class ObjectStore(ABC):
    """Per-bucket, per-object operations of a storage backend."""

    @abstractmethod
    def exists(self, bucket: str, name: str) -> bool:
        pass

    @abstractmethod
    def upload(
        self,
        bucket: str,
        name: str,
        content: Any,
        content_type: Optional[str] = None,
        public: bool = False,
        metadata: Optional[dict] = None,
    ) -> None:
        """
        Store ``content`` under ``name``.

        Args:
            bucket: Target bucket
            name: Object key
            content: bytes/bytearray, a local path (str or PathLike), or a
                binary file-like object
            content_type: MIME type recorded on the object
            public: Apply a public-read ACL on upload
            metadata: Custom metadata
        """
        pass

    @abstractmethod
    def delete(self, bucket: str, name: str) -> None:
        pass

    @abstractmethod
    def copy(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        pass

    @abstractmethod
    def move(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        """Copy to the destination, then remove the source."""
        pass

    @abstractmethod
    def make_public(self, bucket: str, name: str) -> None:
        pass

    @abstractmethod
    def make_private(self, bucket: str, name: str) -> None:
        pass

    @abstractmethod
    def open_reader(self, bucket: str, name: str) -> BinaryIO:
        """
        Return a lazy binary reader; must not contact the backend eagerly.

        Read failures raise BackendError from the reader's ``read()``.
        """
        pass

    @abstractmethod
    def stat(self, bucket: str, name: str) -> Any:
        """Return the backend's native descriptor, failing if missing."""
        pass

    @abstractmethod
    def download_to(self, bucket: str, name: str, path: str) -> None:
        pass

    @abstractmethod
    def signed_url(self, bucket: str, name: str, expiry: Expiry) -> str:
        pass
