"""
Abstract base class for drive implementations.

Defines the interface the drive registry hands out through ``disk(name)``.
"""

from abc import ABC, abstractmethod
from datetime import datetime, timedelta
from typing import Any, BinaryIO, Optional, Union


class StorageError(Exception):
    """Exception raised for storage-related errors."""
    pass


class BackendError(StorageError):
    """
    A failure reported by the object-store backend.

    Wraps exactly one backend exception, kept as ``original`` and chained
    as ``__cause__``. No classification or retry happens on top of it.
    """

    def __init__(self, message: str, original: Optional[BaseException] = None):
        super().__init__(message)
        self.original = original


Expiry = Union[datetime, timedelta, int]


class StorageAdapter(ABC):
    """
    Abstract base class for drives.

    Every operation that touches a bucket accepts an optional ``bucket``
    keyword; when omitted the drive's own bucket resolution applies.
    """

    @abstractmethod
    def bucket(self, name: str) -> "StorageAdapter":
        """
        Use a different bucket for the next operation only.

        Args:
            name: Bucket name

        Returns:
            A drive whose next bucket-resolving call uses ``name``
        """
        pass

    @abstractmethod
    def exists(self, location: str, bucket: Optional[str] = None) -> bool:
        """
        Check if an object exists.

        Args:
            location: Object key
            bucket: Optional bucket override

        Returns:
            True if the object exists, False otherwise

        Raises:
            BackendError: If the backend cannot answer
        """
        pass

    @abstractmethod
    def get_url(self, location: str, bucket: Optional[str] = None) -> str:
        """
        Build the public URL of an object.

        Neither existence nor visibility is checked.
        """
        pass

    @abstractmethod
    def get_signed_url(self, location: str, expiry: Expiry, bucket: Optional[str] = None) -> str:
        """
        Generate a time-limited read URL.

        Args:
            location: Object key
            expiry: Absolute expiry (datetime), lifetime (timedelta) or
                absolute expiry in epoch seconds (int); not validated
            bucket: Optional bucket override

        Returns:
            Signed URL string

        Raises:
            BackendError: If signing fails
        """
        pass

    @abstractmethod
    def put(
        self,
        location: str,
        content: Any,
        public: bool = False,
        metadata: Optional[dict] = None,
        bucket: Optional[str] = None,
    ) -> str:
        """
        Upload content to ``location``.

        Args:
            location: Destination object key
            content: bytes, a local file path, or a binary file-like object
            public: Upload with a public-read ACL
            metadata: Custom object metadata
            bucket: Optional bucket override

        Returns:
            URL of the uploaded object

        Raises:
            BackendError: If the upload fails
        """
        pass

    @abstractmethod
    def delete(self, location: str, bucket: Optional[str] = None) -> bool:
        """Delete an object. Returns True on success."""
        pass

    @abstractmethod
    def copy(
        self,
        src: str,
        dest: str,
        dest_bucket: Optional[str] = None,
        public: bool = False,
        bucket: Optional[str] = None,
    ) -> str:
        """
        Copy an object, optionally across buckets.

        Args:
            src: Source object key
            dest: Destination object key
            dest_bucket: Destination bucket, defaults to the source bucket
            public: Make the destination public after copying
            bucket: Optional source bucket override

        Returns:
            URL of the destination object
        """
        pass

    @abstractmethod
    def move(
        self,
        src: str,
        dest: str,
        dest_bucket: Optional[str] = None,
        public: bool = False,
        bucket: Optional[str] = None,
    ) -> str:
        """Move an object. Same arguments and result as ``copy``."""
        pass

    @abstractmethod
    def make_public(self, location: str, bucket: Optional[str] = None) -> bool:
        """Grant public read access, keeping existing grants."""
        pass

    @abstractmethod
    def make_private(self, location: str, bucket: Optional[str] = None) -> bool:
        """Revoke public read access."""
        pass

    @abstractmethod
    def get_stream(self, location: str, bucket: Optional[str] = None) -> BinaryIO:
        """
        Open a lazy reader over an object's contents.

        Returned synchronously and without an existence check; read
        failures surface when the caller reads.
        """
        pass

    @abstractmethod
    def get_object(self, location: str, bucket: Optional[str] = None) -> Any:
        """
        Fetch an object's metadata descriptor.

        Raises:
            BackendError: If the object does not exist
        """
        pass

    @abstractmethod
    def download(self, location: str, bucket: Optional[str] = None) -> str:
        """
        Materialize an object on the local filesystem.

        Returns:
            Path of the downloaded file; the caller owns its lifecycle
        """
        pass
