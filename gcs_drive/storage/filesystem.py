"""
Filesystem object-store backend.

Mirrors the bucket/object layout on a local directory:
- {base_path}/{bucket}/{name}

Used for local development and as a real backend in tests. ACLs and
content types are tracked per process.
"""

import io
import mimetypes
import os
import shutil
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, BinaryIO, Dict, Optional, Set, Tuple

from gcs_drive.storage.adapter import BackendError, Expiry
from gcs_drive.storage.object_store import ObjectStore


@dataclass(frozen=True)
class ObjectInfo:
    """Descriptor returned by FilesystemObjectStore.stat()."""
    bucket: str
    name: str
    size: int
    content_type: Optional[str]
    updated: datetime
    public: bool = False
    metadata: Optional[dict] = None


class _LazyFileReader(io.RawIOBase):
    """Raw reader that opens its file on the first read."""

    def __init__(self, path: Path, bucket: str, name: str):
        self._path = path
        self._bucket = bucket
        self._name = name
        self._fh: Optional[BinaryIO] = None

    def readable(self) -> bool:
        return True

    def readinto(self, buffer) -> int:
        if self._fh is None:
            try:
                self._fh = open(self._path, "rb")
            except OSError as e:
                raise BackendError(
                    f"Failed to read {self._bucket}/{self._name}: {e}", original=e
                ) from e
        return self._fh.readinto(buffer)

    def close(self) -> None:
        if self._fh is not None:
            self._fh.close()
            self._fh = None
        super().close()


class FilesystemObjectStore(ObjectStore):
    """
    Filesystem-based object store.

    Each bucket is a directory under ``base_path``; object keys may
    contain ``/`` and map to nested directories.
    """

    def __init__(self, base_path: str = "./storage"):
        """
        Initialize filesystem storage.

        Args:
            base_path: Root directory holding one directory per bucket
        """
        self.base_path = Path(base_path).resolve()
        self.base_path.mkdir(parents=True, exist_ok=True)
        self._public: Set[Tuple[str, str]] = set()
        self._content_types: Dict[Tuple[str, str], Optional[str]] = {}
        self._metadata: Dict[Tuple[str, str], dict] = {}

    def _path(self, bucket: str, name: str) -> Path:
        return self.base_path / bucket / name

    def _require(self, bucket: str, name: str) -> Path:
        path = self._path(bucket, name)
        if not path.is_file():
            raise BackendError(f"Object not found: {bucket}/{name}")
        return path

    def exists(self, bucket: str, name: str) -> bool:
        return self._path(bucket, name).is_file()

    def upload(
        self,
        bucket: str,
        name: str,
        content: Any,
        content_type: Optional[str] = None,
        public: bool = False,
        metadata: Optional[dict] = None,
    ) -> None:
        try:
            target_path = self._path(bucket, name)
            target_path.parent.mkdir(parents=True, exist_ok=True)

            if isinstance(content, (bytes, bytearray)):
                target_path.write_bytes(bytes(content))
            elif isinstance(content, (str, os.PathLike)):
                shutil.copyfile(content, target_path)
            else:
                with open(target_path, "wb") as f:
                    shutil.copyfileobj(content, f)
        except OSError as e:
            raise BackendError(f"Failed to upload {bucket}/{name}: {e}", original=e) from e

        key = (bucket, name)
        self._content_types[key] = content_type
        self._metadata[key] = dict(metadata or {})
        if public:
            self._public.add(key)
        else:
            self._public.discard(key)

    def delete(self, bucket: str, name: str) -> None:
        path = self._require(bucket, name)
        try:
            path.unlink()
        except OSError as e:
            raise BackendError(f"Failed to delete {bucket}/{name}: {e}", original=e) from e
        self._forget(bucket, name)

        # Clean up empty parent directories below the bucket root
        bucket_root = self.base_path / bucket
        parent = path.parent
        while parent != bucket_root and parent != self.base_path:
            try:
                if any(parent.iterdir()):
                    break
                parent.rmdir()
                parent = parent.parent
            except OSError:
                break

    def _forget(self, bucket: str, name: str) -> None:
        key = (bucket, name)
        self._public.discard(key)
        self._content_types.pop(key, None)
        self._metadata.pop(key, None)

    def copy(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        source = self._require(src_bucket, src)
        target = self._path(dest_bucket, dest)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.copyfile(source, target)
        except OSError as e:
            raise BackendError(f"Failed to copy {src_bucket}/{src}: {e}", original=e) from e

        # The copy starts out private, like a fresh object
        src_key, dest_key = (src_bucket, src), (dest_bucket, dest)
        self._content_types[dest_key] = self._content_types.get(src_key)
        self._metadata[dest_key] = dict(self._metadata.get(src_key, {}))
        self._public.discard(dest_key)

    def move(self, src_bucket: str, src: str, dest_bucket: str, dest: str) -> None:
        self.copy(src_bucket, src, dest_bucket, dest)
        self.delete(src_bucket, src)

    def make_public(self, bucket: str, name: str) -> None:
        self._require(bucket, name)
        self._public.add((bucket, name))

    def make_private(self, bucket: str, name: str) -> None:
        self._require(bucket, name)
        self._public.discard((bucket, name))

    def is_public(self, bucket: str, name: str) -> bool:
        return (bucket, name) in self._public

    def open_reader(self, bucket: str, name: str) -> BinaryIO:
        return io.BufferedReader(_LazyFileReader(self._path(bucket, name), bucket, name))

    def stat(self, bucket: str, name: str) -> ObjectInfo:
        path = self._require(bucket, name)
        st = path.stat()
        key = (bucket, name)
        content_type = self._content_types.get(key) or mimetypes.guess_type(name)[0]
        return ObjectInfo(
            bucket=bucket,
            name=name,
            size=st.st_size,
            content_type=content_type,
            updated=datetime.fromtimestamp(st.st_mtime, tz=timezone.utc),
            public=key in self._public,
            metadata=dict(self._metadata.get(key, {})) or None,
        )

    def download_to(self, bucket: str, name: str, path: str) -> None:
        source = self._require(bucket, name)
        try:
            shutil.copyfile(source, path)
        except OSError as e:
            raise BackendError(f"Failed to download {bucket}/{name}: {e}", original=e) from e

    def signed_url(self, bucket: str, name: str, expiry: Expiry) -> str:
        if isinstance(expiry, timedelta):
            expires_at = int((datetime.now(timezone.utc) + expiry).timestamp())
        elif isinstance(expiry, datetime):
            expires_at = int(expiry.timestamp())
        else:
            expires_at = int(expiry)
        return f"{self._path(bucket, name).as_uri()}?expires={expires_at}"
