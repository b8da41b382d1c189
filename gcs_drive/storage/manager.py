"""
Drive registry.

Drivers register under a name with ``extend()``; ``disk(name)`` builds
the drive from settings on first use and caches it. The ``gcs`` driver
is registered by default, along with ``local``, which runs the same
driver over a directory on disk.
"""

import logging
from functools import lru_cache
from typing import Callable, Dict, List, Optional

from gcs_drive.config.settings import Settings, get_settings
from gcs_drive.storage.adapter import StorageAdapter, StorageError
from gcs_drive.storage.filesystem import FilesystemObjectStore
from gcs_drive.storage.gcs import GCSConfig, GoogleCloudStorage

logger = logging.getLogger(__name__)

DriverFactory = Callable[[Settings], StorageAdapter]


def create_gcs_drive(settings: Settings) -> StorageAdapter:
    return GoogleCloudStorage(
        GCSConfig(bucket=settings.gcs_bucket, key_filename=settings.gcs_key_filename),
        download_dir=settings.download_dir,
        signed_url_version=settings.signed_url_version,
    )


def create_local_drive(settings: Settings) -> StorageAdapter:
    return GoogleCloudStorage(
        GCSConfig(bucket=settings.gcs_bucket or "local"),
        store=FilesystemObjectStore(base_path=settings.local_storage_path),
        download_dir=settings.download_dir,
    )


class DriveManager:
    """Name-keyed registry of drive factories and built drives."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        self._drivers: Dict[str, DriverFactory] = {}
        self._disks: Dict[str, StorageAdapter] = {}

        self.extend("gcs", create_gcs_drive)
        self.extend("local", create_local_drive)

    def extend(self, name: str, factory: DriverFactory) -> None:
        """
        Register a driver factory.

        Re-registering a name drops any drive already built for it.

        Args:
            name: Disk name used with ``disk()``
            factory: Callable building the drive from settings
        """
        self._drivers[name] = factory
        self._disks.pop(name, None)

    @property
    def drivers(self) -> List[str]:
        return sorted(self._drivers)

    def disk(self, name: Optional[str] = None) -> StorageAdapter:
        """
        Get a drive by name.

        Args:
            name: Disk name; the configured default disk when omitted

        Returns:
            StorageAdapter instance

        Raises:
            StorageError: If no driver is registered under ``name``
        """
        name = name or self.settings.default_disk

        if name not in self._disks:
            factory = self._drivers.get(name)
            if factory is None:
                raise StorageError(
                    f"Unsupported disk: {name}. "
                    f"Registered disks: {', '.join(self.drivers)}"
                )
            logger.info(f"Creating drive for disk '{name}'")
            self._disks[name] = factory(self.settings)

        return self._disks[name]


@lru_cache()
def get_drive_manager() -> DriveManager:
    return DriveManager(get_settings())


def get_drive(name: Optional[str] = None) -> StorageAdapter:
    """Shortcut for ``get_drive_manager().disk(name)``."""
    return get_drive_manager().disk(name)


def reset_drive_manager() -> None:
    """Reset the cached registry (useful for testing)."""
    get_drive_manager.cache_clear()
