# Test configuration

import pytest
import os
import sys
from unittest.mock import MagicMock

# Add project root to path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from gcs_drive.config.settings import Settings
from gcs_drive.storage.filesystem import FilesystemObjectStore
from gcs_drive.storage.gcs import GCSConfig, GoogleCloudStorage
from gcs_drive.storage.object_store import ObjectStore


@pytest.fixture
def test_settings(tmp_path):
    """Override settings for testing"""
    return Settings(
        gcs_bucket="primary",
        default_disk="local",
        local_storage_path=str(tmp_path / "storage"),
        download_dir=str(tmp_path / "tmp"),
    )


@pytest.fixture
def mock_store():
    """ObjectStore double recording every backend call."""
    return MagicMock(spec=ObjectStore)


@pytest.fixture
def mock_drive(mock_store, tmp_path):
    """GCS drive over a mocked backend, default bucket 'primary'."""
    return GoogleCloudStorage(
        GCSConfig(bucket="primary"),
        store=mock_store,
        download_dir=str(tmp_path / "tmp"),
    )


@pytest.fixture
def fs_store(tmp_path):
    return FilesystemObjectStore(str(tmp_path / "storage"))


@pytest.fixture
def fs_drive(fs_store, tmp_path):
    """GCS drive over a real filesystem backend."""
    return GoogleCloudStorage(
        GCSConfig(bucket="primary"),
        store=fs_store,
        download_dir=str(tmp_path / "tmp"),
    )
