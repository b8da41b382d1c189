"""
Unit tests for the filesystem object-store backend.
"""

import io
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

from gcs_drive.storage.adapter import BackendError
from gcs_drive.storage.filesystem import FilesystemObjectStore, ObjectInfo


@pytest.fixture
def temp_storage(tmp_path):
    """Create a temporary storage instance."""
    return FilesystemObjectStore(str(tmp_path))


@pytest.fixture
def sample_file():
    """Create a sample file-like object."""
    return io.BytesIO(b"This is test content for storage")


class TestFilesystemStorageInit:
    """Test storage initialization."""

    def test_init_creates_base_directory(self, tmp_path):
        base = tmp_path / "nested" / "root"
        storage = FilesystemObjectStore(str(base))

        assert storage.base_path == base
        assert base.is_dir()

    def test_relative_path_resolution(self, tmp_path, monkeypatch):
        """Relative base paths are resolved to absolute ones."""
        monkeypatch.chdir(tmp_path)
        storage = FilesystemObjectStore("./test_storage")

        assert storage.base_path.is_absolute()
        assert storage.base_path == tmp_path / "test_storage"


class TestUpload:
    """Test object uploads."""

    def test_upload_stream_layout(self, temp_storage, sample_file):
        temp_storage.upload("media", "req-1/part-1/test.txt", sample_file)

        path = temp_storage.base_path / "media" / "req-1" / "part-1" / "test.txt"
        assert path.read_bytes() == b"This is test content for storage"
        assert temp_storage.exists("media", "req-1/part-1/test.txt")

    def test_upload_overwrites_existing(self, temp_storage):
        temp_storage.upload("media", "test.txt", b"First content")
        temp_storage.upload("media", "test.txt", b"Second content - different")

        assert temp_storage.open_reader("media", "test.txt").read() == b"Second content - different"

    def test_upload_from_path(self, temp_storage, tmp_path):
        source = tmp_path / "source.bin"
        source.write_bytes(b"\x00" * 64)

        temp_storage.upload("media", "copy.bin", source)

        assert temp_storage.stat("media", "copy.bin").size == 64

    def test_upload_missing_source_path(self, temp_storage, tmp_path):
        with pytest.raises(BackendError, match="Failed to upload"):
            temp_storage.upload("media", "x.bin", str(tmp_path / "nope.bin"))

    def test_reupload_private_clears_public_flag(self, temp_storage):
        temp_storage.upload("media", "a.txt", b"x", public=True)
        assert temp_storage.is_public("media", "a.txt")

        temp_storage.upload("media", "a.txt", b"y")
        assert not temp_storage.is_public("media", "a.txt")

    def test_unicode_filename(self, temp_storage, sample_file):
        temp_storage.upload("media", "тест_文件.txt", sample_file)
        assert temp_storage.exists("media", "тест_文件.txt")


class TestStat:
    def test_stat_returns_object_info(self, temp_storage):
        temp_storage.upload(
            "media", "doc.json", b"{}", content_type="application/json", metadata={"k": "v"}
        )

        info = temp_storage.stat("media", "doc.json")

        assert isinstance(info, ObjectInfo)
        assert info.bucket == "media"
        assert info.name == "doc.json"
        assert info.size == 2
        assert info.content_type == "application/json"
        assert info.metadata == {"k": "v"}
        assert info.public is False
        assert info.updated.tzinfo is not None

    def test_stat_guesses_content_type(self, temp_storage):
        (temp_storage.base_path / "media").mkdir()
        (temp_storage.base_path / "media" / "page.html").write_text("<p>")

        assert temp_storage.stat("media", "page.html").content_type == "text/html"

    def test_stat_missing(self, temp_storage):
        with pytest.raises(BackendError, match="not found"):
            temp_storage.stat("media", "missing.txt")


class TestDelete:
    """Test object deletion."""

    def test_delete_existing(self, temp_storage, sample_file):
        temp_storage.upload("media", "test.txt", sample_file)

        temp_storage.delete("media", "test.txt")
        assert not temp_storage.exists("media", "test.txt")

    def test_delete_removes_empty_directories(self, temp_storage, sample_file):
        temp_storage.upload("media", "req/part/only-file.txt", sample_file)
        part_dir = temp_storage.base_path / "media" / "req" / "part"
        assert part_dir.exists()

        temp_storage.delete("media", "req/part/only-file.txt")

        assert not part_dir.exists()
        assert not (temp_storage.base_path / "media" / "req").exists()
        # The bucket directory itself stays
        assert (temp_storage.base_path / "media").exists()

    def test_delete_keeps_non_empty_directories(self, temp_storage):
        temp_storage.upload("media", "dir/a.txt", b"a")
        temp_storage.upload("media", "dir/b.txt", b"b")

        temp_storage.delete("media", "dir/a.txt")

        assert temp_storage.exists("media", "dir/b.txt")

    def test_delete_nonexistent_raises(self, temp_storage):
        with pytest.raises(BackendError, match="not found"):
            temp_storage.delete("media", "fake/path/nonexistent.txt")


class TestCopyMove:
    def test_copy_keeps_content_type(self, temp_storage):
        temp_storage.upload("media", "a.txt", b"abc", content_type="text/plain", public=True)

        temp_storage.copy("media", "a.txt", "archive", "b.txt")

        info = temp_storage.stat("archive", "b.txt")
        assert info.content_type == "text/plain"
        assert info.public is False
        assert temp_storage.exists("media", "a.txt")

    def test_copy_missing_source(self, temp_storage):
        with pytest.raises(BackendError, match="not found"):
            temp_storage.copy("media", "missing.txt", "media", "b.txt")

    def test_move_removes_source(self, temp_storage):
        temp_storage.upload("media", "a.txt", b"abc")

        temp_storage.move("media", "a.txt", "media", "sub/b.txt")

        assert not temp_storage.exists("media", "a.txt")
        assert temp_storage.open_reader("media", "sub/b.txt").read() == b"abc"


class TestAcl:
    def test_make_public_missing_object(self, temp_storage):
        with pytest.raises(BackendError):
            temp_storage.make_public("media", "missing.txt")

    def test_delete_forgets_public_flag(self, temp_storage):
        temp_storage.upload("media", "a.txt", b"x", public=True)
        temp_storage.delete("media", "a.txt")
        temp_storage.upload("media", "a.txt", b"x")

        assert not temp_storage.is_public("media", "a.txt")


class TestReaderAndDownload:
    def test_open_reader_is_lazy(self, temp_storage):
        # No error until the first read
        reader = temp_storage.open_reader("media", "later.txt")
        temp_storage.upload("media", "later.txt", b"arrived")

        assert reader.read() == b"arrived"

    def test_download_to(self, temp_storage, tmp_path):
        temp_storage.upload("media", "a.bin", b"\x01\x02")
        target = tmp_path / "out.bin"

        temp_storage.download_to("media", "a.bin", str(target))

        assert target.read_bytes() == b"\x01\x02"

    def test_download_to_missing_directory(self, temp_storage, tmp_path):
        temp_storage.upload("media", "a.bin", b"\x01")

        with pytest.raises(BackendError, match="Failed to download"):
            temp_storage.download_to("media", "a.bin", str(tmp_path / "no" / "dir" / "a.bin"))


class TestSignedUrl:
    def test_signed_url_from_timedelta(self, temp_storage):
        before = int(datetime.now(timezone.utc).timestamp())
        url = temp_storage.signed_url("media", "a.txt", timedelta(hours=1))

        path_part, expires = url.split("?expires=")
        assert path_part == (temp_storage.base_path / "media" / "a.txt").as_uri()
        assert before + 3600 <= int(expires) <= before + 3601 + 5

    def test_signed_url_from_datetime_and_int(self, temp_storage):
        moment = datetime(2030, 12, 30, tzinfo=timezone.utc)

        assert temp_storage.signed_url("media", "a.txt", moment).endswith(
            f"?expires={int(moment.timestamp())}"
        )
        assert temp_storage.signed_url("media", "a.txt", 1900000000).endswith("?expires=1900000000")
