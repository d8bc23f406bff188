"""Tests for DataSourceResolver."""

import threading
from pathlib import Path

import pytest

from threadline.adapters.data_source import DataSourceResolver, uri_to_path
from threadline.exceptions import NoSuchFileError
from threadline.schemas.message import BytesSource, UriSource


class RecordingScopedAccess:
    def __init__(self, grant: bool = True) -> None:
        self.grant = grant
        self.acquired: list[Path] = []
        self.released: list[Path] = []

    def acquire(self, path: Path) -> bool:
        self.acquired.append(path)
        return self.grant

    def release(self, path: Path) -> None:
        self.released.append(path)


@pytest.mark.asyncio
async def test_fetch_bytes_returns_buffer_without_scoped_access():
    access = RecordingScopedAccess()
    resolver = DataSourceResolver(scoped_access=access)
    assert await resolver.fetch(BytesSource(data=b"abc")) == b"abc"
    assert access.acquired == []


@pytest.mark.asyncio
async def test_fetch_documents_file_reads_directly(tmp_path: Path):
    docs = tmp_path / "Documents"
    docs.mkdir()
    file_path = docs / "note.txt"
    file_path.write_bytes(b"hello")
    access = RecordingScopedAccess(grant=False)
    resolver = DataSourceResolver(documents_dir=docs, scoped_access=access)

    assert await resolver.fetch(UriSource(uri=str(file_path))) == b"hello"
    assert access.acquired == []


@pytest.mark.asyncio
async def test_fetch_external_file_acquires_and_releases(tmp_path: Path):
    file_path = tmp_path / "photo.jpg"
    file_path.write_bytes(b"\xff\xd8\xff")
    access = RecordingScopedAccess()
    resolver = DataSourceResolver(documents_dir=tmp_path / "Documents", scoped_access=access)

    data = await resolver.fetch(UriSource(uri=file_path.as_uri()))

    assert data == b"\xff\xd8\xff"
    assert access.acquired == [file_path]
    assert access.released == [file_path]


@pytest.mark.asyncio
async def test_fetch_external_file_releases_on_read_failure(tmp_path: Path):
    directory = tmp_path / "not-a-file"
    directory.mkdir()
    access = RecordingScopedAccess()
    resolver = DataSourceResolver(scoped_access=access)

    with pytest.raises(OSError):
        await resolver.fetch(UriSource(uri=str(directory)))
    assert access.released == [directory]


@pytest.mark.asyncio
async def test_fetch_denied_scoped_access_raises_no_such_file(tmp_path: Path):
    location = str(tmp_path / "missing.png")
    access = RecordingScopedAccess(grant=False)
    resolver = DataSourceResolver(scoped_access=access)

    with pytest.raises(NoSuchFileError) as exc_info:
        await resolver.fetch(UriSource(uri=location))
    assert exc_info.value.location == location
    assert access.released == []


@pytest.mark.asyncio
async def test_default_scoped_access_rejects_missing_file(tmp_path: Path):
    resolver = DataSourceResolver()
    with pytest.raises(NoSuchFileError):
        await resolver.fetch(UriSource(uri=str(tmp_path / "nope.bin")))


def test_uri_to_path_handles_file_uri_and_plain_path():
    assert uri_to_path("file:///tmp/a%20b.txt") == Path("/tmp/a b.txt")
    assert uri_to_path("/tmp/c.txt") == Path("/tmp/c.txt")


@pytest.mark.asyncio
async def test_fetch_documents_check_runs_off_event_loop(tmp_path: Path):
    file_path = tmp_path / "note.txt"
    file_path.write_bytes(b"hello")
    resolver = DataSourceResolver(documents_dir=tmp_path)
    loop_thread = threading.get_ident()
    check_threads: list[int] = []
    original_check = resolver.is_stored_in_documents

    def recording_check(path: Path) -> bool:
        check_threads.append(threading.get_ident())
        return original_check(path)

    resolver.is_stored_in_documents = recording_check

    assert await resolver.fetch(UriSource(uri=str(file_path))) == b"hello"
    assert len(check_threads) == 1
    assert check_threads[0] != loop_thread
