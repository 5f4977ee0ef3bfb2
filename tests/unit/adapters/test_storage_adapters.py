"""Tests for the local and HTTP object storage adapters."""

from __future__ import annotations

import httpx
import pytest

from fieldops.adapters.storage import local_storage_adapter
from fieldops.adapters.storage.http_storage_adapter import HttpObjectStorageAdapter
from fieldops.adapters.storage.local_storage_adapter import LocalFileStorageAdapter
from fieldops.application.errors import StorageError

# ─── Local directory ─────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_local_upload_writes_file(tmp_path):
    adapter = LocalFileStorageAdapter(tmp_path, "http://localhost:8000/files/")

    url = await adapter.upload("tickets/1_photo.jpg", b"jpeg")

    assert url == "http://localhost:8000/files/tickets/1_photo.jpg"
    assert (tmp_path / "tickets" / "1_photo.jpg").read_bytes() == b"jpeg"


@pytest.mark.asyncio
async def test_local_upload_refuses_traversal(tmp_path):
    adapter = LocalFileStorageAdapter(tmp_path / "uploads", "http://x")
    with pytest.raises(StorageError):
        await adapter.upload("../escape.txt", b"x")
    assert not (tmp_path / "escape.txt").exists()


@pytest.mark.asyncio
async def test_local_upload_writes_off_the_event_loop(tmp_path, monkeypatch):
    calls = []
    original = local_storage_adapter.asyncio.to_thread

    async def recording_to_thread(func, *args):
        calls.append(func)
        return await original(func, *args)

    monkeypatch.setattr(local_storage_adapter.asyncio, "to_thread", recording_to_thread)
    adapter = LocalFileStorageAdapter(tmp_path, "http://x")

    await adapter.upload("big.bin", b"0" * 1024)

    assert calls == [local_storage_adapter._write_file]
    assert (tmp_path / "big.bin").stat().st_size == 1024


@pytest.mark.asyncio
async def test_local_write_failure_is_storage_error(tmp_path):
    (tmp_path / "tickets").write_text("not a directory")
    adapter = LocalFileStorageAdapter(tmp_path, "http://x")

    with pytest.raises(StorageError):
        await adapter.upload("tickets/1_photo.jpg", b"jpeg")


# ─── HTTP bucket ─────────────────────────────────────────────────────


@pytest.mark.asyncio
async def test_http_upload_posts_to_bucket():
    seen: list[httpx.Request] = []

    def handler(request):
        seen.append(request)
        return httpx.Response(200, json={"Key": "files/documents/x.pdf"})

    adapter = HttpObjectStorageAdapter(
        api_url="https://store.example.com/",
        api_key="secret",
        bucket="files",
        transport=httpx.MockTransport(handler),
    )

    url = await adapter.upload("documents/x.pdf", b"%PDF", "application/pdf")

    assert url == "https://store.example.com/storage/v1/object/public/files/documents/x.pdf"
    request = seen[0]
    assert request.method == "POST"
    assert request.url.path == "/storage/v1/object/files/documents/x.pdf"
    assert request.headers["Authorization"] == "Bearer secret"
    assert request.headers["x-upsert"] == "true"
    assert request.headers["Content-Type"] == "application/pdf"
    assert request.content == b"%PDF"


@pytest.mark.asyncio
async def test_http_upload_error_becomes_storage_error():
    adapter = HttpObjectStorageAdapter(
        api_url="https://store.example.com",
        api_key="secret",
        bucket="files",
        transport=httpx.MockTransport(lambda r: httpx.Response(413, json={"error": "too large"})),
    )
    with pytest.raises(StorageError):
        await adapter.upload("big.bin", b"0" * 10)
