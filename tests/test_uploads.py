"""Chunk staging and reassembly, at the service and endpoint level."""

from __future__ import annotations

import asyncio

import pytest

from myvoice.infrastructure.persistence.memory_blob_store import InMemoryBlobStore
from myvoice.services import ChunkReassembler, InvalidChunkError, MissingChunkError, audio_key
from myvoice.services.uploads import chunk_key


def _reassembler(store: InMemoryBlobStore, now: float = 1_000.0) -> ChunkReassembler:
    return ChunkReassembler(store, max_chunks=10, clock=lambda: now)


def test_out_of_order_chunks_concatenate_in_index_order():
    store = InMemoryBlobStore()
    reassembler = _reassembler(store)
    parts = [b"alpha-", b"bravo-", b"charlie"]

    async def scenario():
        for index in (2, 0, 1):
            await reassembler.put_chunk("42", index, 3, "audio/wav", parts[index])
        return await reassembler.complete("42", 3, "audio/wav")

    completed = asyncio.run(scenario())

    blob = asyncio.run(store.get(audio_key("42")))
    assert blob.data == b"".join(parts)
    assert blob.content_type == "audio/wav"
    assert completed.size == len(b"".join(parts))
    assert completed.chunk_count == 3
    assert asyncio.run(store.list_keys("chunks/")) == []


def test_missing_chunk_names_index_and_writes_nothing():
    store = InMemoryBlobStore()
    reassembler = _reassembler(store)

    async def scenario():
        await reassembler.put_chunk("7", 0, 3, "audio/mpeg", b"a")
        await reassembler.put_chunk("7", 2, 3, "audio/mpeg", b"c")
        await reassembler.complete("7", 3, "audio/mpeg")

    with pytest.raises(MissingChunkError) as excinfo:
        asyncio.run(scenario())

    assert excinfo.value.index == 1
    assert "Missing chunk 1" in str(excinfo.value)
    assert audio_key("7") not in store
    assert chunk_key("7", 0) in store


@pytest.mark.parametrize(
    ("index", "total", "data"),
    [(3, 3, b"x"), (-1, 3, b"x"), (0, 0, b"x"), (0, 11, b"x"), (0, 1, b"")],
)
def test_put_chunk_rejects_bad_coordinates(index, total, data):
    reassembler = _reassembler(InMemoryBlobStore())
    with pytest.raises(InvalidChunkError):
        asyncio.run(reassembler.put_chunk("1", index, total, "audio/mpeg", data))


def test_abort_and_sweep_release_staged_chunks():
    store = InMemoryBlobStore()
    old = _reassembler(store, now=1_000.0)
    fresh = _reassembler(store, now=5_000.0)

    async def scenario():
        await old.put_chunk("stale", 0, 2, "audio/mpeg", b"s")
        await fresh.put_chunk("live", 0, 2, "audio/mpeg", b"l")
        await fresh.put_chunk("dropped", 0, 2, "audio/mpeg", b"d")
        aborted = await fresh.abort("dropped")
        swept = await fresh.sweep_stale(max_age_seconds=3_600)
        return aborted, swept

    aborted, swept = asyncio.run(scenario())

    assert aborted == 1
    assert swept == 1
    assert asyncio.run(store.list_keys("chunks/")) == [chunk_key("live", 0)]


def _init_demo(client, owner_headers, name="Demo") -> str:
    response = client.post(
        "/api/upload-demo-init",
        data={"name": name, "audioFile": "demo.mp3"},
        headers=owner_headers,
    )
    assert response.status_code == 201
    return response.json()["demo"]["id"]


def _post_chunk(client, owner_headers, demo_id, index, total, data):
    return client.post(
        "/api/upload-audio-chunk",
        data={"id": demo_id, "index": str(index), "total": str(total), "contentType": "audio/mpeg"},
        files={"chunk": ("blob", data, "application/octet-stream")},
        headers=owner_headers,
    )


def test_chunked_upload_flow_serves_exact_bytes(client, owner_headers, store):
    demo_id = _init_demo(client, owner_headers)
    chunks = [b"\x00\x01" * 5, b"\x02" * 7, b"\x03"]

    for index in (1, 2, 0):
        response = _post_chunk(client, owner_headers, demo_id, index, len(chunks), chunks[index])
        assert response.status_code == 200
        assert response.json()["received"] == len(chunks[index])

    response = client.post(
        "/api/upload-audio-complete",
        json={"id": demo_id, "total": len(chunks), "contentType": "audio/mpeg"},
        headers=owner_headers,
    )
    assert response.status_code == 200
    body = response.json()
    assert body["size"] == sum(len(chunk) for chunk in chunks)
    assert body["demo"]["audioSize"] == body["size"]
    assert body["demo"]["contentType"] == "audio/mpeg"

    audio = client.get("/api/demo-audio", params={"id": demo_id})
    assert audio.status_code == 200
    assert audio.content == b"".join(chunks)
    assert audio.headers["cache-control"] == "public, max-age=31536000, immutable"
    assert asyncio.run(store.list_keys("chunks/")) == []


def test_complete_with_gap_returns_missing_index(client, owner_headers):
    demo_id = _init_demo(client, owner_headers)
    _post_chunk(client, owner_headers, demo_id, 0, 2, b"first")

    response = client.post(
        "/api/upload-audio-complete",
        json={"id": demo_id, "total": 2},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert response.json()["detail"]["missingIndex"] == 1
    assert client.get("/api/demo-audio", params={"id": demo_id}).status_code == 404


def test_complete_for_unknown_demo_is_not_found(client, owner_headers):
    response = client.post(
        "/api/upload-audio-complete",
        json={"id": "123", "total": 1},
        headers=owner_headers,
    )
    assert response.status_code == 404


def test_chunk_endpoint_validates_range(client, owner_headers):
    demo_id = _init_demo(client, owner_headers)
    response = _post_chunk(client, owner_headers, demo_id, 5, 2, b"x")
    assert response.status_code == 400


def test_upload_endpoints_require_owner(client):
    response = client.post("/api/upload-demo-init", data={"name": "Nope"})
    assert response.status_code == 401
    assert client.get("/api/demos").json()["demos"] == []


def test_abort_endpoint_removes_chunks(client, owner_headers, store):
    demo_id = _init_demo(client, owner_headers)
    _post_chunk(client, owner_headers, demo_id, 0, 3, b"one")
    _post_chunk(client, owner_headers, demo_id, 1, 3, b"two")

    response = client.delete(
        "/api/upload-audio-chunks",
        params={"id": demo_id},
        headers=owner_headers,
    )

    assert response.status_code == 200
    assert response.json() == {"id": demo_id, "removed": 2}
    assert chunk_key(demo_id, 0) not in store


def test_complete_refuses_total_different_from_staged():
    store = InMemoryBlobStore()
    reassembler = _reassembler(store)

    async def scenario():
        for index, part in enumerate([b"AAA", b"BBB", b"CCC"]):
            await reassembler.put_chunk("9", index, 3, "audio/mpeg", part)
        await reassembler.complete("9", 2, "audio/mpeg")

    with pytest.raises(InvalidChunkError):
        asyncio.run(scenario())

    assert audio_key("9") not in store
    assert len(asyncio.run(store.list_keys("chunks/9/"))) == 3


def test_complete_endpoint_rejects_changed_total(client, owner_headers, store):
    demo_id = _init_demo(client, owner_headers)
    for index in range(3):
        _post_chunk(client, owner_headers, demo_id, index, 3, b"part")

    response = client.post(
        "/api/upload-audio-complete",
        json={"id": demo_id, "total": 2},
        headers=owner_headers,
    )

    assert response.status_code == 400
    assert audio_key(demo_id) not in store
    assert len(asyncio.run(store.list_keys(f"chunks/{demo_id}/"))) == 3


def test_chunk_and_complete_reject_wrong_password(client, owner_headers, store):
    demo_id = _init_demo(client, owner_headers)
    _post_chunk(client, owner_headers, demo_id, 0, 1, b"staged")
    before = client.get("/api/demos").json()
    wrong = {"X-Owner-Password": "wrong"}

    chunk = _post_chunk(client, wrong, demo_id, 0, 1, b"replaced")
    complete = client.post(
        "/api/upload-audio-complete",
        json={"id": demo_id, "total": 1},
        headers=wrong,
    )

    assert chunk.status_code == 401
    assert complete.status_code == 401
    assert asyncio.run(store.get(chunk_key(demo_id, 0))).data == b"staged"
    assert audio_key(demo_id) not in store
    assert client.get("/api/demos").json() == before
