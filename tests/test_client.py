import base64
import gzip
from unittest import mock

import pytest
from django.test import override_settings

from upload_app.client import (
    BackendWriteRequest,
    build_write_request,
    contents_url,
    iter_raw,
    put_contents,
)


def test_contents_url_encodes_owner_and_repo():
    url = contents_url("some owner", "repo?x", "dir/abc.png")
    assert url == "https://api.github.com/repos/some%20owner/repo%3Fx/contents/dir/abc.png"


@override_settings(GIT_CONTENT_API_URL="http://git.local/api/")
def test_contents_url_uses_configured_base():
    assert contents_url("o", "r", "f.txt") == "http://git.local/api/repos/o/r/contents/f.txt"


def test_build_write_request():
    write = build_write_request("a/f.txt", "notes.txt", b"\x00\x01hi", "abc123")
    assert write.commit_message == "Upload notes.txt"
    assert base64.b64decode(write.base64_content) == b"\x00\x01hi"
    assert write.branch == "main"
    assert write.payload() == {
        "message": "Upload notes.txt",
        "content": write.base64_content,
        "sha": "abc123",
        "branch": "main",
    }


def test_payload_omits_absent_object_hash():
    write = BackendWriteRequest(full_path="f", commit_message="m", base64_content="")
    assert "sha" not in write.payload()


@pytest.mark.asyncio
async def test_put_contents_sends_single_put(backend_response):
    write = build_write_request("dir/f.txt", "f.txt", b"hi", "deadbeef")
    upstream = backend_response(201, "Created", b"{}")
    with mock.patch("upload_app.client.requests.put", return_value=upstream) as put:
        resp = await put_contents("owner", "repo", write, "tok123", "agent/1.0")

    assert resp is upstream
    put.assert_called_once()
    args, kwargs = put.call_args
    assert args == ("https://api.github.com/repos/owner/repo/contents/dir/f.txt",)
    assert kwargs["headers"] == {
        "Authorization": "token tok123",
        "User-Agent": "agent/1.0",
        "Content-Type": "application/json",
        "Accept": "application/vnd.github+json",
    }
    assert kwargs["json"] == write.payload()
    assert kwargs["stream"] is True


@pytest.mark.asyncio
async def test_iter_raw_yields_body_verbatim(backend_response):
    body = b"x" * 1000
    upstream = backend_response(200, "OK", body)
    chunks = [chunk async for chunk in iter_raw(upstream, 256)]
    assert b"".join(chunks) == body


@pytest.mark.asyncio
async def test_iter_raw_keeps_content_encoding(backend_response):
    compressed = gzip.compress(b'{"content": {"name": "x.txt"}}')
    upstream = backend_response(201, "Created", compressed, {"Content-Encoding": "gzip"})
    chunks = [chunk async for chunk in iter_raw(upstream, 64)]
    assert b"".join(chunks) == compressed
