"""Write side of the remote content repository (GitHub contents API)."""
import base64
import logging
from dataclasses import dataclass
from typing import Optional

import requests
from asgiref.sync import sync_to_async
from django.conf import settings

from .helpers import encode_segment

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BackendWriteRequest:
    full_path: str
    commit_message: str
    base64_content: str
    object_hash: Optional[str] = None
    branch: str = 'main'

    def payload(self) -> dict:
        body = {"message": self.commit_message, "content": self.base64_content}
        if self.object_hash:
            body["sha"] = self.object_hash
        body["branch"] = self.branch
        return body


def contents_url(repo_owner: str, repo_name: str, full_path: str) -> str:
    base = settings.GIT_CONTENT_API_URL.rstrip('/')
    return f"{base}/repos/{encode_segment(repo_owner)}/{encode_segment(repo_name)}/contents/{full_path}"


def build_write_request(full_path, original_name, content: bytes, object_hash) -> BackendWriteRequest:
    return BackendWriteRequest(
        full_path=full_path,
        commit_message=f"Upload {original_name}",
        base64_content=base64.b64encode(content).decode('ascii'),
        object_hash=object_hash,
        branch=settings.GIT_CONTENT_BRANCH,
    )


async def put_contents(repo_owner, repo_name, write: BackendWriteRequest, token, user_agent) -> requests.Response:
    """Create or update ``write.full_path`` in one PUT.

    The object hash in the payload lets the backend decide between update and
    create atomically; a mismatch comes back as a 409 and is returned as-is,
    like every other status. Only transport failures raise.
    """
    url = contents_url(repo_owner, repo_name, write.full_path)
    headers = {
        "Authorization": f"token {token}",
        "User-Agent": user_agent,
        "Content-Type": "application/json",
        "Accept": settings.GIT_CONTENT_ACCEPT,
    }
    logger.info("PUT %s on branch %s", url, write.branch)
    resp = await sync_to_async(requests.put, thread_sensitive=False)(
        url,
        headers=headers,
        json=write.payload(),
        stream=True,
        timeout=settings.GIT_CONTENT_TIMEOUT,
    )
    logger.info("Backend answered %s %s for %s", resp.status_code, resp.reason, write.full_path)
    return resp


async def iter_raw(resp: requests.Response, chunk_size: int):
    """Yield the upstream body exactly as received, without content decoding."""
    chunks = resp.raw.stream(chunk_size, decode_content=False)
    read_chunk = sync_to_async(next, thread_sensitive=False)
    try:
        while True:
            chunk = await read_chunk(chunks, None)
            if chunk is None:
                break
            yield chunk
    finally:
        resp.close()
