import logging
from dataclasses import dataclass
from wsgiref.util import is_hop_by_hop

from asgiref.sync import sync_to_async
from django.conf import settings
from django.http import HttpRequest, HttpResponse, JsonResponse, StreamingHttpResponse
from django.views.decorators.csrf import csrf_exempt

from .client import build_write_request, iter_raw, put_contents
from .helpers import build_location, hash_content

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UploadRequest:
    repo_owner: str
    repo_name: str
    path: str
    token: str
    user_agent: str
    file_name: str
    content: bytes


def error_response(msg: str, code: int) -> JsonResponse:
    return JsonResponse({"msg": msg, "code": code}, status=code)


def relay_response(upstream) -> StreamingHttpResponse:
    headers = {k: v for k, v in upstream.headers.items() if not is_hop_by_hop(k)}
    return StreamingHttpResponse(
        iter_raw(upstream, settings.GIT_UPLOAD_CHUNK_SIZE),
        status=upstream.status_code,
        reason=upstream.reason,
        headers=headers,
    )


def _read_upload(request: HttpRequest):
    upload = request.FILES['file']
    return upload.name, upload.read()


async def _store(upload: UploadRequest):
    hashes = await sync_to_async(hash_content, thread_sensitive=False)(upload.content)
    location = build_location(upload.path, hashes.dedup_hash, upload.file_name)
    write = build_write_request(location.full_path, upload.file_name, upload.content, hashes.object_hash)
    return await put_contents(upload.repo_owner, upload.repo_name, write, upload.token, upload.user_agent)


@csrf_exempt
async def upload_file(request: HttpRequest) -> HttpResponse:
    upstream = None
    try:
        repo_owner = request.GET.get('repoOwner')
        repo_name = request.GET.get('repoName')
        path = request.GET.get('path') or ''
        token = request.GET.get('token')

        if not (repo_owner and repo_name and token):
            return error_response("Missing required parameters: repoOwner, repoName, or token", 400)
        if request.method != 'POST':
            return error_response("Invalid request method. Only POST is supported.", 405)

        file_name, content = await sync_to_async(_read_upload, thread_sensitive=False)(request)
        upload = UploadRequest(
            repo_owner=repo_owner,
            repo_name=repo_name,
            path=path,
            token=token,
            user_agent=request.headers.get('User-Agent'),
            file_name=file_name,
            content=content,
        )
        upstream = await _store(upload)
        response = relay_response(upstream)
    except Exception as e:
        logger.exception("Upload to %s/%s failed", request.GET.get('repoOwner'), request.GET.get('repoName'))
        if upstream is not None:
            upstream.close()
        return error_response(str(e), 500)
    return response
