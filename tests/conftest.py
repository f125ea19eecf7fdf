"""Django bootstrap and a simulated content-repository backend."""
import io
import os

import django
import pytest
import requests
from django.test.utils import setup_test_environment
from requests.structures import CaseInsensitiveDict
from urllib3.response import HTTPResponse

os.environ.setdefault("DJANGO_SETTINGS_MODULE", "django_core.settings")
django.setup()
setup_test_environment()


def make_backend_response(status, reason, body=b"", headers=None):
    """A real requests.Response whose body streams from memory."""
    resp = requests.Response()
    resp.status_code = status
    resp.reason = reason
    resp.headers = CaseInsensitiveDict(headers or {})
    resp.raw = HTTPResponse(
        body=io.BytesIO(body),
        headers=headers or {},
        status=status,
        reason=reason,
        preload_content=False,
    )
    return resp


@pytest.fixture
def backend_response():
    return make_backend_response
