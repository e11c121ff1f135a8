import json
from typing import Any, Dict

import pytest

from quickfile_mcp.client import reset_api_client
from quickfile_mcp.models import Credentials

BASE_URL = "https://api.quickfile.co.uk"

CREDS = Credentials(
    account_number="98765432",
    api_key="ABCD-EFGH-1234",
    application_id="3f2a9c1e-5b7d-4e8f-a1b2-c3d4e5f60789",
)


def envelope(method_name: str, body: Any) -> Dict[str, Any]:
    return {
        method_name: {
            "Header": {"MessageType": "Response", "SubmissionNumber": "test"},
            "Body": body,
        }
    }


def sent_payload(call) -> Dict[str, Any]:
    return json.loads(call.request.content)["payload"]


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch: pytest.MonkeyPatch):
    monkeypatch.delenv("QUICKFILE_DEBUG", raising=False)
    monkeypatch.delenv("QUICKFILE_CREDENTIALS", raising=False)
    reset_api_client()
    yield
    reset_api_client()
