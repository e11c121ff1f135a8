import asyncio
import hashlib
import logging

import httpx
import pytest
import respx

from quickfile_mcp import client as client_module
from quickfile_mcp.client import QuickFileClient, get_api_client, reset_api_client
from quickfile_mcp.exceptions import ClientError, ConfigError
from tests.conftest import BASE_URL, CREDS, envelope, sent_payload


@pytest.mark.asyncio
async def test_request_returns_body():
    body = {"RecordsetCount": 1, "ReturnCount": 1, "Record": [{"ClientID": 7}]}
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").respond(200, json=envelope("Client_Search", body))
        client = QuickFileClient(CREDS)
        result = await client.request("Client_Search", {"SearchParameters": {"ReturnCount": 1}})
        await client.aclose()

    assert result == body
    request = mock.calls[0].request
    assert request.headers["Content-Type"] == "application/json"
    assert request.headers["Accept"] == "application/json"
    payload = sent_payload(mock.calls[0])
    assert payload["Body"] == {"SearchParameters": {"ReturnCount": 1}}


@pytest.mark.asyncio
async def test_request_signs_each_call():
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/get").respond(200, json=envelope("Client_Get", {}))
        client = QuickFileClient(CREDS)
        await client.request("Client_Get", {"ClientID": 1})
        await client.request("Client_Get", {"ClientID": 1})
        await client.aclose()

    headers = [sent_payload(call)["Header"] for call in mock.calls]
    assert headers[0]["SubmissionNumber"] != headers[1]["SubmissionNumber"]
    for header in headers:
        auth = header["Authentication"]
        raw = CREDS.account_number + CREDS.api_key + header["SubmissionNumber"]
        assert auth["MD5Value"] == hashlib.md5(raw.encode()).hexdigest()
        assert auth["AccNumber"] == CREDS.account_number
        assert auth["ApplicationID"] == CREDS.application_id
        assert "TestMode" not in header
        assert CREDS.api_key not in mock.calls[0].request.content.decode()


@pytest.mark.asyncio
async def test_test_mode_flag():
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/get").respond(200, json=envelope("Client_Get", {}))
        client = QuickFileClient(CREDS, test_mode=True)
        assert client.is_test_mode()
        await client.request("Client_Get", {})
        client.set_test_mode(False)
        assert not client.is_test_mode()
        await client.request("Client_Get", {})
        await client.aclose()

    assert sent_payload(mock.calls[0])["Header"]["TestMode"] is True
    assert "TestMode" not in sent_payload(mock.calls[1])["Header"]


@pytest.mark.asyncio
async def test_request_without_body():
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/report/subscriptions").respond(200, json=envelope("Report_Subscriptions", {}))
        client = QuickFileClient(CREDS)
        await client.request("Report_Subscriptions", no_body=True)
        await client.aclose()

    assert "Body" not in sent_payload(mock.calls[0])


@pytest.mark.asyncio
async def test_http_error_status():
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").respond(500, text="boom")
        client = QuickFileClient(CREDS)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "500"
    assert "HTTP 500" in excinfo.value.message


@pytest.mark.asyncio
async def test_vendor_errors_in_success_response():
    data = {
        "Errors": [
            {"ErrorCode": "AUTH_FAILED", "ErrorMessage": "Invalid credentials"},
            {"ErrorCode": "OTHER", "ErrorMessage": "Account locked"},
        ]
    }
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").respond(200, json=data)
        client = QuickFileClient(CREDS)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "AUTH_FAILED"
    assert excinfo.value.message == "Invalid credentials; Account locked"


@pytest.mark.asyncio
async def test_alternate_response_key():
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/report/ageing").respond(200, json=envelope("Report_AgeingReport", {"Totals": 3}))
        client = QuickFileClient(CREDS)
        result = await client.request("Report_Ageing", {})
        await client.aclose()

    assert result == {"Totals": 3}


@pytest.mark.asyncio
@pytest.mark.parametrize("kwargs", [{"json": {"SomeOtherKey": []}}, {"text": "<html>not json</html>"}])
async def test_unparseable_response(kwargs):
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").respond(200, **kwargs)
        client = QuickFileClient(CREDS)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "PARSE_ERROR"


@pytest.mark.asyncio
async def test_network_error():
    def refuse(request):
        raise httpx.ConnectError("connection refused", request=request)

    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").mock(side_effect=refuse)
        client = QuickFileClient(CREDS)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "NETWORK_ERROR"
    assert "connection refused" in excinfo.value.message


@pytest.mark.asyncio
async def test_transport_timeout():
    def slow(request):
        raise httpx.ReadTimeout("read timed out", request=request)

    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").mock(side_effect=slow)
        client = QuickFileClient(CREDS, timeout=5)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "TIMEOUT"
    assert excinfo.value.message == "Request timeout after 5000ms"


@pytest.mark.asyncio
async def test_overall_timeout():
    async def hang(request):
        await asyncio.sleep(10)
        return httpx.Response(200, json=envelope("Client_Search", {}))

    http = httpx.AsyncClient(transport=httpx.MockTransport(hang))
    client = QuickFileClient(CREDS, timeout=0.25, client=http)
    with pytest.raises(ClientError) as excinfo:
        await asyncio.wait_for(client.request("Client_Search", {}), timeout=5)
    await client.aclose()

    assert excinfo.value.code == "TIMEOUT"
    assert excinfo.value.message == "Request timeout after 250ms"


@pytest.mark.asyncio
async def test_unexpected_failure_is_unknown():
    def explode(request):
        raise RuntimeError("boom")

    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/search").mock(side_effect=explode)
        client = QuickFileClient(CREDS)
        with pytest.raises(ClientError) as excinfo:
            await client.request("Client_Search", {})
        await client.aclose()

    assert excinfo.value.code == "UNKNOWN"
    assert excinfo.value.message == "Unknown error occurred"


@pytest.mark.asyncio
async def test_debug_logging_redacts_secrets(monkeypatch, caplog):
    monkeypatch.setenv("QUICKFILE_DEBUG", "1")
    caplog.set_level(logging.DEBUG, logger="quickfile_mcp.client")
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/system/getaccountdetails").respond(
            200,
            json=envelope(
                "System_GetAccountDetails",
                {"AccountDetails": {"AccountNumber": CREDS.account_number, "CompanyName": "Acme"}},
            ),
        )
        client = QuickFileClient(CREDS)
        await client.system.get_account()
        await client.aclose()

    md5_value = sent_payload(mock.calls[0])["Header"]["Authentication"]["MD5Value"]
    assert "URL: https://api.quickfile.co.uk/1_2/system/getaccountdetails" in caplog.text
    assert "***REDACTED***" in caplog.text
    assert CREDS.application_id in caplog.text
    assert "Acme" in caplog.text
    assert CREDS.account_number not in caplog.text
    assert md5_value not in caplog.text
    assert CREDS.api_key not in caplog.text


@pytest.mark.asyncio
async def test_no_debug_logging_by_default(caplog):
    caplog.set_level(logging.DEBUG, logger="quickfile_mcp.client")
    with respx.mock(base_url=BASE_URL) as mock:
        mock.post("/1_2/client/get").respond(200, json=envelope("Client_Get", {}))
        client = QuickFileClient(CREDS)
        await client.request("Client_Get", {})
        await client.aclose()

    assert not [r for r in caplog.records if r.name == "quickfile_mcp.client"]


def test_redact_request_leaves_original_untouched():
    request = {"payload": {"Header": {"Authentication": {"AccNumber": "1", "MD5Value": "2", "ApplicationID": "3"}}}}
    safe = client_module.redact_request(request)
    assert safe["payload"]["Header"]["Authentication"] == {
        "AccNumber": "***REDACTED***",
        "MD5Value": "***REDACTED***",
        "ApplicationID": "3",
    }
    assert request["payload"]["Header"]["Authentication"]["AccNumber"] == "1"


def test_client_exposes_account_number():
    assert QuickFileClient(CREDS).account_number == CREDS.account_number


def test_default_client_is_shared(monkeypatch):
    monkeypatch.setattr(client_module, "load_credentials", lambda: CREDS)
    first = get_api_client()
    assert get_api_client() is first
    assert not first.is_test_mode()

    replaced = get_api_client(test_mode=True)
    assert replaced is not first
    assert replaced.is_test_mode()
    assert get_api_client() is replaced

    reset_api_client()
    assert get_api_client() is not replaced


def test_default_client_propagates_config_errors(monkeypatch, tmp_path):
    monkeypatch.setenv("QUICKFILE_CREDENTIALS", str(tmp_path / "missing.json"))
    with pytest.raises(ConfigError) as excinfo:
        get_api_client()
    assert "missing.json" in str(excinfo.value)


def test_replaced_default_client_stays_open(monkeypatch):
    monkeypatch.setattr(client_module, "load_credentials", lambda: CREDS)
    first = get_api_client()
    get_api_client(test_mode=True)
    assert not first._client.is_closed


@pytest.mark.asyncio
async def test_debug_flag_enabled_after_logging_configured(monkeypatch, caplog):
    client_logger = logging.getLogger("quickfile_mcp.client")
    original_level = client_logger.level
    client_logger.setLevel(logging.INFO)
    monkeypatch.setenv("QUICKFILE_DEBUG", "1")
    try:
        with respx.mock(base_url=BASE_URL) as mock:
            mock.post("/1_2/client/get").respond(200, json=envelope("Client_Get", {}))
            client = QuickFileClient(CREDS)
            await client.request("Client_Get", {})
            await client.aclose()
    finally:
        client_logger.setLevel(original_level)

    messages = [r.getMessage() for r in caplog.records if r.name == "quickfile_mcp.client"]
    assert any(m.startswith("URL: ") for m in messages)
