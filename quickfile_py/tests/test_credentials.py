import json

import pytest

from quickfile_mcp.credentials import load_credentials, validate_credentials_format
from quickfile_mcp.exceptions import ConfigError
from quickfile_mcp.models import Credentials

VALID = {
    "accountNumber": "6131400000",
    "apiKey": "ABCD-1234-EFGH",
    "applicationId": "3F2A9C1E-5B7D-4E8F-A1B2-C3D4E5F60789",
}


def _write(tmp_path, content: str):
    path = tmp_path / "credentials.json"
    path.write_text(content, encoding="utf-8")
    return path


def test_load_credentials(tmp_path):
    creds = load_credentials(_write(tmp_path, json.dumps(VALID)))
    assert creds.account_number == "6131400000"
    assert creds.api_key == "ABCD-1234-EFGH"
    assert creds.application_id == VALID["applicationId"]


def test_missing_file_names_expected_path(tmp_path):
    path = tmp_path / "nope" / "credentials.json"
    with pytest.raises(ConfigError) as excinfo:
        load_credentials(path)
    assert str(path) in str(excinfo.value)


def test_invalid_json(tmp_path):
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_credentials(_write(tmp_path, "{not json"))


@pytest.mark.parametrize("field", ["accountNumber", "apiKey", "applicationId"])
def test_missing_or_empty_field(tmp_path, field):
    missing = {k: v for k, v in VALID.items() if k != field}
    with pytest.raises(ConfigError, match="Missing required credential fields"):
        load_credentials(_write(tmp_path, json.dumps(missing)))
    with pytest.raises(ConfigError):
        load_credentials(_write(tmp_path, json.dumps({**VALID, field: ""})))


def test_environment_override(tmp_path, monkeypatch):
    path = _write(tmp_path, json.dumps(VALID))
    monkeypatch.setenv("QUICKFILE_CREDENTIALS", str(path))
    assert load_credentials().account_number == "6131400000"


def test_credentials_are_immutable():
    creds = Credentials(account_number="1", api_key="k" * 10, application_id="x")
    with pytest.raises(Exception):
        creds.api_key = "other"


def _creds(**overrides) -> Credentials:
    data = {
        "account_number": "6131400000",
        "api_key": "ABCD-1234-EFGH",
        "application_id": "3f2a9c1e-5b7d-4e8f-a1b2-c3d4e5f60789",
    }
    data.update(overrides)
    return Credentials(**data)


def test_validate_format_accepts_well_formed():
    assert validate_credentials_format(_creds()) is True
    assert validate_credentials_format(_creds(application_id="3F2A9C1E-5B7D-4E8F-A1B2-C3D4E5F60789")) is True


def test_validate_format_api_key_boundary():
    assert validate_credentials_format(_creds(api_key="A" * 10)) is True
    assert validate_credentials_format(_creds(api_key="A" * 9)) is False


@pytest.mark.parametrize(
    "overrides",
    [
        {"account_number": "61314A"},
        {"account_number": ""},
        {"application_id": "not-a-uuid"},
        {"application_id": "3f2a9c1e5b7d4e8fa1b2c3d4e5f60789"},
        {"application_id": "3f2a9c1e-5b7d-4e8f-a1b2-c3d4e5f6078"},
    ],
)
def test_validate_format_rejects_malformed(overrides):
    assert validate_credentials_format(_creds(**overrides)) is False


def test_non_utf8_file_is_config_error(tmp_path):
    path = tmp_path / "credentials.json"
    path.write_bytes(b'{"accountNumber": "\xff\xfe"}')
    with pytest.raises(ConfigError, match="Invalid JSON"):
        load_credentials(path)


def test_unreadable_path_is_config_error(tmp_path):
    path = tmp_path / "credentials.json"
    path.mkdir()
    with pytest.raises(ConfigError) as excinfo:
        load_credentials(path)
    assert str(path) in str(excinfo.value)
