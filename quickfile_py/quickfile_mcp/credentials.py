from __future__ import annotations

import json
import os
import re
from pathlib import Path
from typing import Optional, Union

from .exceptions import ConfigError
from .models import Credentials

CREDENTIALS_PATH = Path.home() / ".config" / ".quickfile-mcp" / "credentials.json"

_REQUIRED_FIELDS = ("accountNumber", "apiKey", "applicationId")
_ACCOUNT_NUMBER_RE = re.compile(r"^\d+$")
_UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


def credentials_path() -> Path:
    override = os.environ.get("QUICKFILE_CREDENTIALS")
    return Path(override).expanduser() if override else CREDENTIALS_PATH


def load_credentials(path: Optional[Union[str, Path]] = None) -> Credentials:
    """Read the credentials file.

    Raises ConfigError when the file is missing, is not JSON, or lacks any of
    accountNumber, apiKey and applicationId.
    """
    path = Path(path) if path is not None else credentials_path()
    if not path.exists():
        raise ConfigError(
            f"QuickFile credentials not found at {path}\n"
            "Please create the file with: accountNumber, apiKey, applicationId"
        )
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Invalid JSON in credentials file: {path}") from exc
    except OSError as exc:
        raise ConfigError(f"Unable to read credentials file {path}: {exc.strerror or exc}") from exc

    if not isinstance(data, dict) or any(not data.get(name) for name in _REQUIRED_FIELDS):
        raise ConfigError(
            "Missing required credential fields: accountNumber, apiKey, applicationId"
        )
    return Credentials(
        account_number=str(data["accountNumber"]),
        api_key=str(data["apiKey"]),
        application_id=str(data["applicationId"]),
    )


def validate_credentials_format(credentials: Credentials) -> bool:
    """Offline sanity check of the credential formats."""
    if not _ACCOUNT_NUMBER_RE.match(credentials.account_number or ""):
        return False
    if not credentials.api_key or len(credentials.api_key) < 10:
        return False
    if not _UUID_RE.match(credentials.application_id or ""):
        return False
    return True
