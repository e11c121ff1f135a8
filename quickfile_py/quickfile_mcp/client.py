from __future__ import annotations

import asyncio
import copy
import json
import logging
import os
from typing import Any, Dict, Optional

import httpx

from . import exceptions
from .auth import create_auth_header
from .credentials import load_credentials
from .envelope import API_BASE_URL, API_VERSION, build_request, build_url, extract_body
from .models import Credentials

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
REDACTED = "***REDACTED***"

_JSON_HEADERS = {"Content-Type": "application/json", "Accept": "application/json"}


def debug_enabled() -> bool:
    return bool(os.environ.get("QUICKFILE_DEBUG"))


def redact_request(request: Dict[str, Any]) -> Dict[str, Any]:
    """Copy of a request envelope with the account number and hash masked."""
    safe = copy.deepcopy(request)
    auth = safe.get("payload", {}).get("Header", {}).get("Authentication")
    if isinstance(auth, dict):
        auth["AccNumber"] = REDACTED
        auth["MD5Value"] = REDACTED
    return safe


def _scrub(text: str, secrets) -> str:
    # The account number also appears in some request bodies.
    for secret in secrets:
        if secret:
            text = text.replace(secret, REDACTED)
    return text


class QuickFileClient:
    """Async client for the QuickFile JSON API."""

    def __init__(
        self,
        credentials: Optional[Credentials] = None,
        *,
        test_mode: bool = False,
        timeout: float = DEFAULT_TIMEOUT,
        base_url: str = API_BASE_URL,
        api_version: str = API_VERSION,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self._credentials = credentials if credentials is not None else load_credentials()
        self._test_mode = test_mode
        self.timeout = timeout
        self.base_url = base_url.rstrip("/")
        self.api_version = api_version
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def __aenter__(self) -> "QuickFileClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    @property
    def account_number(self) -> str:
        return self._credentials.account_number

    def set_test_mode(self, enabled: bool) -> None:
        self._test_mode = enabled

    def is_test_mode(self) -> bool:
        return self._test_mode

    def build_url(self, method_name: str) -> str:
        return build_url(method_name, self.base_url, self.api_version)

    async def request(self, method_name: str, body: Any = None, *, no_body: bool = False) -> Any:
        """Call a QuickFile method (e.g. ``Client_Search``) and return its Body.

        Raises ClientError for HTTP failures, vendor-reported errors, timeouts
        and network problems. Nothing is retried.
        """
        url = self.build_url(method_name)
        header = create_auth_header(self._credentials, self._test_mode)
        envelope = build_request(header, body, no_body=no_body)
        debug = debug_enabled()
        secrets = (self.account_number, header.authentication.md5_value)
        if debug:
            # The flag can be switched on after logging was configured.
            if not logger.isEnabledFor(logging.DEBUG):
                logger.setLevel(logging.DEBUG)
            logger.debug("URL: %s", url)
            logger.debug("Request: %s", _scrub(json.dumps(redact_request(envelope), indent=2), secrets))

        try:
            resp = await asyncio.wait_for(
                self._client.post(url, json=envelope, headers=_JSON_HEADERS),
                timeout=self.timeout,
            )
        except (asyncio.TimeoutError, httpx.TimeoutException) as exc:
            raise exceptions.ClientError(
                f"Request timeout after {int(self.timeout * 1000)}ms", "TIMEOUT"
            ) from exc
        except (httpx.RequestError, OSError) as exc:
            raise exceptions.ClientError(str(exc) or exc.__class__.__name__, "NETWORK_ERROR") from exc
        except exceptions.QuickFileError:
            raise
        except Exception as exc:
            logger.error("Unexpected failure calling %s: %r", method_name, exc)
            raise exceptions.ClientError("Unknown error occurred", "UNKNOWN") from exc

        if debug:
            logger.debug("Response Status: %s", resp.status_code)
            logger.debug("Response: %s", _scrub(resp.text, secrets))

        return self._decode(resp, method_name)

    @staticmethod
    def _decode(resp: httpx.Response, method_name: str) -> Any:
        if not 200 <= resp.status_code < 300:
            raise exceptions.ClientError(
                f"HTTP {resp.status_code}: {resp.reason_phrase}", str(resp.status_code)
            )
        try:
            data = resp.json()
        except ValueError as exc:
            raise exceptions.ParseError(f"Response from {method_name} is not valid JSON") from exc
        return extract_body(data, method_name)

    # Area accessors (lazy imports to avoid cycles)
    @property
    def system(self):
        from .system import SystemAPI

        return SystemAPI(self)

    @property
    def clients(self):
        from .clients import ClientsAPI

        return ClientsAPI(self)

    @property
    def invoices(self):
        from .invoices import InvoicesAPI

        return InvoicesAPI(self)

    @property
    def purchases(self):
        from .purchases import PurchasesAPI

        return PurchasesAPI(self)

    @property
    def suppliers(self):
        from .suppliers import SuppliersAPI

        return SuppliersAPI(self)

    @property
    def bank(self):
        from .bank import BankAPI

        return BankAPI(self)

    @property
    def reports(self):
        from .reports import ReportsAPI

        return ReportsAPI(self)


# Process-wide default instance. Passing options replaces it; last write wins.
# A replaced instance is left open since callers may still hold it.
_default_client: Optional[QuickFileClient] = None


def get_api_client(**options: Any) -> QuickFileClient:
    global _default_client
    if _default_client is None or options:
        _default_client = QuickFileClient(**options)
    return _default_client


def reset_api_client() -> None:
    global _default_client
    _default_client = None
