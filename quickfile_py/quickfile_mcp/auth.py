"""QuickFile request authentication.

Every request carries a fresh submission number and
``md5(AccountNumber + APIKey + SubmissionNumber)``. The digest is what
QuickFile verifies server-side, so it has to match their scheme exactly;
the API key itself never goes over the wire.
"""
from __future__ import annotations

import hashlib
import itertools
import threading
import time

from .models import Authentication, Credentials, RequestHeader

_counter = itertools.count(1)
_counter_lock = threading.Lock()


def _base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(digits[rem])
    return "".join(reversed(out))


def generate_submission_number() -> str:
    """Base-36 millisecond timestamp followed by a 4-digit session counter."""
    with _counter_lock:
        count = next(_counter)
    timestamp = _base36(int(time.time() * 1000))
    return f"{timestamp}{count:04d}"


def generate_md5_hash(account_number: str, api_key: str, submission_number: str) -> str:
    payload = f"{account_number}{api_key}{submission_number}"
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def build_header(
    credentials: Credentials,
    submission_number: str,
    md5_value: str,
    test_mode: bool = False,
) -> RequestHeader:
    return RequestHeader(
        submission_number=submission_number,
        authentication=Authentication(
            acc_number=credentials.account_number,
            md5_value=md5_value,
            application_id=credentials.application_id,
        ),
        test_mode=True if test_mode else None,
    )


def create_auth_header(credentials: Credentials, test_mode: bool = False) -> RequestHeader:
    submission_number = generate_submission_number()
    md5_value = generate_md5_hash(
        credentials.account_number, credentials.api_key, submission_number
    )
    return build_header(credentials, submission_number, md5_value, test_mode)
