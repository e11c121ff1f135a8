from __future__ import annotations

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    account_number: str = Field(alias="accountNumber")
    api_key: str = Field(alias="apiKey")
    application_id: str = Field(alias="applicationId")


class Authentication(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    acc_number: str = Field(alias="AccNumber")
    md5_value: str = Field(alias="MD5Value")
    application_id: str = Field(alias="ApplicationID")


class RequestHeader(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message_type: str = Field(default="Request", alias="MessageType")
    submission_number: str = Field(alias="SubmissionNumber")
    authentication: Authentication = Field(alias="Authentication")
    # Only ever True; None keeps the field off the wire.
    test_mode: Optional[bool] = Field(default=None, alias="TestMode")

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)


class VendorError(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow", coerce_numbers_to_str=True)

    error_code: str = Field(default="UNKNOWN", alias="ErrorCode")
    error_message: str = Field(default="", alias="ErrorMessage")
