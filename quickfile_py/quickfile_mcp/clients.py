from __future__ import annotations

from typing import Any, Dict, Optional

from .client import QuickFileClient
from .entities import build_entity_data


class ClientsAPI:
    """Customer records."""

    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def search(
        self,
        *,
        company_name: Optional[str] = None,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        telephone: Optional[str] = None,
        return_count: int = 25,
        offset: int = 0,
        order_by: str = "CompanyName",
        order_direction: str = "ASC",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "ReturnCount": return_count,
            "Offset": offset,
            "OrderResultsBy": order_by,
            "OrderDirection": order_direction,
        }
        if company_name:
            params["CompanyName"] = company_name
        if first_name:
            params["FirstName"] = first_name
        if last_name:
            params["Surname"] = last_name
        if email:
            params["Email"] = email
        if telephone:
            params["Telephone"] = telephone
        data = await self._client.request("Client_Search", {"SearchParameters": params}) or {}
        return {
            "totalRecords": data.get("RecordsetCount"),
            "returnedCount": data.get("ReturnCount"),
            "clients": data.get("Record") or [],
        }

    async def get(self, client_id: int) -> Any:
        data = await self._client.request("Client_Get", {"ClientID": client_id}) or {}
        return data.get("ClientDetails")

    async def create(self, **fields: Any) -> Dict[str, Any]:
        client_data = build_entity_data(fields)
        data = await self._client.request("Client_Create", {"ClientData": client_data}) or {}
        client_id = data.get("ClientID")
        return {
            "success": True,
            "clientId": client_id,
            "message": f"Client created successfully with ID {client_id}",
        }

    async def update(self, client_id: int, **fields: Any) -> Dict[str, Any]:
        client_data = {"ClientID": client_id, **build_entity_data(fields, currency=None, term_days=None)}
        await self._client.request("Client_Update", {"ClientData": client_data})
        return {
            "success": True,
            "clientId": client_id,
            "message": f"Client #{client_id} updated successfully",
        }

    async def delete(self, client_id: int) -> Dict[str, Any]:
        await self._client.request("Client_Delete", {"ClientID": client_id})
        return {
            "success": True,
            "clientId": client_id,
            "message": f"Client #{client_id} deleted successfully",
        }

    async def insert_contact(
        self,
        client_id: int,
        *,
        first_name: str,
        last_name: str,
        email: Optional[str] = None,
        telephone: Optional[str] = None,
        mobile: Optional[str] = None,
        is_primary: bool = False,
    ) -> Dict[str, Any]:
        contact: Dict[str, Any] = {"FirstName": first_name, "LastName": last_name}
        if email:
            contact["Email"] = email
        if telephone:
            contact["Telephone"] = telephone
        if mobile:
            contact["Mobile"] = mobile
        contact["IsPrimary"] = is_primary
        data = await self._client.request(
            "Client_InsertContacts", {"ClientID": client_id, "Contact": contact}
        ) or {}
        return {
            "success": True,
            "contactId": data.get("ContactID"),
            "message": f"Contact added to client #{client_id}",
        }

    async def login_url(self, client_id: int) -> Dict[str, Any]:
        data = await self._client.request("Client_LogIn", {"ClientID": client_id}) or {}
        return {
            "clientId": client_id,
            "loginUrl": data.get("LoginURL"),
            "message": "Passwordless login URL generated (valid for limited time)",
        }
