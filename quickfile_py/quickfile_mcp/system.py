from __future__ import annotations

from typing import Any, Dict, Optional

from .client import QuickFileClient

ACCOUNT_DETAIL_VARIABLES = [
    "CompanyName",
    "CompanyNumber",
    "BusinessType",
    "Address",
    "CountryIso",
    "BaseCurrency",
    "Tel",
    "Web",
    "VatRegNumber",
    "YearEndDate",
]


class SystemAPI:
    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def get_account(self) -> Dict[str, Any]:
        # QuickFile wants the account number echoed back in the body.
        body = {
            "AccountDetails": {
                "AccountNumber": self._client.account_number,
                "ReturnVariables": {"Variable": ACCOUNT_DETAIL_VARIABLES},
            }
        }
        data = await self._client.request("System_GetAccountDetails", body) or {}
        return data.get("AccountDetails") or data

    async def search_events(
        self,
        *,
        event_type: Optional[str] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        related_id: Optional[int] = None,
        related_type: Optional[str] = None,
        return_count: int = 25,
        offset: int = 0,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {"ReturnCount": return_count, "Offset": offset}
        if event_type:
            params["EventType"] = event_type
        if date_from:
            params["DateFrom"] = date_from
        if date_to:
            params["DateTo"] = date_to
        if related_id is not None:
            params["RelatedID"] = related_id
        if related_type:
            params["RelatedType"] = related_type
        data = await self._client.request("System_SearchEvents", {"SearchParameters": params}) or {}
        return {"totalRecords": data.get("TotalRecords"), "events": data.get("Events")}

    async def create_note(self, *, entity_type: str, entity_id: int, note_text: str) -> Dict[str, Any]:
        body = {"EntityType": entity_type, "EntityID": entity_id, "NoteText": note_text}
        data = await self._client.request("System_CreateNote", body) or {}
        return {
            "success": True,
            "noteId": data.get("NoteID"),
            "message": f"Note created successfully for {entity_type} #{entity_id}",
        }
