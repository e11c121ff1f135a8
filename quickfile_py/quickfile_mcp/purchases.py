from __future__ import annotations

from typing import Any, Dict, List, Optional

from .client import QuickFileClient
from .invoices import DEFAULT_VAT_PERCENTAGE


class PurchasesAPI:
    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def search(
        self,
        *,
        supplier_id: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        status: Optional[str] = None,
        search_keyword: Optional[str] = None,
        return_count: int = 25,
        offset: int = 0,
        order_by: str = "ReceiptDate",
        order_direction: str = "DESC",
    ) -> Dict[str, Any]:
        # QuickFile validates element order: paging, filters, then ordering.
        params: Dict[str, Any] = {"ReturnCount": return_count, "Offset": offset}
        if supplier_id:
            params["SupplierID"] = supplier_id
        if date_from:
            params["DateFrom"] = date_from
        if date_to:
            params["DateTo"] = date_to
        if status:
            params["Status"] = status
        if search_keyword:
            params["SearchKeyword"] = search_keyword
        params["OrderResultsBy"] = order_by
        params["OrderDirection"] = order_direction
        data = await self._client.request("Purchase_Search", {"SearchParameters": params}) or {}
        purchases = (data.get("Purchases") or {}).get("Purchase") or []
        return {"totalRecords": data.get("TotalRecords"), "count": len(purchases), "purchases": purchases}

    async def get(self, purchase_id: int) -> Any:
        data = await self._client.request("Purchase_Get", {"PurchaseID": purchase_id}) or {}
        return data.get("PurchaseDetails")

    async def create(
        self,
        *,
        supplier_id: int,
        lines: List[Dict[str, Any]],
        currency: str = "GBP",
        issue_date: Optional[str] = None,
        due_date: Optional[str] = None,
        supplier_ref: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        purchase_data: Dict[str, Any] = {"SupplierID": supplier_id, "Currency": currency}
        if issue_date:
            purchase_data["IssueDate"] = issue_date
        if due_date:
            purchase_data["DueDate"] = due_date
        if supplier_ref:
            purchase_data["SupplierRef"] = supplier_ref
        if notes:
            purchase_data["Notes"] = notes
        purchase_data["PurchaseLines"] = [
            {
                "ItemDescription": line["description"],
                "UnitCost": line["unit_cost"],
                "Qty": line["quantity"],
                "NominalCode": line["nominal_code"],
                "Tax1": {
                    "TaxName": "VAT",
                    "TaxPercentage": DEFAULT_VAT_PERCENTAGE
                    if line.get("vat_percentage") is None
                    else line["vat_percentage"],
                },
            }
            for line in lines
        ]
        data = await self._client.request("Purchase_Create", {"PurchaseData": purchase_data}) or {}
        number = data.get("PurchaseNumber")
        return {
            "success": True,
            "purchaseId": data.get("PurchaseID"),
            "purchaseNumber": number,
            "message": f"Purchase #{number} created successfully",
        }

    async def delete(self, purchase_id: int) -> Dict[str, Any]:
        await self._client.request("Purchase_Delete", {"PurchaseID": purchase_id})
        return {
            "success": True,
            "purchaseId": purchase_id,
            "message": f"Purchase #{purchase_id} deleted successfully",
        }
