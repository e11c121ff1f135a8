from __future__ import annotations

from typing import Any, Dict, Optional

from .client import QuickFileClient
from .entities import build_entity_data


class SuppliersAPI:
    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def search(
        self,
        *,
        company_name: Optional[str] = None,
        contact_name: Optional[str] = None,
        email: Optional[str] = None,
        postcode: Optional[str] = None,
        return_count: int = 25,
        offset: int = 0,
        order_by: str = "CompanyName",
        order_direction: str = "ASC",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "OrderResultsBy": order_by,
            "OrderDirection": order_direction,
            "ReturnCount": return_count,
            "Offset": offset,
        }
        if company_name:
            params["CompanyName"] = company_name
        if contact_name:
            params["ContactName"] = contact_name
        if email:
            params["Email"] = email
        if postcode:
            params["Postcode"] = postcode
        data = await self._client.request("Supplier_Search", {"SearchParameters": params}) or {}
        suppliers = (data.get("Suppliers") or {}).get("Supplier") or []
        return {"totalRecords": data.get("TotalRecords"), "count": len(suppliers), "suppliers": suppliers}

    async def get(self, supplier_id: int) -> Any:
        data = await self._client.request("Supplier_Get", {"SupplierID": supplier_id}) or {}
        return data.get("SupplierDetails")

    async def create(self, **fields: Any) -> Dict[str, Any]:
        supplier_data = build_entity_data(fields)
        data = await self._client.request("Supplier_Create", {"SupplierData": supplier_data}) or {}
        supplier_id = data.get("SupplierID")
        return {
            "success": True,
            "supplierId": supplier_id,
            "message": f"Supplier created successfully with ID {supplier_id}",
        }

    async def delete(self, supplier_id: int) -> Dict[str, Any]:
        await self._client.request("Supplier_Delete", {"SupplierID": supplier_id})
        return {
            "success": True,
            "supplierId": supplier_id,
            "message": f"Supplier #{supplier_id} deleted successfully",
        }
