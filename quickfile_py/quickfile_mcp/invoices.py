from __future__ import annotations

from typing import Any, Dict, List, Optional

from .client import QuickFileClient

DEFAULT_VAT_PERCENTAGE = 20


def _invoice_line(line: Dict[str, Any]) -> Dict[str, Any]:
    out: Dict[str, Any] = {
        "ItemID": 0,
        "ItemDescription": line["description"],
        "UnitCost": line["unit_cost"],
        "Qty": line["quantity"],
    }
    if line.get("nominal_code"):
        out["NominalCode"] = line["nominal_code"]
    vat = line.get("vat_percentage")
    out["Tax1"] = {
        "TaxName": "VAT",
        "TaxPercentage": DEFAULT_VAT_PERCENTAGE if vat is None else vat,
    }
    return out


class InvoicesAPI:
    """Sales invoices, credit notes and estimates."""

    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def search(
        self,
        *,
        invoice_type: Optional[str] = None,
        client_id: Optional[int] = None,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        status: Optional[str] = None,
        search_keyword: Optional[str] = None,
        return_count: int = 25,
        offset: int = 0,
        order_by: Optional[str] = None,
        order_direction: Optional[str] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "InvoiceType": invoice_type,
            "ClientID": client_id,
            "DateFrom": date_from,
            "DateTo": date_to,
            "Status": status,
            "SearchKeyword": search_keyword,
            "ReturnCount": return_count,
            "Offset": offset,
            "OrderResultsBy": order_by,
            "OrderDirection": order_direction,
        }
        params = {k: v for k, v in params.items() if v is not None}
        data = await self._client.request("Invoice_Search", {"SearchParameters": params}) or {}
        invoices = (data.get("Invoices") or {}).get("Invoice") or []
        return {"totalRecords": data.get("TotalRecords"), "count": len(invoices), "invoices": invoices}

    async def get(self, invoice_id: int) -> Any:
        data = await self._client.request("Invoice_Get", {"InvoiceID": invoice_id}) or {}
        return data.get("InvoiceDetails")

    async def create(
        self,
        *,
        invoice_type: str,
        client_id: int,
        lines: List[Dict[str, Any]],
        currency: str = "GBP",
        term_days: int = 30,
        issue_date: Optional[str] = None,
        po_number: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        invoice_data: Dict[str, Any] = {
            "InvoiceType": invoice_type,
            "ClientID": client_id,
            "Currency": currency,
            "TermDays": term_days,
        }
        if issue_date:
            invoice_data["IssueDate"] = issue_date
        if po_number:
            invoice_data["PONumber"] = po_number
        if notes:
            invoice_data["Notes"] = notes
        invoice_data["InvoiceLines"] = [_invoice_line(line) for line in lines]
        data = await self._client.request("Invoice_Create", {"InvoiceData": invoice_data}) or {}
        number = data.get("InvoiceNumber")
        return {
            "success": True,
            "invoiceId": data.get("InvoiceID"),
            "invoiceNumber": number,
            "message": f"{invoice_type} #{number} created successfully",
        }

    async def delete(self, invoice_id: int) -> Dict[str, Any]:
        await self._client.request("Invoice_Delete", {"InvoiceID": invoice_id})
        return {
            "success": True,
            "invoiceId": invoice_id,
            "message": f"Invoice #{invoice_id} deleted successfully",
        }

    async def send(
        self,
        invoice_id: int,
        *,
        email_to: Optional[str] = None,
        email_subject: Optional[str] = None,
        email_body: Optional[str] = None,
        attach_pdf: bool = True,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"InvoiceID": invoice_id}
        if email_to:
            body["EmailTo"] = email_to
        if email_subject:
            body["EmailSubject"] = email_subject
        if email_body:
            body["EmailBody"] = email_body
        body["AttachPDF"] = attach_pdf
        await self._client.request("Invoice_Send", body)
        return {
            "success": True,
            "invoiceId": invoice_id,
            "message": f"Invoice #{invoice_id} sent successfully",
        }

    async def get_pdf(self, invoice_id: int) -> Dict[str, Any]:
        data = await self._client.request("Invoice_GetPDF", {"InvoiceID": invoice_id}) or {}
        return {
            "invoiceId": invoice_id,
            "pdfUrl": data.get("PDFUri"),
            "message": "PDF URL generated (valid for limited time)",
        }

    async def accept_decline_estimate(self, invoice_id: int, *, action: str) -> Dict[str, Any]:
        await self._client.request("Estimate_AcceptDecline", {"InvoiceID": invoice_id, "Action": action})
        verb = "accepted" if action.upper() == "ACCEPT" else "declined"
        return {
            "success": True,
            "estimateId": invoice_id,
            "action": action,
            "message": f"Estimate #{invoice_id} {verb}",
        }

    async def convert_estimate(self, estimate_id: int) -> Dict[str, Any]:
        data = await self._client.request("Estimate_ConvertToInvoice", {"EstimateID": estimate_id}) or {}
        number = data.get("InvoiceNumber")
        return {
            "success": True,
            "estimateId": estimate_id,
            "invoiceId": data.get("InvoiceID"),
            "invoiceNumber": number,
            "message": f"Estimate converted to Invoice #{number}",
        }
