from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional

from .client import QuickFileClient


def _unwrap_report(data: Any) -> Any:
    # Report endpoints answer with Totals/Breakdown directly; older
    # responses wrapped them in a Report element.
    if isinstance(data, dict) and "Report" in data:
        return data["Report"]
    return data


class ReportsAPI:
    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def profit_and_loss(self, *, start_date: str, end_date: str) -> Any:
        params = {"FromDate": start_date, "ToDate": end_date}
        data = await self._client.request("Report_ProfitAndLoss", {"SearchParameters": params})
        return _unwrap_report(data)

    async def balance_sheet(self, *, report_date: str) -> Any:
        data = await self._client.request("Report_BalanceSheet", {"SearchParameters": {"ToDate": report_date}})
        return _unwrap_report(data)

    async def vat_obligations(self, *, today: Optional[date] = None) -> Dict[str, Any]:
        """Filed and open MTD VAT returns over the last five years.

        Raises ClientError for accounts without MTD VAT.
        """
        today = today or date.today()
        params = {
            "FromDate": date(today.year - 5, 1, 1).isoformat(),
            "ToDate": today.isoformat(),
            "AccountType": "VAT",
        }
        data = await self._client.request("Report_VatObligations", {"SearchParameters": params}) or {}
        obligations = (data.get("Obligations") or {}).get("Obligation") or []
        return {"count": len(obligations), "obligations": obligations}

    async def ageing(self, *, report_type: str, as_at_date: Optional[str] = None) -> Any:
        body = {"ReportType": report_type, "AsAtDate": as_at_date or date.today().isoformat()}
        data = await self._client.request("Report_Ageing", body)
        return _unwrap_report(data)

    async def chart_of_accounts(self) -> Dict[str, Any]:
        data = await self._client.request("Ledger_GetNominalLedgers", {}) or {}
        accounts = (data.get("Nominals") or {}).get("Nominal") or []
        return {"count": len(accounts), "nominalCodes": accounts}

    async def subscriptions(self) -> Dict[str, Any]:
        data = await self._client.request("Report_Subscriptions", no_body=True) or {}
        subscriptions = (data.get("Subscriptions") or {}).get("Subscription") or []
        return {"count": len(subscriptions), "subscriptions": subscriptions}
