from __future__ import annotations

from typing import Any, Dict, List, Optional

from .client import QuickFileClient

ACCOUNT_TYPES = ["CURRENT", "PETTY", "BUILDINGSOC", "LOAN", "MERCHANT", "EQUITY", "CREDITCARD", "RESERVE"]


class BankAPI:
    def __init__(self, client: QuickFileClient) -> None:
        self._client = client

    async def get_accounts(self) -> Dict[str, Any]:
        # Bank_GetAccounts rejects requests without OrderResultsBy and AccountTypes.
        body = {
            "SearchParameters": {
                "OrderResultsBy": "NominalCode",
                "AccountTypes": {"AccountType": ACCOUNT_TYPES},
            }
        }
        data = await self._client.request("Bank_GetAccounts", body) or {}
        accounts = (data.get("BankAccounts") or {}).get("BankAccount") or []
        return {"count": len(accounts), "accounts": accounts}

    async def get_balances(self, nominal_codes: List[str]) -> Dict[str, Any]:
        body = {"NominalCodes": {"NominalCode": list(nominal_codes)}}
        data = await self._client.request("Bank_GetAccountBalances", body) or {}
        return {"balances": data.get("Balances")}

    async def search(
        self,
        nominal_code: str,
        *,
        date_from: Optional[str] = None,
        date_to: Optional[str] = None,
        reference: Optional[str] = None,
        min_amount: Optional[float] = None,
        max_amount: Optional[float] = None,
        return_count: int = 50,
        offset: int = 0,
        order_by: str = "TransactionDate",
        order_direction: str = "DESC",
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "ReturnCount": return_count,
            "Offset": offset,
            "OrderResultsBy": order_by,
            "OrderDirection": order_direction,
            "NominalCode": int(nominal_code),
        }
        if reference:
            params["Reference"] = reference
        if date_from:
            params["FromDate"] = date_from
        if date_to:
            params["ToDate"] = date_to
        if min_amount is not None:
            params["AmountFrom"] = min_amount
        if max_amount is not None:
            params["AmountTo"] = max_amount
        data = await self._client.request("Bank_Search", {"SearchParameters": params}) or {}
        transactions = (data.get("Transactions") or {}).get("Transaction") or []
        return {
            "totalRecords": data.get("TotalRecords"),
            "count": len(transactions),
            "transactions": transactions,
        }

    async def create_account(
        self,
        *,
        account_name: str,
        account_type: str,
        currency: str = "GBP",
        bank_name: Optional[str] = None,
        sort_code: Optional[str] = None,
        account_number: Optional[str] = None,
        opening_balance: Optional[float] = None,
    ) -> Dict[str, Any]:
        account_data: Dict[str, Any] = {
            "AccountName": account_name,
            "AccountType": account_type,
            "Currency": currency,
        }
        if bank_name:
            account_data["BankName"] = bank_name
        if sort_code:
            account_data["SortCode"] = sort_code
        if account_number:
            account_data["AccountNumber"] = account_number
        if opening_balance is not None:
            account_data["OpeningBalance"] = opening_balance
        data = await self._client.request("Bank_CreateAccount", {"BankAccountData": account_data}) or {}
        nominal_code = data.get("NominalCode")
        return {
            "success": True,
            "nominalCode": nominal_code,
            "message": f'Bank account "{account_name}" created with nominal code {nominal_code}',
        }

    async def create_transaction(
        self,
        *,
        nominal_code: str,
        transaction_date: str,
        amount: float,
        transaction_type: str,
        reference: Optional[str] = None,
        payee_payer: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> Dict[str, Any]:
        txn: Dict[str, Any] = {
            "NominalCode": nominal_code,
            "TransactionDate": transaction_date,
            "Amount": amount,
            "TransactionType": transaction_type,
        }
        if reference is not None:
            txn["Reference"] = reference
        if payee_payer is not None:
            txn["PayeePayer"] = payee_payer
        if notes is not None:
            txn["Notes"] = notes
        data = await self._client.request("Bank_CreateTransaction", {"TransactionData": txn}) or {}
        txn_id = data.get("TransactionID")
        return {
            "success": True,
            "transactionId": txn_id,
            "message": f"Bank transaction created with ID {txn_id}",
        }
