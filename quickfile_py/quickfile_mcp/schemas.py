"""Tool argument models.

Arguments arrive camelCase from the MCP client; each model's JSON schema
(by alias) doubles as the tool's ``inputSchema``. Checks are syntactic only.
"""
from __future__ import annotations

from datetime import date
from typing import Annotated, Any, Dict, List, Literal, Optional, Type, TypeVar

import pydantic
from pydantic import BaseModel, ConfigDict, Field, StringConstraints, model_validator
from pydantic.alias_generators import to_camel

from .exceptions import ValidationError

DateStr = Annotated[str, StringConstraints(pattern=r"^\d{4}-\d{2}-\d{2}$")]
NominalCode = Annotated[str, StringConstraints(pattern=r"^\d{4}$")]
Email = Annotated[str, StringConstraints(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")]
Currency = Annotated[str, StringConstraints(min_length=3, max_length=3)]
EntityId = Annotated[int, Field(gt=0)]
OrderDirection = Literal["ASC", "DESC"]


class ToolArgs(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class NoArgs(ToolArgs):
    pass


class Pagination(ToolArgs):
    return_count: int = Field(25, ge=1, le=100, description="Number of results to return")
    offset: int = Field(0, ge=0, description="Offset for pagination")


# -- system --------------------------------------------------------------


class SearchEventsArgs(Pagination):
    event_type: Optional[str] = None
    date_from: Optional[DateStr] = None
    date_to: Optional[DateStr] = None
    related_id: Optional[int] = None
    related_type: Optional[str] = Field(None, description="INVOICE, CLIENT, ...")


class CreateNoteArgs(ToolArgs):
    entity_type: Literal["INVOICE", "PURCHASE", "CLIENT", "SUPPLIER"]
    entity_id: EntityId
    note_text: str = Field(min_length=1)


# -- clients & suppliers ---------------------------------------------------


class EntityFields(ToolArgs):
    company_name: Optional[str] = Field(None, description="Company or organisation name")
    title: Optional[str] = Field(None, description="Contact title (Mr, Mrs, etc.)")
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[Email] = None
    telephone: Optional[str] = None
    mobile: Optional[str] = None
    website: Optional[Annotated[str, StringConstraints(pattern=r"^https?://\S+$")]] = None
    address1: Optional[str] = None
    address2: Optional[str] = None
    town: Optional[str] = None
    county: Optional[str] = None
    postcode: Optional[str] = None
    country: Optional[str] = None
    vat_number: Optional[str] = None
    company_reg_no: Optional[str] = None
    currency: Optional[Currency] = Field(None, description="Currency code (default: GBP)")
    term_days: Optional[int] = Field(None, ge=0, le=365, description="Payment terms in days (default: 30)")
    notes: Optional[str] = None


class ClientSearchArgs(Pagination):
    company_name: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    telephone: Optional[str] = None
    order_by: Literal["CompanyName", "DateCreated", "ClientID"] = "CompanyName"
    order_direction: OrderDirection = "ASC"


class ClientIdArgs(ToolArgs):
    client_id: EntityId


class ClientUpdateArgs(EntityFields):
    client_id: EntityId


class InsertContactArgs(ToolArgs):
    client_id: EntityId
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: Optional[Email] = None
    telephone: Optional[str] = None
    mobile: Optional[str] = None
    is_primary: bool = False


class SupplierSearchArgs(Pagination):
    company_name: Optional[str] = Field(None, description="Search by company name (partial match)")
    contact_name: Optional[str] = None
    email: Optional[str] = None
    postcode: Optional[str] = None
    order_by: Literal["CompanyName", "DateCreated", "SupplierID"] = "CompanyName"
    order_direction: OrderDirection = "ASC"


class SupplierIdArgs(ToolArgs):
    supplier_id: EntityId


# -- invoices & estimates ----------------------------------------------------


class InvoiceSearchArgs(Pagination):
    invoice_type: Optional[Literal["INVOICE", "ESTIMATE", "RECURRING", "CREDIT"]] = None
    client_id: Optional[EntityId] = None
    date_from: Optional[DateStr] = None
    date_to: Optional[DateStr] = None
    status: Optional[Literal["DRAFT", "SENT", "VIEWED", "PAID", "PART_PAID", "OVERDUE", "CANCELLED"]] = None
    search_keyword: Optional[str] = Field(None, description="Invoice number, client name, etc.")
    order_by: Optional[Literal["InvoiceNumber", "IssueDate", "DueDate", "ClientName", "GrossAmount"]] = None
    order_direction: Optional[OrderDirection] = None


class InvoiceIdArgs(ToolArgs):
    invoice_id: EntityId


class InvoiceLineArgs(ToolArgs):
    description: str = Field(min_length=1)
    unit_cost: float = Field(ge=0)
    quantity: float = Field(gt=0)
    vat_percentage: float = Field(20, ge=0, le=100)
    nominal_code: Optional[str] = None


class InvoiceCreateArgs(ToolArgs):
    invoice_type: Literal["INVOICE", "ESTIMATE", "CREDIT"]
    client_id: EntityId
    currency: Currency = "GBP"
    term_days: int = Field(30, ge=0, le=365)
    issue_date: Optional[DateStr] = Field(None, description="Issue date (YYYY-MM-DD, default: today)")
    po_number: Optional[str] = None
    notes: Optional[str] = None
    lines: List[InvoiceLineArgs] = Field(min_length=1)


class InvoiceSendArgs(InvoiceIdArgs):
    email_to: Optional[Email] = None
    email_subject: Optional[str] = None
    email_body: Optional[str] = None
    attach_pdf: bool = True


class EstimateAcceptDeclineArgs(InvoiceIdArgs):
    action: Literal["ACCEPT", "DECLINE"]


class EstimateConvertArgs(ToolArgs):
    estimate_id: EntityId


# -- purchases -------------------------------------------------------------


class PurchaseSearchArgs(Pagination):
    supplier_id: Optional[EntityId] = None
    date_from: Optional[DateStr] = None
    date_to: Optional[DateStr] = None
    status: Optional[Literal["UNPAID", "PAID", "PART_PAID", "CANCELLED"]] = None
    search_keyword: Optional[str] = None
    order_by: Literal["ReceiptNumber", "ReceiptDate", "SupplierName", "Total"] = "ReceiptDate"
    order_direction: OrderDirection = "DESC"


class PurchaseIdArgs(ToolArgs):
    purchase_id: EntityId


class PurchaseLineArgs(InvoiceLineArgs):
    nominal_code: str = Field(min_length=1, description="Nominal code, e.g. 5000 for cost of sales")


class PurchaseCreateArgs(ToolArgs):
    supplier_id: EntityId
    currency: Currency = "GBP"
    issue_date: Optional[DateStr] = None
    due_date: Optional[DateStr] = None
    supplier_ref: Optional[str] = Field(None, description="Supplier invoice reference number")
    notes: Optional[str] = None
    lines: List[PurchaseLineArgs] = Field(min_length=1)


# -- bank --------------------------------------------------------------------


class BankBalancesArgs(ToolArgs):
    nominal_codes: List[NominalCode] = Field(min_length=1)


class BankSearchArgs(Pagination):
    nominal_code: NominalCode
    return_count: int = Field(50, ge=1, le=100)
    date_from: Optional[DateStr] = None
    date_to: Optional[DateStr] = None
    reference: Optional[str] = None
    min_amount: Optional[float] = None
    max_amount: Optional[float] = None
    order_by: Literal["TransactionDate", "Amount", "Reference"] = "TransactionDate"
    order_direction: OrderDirection = "DESC"


class BankCreateAccountArgs(ToolArgs):
    account_name: str = Field(min_length=1)
    account_type: Literal["CURRENT", "SAVINGS", "CREDIT_CARD", "LOAN", "CASH", "PAYPAL", "MERCHANT", "OTHER"]
    currency: Currency = "GBP"
    bank_name: Optional[str] = None
    sort_code: Optional[str] = None
    account_number: Optional[str] = None
    opening_balance: Optional[float] = None


class BankTransactionCreateArgs(ToolArgs):
    nominal_code: NominalCode
    transaction_date: DateStr
    amount: float = Field(gt=0)
    transaction_type: Literal["MONEY_IN", "MONEY_OUT"]
    reference: Optional[str] = None
    payee_payer: Optional[str] = None
    notes: Optional[str] = None


# -- reports -----------------------------------------------------------------


class ProfitLossArgs(ToolArgs):
    start_date: DateStr
    end_date: DateStr

    @model_validator(mode="after")
    def _check_range(self) -> "ProfitLossArgs":
        if date.fromisoformat(self.start_date) > date.fromisoformat(self.end_date):
            raise ValueError("Start date must be before or equal to end date")
        return self


class BalanceSheetArgs(ToolArgs):
    report_date: DateStr


class AgeingArgs(ToolArgs):
    report_type: Literal["CREDITOR", "DEBTOR"]
    as_at_date: Optional[DateStr] = Field(None, description="Report as at date (default: today)")


ArgsT = TypeVar("ArgsT", bound=ToolArgs)


def _format_error(error: Dict[str, Any]) -> str:
    loc = ".".join(str(part) for part in error.get("loc", ()))
    return f"{loc}: {error['msg']}" if loc else error["msg"]


def validate_args(model: Type[ArgsT], arguments: Optional[Dict[str, Any]]) -> ArgsT:
    try:
        return model.model_validate(arguments or {})
    except pydantic.ValidationError as exc:
        errors = "; ".join(_format_error(e) for e in exc.errors())
        raise ValidationError(f"Validation error: {errors}") from exc


def input_schema(model: Type[ToolArgs]) -> Dict[str, Any]:
    schema = model.model_json_schema(by_alias=True)
    schema.pop("title", None)
    schema.setdefault("properties", {})
    return schema
