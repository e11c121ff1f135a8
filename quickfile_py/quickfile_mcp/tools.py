"""MCP tool registry.

Each tool validates its arguments, makes one call through the area APIs and
renders the result as a single JSON text block.
"""
from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from mcp import types

from . import schemas
from .client import QuickFileClient
from .exceptions import ClientError, QuickFileError
from .schemas import NoArgs, ToolArgs, input_schema, validate_args

logger = logging.getLogger(__name__)

ToolHandler = Callable[[QuickFileClient, Any], Awaitable[Any]]

TOOL_PREFIXES = (
    "quickfile_system_",
    "quickfile_client_",
    "quickfile_invoice_",
    "quickfile_estimate_",
    "quickfile_purchase_",
    "quickfile_supplier_",
    "quickfile_bank_",
    "quickfile_report_",
)


@dataclass(frozen=True)
class ToolDefinition:
    name: str
    description: str
    args_model: Type[ToolArgs]
    handler: ToolHandler

    def to_tool(self) -> types.Tool:
        return types.Tool(
            name=self.name,
            description=self.description,
            inputSchema=input_schema(self.args_model),
        )


TOOL_REGISTRY: Dict[str, ToolDefinition] = {}


def tool(name: str, description: str, args_model: Type[ToolArgs] = NoArgs) -> Callable[[ToolHandler], ToolHandler]:
    def decorator(func: ToolHandler) -> ToolHandler:
        TOOL_REGISTRY[name] = ToolDefinition(name, description, args_model, func)
        return func

    return decorator


def list_tools() -> List[types.Tool]:
    return [definition.to_tool() for definition in TOOL_REGISTRY.values()]


# -- results -----------------------------------------------------------------


def success_result(data: Any) -> types.CallToolResult:
    text = json.dumps(data, indent=2, default=str)
    return types.CallToolResult(content=[types.TextContent(type="text", text=text)])


def error_result(message: str) -> types.CallToolResult:
    return types.CallToolResult(content=[types.TextContent(type="text", text=message)], isError=True)


def handle_tool_error(exc: BaseException) -> types.CallToolResult:
    if isinstance(exc, ClientError):
        return error_result(f"QuickFile API Error [{exc.code}]: {exc.message}")
    return error_result(f"Error: {exc}")


async def handle_tool_call(
    client: QuickFileClient, name: str, arguments: Optional[Dict[str, Any]]
) -> types.CallToolResult:
    definition = TOOL_REGISTRY.get(name)
    if definition is None:
        return error_result(f"Unknown tool: {name}. Available prefixes: {', '.join(TOOL_PREFIXES)}")
    try:
        args = validate_args(definition.args_model, arguments)
        data = await definition.handler(client, args)
    except QuickFileError as exc:
        logger.warning("Tool %s failed: %s", name, exc)
        return handle_tool_error(exc)
    except Exception as exc:
        logger.exception("Tool %s failed unexpectedly", name)
        return handle_tool_error(exc)
    return success_result(data)


# -- system --------------------------------------------------------------------


@tool(
    "quickfile_system_get_account",
    "Get account details including company name, VAT status, year end date, and contact information",
)
async def system_get_account(client: QuickFileClient, args: NoArgs) -> Any:
    return await client.system.get_account()


@tool(
    "quickfile_system_search_events",
    "Search the system event log for audit trail and activity history",
    schemas.SearchEventsArgs,
)
async def system_search_events(client: QuickFileClient, args: schemas.SearchEventsArgs) -> Any:
    return await client.system.search_events(**args.model_dump())


@tool(
    "quickfile_system_create_note",
    "Create a note attached to an invoice, purchase, client, or supplier",
    schemas.CreateNoteArgs,
)
async def system_create_note(client: QuickFileClient, args: schemas.CreateNoteArgs) -> Any:
    return await client.system.create_note(**args.model_dump())


# -- clients -------------------------------------------------------------------


@tool(
    "quickfile_client_search",
    "Search for clients by company name, contact name, email, or telephone",
    schemas.ClientSearchArgs,
)
async def client_search(client: QuickFileClient, args: schemas.ClientSearchArgs) -> Any:
    return await client.clients.search(**args.model_dump())


@tool("quickfile_client_get", "Get detailed information about a specific client by ID", schemas.ClientIdArgs)
async def client_get(client: QuickFileClient, args: schemas.ClientIdArgs) -> Any:
    return await client.clients.get(args.client_id)


@tool("quickfile_client_create", "Create a new client record", schemas.EntityFields)
async def client_create(client: QuickFileClient, args: schemas.EntityFields) -> Any:
    return await client.clients.create(**args.model_dump(exclude_none=True))


@tool("quickfile_client_update", "Update an existing client record", schemas.ClientUpdateArgs)
async def client_update(client: QuickFileClient, args: schemas.ClientUpdateArgs) -> Any:
    fields = args.model_dump(exclude_none=True)
    return await client.clients.update(fields.pop("client_id"), **fields)


@tool("quickfile_client_delete", "Delete a client record (use with caution)", schemas.ClientIdArgs)
async def client_delete(client: QuickFileClient, args: schemas.ClientIdArgs) -> Any:
    return await client.clients.delete(args.client_id)


@tool("quickfile_client_insert_contacts", "Add a new contact to an existing client", schemas.InsertContactArgs)
async def client_insert_contacts(client: QuickFileClient, args: schemas.InsertContactArgs) -> Any:
    fields = args.model_dump()
    return await client.clients.insert_contact(fields.pop("client_id"), **fields)


@tool(
    "quickfile_client_login_url",
    "Get a passwordless login URL for a client to view their invoices",
    schemas.ClientIdArgs,
)
async def client_login_url(client: QuickFileClient, args: schemas.ClientIdArgs) -> Any:
    return await client.clients.login_url(args.client_id)


# -- invoices & estimates ----------------------------------------------------


@tool(
    "quickfile_invoice_search",
    "Search for invoices, estimates, or credit notes by type, client, date range, status, or keyword",
    schemas.InvoiceSearchArgs,
)
async def invoice_search(client: QuickFileClient, args: schemas.InvoiceSearchArgs) -> Any:
    return await client.invoices.search(**args.model_dump())


@tool("quickfile_invoice_get", "Get detailed information about a specific invoice including line items", schemas.InvoiceIdArgs)
async def invoice_get(client: QuickFileClient, args: schemas.InvoiceIdArgs) -> Any:
    return await client.invoices.get(args.invoice_id)


@tool("quickfile_invoice_create", "Create a new invoice, estimate, or credit note", schemas.InvoiceCreateArgs)
async def invoice_create(client: QuickFileClient, args: schemas.InvoiceCreateArgs) -> Any:
    return await client.invoices.create(**args.model_dump())


@tool("quickfile_invoice_delete", "Delete an invoice, estimate, or credit note", schemas.InvoiceIdArgs)
async def invoice_delete(client: QuickFileClient, args: schemas.InvoiceIdArgs) -> Any:
    return await client.invoices.delete(args.invoice_id)


@tool("quickfile_invoice_send", "Send an invoice or estimate by email", schemas.InvoiceSendArgs)
async def invoice_send(client: QuickFileClient, args: schemas.InvoiceSendArgs) -> Any:
    fields = args.model_dump()
    return await client.invoices.send(fields.pop("invoice_id"), **fields)


@tool("quickfile_invoice_get_pdf", "Get a PDF download URL for an invoice", schemas.InvoiceIdArgs)
async def invoice_get_pdf(client: QuickFileClient, args: schemas.InvoiceIdArgs) -> Any:
    return await client.invoices.get_pdf(args.invoice_id)


@tool("quickfile_estimate_accept_decline", "Accept or decline an estimate", schemas.EstimateAcceptDeclineArgs)
async def estimate_accept_decline(client: QuickFileClient, args: schemas.EstimateAcceptDeclineArgs) -> Any:
    return await client.invoices.accept_decline_estimate(args.invoice_id, action=args.action)


@tool("quickfile_estimate_convert_to_invoice", "Convert an accepted estimate to an invoice", schemas.EstimateConvertArgs)
async def estimate_convert_to_invoice(client: QuickFileClient, args: schemas.EstimateConvertArgs) -> Any:
    return await client.invoices.convert_estimate(args.estimate_id)


# -- purchases -----------------------------------------------------------------


@tool(
    "quickfile_purchase_search",
    "Search for purchase invoices by supplier, date range, status, or keyword",
    schemas.PurchaseSearchArgs,
)
async def purchase_search(client: QuickFileClient, args: schemas.PurchaseSearchArgs) -> Any:
    return await client.purchases.search(**args.model_dump())


@tool("quickfile_purchase_get", "Get detailed information about a specific purchase invoice", schemas.PurchaseIdArgs)
async def purchase_get(client: QuickFileClient, args: schemas.PurchaseIdArgs) -> Any:
    return await client.purchases.get(args.purchase_id)


@tool("quickfile_purchase_create", "Create a new purchase invoice", schemas.PurchaseCreateArgs)
async def purchase_create(client: QuickFileClient, args: schemas.PurchaseCreateArgs) -> Any:
    return await client.purchases.create(**args.model_dump())


@tool("quickfile_purchase_delete", "Delete a purchase invoice", schemas.PurchaseIdArgs)
async def purchase_delete(client: QuickFileClient, args: schemas.PurchaseIdArgs) -> Any:
    return await client.purchases.delete(args.purchase_id)


# -- suppliers -----------------------------------------------------------------


@tool(
    "quickfile_supplier_search",
    "Search for suppliers by company name, contact name, email, or postcode",
    schemas.SupplierSearchArgs,
)
async def supplier_search(client: QuickFileClient, args: schemas.SupplierSearchArgs) -> Any:
    return await client.suppliers.search(**args.model_dump())


@tool("quickfile_supplier_get", "Get detailed information about a specific supplier", schemas.SupplierIdArgs)
async def supplier_get(client: QuickFileClient, args: schemas.SupplierIdArgs) -> Any:
    return await client.suppliers.get(args.supplier_id)


@tool("quickfile_supplier_create", "Create a new supplier record", schemas.EntityFields)
async def supplier_create(client: QuickFileClient, args: schemas.EntityFields) -> Any:
    return await client.suppliers.create(**args.model_dump(exclude_none=True))


@tool("quickfile_supplier_delete", "Delete a supplier record", schemas.SupplierIdArgs)
async def supplier_delete(client: QuickFileClient, args: schemas.SupplierIdArgs) -> Any:
    return await client.suppliers.delete(args.supplier_id)


# -- bank ------------------------------------------------------------------------


@tool("quickfile_bank_get_accounts", "List all bank accounts with their nominal codes")
async def bank_get_accounts(client: QuickFileClient, args: NoArgs) -> Any:
    return await client.bank.get_accounts()


@tool("quickfile_bank_get_balances", "Get current balances for bank accounts", schemas.BankBalancesArgs)
async def bank_get_balances(client: QuickFileClient, args: schemas.BankBalancesArgs) -> Any:
    return await client.bank.get_balances(args.nominal_codes)


@tool(
    "quickfile_bank_search",
    "Search bank transactions by account, date range, reference, or amount",
    schemas.BankSearchArgs,
)
async def bank_search(client: QuickFileClient, args: schemas.BankSearchArgs) -> Any:
    fields = args.model_dump()
    return await client.bank.search(fields.pop("nominal_code"), **fields)


@tool("quickfile_bank_create_account", "Create a new bank account", schemas.BankCreateAccountArgs)
async def bank_create_account(client: QuickFileClient, args: schemas.BankCreateAccountArgs) -> Any:
    return await client.bank.create_account(**args.model_dump())


@tool(
    "quickfile_bank_create_transaction",
    "Create a bank transaction (money in or money out)",
    schemas.BankTransactionCreateArgs,
)
async def bank_create_transaction(client: QuickFileClient, args: schemas.BankTransactionCreateArgs) -> Any:
    return await client.bank.create_transaction(**args.model_dump())


# -- reports -----------------------------------------------------------------------


@tool("quickfile_report_profit_loss", "Get Profit and Loss report for a date range", schemas.ProfitLossArgs)
async def report_profit_loss(client: QuickFileClient, args: schemas.ProfitLossArgs) -> Any:
    return await client.reports.profit_and_loss(**args.model_dump())


@tool("quickfile_report_balance_sheet", "Get Balance Sheet report as at a specific date", schemas.BalanceSheetArgs)
async def report_balance_sheet(client: QuickFileClient, args: schemas.BalanceSheetArgs) -> Any:
    return await client.reports.balance_sheet(**args.model_dump())


@tool("quickfile_report_vat_obligations", "Get list of VAT obligations (filed and open returns)")
async def report_vat_obligations(client: QuickFileClient, args: NoArgs) -> Any:
    # Accounts without MTD VAT get an error from QuickFile; report that as
    # an empty result rather than a failure.
    try:
        return await client.reports.vat_obligations()
    except ClientError as exc:
        logger.info("VAT obligations unavailable: [%s] %s", exc.code, exc.message)
        return {
            "count": 0,
            "obligations": [],
            "message": "VAT obligations not available. This account may not be VAT registered "
            "or MTD VAT may not be configured.",
        }


@tool("quickfile_report_ageing", "Get debtor or creditor ageing report", schemas.AgeingArgs)
async def report_ageing(client: QuickFileClient, args: schemas.AgeingArgs) -> Any:
    return await client.reports.ageing(**args.model_dump())


@tool("quickfile_report_chart_of_accounts", "Get the chart of accounts (nominal codes)")
async def report_chart_of_accounts(client: QuickFileClient, args: NoArgs) -> Any:
    return await client.reports.chart_of_accounts()


@tool("quickfile_report_subscriptions", "Get list of recurring subscriptions")
async def report_subscriptions(client: QuickFileClient, args: NoArgs) -> Any:
    return await client.reports.subscriptions()
