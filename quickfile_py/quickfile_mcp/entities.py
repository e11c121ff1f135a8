"""Contact-record helpers shared by clients and suppliers."""
from __future__ import annotations

from typing import Any, Dict, Optional

_ADDRESS_FIELDS = {
    "address1": "Address1",
    "address2": "Address2",
    "town": "Town",
    "county": "County",
    "postcode": "Postcode",
    "country": "Country",
}

_ENTITY_FIELDS = {
    "company_name": "CompanyName",
    "title": "Title",
    "first_name": "FirstName",
    "last_name": "LastName",
    "email": "Email",
    "telephone": "Telephone",
    "mobile": "Mobile",
    "website": "Website",
    "vat_number": "VatNumber",
    "company_reg_no": "CompanyRegNo",
    "currency": "Currency",
    "term_days": "TermDays",
    "notes": "Notes",
}


def build_address(fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    address = {wire: fields[name] for name, wire in _ADDRESS_FIELDS.items() if fields.get(name)}
    return address or None


def build_entity_data(
    fields: Dict[str, Any], *, currency: Optional[str] = "GBP", term_days: Optional[int] = 30
) -> Dict[str, Any]:
    """Map snake_case entity fields to QuickFile's names, dropping unset ones.

    Pass ``currency=None, term_days=None`` for partial updates.
    """
    merged = dict(fields)
    if merged.get("currency") is None and currency is not None:
        merged["currency"] = currency
    if merged.get("term_days") is None and term_days is not None:
        merged["term_days"] = term_days
    data = {wire: merged[name] for name, wire in _ENTITY_FIELDS.items() if merged.get(name) is not None}
    address = build_address(fields)
    if address:
        data["Address"] = address
    return data
