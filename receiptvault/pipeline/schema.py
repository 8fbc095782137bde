"""
JSON schema sent to the extraction stage.

Five required sections; every leaf inside each section is required too.
Field names match ``receiptvault.schemas.extraction``.
"""
from __future__ import annotations

from typing import Any


def _leaf(title: str, description: str, type_: str) -> dict[str, Any]:
    return {"title": title, "description": description, "type": type_}


def _section(title: str, description: str, fields: dict[str, dict[str, Any]]) -> dict[str, Any]:
    return {
        "title": title,
        "description": description,
        "type": "object",
        "properties": fields,
        "required": list(fields),
    }


STORE_INFO = _section(
    "Store Information",
    "Key details about the store and transaction.",
    {
        "storeName": _leaf("Store Name", "The name of the store.", "string"),
        "address": _leaf("Store Address", "The address of the store.", "string"),
        "cashierName": _leaf("Cashier Name", "The name of the cashier who processed the transaction.", "string"),
        "transactionDate": _leaf("Transaction Date", "The date of the transaction.", "string"),
        "transactionTime": _leaf("Transaction Time", "The time of the transaction.", "string"),
    },
)

PAYMENT_SUMMARY = _section(
    "Payment Summary",
    "Summary of payment and transaction details.",
    {
        "paymentMethod": _leaf("Payment Method", "The method of payment used.", "string"),
        "totalAmount": _leaf("Total Amount", "The total amount paid for the transaction.", "number"),
        "changeGiven": _leaf("Change Given", "The amount of change given to the customer.", "number"),
        "itemsSold": _leaf("Items Sold", "The total number of items sold in the transaction.", "number"),
        "referenceNumber": _leaf("Reference Number", "The reference number for the transaction.", "string"),
    },
)

ITEM = _section(
    "Item",
    "Details of a purchased item.",
    {
        "itemName": _leaf("Item Name", "The name or description of the item.", "string"),
        "itemPrice": _leaf("Item Price", "The price of the item.", "number"),
        "itemType": _leaf("Item Type", "The type or category of the item (e.g., food, taxable).", "string"),
        "weight": _leaf("Item Weight", "The weight of the item, if applicable.", "number"),
        "unitPrice": _leaf("Unit Price", "The price per unit weight, if applicable.", "number"),
    },
)

ITEM_LIST = {
    "title": "Purchased Items",
    "description": "An exhaustive list of all the items purchased in the transaction. Can be up to 100.",
    "type": "array",
    "items": ITEM,
}

SAVINGS_SUMMARY = _section(
    "Savings and Coupons Summary",
    "Summary of savings, coupons, and fuel points earned.",
    {
        "totalSavings": _leaf("Total Savings", "The total amount saved during the transaction.", "number"),
        "totalCoupons": _leaf("Total Coupons", "The total value of coupons applied.", "number"),
        "annualCardSavings": _leaf("Annual Card Savings", "The total annual savings from the store card.", "number"),
        "fuelPointsEarned": _leaf("Fuel Points Earned", "The number of fuel points earned in this transaction.", "number"),
        "totalFuelPoints": _leaf("Total Fuel Points", "The total number of fuel points for the current month.", "number"),
    },
)

ACCOUNT_INFO = _section(
    "Account Information",
    "Key account identifiers and customer information.",
    {
        "customerId": _leaf("Customer ID", "The customer or loyalty card identifier.", "string"),
        "cardType": _leaf("Card Type", "The type of card used for payment.", "string"),
        "cardLastDigits": _leaf("Card Last Digits", "The last digits of the card used for payment.", "string"),
        "aid": _leaf("AID", "Application Identifier for the card transaction.", "string"),
        "tc": _leaf("TC", "Transaction Certificate for the card transaction.", "string"),
    },
)

EXTRACTION_SCHEMA: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-07/schema#",
    "title": "Markdown Document Field Extraction Schema",
    "description": (
        "Schema for extracting high-value tabular and form-like information from a markdown "
        "document, focusing on structured fields such as IDs, names, addresses, account info, "
        "dates, and summary tables."
    ),
    "type": "object",
    "properties": {
        "storeInfo": STORE_INFO,
        "paymentSummary": PAYMENT_SUMMARY,
        "itemList": ITEM_LIST,
        "savingsSummary": SAVINGS_SUMMARY,
        "accountInfo": ACCOUNT_INFO,
    },
    "required": ["storeInfo", "paymentSummary", "itemList", "savingsSummary", "accountInfo"],
}
