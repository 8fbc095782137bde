"""
ReceiptVault: scan grocery receipts, keep them under your Google identity.
"""
__version__ = "0.1.0"
