"""PDF rendering for receipts."""

from possync.infrastructure.pdf.receipt_pdf_renderer import (
    Fpdf2ReceiptRenderer,
    IReceiptPdfRenderer,
)

__all__ = ["Fpdf2ReceiptRenderer", "IReceiptPdfRenderer"]
