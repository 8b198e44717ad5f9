"""
Receipt PDF renderer using fpdf2.

Lays out a receipt document on an 80 mm thermal roll page, sized to the
content so the printer does not feed blank paper.
"""

from abc import ABC, abstractmethod

from fpdf import FPDF
from fpdf.enums import XPos, YPos

from possync.core.services.receipt_renderer import ReceiptDocument

ROLL_WIDTH_MM = 80
MARGIN_MM = 4
LINE_HEIGHT_MM = 4.5


def _latin1(text: str) -> str:
    """Core PDF fonts only cover latin-1; replace anything else with '?'."""
    return text.encode("latin-1", "replace").decode("latin-1")


class IReceiptPdfRenderer(ABC):
    """Interface for receipt PDF rendering implementations."""

    @abstractmethod
    def render(self, doc: ReceiptDocument) -> bytes:
        """Render a receipt document into PDF bytes."""
        ...


class Fpdf2ReceiptRenderer(IReceiptPdfRenderer):
    """Renders receipts with fpdf2 core fonts."""

    def render(self, doc: ReceiptDocument) -> bytes:
        pdf = FPDF(orientation="P", unit="mm", format=(ROLL_WIDTH_MM, self._page_height(doc)))
        pdf.set_margins(MARGIN_MM, MARGIN_MM, MARGIN_MM)
        pdf.set_auto_page_break(auto=False)
        pdf.add_page()

        self._render_header(pdf, doc)
        self._render_info(pdf, doc)
        self._render_items(pdf, doc)
        self._render_total(pdf, doc)
        if doc.is_provisional:
            self._render_notice(pdf, doc)
        self._render_footer(pdf, doc)

        return bytes(pdf.output())

    @staticmethod
    def _page_height(doc: ReceiptDocument) -> float:
        rows = (
            len(doc.header_lines)
            + 5  # date, receipt, customer, payment, rule
            + 2 * len(doc.lines)
            + 3  # total block
            + 2 * len(doc.notice_lines)
            + len(doc.footer_lines)
            + 2
        )
        return 2 * MARGIN_MM + rows * LINE_HEIGHT_MM

    @staticmethod
    def _rule(pdf: FPDF) -> None:
        y = pdf.get_y() + 1
        pdf.line(MARGIN_MM, y, ROLL_WIDTH_MM - MARGIN_MM, y)
        pdf.set_y(y + 1)

    @staticmethod
    def _pair(pdf: FPDF, left: str, right: str, style: str = "") -> None:
        pdf.set_font("Helvetica", style, 8)
        half = (ROLL_WIDTH_MM - 2 * MARGIN_MM) / 2
        pdf.cell(half, LINE_HEIGHT_MM, _latin1(left), align="L")
        pdf.cell(half, LINE_HEIGHT_MM, _latin1(right), align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def _render_header(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        for index, line in enumerate(doc.header_lines):
            pdf.set_font("Helvetica", "B" if index == 0 else "", 10 if index == 0 else 7)
            pdf.cell(0, LINE_HEIGHT_MM, _latin1(line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
        self._rule(pdf)

    def _render_info(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        self._pair(pdf, "Date:", doc.issued_at.strftime("%Y-%m-%d %H:%M"))
        self._pair(pdf, "Receipt:", doc.label, style="B")
        if doc.customer_name:
            self._pair(pdf, "Customer:", doc.customer_name)
        self._pair(pdf, "Payment:", doc.payment_method)
        self._rule(pdf)

    def _render_items(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        for line in doc.lines:
            self._pair(pdf, line.name, doc.money(line.line_total))
            pdf.set_font("Helvetica", "", 7)
            pdf.cell(
                0, LINE_HEIGHT_MM,
                _latin1(f"  {line.quantity:g} x {doc.money(line.unit_price)}"),
                new_x=XPos.LMARGIN, new_y=YPos.NEXT,
            )
        self._rule(pdf)

    def _render_total(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        pdf.set_font("Helvetica", "B", 11)
        half = (ROLL_WIDTH_MM - 2 * MARGIN_MM) / 2
        pdf.cell(half, LINE_HEIGHT_MM + 1, "TOTAL:", align="L")
        pdf.cell(
            half, LINE_HEIGHT_MM + 1, _latin1(doc.money(doc.total)),
            align="R", new_x=XPos.LMARGIN, new_y=YPos.NEXT,
        )

    def _render_notice(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        self._rule(pdf)
        for index, notice in enumerate(doc.notice_lines):
            pdf.set_font("Helvetica", "B" if index == 0 else "", 8 if index == 0 else 7)
            pdf.multi_cell(0, LINE_HEIGHT_MM, _latin1(notice), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)

    def _render_footer(self, pdf: FPDF, doc: ReceiptDocument) -> None:
        pdf.ln(2)
        pdf.set_font("Helvetica", "I", 7)
        for line in doc.footer_lines:
            pdf.cell(0, LINE_HEIGHT_MM, _latin1(line), align="C", new_x=XPos.LMARGIN, new_y=YPos.NEXT)
