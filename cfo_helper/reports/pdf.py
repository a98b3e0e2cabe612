"""PDF report of the latest projection and the historical series."""
import io
import logging
from datetime import datetime
from typing import List, Optional

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle

from cfo_helper.errors import ReportExportError
from cfo_helper.simulation.schemas import FinancialData, HistoricalPoint

logger = logging.getLogger(__name__)


PAGE_MARGIN = 48
REPORT_TITLE = "CFO Helper Financial Report"

TABLE_STYLE = TableStyle([
    ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#047857")),
    ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
    ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
    ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
    ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.whitesmoke, colors.HexColor("#ecfdf5")]),
    ("GRID", (0, 0), (-1, -1), 0.25, colors.grey),
    ("ALIGN", (1, 0), (-1, -1), "RIGHT"),
])


def format_currency(value: float) -> str:
    """Whole rupees; the standard PDF fonts have no rupee glyph."""
    sign = "-" if value < 0 else ""
    return f"{sign}INR {abs(value):,.0f}"


def format_runway(runway: Optional[int]) -> str:
    if runway is None:
        return "Unlimited"
    return f"{runway} months"


def metric_rows(results: FinancialData) -> List[List[str]]:
    return [
        ["Metric", "Value"],
        ["Monthly Revenue", format_currency(results.revenue)],
        ["Monthly Expenses", format_currency(results.expenses)],
        ["Net Profit", format_currency(results.net_profit)],
        ["Cash Runway", format_runway(results.runway)],
        ["Profit Margin", f"{results.profit_margin:.1f}%"],
    ]


def history_rows(history: List[HistoricalPoint]) -> List[List[str]]:
    rows = [["Month", "Revenue", "Expenses", "Net"]]
    for point in history:
        rows.append([
            point.month,
            format_currency(point.revenue),
            format_currency(point.expenses),
            format_currency(point.revenue - point.expenses),
        ])
    return rows


def generate_pdf_report(
    results: FinancialData,
    history: List[HistoricalPoint],
    generated_at: Optional[datetime] = None,
) -> bytes:
    """
    Render the report and return the PDF bytes.

    Raises:
        ReportExportError: if reportlab fails to build the document
    """
    generated_at = generated_at or datetime.utcnow()
    buffer = io.BytesIO()

    try:
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            leftMargin=PAGE_MARGIN,
            rightMargin=PAGE_MARGIN,
            topMargin=PAGE_MARGIN,
            bottomMargin=PAGE_MARGIN,
            title=REPORT_TITLE,
        )
        styles = getSampleStyleSheet()
        caption_style = ParagraphStyle("Caption", parent=styles["BodyText"], fontSize=8, textColor=colors.grey)

        story = [
            Paragraph(REPORT_TITLE, styles["Title"]),
            Paragraph(f"Generated {generated_at.strftime('%d %b %Y %H:%M')} UTC", caption_style),
            Spacer(1, 18),
            Paragraph("Projection", styles["Heading2"]),
        ]

        metrics = Table(metric_rows(results), hAlign="LEFT", colWidths=[0.45 * doc.width, 0.35 * doc.width])
        metrics.setStyle(TABLE_STYLE)
        story.append(metrics)
        story.append(Spacer(1, 18))

        story.append(Paragraph("Historical Performance", styles["Heading2"]))
        if history:
            table = Table(history_rows(history), hAlign="LEFT", colWidths=[0.16 * doc.width] + [0.26 * doc.width] * 3)
            table.setStyle(TABLE_STYLE)
            story.append(table)
        else:
            story.append(Paragraph("No historical data available.", styles["BodyText"]))

        doc.build(story)
    except Exception as e:
        logger.error(f"PDF report generation failed: {e}")
        raise ReportExportError("Failed to export report") from e

    return buffer.getvalue()
