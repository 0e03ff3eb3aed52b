"""Paginated document formats: PDF (reportlab) and Word (python-docx)."""

import io
from datetime import datetime
from xml.sax.saxutils import escape

from docx import Document
from docx.shared import Cm, Pt
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import (
    Flowable,
    Paragraph,
    Preformatted,
    SimpleDocTemplate,
    Spacer,
    Table,
)

from verifyforge.models.result import TestResult
from verifyforge.reporting.base import (
    ExportedReport,
    dump_result,
    generated_line,
    summary_rows,
)
from verifyforge.reporting.config import ReportConfig


def export_pdf(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """A4 document; the result dump flows over as many pages as it needs."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf,
        pagesize=A4,
        leftMargin=2 * cm,
        rightMargin=2 * cm,
        topMargin=2 * cm,
        bottomMargin=2 * cm,
        title=config.title,
    )
    footer = generated_line(now)

    def draw_footer(canvas, document) -> None:
        canvas.saveState()
        canvas.setFont("Helvetica-Oblique", 8)
        canvas.drawCentredString(A4[0] / 2, 1 * cm, footer)
        canvas.restoreState()

    doc.build(
        pdf_story(result, config),
        onFirstPage=draw_footer,
        onLaterPages=draw_footer,
    )
    return ExportedReport(
        content=buf.getvalue(),
        media_type="application/pdf",
        extension="pdf",
    )


def pdf_story(result: TestResult, config: ReportConfig) -> list[Flowable]:
    """Flowables of the PDF body: title, attribution, summary and dump."""
    styles = getSampleStyleSheet()
    story: list[Flowable] = [Paragraph(escape(config.title), styles["Title"])]
    if config.attribution:
        story.append(Paragraph(escape(config.attribution), styles["Italic"]))
    story.append(Spacer(1, 0.5 * cm))

    story.append(Paragraph("Test Summary", styles["Heading2"]))
    summary = Table(list(summary_rows(result)), hAlign="LEFT")
    summary.setStyle(
        [
            ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
            ("TEXTCOLOR", (0, 0), (0, -1), colors.HexColor("#374151")),
        ]
    )
    story.append(summary)
    story.append(Spacer(1, 0.5 * cm))

    story.append(Paragraph("Detailed Results", styles["Heading2"]))
    story.append(Preformatted(dump_result(result), styles["Code"], maxLineLength=90))
    return story


def export_word(
    result: TestResult, config: ReportConfig, now: datetime
) -> ExportedReport:
    """DOCX document with a summary table and the result dump."""
    doc = Document()
    section = doc.sections[0]
    section.left_margin = Cm(2.0)
    section.right_margin = Cm(2.0)
    section.top_margin = Cm(2.0)
    section.bottom_margin = Cm(2.0)
    doc.core_properties.title = config.title

    doc.add_heading(config.title, level=0)
    if config.attribution:
        doc.add_paragraph().add_run(config.attribution).italic = True

    doc.add_heading("Test Summary", level=1)
    rows = summary_rows(result)
    table = doc.add_table(rows=len(rows), cols=2)
    table.style = "Table Grid"
    for row, (label, value) in zip(table.rows, rows, strict=True):
        row.cells[0].text = label
        row.cells[1].text = value

    doc.add_heading("Detailed Results", level=1)
    for line in dump_result(result).splitlines():
        paragraph = doc.add_paragraph()
        paragraph.paragraph_format.space_after = Pt(0)
        run = paragraph.add_run(line)
        run.font.name = "Courier New"
        run.font.size = Pt(8)

    section.footer.paragraphs[0].add_run(generated_line(now)).italic = True

    buf = io.BytesIO()
    doc.save(buf)
    return ExportedReport(
        content=buf.getvalue(),
        media_type=(
            "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
        ),
        extension="docx",
    )
