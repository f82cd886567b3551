"""
Farm Visit Export

Wraps the report sections of one visit into a standalone printable
document and hands it to a presenter:

- build_pdf_document(): reportlab PDF with its own theme (green header
  banner, colour-coded visit-type badge, footer with report identity).
- build_print_document(): self-contained HTML page that asks the browser to
  print itself once loaded.

Both iterate the same render_visit_report() output as the dashboard
expansion, so exported content always matches what was on screen.
"""
import io
import logging
import os
from pathlib import Path
from typing import NamedTuple
from xml.sax.saxutils import escape

from django.conf import settings
from django.http import HttpResponse
from django.template.loader import render_to_string
from django.utils import timezone
from django.utils.text import get_valid_filename

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import cm
from reportlab.platypus import (
    SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer, HRFlowable
)

from visits.exceptions import PresentationBlocked
from .report_renderer import (
    BADGE, IMAGE, LINK, MULTILINE, format_long_date, render_visit_report
)

logger = logging.getLogger(__name__)

PDF = 'pdf'
HTML = 'html'
EXPORT_FORMATS = (PDF, HTML)

HEADER_GREEN = '#10b981'
TITLE_GREEN = '#047857'

# visit_type -> (background, text colour)
BADGE_COLOURS = {
    'Routine': ('#d1fae5', '#065f46'),
    'Emergency': ('#fee2e2', '#991b1b'),
}
FALLBACK_BADGE_COLOURS = ('#fef3c7', '#92400e')


class PrintableDocument(NamedTuple):
    content: bytes
    content_type: str
    filename: str


def badge_colours(visit_type):
    """Routine is green, Emergency is red, anything else is amber."""
    return BADGE_COLOURS.get(visit_type, FALLBACK_BADGE_COLOURS)


def badge_css_class(visit_type):
    if visit_type in BADGE_COLOURS:
        return visit_type.lower()
    return 'followup'


def document_basename(visit):
    visit_date = visit.visit_date
    stamp = visit_date.strftime('%Y%m%d') if hasattr(visit_date, 'strftime') else 'undated'
    return get_valid_filename(f"farm_visit_{visit.farm_id or 'unknown'}_{stamp}")


def _markup(field):
    """reportlab Paragraph markup for one report field value."""
    text = escape(str(field.value))
    if field.kind == MULTILINE:
        return text.replace('\n', '<br/>')
    if field.kind in (LINK, IMAGE):
        href = escape(str(field.value), {'"': '&quot;'})
        return f'<link href="{href}" color="blue">{text}</link>'
    return text


def build_pdf_document(visit):
    """
    Render `visit` as a single PDF report.

    Photos are listed as links; embedding would need the PDF builder to
    fetch remote images.
    """
    sections = render_visit_report(visit)

    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5*cm,
        leftMargin=1.5*cm,
        topMargin=1.5*cm,
        bottomMargin=1.5*cm,
        title=f"Farm Visit Report - {visit.farmer_name}",
    )

    styles = getSampleStyleSheet()
    banner_title = ParagraphStyle(
        'BannerTitle',
        parent=styles['Heading1'],
        fontSize=22,
        textColor=colors.white,
        spaceAfter=6,
    )
    banner_text = ParagraphStyle(
        'BannerText',
        parent=styles['Normal'],
        fontSize=10,
        textColor=colors.white,
    )
    heading_style = ParagraphStyle(
        'SectionHeading',
        parent=styles['Heading2'],
        fontSize=14,
        textColor=colors.HexColor(HEADER_GREEN),
        spaceAfter=8,
        spaceBefore=14,
    )
    label_style = ParagraphStyle('FieldLabel', parent=styles['Normal'], fontName='Helvetica-Bold')
    value_style = styles['Normal']
    footer_style = ParagraphStyle(
        'Footer',
        parent=styles['Normal'],
        fontSize=9,
        alignment=TA_CENTER,
        textColor=colors.HexColor('#6b7280'),
    )

    elements = []

    # Header banner
    banner = Table(
        [
            [Paragraph("Farm Visit Report", banner_title)],
            [Paragraph(f"Generated on {format_long_date(timezone.now())}", banner_text)],
        ],
        colWidths=[18*cm],
    )
    banner.setStyle(TableStyle([
        ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor(HEADER_GREEN)),
        ('LEFTPADDING', (0, 0), (-1, -1), 14),
        ('TOPPADDING', (0, 0), (-1, 0), 14),
        ('BOTTOMPADDING', (0, -1), (-1, -1), 14),
    ]))
    elements.append(banner)
    elements.append(Spacer(1, 12))

    badge_background, badge_text = badge_colours(visit.visit_type)

    for number, section in enumerate(sections, start=1):
        elements.append(Paragraph(f"{number}. {escape(section.title)}", heading_style))

        rows = []
        table_style = [
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('BACKGROUND', (0, 0), (-1, -1), colors.HexColor('#f9fafb')),
            ('LINEBELOW', (0, 0), (-1, -1), 0.5, colors.white),
            ('TOPPADDING', (0, 0), (-1, -1), 5),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 5),
        ]
        for row, field in enumerate(section.fields):
            if field.kind == BADGE:
                badge_style = ParagraphStyle(
                    'Badge',
                    parent=label_style,
                    textColor=colors.HexColor(badge_text),
                )
                rows.append([Paragraph(escape(field.label), label_style), Paragraph(_markup(field), badge_style)])
                table_style.append(('BACKGROUND', (1, row), (1, row), colors.HexColor(badge_background)))
            else:
                rows.append([Paragraph(escape(field.label), label_style), Paragraph(_markup(field), value_style)])

        table = Table(rows, colWidths=[5*cm, 13*cm])
        table.setStyle(TableStyle(table_style))
        elements.append(table)

    # Footer
    elements.append(Spacer(1, 24))
    elements.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#e5e7eb')))
    elements.append(Spacer(1, 8))
    elements.append(Paragraph(escape(settings.EXPORT_SYSTEM_NAME), footer_style))
    elements.append(Paragraph(f"Report ID: {escape(visit.report_id or 'N/A')}", footer_style))
    elements.append(Paragraph(f"Created: {format_long_date(visit.created_at)}", footer_style))

    doc.build(elements)
    buffer.seek(0)

    return PrintableDocument(
        content=buffer.getvalue(),
        content_type='application/pdf',
        filename=f"{document_basename(visit)}.pdf",
    )


def build_print_document(visit):
    """Standalone HTML report that triggers the browser print dialog once loaded."""
    context = {
        'visit': visit,
        'sections': render_visit_report(visit),
        'badge_class': badge_css_class(visit.visit_type),
        'generated_on': format_long_date(timezone.now()),
        'created_on': format_long_date(visit.created_at),
        'report_id': visit.report_id or 'N/A',
        'system_name': settings.EXPORT_SYSTEM_NAME,
        'print_delay_ms': settings.EXPORT_PRINT_DELAY_MS,
    }
    content = render_to_string('visits/visit_report_print.html', context)
    return PrintableDocument(
        content=content.encode('utf-8'),
        content_type='text/html; charset=utf-8',
        filename=f"{document_basename(visit)}.html",
    )


class DocumentPresenter:
    """
    Hands a finished document to whatever displays it.

    Subclasses raise PresentationBlocked when their display surface cannot
    be acquired.
    """

    def present(self, document):
        if not document.content:
            raise PresentationBlocked()
        return self.show(document)

    def show(self, document):
        raise NotImplementedError


class AttachmentPresenter(DocumentPresenter):
    """HTTP download."""

    disposition = 'attachment'

    def show(self, document):
        response = HttpResponse(document.content, content_type=document.content_type)
        response['Content-Disposition'] = f'{self.disposition}; filename="{document.filename}"'
        return response


class InlinePresenter(AttachmentPresenter):
    """HTTP page opened directly in the browser (print view)."""

    disposition = 'inline'


class FilePresenter(DocumentPresenter):
    """
    Writes the document to disk.

    `path` is a directory when it exists as one or ends with a separator
    (created if missing); otherwise it is the file to write.
    """

    def __init__(self, path):
        path = str(path)
        self.path = Path(path)
        self.is_directory = path.endswith(('/', os.sep)) or self.path.is_dir()

    def show(self, document):
        target = self.path / document.filename if self.is_directory else self.path
        try:
            if self.is_directory:
                self.path.mkdir(parents=True, exist_ok=True)
            target.write_bytes(document.content)
        except OSError as e:
            logger.error(f"Could not write report to {target}: {e}")
            raise PresentationBlocked(f"Could not write report to {target}: {e}") from e
        return target


DOCUMENT_BUILDERS = {
    PDF: build_pdf_document,
    HTML: build_print_document,
}


def export_visit_document(visit, presenter, fmt=PDF):
    """
    Build the `fmt` document for `visit` and present it.

    Returns whatever the presenter returns. Raises ValueError for an unknown
    format and PresentationBlocked when the presenter has nowhere to show it.
    """
    try:
        builder = DOCUMENT_BUILDERS[fmt]
    except KeyError:
        raise ValueError(f"Unsupported export format: {fmt}. Expected one of {', '.join(EXPORT_FORMATS)}")

    document = builder(visit)
    result = presenter.present(document)
    logger.info(f"Exported {fmt} report for visit {visit.report_id}")
    return result
