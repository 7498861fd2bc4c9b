"""CSV and PDF export of expense records.

The text and layout steps are pure and deterministic:

* :func:`expenses_to_csv` returns the CSV document as a string.
* :func:`layout_pdf` places every string of the report on fixed A4
  pages and returns a :class:`PdfLayout` describing them.
* :func:`render_pdf` draws a layout with reportlab.

:func:`export_csv` and :func:`export_pdf` write those documents to
timestamped files.  They never leave a partial file behind: on any
failure the target is removed and ``None`` is returned.

The two formats differ on purpose in two places.  CSV writes the raw
category token (``FOOD``) while the PDF prints the display name
(``Food``).  CSV only replaces commas inside notes; other fields are
written verbatim without quoting.
"""

from __future__ import annotations

import io
import logging
import os
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Sequence, Union

from reportlab.pdfgen import canvas

from .categories import display_name_for
from .formatting import format_amount_plain, format_export_date
from .models import ExpenseRecord

logger = logging.getLogger(__name__)

CSV_HEADER = "Date,Title,Category,Amount,Notes"
EXPORT_MIME_TYPES = {
    'csv': 'text/csv',
    'pdf': 'application/pdf',
}
FILE_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"

# Page geometry in points, measured from the top-left corner.
PAGE_WIDTH = 595
PAGE_HEIGHT = 842
TOP_MARGIN = 50
PAGE_BREAK_Y = 800
ROW_HEIGHT = 15
COLUMN_X = (50, 130, 250, 350, 430)
COLUMN_HEADERS = ("Date", "Title", "Category", "Amount", "Notes")
TITLE_MAX_CHARS = 15
NOTES_MAX_CHARS = 20
REPORT_TITLE = "Expense Report"

TITLE_FONT_SIZE = 18
TEXT_FONT_SIZE = 12
HEADER_FONT_SIZE = 10
ROW_FONT_SIZE = 9
REGULAR_FONT = "Helvetica"
BOLD_FONT = "Helvetica-Bold"


# ---------------------------------------------------------------------------
# CSV
# ---------------------------------------------------------------------------


def _csv_line(record: ExpenseRecord) -> str:
    notes = record.notes.replace(",", ";") if record.notes is not None else ""
    return ",".join([
        format_export_date(record.date),
        record.title,
        record.category,
        str(float(record.amount)),
        notes,
    ])


def expenses_to_csv(records: Sequence[ExpenseRecord]) -> str:
    """Serialize records to CSV text, one line per record in input order."""
    lines = [CSV_HEADER] + [_csv_line(record) for record in records]
    return "".join(line + os.linesep for line in lines)


# ---------------------------------------------------------------------------
# PDF layout
# ---------------------------------------------------------------------------


@dataclass
class PdfText:
    x: float
    y: float
    text: str
    size: float
    bold: bool = False
    role: str = 'row'


@dataclass
class PdfPage:
    items: List[PdfText] = field(default_factory=list)

    def add(self, x: float, y: float, text: str, size: float, bold: bool = False, role: str = 'row') -> None:
        self.items.append(PdfText(x=x, y=y, text=text, size=size, bold=bold, role=role))

    def texts(self, role: Optional[str] = None) -> List[str]:
        return [item.text for item in self.items if role is None or item.role == role]


@dataclass
class PdfLayout:
    pages: List[PdfPage]
    total: float
    width: float = PAGE_WIDTH
    height: float = PAGE_HEIGHT

    @property
    def page_count(self) -> int:
        return len(self.pages)


def layout_pdf(records: Sequence[ExpenseRecord], generated_on: Optional[datetime] = None) -> PdfLayout:
    """Place the report text on pages.

    Page 1 starts with the title, the generation date and the column
    header row.  Rows follow every 15 points; once the cursor passes
    800 points a new page starts at the top margin.  Continuation pages
    carry rows only.  The bold total line closes the last page.
    """
    generated_on = generated_on or datetime.now()
    page = PdfPage()
    pages = [page]
    y = TOP_MARGIN

    page.add(50, y, REPORT_TITLE, TITLE_FONT_SIZE, bold=True, role='title')
    y += 30
    page.add(50, y, f"Generated on: {format_export_date(generated_on)}", TEXT_FONT_SIZE, role='subtitle')
    y += 40

    for x, label in zip(COLUMN_X, COLUMN_HEADERS):
        page.add(x, y, label, HEADER_FONT_SIZE, bold=True, role='header')
    y += 20

    total = 0.0
    for record in records:
        if y > PAGE_BREAK_Y:
            page = PdfPage()
            pages.append(page)
            y = TOP_MARGIN

        cells = (
            format_export_date(record.date),
            record.title[:TITLE_MAX_CHARS],
            display_name_for(record.category),
            format_amount_plain(record.amount),
            (record.notes or "")[:NOTES_MAX_CHARS],
        )
        for x, text in zip(COLUMN_X, cells):
            page.add(x, y, text, ROW_FONT_SIZE)

        total += record.amount
        y += ROW_HEIGHT

    y += 20
    page.add(350, y, f"Total: {format_amount_plain(total)}", TITLE_FONT_SIZE, bold=True, role='total')
    return PdfLayout(pages=pages, total=total)


def render_pdf(layout: PdfLayout) -> bytes:
    """Draw ``layout`` with reportlab and return the PDF bytes."""
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(layout.width, layout.height))
    pdf.setTitle(REPORT_TITLE)
    for page in layout.pages:
        for item in page.items:
            pdf.setFont(BOLD_FONT if item.bold else REGULAR_FONT, item.size)
            # reportlab measures y from the bottom edge
            pdf.drawString(item.x, layout.height - item.y, item.text)
        pdf.showPage()
    pdf.save()
    return buffer.getvalue()


# ---------------------------------------------------------------------------
# Files
# ---------------------------------------------------------------------------


def export_filename(extension: str, now: Optional[datetime] = None) -> str:
    now = now or datetime.now()
    return f"expenses_{now.strftime(FILE_TIMESTAMP_FORMAT)}.{extension}"


def _write_export(payload: Union[str, bytes], target: Path) -> Optional[Path]:
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(payload, str):
            # newline='' keeps the os.linesep separators exactly as built
            with target.open('w', encoding='utf-8', newline='') as handle:
                handle.write(payload)
        else:
            with target.open('wb') as handle:
                handle.write(payload)
    except (OSError, ValueError):
        logger.exception("Failed to write export file %s", target)
        _remove_partial(target)
        return None
    logger.info("Exported expenses to %s", target)
    return target


def _remove_partial(target: Path) -> None:
    try:
        target.unlink(missing_ok=True)
    except OSError:
        logger.warning("Could not remove partial export %s", target)


def export_csv(
    records: Sequence[ExpenseRecord],
    directory: Union[str, Path],
    now: Optional[datetime] = None,
) -> Optional[Path]:
    """Write a CSV export into ``directory``; ``None`` means no file was produced."""
    target = Path(directory) / export_filename('csv', now)
    try:
        payload = expenses_to_csv(records)
    except Exception:
        logger.exception("Failed to build CSV export")
        return None
    return _write_export(payload, target)


def export_pdf(
    records: Sequence[ExpenseRecord],
    directory: Union[str, Path],
    now: Optional[datetime] = None,
) -> Optional[Path]:
    """Write a PDF export into ``directory``; ``None`` means no file was produced."""
    now = now or datetime.now()
    target = Path(directory) / export_filename('pdf', now)
    try:
        payload = render_pdf(layout_pdf(records, generated_on=now))
    except Exception:
        logger.exception("Failed to build PDF export")
        return None
    return _write_export(payload, target)
