"""
Transcript assembly and PDF rendering.

``build_transcript`` produces a structured ``Transcript`` (term sections plus
the CGPA summary); ``render_transcript`` lays it out into a ``DocumentSink``
which renders the whole PDF in memory, exactly once.
"""

import io
import logging
from datetime import datetime, timezone
from typing import Iterable, List, NamedTuple, Optional, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.lib.utils import ImageReader
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..errors import RenderError
from .grading import CgpaSummary, GradeRow, compute_cgpa

logger = logging.getLogger(__name__)

GRADE_COLORS = {
    "A": "#2f855a",
    "B": "#3182ce",
    "C": "#b7791f",
    "D": "#dd6b20",
    "E": "#c05621",
    "F": "#c53030",
}
DEFAULT_GRADE_COLOR = "#4a5568"

DISCLAIMER = (
    "This transcript was generated electronically from the student records system. "
    "It is not valid without the registrar's signature and may be verified with the "
    "records office using the matriculation number shown above."
)


class TermSection(NamedTuple):
    term: str
    rows: List[GradeRow]
    units: int


class Transcript(NamedTuple):
    name: str
    matric: str
    email: str
    department: Optional[str]
    level: str
    terms: List[TermSection]
    summary: CgpaSummary
    generated_at: datetime


def group_by_term(rows: Iterable[GradeRow], term_order: Sequence[str] = None) -> List[TermSection]:
    """
    Group rows into contiguous per-term sections.

    Terms appear in the order first encountered; when ``term_order`` is given,
    the terms it lists come first in that order and the rest follow in
    encounter order.
    """
    groups = {}
    for row in rows:
        groups.setdefault(row.term, []).append(row)

    terms = list(groups)
    if term_order:
        rank = {t: i for i, t in enumerate(term_order)}
        encounter = {t: i for i, t in enumerate(terms)}
        terms.sort(key=lambda t: (0, rank[t]) if t in rank else (1, encounter[t]))

    return [TermSection(term=t, rows=groups[t], units=sum(r.unit for r in groups[t]))
            for t in terms]


def build_transcript(student, rows: Sequence[GradeRow], term_order: Sequence[str] = None,
                     generated_at: datetime = None) -> Transcript:
    return Transcript(
        name=student.name,
        matric=student.matric,
        email=student.email,
        department=student.department.name if student.department else None,
        level=student.level,
        terms=group_by_term(rows, term_order),
        summary=compute_cgpa(rows),
        generated_at=generated_at or datetime.now(timezone.utc),
    )


def cgpa_display(value: float) -> str:
    return f"{value:.2f}"


def grade_color(letter: Optional[str]) -> str:
    return GRADE_COLORS.get(letter, DEFAULT_GRADE_COLOR)


class DocumentSink:
    """Append-only story of flowables, rendered to PDF bytes on ``finalize``."""

    def __init__(self, title: str = "Student Transcript", pagesize=A4):
        self._buffer = io.BytesIO()
        self._story = []
        self._finalized = False
        self._doc = SimpleDocTemplate(
            self._buffer,
            pagesize=pagesize,
            title=title,
            rightMargin=2*cm,
            leftMargin=2*cm,
            topMargin=1.5*cm,
            bottomMargin=1.5*cm,
        )

    @property
    def finalized(self) -> bool:
        return self._finalized

    def append(self, *flowables):
        if self._finalized:
            raise RenderError("Document already finalized")
        self._story.extend(flowables)

    def finalize(self) -> bytes:
        if self._finalized:
            raise RenderError("Document already finalized")
        self._finalized = True
        try:
            self._doc.build(self._story)
        except Exception as e:
            logger.error(f"[Transcript] PDF build failed: {e}", exc_info=True)
            raise RenderError("Could not render transcript") from e
        data = self._buffer.getvalue()
        self._buffer.close()
        return data


def _styles():
    styles = getSampleStyleSheet()
    return {
        "title": ParagraphStyle(
            "TranscriptTitle",
            parent=styles["Heading1"],
            fontSize=18,
            textColor=colors.HexColor("#1a365d"),
            alignment=TA_CENTER,
            spaceAfter=4,
        ),
        "institution": ParagraphStyle(
            "Institution",
            parent=styles["Normal"],
            fontSize=11,
            textColor=colors.HexColor("#4a5568"),
            alignment=TA_CENTER,
            spaceAfter=12,
        ),
        "heading": ParagraphStyle(
            "Section",
            parent=styles["Heading2"],
            fontSize=13,
            textColor=colors.HexColor("#2d3748"),
            spaceBefore=10,
            spaceAfter=6,
        ),
        "body": styles["Normal"],
        "small": ParagraphStyle(
            "Small",
            parent=styles["Normal"],
            fontSize=8,
            textColor=colors.HexColor("#718096"),
        ),
    }


def _term_table(section: TermSection) -> Table:
    data = [["Course", "Unit", "Term", "Score", "Grade"]]
    for r in section.rows:
        score = "" if r.score is None else f"{r.score:g}"
        data.append([r.course_name, str(r.unit), r.term, score, r.grade or ""])
    data.append(["Term units", str(section.units), "", "", ""])

    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#e2e8f0")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Oblique"),
        ("FONTSIZE", (0, 0), (-1, -1), 9),
        ("ALIGN", (1, 0), (-1, -1), "CENTER"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
    ]
    for i, r in enumerate(section.rows, start=1):
        style.append(("TEXTCOLOR", (4, i), (4, i), colors.HexColor(grade_color(r.grade))))
        style.append(("FONTNAME", (4, i), (4, i), "Helvetica-Bold"))

    table = Table(data, colWidths=[7*cm, 1.5*cm, 2*cm, 2*cm, 2*cm], repeatRows=1)
    table.setStyle(TableStyle(style))
    return table


def _signature_image(path) -> Optional[Image]:
    if not path:
        return None
    try:
        reader = ImageReader(str(path))
        width, height = reader.getSize()
    except (OSError, ValueError) as e:
        logger.warning(f"[Transcript] Signature image unavailable ({path}): {e}")
        return None
    scale = min(1.0, (4*cm) / width)
    return Image(str(path), width=width * scale, height=height * scale, hAlign="LEFT")


def render_transcript(transcript: Transcript, sink: DocumentSink,
                      institution: str, signature_image=None) -> bytes:
    st = _styles()

    sink.append(
        Paragraph("Student Transcript", st["title"]),
        Paragraph(escape(institution), st["institution"]),
    )

    sink.append(
        Paragraph(f"<b>Name:</b> {escape(transcript.name)}", st["body"]),
        Paragraph(f"<b>Matric No:</b> {escape(transcript.matric)}", st["body"]),
        Paragraph(f"<b>Email:</b> {escape(transcript.email)}", st["body"]),
        Paragraph(f"<b>Department:</b> {escape(transcript.department or '-')}", st["body"]),
        Paragraph(f"<b>Level:</b> {escape(transcript.level)}", st["body"]),
        Spacer(1, 8),
        Paragraph("Courses &amp; Grades", st["heading"]),
    )

    if not transcript.terms:
        sink.append(Paragraph("No graded courses on record.", st["body"]))
    for section in transcript.terms:
        sink.append(
            Paragraph(f"{escape(section.term)} Semester", st["body"]),
            Spacer(1, 4),
            _term_table(section),
            Spacer(1, 8),
        )

    summary = transcript.summary
    summary_table = Table(
        [["Total units attempted", str(summary.total_units)],
         ["CGPA", cgpa_display(summary.cgpa)]],
        colWidths=[6*cm, 3*cm], hAlign="LEFT",
    )
    summary_table.setStyle(TableStyle([
        ("FONTNAME", (0, 0), (0, -1), "Helvetica-Bold"),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
        ("BACKGROUND", (0, 0), (0, -1), colors.HexColor("#f7fafc")),
    ]))
    sink.append(Paragraph("Summary", st["heading"]), summary_table, Spacer(1, 24))

    image = _signature_image(signature_image)
    if image is not None:
        sink.append(image)
    sink.append(
        Paragraph("______________________________", st["body"]),
        Paragraph("Registrar", st["body"]),
        Spacer(1, 12),
        Paragraph(f"Generated on {transcript.generated_at:%Y-%m-%d %H:%M} UTC", st["small"]),
        Paragraph(escape(DISCLAIMER), st["small"]),
    )

    return sink.finalize()
