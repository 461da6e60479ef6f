"""
Concern Report PDF

Renders a concern, its interventions and follow-up answers as a PDF guide
for the teacher. Drawn directly on a reportlab canvas with a top-down y
cursor; AI text is markdown and is laid out with the block rules in
parse_markdown().
"""

import io
import re
from dataclasses import dataclass, field
from datetime import datetime

from reportlab.lib.colors import HexColor
from reportlab.lib.pagesizes import letter
from reportlab.lib.utils import simpleSplit
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.pdfgen import canvas

PAGE_WIDTH, PAGE_HEIGHT = letter
LEFT_MARGIN = 50
RIGHT_EDGE = 545
CONTENT_WIDTH = RIGHT_EDGE - LEFT_MARGIN
TOP_MARGIN = 50
BOTTOM_LIMIT = 750
# Top of the footer band, measured from the top of the page
FOOTER_TOP = PAGE_HEIGHT - 90

FONT = "Helvetica"
FONT_BOLD = "Helvetica-Bold"

BRAND_BLUE = "#2563eb"
HEADING_BLUE = "#1e40af"
GREEN = "#059669"
PURPLE = "#7c3aed"
TEXT = "#374151"
MUTED = "#666666"
NESTED = "#6b7280"
RULE = "#e2e8f0"

FOOTER_TEXT = (
    "This guide was created by Concern2Care to support your teaching journey. "
    "Every strategy is a starting point, so feel free to adapt and make them your own. "
    "You know your students best, and these ideas are here to help you build on your "
    "excellent work."
)

_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f\ufffd]")
_BOLD = re.compile(r"\*\*(.*?)\*\*")
_TABLE_SEPARATOR = re.compile(r"^[\-:|\s]+$")


def clean_text(text: str) -> str:
    return _CONTROL_CHARS.sub("", text or "").strip()


def format_generated_date(value: datetime) -> str:
    """e.g. 'March 5, 2025'."""
    return f"{value:%B} {value.day}, {value.year}"


# ============================================================================
# Markdown blocks
# ============================================================================


@dataclass
class Block:
    """One laid-out element of AI generated markdown."""

    kind: str
    text: str = ""
    rows: list[list[str]] = field(default_factory=list)
    in_list: bool = False


def _is_table_row(line: str) -> bool:
    return "|" in line and len(line.split("|")) > 2


def _table_cells(line: str) -> list[str]:
    cells = (cell.strip().replace("**", "") for cell in line.split("|"))
    return [cell for cell in cells if cell]


def parse_markdown(text: str) -> list[Block]:
    """
    Split markdown into layout blocks.

    Kinds: heading1, heading2, section, strategy, implementation, step,
    numbered, label, bold_heading, bold, nested_bullet, bullet, timeline,
    table and paragraph. Paragraphs following a list-introducing block are
    marked in_list so they render indented.
    """
    blocks: list[Block] = []
    lines = (text or "").split("\n")
    in_list = False
    i = 0

    while i < len(lines):
        raw = lines[i]
        line = raw.strip()
        i += 1

        if not line or line in ("***", "---") or re.fullmatch(r"-{3,}", line):
            continue

        match = re.match(r"^###\s*\*\*(.*?)\*\*", line)
        if match:
            blocks.append(Block("section", match.group(1)))
            in_list = False
            continue

        if line.startswith("#"):
            level = len(line) - len(line.lstrip("#"))
            title = _BOLD.sub(r"\1", line.lstrip("#").strip())
            blocks.append(Block("heading1" if level == 1 else "heading2", title))
            continue

        if _is_table_row(line):
            rows = []
            i -= 1
            while i < len(lines):
                candidate = lines[i].strip()
                if _TABLE_SEPARATOR.match(candidate) and candidate:
                    i += 1
                elif _is_table_row(candidate):
                    cells = _table_cells(candidate)
                    if cells:
                        rows.append(cells)
                    i += 1
                else:
                    break
            if rows:
                blocks.append(Block("table", rows=rows))
                in_list = False
            continue

        match = re.match(r"^\*\s*\*\*Strategy:\s*(.*?)\*\*", line)
        if match:
            blocks.append(Block("strategy", f"Strategy: {match.group(1)}"))
            in_list = False
            continue

        if re.match(r"^\*\s*\*\*Implementation:\*\*", line):
            blocks.append(Block("implementation", "Implementation Steps:"))
            in_list = True
            continue

        if re.match(r"^Step\s*\d+:|^-\s*\*\*Step\s*\d+:\*\*", line):
            blocks.append(Block("step", re.sub(r"^-\s*", "", line.replace("**", ""))))
            in_list = True
            continue

        if re.match(r"^\d+\.", line):
            blocks.append(Block("numbered", line.replace("**", "")))
            in_list = False
            continue

        match = re.match(r"^\*\s*\*\*(.*?):\*\*", line)
        if match:
            blocks.append(Block("label", f"{match.group(1)}:"))
            in_list = True
            continue

        match = re.match(r"^\*\s*\*\*(.*?)\*\*", line)
        if match and ":" not in line:
            blocks.append(Block("bold_heading", match.group(1)))
            in_list = False
            continue

        match = re.match(r"^\*\*(.*?)\*\*", line)
        if match and ":" not in line:
            blocks.append(Block("bold", match.group(1)))
            in_list = False
            continue

        if re.match(r"^\s{2,}[*-]\s", raw):
            content = _BOLD.sub(r"\1", re.sub(r"^[*-]\s*", "", line))
            blocks.append(Block("nested_bullet", content))
            in_list = True
            continue

        if re.match(r"^[-*•]\s", line) or line.startswith("•"):
            content = _BOLD.sub(r"\1", re.sub(r"^[-*•]\s*", "", line))
            blocks.append(Block("bullet", content))
            in_list = True
            continue

        if re.match(r"^\*\*Timeline:\*\*|^\*\*Resources.*:\*\*", line):
            blocks.append(Block("timeline", line.replace("**", "")))
            continue

        paragraph = re.sub(r"\s+", " ", _BOLD.sub(r"\1", line)).strip()
        blocks.append(Block("paragraph", paragraph, in_list=in_list))

    return blocks


# ============================================================================
# Canvas cursor
# ============================================================================


class PdfCursor:
    """A canvas plus a y position measured from the top of the page."""

    def __init__(self, pdf: canvas.Canvas):
        self.pdf = pdf
        self.y: float = TOP_MARGIN

    def new_page(self) -> None:
        self.pdf.showPage()
        self.y = TOP_MARGIN

    def ensure_space(self, height: float, limit: float = BOTTOM_LIMIT) -> None:
        if self.y + height > limit:
            self.new_page()

    def break_after(self, threshold: float) -> None:
        if self.y > threshold:
            self.new_page()

    def write(
        self,
        text: str,
        x: float,
        size: float,
        color: str,
        width: float | None = None,
        font: str = FONT,
        align: str = "left",
        leading: float | None = None,
    ) -> float:
        """
        Draw wrapped text at the cursor and advance past it.

        Returns:
            Height consumed
        """
        content = clean_text(text)
        width = width or (RIGHT_EDGE - x)
        leading = leading or size * 1.2
        lines = simpleSplit(content, font, size, width) or [""]

        self.ensure_space(max(size * 1.5, 20))
        self.pdf.setFont(font, size)
        self.pdf.setFillColor(HexColor(color))
        consumed = 0.0
        for line in lines:
            # Long paragraphs continue on the next page
            if self.y + leading > BOTTOM_LIMIT + 30:
                self.new_page()
                self.pdf.setFont(font, size)
                self.pdf.setFillColor(HexColor(color))
            baseline = PAGE_HEIGHT - self.y - size
            if align == "center":
                self.pdf.drawCentredString(x + width / 2, baseline, line)
            else:
                self.pdf.drawString(x, baseline, line)
            self.y += leading
            consumed += leading
        return consumed

    def rule(self, x1: float = LEFT_MARGIN, x2: float = RIGHT_EDGE, color: str = RULE) -> None:
        self.pdf.setStrokeColor(HexColor(color))
        self.pdf.setLineWidth(1)
        top = PAGE_HEIGHT - self.y
        self.pdf.line(x1, top, x2, top)


def _fit(text: str, font: str, size: float, width: float) -> str:
    """Clip text to width, ending in an ellipsis when shortened."""
    if stringWidth(text, font, size) <= width:
        return text
    ellipsis = "..."
    while text and stringWidth(text + ellipsis, font, size) > width:
        text = text[:-1]
    return text + ellipsis


def draw_table(cursor: PdfCursor, rows: list[list[str]]) -> None:
    """Equal-width columns, shaded header row, one line per cell."""
    if not rows:
        return

    header_height = 22
    row_height = 18
    padding = 6
    columns = max(len(row) for row in rows)
    column_width = CONTENT_WIDTH / columns

    cursor.ensure_space(header_height + (len(rows) - 1) * row_height + 10)
    pdf = cursor.pdf

    for index, row in enumerate(rows):
        is_header = index == 0
        height = header_height if is_header else row_height
        if not is_header and cursor.y + height > BOTTOM_LIMIT:
            cursor.new_page()

        font = FONT_BOLD if is_header else FONT
        size = 10 if is_header else 9
        bottom = PAGE_HEIGHT - cursor.y - height

        pdf.setFillColor(HexColor("#f1f5f9" if is_header else "#ffffff"))
        pdf.setStrokeColor(HexColor("#94a3b8" if is_header else RULE))
        pdf.setLineWidth(0.5)
        pdf.rect(LEFT_MARGIN, bottom, CONTENT_WIDTH, height, stroke=1, fill=1)

        pdf.setFont(font, size)
        pdf.setFillColor(HexColor("#0f172a" if is_header else "#475569"))
        for column, cell in enumerate(row):
            cell_x = LEFT_MARGIN + column * column_width
            pdf.rect(cell_x, bottom, column_width, height, stroke=1, fill=0)
            text = _fit(clean_text(cell), font, size, column_width - 2 * padding)
            baseline = bottom + (height - size) / 2 + 2
            if is_header:
                pdf.drawCentredString(cell_x + column_width / 2, baseline, text)
            else:
                pdf.drawString(cell_x + padding, baseline, text)

        cursor.y += height


def render_markdown(cursor: PdfCursor, text: str) -> None:
    for block in parse_markdown(text):
        kind = block.kind
        if kind == "heading1":
            cursor.y += 5
            cursor.write(block.text, LEFT_MARGIN, 16, HEADING_BLUE, font=FONT_BOLD)
            cursor.y += 8
        elif kind == "heading2":
            cursor.y += 3
            cursor.write(block.text, LEFT_MARGIN, 14, HEADING_BLUE, font=FONT_BOLD)
            cursor.y += 6
        elif kind == "section":
            cursor.y += 3
            cursor.ensure_space(20)
            cursor.rule()
            cursor.y += 4
            cursor.write(block.text, LEFT_MARGIN, 14, BRAND_BLUE, font=FONT_BOLD)
            cursor.y += 3
        elif kind == "strategy":
            cursor.y += 3
            cursor.write(block.text, LEFT_MARGIN + 10, 11, HEADING_BLUE, font=FONT_BOLD)
            cursor.y += 2
        elif kind == "implementation":
            cursor.y += 8
            cursor.write(block.text, LEFT_MARGIN + 20, 10, GREEN, font=FONT_BOLD)
            cursor.y += 6
        elif kind == "step":
            cursor.y += 4
            cursor.write(block.text, LEFT_MARGIN + 20, 10, GREEN)
            cursor.y += 3
        elif kind == "numbered":
            cursor.y += 6
            cursor.write(block.text, LEFT_MARGIN + 10, 11, HEADING_BLUE)
            cursor.y += 5
        elif kind == "label":
            cursor.y += 4
            cursor.write(block.text, LEFT_MARGIN + 10, 10, PURPLE, font=FONT_BOLD)
            cursor.y += 3
        elif kind == "bold_heading":
            cursor.y += 6
            cursor.write(block.text, LEFT_MARGIN + 10, 10, TEXT, font=FONT_BOLD)
            cursor.y += 5
        elif kind == "bold":
            cursor.y += 8
            cursor.write(block.text, LEFT_MARGIN + 5, 11, TEXT, font=FONT_BOLD)
            cursor.y += 6
        elif kind == "nested_bullet":
            cursor.write(f"- {block.text}", LEFT_MARGIN + 40, 9, NESTED, width=455)
            cursor.y += 2
        elif kind == "bullet":
            cursor.write(f"• {block.text}", LEFT_MARGIN + 20, 9, TEXT, width=475)
            cursor.y += 2
        elif kind == "timeline":
            cursor.write(block.text, LEFT_MARGIN + 25, 9, GREEN, width=460)
            cursor.y += 3
        elif kind == "table":
            cursor.y += 5
            draw_table(cursor, block.rows)
            cursor.y += 8
        else:
            indent = LEFT_MARGIN + 25 if block.in_list else LEFT_MARGIN + 10
            width = 460 if block.in_list else 485
            cursor.write(block.text, indent, 9, TEXT, width=width, leading=11)
            cursor.y += 6
    cursor.y += 8


# ============================================================================
# Report
# ============================================================================


@dataclass
class InterventionSection:
    title: str
    description: str
    steps: list[str] = field(default_factory=list)
    timeline: str | None = None


@dataclass
class FollowUpSection:
    question: str
    response: str


@dataclass
class ConcernReportData:
    """Plain snapshot of a concern, safe to render off the event loop."""

    student_first_name: str
    student_last_initial: str
    grade: str
    concern_types: list[str]
    severity_level: str
    description: str
    documented_at: datetime | None
    interventions: list[InterventionSection] = field(default_factory=list)
    follow_ups: list[FollowUpSection] = field(default_factory=list)


def draw_footer(cursor: PdfCursor) -> None:
    """Draw the closing note at the bottom of the page, on a fresh page if the body reaches it."""
    cursor.break_after(FOOTER_TOP)
    pdf = cursor.pdf
    pdf.setFont(FONT, 8)
    pdf.setFillColor(HexColor(MUTED))
    baseline = 80 - 8
    for line in simpleSplit(FOOTER_TEXT, FONT, 8, CONTENT_WIDTH):
        pdf.drawCentredString(LEFT_MARGIN + CONTENT_WIDTH / 2, baseline, line)
        baseline -= 10


def render_concern_report(data: ConcernReportData, generated_at: datetime | None = None) -> bytes:
    """Render the concern report and return the PDF bytes."""
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=letter)
    pdf.setTitle(f"Concern Report - {data.student_first_name} {data.student_last_initial}.")
    pdf.setAuthor("Concern2Care")
    cursor = PdfCursor(pdf)

    # Header
    cursor.y = 50
    cursor.write("Concern2Care", LEFT_MARGIN, 20, BRAND_BLUE, font=FONT_BOLD)
    cursor.y = 80
    cursor.write("Your Personalized Teaching Support Guide", LEFT_MARGIN, 16, "#000000")
    cursor.y = 110
    cursor.write(f"Generated on {format_generated_date(generated_at)}", LEFT_MARGIN, 10, MUTED)
    cursor.y = 130
    cursor.rule()
    cursor.y = 150

    # Concern details
    cursor.write("Concern Details", LEFT_MARGIN, 14, "#000000", font=FONT_BOLD)
    cursor.y += 10
    types = ", ".join(data.concern_types) if data.concern_types else "Not specified"
    documented = (
        f"{data.documented_at.month}/{data.documented_at.day}/{data.documented_at.year}"
        if data.documented_at
        else "Unknown"
    )
    for line in (
        f"Student: {data.student_first_name} {data.student_last_initial}.",
        f"Grade: {data.grade}",
        f"Type: {types}",
        f"Date Documented: {documented}",
        f"Severity: {data.severity_level.capitalize()}",
    ):
        cursor.write(line, LEFT_MARGIN, 12, "#000000")
        cursor.y += 5
    cursor.y += 5
    cursor.write("Description:", LEFT_MARGIN, 12, "#000000", font=FONT_BOLD)
    cursor.write(data.description, LEFT_MARGIN, 12, "#000000", width=CONTENT_WIDTH)
    cursor.y += 30
    cursor.break_after(700)

    # Interventions
    cursor.write("Your Learning-Focused Strategy Toolkit", LEFT_MARGIN, 14, "#000000", font=FONT_BOLD)
    cursor.y += 10
    for index, intervention in enumerate(data.interventions, start=1):
        cursor.break_after(680)
        cursor.write(f"{index}. {intervention.title}", LEFT_MARGIN, 13, BRAND_BLUE, font=FONT_BOLD)
        cursor.y += 12
        render_markdown(cursor, intervention.description)
        cursor.y += 10

        if intervention.steps:
            cursor.break_after(700)
            cursor.write("Implementation Steps:", LEFT_MARGIN, 11, GREEN, font=FONT_BOLD)
            cursor.y += 4
            for number, step in enumerate(intervention.steps, start=1):
                cursor.break_after(720)
                cursor.write(f"{number}. {step}", 70, 9, TEXT, width=475)
                cursor.y += 6
            cursor.y += 8

        if intervention.timeline:
            cursor.break_after(730)
            cursor.write(f"Timeline: {intervention.timeline}", LEFT_MARGIN, 10, MUTED)
            cursor.y += 10
        cursor.y += 20

    # Follow-up questions
    if data.follow_ups:
        cursor.break_after(600)
        cursor.write("Follow-up Questions & Responses", LEFT_MARGIN, 14, "#000000", font=FONT_BOLD)
        cursor.y += 10
        for index, qa in enumerate(data.follow_ups, start=1):
            cursor.break_after(650)
            cursor.write(f"Q{index}: {qa.question}", LEFT_MARGIN, 11, BRAND_BLUE, font=FONT_BOLD)
            cursor.y += 6
            cursor.write("A:", LEFT_MARGIN, 10, "#000000")
            cursor.y += 3
            render_markdown(cursor, qa.response)
            cursor.y += 15

    draw_footer(cursor)
    pdf.save()
    return buffer.getvalue()
