"""
Teacher Credentials PDF

Printable sheet of temporary logins produced by a bulk teacher import, for
a school administrator to hand out.
"""

import html
import io
from dataclasses import dataclass
from datetime import datetime

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

INSTRUCTIONS = [
    "1. Go to the Concern2Care login page",
    "2. Enter your email address and temporary password below",
    "3. You will be prompted to change your password on first login",
    "4. Choose a strong password that you will remember",
    "5. Begin documenting student concerns and receiving AI-powered interventions",
]

CONFIDENTIAL_NOTICE = (
    "CONFIDENTIAL: This document contains sensitive login credentials. Please distribute "
    "securely and ensure teachers change their passwords upon first login."
)


@dataclass
class TeacherCredential:
    name: str
    email: str
    password: str
    school: str = ""


def generate_credential_pdf(
    *,
    school_name: str,
    contact_email: str,
    credentials: list[TeacherCredential],
    school_district: str | None = None,
    generated_at: datetime | None = None,
) -> bytes:
    """
    Build the credentials PDF.

    The table header repeats on every page and rows alternate shading.
    """
    generated_at = generated_at or datetime.now()
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        leftMargin=50,
        rightMargin=50,
        topMargin=50,
        bottomMargin=50,
        title=f"Teacher Login Credentials - {school_name}",
        author="Concern2Care",
        subject="Teacher Account Credentials",
    )

    styles = getSampleStyleSheet()
    brand_style = ParagraphStyle(
        "Brand",
        parent=styles["Heading1"],
        fontSize=24,
        leading=28,
        textColor=colors.HexColor("#2563eb"),
    )
    title_style = ParagraphStyle(
        "CredentialsTitle",
        parent=styles["Heading2"],
        fontSize=20,
        leading=24,
        textColor=colors.HexColor("#1f2937"),
    )
    info_style = ParagraphStyle(
        "SchoolInfo",
        parent=styles["Normal"],
        fontSize=14,
        leading=20,
        textColor=colors.HexColor("#374151"),
    )
    notice_style = ParagraphStyle(
        "Notice",
        parent=styles["Normal"],
        fontSize=10,
        leading=13,
        textColor=colors.HexColor("#dc2626"),
    )
    body_style = ParagraphStyle(
        "Body",
        parent=styles["Normal"],
        fontSize=10,
        leading=15,
        leftIndent=20,
        textColor=colors.HexColor("#1f2937"),
    )
    footer_style = ParagraphStyle(
        "Footer",
        parent=styles["Normal"],
        fontSize=8,
        alignment=1,
        textColor=colors.HexColor("#6b7280"),
    )

    content = [
        Paragraph("Concern2Care", brand_style),
        Paragraph("Teacher Login Credentials", title_style),
        Spacer(1, 12),
        Paragraph(f"School: {html.escape(school_name)}", info_style),
    ]
    if school_district:
        content.append(Paragraph(f"District: {html.escape(school_district)}", info_style))
    content.extend(
        [
            Paragraph(f"Generated: {generated_at:%m/%d/%Y}", info_style),
            Paragraph(f"Contact: {html.escape(contact_email)}", info_style),
            Spacer(1, 20),
            Paragraph(CONFIDENTIAL_NOTICE, notice_style),
            Spacer(1, 16),
            Paragraph("<b>Instructions for Teachers:</b>", styles["Heading4"]),
        ]
    )
    content.extend(Paragraph(line, body_style) for line in INSTRUCTIONS)
    content.append(Spacer(1, 20))

    rows = [["Name", "Email Address", "Temporary Password"]]
    rows.extend([c.name, c.email, c.password] for c in credentials)

    table = Table(rows, colWidths=[2.1 * inch, 2.8 * inch, 2.0 * inch], repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#f3f4f6")),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.HexColor("#1f2937")),
                ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, 0), 10),
                ("FONTNAME", (0, 1), (-1, -1), "Helvetica"),
                ("FONTNAME", (2, 1), (2, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 1), (-1, -1), 9),
                ("TEXTCOLOR", (0, 1), (-1, -1), colors.HexColor("#374151")),
                ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.HexColor("#f9fafb"), colors.white]),
                ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
                ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
                ("LINEBELOW", (0, 0), (-1, 0), 0.5, colors.HexColor("#d1d5db")),
            ]
        )
    )
    content.append(Paragraph("<u>Teacher Login Credentials</u>", styles["Heading4"]))
    content.append(table)

    content.extend(
        [
            Spacer(1, 40),
            Paragraph(
                "This document was automatically generated by Concern2Care. "
                "Keep this information secure and confidential.",
                footer_style,
            ),
            Spacer(1, 6),
            Paragraph("For technical support, contact your system administrator.", footer_style),
        ]
    )

    doc.build(content)
    return buffer.getvalue()
