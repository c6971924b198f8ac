"""
Financial report PDF generation.

Renders a stored analysis as a downloadable PDF using ReportLab platypus.
"""

import io
import logging
from typing import Iterable, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from .models import AnalysisRecord, QuestionnaireRecord
from .prompts import format_currency

logger = logging.getLogger(__name__)

# Helvetica has no rupee glyph
PDF_CURRENCY = "Rs. "
ACCENT = colors.HexColor("#1e40af")


def _money(value: float) -> str:
    return format_currency(value, symbol=PDF_CURRENCY)


class FinancialReportGenerator:
    """Builds the PDF report for one questionnaire and its analysis."""

    def __init__(self):
        self._styles = getSampleStyleSheet()
        self._setup_custom_styles()

    def _setup_custom_styles(self):
        self._styles.add(ParagraphStyle(
            "ReportTitle",
            parent=self._styles["Title"],
            fontSize=20,
            alignment=TA_CENTER,
            spaceAfter=4,
            textColor=ACCENT,
        ))
        self._styles.add(ParagraphStyle(
            "SectionHeading",
            parent=self._styles["Heading2"],
            fontSize=12,
            fontName="Helvetica-Bold",
            spaceBefore=14,
            spaceAfter=6,
            textColor=ACCENT,
        ))
        self._styles.add(ParagraphStyle(
            "ReportBullet",
            parent=self._styles["Normal"],
            fontSize=10,
            leading=14,
            leftIndent=14,
            spaceAfter=3,
        ))
        self._styles.add(ParagraphStyle(
            "SmallPrint",
            parent=self._styles["Normal"],
            fontSize=8,
            leading=10,
            textColor=colors.gray,
            spaceBefore=18,
        ))

    def _heading(self, text: str) -> Paragraph:
        return Paragraph(escape(text), self._styles["SectionHeading"])

    def _body(self, text: str) -> Paragraph:
        return Paragraph(escape(text), self._styles["BodyText"])

    def _bullets(self, items: Iterable[str]) -> List[Paragraph]:
        return [Paragraph(f"&bull; {escape(item)}", self._styles["ReportBullet"]) for item in items]

    def _table(self, rows: Sequence[Sequence[str]]) -> Table:
        table = Table([list(row) for row in rows], colWidths=[3.2 * inch, 2.4 * inch])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), ACCENT),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("FONTSIZE", (0, 0), (-1, -1), 9),
            ("ALIGN", (1, 0), (1, -1), "RIGHT"),
            ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, colors.HexColor("#f1f5f9")]),
            ("GRID", (0, 0), (-1, -1), 0.25, colors.HexColor("#cbd5e1")),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
        ]))
        return table

    def _story(self, questionnaire: QuestionnaireRecord, analysis: AnalysisRecord) -> list:
        answers = questionnaire.data
        spending = analysis.spending_breakdown
        needs_wants = analysis.needs_wants_analysis
        timeline = analysis.goal_timeline
        insights = analysis.insights
        recommendations = analysis.recommendations

        story: list = [
            Paragraph("Balancify Financial Report", self._styles["ReportTitle"]),
            Paragraph(
                escape(f"Generated {analysis.created_at:%d %b %Y} for questionnaire {questionnaire.id}"),
                self._styles["SmallPrint"],
            ),
            Spacer(1, 0.2 * inch),
            self._heading("Monthly Spending Breakdown"),
            self._table(
                [("Category", "Amount")]
                + [(name.capitalize(), _money(amount)) for name, amount in spending.model_dump().items()]
                + [("Monthly income", _money(answers.monthly_income))]
            ),
            self._heading("Needs vs Wants"),
            self._table([
                ("Bucket", "Share of spending"),
                ("Needs", f"{needs_wants.needs_percentage}%"),
                ("Wants", f"{needs_wants.wants_percentage}%"),
            ]),
            self._heading("Goal Timeline"),
            self._body(
                f"Target {_money(timeline.target_amount)} with {_money(timeline.monthly_contribution)} "
                f"contributed each month: about {timeline.time_to_goal} months "
                f"(preferred: {timeline.preferred_timeline_months})."
            ),
        ]
        if timeline.milestones:
            story.append(self._table(
                [("Milestone", "Projected amount")]
                + [(milestone.description, _money(milestone.amount)) for milestone in timeline.milestones]
            ))

        story.append(self._heading("Insights"))
        for title, text in (
            ("Spending patterns", insights.spending_patterns),
            ("Optimization opportunities", insights.optimization_opportunities),
            ("Investment recommendations", insights.investment_recommendations),
            ("Risk analysis", insights.risk_analysis),
            ("Goal achievability", insights.goal_achievability),
        ):
            story.append(Paragraph(f"<b>{escape(title)}</b>", self._styles["BodyText"]))
            story.append(self._body(text))

        story.append(self._heading("Recommendations"))
        for title, items in (
            ("Immediate (1-3 months)", recommendations.immediate),
            ("Short term (3-12 months)", recommendations.short_term),
            ("Long term (1+ years)", recommendations.long_term),
        ):
            story.append(Paragraph(f"<b>{escape(title)}</b>", self._styles["BodyText"]))
            story.extend(self._bullets(items))
        story.append(Paragraph("<b>Emergency fund</b>", self._styles["BodyText"]))
        story.append(self._body(recommendations.emergency_fund))
        story.append(Paragraph("<b>Investment strategy</b>", self._styles["BodyText"]))
        story.append(self._body(recommendations.investment_strategy))

        story.append(Paragraph(
            "This report is generated from self-reported figures and automated analysis. "
            "It is not professional financial advice.",
            self._styles["SmallPrint"],
        ))
        return story

    def generate(self, questionnaire: QuestionnaireRecord, analysis: AnalysisRecord) -> bytes:
        buffer = io.BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            title="Balancify Financial Report",
            leftMargin=0.8 * inch,
            rightMargin=0.8 * inch,
            topMargin=0.8 * inch,
            bottomMargin=0.8 * inch,
        )
        doc.build(self._story(questionnaire, analysis))
        pdf = buffer.getvalue()
        logger.info("Generated %d byte report for questionnaire %s", len(pdf), questionnaire.id)
        return pdf


def generate_financial_report(questionnaire: QuestionnaireRecord, analysis: AnalysisRecord) -> bytes:
    return FinancialReportGenerator().generate(questionnaire, analysis)
