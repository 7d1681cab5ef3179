"""PDF export of a meal plan."""

import io
import logging
import re
from collections.abc import Sequence

from reportlab.lib.colors import Color
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen.canvas import Canvas

from healer.domain.meals import MealRecommendation
from healer.domain.profile import HealthProfile
from healer.services.presentation import health_priorities

PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN_MM = 20
PAGE_BREAK_MM = 270
CONTINUATION_TOP_MM = 20
FOOTER_MM = 285

_BRAND = Color(44 / 255, 138 / 255, 106 / 255)
_HEADING = Color(60 / 255, 100 / 255, 60 / 255)
_DARK_GREY = Color(80 / 255, 80 / 255, 80 / 255)
_GREY = Color(100 / 255, 100 / 255, 100 / 255)
_LIGHT_GREY = Color(150 / 255, 150 / 255, 150 / 255)
_RULE = Color(200 / 255, 200 / 255, 200 / 255)
_BLACK = Color(0, 0, 0)

_FONTS = {
    "normal": "Times-Roman",
    "bold": "Times-Bold",
    "italic": "Times-Italic",
}

DISCLAIMER_LINES = (
    "HEALER provides meal suggestions based on the health information you provided.",
    "This is not a substitute for professional medical advice, diagnosis, or treatment.",
    "Always seek the advice of your physician or other qualified health provider with",
    "any questions you may have regarding a medical condition. Never disregard",
    "professional medical advice or delay in seeking it because of something you",
    "have read or received from this application.",
    "",
    "The meal plans generated are suggestions and should be adjusted based on",
    "your personal tolerances, preferences, and any specific medical advice you",
    "have received from your healthcare providers.",
    "",
    "If you have severe allergies, medical conditions, or are pregnant, please",
    "consult with your healthcare provider before making significant dietary changes.",
)

_logger = logging.getLogger(__name__)


def export_filename(name: str) -> str:
    """Build the download name, e.g. 'Jane_Doe_HEALER_Meal_Plan.pdf'."""
    stem = re.sub(r"\s+", "_", name)
    return f"{stem}_HEALER_Meal_Plan.pdf"


def render_meal_plan_pdf(
    profile: HealthProfile, meals: Sequence[MealRecommendation]
) -> bytes:
    """Render the profile summary, recipes and disclaimer as an A4 PDF."""
    buffer = io.BytesIO()
    writer = _PdfWriter(Canvas(buffer, pagesize=A4))
    writer.canvas.setTitle("HEALER - Personalized Meal Plan")
    writer.canvas.setAuthor("HEALER")

    _write_header(writer)
    _write_profile(writer, profile)
    _write_priorities(writer, profile)
    writer.ensure_room()
    writer.text("Personalized Meal Recommendations:", size=16, style="bold", color=_BRAND)
    writer.advance(15)
    for index, meal in enumerate(meals):
        _write_meal(writer, index + 1, meal)
        writer.advance(15)
        if index < len(meals) - 1:
            writer.rule(writer.y - 5, color=Color(220 / 255, 220 / 255, 220 / 255))
            writer.advance(10)
    _write_disclaimer(writer, profile)

    writer.canvas.save()
    _logger.info(
        "Rendered meal plan PDF with %s meals on %s pages", len(meals), writer.pages
    )
    return buffer.getvalue()


class _PdfWriter:
    """Top-down text cursor in millimetres over a reportlab canvas."""

    def __init__(self, canvas: Canvas) -> None:
        self.canvas = canvas
        self.y = 25.0
        self.pages = 1
        self.max_width = PAGE_WIDTH / mm - 2 * MARGIN_MM

    def new_page(self) -> None:
        self.canvas.showPage()
        self.pages += 1
        self.y = CONTINUATION_TOP_MM

    def advance(self, amount: float) -> None:
        self.y += amount

    def ensure_room(self) -> None:
        if self.y > PAGE_BREAK_MM:
            self.new_page()

    def text(
        self,
        value: str,
        *,
        size: float,
        style: str = "normal",
        color: Color = _BLACK,
        x: float = MARGIN_MM,
        centered: bool = False,
    ) -> None:
        """Draw one line at the cursor without moving it."""
        self._use(size, style, color)
        baseline = PAGE_HEIGHT - self.y * mm
        if centered:
            self.canvas.drawCentredString(PAGE_WIDTH / 2, baseline, value)
        else:
            self.canvas.drawString(x * mm, baseline, value)

    def paragraph(
        self,
        value: str,
        *,
        size: float,
        leading: float,
        style: str = "normal",
        color: Color = _BLACK,
        indent: float = 0,
        width: float | None = None,
    ) -> None:
        """Wrap text to the column and draw it, breaking pages as needed."""
        width = width if width is not None else self.max_width
        for line in simpleSplit(value, _FONTS[style], size, width * mm):
            self.ensure_room()
            self.text(line, size=size, style=style, color=color, x=MARGIN_MM + indent)
            self.advance(leading)

    def rule(self, y: float, *, color: Color = _RULE) -> None:
        self.canvas.setStrokeColor(color)
        baseline = PAGE_HEIGHT - y * mm
        self.canvas.line(
            MARGIN_MM * mm, baseline, PAGE_WIDTH - MARGIN_MM * mm, baseline
        )

    def _use(self, size: float, style: str, color: Color) -> None:
        self.canvas.setFont(_FONTS[style], size)
        self.canvas.setFillColor(color)


def _write_header(writer: _PdfWriter) -> None:
    writer.text(
        "HEALER - Personalized Meal Plan",
        size=22,
        style="bold",
        color=_BRAND,
        centered=True,
    )
    writer.advance(10)
    writer.text(
        '"An AI Powered Virtual Nutritionist for Your Health Needs"',
        size=12,
        style="italic",
        color=_GREY,
        centered=True,
    )
    writer.advance(20)
    writer.rule(writer.y - 5)
    writer.advance(15)


def _write_profile(writer: _PdfWriter, profile: HealthProfile) -> None:
    writer.text("Health Profile Summary:", size=16, style="bold", color=_BRAND)
    writer.advance(12)
    for line in _profile_lines(profile):
        writer.paragraph(line, size=11, leading=6)
    writer.advance(15)


def _profile_lines(profile: HealthProfile) -> list[str]:
    bmi = str(profile.bmi) if profile.bmi else "Not calculated"
    lines = [
        f"Name: {profile.name}",
        f"Age: {profile.age} | Gender: {profile.gender}",
        f"Height: {profile.height_cm:g} cm | Weight: {profile.weight_kg:g} kg",
        f"BMI: {bmi}",
        f"Activity Level: {profile.activity_level}",
        f"Blood Pressure: {profile.blood_pressure}",
        f"Cholesterol: {profile.cholesterol}",
    ]
    if profile.glucose.fasting is not None:
        lines.append(f"Diabetes Fasting: {profile.glucose.fasting:g} mg/dL")
    if profile.glucose.post_meal is not None:
        lines.append(f"Diabetes Post-Meal: {profile.glucose.post_meal:g} mg/dL")
    lines.extend(
        [
            f"Allergies: {', '.join(profile.allergies) or 'None'}",
            f"Health Issues: {', '.join(profile.health_issues) or 'None specified'}",
            "Available Ingredients: "
            f"{profile.available_ingredients or 'Not specified'}",
            f"Generated on: {profile.submitted_at:%Y-%m-%d}",
        ]
    )
    return lines


def _write_priorities(writer: _PdfWriter, profile: HealthProfile) -> None:
    writer.ensure_room()
    writer.text("Health Priorities Applied:", size=12, style="bold", color=_BRAND)
    writer.advance(8)
    for priority in health_priorities(profile):
        writer.paragraph(
            f"• {priority}",
            size=10,
            leading=6,
            style="italic",
            color=_DARK_GREY,
            indent=5,
        )
    writer.advance(15)


def _write_meal(writer: _PdfWriter, number: int, meal: MealRecommendation) -> None:
    writer.ensure_room()
    writer.paragraph(
        f"{number}. {meal.name}", size=14, leading=8, style="bold", color=_HEADING
    )

    writer.ensure_room()
    metadata = (
        f"Dietary: {meal.dietary_preference}",
        f"Cooking Time: {meal.cooking_time}",
        f"Total Calories: {meal.total_calories}",
        f"Match Score: {meal.match_score}%",
    )
    for column, value in enumerate(metadata):
        writer.text(value, size=10, color=_GREY, x=MARGIN_MM + column * 45)
    writer.advance(8)

    if meal.key_benefits:
        _subheading(writer, "Key Benefits:", size=10, color=_BRAND, gap=6)
        writer.paragraph(
            meal.key_benefits,
            size=10,
            leading=5,
            style="italic",
            color=_DARK_GREY,
            indent=5,
        )
        writer.advance(5)

    _subheading(writer, "Ingredients:")
    for ingredient in meal.ingredients:
        writer.paragraph(
            f"• {ingredient}",
            size=10,
            leading=5,
            indent=5,
            width=writer.max_width - 10,
        )
    writer.advance(8)

    _subheading(writer, "Nutrition Information:")
    _write_nutrients(writer, meal)

    _subheading(writer, "Preparation Instructions:")
    for step_number, step in enumerate(meal.steps, start=1):
        writer.paragraph(
            f"{step_number}. {step}",
            size=10,
            leading=5,
            indent=5,
            width=writer.max_width - 10,
        )
        writer.advance(2)

    if meal.why_this_helps:
        writer.advance(8)
        _subheading(writer, "Why This Meal Helps:", color=_BRAND)
        writer.paragraph(
            meal.why_this_helps,
            size=10,
            leading=5,
            style="italic",
            color=_DARK_GREY,
            indent=5,
            width=writer.max_width - 10,
        )


def _write_nutrients(writer: _PdfWriter, meal: MealRecommendation) -> None:
    nutrients = meal.nutrients
    entries = [
        f"Protein: {nutrients.protein:g}g",
        f"Carbohydrates: {nutrients.carbs:g}g",
        f"Fats: {nutrients.fats:g}g",
        f"Fiber: {nutrients.fiber:g}g",
        f"Sugar: {nutrients.sugar:g}g",
    ]
    if nutrients.sodium is not None:
        entries.append(f"Sodium: {nutrients.sodium:g}mg")
    # Two columns, one row at a time.
    for row_start in range(0, len(entries), 2):
        writer.ensure_room()
        for column, value in enumerate(entries[row_start : row_start + 2]):
            writer.text(value, size=10, x=MARGIN_MM + 5 + column * 80)
        writer.advance(5)
    writer.advance(8)


def _subheading(
    writer: _PdfWriter,
    title: str,
    *,
    size: float = 12,
    color: Color = _DARK_GREY,
    gap: float = 8,
) -> None:
    writer.ensure_room()
    writer.text(title, size=size, style="bold", color=color)
    writer.advance(gap)


def _write_disclaimer(writer: _PdfWriter, profile: HealthProfile) -> None:
    writer.new_page()
    writer.text(
        "Important Medical Disclaimer",
        size=14,
        style="bold",
        color=_BRAND,
        centered=True,
    )
    writer.advance(15)
    for line in DISCLAIMER_LINES:
        writer.text(line, size=10, style="italic", color=_GREY, centered=True)
        writer.advance(6)

    writer.y = FOOTER_MM
    writer.text(
        "Generated by HEALER - AI Powered Healthy Meal Planner • "
        f"{profile.submitted_at:%Y-%m-%d}",
        size=9,
        style="italic",
        color=_LIGHT_GREY,
        centered=True,
    )
