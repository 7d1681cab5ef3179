"""Normalize raw form submissions into health profiles."""

import logging
import math
from collections.abc import Mapping
from datetime import UTC, datetime
from enum import StrEnum
from typing import TypeVar

from healer.domain.errors import ProfileValidationError
from healer.domain.profile import (
    ActivityLevel,
    BloodPressureLevel,
    BloodPressureReading,
    Bmi,
    BmiCategory,
    CholesterolLevel,
    CholesterolReading,
    Gender,
    GlucoseReadings,
    HealthProfile,
)

SYSTOLIC_RANGE = (50, 300)
DIASTOLIC_RANGE = (30, 200)
TOTAL_CHOLESTEROL_RANGE = (100, 500)

_logger = logging.getLogger(__name__)

_TRUTHY = {"true", "1", "yes", "on"}

_E = TypeVar("_E", bound=StrEnum)


def calculate_bmi(weight_kg: float | None, height_cm: float | None) -> Bmi | None:
    """Return BMI rounded to one decimal, or None when inputs are unusable."""
    if not weight_kg or not height_cm or weight_kg <= 0 or height_cm <= 0:
        return None
    height_m = height_cm / 100
    value = round(weight_kg / (height_m * height_m), 1)
    return Bmi(value=value, category=bmi_category(value))


def bmi_category(value: float) -> BmiCategory:
    """Classify a BMI value; each bound is the inclusive start of the next band."""
    if value < 18.5:
        return BmiCategory.UNDERWEIGHT
    if value < 25:
        return BmiCategory.NORMAL
    if value < 30:
        return BmiCategory.OVERWEIGHT
    return BmiCategory.OBESE


def normalize_profile(
    raw_form: Mapping[str, object], *, submitted_at: datetime | None = None
) -> HealthProfile:
    """Validate a raw form submission and build a canonical profile.

    Keys follow the form field names (``bpAdvancedMode``, ``totalCholesterol``
    and so on). Raises ProfileValidationError on missing or invalid input.
    """
    name = _text(raw_form.get("name"))
    age = _number(raw_form, "age")
    gender_raw = _text(raw_form.get("gender"))
    height_cm = _number(raw_form, "height")
    weight_kg = _number(raw_form, "weight")
    if not name or age is None or not gender_raw or height_cm is None or weight_kg is None:
        raise ProfileValidationError("Please fill in all basic profile fields")
    if age <= 0 or age != int(age):
        raise ProfileValidationError("Age must be a positive whole number")
    if height_cm <= 0 or weight_kg <= 0:
        raise ProfileValidationError("Height and weight must be positive numbers")

    profile = HealthProfile(
        name=name,
        age=int(age),
        gender=_choice(Gender, gender_raw, "gender"),
        height_cm=height_cm,
        weight_kg=weight_kg,
        bmi=calculate_bmi(weight_kg, height_cm),
        blood_pressure=_blood_pressure(raw_form),
        cholesterol=_cholesterol(raw_form),
        glucose=GlucoseReadings(
            fasting=_number(raw_form, "diabetesFasting"),
            post_meal=_number(raw_form, "diabetesPostMeal"),
        ),
        allergies=_unique_items(raw_form.get("allergies")),
        activity_level=_choice(
            ActivityLevel,
            _text(raw_form.get("activityLevel")) or ActivityLevel.SEDENTARY.value,
            "activity level",
        ),
        available_ingredients=_text(raw_form.get("availableIngredients")),
        health_issues=_unique_items(raw_form.get("healthIssues")),
        submitted_at=submitted_at or datetime.now(tz=UTC),
    )
    _logger.debug(
        "Normalized profile: bmi=%s bp_advanced=%s cholesterol_advanced=%s",
        profile.bmi,
        profile.bp_advanced_mode,
        profile.cholesterol_advanced_mode,
    )
    return profile


def _blood_pressure(
    raw_form: Mapping[str, object],
) -> BloodPressureLevel | BloodPressureReading:
    if not _flag(raw_form.get("bpAdvancedMode")):
        level = _text(raw_form.get("bpLevel")) or BloodPressureLevel.NORMAL.value
        return _choice(BloodPressureLevel, level, "blood pressure level")

    systolic = _number(raw_form, "systolic")
    diastolic = _number(raw_form, "diastolic")
    if systolic is None or diastolic is None:
        raise ProfileValidationError("Please enter both systolic and diastolic values")
    if not _within(systolic, SYSTOLIC_RANGE) or not _within(diastolic, DIASTOLIC_RANGE):
        raise ProfileValidationError(
            "Please enter valid BP values (Systolic: 50-300, Diastolic: 30-200)"
        )
    return BloodPressureReading(systolic=systolic, diastolic=diastolic)


def _cholesterol(
    raw_form: Mapping[str, object],
) -> CholesterolLevel | CholesterolReading:
    if not _flag(raw_form.get("cholesterolAdvancedMode")):
        level = _text(raw_form.get("cholesterolLevel")) or CholesterolLevel.NORMAL.value
        return _choice(CholesterolLevel, level, "cholesterol level")

    total = _number(raw_form, "totalCholesterol")
    if total is None:
        raise ProfileValidationError("Please enter total cholesterol value")
    if not _within(total, TOTAL_CHOLESTEROL_RANGE):
        raise ProfileValidationError(
            "Please enter valid cholesterol values (100-500 mg/dL)"
        )
    ldl = _number(raw_form, "ldl")
    hdl = _number(raw_form, "hdl")
    for label, value in (("LDL", ldl), ("HDL", hdl)):
        if value is not None and value < 0:
            raise ProfileValidationError(f"{label} cannot be negative")
    return CholesterolReading(total=total, ldl=ldl, hdl=hdl)


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _number(raw_form: Mapping[str, object], key: str) -> float | None:
    """Read an optional number; blanks are absent, garbage is rejected."""
    value = raw_form.get(key)
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int | float):
        number = float(value)
    else:
        text = str(value).strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            raise ProfileValidationError(f"{key} must be a number") from None
    if not math.isfinite(number):
        raise ProfileValidationError(f"{key} must be a number")
    return number


def _flag(value: object) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in _TRUTHY
    return bool(value)


def _within(value: float, bounds: tuple[int, int]) -> bool:
    low, high = bounds
    return low <= value <= high


def _choice(enum_type: type[_E], value: str, label: str) -> _E:
    for option in enum_type:
        if option.value.lower() == value.lower():
            return option
    allowed = ", ".join(option.value for option in enum_type)
    raise ProfileValidationError(f"Invalid {label} {value!r}; expected one of {allowed}")


def _unique_items(value: object) -> tuple[str, ...]:
    """Split lists or comma-separated text into unique, non-blank items."""
    if value is None:
        return ()
    if isinstance(value, str):
        candidates = value.split(",")
    elif isinstance(value, list | tuple | set | frozenset):
        candidates = [str(item) for item in value if item is not None]
    else:
        raise ProfileValidationError("Expected a list of values")
    items: list[str] = []
    seen: set[str] = set()
    for candidate in candidates:
        item = candidate.strip()
        if item and item.lower() not in seen:
            seen.add(item.lower())
            items.append(item)
    return tuple(items)
