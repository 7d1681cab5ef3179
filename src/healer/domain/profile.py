"""Domain models for a submitted health profile."""

from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum

HIGH_SYSTOLIC_THRESHOLD = 130
HIGH_TOTAL_CHOLESTEROL_THRESHOLD = 200


class Gender(StrEnum):
    """Gender options offered by the form."""

    MALE = "Male"
    FEMALE = "Female"
    OTHER = "Other"


class BloodPressureLevel(StrEnum):
    """Qualitative blood pressure level."""

    LOW = "Low"
    NORMAL = "Normal"
    HIGH = "High"


class CholesterolLevel(StrEnum):
    """Qualitative cholesterol level."""

    NORMAL = "Normal"
    HIGH = "High"


class ActivityLevel(StrEnum):
    """Self-reported activity level."""

    SEDENTARY = "Sedentary"
    ACTIVE = "Active"
    ATHLETE = "Athlete"


class BmiCategory(StrEnum):
    """BMI classification bands."""

    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


@dataclass(frozen=True)
class Bmi:
    """Derived body mass index."""

    value: float
    category: BmiCategory

    def __str__(self) -> str:
        return f"{self.value:.1f} ({self.category})"


@dataclass(frozen=True)
class BloodPressureReading:
    """Exact blood pressure entered in advanced mode."""

    systolic: float
    diastolic: float

    def __str__(self) -> str:
        return f"{self.systolic:g}/{self.diastolic:g} mmHg"


@dataclass(frozen=True)
class CholesterolReading:
    """Exact cholesterol values entered in advanced mode."""

    total: float
    ldl: float | None = None
    hdl: float | None = None

    def __str__(self) -> str:
        text = f"{self.total:g} mg/dL"
        extras = []
        if self.ldl is not None:
            extras.append(f"LDL {self.ldl:g}")
        if self.hdl is not None:
            extras.append(f"HDL {self.hdl:g}")
        if extras:
            text += f" ({', '.join(extras)})"
        return text


@dataclass(frozen=True)
class GlucoseReadings:
    """Optional glycemic indicators in mg/dL."""

    fasting: float | None = None
    post_meal: float | None = None


@dataclass(frozen=True)
class HealthProfile:
    """Canonical, immutable health profile built from one form submission."""

    name: str
    age: int
    gender: Gender
    height_cm: float
    weight_kg: float
    bmi: Bmi | None
    blood_pressure: BloodPressureLevel | BloodPressureReading
    cholesterol: CholesterolLevel | CholesterolReading
    glucose: GlucoseReadings
    allergies: tuple[str, ...]
    activity_level: ActivityLevel
    available_ingredients: str
    health_issues: tuple[str, ...]
    submitted_at: datetime

    @property
    def bp_advanced_mode(self) -> bool:
        return isinstance(self.blood_pressure, BloodPressureReading)

    @property
    def cholesterol_advanced_mode(self) -> bool:
        return isinstance(self.cholesterol, CholesterolReading)

    @property
    def has_high_blood_pressure(self) -> bool:
        """Whether meals should be low in sodium."""
        if isinstance(self.blood_pressure, BloodPressureReading):
            return self.blood_pressure.systolic > HIGH_SYSTOLIC_THRESHOLD
        return self.blood_pressure is BloodPressureLevel.HIGH

    @property
    def has_high_cholesterol(self) -> bool:
        """Whether meals should be high in fiber and low in saturated fat."""
        if isinstance(self.cholesterol, CholesterolReading):
            return self.cholesterol.total > HIGH_TOTAL_CHOLESTEROL_THRESHOLD
        return self.cholesterol is CholesterolLevel.HIGH

    @property
    def has_glycemic_readings(self) -> bool:
        return (
            self.glucose.fasting is not None or self.glucose.post_meal is not None
        )
