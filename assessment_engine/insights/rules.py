"""
Insight Rules

Fixed-threshold interpretation of raw answers:
- Completion quality from the stored score
- BMI category from height (cm) and weight (kg)
- Blood pressure stage from systolic/diastolic (mmHg)

Every rule returns None when its inputs are missing or malformed.
Thresholds are fixed numbers, not learned.

Version: insights_v1
"""

from typing import Optional

from assessment_engine.schema.answers import format_number, parse_number
from assessment_engine.schema.models import AssessmentSchema, Response

from .models import BloodPressureCategory, Insight, Severity

HEIGHT_FIELD = "height"
WEIGHT_FIELD = "weight"
SYSTOLIC_FIELD = "blood_pressure_systolic"
DIASTOLIC_FIELD = "blood_pressure_diastolic"


# ============================================================
# COMPLETION QUALITY
# ============================================================

def completion_insight(score: Optional[int]) -> Optional[Insight]:
    if score is None:
        return None
    if score >= 90:
        return Insight(
            severity=Severity.SUCCESS,
            title="Excellent Completion",
            description="You provided comprehensive information across all assessment areas.",
            source="completion",
        )
    if score >= 70:
        return Insight(
            severity=Severity.GOOD,
            title="Good Completion",
            description="Most assessment areas were completed thoroughly.",
            source="completion",
        )
    return Insight(
        severity=Severity.WARNING,
        title="Partial Completion",
        description="Consider completing remaining fields for a more comprehensive assessment.",
        source="completion",
    )


# ============================================================
# BMI
# ============================================================

def calculate_bmi(height_cm, weight_kg) -> Optional[float]:
    """weight / height_m^2, or None unless both values are positive numbers."""
    height = parse_number(height_cm)
    weight = parse_number(weight_kg)
    if height is None or weight is None or height <= 0 or weight <= 0:
        return None
    height_m = height / 100
    return weight / (height_m * height_m)


def categorize_bmi(bmi: float) -> str:
    if bmi < 18.5:
        return "Underweight"
    if bmi < 25:
        return "Normal weight"
    if bmi < 30:
        return "Overweight"
    return "Obese"


def bmi_insight(schema: AssessmentSchema, response: Response) -> Optional[Insight]:
    answers = response.answers
    bmi = calculate_bmi(answers.get(HEIGHT_FIELD), answers.get(WEIGHT_FIELD))
    if bmi is None:
        return None
    return Insight(
        severity=Severity.INFO,
        title=f"BMI: {bmi:.1f}",
        description=categorize_bmi(bmi),
        source="bmi",
    )


# ============================================================
# BLOOD PRESSURE
# ============================================================

def categorize_blood_pressure(systolic: float, diastolic: float) -> BloodPressureCategory:
    """Evaluated in order; the first matching band wins."""
    if systolic < 120 and diastolic < 80:
        return BloodPressureCategory(Severity.SUCCESS, "Normal", "Normal blood pressure")
    if systolic < 130 and diastolic < 80:
        return BloodPressureCategory(Severity.WARNING, "Elevated", "Elevated blood pressure")
    if 130 <= systolic < 140 or 80 <= diastolic < 90:
        return BloodPressureCategory(Severity.WARNING, "Stage 1 Hypertension", "Stage 1 Hypertension")
    return BloodPressureCategory(
        Severity.ERROR,
        "Stage 2 Hypertension",
        "Stage 2 Hypertension - Consult a physician",
    )


def blood_pressure_insight(schema: AssessmentSchema, response: Response) -> Optional[Insight]:
    systolic = parse_number(response.answers.get(SYSTOLIC_FIELD))
    diastolic = parse_number(response.answers.get(DIASTOLIC_FIELD))
    if systolic is None or diastolic is None:
        return None
    category = categorize_blood_pressure(systolic, diastolic)
    return Insight(
        severity=category.severity,
        title=f"Blood Pressure: {format_number(systolic)}/{format_number(diastolic)} mmHg",
        description=category.description,
        source="blood_pressure",
    )
