"""
Built-in Assessment Templates

Seeded into an empty store. Their ids are stable because the default insight
registry binds the BMI and blood pressure rules to them.
"""

from datetime import datetime, timezone
from typing import List

from .models import AssessmentSchema, FieldBounds, FieldKind, FieldSchema

HEALTH_FITNESS_TEMPLATE_ID = "as_hr_02"
CARDIAC_TEMPLATE_ID = "as_card_01"


def _number(field_id: str, label: str, lo: float, hi: float, required: bool = True) -> FieldSchema:
    return FieldSchema(
        id=field_id,
        label=label,
        kind=FieldKind.NUMBER,
        required=required,
        bounds=FieldBounds(min=lo, max=hi),
    )


def health_fitness_template() -> AssessmentSchema:
    created = datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc)
    return AssessmentSchema(
        id=HEALTH_FITNESS_TEMPLATE_ID,
        title="Health & Fitness Assessment",
        description="Comprehensive health and fitness evaluation",
        category="Health",
        fields=[
            _number("age", "Age", 1, 120),
            FieldSchema(id="gender", label="Gender", kind=FieldKind.RADIO, required=True,
                        options=["Male", "Female", "Other"]),
            _number("height", "Height (cm)", 50, 250),
            _number("weight", "Weight (kg)", 20, 300),
            FieldSchema(id="activity_level", label="Activity Level", kind=FieldKind.SELECT, required=True,
                        options=["Sedentary", "Lightly Active", "Moderately Active",
                                 "Very Active", "Extremely Active"]),
            FieldSchema(id="medical_conditions", label="Medical Conditions", kind=FieldKind.CHECKBOX,
                        required=False,
                        options=["Diabetes", "Hypertension", "Heart Disease", "Asthma", "None"]),
            FieldSchema(id="fitness_goals", label="Fitness Goals", kind=FieldKind.TEXTAREA, required=True),
            _number("exercise_frequency", "Exercise Frequency (per week)", 0, 14),
        ],
        created_at=created,
        updated_at=created,
    )


def cardiac_template() -> AssessmentSchema:
    created = datetime(2024, 1, 15, 11, 0, tzinfo=timezone.utc)
    return AssessmentSchema(
        id=CARDIAC_TEMPLATE_ID,
        title="Cardiac Assessment",
        description="Cardiovascular health evaluation and risk assessment",
        category="Medical",
        fields=[
            FieldSchema(id="patient_id", label="Patient ID", kind=FieldKind.TEXT, required=True),
            _number("blood_pressure_systolic", "Systolic BP (mmHg)", 70, 250),
            _number("blood_pressure_diastolic", "Diastolic BP (mmHg)", 40, 150),
            _number("heart_rate", "Heart Rate (bpm)", 30, 200),
            _number("cholesterol_total", "Total Cholesterol (mg/dL)", 100, 400),
            _number("cholesterol_hdl", "HDL Cholesterol (mg/dL)", 20, 100),
            _number("cholesterol_ldl", "LDL Cholesterol (mg/dL)", 50, 300),
            FieldSchema(id="smoking_status", label="Smoking Status", kind=FieldKind.SELECT, required=True,
                        options=["Never", "Former", "Current"]),
            FieldSchema(id="family_history", label="Family History of Heart Disease", kind=FieldKind.RADIO,
                        required=True, options=["Yes", "No"]),
            FieldSchema(id="chest_pain", label="Chest Pain Symptoms", kind=FieldKind.CHECKBOX, required=False,
                        options=["At Rest", "During Exercise", "After Meals", "None"]),
            FieldSchema(id="assessment_date", label="Assessment Date", kind=FieldKind.DATE, required=True),
        ],
        created_at=created,
        updated_at=created,
    )


def builtin_templates() -> List[AssessmentSchema]:
    return [health_fitness_template(), cardiac_template()]
