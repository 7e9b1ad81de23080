# backend/fittrack/services/health.py
import math
from typing import Any, Dict, Optional

from ..models.workout import WORKOUT_TYPE_ALIASES

DEFAULT_WEIGHT_KG = 70.0

# Metabolic equivalents per activity
MET_TABLE = {
    "Walking": 3.5,
    "Running": 9.8,
    "Cycling": 7.5,
    "Weightlifting": 5.0,
    "Yoga": 2.5,
    "HIIT": 8.0,
    "Swimming": 6.0,
    "Other": 4.0,
}
DEFAULT_MET = 4.0

INTENSITY_FACTOR = {
    "Low": 0.8,
    "Medium": 1.0,
    "High": 1.2,
}


def normalize_workout_type(workout_type: Optional[str]) -> Optional[str]:
    if workout_type is None:
        return None
    return WORKOUT_TYPE_ALIASES.get(workout_type, workout_type)


def calculate_bmi(height_cm, weight_kg) -> Dict[str, Any]:
    """
    Returns {"value": 22.9, "category": "Normal weight"}.
    Missing or zero measurements give {"value": 0, "category": "Unknown"}.
    """
    if not height_cm or not weight_kg or float(height_cm) <= 0 or float(weight_kg) <= 0:
        return {"value": 0, "category": "Unknown"}

    height_m = float(height_cm) / 100
    bmi = round(float(weight_kg) / (height_m * height_m), 1)

    if bmi < 18.5:
        category = "Underweight"
    elif bmi < 24.9:
        category = "Normal weight"
    elif bmi < 29.9:
        category = "Overweight"
    else:
        category = "Obesity"

    return {"value": bmi, "category": category}


def estimate_calories(workout_type, duration_minutes, intensity, weight_kg=None) -> int:
    met = MET_TABLE.get(normalize_workout_type(workout_type), DEFAULT_MET)
    met *= INTENSITY_FACTOR.get(intensity, 1.0)

    weight = float(weight_kg) if weight_kg else DEFAULT_WEIGHT_KG
    calories = met * weight * (float(duration_minutes or 0) / 60)

    # half-up, not banker's rounding
    return int(math.floor(calories + 0.5))
