"""
Physical assessment calculators.

Pure functions (no I/O) used when saving an assessment and by the preview
endpoint. Inputs are metric: weight in kg, lengths in cm. Missing inputs never
raise; they produce 0 or None as documented per function.
"""

import math
from typing import NamedTuple, Optional, List, Dict, Any, Tuple

# Robinson formula reference height (5 ft)
ROBINSON_BASE_HEIGHT_CM = 152.4
CM_PER_INCH = 2.54
FALLBACK_TARGET_BMI = 22


class Classification(NamedTuple):
    label: str
    color: str


class IdealWeight(NamedTuple):
    min: float
    ideal: float
    max: float


# (upper bound exclusive, label, color); the last tier catches everything above
BMI_TIERS = (
    (18.5, 'Underweight', 'blue'),
    (24.9, 'Normal weight', 'green'),
    (29.9, 'Overweight', 'yellow'),
    (34.9, 'Obesity class I', 'orange'),
    (39.9, 'Obesity class II', 'red'),
    (math.inf, 'Obesity class III', 'darkred'),
)

BODY_FAT_TIERS = {
    'F': (
        (10, 'Risk (too low)', 'red'),
        (14, 'Athlete', 'blue'),
        (21, 'Fitness', 'green'),
        (25, 'Acceptable', 'yellow'),
        (math.inf, 'Obese', 'red'),
    ),
    'M': (
        (2, 'Risk (too low)', 'red'),
        (6, 'Athlete', 'blue'),
        (14, 'Fitness', 'green'),
        (18, 'Acceptable', 'yellow'),
        (math.inf, 'Obese', 'red'),
    ),
}

RCQ_TIERS = {
    'F': (
        (0.80, 'Low risk', 'green'),
        (0.85, 'Moderate risk', 'yellow'),
        (math.inf, 'High risk', 'red'),
    ),
    'M': (
        (0.90, 'Low risk', 'green'),
        (1.00, 'Moderate risk', 'yellow'),
        (math.inf, 'High risk', 'red'),
    ),
}


def _classify(value: float, tiers) -> Classification:
    for upper, label, color in tiers:
        if value < upper:
            return Classification(label, color)
    _, label, color = tiers[-1]
    return Classification(label, color)


def _normalize_gender(gender: Optional[str]) -> str:
    return 'F' if (gender or '').upper().startswith('F') else 'M'


def calculate_bmi(weight_kg: Optional[float], height_cm: Optional[float]) -> float:
    """
    Body mass index: weight / height(m)^2, rounded to 2 decimals.

    Returns 0 when either input is missing or zero.

    Example:
        >>> calculate_bmi(70, 175)
        22.86
    """
    if not weight_kg or not height_cm:
        return 0
    height_m = height_cm / 100
    return round(weight_kg / (height_m * height_m), 2)


def get_bmi_classification(bmi: float) -> Classification:
    return _classify(bmi, BMI_TIERS)


def calculate_body_fat_navy(
    gender: Optional[str],
    height_cm: Optional[float],
    waist_cm: Optional[float],
    neck_cm: Optional[float],
    hip_cm: Optional[float] = None,
) -> Optional[float]:
    """
    Body fat percentage with the US Navy circumference method.

    Male:   86.010*log10(waist - neck) - 70.041*log10(height) + 36.76
    Female: 163.205*log10(waist + hip - neck) - 97.684*log10(height) - 78.387

    Returns None when height, waist or neck is missing, when the female
    formula has no hip measurement, or when a logarithm argument is not
    positive (e.g. neck >= waist). Result rounded to 2 decimals.
    """
    if not height_cm or not waist_cm or not neck_cm:
        return None

    if _normalize_gender(gender) == 'M':
        girth = waist_cm - neck_cm
        if girth <= 0:
            return None
        body_fat = 86.010 * math.log10(girth) - 70.041 * math.log10(height_cm) + 36.76
    else:
        if not hip_cm:
            return None
        girth = waist_cm + hip_cm - neck_cm
        if girth <= 0:
            return None
        body_fat = 163.205 * math.log10(girth) - 97.684 * math.log10(height_cm) - 78.387

    return round(body_fat, 2)


def get_body_fat_classification(body_fat: float, gender: Optional[str]) -> Classification:
    return _classify(body_fat, BODY_FAT_TIERS[_normalize_gender(gender)])


def calculate_rcq(waist_cm: Optional[float], hip_cm: Optional[float]) -> float:
    """Waist-to-hip ratio rounded to 2 decimals, 0 when either input is missing."""
    if not waist_cm or not hip_cm:
        return 0
    return round(waist_cm / hip_cm, 2)


def get_rcq_classification(rcq: float, gender: Optional[str]) -> Classification:
    return _classify(rcq, RCQ_TIERS[_normalize_gender(gender)])


def calculate_ideal_weight(height_cm: float, gender: Optional[str]) -> IdealWeight:
    """
    Ideal weight range using the Robinson formula.

    From 152.4 cm each inch adds 1.9 kg (male, base 52 kg) or 1.7 kg (female,
    base 49 kg). Shorter heights fall back to a BMI of 22. The range is
    +/-10% around the ideal, all values rounded to 1 decimal.

    Example:
        >>> calculate_ideal_weight(175, 'M')
        IdealWeight(min=62.0, ideal=68.9, max=75.8)
    """
    if height_cm >= ROBINSON_BASE_HEIGHT_CM:
        inches_over = (height_cm - ROBINSON_BASE_HEIGHT_CM) / CM_PER_INCH
        if _normalize_gender(gender) == 'M':
            ideal = 52 + 1.9 * inches_over
        else:
            ideal = 49 + 1.7 * inches_over
    else:
        height_m = height_cm / 100
        ideal = FALLBACK_TARGET_BMI * height_m * height_m

    return IdealWeight(
        min=round(ideal * 0.9, 1),
        ideal=round(ideal, 1),
        max=round(ideal * 1.1, 1),
    )


def calculate_body_composition(
    weight_kg: Optional[float],
    body_fat_percentage: Optional[float],
) -> Tuple[Optional[float], Optional[float]]:
    """Split weight into (lean_mass_kg, fat_mass_kg); (None, None) without body fat."""
    if not weight_kg or body_fat_percentage is None:
        return None, None
    fat_mass = round(weight_kg * body_fat_percentage / 100, 2)
    lean_mass = round(weight_kg - fat_mass, 2)
    return lean_mass, fat_mass


def compute_assessment_metrics(
    gender: Optional[str],
    weight_kg: Optional[float],
    height_cm: Optional[float],
    waist_cm: Optional[float] = None,
    neck_cm: Optional[float] = None,
    hip_cm: Optional[float] = None,
) -> Dict[str, Any]:
    """
    Derive every stored metric of an assessment from raw measurements.

    Returns a dict with bmi, body_fat_percentage, waist_hip_ratio,
    lean_mass_kg, fat_mass_kg and a list of human-readable warnings for
    metrics that could not be computed.
    """
    warnings: List[str] = []

    bmi = calculate_bmi(weight_kg, height_cm)
    body_fat = calculate_body_fat_navy(gender, height_cm, waist_cm, neck_cm, hip_cm)

    if body_fat is None:
        if not waist_cm or not neck_cm:
            warnings.append('Body fat not calculated: waist and neck circumferences are required.')
        elif _normalize_gender(gender) == 'F' and not hip_cm:
            warnings.append('Body fat not calculated: hip circumference is required for women.')
        else:
            warnings.append('Body fat not calculated: measurements are inconsistent.')

    rcq = calculate_rcq(waist_cm, hip_cm)
    lean_mass, fat_mass = calculate_body_composition(weight_kg, body_fat)

    return {
        'bmi': bmi or None,
        'body_fat_percentage': body_fat,
        'waist_hip_ratio': rcq or None,
        'lean_mass_kg': lean_mass,
        'fat_mass_kg': fat_mass,
        'warnings': warnings,
    }


def describe_metrics(
    gender: Optional[str],
    height_cm: Optional[float],
    bmi: Optional[float],
    body_fat: Optional[float],
    rcq: Optional[float],
) -> Dict[str, Any]:
    """Classifications and ideal weight attached to assessment responses."""
    return {
        'bmi_classification': get_bmi_classification(bmi)._asdict() if bmi else None,
        'body_fat_classification': (
            get_body_fat_classification(body_fat, gender)._asdict() if body_fat is not None else None
        ),
        'rcq_classification': get_rcq_classification(rcq, gender)._asdict() if rcq else None,
        'ideal_weight': calculate_ideal_weight(height_cm, gender)._asdict() if height_cm else None,
    }
