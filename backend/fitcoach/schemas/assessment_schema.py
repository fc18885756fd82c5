"""
Assessment Schemas

Raw measurements for a physical assessment. Derived metrics (BMI, body fat,
waist-hip ratio, lean/fat mass) are never accepted from the client.
"""

from marshmallow import Schema, fields, validate

from fitcoach.models.student import GENDERS


def circumference():
    """Optional circumference in cm."""
    return fields.Float(load_default=None, validate=validate.Range(min=0, max=300))


def skinfold():
    """Optional skinfold thickness in mm."""
    return fields.Float(load_default=None, validate=validate.Range(min=0, max=100))


def photo_url():
    return fields.Str(load_default=None, validate=validate.Length(max=500))


class AssessmentMeasurementsSchema(Schema):
    """Fields shared by the create and preview endpoints."""
    weight = fields.Float(required=True, validate=validate.Range(min=1, max=500))
    height = fields.Float(required=True, validate=validate.Range(min=50, max=272))

    neck = circumference()
    shoulders = circumference()
    chest = circumference()
    waist = circumference()
    abdomen = circumference()
    hips = circumference()
    right_arm = circumference()
    left_arm = circumference()
    right_forearm = circumference()
    left_forearm = circumference()
    right_thigh = circumference()
    left_thigh = circumference()
    right_calf = circumference()
    left_calf = circumference()

    triceps = skinfold()
    subscapular = skinfold()
    chest_fold = skinfold()
    axillary = skinfold()
    suprailiac = skinfold()
    abdominal = skinfold()
    thigh_fold = skinfold()


class AssessmentCreateSchema(AssessmentMeasurementsSchema):
    """Used for POST /api/assessments."""
    student_id = fields.UUID(required=True)
    assessed_on = fields.Date(required=True)
    age_at_assessment = fields.Int(load_default=None, validate=validate.Range(min=5, max=120))
    notes = fields.Str(load_default=None)

    photo_front = photo_url()
    photo_back = photo_url()
    photo_side_right = photo_url()
    photo_side_left = photo_url()


class AssessmentPreviewSchema(AssessmentMeasurementsSchema):
    """Used for POST /api/assessments/preview; gender comes from the body."""
    gender = fields.Str(required=True, validate=validate.OneOf(GENDERS))


assessment_create_schema = AssessmentCreateSchema()
assessment_preview_schema = AssessmentPreviewSchema()
