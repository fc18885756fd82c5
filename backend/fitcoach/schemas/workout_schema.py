"""
Workout Schemas

Validation for routines, their exercises and workout logs. Exercise fields
default to 3 sets of "12" reps, no load and 60 seconds of rest.
"""

from datetime import timezone
from marshmallow import Schema, fields, validate

from fitcoach.models.workout import (
    VIDEO_TYPES, DEFAULT_SETS, DEFAULT_REPS, DEFAULT_WEIGHT, DEFAULT_REST_SECONDS
)
from fitcoach.models.workout_log import DIFFICULTIES


class ExerciseSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    sets = fields.Int(load_default=DEFAULT_SETS, validate=validate.Range(min=1, max=50))
    reps = fields.Str(load_default=DEFAULT_REPS, validate=validate.Length(min=1, max=20))
    weight = fields.Float(load_default=DEFAULT_WEIGHT, validate=validate.Range(min=0, max=1000))
    rest_seconds = fields.Int(load_default=DEFAULT_REST_SECONDS, validate=validate.Range(min=0, max=3600))
    rpe = fields.Int(load_default=None, validate=validate.Range(min=1, max=10))
    video_url = fields.Str(load_default=None, validate=validate.Length(max=500))
    video_type = fields.Str(load_default=None, validate=validate.OneOf(VIDEO_TYPES))
    notes = fields.Str(load_default=None)
    position = fields.Int(load_default=None, validate=validate.Range(min=0))


class WorkoutCreateSchema(Schema):
    """Used for POST /api/workouts. Omit student_id to create a template."""
    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    student_id = fields.UUID(load_default=None)
    is_template = fields.Boolean(load_default=False)
    objective = fields.Str(load_default=None, validate=validate.Length(max=200))
    description = fields.Str(load_default=None)
    day_of_week = fields.Str(load_default=None, validate=validate.Length(max=20))
    exercises = fields.List(fields.Nested(ExerciseSchema), load_default=list)


class WorkoutUpdateSchema(Schema):
    name = fields.Str(validate=validate.Length(min=1, max=200))
    objective = fields.Str(allow_none=True, validate=validate.Length(max=200))
    description = fields.Str(allow_none=True)
    day_of_week = fields.Str(allow_none=True, validate=validate.Length(max=20))


class AssignWorkoutSchema(Schema):
    """Used for POST /api/workouts/<id>/assign."""
    student_id = fields.UUID(required=True)


class WorkoutLogExerciseSchema(Schema):
    name = fields.Str(required=True, validate=validate.Length(min=1, max=200))
    sets_done = fields.Int(load_default=None, validate=validate.Range(min=0, max=50))
    reps_done = fields.Str(load_default=None, validate=validate.Length(max=20))
    weight_used = fields.Float(load_default=None, validate=validate.Range(min=0, max=1000))
    difficulty = fields.Str(load_default=None, validate=validate.OneOf(DIFFICULTIES))


class WorkoutLogCreateSchema(Schema):
    """Used for POST /api/me/workout-logs."""
    workout_id = fields.UUID(load_default=None)
    workout_name = fields.Str(load_default=None, validate=validate.Length(max=200))
    performed_at = fields.AwareDateTime(load_default=None, default_timezone=timezone.utc)
    duration_minutes = fields.Int(load_default=None, validate=validate.Range(min=0, max=1440))
    rating = fields.Int(load_default=None, validate=validate.Range(min=1, max=5))
    feedback = fields.Str(load_default=None)
    client_reference = fields.Str(load_default=None, validate=validate.Length(min=1, max=100))
    exercises = fields.List(fields.Nested(WorkoutLogExerciseSchema), load_default=list)


exercise_schema = ExerciseSchema()
workout_create_schema = WorkoutCreateSchema()
workout_update_schema = WorkoutUpdateSchema()
assign_workout_schema = AssignWorkoutSchema()
workout_log_create_schema = WorkoutLogCreateSchema()
