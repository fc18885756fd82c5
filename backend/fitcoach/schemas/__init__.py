"""
Marshmallow schemas for request validation.

Schemas are instantiated once per module (e.g. `student_create_schema`) and
used by the blueprints with `schema.load(request.get_json())`.
"""
