"""
Unit Tests Package

This package contains unit tests for individual components:
- Utils: calculators, message templates, responses, decorators
- Schemas: Marshmallow schema validation tests
- Models: Database model tests
- Services: Business logic tests (collaborators patched where external)
"""
