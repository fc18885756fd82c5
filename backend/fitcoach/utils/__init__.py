"""
Utility modules: response envelope, route decorators, request helpers and
the pure domain calculators (assessments, message templates).
"""
