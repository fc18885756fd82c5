"""
Integration Tests Package

Blueprints driven end to end through the Flask test client over an
in-memory SQLite database.
"""
