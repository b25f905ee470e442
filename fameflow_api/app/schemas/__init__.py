"""
Pydantic schema definitions for API payloads, kept apart from the SQL
rows they are built from.
"""
