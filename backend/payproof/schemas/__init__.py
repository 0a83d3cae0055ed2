"""Pydantic Schemas: response contracts for API endpoints.

Invariants:
    - Schemas are API contracts; persistence lives in models/, domain values in core/
"""
