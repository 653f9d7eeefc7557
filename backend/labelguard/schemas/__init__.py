"""Pydantic Schemas: structural contracts for edits, instructions and the label DSL.

Invariants:
    - Schemas validate untrusted data where it first enters the engine
    - Enum fields use the domain types from core/domain_types.py
"""
