"""labelguard: validation, clamping and self-repair for AI-proposed label edits.

Invariants:
    - Package root contains no executable code (no import side effects)
    - Callers import operations from their defining modules
"""
