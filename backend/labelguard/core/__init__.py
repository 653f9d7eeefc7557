"""Core Layer: pure edit logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Every public function is deterministic for a given input
    - Loggers are injectable; the module logger is only the default
"""
