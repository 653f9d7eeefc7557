"""Services Layer: the async self-repair shell and refinement orchestration.

Invariants:
    - Services compose core/ functions; they hold no state between calls
    - The repair callback is the only awaited collaborator
"""
