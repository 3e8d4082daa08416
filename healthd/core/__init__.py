"""Core Layer — pure dispatch logic, no IO, no async, no sockets.

Invariants:
    - No module in core/ imports from api/, infrastructure/, or the listeners
    - All functions are pure and deterministic

Design Decisions:
    - Functional core shared by both listeners (ADR: one dispatch rule, two transports)
"""
