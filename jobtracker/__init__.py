"""Job Tracker Package — data access and session lifecycle for a personal job-application tracker.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)

Design Decisions:
    - Empty __init__.py: explicit imports only, no star exports
"""
