"""Database Infrastructure — SQLAlchemy Base, column types, owner access policy.

Invariants:
    - All models share one Base (db/base.py)
    - Owner-bound sessions get per-row owner criteria automatically
"""
