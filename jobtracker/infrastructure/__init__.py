"""Infrastructure Layer — database, identity provider, session storage, logging.

Invariants:
    - Infrastructure never imports from services/ or api/
    - All storage failures mapped to errors from core/errors.py
"""
