"""Services Layer — session manager and record store.

Invariants:
    - Services are the only code that opens owner-bound database sessions
    - Identity is read through an accessor, never a module-level global

Design Decisions:
    - One service per concern: auth lifecycle (session_manager), records (record_store)
"""
