"""Health Monitor Package — patients and prescriptions REST API.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
