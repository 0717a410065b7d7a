"""Core Layer — error hierarchy, domain identifiers and storage contracts.

Invariants:
    - Core never imports from api/ or infrastructure/
"""
