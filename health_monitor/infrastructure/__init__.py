"""Infrastructure Layer — MongoDB access and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/
    - All driver exceptions mapped to core errors before leaving this layer
"""
