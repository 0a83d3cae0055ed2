"""Infrastructure Layer: external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from api/
    - Every external failure is mapped to a PayProofError before leaving this layer
"""
