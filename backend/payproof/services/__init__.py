"""Services Layer: the submission workflow and payment listing.

Invariants:
    - Services talk to collaborators only through the protocols in infrastructure/
    - No service holds state shared across requests
"""
