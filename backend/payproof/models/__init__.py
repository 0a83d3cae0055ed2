"""ORM Models: SQLAlchemy declarative models.

Invariants:
    - All models inherit from Base (db/base.py)
    - All models imported here so Base.metadata is complete before create_all or autogenerate
"""

from payproof.models.payment import Payment  # noqa: F401
