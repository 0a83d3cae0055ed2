"""Payment Schemas: response envelopes for the payment endpoints.

Invariants:
    - Success envelopes always carry success=True and a data field
    - PaymentOut mirrors PaymentRecord field for field

Design Decisions:
    - from_attributes=True: built directly from PaymentRecord dataclasses
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class PaymentOut(BaseModel):
    """Public view of a stored payment."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    phone_number: str
    payment_method: str
    reason: str
    proof_url: str
    created_at: datetime


class PaymentEnvelope(BaseModel):
    success: bool = True
    data: PaymentOut


class PaymentListEnvelope(BaseModel):
    success: bool = True
    data: list[PaymentOut]
