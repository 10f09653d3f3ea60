from pydantic import BaseModel, Field
from typing import Optional
from decimal import Decimal

class DecisionResult(BaseModel):
    loan_id: int
    fines_owed: Decimal = Field(default=Decimal('0.00'), ge=0)
    hold_count: int = Field(default=0, ge=0)
    renewal_remaining: int = Field(default=0, ge=0)
    # Name of the first gate that failed, None when renewable
    blocked_by: Optional[str] = None

    @property
    def eligible(self) -> bool:
        return self.renewal_remaining > 0
