from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime

class LoanRecord(BaseModel):
    id: int
    patron_id: int
    circ_lib: int
    item_id: int
    due_date: datetime
    renewal_remaining: int = Field(default=0, ge=0)
    times_renewed: int = Field(default=0, ge=0)
    patron_barcode: Optional[str] = None
    item_barcode: Optional[str] = None
    title: Optional[str] = None

    class Config:
        from_attributes = True
