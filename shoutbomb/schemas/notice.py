from pydantic import BaseModel
from typing import ClassVar, Optional
from datetime import date
from decimal import Decimal

class CourtesyNotice(BaseModel):

    COLUMNS: ClassVar[tuple] = (
        "PATRON_BARCODE", "ITEM_BARCODE", "TITLE", "DUEDATE",
        "FINES_OWED", "HOLD_COUNT", "TIMES_RENEWED", "MAX_RENEWAL",
    )

    patron_barcode: Optional[str] = None
    item_barcode: Optional[str] = None
    title: Optional[str] = None
    due_date: date
    fines_owed: Decimal
    hold_count: int
    times_renewed: int
    renewal_remaining: int

    def as_row(self):
        """Column values in `COLUMNS` order."""
        return [
            self.patron_barcode, self.item_barcode, self.title, self.due_date,
            self.fines_owed, self.hold_count, self.times_renewed, self.renewal_remaining,
        ]
