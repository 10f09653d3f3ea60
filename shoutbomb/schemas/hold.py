from pydantic import BaseModel

class HoldCandidate(BaseModel):
    hold_id: int
    item_id: int
    pickup_lib: int
    request_lib: int
    patron_id: int
    requestor_id: int

    class Config:
        from_attributes = True
        frozen = True

    @property
    def key(self):
        return (self.item_id, self.hold_id)
