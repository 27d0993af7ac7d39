from pydantic import BaseModel


class ReceiptIdResponse(BaseModel):
    id: str


class PointsResponse(BaseModel):
    points: int
