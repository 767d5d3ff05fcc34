from pydantic import BaseModel, Field

from src.funnelhub.models import BulkAction


class BulkActionRequest(BaseModel):
    action: BulkAction
    ids: list[str] = Field(min_length=1, max_length=500)


class BulkActionResult(BaseModel):
    action: BulkAction
    requested: int
    affected: int
