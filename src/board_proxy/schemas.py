####################################
# --- Request/response schemas --- #
####################################

from typing import Any, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr

# strict so that true/false or 1.5 are rejected instead of coerced to an ID
Identifier = Union[StrictInt, StrictStr]


def is_missing(value: Any) -> bool:
    """None, empty strings and whitespace-only strings count as not provided."""
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    return False


class CreateItemRequest(BaseModel):
    """Request body for `POST /create-item`."""
    board_id: Optional[Identifier] = Field(
        None,
        alias="boardId",
        description="Board that receives the new item.",
        json_schema_extra={"example": 1234567890},
    )
    item_name: Optional[str] = Field(
        None,
        alias="itemName",
        description="Name of the new item.",
        json_schema_extra={"example": "Task A"},
    )

    model_config = ConfigDict(populate_by_name=True)

    def missing_fields(self) -> List[str]:
        return [
            name
            for name, value in (("boardId", self.board_id), ("itemName", self.item_name))
            if is_missing(value)
        ]


class CreateSubitemRequest(BaseModel):
    """Request body for `POST /create-subitem`."""
    parent_item_id: Optional[Identifier] = Field(
        None,
        alias="parentItemId",
        description="Item the subitem is attached to.",
        json_schema_extra={"example": 9876543210},
    )
    item_name: Optional[str] = Field(
        None,
        alias="itemName",
        description="Name of the new subitem.",
        json_schema_extra={"example": "Subtask A.1"},
    )

    model_config = ConfigDict(populate_by_name=True)

    def missing_fields(self) -> List[str]:
        return [
            name
            for name, value in (("parentItemId", self.parent_item_id), ("itemName", self.item_name))
            if is_missing(value)
        ]


class ErrorResponse(BaseModel):
    """Body returned for requests rejected before reaching upstream."""
    error: str

    model_config = ConfigDict(
        json_schema_extra={
            "example": {"error": "Missing boardId or itemName in request body"}
        }
    )
