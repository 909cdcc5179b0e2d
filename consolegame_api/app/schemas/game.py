"""
Pydantic schemas for the games JSON API.

Game documents keep the column names of the sales dataset they were
imported from (``Name``, ``Platform``, ``NA_Sales`` ...).  The input
schema exposes them as aliases so clients post the same keys they read
back.  Sales values are accepted as anything and coerced to numbers by
the service.
"""

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


class GameInput(BaseModel):
    """Schema for creating or updating a game."""

    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = Field(None, alias="Name")
    platform: Optional[str] = Field(None, alias="Platform")
    year: Optional[Union[str, int]] = Field(None, alias="Year")
    genre: Optional[str] = Field(None, alias="Genre")
    publisher: Optional[str] = Field(None, alias="Publisher")
    na_sales: Any = Field(None, alias="NA_Sales")
    eu_sales: Any = Field(None, alias="EU_Sales")
    jp_sales: Any = Field(None, alias="JP_Sales")
    other_sales: Any = Field(None, alias="Other_Sales")
    global_sales: Any = Field(None, alias="Global_Sales")


class GameListResponse(BaseModel):
    success: bool = True
    count: int
    data: List[Dict[str, Any]]


class GameResponse(BaseModel):
    success: bool = True
    data: Dict[str, Any]


class GameCreatedResponse(BaseModel):
    success: bool = True
    id: str


class GameWriteResponse(BaseModel):
    """Result of an update or delete; only the relevant count is set."""

    success: bool = True
    modified: Optional[int] = None
    deleted: Optional[int] = None


class ErrorResponse(BaseModel):
    success: bool = False
    error: str
