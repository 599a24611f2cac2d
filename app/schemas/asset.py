"""Asset API schemas."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

# SQLite INTEGER is signed 64-bit; larger values overflow the driver.
SQL_INT_MAX = 2**63 - 1


class AssetCreate(BaseModel):
    """Fields accepted when registering an asset."""

    category: str = Field(min_length=1, max_length=128)
    brand: str = Field(min_length=1, max_length=128)
    serial: str = Field(min_length=1, max_length=128)
    quantity: int = Field(default=1, ge=0, le=SQL_INT_MAX)
    location: str = Field(min_length=1, max_length=255)
    notes: str = ""

    model_config = ConfigDict(str_strip_whitespace=True)


class AssetUpdate(AssetCreate):
    id: int = Field(ge=1, le=SQL_INT_MAX)


class AssetRead(BaseModel):
    id: int
    category: str
    brand: str
    serial: str
    quantity: int
    location: str
    notes: str
    condition_status: str
    status: str
    created_by: int | None
    created_by_name: str | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AssetPage(BaseModel):
    assets: list[AssetRead]
    total: int
    page: int
    limit: int
    totalPages: int


class CategoryTotal(BaseModel):
    category: str
    total: int


class LocationTotal(BaseModel):
    location: str
    total: int


class StatsResponse(BaseModel):
    total_assets: int
    total_categories: int
    total_locations: int
    by_category: list[CategoryTotal]
    by_location: list[LocationTotal]


class StatusChangeRequest(BaseModel):
    """Payload for a condition-status change. Emptiness is checked by the service."""

    asset_id: int = Field(ge=1, le=SQL_INT_MAX)
    new_status: str
    reason: str


class StatusHistoryRead(BaseModel):
    id: int
    asset_id: int
    old_status: str | None
    new_status: str
    changed_by: int | None
    changed_by_name: str | None = None
    change_reason: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)
