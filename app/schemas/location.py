"""
Location Pydantic Schemas

Schemas for restaurant locations.

Schemas:
- Coordinates: A resolved latitude/longitude pair
- LocationCreate: Create a new location
- Location: Full location data (API responses, review snapshots, wire form)
- LocationListResponse: Paginated list of locations
"""

from pydantic import BaseModel, ConfigDict, Field


class Coordinates(BaseModel):
    """A resolved geographic point."""

    latitude: float = Field(..., ge=-90, le=90, description="Latitude in degrees")
    longitude: float = Field(..., ge=-180, le=180, description="Longitude in degrees")

    model_config = ConfigDict(frozen=True)


class LocationCreate(BaseModel):
    """
    Schema for creating a location.

    Coordinates may be omitted when the geocoder is enabled; the address
    is then resolved server-side.

    Example request body:
    {
        "restaurant_name": "Wing Shack",
        "address": "123 Main St",
        "latitude": 40.0,
        "longitude": -75.0
    }
    """

    restaurant_name: str | None = Field(default=None, max_length=200)
    address: str | None = Field(default=None, max_length=300)
    latitude: float | None = Field(default=None)
    longitude: float | None = Field(default=None)


class Location(BaseModel):
    """Restaurant location as stored and as embedded in reviews."""

    id: int = Field(..., description="Unique location identifier")
    restaurant_name: str = Field(..., min_length=1, description="Restaurant name")
    address: str = Field(..., description="Postal address")
    latitude: float = Field(..., ge=-90, le=90)
    longitude: float = Field(..., ge=-180, le=180)

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 1,
                "restaurant_name": "Wing Shack",
                "address": "123 Main St",
                "latitude": 40.0,
                "longitude": -75.0,
            }
        },
    )

    @property
    def coordinates(self) -> Coordinates:
        return Coordinates(latitude=self.latitude, longitude=self.longitude)


class LocationListResponse(BaseModel):
    """Paginated list of locations."""

    items: list[Location]
    total: int = Field(..., ge=0)
    page: int = Field(..., ge=1)
    per_page: int = Field(..., ge=1, le=100)
    pages: int = Field(..., ge=0)
