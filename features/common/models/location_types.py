from pydantic import BaseModel, ConfigDict, Field

def make_location_id(latitude: float, longitude: float) -> str:
    """Build the "<lat>,<lon>" identity used for geocoded locations."""
    return f"{latitude},{longitude}"

class Location(BaseModel):
    """A searchable place.

    Identity is the ``id`` alone: two locations with the same id are the same
    place even if one carries a stale display name.
    """
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable identity, \"<lat>,<lon>\" for geocoded places")
    name: str = Field(..., description="Display name")
    latitude: float = Field(..., description="Latitude in decimal degrees")
    longitude: float = Field(..., description="Longitude in decimal degrees")

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Location):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

def location_key(location: Location) -> str:
    """Key function for collections of locations."""
    return location.id
