"""GeoPoint value object — immutable (lat, lon) pair."""

from dataclasses import dataclass


@dataclass(frozen=True)
class GeoPoint:
    latitude: float
    longitude: float

    def as_query(self) -> str:
        """Format as the "lat,lng" pair understood by map URLs."""
        return f"{self.latitude},{self.longitude}"

    @classmethod
    def from_optional(cls, latitude: float | None, longitude: float | None) -> "GeoPoint | None":
        """Build a point only when both coordinates are known."""
        if latitude is None or longitude is None:
            return None
        return cls(latitude=latitude, longitude=longitude)
