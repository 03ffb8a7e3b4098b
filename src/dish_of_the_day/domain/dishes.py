"""Domain models for dishes."""

from dataclasses import dataclass, field

EMPTY_DISH_NAME = "No dish yet"


@dataclass
class DishRecord:
    """Represents a dish as it is stored in the collection."""

    name: str
    image_ref: str
    description: list[object] = field(default_factory=list)
    ratings: dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class DishView:
    """Client-facing projection of a dish."""

    name: str
    image_ref: str
    description: list[object]
    average_rating: float
    your_rating: float | None = None


@dataclass(frozen=True)
class DishInput:
    """Validated input for creating or replacing a dish."""

    name: str
    image_bytes: bytes | None = None
    description: list[object] = field(default_factory=list)


@dataclass(frozen=True)
class RatingResult:
    """Outcome of rating a dish."""

    new_average: float


def empty_dish_view() -> DishView:
    """Return the placeholder view used while no dishes exist."""
    return DishView(
        name=EMPTY_DISH_NAME,
        image_ref="",
        description=[],
        average_rating=0,
    )
