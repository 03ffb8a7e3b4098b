"""Rating aggregation and transport mapping."""

from collections.abc import Iterable

from dish_of_the_day.domain.dishes import DishRecord, DishView


def average(values: Iterable[float]) -> float:
    """Return the arithmetic mean of values, or 0 when there are none."""
    items = list(values)
    if not items:
        return 0
    return sum(items) / len(items)


def to_view(record: DishRecord, requesting_user_id: str | None = None) -> DishView:
    """Map a stored dish to its client-facing view."""
    your_rating = None
    if requesting_user_id is not None:
        your_rating = record.ratings.get(requesting_user_id)
    return DishView(
        name=record.name,
        image_ref=record.image_ref,
        description=record.description,
        average_rating=average(record.ratings.values()),
        your_rating=your_rating,
    )
