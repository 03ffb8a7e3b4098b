"""Pydantic models for dish API payloads."""

import base64
import binascii
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from dish_of_the_day.domain.dishes import DishInput, DishView
from dish_of_the_day.domain.errors import ValidationError


class IncomingDish(BaseModel):
    """Dish payload as sent by clients."""

    name: str | None = None
    image: str | None = None
    description: list[Any] = Field(default_factory=list)

    def to_input(self) -> DishInput:
        """Convert the payload into core input, decoding the image."""
        return DishInput(
            name=self.name or "",
            image_bytes=_decode_image(self.image),
            description=self.description,
        )


class DishEditRequest(BaseModel):
    """Request to replace an existing dish."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    updated_dish: IncomingDish = Field(alias="updatedDish")


class DishDeleteRequest(BaseModel):
    """Request to delete a dish."""

    name: str


class DishRatingRequest(BaseModel):
    """Request to rate a dish."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    user_id: str = Field(alias="userId", min_length=1)
    rating: float = Field(allow_inf_nan=False)


class SkipRequest(BaseModel):
    """Request to skip the current dish of the day."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str | None = Field(default=None, alias="userId")


class DishTransport(BaseModel):
    """Dish as returned to clients."""

    model_config = ConfigDict(populate_by_name=True)

    name: str
    image: str
    description: list[Any]
    rating: float
    your_rating: float | None = Field(default=None, alias="yourRating")

    @classmethod
    def from_view(cls, view: DishView) -> "DishTransport":
        """Build a transport model from a dish view."""
        return cls(
            name=view.name,
            image=view.image_ref,
            description=view.description,
            rating=view.average_rating,
            your_rating=view.your_rating,
        )


def _decode_image(raw: str | None) -> bytes | None:
    """Decode a base64 string or data URL into bytes."""
    if not raw:
        return None
    _, _, encoded = raw.rpartition("base64,")
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError("Dish image is not valid base64") from exc
