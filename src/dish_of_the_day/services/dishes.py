"""Services for managing the dish collection."""

import asyncio
import math
import logging
from dataclasses import dataclass, field
from typing import Protocol

from dish_of_the_day.domain.dishes import DishInput, DishRecord, DishView, RatingResult
from dish_of_the_day.domain.errors import ConflictError, NotFoundError, ValidationError
from dish_of_the_day.services.ratings import average, to_view

logger = logging.getLogger(__name__)


class DishStore(Protocol):
    """Persistence interface for the whole dish collection."""

    def read_collection(self) -> list[DishRecord]:
        """Return every stored dish, creating an empty collection if absent."""

    def write_collection(self, records: list[DishRecord]) -> None:
        """Replace the stored collection with records."""


class ImageStore(Protocol):
    """Storage interface for processed dish images."""

    async def store(self, raw: bytes) -> str:
        """Process and persist an image, returning its reference."""

    async def remove(self, image_ref: str) -> None:
        """Remove a stored image; a missing image is not an error."""


@dataclass
class DishService:
    """Application service owning dish records and their images."""

    store: DishStore
    images: ImageStore
    _write_lock: asyncio.Lock = field(
        default_factory=asyncio.Lock, init=False, repr=False
    )

    def list_records(self) -> list[DishRecord]:
        """Return the stored dishes in collection order."""
        return self.store.read_collection()

    def list_all(self, requesting_user_id: str | None = None) -> list[DishView]:
        """Return views of all dishes for the requesting user."""
        return [
            to_view(record, requesting_user_id)
            for record in self.store.read_collection()
        ]

    async def add(self, dish: DishInput) -> DishRecord:
        """Store the image and append a new dish."""
        name = _validate(dish, require_image=True)
        async with self._write_lock:
            records = self.store.read_collection()
            if _find(records, name) is not None:
                raise ConflictError(f"Dish already exists: {name}")

            image_ref = await self.images.store(dish.image_bytes or b"")
            record = DishRecord(
                name=name,
                image_ref=image_ref,
                description=list(dish.description),
            )
            records.append(record)
            await self._write_or_discard(records, image_ref)

        logger.info("Dish added", extra={"dish": name, "image_ref": image_ref})
        return record

    async def delete(self, name: str) -> None:
        """Remove a dish and its image."""
        async with self._write_lock:
            records = self.store.read_collection()
            record = _find(records, name.strip())
            if record is None:
                raise NotFoundError(f"Dish not found: {name}")

            records.remove(record)
            self.store.write_collection(records)
            await self.images.remove(record.image_ref)

        logger.info("Dish deleted", extra={"dish": record.name})

    async def edit(self, name: str, updated: DishInput) -> DishRecord:
        """Replace a dish's name and description, and its image if given."""
        new_name = _validate(updated, require_image=False)
        async with self._write_lock:
            records = self.store.read_collection()
            record = _find(records, name.strip())
            if record is None:
                raise NotFoundError(f"Dish not found: {name}")
            if new_name != record.name and _find(records, new_name) is not None:
                raise ConflictError(f"Dish already exists: {new_name}")

            old_image_ref = record.image_ref
            new_image_ref = None
            if updated.image_bytes:
                new_image_ref = await self.images.store(updated.image_bytes)
                record.image_ref = new_image_ref
            record.name = new_name
            record.description = list(updated.description)

            if new_image_ref is None:
                self.store.write_collection(records)
            else:
                await self._write_or_discard(records, new_image_ref)
                await self.images.remove(old_image_ref)

        logger.info(
            "Dish edited",
            extra={
                "dish": name,
                "new_name": new_name,
                "image_replaced": new_image_ref is not None,
            },
        )
        return record

    async def rate(self, name: str, user_id: str, rating: float) -> RatingResult:
        """Record a user's rating, replacing any earlier one."""
        if not math.isfinite(rating):
            raise ValidationError("Rating must be a finite number")
        async with self._write_lock:
            records = self.store.read_collection()
            record = _find(records, name.strip())
            if record is None:
                raise NotFoundError(f"Dish not found: {name}")

            record.ratings[user_id] = rating
            self.store.write_collection(records)

        new_average = average(record.ratings.values())
        logger.info(
            "Dish rated",
            extra={"dish": record.name, "user_id": user_id, "average": new_average},
        )
        return RatingResult(new_average=new_average)

    async def _write_or_discard(
        self, records: list[DishRecord], image_ref: str
    ) -> None:
        """Persist records, removing a freshly stored image if the write fails."""
        try:
            self.store.write_collection(records)
        except Exception:
            logger.exception(
                "Failed to persist dishes, discarding image",
                extra={"image_ref": image_ref},
            )
            await self.images.remove(image_ref)
            raise


def _validate(dish: DishInput, require_image: bool) -> str:
    """Validate dish input and return the trimmed name."""
    name = (dish.name or "").strip()
    if not name:
        raise ValidationError("Missing dish name")
    if require_image and not dish.image_bytes:
        raise ValidationError("Missing dish image")
    return name


def _find(records: list[DishRecord], name: str) -> DishRecord | None:
    """Return the record with exactly this name, if present."""
    return next((record for record in records if record.name == name), None)
