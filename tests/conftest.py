"""Shared test fixtures."""

import io
from dataclasses import dataclass, field, replace
from pathlib import Path

import pytest
from PIL import Image

from dish_of_the_day.adapters.json_dish_store import JsonFileDishStore
from dish_of_the_day.adapters.pillow_image_store import PillowImageStore
from dish_of_the_day.config import Settings
from dish_of_the_day.containers import AppContainer
from dish_of_the_day.domain.dishes import DishRecord
from dish_of_the_day.domain.errors import ValidationError
from dish_of_the_day.services.dishes import DishService, DishStore, ImageStore
from dish_of_the_day.services.selection import Clock, DailySelector


@dataclass
class InMemoryDishStore(DishStore):
    """In-memory dish store that hands out copies like a real file would."""

    records: list[DishRecord] = field(default_factory=list)
    writes: int = 0
    fail_writes: bool = False

    def read_collection(self) -> list[DishRecord]:
        return [_copy(record) for record in self.records]

    def write_collection(self, records: list[DishRecord]) -> None:
        if self.fail_writes:
            raise OSError("disk full")
        self.writes += 1
        self.records = [_copy(record) for record in records]


@dataclass
class FakeImageStore(ImageStore):
    """Image store that tracks references instead of writing files."""

    stored: set[str] = field(default_factory=set)
    removed: list[str] = field(default_factory=list)
    reject: bool = False
    _counter: int = 0

    async def store(self, raw: bytes) -> str:
        if self.reject:
            raise ValidationError("Unsupported or corrupted dish image")
        self._counter += 1
        image_ref = f"image-{self._counter}.jpg"
        self.stored.add(image_ref)
        return image_ref

    async def remove(self, image_ref: str) -> None:
        self.removed.append(image_ref)
        self.stored.discard(image_ref)


@dataclass
class FixedClock(Clock):
    """Clock that reports a settable day."""

    day: str = "2024-05-01"

    def today(self) -> str:
        return self.day


def _copy(record: DishRecord) -> DishRecord:
    return replace(
        record,
        description=list(record.description),
        ratings=dict(record.ratings),
    )


def make_png(size: tuple[int, int] = (64, 48), mode: str = "RGB") -> bytes:
    """Return PNG bytes for a solid-color test image."""
    color = (200, 80, 40, 255) if mode == "RGBA" else (200, 80, 40)
    output = io.BytesIO()
    Image.new(mode, size, color).save(output, format="PNG")
    return output.getvalue()


@pytest.fixture
def dish_store() -> InMemoryDishStore:
    return InMemoryDishStore()


@pytest.fixture
def image_store() -> FakeImageStore:
    return FakeImageStore()


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def dish_service(
    dish_store: InMemoryDishStore, image_store: FakeImageStore
) -> DishService:
    return DishService(store=dish_store, images=image_store)


@pytest.fixture
def selector(dish_service: DishService, clock: FixedClock) -> DailySelector:
    return DailySelector(dishes=dish_service, clock=clock)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        database_file=tmp_path / "databases" / "dishes.json",
        image_dir=tmp_path / "dish-images",
        image_max_dimension=32,
    )


@pytest.fixture
def container(settings: Settings, clock: FixedClock) -> AppContainer:
    image_store = PillowImageStore(
        directory=settings.image_dir,
        max_dimension=settings.image_max_dimension,
        quality=settings.image_quality,
    )
    dish_service = DishService(
        store=JsonFileDishStore(settings.database_file),
        images=image_store,
    )
    return AppContainer(
        settings=settings,
        image_store=image_store,
        dish_service=dish_service,
        daily_selector=DailySelector(dishes=dish_service, clock=clock),
    )
