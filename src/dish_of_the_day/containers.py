"""Dependency container wiring for the application."""

from dataclasses import dataclass

from dish_of_the_day.adapters.clock import SystemClock
from dish_of_the_day.adapters.json_dish_store import JsonFileDishStore
from dish_of_the_day.adapters.pillow_image_store import PillowImageStore
from dish_of_the_day.config import Settings
from dish_of_the_day.services.dishes import DishService
from dish_of_the_day.services.selection import DailySelector


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    image_store: PillowImageStore
    dish_service: DishService
    daily_selector: DailySelector


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    image_store = PillowImageStore(
        directory=resolved_settings.image_dir,
        max_dimension=resolved_settings.image_max_dimension,
        quality=resolved_settings.image_quality,
    )
    dish_service = DishService(
        store=JsonFileDishStore(resolved_settings.database_file),
        images=image_store,
    )
    daily_selector = DailySelector(
        dishes=dish_service,
        clock=SystemClock(resolved_settings.timezone),
    )
    return AppContainer(
        settings=resolved_settings,
        image_store=image_store,
        dish_service=dish_service,
        daily_selector=daily_selector,
    )
