"""FastAPI application factory."""

import logging

from fastapi import FastAPI, Query, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import FileResponse, JSONResponse, Response

from dish_of_the_day.adapters.pillow_image_store import detect_mime_type
from dish_of_the_day.api.dish_models import (
    DishDeleteRequest,
    DishEditRequest,
    DishRatingRequest,
    DishTransport,
    IncomingDish,
    SkipRequest,
)
from dish_of_the_day.app_logging import configure_logging
from dish_of_the_day.containers import AppContainer
from dish_of_the_day.domain.errors import DishError


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    app = FastAPI()
    app.state.container = container

    @app.exception_handler(DishError)
    async def handle_dish_error(request: Request, exc: DishError) -> JSONResponse:
        logger.warning(
            "Dish request failed",
            extra={"path": request.url.path, "error": exc.message},
        )
        return JSONResponse(
            status_code=exc.http_status, content={"error": exc.message}
        )

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "Invalid request payload",
            extra={"path": request.url.path, "errors": exc.errors()},
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": _format_validation_errors(exc)},
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.get("/get-dishes")
    async def get_dishes(
        request: Request,
        user_id: str | None = Query(default=None, alias="userId"),
    ) -> list[dict[str, object]]:
        """Return all dishes with ratings for the requesting user."""
        state_container: AppContainer = request.app.state.container
        views = state_container.dish_service.list_all(user_id)
        return [_dump(DishTransport.from_view(view)) for view in views]

    @app.post("/add-dish")
    async def add_dish(dish: IncomingDish, request: Request) -> dict[str, str]:
        """Add a dish with its image."""
        state_container: AppContainer = request.app.state.container
        record = await state_container.dish_service.add(dish.to_input())
        return {"name": record.name}

    @app.post("/edit-dish")
    async def edit_dish(edit: DishEditRequest, request: Request) -> dict[str, str]:
        """Replace a dish's name, description and optionally its image."""
        state_container: AppContainer = request.app.state.container
        await state_container.dish_service.edit(
            edit.name, edit.updated_dish.to_input()
        )
        return {"status": "ok"}

    @app.post("/delete-dish")
    async def delete_dish(
        delete: DishDeleteRequest, request: Request
    ) -> dict[str, str]:
        """Delete a dish and its image."""
        state_container: AppContainer = request.app.state.container
        await state_container.dish_service.delete(delete.name)
        return {"status": "ok"}

    @app.post("/rate-dish")
    async def rate_dish(
        rating: DishRatingRequest, request: Request
    ) -> dict[str, float]:
        """Rate a dish on behalf of a user."""
        state_container: AppContainer = request.app.state.container
        result = await state_container.dish_service.rate(
            rating.name, rating.user_id, rating.rating
        )
        return {"newAverage": result.new_average}

    @app.get("/dish-of-the-day")
    async def dish_of_the_day(
        request: Request,
        user_id: str | None = Query(default=None, alias="userId"),
    ) -> dict[str, object]:
        """Return today's dish for the requesting user."""
        state_container: AppContainer = request.app.state.container
        view = state_container.daily_selector.get_today(user_id)
        return _dump(DishTransport.from_view(view))

    @app.post("/skip-dish-of-the-day")
    async def skip_dish_of_the_day(
        request: Request, skip: SkipRequest | None = None
    ) -> dict[str, object]:
        """Skip to another dish of the day and return it."""
        state_container: AppContainer = request.app.state.container
        state_container.daily_selector.skip()
        view = state_container.daily_selector.get_today(skip.user_id if skip else None)
        return _dump(DishTransport.from_view(view))

    @app.get("/get-image")
    async def get_image(
        request: Request, image_ref: str = Query(default="", alias="file")
    ) -> Response:
        """Serve a stored dish image."""
        state_container: AppContainer = request.app.state.container
        path = state_container.image_store.resolve(image_ref)
        if path is None:
            logger.info("Image not found", extra={"image_ref": image_ref})
            return Response(status_code=status.HTTP_404_NOT_FOUND)
        return FileResponse(path, media_type=detect_mime_type(path))

    return app


def _dump(transport: DishTransport) -> dict[str, object]:
    return transport.model_dump(by_alias=True)


def _format_validation_errors(exc: RequestValidationError) -> str:
    """Join pydantic error messages into one readable string."""
    parts = []
    for error in exc.errors():
        location = ".".join(
            str(part) for part in error.get("loc", ()) if part != "body"
        )
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"

