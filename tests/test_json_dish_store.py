"""Tests for the JSON file dish store."""

import json
from pathlib import Path

import pytest

from dish_of_the_day.adapters.json_dish_store import JsonFileDishStore
from dish_of_the_day.domain.dishes import DishRecord


def test_read_creates_empty_collection(tmp_path: Path) -> None:
    path = tmp_path / "databases" / "dishes.json"
    store = JsonFileDishStore(path)

    assert store.read_collection() == []
    assert json.loads(path.read_text(encoding="utf-8")) == []


def test_write_uses_stored_field_names(tmp_path: Path) -> None:
    path = tmp_path / "dishes.json"
    store = JsonFileDishStore(path)

    store.write_collection(
        [
            DishRecord(
                name="Soup",
                image_ref="soup.jpg",
                description=[{"insert": "Hot\n"}],
                ratings={"alice": 4},
            )
        ]
    )

    assert json.loads(path.read_text(encoding="utf-8")) == [
        {
            "name": "Soup",
            "imageFilePath": "soup.jpg",
            "description": [{"insert": "Hot\n"}],
            "ratings": [{"userId": "alice", "rating": 4}],
        }
    ]


def test_description_and_rating_order_survive_reload(tmp_path: Path) -> None:
    store = JsonFileDishStore(tmp_path / "dishes.json")
    description = [
        {"insert": "Spicy", "attributes": {"bold": True}},
        {"insert": " lentils\n"},
        {"insert": {"image": "x"}},
    ]
    store.write_collection(
        [
            DishRecord(
                name="Dal",
                image_ref="dal.jpg",
                description=description,
                ratings={"zoe": 1, "adam": 5},
            )
        ]
    )

    loaded = store.read_collection()

    assert loaded[0].description == description
    assert list(loaded[0].ratings) == ["zoe", "adam"]


def test_read_tolerates_records_without_optional_fields(tmp_path: Path) -> None:
    path = tmp_path / "dishes.json"
    path.write_text(
        json.dumps([{"name": "Soup", "imageFilePath": "dish-images/abc"}]),
        encoding="utf-8",
    )

    loaded = JsonFileDishStore(path).read_collection()

    assert loaded == [
        DishRecord(name="Soup", image_ref="abc", description=[], ratings={})
    ]


def test_write_leaves_no_temporary_files(tmp_path: Path) -> None:
    store = JsonFileDishStore(tmp_path / "dishes.json")

    store.write_collection([DishRecord(name="Soup", image_ref="soup.jpg")])
    store.write_collection([])

    assert [entry.name for entry in tmp_path.iterdir()] == ["dishes.json"]


def test_read_strips_directory_from_image_reference(tmp_path: Path) -> None:
    path = tmp_path / "dishes.json"
    path.write_text(
        json.dumps(
            [{"name": "Soup", "imageFilePath": "dish-images/3f0c", "ratings": []}]
        ),
        encoding="utf-8",
    )

    loaded = JsonFileDishStore(path).read_collection()

    assert loaded[0].image_ref == "3f0c"


def test_write_refuses_non_finite_ratings(tmp_path: Path) -> None:
    path = tmp_path / "dishes.json"
    store = JsonFileDishStore(path)
    store.write_collection([DishRecord(name="Soup", image_ref="soup.jpg")])

    with pytest.raises(ValueError):
        store.write_collection(
            [
                DishRecord(
                    name="Soup", image_ref="soup.jpg", ratings={"a": float("inf")}
                )
            ]
        )

    assert json.loads(path.read_text(encoding="utf-8"))[0]["ratings"] == []
    assert [entry.name for entry in tmp_path.iterdir()] == ["dishes.json"]
