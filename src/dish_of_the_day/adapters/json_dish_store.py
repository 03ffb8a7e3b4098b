"""JSON-file implementation of the dish store."""

import json
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path

from dish_of_the_day.domain.dishes import DishRecord
from dish_of_the_day.services.dishes import DishStore


@dataclass
class JsonFileDishStore(DishStore):
    """Stores the whole dish collection in a single JSON file."""

    path: Path

    def read_collection(self) -> list[DishRecord]:
        """Return every stored dish, creating an empty file if absent."""
        if not self.path.exists():
            self.write_collection([])
        with self.path.open(encoding="utf-8") as handle:
            rows = json.load(handle)
        return [_parse_dish(row) for row in rows]

    def write_collection(self, records: list[DishRecord]) -> None:
        """Atomically replace the file contents with records."""
        self.path.parent.mkdir(parents=True, exist_ok=True)
        payload = json.dumps(
            [_serialize_dish(record) for record in records],
            indent="\t",
            ensure_ascii=False,
            allow_nan=False,
        )
        fd, tmp_name = tempfile.mkstemp(
            dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(payload)
            os.replace(tmp_name, self.path)
        except Exception:
            Path(tmp_name).unlink(missing_ok=True)
            raise


def _serialize_dish(record: DishRecord) -> dict[str, object]:
    """Convert a dish record into its stored JSON shape."""
    return {
        "name": record.name,
        "imageFilePath": record.image_ref,
        "description": record.description,
        "ratings": [
            {"userId": user_id, "rating": rating}
            for user_id, rating in record.ratings.items()
        ],
    }


def _parse_dish(row: dict[str, object]) -> DishRecord:
    """Parse a stored JSON object into a dish record."""
    ratings: dict[str, float] = {}
    for entry in row.get("ratings") or []:
        ratings[str(entry["userId"])] = entry["rating"]
    return DishRecord(
        name=str(row["name"]),
        image_ref=_image_file_name(str(row.get("imageFilePath", ""))),
        description=list(row.get("description") or []),
        ratings=ratings,
    )


def _image_file_name(stored: str) -> str:
    """Return the bare image file name; older records kept the directory prefix."""
    return stored.rpartition("/")[2]
