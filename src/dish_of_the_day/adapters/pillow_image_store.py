"""Filesystem image store that normalizes uploads with Pillow."""

import asyncio
import io
import logging
from dataclasses import dataclass
from pathlib import Path
from uuid import uuid4

import aiofiles
import aiofiles.os
from PIL import Image, UnidentifiedImageError

from dish_of_the_day.domain.errors import ValidationError
from dish_of_the_day.services.dishes import ImageStore

logger = logging.getLogger(__name__)

STORED_EXTENSION = ".jpg"
FALLBACK_MIME_TYPE = "application/octet-stream"


@dataclass
class PillowImageStore(ImageStore):
    """Shrinks images, re-encodes them as JPEG and writes them to a directory."""

    directory: Path
    max_dimension: int = 1024
    quality: int = 85

    async def store(self, raw: bytes) -> str:
        """Process raw image bytes and return the stored file name."""
        processed = await asyncio.to_thread(self._process, raw)
        image_ref = f"{uuid4().hex}{STORED_EXTENSION}"
        await aiofiles.os.makedirs(self.directory, exist_ok=True)
        async with aiofiles.open(self.directory / image_ref, "wb") as handle:
            await handle.write(processed)
        logger.info(
            "Image stored",
            extra={"image_ref": image_ref, "size": len(processed)},
        )
        return image_ref

    async def remove(self, image_ref: str) -> None:
        """Delete a stored image, ignoring images that are already gone."""
        path = self.resolve(image_ref)
        if path is None:
            return
        try:
            await aiofiles.os.remove(path)
        except FileNotFoundError:
            logger.debug("Image already removed", extra={"image_ref": image_ref})

    def resolve(self, image_ref: str) -> Path | None:
        """Return the path for a stored image reference, if it is safe and exists."""
        if not image_ref or Path(image_ref).name != image_ref:
            return None
        path = self.directory / image_ref
        if not path.is_file():
            return None
        return path

    def _process(self, raw: bytes) -> bytes:
        """Decode, shrink and re-encode an image as JPEG."""
        try:
            img: Image.Image = Image.open(io.BytesIO(raw))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValidationError("Unsupported or corrupted dish image") from exc

        rgb_img: Image.Image
        if img.mode in ("RGBA", "LA", "P"):
            if img.mode == "P":
                img = img.convert("RGBA")
            background = Image.new("RGB", img.size, (255, 255, 255))
            background.paste(img, mask=img.split()[-1])
            rgb_img = background
        elif img.mode != "RGB":
            rgb_img = img.convert("RGB")
        else:
            rgb_img = img

        rgb_img.thumbnail((self.max_dimension, self.max_dimension))
        output = io.BytesIO()
        rgb_img.save(output, format="JPEG", quality=self.quality, optimize=True)
        return output.getvalue()


def detect_mime_type(path: Path) -> str:
    """Return the MIME type of a stored image file."""
    try:
        with Image.open(path) as img:
            return img.get_format_mimetype() or FALLBACK_MIME_TYPE
    except (UnidentifiedImageError, OSError):
        logger.warning("Unrecognized image file", extra={"path": str(path)})
        return FALLBACK_MIME_TYPE
