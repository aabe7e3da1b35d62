# complexobs/vision/codec.py
from __future__ import annotations

import io
import logging
from pathlib import Path
from typing import Any, BinaryIO, FrozenSet, Optional, Union

from PIL import Image, UnidentifiedImageError

log = logging.getLogger(__name__)


class ImageDecodeError(Exception):
    pass


class ImageCodec:
    """
    Encode / decode capability used by the image handler.
    """

    def decode(self, stream: Union[BinaryIO, Path, str]) -> Any:
        """
        Decode a byte stream (or a file path) into an in-memory image.
        Raises ImageDecodeError if the data is not a readable image.
        """
        raise NotImplementedError

    def encode(self, image: Any, format_name: str, destination: Union[BinaryIO, Path]) -> None:
        """
        Write image to destination in the named format (e.g. "png").
        Raises OSError or ValueError on failure.
        """
        raise NotImplementedError

    def supported_write_formats(self) -> FrozenSet[str]:
        """Lower-case format names / extensions this codec can write."""
        raise NotImplementedError

    def is_image(self, data: Any) -> bool:
        raise NotImplementedError


class PillowImageCodec(ImageCodec):
    """
    Codec backed by Pillow. Decoded images are fully loaded, detached
    PIL.Image.Image instances.
    """

    def decode(self, stream: Union[BinaryIO, Path, str]) -> Image.Image:
        if isinstance(stream, (bytes, bytearray)):
            stream = io.BytesIO(stream)
        try:
            with Image.open(stream) as im:
                # copy() forces the lazy decoder and detaches from the source
                return im.copy()
        except UnidentifiedImageError as exc:
            raise ImageDecodeError(f"not a recognised image: {exc}") from exc
        except (
            OSError,
            ValueError,
            SyntaxError,
            Image.DecompressionBombError,
        ) as exc:
            raise ImageDecodeError(f"failed to decode image: {exc}") from exc

    def encode(
        self, image: Image.Image, format_name: str, destination: Union[BinaryIO, Path]
    ) -> None:
        pil_format = self.pillow_format(format_name)
        if pil_format is None:
            raise ValueError(f"no image writer for format {format_name!r}")
        log.debug("encoding %sx%s image as %s", image.width, image.height, pil_format)
        image.save(destination, format=pil_format)

    def pillow_format(self, format_name: str) -> Optional[str]:
        """
        Map a format name or extension ("png", "jpg", "JPEG") to a Pillow
        format id that has a registered writer, or None.
        """
        Image.init()
        name = format_name.strip().lower().lstrip(".")
        candidates = [
            Image.registered_extensions().get("." + name),
            name.upper(),
        ]
        for fmt in candidates:
            if fmt and fmt in Image.SAVE:
                return fmt
        return None

    def supported_write_formats(self) -> FrozenSet[str]:
        Image.init()
        names = {fmt.lower() for fmt in Image.SAVE}
        names.update(
            ext.lstrip(".").lower()
            for ext, fmt in Image.registered_extensions().items()
            if fmt in Image.SAVE
        )
        return frozenset(names)

    def is_image(self, data: Any) -> bool:
        return isinstance(data, Image.Image)
