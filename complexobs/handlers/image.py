# complexobs/handlers/image.py
from __future__ import annotations

import io
import logging
from typing import Any, FrozenSet, Optional

from complexobs.core.config import ComplexObsConfig
from complexobs.core.errors import (
    ComplexDataConversionError,
    ComplexObsWriteError,
    MissingComplexDataError,
)
from complexobs.core.models import (
    RAW_VIEW,
    TITLE_VIEW,
    URI_VIEW,
    ComplexData,
    Obs,
    format_value_complex,
)
from complexobs.handlers.base import ComplexObsHandler
from complexobs.storage.manager import discard_file
from complexobs.vision.codec import ImageCodec, ImageDecodeError, PillowImageCodec

log = logging.getLogger(__name__)


class ImageHandler(ComplexObsHandler):
    """
    Stores image payloads as files in the complex obs directory.

    The output format comes from the extension of ComplexData.title
    ("photo.png" -> png). Files are named after the obs id, with a _N suffix
    when the name is taken. After save, obs.value_complex reads
    "<ext> image |<filename>" and the payload is detached.
    """

    HANDLER_TYPE = "ImageHandler"
    SUPPORTED_VIEWS = (RAW_VIEW, TITLE_VIEW, URI_VIEW)

    def __init__(
        self,
        config: Optional[ComplexObsConfig] = None,
        codec: Optional[ImageCodec] = None,
    ):
        super().__init__(config)
        self.codec = codec or PillowImageCodec()
        # cached once; extensions are not checked against it on save
        self.extensions: FrozenSet[str] = self.codec.supported_write_formats()

    def get_obs(self, obs: Obs, view: Optional[str] = None) -> Obs:
        """
        Load the stored image into obs.complex_data. The view is accepted but
        every view gets the full image. A missing or unreadable file is logged
        and yields ComplexData with data=None.
        """
        path = self.get_complex_data_file(obs)
        img = None
        try:
            img = self.codec.decode(path)
        except (ImageDecodeError, OSError):
            log.exception("Trying to read file: %s", path.resolve())

        obs.complex_data = ComplexData(title=path.name, data=img)
        return obs

    def save_obs(self, obs: Obs) -> Obs:
        img = self._image_from_complex_data(obs)
        if img is None:
            raise MissingComplexDataError(
                f"Cannot save complex obs where obs_id={obs.obs_id} "
                "because its complex data is empty."
            )

        extension = self.get_extension(obs.complex_data.title)
        # TODO: reject extensions missing from self.extensions before reserving a file
        try:
            outfile, fh = self.get_output_file_to_write(obs, extension)
        except OSError as exc:
            raise ComplexObsWriteError(
                "Trying to write complex obs to the file system."
            ) from exc
        try:
            with fh:
                self.codec.encode(img, extension, fh)
        except (OSError, ValueError, KeyError) as exc:
            discard_file(outfile)
            raise ComplexObsWriteError(
                f"Trying to write complex obs to the file system: {outfile}"
            ) from exc

        obs.value_complex = format_value_complex(extension, outfile.name)
        obs.complex_data = None
        log.info("Saved complex obs %s to %s", obs.obs_id, outfile)
        return obs

    def _image_from_complex_data(self, obs: Obs) -> Any:
        if obs.complex_data is None:
            return None
        data = obs.complex_data.data
        if data is None:
            return None
        if self.codec.is_image(data):
            return data
        if isinstance(data, (bytes, bytearray)):
            data = io.BytesIO(data)
        if hasattr(data, "read"):
            try:
                return self.codec.decode(data)
            except ImageDecodeError as exc:
                raise ComplexDataConversionError(
                    "Unable to convert complex data to a valid input stream "
                    "and then read it into an image"
                ) from exc
        log.debug("Unsupported complex data type %s", type(data).__name__)
        return None

    def validate(self, handler_config: Optional[str], obs: Obs) -> bool:
        """Not implemented: every obs is accepted."""
        return True

    def get_value(self, obs: Obs) -> Any:
        """Not implemented: the persisted value is only available via get_obs."""
        return None
