# complexobs/handlers/base.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, BinaryIO, Optional, Sequence, Tuple

from complexobs.core.config import ComplexObsConfig
from complexobs.core.errors import ComplexObsError
from complexobs.core.models import Obs, parse_value_complex
from complexobs.storage.manager import (
    discard_file,
    get_complex_obs_dir,
    reserve_output_file,
)

log = logging.getLogger(__name__)

DEFAULT_EXTENSION = "raw"


class ComplexObsHandler:
    """
    Base class for handlers that move complex obs payloads between memory
    and the configured complex obs directory.

    Subclasses implement get_obs / save_obs and set HANDLER_TYPE.
    """

    HANDLER_TYPE = "ComplexObsHandler"
    SUPPORTED_VIEWS: Sequence[str] = ()

    def __init__(self, config: Optional[ComplexObsConfig] = None):
        self.config = config or ComplexObsConfig.from_env()

    # -------------------------
    # Operations
    # -------------------------
    def get_obs(self, obs: Obs, view: Optional[str] = None) -> Obs:
        raise NotImplementedError

    def save_obs(self, obs: Obs) -> Obs:
        raise NotImplementedError

    def get_handler_type(self) -> str:
        return self.HANDLER_TYPE

    def get_supported_views(self) -> Sequence[str]:
        return tuple(self.SUPPORTED_VIEWS)

    def supports_view(self, view: str) -> bool:
        return view in self.get_supported_views()

    def purge_complex_data(self, obs: Obs) -> bool:
        """
        Delete the stored file referenced by obs.value_complex.
        Returns True if a file was deleted, False otherwise (nothing stored,
        file already gone, or deletion failed).
        """
        if not obs.value_complex:
            return False
        path = None
        try:
            path = self.get_complex_data_file(obs)
            removed = discard_file(path)
        except OSError:
            log.exception(
                "Could not delete complex obs file %s for obs %s", path, obs.obs_id
            )
            return False
        if removed:
            log.info("Deleted complex obs file %s for obs %s", path, obs.obs_id)
        return removed

    # -------------------------
    # Shared helpers
    # -------------------------
    def get_extension(self, title: Optional[str]) -> str:
        """
        "photo.PNG" -> "png"; "png" -> "png"; "" or None -> "raw".
        """
        parts = (title or "").split(".")
        extension = parts[-1] if len(parts) >= 2 else parts[0]
        extension = extension.strip().lower()
        return extension or DEFAULT_EXTENSION

    def get_complex_data_file(self, obs: Obs) -> Path:
        """
        Resolve the file referenced by obs.value_complex inside the
        complex obs directory.
        """
        if not obs.value_complex:
            raise ComplexObsError(
                f"Obs {obs.obs_id} has no value_complex pointing to stored data"
            )
        _title, filename = parse_value_complex(obs.value_complex)
        return get_complex_obs_dir(self.config) / filename.strip()

    def get_output_base_name(self, obs: Obs) -> str:
        if obs.obs_id is not None:
            return str(obs.obs_id)
        return obs.uuid

    def get_output_file_to_write(self, obs: Obs, extension: str) -> Tuple[Path, BinaryIO]:
        """
        Reserve a fresh file for obs in the complex obs directory.
        Returns (path, open binary handle).
        """
        return reserve_output_file(
            get_complex_obs_dir(self.config), self.get_output_base_name(obs), extension
        )

    # -------------------------
    # Extension points
    # -------------------------
    def validate(self, handler_config: Optional[str], obs: Obs) -> bool:
        return True

    def get_value(self, obs: Obs) -> Any:
        return None
