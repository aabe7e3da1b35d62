# complexobs/services/complex_obs_service.py
from __future__ import annotations

import logging
from typing import Dict, Iterable, Optional

from complexobs.core.config import ComplexObsConfig
from complexobs.core.errors import ComplexObsError
from complexobs.core.models import Obs
from complexobs.handlers.base import ComplexObsHandler
from complexobs.handlers.image import ImageHandler

log = logging.getLogger(__name__)


class ComplexObsService:
    """
    Thin service wrapper routing complex obs to handlers by handler type.
    Holds one config shared by every registered handler.
    """

    def __init__(
        self,
        config: Optional[ComplexObsConfig] = None,
        handlers: Optional[Iterable[ComplexObsHandler]] = None,
    ):
        self.config = config or ComplexObsConfig.from_env()
        self._handlers: Dict[str, ComplexObsHandler] = {}
        if handlers is None:
            handlers = [ImageHandler(self.config)]
        for h in handlers:
            self.register_handler(h)

    def register_handler(self, handler: ComplexObsHandler) -> None:
        key = handler.get_handler_type()
        if key in self._handlers:
            log.debug("Replacing complex obs handler %s", key)
        self._handlers[key] = handler

    def get_handler(self, handler_type: str) -> ComplexObsHandler:
        try:
            return self._handlers[handler_type]
        except KeyError:
            raise ComplexObsError(
                f"No complex obs handler registered for {handler_type!r}"
            ) from None

    def get_handler_types(self) -> Iterable[str]:
        return sorted(self._handlers)

    def save_complex_obs(
        self, obs: Obs, handler_type: str = ImageHandler.HANDLER_TYPE
    ) -> Obs:
        return self.get_handler(handler_type).save_obs(obs)

    def get_complex_obs(
        self,
        obs: Obs,
        view: Optional[str] = None,
        handler_type: str = ImageHandler.HANDLER_TYPE,
    ) -> Obs:
        return self.get_handler(handler_type).get_obs(obs, view)

    def purge_complex_obs(
        self, obs: Obs, handler_type: str = ImageHandler.HANDLER_TYPE
    ) -> bool:
        """
        Delete the stored file and clear the pointer on obs.
        Returns True if a file was deleted.
        """
        removed = self.get_handler(handler_type).purge_complex_data(obs)
        if removed:
            obs.value_complex = None
        return removed
