# complexobs/core/config.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

# global property naming the directory complex obs files are written to
GP_COMPLEX_OBS_DIR = "obs.complex_obs_dir"
DEFAULT_COMPLEX_OBS_DIR = "complex_obs"

ENV_APPLICATION_DATA_DIR = "COMPLEXOBS_APPLICATION_DATA_DIR"
ENV_COMPLEX_OBS_DIR = "COMPLEXOBS_COMPLEX_OBS_DIR"


def _default_application_data_dir() -> Path:
    return Path.home() / ".complexobs_data"


@dataclass
class ComplexObsConfig:
    """
    Process-wide settings used by the handlers.

    - application_data_dir: root for relative directory settings
    - global_properties: name -> value, e.g. {"obs.complex_obs_dir": "complex_obs"}
    """

    application_data_dir: Path = field(default_factory=_default_application_data_dir)
    global_properties: Dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        self.application_data_dir = Path(self.application_data_dir)

    def get_global_property(self, name: str, default: Optional[str] = None) -> Optional[str]:
        value = self.global_properties.get(name)
        if value is None or not str(value).strip():
            return default
        return str(value).strip()

    def set_global_property(self, name: str, value: str) -> None:
        self.global_properties[name] = value

    @property
    def complex_obs_dir(self) -> Path:
        """
        Directory for complex obs files. Relative settings live under
        application_data_dir, absolute ones are used as given.
        """
        setting = self.get_global_property(GP_COMPLEX_OBS_DIR, DEFAULT_COMPLEX_OBS_DIR)
        p = Path(setting).expanduser()
        if p.is_absolute():
            return p
        return self.application_data_dir / p

    def to_dict(self) -> Dict[str, Any]:
        return {
            "application_data_dir": str(self.application_data_dir),
            "global_properties": dict(self.global_properties),
        }

    def to_json(self, *, indent: Optional[int] = 2) -> str:
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ComplexObsConfig":
        return cls(
            application_data_dir=Path(
                data.get("application_data_dir") or _default_application_data_dir()
            ),
            global_properties={
                str(k): str(v) for k, v in data.get("global_properties", {}).items()
            },
        )

    @classmethod
    def from_json(cls, path: Path) -> "ComplexObsConfig":
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"{path} not found")
        return cls.from_dict(json.loads(path.read_text(encoding="utf-8")))

    def save_json(self, path: Path) -> None:
        """
        Atomically write the config to path. Write to temporary then replace.
        """
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(self.to_json(), encoding="utf-8")
        tmp.replace(path)

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None) -> "ComplexObsConfig":
        env = os.environ if environ is None else environ
        base = env.get(ENV_APPLICATION_DATA_DIR)
        cfg = cls(
            application_data_dir=(
                Path(base).expanduser() if base else _default_application_data_dir()
            )
        )
        obs_dir = env.get(ENV_COMPLEX_OBS_DIR)
        if obs_dir:
            cfg.set_global_property(GP_COMPLEX_OBS_DIR, obs_dir)
        return cfg
