# complexobs/core/models.py
"""
Core data models for complex observations.

This file contains:
 - view name constants understood by complex obs handlers
 - ComplexData: the in-memory payload attached to an observation
 - Obs: the observation record carrying the value_complex pointer
 - helpers to build and parse the value_complex pointer string
 - Factory helpers (new_obs)
"""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

# standard view names
RAW_VIEW = "RAW_VIEW"
TEXT_VIEW = "TEXT_VIEW"
HTML_VIEW = "HTML_VIEW"
PREVIEW_VIEW = "PREVIEW_VIEW"
TITLE_VIEW = "TITLE_VIEW"
URI_VIEW = "URI_VIEW"

ALL_VIEWS = (RAW_VIEW, TEXT_VIEW, HTML_VIEW, PREVIEW_VIEW, TITLE_VIEW, URI_VIEW)

# separator between the title part and the filename part of value_complex
VALUE_COMPLEX_SEPARATOR = "|"


@dataclass
class ComplexData:
    """
    Payload attached to an Obs while it lives in memory.

    - title: free text, usually the original filename ("photo.png"); the output
      format is taken from its extension
    - data: a decoded image, a binary stream / bytes, or None
    """

    title: str
    data: Any = None


@dataclass
class Obs:
    obs_id: Optional[int] = None
    uuid: str = field(default_factory=lambda: str(uuid.uuid4()))
    value_complex: Optional[str] = None
    complex_data: Optional[ComplexData] = None
    meta: Dict[str, Any] = field(default_factory=dict)

    def is_complex(self) -> bool:
        return self.value_complex is not None or self.complex_data is not None

    def to_dict(self) -> Dict[str, Any]:
        # complex_data is transient and never serialized
        return {
            "obs_id": self.obs_id,
            "uuid": self.uuid,
            "value_complex": self.value_complex,
            "meta": self.meta,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Obs":
        return cls(
            obs_id=data.get("obs_id"),
            uuid=str(data.get("uuid") or uuid.uuid4()),
            value_complex=data.get("value_complex"),
            meta=data.get("meta", {}),
        )


def format_value_complex(extension: str, filename: str) -> str:
    """
    Build the pointer stored on an Obs after a successful image save,
    e.g. ("png", "42.png") -> "png image |42.png".
    """
    return f"{extension} image {VALUE_COMPLEX_SEPARATOR}{filename}"


def parse_value_complex(value: str) -> Tuple[Optional[str], str]:
    """
    Split a value_complex pointer into (title, filename).
    A pointer without separator is treated as a bare filename.
    """
    parts = value.split(VALUE_COMPLEX_SEPARATOR)
    if len(parts) < 2:
        return None, parts[0]
    return VALUE_COMPLEX_SEPARATOR.join(parts[:-1]), parts[-1]


def new_obs(
    obs_id: Optional[int] = None,
    title: Optional[str] = None,
    data: Any = None,
) -> Obs:
    complex_data = ComplexData(title=title, data=data) if title is not None else None
    return Obs(obs_id=obs_id, complex_data=complex_data)
