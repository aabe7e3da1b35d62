# complexobs/core/errors.py
from __future__ import annotations


class ComplexObsError(Exception):
    """Application-level failure while handling complex obs data."""


class MissingComplexDataError(ComplexObsError):
    pass


class ComplexDataConversionError(ComplexObsError):
    pass


class ComplexObsWriteError(ComplexObsError):
    pass
