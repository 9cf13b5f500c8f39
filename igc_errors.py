#!/usr/bin/env python3
"""
Exceptions raised while converting an IGC track to FIT

All of them derive from ValueError so the command line entry point reports
them as invalid input.
"""


class ConversionError(ValueError):
    """Base class for errors that abort a conversion"""


class EmptyTrackError(ConversionError):
    """The track has no fixes"""


class DomainError(ConversionError):
    """A timestamp or coordinate is outside the range FIT can represent"""


class EncodingError(ConversionError):
    """A message field cannot be written in its declared binary width"""


class WriterStateError(EncodingError):
    """The FIT writer was used after it was finalized"""
