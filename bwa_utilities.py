#!/usr/bin/env python
"""
bwatools Utilities Module

This module contains shared utility functions, error types and the command
result record used by the bwatools command builders.
"""

import os
import sys
from datetime import datetime

from pydantic import BaseModel, ConfigDict
import pydantic

# Version number - single source of truth for all bwatools scripts
__version__ = "0.2.0"

# Suffix lists in the order they are tried. aln only knows the three FASTQ
# spellings, samse/sampe also strip .fq.gz.
ALN_FASTQ_SUFFIXES = ('.fastq.gz', '.fastq', '.fq')
SAM_FASTQ_SUFFIXES = ('.fastq', '.fq', '.fastq.gz', '.fq.gz')

_TRUE_VALUES = ('true', 'y', 'yes')
_FALSE_VALUES = ('false', 'n', 'no')


class BwaToolsError(Exception):
    """Base class for all bwatools errors."""


class ValidationError(BwaToolsError, ValueError):
    """A parameter is missing, empty or of the wrong type."""


class FilesystemError(BwaToolsError, OSError):
    """The output directory could not be created."""


class CommandResult(BaseModel):
    """A command line to execute and the file (or prefix) it will write."""
    model_config = ConfigDict(frozen=True)

    command: str
    output_path: str


def print_w_time(message):
    print(f"[{datetime.now().strftime('%d-%m-%Y %H:%M:%S')}] {message}", file=sys.stderr)


def parse_flag(value):
    """
    Convert a boolean-like flag to bool.

    Accepts real booleans and the strings "true"/"false" (plus "y"/"n",
    the spelling historically used for numeric suffixes), case-insensitive.
    """
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _TRUE_VALUES:
            return True
        if lowered in _FALSE_VALUES:
            return False
    raise ValueError(f"expected true/false, got {value!r}")


def require_text(value):
    """Reject empty or whitespace-only strings."""
    if not value.strip():
        raise ValueError("must be a non-empty string")
    return value


def optional_text(value):
    """Allow the empty string, reject whitespace-only strings."""
    if value and not value.strip():
        raise ValueError("must be empty or contain non-whitespace characters")
    return value


def build_options(model, **kwargs):
    """
    Instantiate an options record, turning pydantic errors into a single ValidationError.

    Args:
        model: pydantic model class describing the operation's arguments
        **kwargs: arguments as passed by the caller

    Returns:
        Validated instance of ``model`` with defaults applied
    """
    # None means "not supplied" so the model reports it as missing or defaults it
    supplied = {k: v for k, v in kwargs.items() if v is not None}
    try:
        return model(**supplied)
    except pydantic.ValidationError as e:
        problems = []
        for err in e.errors():
            field = '.'.join(str(part) for part in err['loc']) or model.__name__
            problems.append(f"{field}: {err['msg']}")
        raise ValidationError(f"invalid arguments for {model.__name__}: " + '; '.join(problems)) from None


def basename_without_suffix(path, suffixes):
    """
    Return the file name of ``path`` with the first matching suffix removed.

    Suffixes are tried in order and at most one is stripped. A suffix that
    makes up the whole name is left in place.
    """
    name = os.path.basename(path)
    for suffix in suffixes:
        if name.endswith(suffix) and len(name) > len(suffix):
            return name[:-len(suffix)]
    return name


def ensure_directory(path):
    """Create ``path`` (and parents) if it does not exist yet."""
    if os.path.isdir(path):
        return path
    if os.path.exists(path):
        raise FilesystemError(f"output path exists and is not a directory: {path}")
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise FilesystemError(f"unable to create output directory {path}: {e}") from e
    return path
