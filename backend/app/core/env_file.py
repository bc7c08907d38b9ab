"""
Local ``.env`` override file.

Format: one ``KEY=value`` per line, ``#`` comments and blank lines ignored,
one layer of matching single or double quotes stripped from the value.
Values already present in the process environment always win over the file.
"""

import logging
import os
import re
import warnings
from collections.abc import MutableMapping
from pathlib import Path

_log = logging.getLogger(__name__)

ENV_FILE_NAME = ".env"

_LINE_RE = re.compile(r"^\s*([^#=\s]+)\s*=\s*(.*)$")
_LINE_SPLIT_RE = re.compile(r"\r?\n")


class EnvFileWarning(UserWarning):
    """The override file exists but could not be read; startup continues without it."""


def _unquote(raw: str) -> str:
    for quote in ('"', "'"):
        if len(raw) >= 2 and raw[0] == quote and raw[-1] == quote:
            return raw[1:-1]
    return raw


def parse_env_text(text: str) -> dict[str, str]:
    """
    Parse override file content into a dict.

    Non-matching lines (blank, comments, no ``=``) are skipped. The first
    occurrence of a key wins.
    """
    values: dict[str, str] = {}
    for line in _LINE_SPLIT_RE.split(text):
        m = _LINE_RE.match(line)
        if not m:
            continue
        key, raw = m.group(1), m.group(2)
        if key in values:
            continue
        values[key] = _unquote(raw)
    return values


def env_file_path(path: str | os.PathLike[str] | None = None) -> Path:
    """Resolve the override file (default: ``.env`` in the working directory)."""
    if path is None:
        return Path.cwd() / ENV_FILE_NAME
    return Path(path)


def read_env_file(path: str | os.PathLike[str] | None = None) -> dict[str, str]:
    """Read and parse the override file. Missing or unreadable file -> {}."""
    p = env_file_path(path)
    try:
        if not p.exists():
            return {}
        text = p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        _log.warning("Failed to load %s: %s", p, e)
        warnings.warn(f"Failed to load {p}: {e}", EnvFileWarning, stacklevel=2)
        return {}
    return parse_env_text(text)


def load_env_file(
    path: str | os.PathLike[str] | None = None,
    environ: MutableMapping[str, str] | None = None,
) -> None:
    """
    Copy file values into ``environ`` (default ``os.environ``).

    Keys already present, even with an empty value, are left untouched.
    """
    target = os.environ if environ is None else environ
    for key, value in read_env_file(path).items():
        if key in target:
            continue
        target[key] = value
