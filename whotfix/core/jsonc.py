"""JSON-with-comments loading.

``package.json`` files in the wild sometimes carry ``//`` line comments or
``/* */`` block comments. Comments are removed before parsing; anything
inside a string literal is kept verbatim, so values such as
``"http://example.com"`` survive.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict

__all__ = ["JsonError", "read_json", "strip_json_comments"]

# Strings are matched first so that comment markers inside them are skipped.
_TOKEN_RE = re.compile(
    r'"(?:\\.|[^"\\])*"|(//[^\n]*|/\*.*?\*/)',
    re.DOTALL,
)


@dataclass(frozen=True, slots=True)
class JsonError:
    """Error when a JSON document cannot be read or parsed."""

    message: str
    path: Path | None = None


def strip_json_comments(text: str) -> str:
    """Remove line and block comments that sit outside string literals."""
    return _TOKEN_RE.sub(lambda m: "" if m.group(1) else m.group(0), text)


def read_json(path: Path) -> Result[StrDict, JsonError]:
    """Load a JSON object from ``path``, tolerating comments.

    Args:
        path: File to read (UTF-8).

    Returns:
        Ok(dict) for a JSON object, Err(JsonError) otherwise.
    """
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(JsonError(f"File not found: {path}", path=path))
    except PermissionError:
        return Err(JsonError(f"Permission denied reading: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(JsonError(f"Error reading {path}: {e}", path=path))

    try:
        data_obj: object = json.loads(strip_json_comments(text))
    except json.JSONDecodeError as e:
        return Err(JsonError(f"Invalid JSON in {path}: {e}", path=path))

    data = as_str_dict(data_obj)
    if data is None:
        return Err(JsonError(f"Expected a JSON object in {path}", path=path))
    return Ok(data)
