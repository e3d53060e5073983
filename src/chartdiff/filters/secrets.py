"""Secret value handling for ``data:`` / ``value:`` lines.

Modes:
  - ``suppress`` replaces values that look like secret material with
    ``[REDACTED]``.
  - ``decode`` shows base64 ``value:`` payloads in clear text.
  - ``show`` leaves every line untouched.
"""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import List, Optional

REDACTED = "[REDACTED]"
DECODED_SUFFIX = "(decoded from base64)"

_log = logging.getLogger(__name__)

# Optional diff marker / indentation / list dash, optional dotted path prefix.
_SECRET_LINE_RE = re.compile(
    r"^(?P<prefix>[+\-\s]*(?:[\w.\-/]*\.)?(?P<key>data|value):[ \t]+)"
    r"(?P<value>\S.*?)[ \t]*$"
)
_BASE64_RE = re.compile(r"^[A-Za-z0-9+/=]+$")
_MIN_OPAQUE_LENGTH = 20


def looks_secret(key: str, value: str) -> bool:
    """Return True if *value* under *key* should be hidden in ``suppress`` mode."""
    if value == REDACTED:
        return False
    if key == "data":
        return ":" in value
    return len(value) > _MIN_OPAQUE_LENGTH or _BASE64_RE.match(value) is not None


def decode_base64(value: str) -> Optional[str]:
    """Return the printable UTF-8 text behind *value*, or None."""
    if not _BASE64_RE.match(value):
        return None
    try:
        decoded = base64.b64decode(value, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError):
        return None
    if not decoded or not decoded.isprintable():
        return None
    return decoded


def redact_line(line: str) -> str:
    m = _SECRET_LINE_RE.match(line)
    if m is None or not looks_secret(m.group("key"), m.group("value")):
        return line
    return f"{m.group('prefix')}{REDACTED}"


def decode_line(line: str) -> str:
    m = _SECRET_LINE_RE.match(line)
    if m is None or m.group("key") != "value":
        return line
    decoded = decode_base64(m.group("value"))
    if decoded is None:
        _log.debug("value is not decodable base64; leaving line unchanged")
        return line
    return f"{m.group('prefix')}{decoded} {DECODED_SUFFIX}"


def apply_secret_handling(lines: List[str], mode: str) -> List[str]:
    """Transform secret-bearing lines according to *mode*."""
    if mode == "suppress":
        return [redact_line(line) for line in lines]
    if mode == "decode":
        return [decode_line(line) for line in lines]
    return list(lines)
