"""Helpers for New Relic agent configuration."""

from __future__ import annotations

import base64
from dataclasses import dataclass

__all__ = ["ObfuscationResult", "obfuscate_string_with_key"]


@dataclass(frozen=True)
class ObfuscationResult:
    """The outcome of obfuscating a configuration value."""

    obfuscated_value: str

    def to_dict(self) -> dict[str, str]:
        """Return the result in its JSON output shape."""
        return {"obfuscatedValue": self.obfuscated_value}


def obfuscate_string_with_key(text: str, key: str) -> str:
    """XOR the UTF-8 bytes of ``text`` with a repeating ``key`` and base64 the result.

    An empty text or an empty key gives an empty string.
    """
    text_bytes = text.encode("utf-8")
    key_bytes = key.encode("utf-8")
    if not text_bytes or not key_bytes:
        return ""

    key_len = len(key_bytes)
    obfuscated = bytes(
        byte ^ key_bytes[position % key_len]
        for position, byte in enumerate(text_bytes)
    )
    return base64.b64encode(obfuscated).decode("ascii")