# tenantsync Content Decoder
# Unwraps provider content envelopes and parses structured files

import base64
import binascii
import json
from collections.abc import Mapping
from typing import Any

from tenantsync.errors import ContentDecodeError
from tenantsync.utils.paths import split_extension


class ContentDecoder:
    """
    Decodes raw provider content for a path.

    Files with a structured extension are parsed as JSON; everything else
    is returned verbatim as text.
    """

    def __init__(self, structured_extensions: tuple[str, ...] = (".json",)):
        self.structured_extensions = tuple(ext.lower() for ext in structured_extensions)

    def is_structured(self, path: str) -> bool:
        """Check if a path holds structured data."""
        _, ext = split_extension(path)
        return ext in self.structured_extensions

    def unwrap(self, raw: Any, path: str = "<unknown>") -> str:
        """
        Extract text from a provider response.

        Accepts plain strings, UTF-8 bytes, or a mapping envelope with a
        ``content`` key. Envelopes flagged ``"encoding": "base64"`` are
        base64-decoded first.

        Args:
            raw: Provider response.
            path: Path used in error messages.

        Returns:
            Text content.

        Raises:
            ContentDecodeError: If the response has no usable content.
        """
        if isinstance(raw, Mapping):
            if "content" not in raw:
                raise ContentDecodeError(path, "response envelope has no 'content'")
            content = raw["content"]
            if str(raw.get("encoding", "")).lower() == "base64":
                if not isinstance(content, (str, bytes)):
                    raise ContentDecodeError(path, "base64 content is not a string")
                if isinstance(content, str):
                    content = content.encode("ascii", errors="replace")
                # Providers may wrap encoded content across lines
                content = b"".join(content.split())
                try:
                    content = base64.b64decode(content, validate=True)
                except (binascii.Error, ValueError) as e:
                    raise ContentDecodeError(path, f"invalid base64 content: {e}") from e
            raw = content

        if isinstance(raw, bytes):
            try:
                return raw.decode("utf-8")
            except UnicodeDecodeError as e:
                raise ContentDecodeError(path, f"content is not valid UTF-8: {e}") from e

        if isinstance(raw, str):
            return raw

        raise ContentDecodeError(path, f"unsupported content type {type(raw).__name__}")

    def decode(self, path: str, raw: Any) -> Any:
        """
        Decode content for a path.

        Args:
            path: Repository path (its extension selects the decoding).
            raw: Provider response.

        Returns:
            Parsed JSON value for structured files, text otherwise.

        Raises:
            ContentDecodeError: If unwrapping or JSON parsing fails.
        """
        text = self.unwrap(raw, path)
        if not self.is_structured(path):
            return text

        # Editors on Windows often save JSON with a byte order mark
        text = text.removeprefix("\ufeff")
        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise ContentDecodeError(path, f"invalid JSON: {e}") from e
