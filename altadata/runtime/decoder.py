"""Decode raw page bodies into records.

The data API answers every page with a JSON array of flat objects. The
transport strips the outer array brackets, leaving a comma-joined run of
object fragments. A body without any closing brace carries no objects and is
the only signal that pagination has run past the last page.

Each fragment is parsed with ``json.JSONDecoder.raw_decode`` starting where
the previous one ended, so braces or ``},`` sequences inside string values
and nested objects never split a record.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from ..core.exceptions import MalformedPageError

logger = logging.getLogger(__name__)

Record = dict[str, Any]

_WHITESPACE = " \t\r\n"


def strip_array(body: str) -> str:
    """Remove one layer of outer ``[`` ``]`` from a response body."""
    text = body.strip()
    if text.startswith("[") and text.endswith("]"):
        return text[1:-1]
    return text


def has_content(payload: str) -> bool:
    """Return True if the payload holds at least one object fragment."""
    return "}" in payload


class RecordDecoder:
    """Turns one page payload into an ordered list of records."""

    def __init__(self) -> None:
        self._decoder = json.JSONDecoder()

    def decode(self, payload: str) -> list[Record]:
        """Decode a bracket-stripped page payload.

        Args:
            payload: Comma-joined object fragments with no outer brackets

        Returns:
            Records in their original left-to-right order; empty when the
            payload has no object fragments

        Raises:
            MalformedPageError: If any fragment is not a well-formed JSON object
        """
        if not has_content(payload):
            return []

        records: list[Record] = []
        pos = self._skip_whitespace(payload, 0)
        end = len(payload)

        while pos < end:
            try:
                item, next_pos = self._decoder.raw_decode(payload, pos)
            except json.JSONDecodeError as exc:
                raise MalformedPageError(
                    f"page fragment at offset {pos} is not valid JSON: {exc.msg}",
                    fragment=self._fragment_at(payload, pos),
                    offset=pos,
                ) from exc

            if not isinstance(item, dict):
                raise MalformedPageError(
                    f"page fragment at offset {pos} is not a JSON object",
                    fragment=payload[pos:next_pos],
                    offset=pos,
                )
            records.append(item)

            pos = self._skip_whitespace(payload, next_pos)
            if pos >= end:
                break
            if payload[pos] != ",":
                raise MalformedPageError(
                    f"expected ',' between records at offset {pos}",
                    fragment=self._fragment_at(payload, pos),
                    offset=pos,
                )
            pos = self._skip_whitespace(payload, pos + 1)

        logger.debug("page_decoded", extra={"records": len(records)})
        return records

    def decode_body(self, body: str) -> list[Record]:
        """Strip the outer array from a raw body, then decode it."""
        return self.decode(strip_array(body))

    @staticmethod
    def _skip_whitespace(payload: str, pos: int) -> int:
        while pos < len(payload) and payload[pos] in _WHITESPACE:
            pos += 1
        return pos

    @staticmethod
    def _fragment_at(payload: str, pos: int) -> str:
        # Raw text up to the next record boundary, for diagnostics only
        boundary = payload.find("},", pos)
        if boundary == -1:
            return payload[pos:]
        return payload[pos : boundary + 1]
