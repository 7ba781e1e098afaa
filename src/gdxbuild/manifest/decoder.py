"""Parser for the text produced by SectionEncoder.

Accepts ``[name]`` / ``[name key=value, key=value]`` headings, ``key = value``
body lines, blank lines and ``;`` comments. Values use the encoder's
JSON-compatible notation.
"""

import json
from typing import Any, Dict, Optional

from ..errors import DecodingFailed
from .sections import Heading, SectionDocument

_json = json.JSONDecoder()


def parse_value(text: str, line_number: int = 0) -> Any:
    """Parse one encoded value.

    Raises:
        DecodingFailed: If the text is not a valid value
    """
    try:
        return _json.decode(text)
    except json.JSONDecodeError as e:
        raise DecodingFailed(f"Line {line_number}: invalid value {text!r}: {e.msg}") from e


def parse_heading(text: str, line_number: int = 0) -> Heading:
    """Parse the inside of a ``[...]`` heading line."""
    text = text.strip()
    if not text:
        raise DecodingFailed(f"Line {line_number}: empty section heading")

    name, _, rest = text.partition(" ")
    properties: Dict[str, Any] = {}
    index = 0
    while index < len(rest):
        if rest[index] in " ,\t":
            index += 1
            continue
        equals = rest.find("=", index)
        if equals == -1:
            raise DecodingFailed(f"Line {line_number}: heading property without value: {rest[index:]!r}")
        key = rest[index:equals].strip()
        try:
            value, index = _json.raw_decode(rest, equals + 1)
        except json.JSONDecodeError as e:
            raise DecodingFailed(f"Line {line_number}: invalid value for heading property {key!r}: {e.msg}") from e
        properties[key] = value
    return Heading(name, properties)


class SectionDecoder:
    """Decodes manifest text into a SectionDocument."""

    def decode(self, text: str) -> SectionDocument:
        """
        Raises:
            DecodingFailed: On malformed headings, entries or values
        """
        document = SectionDocument()
        heading: Optional[Heading] = None
        body: Dict[str, Any] = {}

        for line_number, raw_line in enumerate(text.splitlines(), start=1):
            line = raw_line.strip()
            if not line or line.startswith(";"):
                continue

            if line.startswith("["):
                if not line.endswith("]"):
                    raise DecodingFailed(f"Line {line_number}: unterminated section heading")
                if heading is not None:
                    document.add(heading, body)
                heading = parse_heading(line[1:-1], line_number)
                body = {}
                continue

            if heading is None:
                raise DecodingFailed(f"Line {line_number}: entry outside of any section")
            key, separator, value = line.partition("=")
            if not separator or not key.strip():
                raise DecodingFailed(f"Line {line_number}: expected 'key = value'")
            body[key.strip()] = parse_value(value.strip(), line_number)

        if heading is not None:
            document.add(heading, body)
        return document
