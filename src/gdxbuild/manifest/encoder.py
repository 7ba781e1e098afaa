"""Text encoder for section documents.

Output format::

    [configuration]
    entry_symbol = "swift_entry_point"
    compatibility_minimum = 4.2

    [libraries]
    linux.debug.arm64 = "linux-aarch64/debug/GameDriver.so"

Values are rendered so that they parse back unambiguously: strings are
JSON-quoted, booleans are ``true``/``false``, numbers use their shortest
round-trip form and maps are written as ``{"key": value, ...}``. The encoder
does not validate content (duplicate keys, unknown sections); it only turns
structure into text.
"""

import json
import math
from typing import Any, Mapping

from ..errors import EncodingFailed
from .sections import Heading, SectionDocument


def format_value(value: Any) -> str:
    """Render a single value.

    Raises:
        EncodingFailed: For None, non-finite floats, non-string map keys and
            any type without a textual form
    """
    # bool is a subclass of int, check it first
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodingFailed(f"Cannot encode non-finite number: {value!r}")
        return repr(value)
    if isinstance(value, Mapping):
        entries = []
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodingFailed(f"Map keys must be strings, got {type(key).__name__}: {key!r}")
            entries.append(f"{format_value(key)}: {format_value(item)}")
        return "{" + ", ".join(entries) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_value(item) for item in value) + "]"
    raise EncodingFailed(f"Cannot encode value of type {type(value).__name__}: {value!r}")


class SectionEncoder:
    """Encodes a SectionDocument into text.

    Args:
        separate_sections: Emit an empty line after every section
    """

    def __init__(self, separate_sections: bool = True):
        self.separate_sections = separate_sections

    def format_heading(self, heading: Heading) -> str:
        if not heading.properties:
            return f"[{heading.name}]"
        properties = ", ".join(f"{key}={format_value(value)}" for key, value in heading.properties.items())
        return f"[{heading.name} {properties}]"

    def encode(self, document: SectionDocument) -> str:
        """Render every section in document order.

        Raises:
            EncodingFailed: If any heading property or body value cannot be rendered
        """
        lines = []
        for heading, body in document.items():
            lines.append(self.format_heading(heading))
            for key, value in body.items():
                lines.append(f"{key} = {format_value(value)}")
            if self.separate_sections:
                lines.append("")
        return "".join(f"{line}\n" for line in lines)
