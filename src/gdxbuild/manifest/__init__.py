"""GDExtension manifest model and its section-based text format."""

from .decoder import SectionDecoder
from .encoder import SectionEncoder, format_value
from .extension import ExtensionConfiguration, ExtensionManifest, ManifestEntry
from .sections import Heading, SectionDocument

__all__ = [
    "ExtensionConfiguration",
    "ExtensionManifest",
    "Heading",
    "ManifestEntry",
    "SectionDecoder",
    "SectionDocument",
    "SectionEncoder",
    "format_value",
]
