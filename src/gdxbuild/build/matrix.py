"""Build matrix expansion.

The orchestrator and the manifest both walk the matrix through
expand_matrix(), so every cell that gets built is also the cell that gets a
manifest entry.
"""

from typing import Callable, Iterator, NamedTuple, Optional, Sequence

from ..platforms.base import PlatformDescriptor
from .build_context import BuildTarget
from .build_modes import Architecture, BuildMode

SkipCallback = Callable[[PlatformDescriptor, Architecture, BuildMode], None]


class MatrixCell(NamedTuple):
    """A platform/architecture/mode combination to build."""

    platform: PlatformDescriptor
    arch: Optional[Architecture]
    mode: BuildMode

    @property
    def target(self) -> BuildTarget:
        return BuildTarget(platform_id=self.platform.id, arch=self.arch, mode=self.mode)


def expand_matrix(
    modes: Sequence[BuildMode],
    platforms: Sequence[PlatformDescriptor],
    archs: Sequence[Architecture],
    on_skip: Optional[SkipCallback] = None,
) -> Iterator[MatrixCell]:
    """Yield cells in mode -> platform -> architecture order.

    Platforms that keep architectures separate get one cell per supported
    requested architecture; unsupported ones are reported through ``on_skip``.
    Platforms that build all architectures at once get exactly one cell with
    ``arch=None`` no matter how many architectures were requested.
    """
    for mode in modes:
        for platform in platforms:
            if not platform.separate_archs:
                yield MatrixCell(platform, None, mode)
                continue
            for arch in archs:
                if not platform.supports(arch):
                    if on_skip is not None:
                        on_skip(platform, arch, mode)
                    continue
                yield MatrixCell(platform, arch, mode)
