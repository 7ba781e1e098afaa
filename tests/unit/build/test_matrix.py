"""Tests for build matrix expansion."""

from gdxbuild.build.build_modes import Architecture, BuildMode
from gdxbuild.build.matrix import expand_matrix
from gdxbuild.platforms import IOS, LINUX, MACOS
from gdxbuild.platforms.base import PlatformDescriptor

ARM = Architecture.AARCH64
X64 = Architecture.X86_64


def _labels(cells):
    return [str(cell.target) for cell in cells]


def test_order_is_mode_platform_arch():
    cells = expand_matrix([BuildMode.DEBUG, BuildMode.RELEASE], [MACOS, LINUX], [ARM, X64])
    assert _labels(cells) == [
        "macos-debug-aarch64",
        "macos-debug-x86_64",
        "linux-debug-aarch64",
        "linux-debug-x86_64",
        "macos-release-aarch64",
        "macos-release-x86_64",
        "linux-release-aarch64",
        "linux-release-x86_64",
    ]


def test_non_separated_platform_gets_single_cell():
    cells = list(expand_matrix([BuildMode.DEBUG], [IOS], [ARM, X64]))
    assert len(cells) == 1
    assert cells[0].arch is None
    assert str(cells[0].target) == "ios-debug"


def test_unsupported_architecture_reported_and_skipped():
    x64_only = PlatformDescriptor(
        name="testos",
        library_extension="so",
        supported_archs=(X64,),
        build=lambda platform, builder: "",
    )
    skipped = []

    cells = list(
        expand_matrix(
            [BuildMode.DEBUG],
            [x64_only],
            [ARM, X64],
            on_skip=lambda platform, arch, mode: skipped.append((platform.name, arch, mode)),
        )
    )

    assert _labels(cells) == ["testos-debug-x86_64"]
    assert skipped == [("testos", ARM, BuildMode.DEBUG)]


def test_empty_axes_yield_nothing():
    assert list(expand_matrix([], [LINUX], [ARM])) == []
    assert list(expand_matrix([BuildMode.DEBUG], [LINUX], [])) == []
