"""gdxbuild - build Swift GDExtension drivers for every platform/arch/mode.

The package drives the Swift toolchain once per build-matrix cell, collects
the produced libraries into ``bin/<driver>/`` and writes the
``<driver>.gdextension`` manifest the engine loads them from.
"""

__version__ = "0.3.0"

__all__ = ["__version__"]
