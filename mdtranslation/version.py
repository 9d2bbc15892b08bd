"""
mdtranslation Version Management - single source of truth for the package version

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

__version__ = "0.1.0"

VERSION_MAJOR = 0
VERSION_MINOR = 1
VERSION_PATCH = 0


def get_version() -> str:
    """Return the package version string."""
    return __version__
