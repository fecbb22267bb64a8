"""FreezeForge - Reproducible build-and-package pipeline for frozen binaries.

Turns a project into a single-file executable via PyInstaller and tags the
output with the host platform and CPU architecture.
"""

__version__ = "0.3.0"
__all__ = ["__version__"]
