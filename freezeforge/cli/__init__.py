"""FreezeForge CLI.

Usage:
    freezeforge                  # Build for the current platform
    python -m freezeforge        # Same
"""


def __getattr__(name: str):
    """Lazy import to avoid RuntimeWarning when running as module."""
    if name == "app":
        from freezeforge.cli.main import app

        return app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["app"]
