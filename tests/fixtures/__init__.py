"""
Fixture modules for FreezeForge tests.

Modules
-------
- runners: FakeRunner, a recording CommandRunner double
"""

from tests.fixtures.runners import FakeRunner

__all__ = ["FakeRunner"]
