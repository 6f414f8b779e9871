"""Core application services and infrastructure layer.

Exports configuration settings to simplify import paths inside tests
(e.g. `from carline.core import settings`).
"""

from .config import Settings, settings  # noqa: F401
