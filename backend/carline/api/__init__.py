"""API package.

This exposes router modules to simplify test imports like:
	from carline.api.routes.ai import router
"""

__all__ = [
	"routes",
]
