"""Observability helpers (Sentry init & common scrubbing).

Centralises Sentry initialisation so the API and the CLI share one
configuration. Every helper is a no-op when no DSN is configured.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from carline.core.config import Settings, settings as default_settings


def _before_send(event: Dict[str, Any], hint: Dict[str, Any] | None = None):
	"""Scrub secrets and receipt payloads before sending to Sentry.

	- Drop Authorization & Cookie headers
	- Remove request data/body (base64 receipt images live there)
	"""
	req = event.get("request") or {}
	headers = req.get("headers") or {}
	for k in list(headers.keys()):
		if k.lower() in ("authorization", "cookie", "set-cookie", "x-api-key"):
			headers.pop(k, None)
	req.pop("data", None)
	event["request"] = req
	return event


def _enabled(config: Optional[Settings] = None) -> bool:
	return bool((config or default_settings).SENTRY_DSN)


def init_sentry(service: str, config: Optional[Settings] = None) -> bool:
	"""Initialise Sentry once for a given process.

	Returns True if Sentry was initialised; False otherwise.
	"""
	config = config or default_settings
	if not _enabled(config):
		return False
	if getattr(init_sentry, "_done", False):  # prevent duplicate init in same process
		return True
	sentry_sdk.init(
		dsn=config.SENTRY_DSN,
		integrations=[FastApiIntegration()],
		traces_sample_rate=float(config.SENTRY_TRACES_SAMPLE_RATE or 0),
		environment=config.ENVIRONMENT,
		release=config.SENTRY_RELEASE,
		send_default_pii=False,
		before_send=_before_send,
	)
	sentry_sdk.set_tag("service", service)
	init_sentry._done = True  # type: ignore[attr-defined]
	return True


def sentry_breadcrumb(
	category: str,
	message: str,
	level: str = "info",
	data: Optional[Dict[str, Any]] = None,
	config: Optional[Settings] = None,
) -> None:
	"""Add a breadcrumb for important pipeline steps."""
	if not _enabled(config):
		return
	sentry_sdk.add_breadcrumb(category=category, message=message, level=level, data=data or {})


def sentry_capture_exception(
	exc: BaseException,
	tags: Optional[Dict[str, Any]] = None,
	config: Optional[Settings] = None,
) -> None:
	"""Report an exception, tagging it with short string values only.

	``config`` defaults to the process-wide settings.
	"""
	if not _enabled(config):
		return
	with sentry_sdk.new_scope() as scope:
		for k, v in (tags or {}).items():
			scope.set_tag(str(k), str(v)[:128] if v is not None else "")
		sentry_sdk.capture_exception(exc)


__all__ = ["init_sentry", "sentry_breadcrumb", "sentry_capture_exception"]
