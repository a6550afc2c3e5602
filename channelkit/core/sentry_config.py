"""
Sentry error tracking for ChannelKit.

GenerationError is the one failure class operators are expected to triage,
so ChannelKitError events carry their ``details`` (stage, listing_id,
channel_id, cause) as Sentry extras. Client-side 4xx errors are dropped.

An empty DSN disables Sentry entirely.
"""

import logging

import sentry_sdk
from fastapi import HTTPException
from sentry_sdk.integrations.asyncio import AsyncioIntegration
from sentry_sdk.integrations.fastapi import FastApiIntegration
from sentry_sdk.integrations.logging import LoggingIntegration
from sentry_sdk.integrations.starlette import StarletteIntegration

from channelkit.config import AppEnv
from channelkit.core.exceptions import (
    ChannelKitError,
    ExportNotImplementedError,
    ExportValidationError,
    NotFoundError,
    UnsupportedChannelError,
)

# Expected outcomes that are reported to the caller, not to operators.
_CLIENT_ERRORS = (
    ExportValidationError,
    NotFoundError,
    UnsupportedChannelError,
    ExportNotImplementedError,
)


def init_sentry(
    dsn: str,
    app_env: AppEnv,
    app_version: str,
    traces_sample_rate: float = 0.1,
    profiles_sample_rate: float = 0.1,
) -> None:
    """Start the Sentry SDK. No-op when ``dsn`` is empty (local runs, tests)."""
    if not dsn:
        return

    sentry_sdk.init(
        dsn=dsn,
        environment=app_env.value,
        release=f"channelkit@{app_version}",
        traces_sample_rate=traces_sample_rate,
        profiles_sample_rate=profiles_sample_rate,
        integrations=[
            FastApiIntegration(transaction_style="endpoint"),
            StarletteIntegration(transaction_style="endpoint"),
            AsyncioIntegration(),
            # Image download warnings become breadcrumbs, logged errors become events
            LoggingIntegration(level=logging.INFO, event_level=logging.ERROR),
        ],
        before_send=_filter_events,
        send_default_pii=False,
    )


def _is_client_error(exc: BaseException) -> bool:
    if isinstance(exc, HTTPException):
        return exc.status_code < 500
    return isinstance(exc, _CLIENT_ERRORS)


def _tag_channelkit_error(event: dict, exc: ChannelKitError) -> dict:
    tags = event.setdefault("tags", {})
    tags["error_type"] = type(exc).__name__
    if exc.details.get("stage"):
        tags["export_stage"] = exc.details["stage"]
    if exc.details:
        event["extra"] = {**event.get("extra", {}), **exc.details}
    return event


def _filter_events(event: dict, hint: dict) -> dict | None:
    """``before_send`` hook: drop client errors, tag ChannelKit errors."""
    exc_info = hint.get("exc_info")
    if not exc_info:
        return event

    exc = exc_info[1]
    if _is_client_error(exc):
        return None
    if isinstance(exc, ChannelKitError):
        return _tag_channelkit_error(event, exc)
    return event
