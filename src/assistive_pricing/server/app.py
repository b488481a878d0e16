"""FastAPI app factory.

Endpoints are intentionally thin wrappers over the pricing handler. Webhook
signatures are not verified here; put the server behind something that does.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import Body, FastAPI, Header, HTTPException
from pydantic import ValidationError

from assistive_pricing import __version__
from assistive_pricing.pricing.context import PricingContext
from assistive_pricing.pricing.errors import (
    MissingLabelsError,
    PermissionDeniedError,
    PluginConfigError,
)
from assistive_pricing.pricing.github.client import GitHubClient
from assistive_pricing.pricing.handler import on_label_change_set_pricing
from assistive_pricing.pricing.logging import configure_logging
from assistive_pricing.pricing.payload import IssueLabelEvent
from assistive_pricing.pricing.plugin_config import load_plugin_config
from assistive_pricing.server.config import ServerSettings
from assistive_pricing.server.models import WebhookResponse

logger = logging.getLogger(__name__)


def create_app() -> FastAPI:
    settings = ServerSettings()
    configure_logging(settings.log_level)

    app = FastAPI(
        title="Assistive Pricing",
        version=__version__,
        description="GitHub webhook receiver that keeps issue price labels in sync.",
        openapi_url="/api/openapi.json",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    # Expose settings for request handlers that want to read it.
    app.state.settings = settings

    @app.get("/api/v1/health")
    def health() -> dict[str, str]:
        return {"status": "ok", "version": __version__}

    @app.post("/api/v1/webhooks/github", response_model=WebhookResponse)
    def github_webhook(
        payload: dict[str, Any] = Body(...),
        x_github_event: str | None = Header(default=None),
    ) -> WebhookResponse:
        if x_github_event is not None and x_github_event != "issues":
            return WebhookResponse.ignored(f"unsupported event: {x_github_event}")

        try:
            event = IssueLabelEvent.model_validate(payload)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail="Not an issues webhook payload") from e

        if not event.is_label_change:
            return WebhookResponse.ignored(f"unsupported action: {event.action}")

        if not settings.github_token.strip():
            raise HTTPException(
                status_code=409,
                detail="PRICING_GITHUB_TOKEN is required for this endpoint",
            )

        try:
            config = load_plugin_config(settings.config_path)
        except PluginConfigError as e:
            logger.error(str(e))
            raise HTTPException(status_code=500, detail=str(e)) from e

        github = GitHubClient(
            token=settings.github_token,
            repository=event.repository.full_name,
            base_url=settings.github_base_url,
        )
        try:
            context = PricingContext.create(event=event, config=config, github=github)
            result = on_label_change_set_pricing(context)
        except PermissionDeniedError as e:
            logger.warning(str(e), extra={"issue_number": event.issue.number})
            raise HTTPException(status_code=403, detail=str(e)) from e
        except MissingLabelsError as e:
            logger.warning(str(e), extra={"issue_number": event.issue.number})
            raise HTTPException(status_code=422, detail=str(e)) from e
        finally:
            github.close()

        return WebhookResponse.from_result(result)

    return app
