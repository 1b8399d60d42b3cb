"""Public tools API: crawler access checks."""

from __future__ import annotations

import logging
from typing import Annotated

from litestar import Controller, Request, post
from litestar.params import Dependency
from litestar.response import Response
from litestar.status_codes import HTTP_200_OK, HTTP_400_BAD_REQUEST
from pydantic import ValidationError

from controllers.bot_access import CrawlerAccessProber
from models.bot_access import BotAccessCheckRequest

logger = logging.getLogger(__name__)


def invalid_body_response(issues: list) -> Response:
    return Response(
        content={"message": "Invalid request body", "issues": issues},
        status_code=HTTP_400_BAD_REQUEST,
    )


class ToolsController(Controller):
    path = "/api/v1/tools"

    @post("/bot-access-check", status_code=HTTP_200_OK)
    async def bot_access_check(
        self,
        request: Request,
        prober: Annotated[CrawlerAccessProber, Dependency(skip_validation=True)],
    ) -> Response:
        """Check whether common LLM and search bots can access a URL."""
        body = await request.body()
        try:
            data = BotAccessCheckRequest.model_validate_json(body or b"null")
        except ValidationError as exc:
            return invalid_body_response(
                exc.errors(include_url=False, include_context=False)
            )

        logger.info("Bot access check for %s", data.url)
        result = await prober.check_access(data.url)
        return Response(content=result.to_json(), status_code=HTTP_200_OK)
