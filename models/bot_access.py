"""Request and response models for the bot access check endpoint."""

from __future__ import annotations

from typing import Any

import httpx
from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from controllers.robots import RobotsVerdict


class BotAccessCheckRequest(BaseModel):
    url: str

    @field_validator("url")
    @classmethod
    def _absolute_http_url(cls, value: str) -> str:
        value = value.strip()
        try:
            parsed = httpx.URL(value)
        except httpx.InvalidURL as exc:
            raise ValueError(f"Invalid url: {exc}") from exc
        if parsed.scheme not in ("http", "https") or not parsed.host:
            raise ValueError("Invalid url: expected an absolute http(s) URL")
        if parsed.port is not None and parsed.port > 65535:
            raise ValueError("Invalid url: port out of range")
        return value


class _CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class ProbeResult(_CamelModel):
    """Outcome of checking one crawler against the target URL."""

    agent: str
    user_agent: str
    robots_allowed: RobotsVerdict
    http_status: int | None = None
    ok: bool = False
    error: str | None = None

    def to_json(self) -> dict[str, Any]:
        data = self.model_dump(mode="json", by_alias=True)
        if data["error"] is None:
            del data["error"]
        return data


class AccessCheckResponse(_CamelModel):
    url: str
    robots_txt_url: str
    robots_txt_found: bool
    results: list[ProbeResult]

    def to_json(self) -> dict[str, Any]:
        return {
            "url": self.url,
            "robotsTxtUrl": self.robots_txt_url,
            "robotsTxtFound": self.robots_txt_found,
            "results": [r.to_json() for r in self.results],
        }
