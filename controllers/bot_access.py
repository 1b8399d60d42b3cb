"""Crawler access prober.

Checks a URL against a fixed roster of search and LLM crawlers. robots.txt
is fetched once and evaluated per crawler, then the URL itself is fetched
concurrently with each crawler's User-Agent to see whether the origin
actually serves it.

Every network failure is recorded rather than raised: an unreachable
robots.txt turns every verdict into ``"unknown"``, and a failed probe only
affects that crawler's row.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass

import httpx

from config import Settings, get_settings
from controllers.robots import (
    UNKNOWN,
    RobotsVerdict,
    RuleGroup,
    is_path_allowed,
    parse_robots_txt,
)
from models.bot_access import AccessCheckResponse, ProbeResult

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BotDescriptor:
    """A crawler we probe as: display name, User-Agent and robots token."""

    name: str
    ua: str
    token: str


BOTS: tuple[BotDescriptor, ...] = (
    BotDescriptor(
        name="Googlebot",
        ua="Mozilla/5.0 (compatible; Googlebot/2.1; +http://www.google.com/bot.html)",
        token="googlebot",
    ),
    BotDescriptor(
        name="GPTBot (OpenAI)",
        ua="GPTBot/1.0 (+https://openai.com/gptbot)",
        token="gptbot",
    ),
    BotDescriptor(
        name="ClaudeBot (Anthropic)",
        ua="ClaudeBot/1.0 (+https://www.anthropic.com/claudebot)",
        token="claudebot",
    ),
    BotDescriptor(
        name="PerplexityBot",
        ua="PerplexityBot/1.0 (+https://www.perplexity.ai/bot)",
        token="perplexitybot",
    ),
    BotDescriptor(
        name="CCBot (CommonCrawl)",
        ua="CCBot/2.0 (+https://commoncrawl.org/faq/)",
        token="ccbot",
    ),
    BotDescriptor(
        name="Amazonbot",
        ua="Amazonbot/1.0 (+https://developer.amazon.com/support/amazonbot)",
        token="amazonbot",
    ),
    BotDescriptor(
        name="Meta-ExternalAgent",
        ua="Meta-ExternalAgent/1.0",
        token="meta-externalagent",
    ),
    BotDescriptor(
        name="Applebot",
        ua="Applebot/0.1 (+http://www.apple.com/go/applebot)",
        token="applebot",
    ),
)


class InvalidUrlError(ValueError):
    """The target is not an absolute http(s) URL."""


@dataclass(frozen=True)
class _Target:
    scheme: str
    host: str
    path: str


def _parse_target(url: str) -> _Target:
    """Parse ``url`` the way the probe requests will see it.

    The path is httpx's request path: dot segments removed and
    percent-encoded, without the query string.
    """
    try:
        parsed = httpx.URL(url)
    except httpx.InvalidURL as exc:
        raise InvalidUrlError(f"Invalid URL {url!r}: {exc}") from exc

    if parsed.scheme not in ("http", "https") or not parsed.host:
        raise InvalidUrlError(f"Invalid URL {url!r}: expected an absolute http(s) URL")
    if parsed.port is not None and parsed.port > 65535:
        raise InvalidUrlError(f"Invalid URL {url!r}: port out of range")

    # netloc has no userinfo and no default port
    path = parsed.raw_path.split(b"?", 1)[0].decode("ascii")
    return _Target(
        scheme=parsed.scheme,
        host=parsed.netloc.decode("ascii"),
        path=path or "/",
    )


def _is_text_body(resp: httpx.Response) -> bool:
    """False for JSON and binary media types. A missing Content-Type is
    accepted since many servers omit it for robots.txt."""
    media_type = resp.headers.get("content-type", "").split(";", 1)[0]
    media_type = media_type.strip().lower()
    if not media_type:
        return True
    if media_type == "application/json" or media_type.endswith("+json"):
        return False
    return media_type.startswith("text/")


def _robots_url(target: _Target) -> str:
    return f"{target.scheme}://{target.host}/robots.txt"


def robots_txt_url(url: str) -> str:
    """Site-root robots.txt URL for ``url``, ignoring its path and query."""
    return _robots_url(_parse_target(url))


class CrawlerAccessProber:
    """Runs robots.txt evaluation and live probes for every roster bot.

    Args:
        settings: Timeouts and redirect cap. Defaults to ``get_settings()``.
        roster: Crawlers to check, in output order.
        transport: Optional httpx transport, mostly for tests.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        roster: tuple[BotDescriptor, ...] = BOTS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.settings = settings or get_settings()
        self.roster = roster
        self.transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            transport=self.transport,
            follow_redirects=True,
            max_redirects=self.settings.max_redirects,
        )

    async def check_access(self, target_url: str) -> AccessCheckResponse:
        """Check ``target_url`` for every crawler in the roster.

        Raises:
            InvalidUrlError: If ``target_url`` is not an absolute http(s) URL.
        """
        target = _parse_target(target_url)
        robots_url = _robots_url(target)

        async with self._client() as client:
            robots_body = await self._fetch_robots_txt(client, robots_url)
            groups = parse_robots_txt(robots_body) if robots_body else []

            results = await asyncio.gather(
                *(
                    self._probe_bot(
                        client, bot, target_url, target.path, groups,
                        robots_body,
                    )
                    for bot in self.roster
                )
            )

        return AccessCheckResponse(
            url=target_url,
            robots_txt_url=robots_url,
            robots_txt_found=robots_body is not None,
            results=list(results),
        )

    async def _fetch_robots_txt(
        self, client: httpx.AsyncClient, url: str
    ) -> str | None:
        """Fetch robots.txt. Returns None if it could not be retrieved or
        the body is not text."""
        try:
            resp = await client.get(url, timeout=self.settings.robots_timeout)
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.debug("robots.txt unavailable at %s: %s", url, exc)
            return None

        if not resp.is_success:
            logger.debug("robots.txt at %s returned %s", url, resp.status_code)
            return None
        if not _is_text_body(resp):
            logger.debug(
                "robots.txt at %s is not text (%s)",
                url, resp.headers.get("content-type"),
            )
            return None
        return resp.text

    async def _probe_bot(
        self,
        client: httpx.AsyncClient,
        bot: BotDescriptor,
        target_url: str,
        path: str,
        groups: list[RuleGroup],
        robots_body: str | None,
    ) -> ProbeResult:
        robots_allowed: RobotsVerdict = UNKNOWN
        if robots_body:
            try:
                robots_allowed = is_path_allowed(groups, bot.token, path)
            except Exception:
                logger.warning(
                    "robots.txt evaluation failed for %s", bot.token,
                    exc_info=True,
                )

        http_status: int | None = None
        ok = False
        error: str | None = None
        try:
            resp = await client.get(
                target_url,
                headers={"User-Agent": bot.ua},
                timeout=self.settings.probe_timeout,
            )
            http_status = resp.status_code
            ok = 200 <= resp.status_code < 400
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            error = str(exc) or type(exc).__name__
            logger.info("Probe as %s failed for %s: %s", bot.name, target_url, error)

        return ProbeResult(
            agent=bot.name,
            user_agent=bot.ua,
            robots_allowed=robots_allowed,
            http_status=http_status,
            ok=ok,
            error=error,
        )


async def check_access(
    target_url: str, settings: Settings | None = None
) -> AccessCheckResponse:
    """Check ``target_url`` against the default crawler roster."""
    return await CrawlerAccessProber(settings).check_access(target_url)
