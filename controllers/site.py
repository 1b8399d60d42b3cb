"""Root-level endpoints that keep scanners and crawlers quiet."""

from litestar import Controller, get
from litestar.enums import MediaType
from litestar.status_codes import HTTP_204_NO_CONTENT

# This API is not meant to be indexed.
ROBOTS_TXT = "User-agent: *\nDisallow: /"


class SiteController(Controller):
    path = "/"

    @get("/", media_type=MediaType.TEXT)
    async def index(self) -> str:
        return "Bot access check API is running"

    @get("/robots.txt", media_type=MediaType.TEXT)
    async def robots_txt(self) -> str:
        return ROBOTS_TXT

    @get("/favicon.ico", status_code=HTTP_204_NO_CONTENT)
    async def favicon(self) -> None:
        return None
