from datetime import datetime, timezone

from litestar import Controller, Response, get


class HealthController(Controller):
    """Unauthenticated health check for load balancer and k8s probes."""

    path = "/healthz"

    @get("/")
    async def health(self) -> Response:
        return Response(
            content={
                "status": "ok",
                "timestamp": datetime.now(timezone.utc).isoformat(),
            },
            status_code=200,
        )
