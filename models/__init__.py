from models.bot_access import (
    AccessCheckResponse,
    BotAccessCheckRequest,
    ProbeResult,
)

__all__ = ["AccessCheckResponse", "BotAccessCheckRequest", "ProbeResult"]
