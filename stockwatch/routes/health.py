from fastapi import APIRouter, Request

router = APIRouter(tags=["health"])

@router.get("/health")
async def health_check(request: Request):
    """Basic health check, including whether the alert monitor is live"""
    monitor = getattr(request.app.state, "monitor", None)
    channel = getattr(request.app.state, "channel", None)
    return {
        "status": "healthy",
        "service": "Stockwatch",
        "monitor_running": bool(monitor and monitor.running),
        "push_channel_connected": bool(channel and channel.connected),
    }
