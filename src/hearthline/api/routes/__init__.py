"""
API routes for Hearthline.

Available routers:
- health: Health check endpoint
- metrics: Prometheus scrape endpoint
- messages: Message submission
- mediation: De-escalation tips
- verification: Thread hash chain verification
"""

from hearthline.api.routes.health import router as health_router
from hearthline.api.routes.mediation import router as mediation_router
from hearthline.api.routes.messages import router as messages_router
from hearthline.api.routes.metrics import router as metrics_router
from hearthline.api.routes.verification import router as verification_router

__all__: list[str] = [
    "health_router",
    "mediation_router",
    "messages_router",
    "metrics_router",
    "verification_router",
]
