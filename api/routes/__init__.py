"""
API Routes Package

Route handlers organized by feature:
- evaluation.py: REST endpoint evaluating detector signals directly
- capture.py: WebSocket endpoint running detection + decision on frames
"""

from api.routes.evaluation import router as evaluation_router
from api.routes.capture import router as capture_router

__all__ = [
    "evaluation_router",
    "capture_router",
]
