"""
API v1 Router
汇总所有 API 路由
"""

from fastapi import APIRouter

from quickanswer.api.v1.assistant import router as assistant_router
from quickanswer.api.v1.ws_session import router as ws_router  # WebSocket session

api_router = APIRouter()

# Include all routers
api_router.include_router(assistant_router)
api_router.include_router(ws_router)
