from fastapi import APIRouter

from siteintel_api.routers.v1 import assistant, documents, economics, routing

v1_router = APIRouter(prefix="/v1")

v1_router.include_router(economics.router)
v1_router.include_router(documents.router)
v1_router.include_router(routing.router)
v1_router.include_router(assistant.router)
