from fastapi import APIRouter

from workrules.api.v1.analyze import router as analyze_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(analyze_router)


@api_v1_router.get("/health")
async def health():
    return {"status": "ok"}
