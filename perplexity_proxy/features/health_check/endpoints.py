from fastapi import APIRouter, Depends
from .handler import HealthCheckHandler
from .query import HealthCheckResponse

router = APIRouter()

@router.get("/health", response_model=HealthCheckResponse, tags=["Monitoring"])
async def health_check(handler: HealthCheckHandler = Depends(HealthCheckHandler)) -> HealthCheckResponse:
    """Probes the Perplexity API and Supabase auth; 200 even when one is down."""
    return await handler.handle()
