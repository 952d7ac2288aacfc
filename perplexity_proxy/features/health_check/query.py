from pydantic import BaseModel
from typing import Dict, Literal

ServiceState = Literal["up", "down"]

class HealthCheckResponse(BaseModel):
    """Overall status plus the reachability of Perplexity and Supabase auth."""
    status: Literal["ok", "error"]
    services: Dict[str, ServiceState]
