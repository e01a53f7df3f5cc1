"""Health check schemas."""

from typing import Dict, Optional

from pydantic import BaseModel


class HealthCheckResponse(BaseModel):
    """Status of the data store and the cache backing the Q&A API."""

    status: str
    environment: str
    database: str
    redis: Optional[str] = None
    services: Dict[str, str] = {}
