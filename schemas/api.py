"""
Pydantic schemas shared by every API route
"""

from pydantic import BaseModel, Field
from typing import Optional, Dict, Any
from datetime import datetime


def reject_null(v):
    """
    Partial updates may omit a field but not null it.

    Used as a pre validator on Update schemas for columns that are NOT NULL.
    """
    if v is None:
        raise ValueError("field may be omitted but cannot be null")
    return v


class HealthCheckResponse(BaseModel):
    """Health check response model"""
    status: str = Field(..., description="Overall system status: healthy or unhealthy")
    timestamp: datetime = Field(default_factory=datetime.utcnow)
    database_connected: bool
    record_counts: Dict[str, int] = Field(default_factory=dict)

    class Config:
        json_schema_extra = {
            "example": {
                "status": "healthy",
                "timestamp": "2024-01-15T10:30:00Z",
                "database_connected": True,
                "record_counts": {
                    "companies": 12,
                    "checklists": 4,
                    "processing_logs": 18230
                }
            }
        }


class ErrorResponse(BaseModel):
    """Standard error response"""
    error: str
    detail: Optional[str] = None
    context: Dict[str, Any] = Field(default_factory=dict)
    timestamp: datetime = Field(default_factory=datetime.utcnow)

    class Config:
        json_schema_extra = {
            "example": {
                "error": "NotFoundError",
                "detail": "Checklist 3f2b... not found",
                "context": {"collection": "checklists"},
                "timestamp": "2024-01-15T10:30:00Z"
            }
        }
