"""Execute endpoint for DSL programs."""

from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

from api.routes.common import MAX_SOURCE_LENGTH, build_interpreter

router = APIRouter()


class ExecuteRequest(BaseModel):
    """Request body for program execution."""
    source: str = Field(..., max_length=MAX_SOURCE_LENGTH)


class ExecuteResponse(BaseModel):
    """Response body for program execution."""
    success: bool
    execution_time_ms: float
    statement_count: int = 0
    tree: Optional[Dict[str, Any]] = None
    digest: Optional[str] = None
    error: Optional[Dict[str, Any]] = None


@router.post("/execute", response_model=ExecuteResponse)
def execute_program(request: ExecuteRequest):
    """Execute a DSL program and return its render tree."""
    result = build_interpreter().interpret(request.source)
    data = result.to_dict()
    return ExecuteResponse(
        success=data["success"],
        execution_time_ms=data["execution_time_ms"],
        statement_count=data["statement_count"],
        tree=data["tree"],
        digest=data["digest"] or None,
        error=data["error"],
    )
