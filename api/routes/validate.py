"""Validate endpoint for DSL programs."""

import logging

from fastapi import APIRouter
from pydantic import BaseModel, Field
from typing import Any, Dict, Optional

from api.routes.common import MAX_SOURCE_LENGTH, build_interpreter
from safedsl.errors import DSLError, SecurityError
from safedsl.runtime.interpreter import statement_count
from safedsl.syntax.ast import count_calls

logger = logging.getLogger(__name__)

router = APIRouter()


class ValidateRequest(BaseModel):
    """Request body for program validation."""
    source: str = Field(..., max_length=MAX_SOURCE_LENGTH)


class ValidateResponse(BaseModel):
    """Response body for program validation."""
    valid: bool
    statement_count: int = 0
    call_count: int = 0
    error: Optional[Dict[str, Any]] = None


@router.post("/validate", response_model=ValidateResponse)
def validate_program(request: ValidateRequest):
    """Tokenize and parse a program without executing it."""
    try:
        ast = build_interpreter().parse(request.source)
    except SecurityError as e:
        logger.warning("Rejected program: %s", e)
        return ValidateResponse(valid=False, error=e.to_dict())
    except DSLError as e:
        return ValidateResponse(valid=False, error=e.to_dict())

    return ValidateResponse(
        valid=True,
        statement_count=statement_count(ast),
        call_count=count_calls(ast),
    )
