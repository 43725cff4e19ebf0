"""Capabilities endpoint listing the standard context's operations."""

from fastapi import APIRouter

from safedsl.components import StandardContext

router = APIRouter()


@router.get("/capabilities")
async def list_capabilities():
    """Operations and element modifiers available to programs."""
    return StandardContext.describe()
