"""Liveness and readiness endpoints for the safedsl service."""

import logging

from fastapi import APIRouter

from api.routes.common import build_interpreter
from safedsl import __version__
from safedsl.components import StandardContext
from safedsl.errors import DSLError, SecurityError

logger = logging.getLogger(__name__)

router = APIRouter()

# Exercises tokenizer, parser, policy and executor in one pass.
READINESS_PROGRAM = 'vstack { text("ready") }'
DENIED_PROGRAM = 'system("true")'


@router.get("/health")
async def health_check():
    """Liveness: the process answers."""
    return {
        "status": "healthy",
        "version": __version__,
        "service": "safedsl-api",
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness: a trivial program runs and a denied one is refused."""
    interpreter = build_interpreter()
    executed = interpreter.interpret(READINESS_PROGRAM)
    try:
        interpreter.parse(DENIED_PROGRAM)
    except SecurityError:
        refused = True
    except DSLError:
        refused = False
    else:
        refused = False

    checks = {
        "capabilities": len(StandardContext.capabilities) > 0,
        "interpreter": executed.success,
        "security_policy": refused,
    }
    ready = all(checks.values())
    if not ready:
        logger.warning("Readiness check failed: %s", checks)
    return {
        "ready": ready,
        "checks": checks,
        "digest": executed.digest or None,
    }
