from __future__ import annotations

from fastapi import APIRouter

router = APIRouter(tags=["Health"])


@router.get("/health")
def health_check() -> dict:
    """Liveness probe.

    Does not touch the store, so it stays green while the store is
    unreachable or unconfigured.
    """

    return {"status": "ok", "service": "love-wall"}
