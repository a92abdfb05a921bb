from fastapi import APIRouter

from columnmath.skills.registry import SKILL_REGISTRY

router = APIRouter(tags=["health"])


@router.get("/health")
def health():
    return {"status": "ok", "lessons": sorted(SKILL_REGISTRY)}
