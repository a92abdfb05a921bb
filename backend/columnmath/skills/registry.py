"""Read-only skill registry mapping skill_tag to contract instance."""

from .base import SkillContract
from .borrowing import BorrowingContract
from .carry_over import CarryOverContract

SKILL_REGISTRY: dict[str, SkillContract] = {
    "carry_over": CarryOverContract(),
    "borrowing": BorrowingContract(),
}


def get_skill(skill_tag: str) -> SkillContract | None:
    return SKILL_REGISTRY.get(skill_tag)
