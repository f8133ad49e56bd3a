import random
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import CONDITIONS, MAX_ACUITY, MIN_ACUITY


def condition_for_acuity(acuity, rng=random):
    """Pick a narrative condition for an acuity level. Cosmetic only."""
    options = CONDITIONS.get(acuity, CONDITIONS[3])
    return rng.choice(options)


def clamp_acuity(acuity):
    return max(MIN_ACUITY, min(MAX_ACUITY, acuity))


@dataclass(frozen=True)
class Patient:
    id: str
    name: str
    acuity: int
    unit: str
    condition: str
    required_skills: Tuple[str, ...] = ()
    assigned_staff_id: Optional[str] = None

    def with_acuity(self, acuity, condition):
        return replace(self, acuity=acuity, condition=condition)

    def moved_to(self, unit):
        return replace(self, unit=unit, required_skills=(unit,))

    def assigned_to(self, staff_id):
        if staff_id == self.assigned_staff_id:
            return self
        return replace(self, assigned_staff_id=staff_id)

    def __repr__(self):
        return f"Patient({self.id}, {self.unit}, acuity={self.acuity})"
