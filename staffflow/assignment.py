from dataclasses import dataclass
from typing import Tuple

from .config import ALERT_TOO_MANY_PATIENTS, ALERT_WORKLOAD_TOO_HIGH, SEED_STAFF_PER_UNIT
from .patient import Patient
from .staff import ShiftSchedule, StaffMember


@dataclass(frozen=True)
class Assignment:
    """One staff member joined to the patients they currently hold."""
    staff_id: str
    staff_name: str
    unit: str
    qualifications: Tuple[str, ...]
    patients: Tuple[Patient, ...]
    workload: int
    max_workload: int
    max_patients: int
    is_overloaded: bool
    alert: str
    shift: ShiftSchedule

    @property
    def patient_count(self):
        return len(self.patients)

    @property
    def utilization(self):
        return self.workload / self.max_workload if self.max_workload > 0 else 0.0

    def is_qualified(self, unit):
        return unit in self.qualifications

    def holds(self, patient_id):
        return any(p.id == patient_id for p in self.patients)

    def with_patients(self, patients):
        return build_assignment(self, patients)


def overload_alert(workload, patient_count, max_workload, max_patients):
    """Return (is_overloaded, alert). Patient-count breach wins the message."""
    if patient_count > max_patients:
        return True, ALERT_TOO_MANY_PATIENTS
    if workload > max_workload:
        return True, ALERT_WORKLOAD_TOO_HIGH
    return False, ''


def build_assignment(member, patients):
    """
    Materialize an Assignment for `member` holding `patients`.
    `member` may be a StaffMember or an existing Assignment.
    """
    if isinstance(member, StaffMember):
        staff_id, name = member.id, member.name
    else:
        staff_id, name = member.staff_id, member.staff_name
    held = tuple(p.assigned_to(staff_id) for p in patients)
    workload = sum(p.acuity for p in held)
    is_overloaded, alert = overload_alert(workload, len(held), member.max_workload, member.max_patients)
    return Assignment(
        staff_id=staff_id,
        staff_name=name,
        unit=member.unit,
        qualifications=tuple(member.qualifications),
        patients=held,
        workload=workload,
        max_workload=member.max_workload,
        max_patients=member.max_patients,
        is_overloaded=is_overloaded,
        alert=alert,
        shift=member.shift,
    )


class _Slot:
    """Scratch tracking for one staff member while the solver runs."""
    def __init__(self, member):
        self.member = member
        self.patients = []
        self.workload = 0

    def has_capacity(self):
        return (self.workload < self.member.max_workload
                and len(self.patients) < self.member.max_patients)

    def take(self, patient):
        self.patients.append(patient)
        self.workload += patient.acuity


def _least_loaded(slots):
    best = None
    for slot in slots:
        if best is None or slot.workload < best.workload:
            best = slot
    return best


def assign(patients, staff):
    """
    Greedy skill/workload assignment.

    Most critical patients go first (stable sort, so equal acuity keeps
    input order). Each goes to the qualified staff member with the lowest
    workload who still has workload and head-count room; if nobody qualified
    has room, to anyone with room. Patients nobody can take stay unassigned.
    Returns one Assignment per staff member, in staff order.
    """
    slots = [_Slot(member) for member in staff]
    for patient in sorted(patients, key=lambda p: p.acuity, reverse=True):
        open_slots = [slot for slot in slots if slot.has_capacity()]
        qualified = [slot for slot in open_slots if slot.member.is_qualified(patient.unit)]
        chosen = _least_loaded(qualified) or _least_loaded(open_slots)
        if chosen is not None:
            chosen.take(patient)
    return [build_assignment(slot.member, slot.patients) for slot in slots]


def seed_imbalanced(patients, staff, per_unit=SEED_STAFF_PER_UNIT):
    """
    Deliberately lopsided starting assignments.

    For each unit (in order of first appearance among `patients`), the first
    `per_unit` qualified staff not already holding an earlier unit's patients
    take all of that unit's patients round-robin. Everyone else starts idle.
    A unit with no free qualified staff leaves its patients unassigned.
    """
    by_unit = {}
    for patient in patients:
        by_unit.setdefault(patient.unit, []).append(patient)

    held = {member.id: [] for member in staff}
    used = set()
    for unit, unit_patients in by_unit.items():
        available = [m for m in staff if m.is_qualified(unit) and m.id not in used]
        if not available:
            continue
        chosen = available[:max(1, min(per_unit, len(available)))]
        for index, patient in enumerate(unit_patients):
            member = chosen[index % len(chosen)]
            held[member.id].append(patient)
            used.add(member.id)

    return [build_assignment(member, held[member.id]) for member in staff]
