from dataclasses import dataclass

from .config import UNDERUTILIZED_RATIO


@dataclass(frozen=True)
class RebalancingSuggestion:
    from_staff_id: str
    from_staff_name: str
    to_staff_id: str
    to_staff_name: str
    patient_id: str
    patient_name: str
    reason: str
    expected_from_workload: int
    expected_to_workload: int
    skill_match: bool

    @property
    def workload_gap(self):
        return abs(self.expected_from_workload - self.expected_to_workload)


class _Scratch:
    """Provisional load of a candidate target within one suggest() call."""
    def __init__(self, assignment):
        self.assignment = assignment
        self.workload = assignment.workload
        self.patient_count = assignment.patient_count

    def is_underutilized(self):
        a = self.assignment
        return (self.workload < a.max_workload * UNDERUTILIZED_RATIO
                and self.patient_count < a.max_patients)


def suggest(assignments):
    """
    Propose single-patient transfers away from overloaded staff.

    For each overloaded assignment, the candidate pool is every other staff
    member under 60% of their workload capacity with head-count room. Each of
    the overloaded member's patients goes to the first skill-matched
    candidate, else the first candidate. A suggestion is kept only if the
    target stays under capacity; kept suggestions are booked against the
    target's scratch load so later ones in the same call see it.
    """
    scratch = {a.staff_id: _Scratch(a) for a in assignments}
    suggestions = []

    for overloaded in assignments:
        if not overloaded.is_overloaded:
            continue
        pool = [
            scratch[a.staff_id] for a in assignments
            if a.staff_id != overloaded.staff_id and scratch[a.staff_id].is_underutilized()
        ]
        if not pool:
            continue

        for patient in overloaded.patients:
            matched = [s for s in pool if s.assignment.is_qualified(patient.unit)]
            target = matched[0] if matched else pool[0]

            expected_from = overloaded.workload - patient.acuity
            expected_to = target.workload + patient.acuity
            if expected_from >= overloaded.workload or expected_to >= target.assignment.max_workload:
                continue

            to = target.assignment
            suggestions.append(RebalancingSuggestion(
                from_staff_id=overloaded.staff_id,
                from_staff_name=overloaded.staff_name,
                to_staff_id=to.staff_id,
                to_staff_name=to.staff_name,
                patient_id=patient.id,
                patient_name=patient.name,
                reason=(f"Move {patient.name} (acuity {patient.acuity}) from "
                        f"{overloaded.staff_name} to {to.staff_name} to balance workload"),
                expected_from_workload=expected_from,
                expected_to_workload=expected_to,
                skill_match=to.is_qualified(patient.unit),
            ))
            target.workload += patient.acuity
            target.patient_count += 1

    return suggestions


def apply_suggestion(assignments, suggestion):
    """
    Return a new assignment list with the suggested patient moved.
    Unknown staff or a patient the source does not hold leaves the list unchanged.
    """
    source = next((a for a in assignments if a.staff_id == suggestion.from_staff_id), None)
    if source is None or not any(a.staff_id == suggestion.to_staff_id for a in assignments):
        return list(assignments)
    patient = next((p for p in source.patients if p.id == suggestion.patient_id), None)
    if patient is None or suggestion.from_staff_id == suggestion.to_staff_id:
        return list(assignments)

    updated = []
    for a in assignments:
        if a.staff_id == suggestion.from_staff_id:
            a = a.with_patients([p for p in a.patients if p.id != patient.id])
        elif a.staff_id == suggestion.to_staff_id:
            a = a.with_patients(list(a.patients) + [patient])
        updated.append(a)
    return updated
