import random
from dataclasses import dataclass, replace
from typing import Optional, Tuple

from .config import (
    BREAK_PLAN, SHIFT_AFTERNOON, SHIFT_DEFINITIONS, SHIFT_MORNING, SHIFT_NIGHT,
    UNIT_ER, UNIT_ICU, UNIT_MEDSURG, UNIT_PEDS,
)

MINUTES_PER_DAY = 24 * 60


@dataclass(frozen=True)
class Break:
    type: str
    start_time: str
    end_time: str
    duration: int  # minutes


@dataclass(frozen=True)
class ShiftSchedule:
    shift_type: str
    start_time: str
    end_time: str
    breaks: Tuple[Break, ...]
    hours_worked: int


@dataclass(frozen=True)
class StaffMember:
    """
    A nurse on the fixed roster.
    max_workload is capacity in acuity points, max_patients is a head count.
    Only `unit` ever changes while a simulation runs.
    """
    id: str
    name: str
    qualifications: Tuple[str, ...]
    max_patients: int
    max_workload: int
    unit: str
    shift: ShiftSchedule

    def is_qualified(self, unit):
        return unit in self.qualifications

    def reassigned_to(self, unit):
        return replace(self, unit=unit)


# ---------------------------------------------------------
# Shift helpers
# ---------------------------------------------------------

def add_minutes(time_str, minutes):
    """Add minutes to an "HH:MM" string, wrapping at midnight."""
    hours, mins = (int(part) for part in time_str.split(':'))
    total = (hours * 60 + mins + minutes) % MINUTES_PER_DAY
    return f"{total // 60:02d}:{total % 60:02d}"


def build_shift(shift_type):
    definition = SHIFT_DEFINITIONS[shift_type]
    start = definition['start']
    breaks = []
    for break_type, offset, duration in BREAK_PLAN:
        break_start = add_minutes(start, offset)
        breaks.append(Break(break_type, break_start, add_minutes(break_start, duration), duration))
    return ShiftSchedule(
        shift_type=shift_type,
        start_time=start,
        end_time=definition['end'],
        breaks=tuple(breaks),
        hours_worked=definition['hours'],
    )


def generate_shift_schedule(rng=random):
    return build_shift(rng.choice(list(SHIFT_DEFINITIONS)))


def format_time(time_str):
    hours, minutes = time_str.split(':')
    hour = int(hours)
    suffix = 'PM' if hour >= 12 else 'AM'
    return f"{hour % 12 or 12}:{minutes} {suffix}"


def format_shift_schedule(schedule):
    return f"{format_time(schedule.start_time)} - {format_time(schedule.end_time)}"


def is_on_break(schedule, current_time) -> Optional[Break]:
    """Return the break covering current_time ("HH:MM"), if any."""
    for period in schedule.breaks:
        if period.start_time <= current_time < period.end_time:
            return period
    return None


def is_currently_working(schedule, current_time):
    if schedule.start_time > schedule.end_time:
        # wraps midnight
        return current_time >= schedule.start_time or current_time < schedule.end_time
    return schedule.start_time <= current_time < schedule.end_time


# ---------------------------------------------------------
# Roster
# ---------------------------------------------------------

def _member(staff_id, name, qualifications, max_patients, max_workload, unit, shift_type):
    return StaffMember(
        id=staff_id,
        name=name,
        qualifications=tuple(qualifications),
        max_patients=max_patients,
        max_workload=max_workload,
        unit=unit,
        shift=build_shift(shift_type),
    )


ROSTER = (
    _member('nurse-001', 'Sarah Johnson', [UNIT_ICU, UNIT_ER], 3, 8, UNIT_ICU, SHIFT_MORNING),
    _member('nurse-002', 'Michael Chen', [UNIT_ICU, UNIT_MEDSURG], 4, 9, UNIT_ICU, SHIFT_AFTERNOON),
    _member('nurse-003', 'Emma Rodriguez', [UNIT_ER, UNIT_MEDSURG], 5, 10, UNIT_ER, SHIFT_MORNING),
    _member('nurse-004', 'James Wilson', [UNIT_ER, UNIT_ICU], 4, 8, UNIT_ER, SHIFT_NIGHT),
    _member('nurse-005', 'Lisa Thompson', [UNIT_MEDSURG, UNIT_PEDS], 4, 8, UNIT_MEDSURG, SHIFT_AFTERNOON),
    _member('nurse-006', 'David Martinez', [UNIT_PEDS, UNIT_MEDSURG], 3, 7, UNIT_PEDS, SHIFT_MORNING),
    _member('nurse-007', 'Amanda Lee', [UNIT_ICU, UNIT_ER, UNIT_MEDSURG], 4, 9, UNIT_ICU, SHIFT_NIGHT),
    _member('nurse-008', 'Robert Garcia', [UNIT_MEDSURG, UNIT_ER], 5, 10, UNIT_MEDSURG, SHIFT_MORNING),
    _member('nurse-009', 'Jennifer Brown', [UNIT_PEDS, UNIT_MEDSURG], 4, 8, UNIT_PEDS, SHIFT_AFTERNOON),
    _member('nurse-010', 'Christopher Davis', [UNIT_ER, UNIT_ICU], 3, 8, UNIT_ER, SHIFT_AFTERNOON),
)


def get_staff_members():
    """Fresh list of the roster. Members are immutable, so a shallow copy is enough."""
    return list(ROSTER)


def get_staff_by_id(staff_id):
    for member in ROSTER:
        if member.id == staff_id:
            return member
    return None


def get_staff_by_skill(unit):
    return [member for member in ROSTER if member.is_qualified(unit)]
