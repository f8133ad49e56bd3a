from dataclasses import dataclass, field
from typing import Dict

import numpy as np

from .config import (
    IDEAL_MAX_COUNT, IDEAL_MAX_STD, STATS_BUSY_RATIO, STATUS_IDEAL, STATUS_INADEQUATE,
    STATUS_SUFFICIENT, SUFFICIENT_MAX_COUNT, SUFFICIENT_MAX_STD,
)


@dataclass(frozen=True)
class BalanceMetric:
    status: str
    std_dev: float
    mean: float
    max_count: int


@dataclass(frozen=True)
class SimulationStats:
    total_patients: int
    patients_by_unit: Dict[str, int] = field(default_factory=dict)
    average_acuity: float = 0.0
    overloaded_staff: int = 0
    total_staff: int = 0
    tick: int = 0


def classify_balance(max_count, std_dev):
    """
    IDEAL:      nobody above 2 patients and tight spread
    SUFFICIENT: nobody above 4 patients and moderate spread
    INADEQUATE: anything else
    """
    if max_count <= IDEAL_MAX_COUNT and std_dev <= IDEAL_MAX_STD:
        return STATUS_IDEAL
    if max_count <= SUFFICIENT_MAX_COUNT and std_dev <= SUFFICIENT_MAX_STD:
        return STATUS_SUFFICIENT
    return STATUS_INADEQUATE


def balance_metric(assignments):
    """Balance of patient counts across staff (population std dev)."""
    if not assignments:
        return BalanceMetric(STATUS_IDEAL, 0.0, 0.0, 0)
    counts = np.array([a.patient_count for a in assignments], dtype=float)
    std_dev = float(np.std(counts))
    max_count = int(counts.max())
    return BalanceMetric(
        status=classify_balance(max_count, std_dev),
        std_dev=std_dev,
        mean=float(counts.mean()),
        max_count=max_count,
    )


def simulation_stats(state):
    patients_by_unit = {}
    for patient in state.patients:
        patients_by_unit[patient.unit] = patients_by_unit.get(patient.unit, 0) + 1

    if state.patients:
        average_acuity = round(float(np.mean([p.acuity for p in state.patients])), 1)
    else:
        average_acuity = 0.0

    busy = sum(1 for a in state.assignments if a.workload > a.max_workload * STATS_BUSY_RATIO)
    return SimulationStats(
        total_patients=len(state.patients),
        patients_by_unit=patients_by_unit,
        average_acuity=average_acuity,
        overloaded_staff=busy,
        total_staff=len(state.assignments),
        tick=state.tick,
    )
