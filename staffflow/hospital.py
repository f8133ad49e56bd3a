import logging
import math
import random
from dataclasses import dataclass, field, replace
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional, Tuple

import simpy

from .assignment import Assignment, assign, seed_imbalanced
from .config import (
    CONVERGENCE_TICKS, DEFAULT_PATIENT_COUNT, DEFAULT_UNIT_CAPACITY, GAP_THRESHOLD_SHRINK,
    GAP_THRESHOLD_START, HISTORY_LIMIT, MIN_DONOR_STAFF, RANDOMNESS_DECAY,
    SUGGESTIONS_BASE, SUGGESTIONS_GROWTH, TICK_INTERVAL, UNIT_DONOR_RATIO,
    UNIT_OVERLOAD_RATIO, UNITS,
)
from .metrics import balance_metric, simulation_stats
from .patient import Patient
from .population import PopulationGenerator
from .rebalancer import apply_suggestion, suggest
from .recommendations import generate_recommendations
from .staff import ROSTER, StaffMember

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StaffUtilization:
    utilization: float
    staff_name: str


@dataclass(frozen=True)
class WorkloadSnapshot:
    tick: int
    staff_workloads: Mapping[str, StaffUtilization]


@dataclass(frozen=True)
class SimulationState:
    patients: Tuple[Patient, ...]
    assignments: Tuple[Assignment, ...]
    staff: Tuple[StaffMember, ...]
    tick: int = 0
    is_running: bool = False
    last_update: datetime = field(default_factory=datetime.now)
    workload_history: Tuple[WorkloadSnapshot, ...] = ()


# ---------------------------------------------------------
# Convergence schedule
# ---------------------------------------------------------

def convergence_factor(tick):
    return min(tick / CONVERGENCE_TICKS, 1.0)


def randomness_factor(convergence):
    """Multiplier on every churn probability: 1.0 at the start, 0.3 once converged."""
    return 1 - RANDOMNESS_DECAY * convergence


def suggestion_budget(convergence):
    return math.ceil(SUGGESTIONS_BASE + SUGGESTIONS_GROWTH * convergence)


def gap_threshold(convergence):
    return GAP_THRESHOLD_START - GAP_THRESHOLD_SHRINK * convergence


# ---------------------------------------------------------
# Staff unit reassignment
# ---------------------------------------------------------

def _unit_load(total_acuity, members):
    """(average workload per staff, average capacity) for a unit."""
    if not members:
        return 0, DEFAULT_UNIT_CAPACITY
    capacity = sum(m.max_workload for m in members) / len(members)
    return total_acuity / len(members), capacity


def reassign_staff(patients, staff):
    """
    Pull staff toward units under demand pressure.

    A unit whose average workload per staff member is above 70% of its
    average capacity takes one qualified staff member from the first other
    unit (in UNITS order) that is below 40% and has at least two staff.
    At most one move per overloaded unit. Returns (staff, moves) where moves
    is a list of (staff_id, from_unit, to_unit).
    """
    demand = {unit: [0, 0] for unit in UNITS}
    for patient in patients:
        entry = demand.setdefault(patient.unit, [0, 0])
        entry[0] += 1
        entry[1] += patient.acuity

    staff = list(staff)
    by_unit = {unit: [] for unit in UNITS}
    for index, member in enumerate(staff):
        by_unit.setdefault(member.unit, []).append(index)

    moves = []
    for unit in UNITS:
        count, acuity = demand[unit]
        load, capacity = _unit_load(acuity, [staff[i] for i in by_unit[unit]])
        if count == 0 or load <= capacity * UNIT_OVERLOAD_RATIO:
            continue

        for donor in UNITS:
            if donor == unit or len(by_unit[donor]) < MIN_DONOR_STAFF:
                continue
            donor_load, donor_capacity = _unit_load(demand[donor][1], [staff[i] for i in by_unit[donor]])
            if donor_load >= donor_capacity * UNIT_DONOR_RATIO:
                continue
            candidate = next((i for i in by_unit[donor] if staff[i].is_qualified(unit)), None)
            if candidate is None:
                continue
            staff[candidate] = staff[candidate].reassigned_to(unit)
            by_unit[donor].remove(candidate)
            by_unit[unit].append(candidate)
            moves.append((staff[candidate].id, donor, unit))
            break

    return staff, moves


def _link_patients(patients, assignments):
    holder = {p.id: a.staff_id for a in assignments for p in a.patients}
    return tuple(p.assigned_to(holder.get(p.id)) for p in patients)


def _snapshot(tick, assignments):
    return WorkloadSnapshot(
        tick=tick,
        staff_workloads=MappingProxyType({
            a.staff_id: StaffUtilization(a.utilization, a.staff_name) for a in assignments
        }),
    )


class StaffingSimulation:
    """
    Owns one simulation. Every mutation goes through this object; the state
    it hands out is an immutable snapshot that later calls replace.

    Calls are not synchronized. Run at most one tick at a time per instance.
    """
    def __init__(self, roster=None, seed=None):
        self.roster = tuple(roster) if roster is not None else ROSTER
        self.rng = random.Random(seed)
        self.population = PopulationGenerator(self.rng)
        self.state: Optional[SimulationState] = None

    def initialize(self, patient_count=DEFAULT_PATIENT_COUNT):
        if patient_count < 0:
            raise ValueError(f"patient_count must be non-negative, got {patient_count}")
        patients = self.population.initial_population(patient_count)
        staff = tuple(self.roster)
        assignments = seed_imbalanced(patients, staff)
        self.state = SimulationState(
            patients=_link_patients(patients, assignments),
            assignments=tuple(assignments),
            staff=staff,
            tick=0,
            is_running=True,
            last_update=datetime.now(),
            workload_history=(),
        )
        logger.info("Simulation initialized: %d patients, %d staff, balance %s",
                    patient_count, len(staff), balance_metric(assignments).status)
        return self.state

    def reset(self, patient_count=DEFAULT_PATIENT_COUNT):
        logger.info("Simulation reset")
        return self.initialize(patient_count)

    def get_state(self):
        return self.state

    def start(self):
        if self.state is None:
            return None
        if not self.state.is_running:
            self.state = replace(self.state, is_running=True)
            logger.info("Simulation started at tick %d", self.state.tick)
        return self.state

    def stop(self):
        if self.state is None:
            return None
        self.state = replace(self.state, is_running=False)
        logger.info("Simulation stopped at tick %d", self.state.tick)
        return self.state

    def tick(self):
        """Advance one step. No-op while stopped or before initialize()."""
        state = self.state
        if state is None or not state.is_running:
            return state

        tick = state.tick + 1
        convergence = convergence_factor(tick)
        randomness = randomness_factor(convergence)
        population = self.population

        # 1-4. Patient churn
        patients, discharged = population.discharge(state.patients, randomness)
        admitted = population.admit(randomness)
        patients = patients + admitted
        patients = population.drift_acuity(patients, randomness)
        patients = population.transfer_units(patients, randomness)

        # 5. Staff follow demand
        staff, moves = reassign_staff(patients, state.staff)
        for staff_id, donor, unit in moves:
            logger.debug("Tick %d: %s reassigned %s -> %s", tick, staff_id, donor, unit)

        # 6-8. Assign, then rebalance
        assignments = assign(patients, staff)
        assignments, applied = self._auto_rebalance(assignments, convergence)

        # 9. History
        history = (state.workload_history + (_snapshot(tick, assignments),))[-HISTORY_LIMIT:]

        self.state = SimulationState(
            patients=_link_patients(patients, assignments),
            assignments=tuple(assignments),
            staff=tuple(staff),
            tick=tick,
            is_running=True,
            last_update=datetime.now(),
            workload_history=history,
        )
        logger.debug("Tick %d: -%d +%d patients, %d transfers applied, balance %s",
                     tick, len(discharged), len(admitted), len(applied),
                     balance_metric(assignments).status)
        return self.state

    def _auto_rebalance(self, assignments, convergence):
        budget = suggestion_budget(convergence)
        threshold = gap_threshold(convergence)
        applied = []
        for suggestion in suggest(assignments)[:budget]:
            if suggestion.workload_gap > threshold:
                assignments = apply_suggestion(assignments, suggestion)
                applied.append(suggestion)
        return assignments, applied

    def run(self, ticks, interval=TICK_INTERVAL, until_status=None):
        """
        Drive `ticks` ticks on a simpy clock, one every `interval` time units.
        Stops early if the simulation is stopped or the balance reaches
        `until_status`.
        """
        if self.state is None:
            return None
        env = simpy.Environment()
        env.process(self._clock(env, ticks, interval, until_status))
        env.run()
        return self.state

    def _clock(self, env, ticks, interval, until_status):
        for _ in range(ticks):
            yield env.timeout(interval)
            if not self.state.is_running:
                break
            self.tick()
            if until_status is not None and self.balance().status == until_status:
                logger.info("Reached %s at tick %d (t=%.1f)", until_status, self.state.tick, env.now)
                break

    # ---------------------------------------------------------
    # Read-only views
    # ---------------------------------------------------------

    def balance(self):
        assignments = self.state.assignments if self.state is not None else ()
        return balance_metric(assignments)

    def stats(self):
        if self.state is None:
            return None
        return simulation_stats(self.state)

    def suggestions(self):
        if self.state is None:
            return []
        return suggest(self.state.assignments)

    def recommendations(self, narrator=None):
        if self.state is None:
            return []
        return generate_recommendations(self.state.assignments, self.suggestions(), narrator)
