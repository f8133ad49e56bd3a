"""
Population Generator.

Creates patients and applies the per-tick stochastic churn: discharges,
admissions, acuity drift and unit transfers. Every function takes the
`rng` to draw from and a `randomness` multiplier (1.0 = base rates) so the
controller can shrink the churn as the simulation converges.
"""
import itertools
import logging
import random

from .config import (
    ACUITY_DRIFT_CHANCE, ADMISSION_BATCH, ADMISSION_CHANCE, ADMISSION_UNIT_WEIGHTS,
    CRITICAL_TRANSFER_ACUITY, CRITICAL_TRANSFER_UNIT, DISCHARGE_RATES,
    MAX_ACUITY, MIN_ACUITY, STABLE_TRANSFER_ACUITY, STABLE_TRANSFER_UNIT,
    TRANSFER_CHANCE, UNITS,
)
from .patient import Patient, clamp_acuity, condition_for_acuity
from .utils import Distribution, generate_random_name

logger = logging.getLogger(__name__)

ADMISSION_UNITS = Distribution(ADMISSION_UNIT_WEIGHTS)


class PopulationGenerator:
    def __init__(self, rng=None):
        self.rng = rng if rng is not None else random.Random()
        self._ids = itertools.count(1)

    def next_id(self):
        return f"patient-{next(self._ids):04d}"

    def new_patient(self, unit, acuity=None):
        if acuity is None:
            acuity = self.rng.randint(MIN_ACUITY, MAX_ACUITY)
        return Patient(
            id=self.next_id(),
            name=generate_random_name(self.rng),
            acuity=acuity,
            unit=unit,
            condition=condition_for_acuity(acuity, self.rng),
            required_skills=(unit,),
        )

    def initial_population(self, count):
        """Patients spread round-robin across the units, random acuity."""
        return [self.new_patient(UNITS[i % len(UNITS)]) for i in range(count)]

    def discharge(self, patients, randomness=1.0):
        """Return (remaining, discharged)."""
        remaining, discharged = [], []
        for patient in patients:
            chance = DISCHARGE_RATES[patient.acuity] * randomness
            if self.rng.random() < chance:
                discharged.append(patient)
            else:
                remaining.append(patient)
        return remaining, discharged

    def admit(self, randomness=1.0):
        if self.rng.random() >= ADMISSION_CHANCE * randomness:
            return []
        count = self.rng.randint(*ADMISSION_BATCH)
        return [self.new_patient(ADMISSION_UNITS.sample(self.rng)) for _ in range(count)]

    def drift_acuity(self, patients, randomness=1.0):
        chance = ACUITY_DRIFT_CHANCE * randomness
        drifted = []
        for patient in patients:
            if self.rng.random() < chance:
                change = -1 if self.rng.random() < 0.5 else 1
                acuity = clamp_acuity(patient.acuity + change)
                patient = patient.with_acuity(acuity, condition_for_acuity(acuity, self.rng))
            drifted.append(patient)
        return drifted

    def transfer_units(self, patients, randomness=1.0):
        chance = TRANSFER_CHANCE * randomness
        moved = []
        for patient in patients:
            if self.rng.random() < chance:
                unit = self.transfer_destination(patient)
                if unit != patient.unit:
                    logger.debug("Transfer %s: %s -> %s", patient.id, patient.unit, unit)
                    patient = patient.moved_to(unit)
            moved.append(patient)
        return moved

    def transfer_destination(self, patient):
        if patient.acuity >= CRITICAL_TRANSFER_ACUITY:
            return CRITICAL_TRANSFER_UNIT
        if patient.acuity == STABLE_TRANSFER_ACUITY:
            return STABLE_TRANSFER_UNIT
        return self.rng.choice(UNITS)
