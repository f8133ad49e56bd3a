import random

import pytest

from staffflow.config import CONDITIONS, UNIT_ER, UNIT_ICU, UNIT_MEDSURG, UNIT_PEDS, UNITS
from staffflow.population import PopulationGenerator
from staffflow.utils import Distribution, generate_unique_names


@pytest.fixture
def generator():
    return PopulationGenerator(random.Random(42))


def test_initial_population_round_robin(generator):
    patients = generator.initial_population(9)

    assert [p.unit for p in patients] == [UNITS[i % 4] for i in range(9)]
    assert len({p.id for p in patients}) == 9
    for p in patients:
        assert 1 <= p.acuity <= 5
        assert p.required_skills == (p.unit,)
        assert p.condition in CONDITIONS[p.acuity]
        assert p.assigned_staff_id is None


def test_ids_stay_unique_across_calls(generator):
    first = generator.initial_population(5)
    second = generator.admit(randomness=10.0)
    ids = [p.id for p in first + second]
    assert len(ids) == len(set(ids))


def test_zero_randomness_freezes_churn(generator):
    patients = generator.initial_population(20)

    remaining, discharged = generator.discharge(patients, randomness=0.0)
    assert remaining == patients
    assert discharged == []
    assert generator.admit(randomness=0.0) == []
    assert generator.drift_acuity(patients, randomness=0.0) == patients
    assert generator.transfer_units(patients, randomness=0.0) == patients


def test_certain_admission_admits_one_to_three(generator):
    for _ in range(20):
        admitted = generator.admit(randomness=10.0)
        assert 1 <= len(admitted) <= 3
        assert all(p.unit in UNITS for p in admitted)


def test_drift_moves_acuity_by_one_within_bounds(generator):
    patients = generator.initial_population(40)

    drifted = generator.drift_acuity(patients, randomness=10.0)

    for before, after in zip(patients, drifted):
        assert after.id == before.id
        assert 1 <= after.acuity <= 5
        assert abs(after.acuity - before.acuity) <= 1
        if before.acuity == 3:
            assert abs(after.acuity - before.acuity) == 1
        assert after.condition in CONDITIONS[after.acuity]


def test_certain_discharge_empties_ward(generator):
    patients = generator.initial_population(10)
    remaining, discharged = generator.discharge(patients, randomness=100.0)
    assert remaining == []
    assert len(discharged) == 10


def test_transfer_destination_by_acuity(generator, make_patient):
    assert generator.transfer_destination(make_patient('a', 5, UNIT_PEDS)) == UNIT_ICU
    assert generator.transfer_destination(make_patient('b', 4, UNIT_ER)) == UNIT_ICU
    assert generator.transfer_destination(make_patient('c', 1, UNIT_ICU)) == UNIT_MEDSURG
    assert generator.transfer_destination(make_patient('d', 2, UNIT_ICU)) in UNITS


def test_transfer_updates_required_skills(generator, make_patient):
    moved = generator.transfer_units([make_patient('a', 5, UNIT_PEDS)], randomness=100.0)[0]
    assert moved.unit == UNIT_ICU
    assert moved.required_skills == (UNIT_ICU,)


def test_distribution_normalizes():
    dist = Distribution({'x': 2, 'y': 2})
    assert dist.probabilities == [0.5, 0.5]
    assert dist.sample(random.Random(0)) in ('x', 'y')


def test_unique_names():
    names = generate_unique_names(50, random.Random(1))
    assert len(names) == 50
    assert len(set(names)) == 50
    with pytest.raises(ValueError):
        generate_unique_names(10 ** 6)
