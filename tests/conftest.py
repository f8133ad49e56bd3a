import pytest

from staffflow.assignment import build_assignment
from staffflow.config import SHIFT_MORNING
from staffflow.patient import Patient
from staffflow.staff import StaffMember, build_shift


@pytest.fixture
def make_patient():
    def factory(patient_id, acuity, unit):
        return Patient(
            id=patient_id,
            name=f"Patient {patient_id}",
            acuity=acuity,
            unit=unit,
            condition="Stable",
            required_skills=(unit,),
        )
    return factory


@pytest.fixture
def make_staff():
    def factory(staff_id, qualifications, max_patients=4, max_workload=8, unit=None):
        return StaffMember(
            id=staff_id,
            name=f"Nurse {staff_id}",
            qualifications=tuple(qualifications),
            max_patients=max_patients,
            max_workload=max_workload,
            unit=unit or qualifications[0],
            shift=build_shift(SHIFT_MORNING),
        )
    return factory


@pytest.fixture
def make_assignment(make_staff):
    def factory(staff_id, qualifications, patients=(), max_patients=4, max_workload=8):
        member = make_staff(staff_id, qualifications, max_patients, max_workload)
        return build_assignment(member, list(patients))
    return factory
