import uuid

import pytest

from campus.exceptions import CapacityExceeded, DuplicateEnrollment, NotFound, ValidationError
from campus.models import Admission, StudentCourseEnrollment
from campus.services import AdmissionService

pytestmark = pytest.mark.django_db


def test_admit_students_creates_admissions_and_mandatory_enrollments(make_class, make_student, make_subject, offer):
    school_class = make_class()
    mandatory = offer(make_subject(), school_class)
    offer(make_subject(), school_class, is_mandatory=False)
    students = [make_student(), make_student()]

    result = AdmissionService().admit_students(school_class.pk, [s.pk for s in students])

    assert result == {'count': 2}
    admissions = Admission.objects.filter(school_class=school_class)
    assert admissions.count() == 2
    assert all(a.admission_number.startswith('ADM-') and a.gr_number.startswith('GR-') for a in admissions)
    assert set(StudentCourseEnrollment.objects.values_list('course_offering_id', flat=True)) == {mandatory.pk}
    assert StudentCourseEnrollment.objects.count() == 2


def test_admission_over_capacity_is_rejected_without_changes(make_class, make_student, admit):
    school_class = make_class(capacity=40)
    for _ in range(39):
        admit(make_student(), school_class)
    newcomers = [make_student(), make_student()]

    with pytest.raises(CapacityExceeded) as excinfo:
        AdmissionService().admit_students(school_class.pk, [s.pk for s in newcomers])

    assert excinfo.value.message == (
        'Class capacity exceeded. Capacity is 40, but this action would result in 41 students.'
    )
    assert Admission.objects.filter(school_class=school_class).count() == 39


def test_admission_can_fill_class_exactly(make_class, make_student, admit):
    school_class = make_class(capacity=3)
    admit(make_student(), school_class)
    AdmissionService().admit_students(school_class.pk, [make_student().pk, make_student().pk])
    assert Admission.objects.filter(school_class=school_class).count() == 3


def test_student_cannot_be_admitted_twice_in_one_academic_year(make_class, make_student, admit):
    section_a = make_class(section='A')
    section_b = make_class(section='B')
    student = make_student()
    admit(student, section_a)

    with pytest.raises(DuplicateEnrollment) as excinfo:
        AdmissionService().admit_students(section_b.pk, [student.pk])

    assert excinfo.value.details == {'student_ids': [str(student.pk)]}
    assert Admission.objects.filter(student=student).count() == 1


def test_student_may_be_admitted_in_a_different_year(make_class, make_student, admit, previous_year):
    last_year = make_class(standard='7', year=previous_year)
    this_year = make_class(standard='8')
    student = make_student()
    admit(student, last_year)

    AdmissionService().admit_students(this_year.pk, [student.pk])

    assert Admission.objects.filter(student=student).count() == 2


@pytest.mark.parametrize('student_ids', [[], None])
def test_admission_requires_student_ids(make_class, student_ids):
    with pytest.raises(ValidationError):
        AdmissionService().admit_students(make_class().pk, student_ids)


def test_admission_rejects_repeated_ids(make_class, make_student):
    student = make_student()
    with pytest.raises(ValidationError):
        AdmissionService().admit_students(make_class().pk, [student.pk, student.pk])
    with pytest.raises(ValidationError):
        AdmissionService().admit_students(make_class(section='B').pk, [student.pk, str(student.pk)])


def test_admission_rejects_malformed_ids(make_class, make_student):
    student = make_student()

    with pytest.raises(ValidationError) as excinfo:
        AdmissionService().admit_students('not-a-uuid', [student.pk])
    assert excinfo.value.message == "Invalid class_id: 'not-a-uuid' is not a valid UUID."

    with pytest.raises(ValidationError):
        AdmissionService().admit_students(make_class().pk, [student.pk, 'not-a-uuid'])
    assert not Admission.objects.exists()


def test_admission_reports_unknown_students(make_class):
    missing = uuid.uuid4()
    with pytest.raises(NotFound) as excinfo:
        AdmissionService().admit_students(make_class().pk, [missing])
    assert excinfo.value.details == {'student_ids': [str(missing)]}


def test_admission_to_unknown_class(make_student):
    with pytest.raises(NotFound):
        AdmissionService().admit_students(uuid.uuid4(), [make_student().pk])


def test_batch_update_roll_numbers(make_class, make_student, admit):
    school_class = make_class()
    first, second = admit(make_student(), school_class), admit(make_student(), school_class)

    result = AdmissionService().batch_update_roll_numbers([
        {'admission_id': first.pk, 'roll_number': 2},
        {'admission_id': second.pk, 'roll_number': 1},
    ])

    assert result == {'count': 2}
    first.refresh_from_db()
    second.refresh_from_db()
    assert (first.roll_number, second.roll_number) == (2, 1)


def test_batch_update_roll_numbers_is_all_or_nothing(make_class, make_student, admit):
    admission = admit(make_student(), make_class())
    with pytest.raises(NotFound):
        AdmissionService().batch_update_roll_numbers([
            {'admission_id': admission.pk, 'roll_number': 7},
            {'admission_id': uuid.uuid4(), 'roll_number': 8},
        ])
    admission.refresh_from_db()
    assert admission.roll_number is None
