import uuid

import pytest

from campus.exceptions import CapacityExceeded, NotFound
from campus.models import Admission, StudentCourseEnrollment
from campus.services import PromotionService

pytestmark = pytest.mark.django_db


@pytest.fixture
def seventh(make_class, previous_year, make_subject, offer):
    school_class = make_class(standard='7', section='A', year=previous_year)
    offer(make_subject(name='Old Maths'), school_class)
    return school_class


@pytest.fixture
def eighth(make_class, make_subject, offer):
    school_class = make_class(standard='8', section='A')
    offer(make_subject(name='Algebra'), school_class)
    offer(make_subject(name='Painting'), school_class, is_mandatory=False)
    return school_class


def enrolled_class_ids(student):
    return set(
        StudentCourseEnrollment.objects.filter(student=student)
        .values_list('course_offering__school_class_id', flat=True)
    )


def test_promotion_moves_admissions_and_rederives_enrollments(seventh, eighth, make_student, admit):
    students = [make_student(), make_student()]
    for student in students:
        admit(student, seventh)
        StudentCourseEnrollment.objects.create(student=student, course_offering=seventh.course_offerings.first())

    result = PromotionService().promote_students([s.pk for s in students], eighth.pk)

    assert result['promoted_count'] == 2
    assert result['target_class_id'] == str(eighth.pk)
    assert result['subject_enrollments'] == {'enrolled_subjects': 2, 'total_enrollments': 4}
    for student in students:
        assert Admission.objects.get(student=student).school_class_id == eighth.pk
        assert enrolled_class_ids(student) == {eighth.pk}
        assert StudentCourseEnrollment.objects.filter(student=student).count() == 2


def test_promotion_respects_target_capacity(seventh, make_class, make_student, admit):
    target = make_class(standard='8', section='B', capacity=2)
    admit(make_student(), target)
    students = [make_student(), make_student()]
    for student in students:
        admit(student, seventh)

    with pytest.raises(CapacityExceeded) as excinfo:
        PromotionService().promote_students([s.pk for s in students], target.pk)

    assert excinfo.value.message == (
        'Class capacity exceeded. Capacity is 2, but this action would result in 3 students.'
    )
    assert Admission.objects.filter(school_class=seventh).count() == 2


def test_promotion_requires_an_admission(eighth, make_student):
    student = make_student()
    with pytest.raises(NotFound) as excinfo:
        PromotionService().promote_students([student.pk], eighth.pk)
    assert excinfo.value.details == {'student_ids': [str(student.pk)]}


def test_promotion_reports_unknown_target_class(seventh, make_student, admit):
    student = make_student()
    admit(student, seventh)
    with pytest.raises(NotFound):
        PromotionService().promote_students([student.pk], uuid.uuid4())


def test_promotion_keeps_existing_target_enrollments_single(seventh, eighth, make_student, admit):
    student = make_student()
    admit(student, seventh)
    algebra = eighth.course_offerings.get(subject__name='Algebra')
    StudentCourseEnrollment.objects.create(student=student, course_offering=algebra)

    result = PromotionService().promote_students([student.pk], eighth.pk)

    assert result['promoted_count'] == 1
    assert StudentCourseEnrollment.objects.filter(student=student, course_offering=algebra).count() == 1
    assert StudentCourseEnrollment.objects.filter(student=student).count() == 2


def test_promotion_between_sections_of_one_year(eighth, make_class, make_subject, offer, make_student, admit):
    section_b = make_class(standard='8', section='B')
    offer(make_subject(name='Geometry'), section_b)
    student = make_student()
    admit(student, eighth)
    for offering in eighth.course_offerings.all():
        StudentCourseEnrollment.objects.create(student=student, course_offering=offering)

    PromotionService().promote_students([student.pk], section_b.pk)

    admissions = Admission.objects.filter(student=student)
    assert admissions.count() == 1
    assert admissions.get().school_class_id == section_b.pk
    assert enrolled_class_ids(student) == {section_b.pk}


def test_promotion_capacity_counts_only_newcomers(seventh, make_class, make_student, admit):
    target = make_class(standard='8', section='C', capacity=3)
    residents = [make_student(), make_student()]
    for student in residents:
        admit(student, target)
    newcomers = [make_student(), make_student()]
    for student in newcomers:
        admit(student, seventh)

    result = PromotionService().promote_students([s.pk for s in residents + newcomers[:1]], target.pk)
    assert result['promoted_count'] == 3
    assert Admission.objects.filter(school_class=target).count() == 3

    with pytest.raises(CapacityExceeded):
        PromotionService().promote_students([s.pk for s in residents + newcomers[1:]], target.pk)
    assert Admission.objects.get(student=newcomers[1]).school_class_id == seventh.pk
