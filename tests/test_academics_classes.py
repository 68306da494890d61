import pytest
from django.db import IntegrityError, transaction

from campus.exceptions import CapacityExceeded, Conflict, NotFound, ValidationError
from campus.models import AcademicYear, Admission, Class, CourseOffering, StudentCourseEnrollment
from campus.services import AcademicYearService, ClassService, DepartmentService, SchoolConfigurationService

pytestmark = pytest.mark.django_db


# ==================== ACADEMIC YEARS ====================
def test_activating_a_year_deactivates_the_others(academic_year, previous_year):
    AcademicYearService().activate(previous_year.pk)

    academic_year.refresh_from_db()
    assert not academic_year.is_active
    assert list(AcademicYear.objects.filter(is_active=True)) == [previous_year]


def test_create_active_year_takes_over(academic_year):
    year = AcademicYearService().create_year('2026-27', '2026-06-01', '2027-04-30', is_active=True)

    assert year.is_active
    assert AcademicYear.objects.filter(is_active=True).count() == 1
    assert list(AcademicYearService().list_years())[0] == year


def test_create_year_rejects_duplicates_and_bad_ranges(academic_year):
    service = AcademicYearService()
    with pytest.raises(Conflict):
        service.create_year('2025-26', '2025-06-01', '2026-04-30')
    with pytest.raises(ValidationError):
        service.create_year('2030-31', '2031-04-30', '2030-06-01')
    with pytest.raises(ValidationError):
        service.create_year('', '2030-06-01', '2031-04-30')


def test_database_refuses_two_active_years(academic_year):
    with pytest.raises(IntegrityError), transaction.atomic():
        AcademicYear.objects.create(name='2026-27', start_date='2026-06-01', end_date='2027-04-30', is_active=True)


def test_department_names_are_unique():
    DepartmentService().create_department('Science')
    with pytest.raises(Conflict):
        DepartmentService().create_department('Science')
    assert DepartmentService().get_or_create_by_name(' Science ').name == 'Science'


def test_school_configuration_is_a_singleton():
    service = SchoolConfigurationService()
    assert service.get() is None
    with pytest.raises(ValidationError):
        service.update({'email': 'office@school.test'})

    service.update({'school_name': 'Green Valley School', 'school_code': 'GVS'})
    config = service.update({'email': 'office@school.test'})

    assert config.school_name == 'Green Valley School'
    assert config.email == 'office@school.test'
    assert service.get().pk == config.pk


# ==================== CLASSES ====================
def class_payload(academic_year, **overrides):
    data = {
        'class_name': '9-A',
        'academic_year_id': academic_year.pk,
        'standard': '9',
        'section': 'A',
        'medium': 'English',
        'capacity': 35,
    }
    data.update(overrides)
    return data


def test_create_class(academic_year, teacher):
    school_class = ClassService().create_class(class_payload(academic_year, class_teacher_id=teacher.pk))
    assert school_class.class_teacher == teacher
    assert school_class.academic_year == academic_year


def test_create_class_rejects_duplicates(academic_year):
    ClassService().create_class(class_payload(academic_year))
    with pytest.raises(Conflict):
        ClassService().create_class(class_payload(academic_year, class_name='Nine A'))
    ClassService().create_class(class_payload(academic_year, medium='Hindi'))
    assert Class.objects.count() == 2


@pytest.mark.parametrize('overrides', [
    {'capacity': 0},
    {'capacity': '30'},
    {'medium': 'Latin'},
    {'section': ''},
])
def test_create_class_validates_input(academic_year, overrides):
    with pytest.raises(ValidationError):
        ClassService().create_class(class_payload(academic_year, **overrides))


def test_class_teacher_needs_a_teaching_role(academic_year, make_employee):
    librarian = make_employee(role='librarian')
    with pytest.raises(ValidationError):
        ClassService().create_class(class_payload(academic_year, class_teacher_id=librarian.pk))


def test_capacity_cannot_shrink_below_admissions(make_class, make_student, admit):
    school_class = make_class(capacity=3)
    for _ in range(3):
        admit(make_student(), school_class)
    data = {'class_name': '8-A', 'standard': '8', 'section': 'A', 'medium': 'English', 'capacity': 2}

    with pytest.raises(CapacityExceeded):
        ClassService().update_class(school_class.pk, data)

    updated = ClassService().update_class(school_class.pk, dict(data, capacity=3, class_name='Eight A'))
    assert updated.class_name == 'Eight A'


def test_delete_class_requires_no_admissions(make_class, make_student, admit):
    occupied, empty = make_class(section='A'), make_class(section='B')
    admit(make_student(), occupied)

    with pytest.raises(Conflict):
        ClassService().delete_class(occupied.pk)
    ClassService().delete_class(empty.pk)

    assert list(Class.objects.all()) == [occupied]


def test_add_and_remove_subjects(make_class, make_subject, make_student, teacher):
    school_class = make_class()
    maths, science = make_subject(name='Maths'), make_subject(name='Science')
    service = ClassService()

    offerings = service.add_subjects_to_class(school_class.pk, [maths.pk, science.pk], teacher_id=teacher.pk)
    assert len(offerings) == 2
    assert list(service.available_subjects(school_class.pk)) == []

    with pytest.raises(Conflict):
        service.add_subjects_to_class(school_class.pk, [maths.pk])

    offering = CourseOffering.objects.get(school_class=school_class, subject=maths)
    StudentCourseEnrollment.objects.create(student=make_student(), course_offering=offering)
    with pytest.raises(Conflict):
        service.remove_subject_from_class(school_class.pk, maths.pk)

    service.remove_subject_from_class(school_class.pk, science.pk)
    assert [s.name for s in service.available_subjects(school_class.pk)] == ['Science']
    with pytest.raises(NotFound):
        service.remove_subject_from_class(school_class.pk, science.pk)


def test_remove_student_drops_admission_and_enrollments(make_class, make_subject, offer, make_student, admit):
    school_class = make_class()
    offering = offer(make_subject(), school_class)
    student = make_student()
    admit(student, school_class)
    StudentCourseEnrollment.objects.create(student=student, course_offering=offering)

    ClassService().remove_student_from_class(school_class.pk, student.pk)

    assert not Admission.objects.filter(student=student).exists()
    assert not StudentCourseEnrollment.objects.filter(student=student).exists()
    assert list(ClassService().unassigned_students()) == [student]
    with pytest.raises(NotFound):
        ClassService().remove_student_from_class(school_class.pk, student.pk)


def test_list_standards(make_class, make_student, admit):
    admit(make_student(), make_class(standard='8', section='B'))
    make_class(standard='8', section='A')
    make_class(standard='9', section='A')
    service = ClassService()

    assert service.list_standards() == [
        {'standard': '8', 'sections': ['A', 'B']},
        {'standard': '9', 'sections': ['A']},
    ]
    assert service.list_standards('8') == ['A', 'B']
    counts = {c.class_name: c.student_count for c in service.list_classes()}
    assert counts == {'8-A': 0, '8-B': 1, '9-A': 0}
