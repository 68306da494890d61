import pytest

from campus.exceptions import ConfigurationError, Conflict, NotFound, ValidationError
from campus.models import CourseOffering, StudentCourseEnrollment, Subject
from campus.services import SubjectService

pytestmark = pytest.mark.django_db


@pytest.fixture
def sections(make_class):
    return {section: make_class(standard='8', section=section) for section in ('A', 'B', 'C')}


def offering_map(subject):
    return {o.school_class.section: o for o in CourseOffering.objects.filter(subject=subject).select_related('school_class')}


def test_create_subject_offers_it_to_each_section(sections, teacher):
    subject = SubjectService().create_subject('Mathematics', '8', ['A', 'B'], teacher_id=teacher.pk)

    assert subject.code == 'MAT-8'
    offerings = offering_map(subject)
    assert set(offerings) == {'A', 'B'}
    assert all(o.teacher_id == teacher.pk and o.is_mandatory for o in offerings.values())


def test_create_subject_generates_unique_codes(sections):
    SubjectService().create_subject('Mathematics', '8', ['A'])
    second = SubjectService().create_subject('Mat', '8', ['B'])
    assert second.code == 'MAT-8-1'


def test_create_mandatory_subject_enrolls_admitted_students(sections, make_student, admit):
    students = [make_student(), make_student()]
    for student in students:
        admit(student, sections['A'])

    subject = SubjectService().create_subject('Science', '8', ['A', 'B'])

    enrollments = StudentCourseEnrollment.objects.filter(course_offering__subject=subject)
    assert {e.student_id for e in enrollments} == {s.pk for s in students}


def test_create_optional_subject_enrolls_nobody(sections, make_student, admit):
    admit(make_student(), sections['A'])
    SubjectService().create_subject('Drawing', '8', ['A'], is_mandatory=False)
    assert StudentCourseEnrollment.objects.count() == 0


def test_create_subject_rejects_duplicate_names(sections):
    SubjectService().create_subject('English', '8', ['A'])
    with pytest.raises(Conflict):
        SubjectService().create_subject('english', '8', ['B'])


def test_create_subject_reports_missing_sections(sections):
    with pytest.raises(NotFound) as excinfo:
        SubjectService().create_subject('Hindi', '8', ['A', 'Z'])
    assert excinfo.value.details == {'sections': ['Z']}
    assert not Subject.objects.filter(name='Hindi').exists()


def test_create_subject_needs_an_active_academic_year(sections, academic_year):
    academic_year.is_active = False
    academic_year.save()
    with pytest.raises(ConfigurationError):
        SubjectService().create_subject('Hindi', '8', ['A'])


def test_create_subject_validates_input(sections):
    with pytest.raises(ValidationError):
        SubjectService().create_subject('Hindi', '8', [])


def test_synchronize_blocked_when_removed_offering_has_enrollments(sections, teacher, make_student):
    subject = SubjectService().create_subject('Mathematics', '8', ['A', 'B'], teacher_id=teacher.pk)
    offering_b = offering_map(subject)['B']
    for _ in range(5):
        StudentCourseEnrollment.objects.create(student=make_student(), course_offering=offering_b)

    with pytest.raises(Conflict) as excinfo:
        SubjectService().synchronize_offerings(subject.pk, 'Maths', '8', ['A'], teacher.pk)

    assert 'as 5 student(s) are enrolled' in excinfo.value.message
    subject.refresh_from_db()
    assert subject.name == 'Mathematics'
    assert set(offering_map(subject)) == {'A', 'B'}
    assert StudentCourseEnrollment.objects.filter(course_offering=offering_b).count() == 5


def test_synchronize_partitions_offerings(sections, teacher, make_employee):
    subject = SubjectService().create_subject('Mathematics', '8', ['A', 'B'], teacher_id=teacher.pk)
    kept_id = offering_map(subject)['A'].pk
    new_teacher = make_employee()

    SubjectService().synchronize_offerings(subject.pk, 'Maths', '8', ['A', 'C'], new_teacher.pk, is_mandatory=False)

    subject.refresh_from_db()
    assert subject.name == 'Maths'
    offerings = offering_map(subject)
    assert set(offerings) == {'A', 'C'}
    assert offerings['A'].pk == kept_id
    assert all(o.teacher_id == new_teacher.pk and not o.is_mandatory for o in offerings.values())


def test_synchronize_rejects_name_of_another_subject(sections, teacher):
    SubjectService().create_subject('Science', '8', ['A'])
    subject = SubjectService().create_subject('Mathematics', '8', ['A'])
    with pytest.raises(Conflict):
        SubjectService().synchronize_offerings(subject.pk, 'Science', '8', ['A'], teacher.pk)


def test_synchronize_requires_a_teacher(sections):
    subject = SubjectService().create_subject('Mathematics', '8', ['A'])
    with pytest.raises(ValidationError):
        SubjectService().synchronize_offerings(subject.pk, 'Mathematics', '8', ['A'], None)


def test_delete_subject_requires_no_offerings(sections, make_subject):
    offered = SubjectService().create_subject('Mathematics', '8', ['A'])
    with pytest.raises(Conflict):
        SubjectService().delete_subject(offered.pk)

    unused = make_subject()
    SubjectService().delete_subject(unused.pk)
    assert not Subject.objects.filter(pk=unused.pk).exists()


def test_enroll_and_withdraw_students(sections, make_student, admit):
    subject = SubjectService().create_subject('Music', '8', ['A'], is_mandatory=False)
    first, second, outsider = make_student(), make_student(), make_student()
    admit(first, sections['A'])
    admit(second, sections['A'])
    admit(outsider, sections['B'])

    result = SubjectService().enroll_students(subject.pk, [first.pk])
    assert result == {'enrolled_count': 1, 'already_enrolled_count': 0}

    result = SubjectService().enroll_students(subject.pk, [first.pk, second.pk, outsider.pk])
    assert result == {'enrolled_count': 1, 'already_enrolled_count': 1}
    assert SubjectService().enrolled_students(subject.pk).count() == 2

    SubjectService().withdraw_student(subject.pk, first.pk)
    assert SubjectService().enrolled_students(subject.pk).count() == 1
    with pytest.raises(NotFound):
        SubjectService().withdraw_student(subject.pk, first.pk)
