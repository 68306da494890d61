from datetime import date
from itertools import count

import pytest
from rest_framework.test import APIClient

from campus.models import AcademicYear, Admission, Class, CourseOffering, Employee, Student, Subject, User

PASSWORD = 'Campus-Pass-2025!'

_sequence = count(1)


@pytest.fixture
def academic_year(db):
    return AcademicYear.objects.create(
        name='2025-26', start_date=date(2025, 6, 1), end_date=date(2026, 4, 30), is_active=True,
    )


@pytest.fixture
def previous_year(db):
    return AcademicYear.objects.create(name='2024-25', start_date=date(2024, 6, 1), end_date=date(2025, 4, 30))


@pytest.fixture
def make_employee(db):
    def _make(role='teacher', **kwargs):
        n = next(_sequence)
        values = {
            'employee_code': f'EMP{n:05d}',
            'full_name': f'Employee {n}',
            'email': f'employee{n}@school.test',
            'joining_date': date(2020, 6, 1),
            'role': role,
        }
        values.update(kwargs)
        return Employee.objects.create(**values)
    return _make


@pytest.fixture
def teacher(make_employee):
    return make_employee(full_name='Asha Mehta')


@pytest.fixture
def make_class(academic_year, teacher):
    def _make(standard='8', section='A', capacity=40, year=None, class_teacher=teacher, medium='English'):
        return Class.objects.create(
            class_name=f'{standard}-{section}',
            academic_year=year or academic_year,
            standard=standard,
            section=section,
            medium=medium,
            capacity=capacity,
            class_teacher=class_teacher,
        )
    return _make


@pytest.fixture
def make_student(db):
    def _make(first_name='Student', last_name=None):
        return Student.objects.create(first_name=first_name, last_name=last_name or f'No{next(_sequence)}')
    return _make


@pytest.fixture
def admit(db):
    def _admit(student, school_class, admission_date=date(2025, 6, 10)):
        n = next(_sequence)
        return Admission.objects.create(
            student=student,
            school_class=school_class,
            admission_number=f'ADM-T{n}',
            gr_number=f'GR-T{n}',
            admission_date=admission_date,
        )
    return _admit


@pytest.fixture
def make_subject(db):
    def _make(name=None, code=None):
        n = next(_sequence)
        return Subject.objects.create(name=name or f'Subject {n}', code=code or f'SUB-{n}')
    return _make


@pytest.fixture
def offer(db):
    def _offer(subject, school_class, teacher=None, is_mandatory=True):
        return CourseOffering.objects.create(
            subject=subject, school_class=school_class, teacher=teacher, is_mandatory=is_mandatory,
        )
    return _offer


@pytest.fixture
def admin_user(db):
    return User.objects.create_user(username='principal', password=PASSWORD, role='admin')


@pytest.fixture
def teacher_user(db, teacher):
    user = User.objects.create_user(username='asha', password=PASSWORD, role='teacher')
    teacher.user = user
    teacher.save()
    return user


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client
