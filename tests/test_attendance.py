from datetime import date, datetime, time, timezone

import pytest

from campus.exceptions import Forbidden, NotFound, ValidationError
from campus.models import EmployeeAttendance, StudentAttendance
from campus.services import AttendanceService
from campus.services.attendance import classify_punches, summarize

pytestmark = pytest.mark.django_db


# ==================== EMPLOYEES ====================
def test_employee_upsert_is_idempotent(teacher):
    service = AttendanceService()
    service.upsert_employee_attendance([{'employee_id': teacher.pk, 'date': '2025-07-01', 'status': 'present'}])
    service.upsert_employee_attendance([
        {'employee_id': teacher.pk, 'date': '2025-07-01', 'status': 'late', 'remarks': 'Traffic'},
    ])

    record = EmployeeAttendance.objects.get(employee=teacher)
    assert record.date == date(2025, 7, 1)
    assert record.status == 'late'
    assert record.remarks == 'Traffic'
    assert record.source == 'manual'


def test_employee_upsert_normalizes_aware_datetimes_to_utc(teacher):
    late_evening_ahead_of_utc = '2025-07-02T02:00:00+05:30'
    AttendanceService().upsert_employee_attendance([
        {'employee_id': teacher.pk, 'date': late_evening_ahead_of_utc, 'status': 'present'},
    ])
    assert EmployeeAttendance.objects.get(employee=teacher).date == date(2025, 7, 1)


def test_employee_upsert_rejects_bad_status_and_unknown_employee(teacher):
    service = AttendanceService()
    with pytest.raises(ValidationError):
        service.upsert_employee_attendance([{'employee_id': teacher.pk, 'date': '2025-07-01', 'status': 'sleeping'}])
    with pytest.raises(ValidationError):
        service.upsert_employee_attendance([])
    with pytest.raises(NotFound):
        service.upsert_employee_attendance([
            {'employee_id': teacher.pk, 'date': '2025-07-01', 'status': 'present'},
            {'employee_id': '00000000-0000-0000-0000-000000000000', 'date': '2025-07-01', 'status': 'present'},
        ])
    assert EmployeeAttendance.objects.count() == 0


def test_mark_range_expands_every_day(teacher, make_employee):
    other = make_employee(role='staff')

    result = AttendanceService().mark_employee_range(
        [teacher.pk, other.pk], '2025-07-01', '2025-07-03', 'absent', remarks='Strike',
    )

    assert result == {'count': 6}
    records = EmployeeAttendance.objects.all()
    assert records.count() == 6
    assert {r.source for r in records} == {'manual_bulk'}
    assert {r.date for r in records} == {date(2025, 7, 1), date(2025, 7, 2), date(2025, 7, 3)}


def test_mark_range_twice_keeps_one_row_per_day(teacher):
    service = AttendanceService()
    service.mark_employee_range([teacher.pk], '2025-07-01', '2025-07-02', 'absent')
    service.mark_employee_range([teacher.pk], '2025-07-01', '2025-07-02', 'present')
    assert list(EmployeeAttendance.objects.values_list('status', flat=True)) == ['present', 'present']


def test_mark_range_rejects_inverted_range(teacher):
    with pytest.raises(ValidationError):
        AttendanceService().mark_employee_range([teacher.pk], '2025-07-03', '2025-07-01', 'present')


@pytest.mark.parametrize('check_in, check_out, expected', [
    (time(8, 55), time(16, 0), 'present'),
    (time(9, 20), time(16, 0), 'late'),
    (time(8, 55), time(12, 30), 'half_day'),
    (time(9, 20), None, 'late'),
])
def test_classify_punches(check_in, check_out, expected):
    day = date(2025, 7, 1)
    check_out_at = datetime.combine(day, check_out) if check_out else None
    assert classify_punches(datetime.combine(day, check_in), check_out_at) == expected


def test_biometric_sync_uses_first_and_last_punch(teacher):
    punches = [
        {'employee_code': teacher.employee_code, 'timestamp': '2025-07-01T13:00:00Z'},
        {'employee_code': teacher.employee_code, 'timestamp': '2025-07-01T09:30:00Z'},
        {'employee_code': teacher.employee_code, 'timestamp': '2025-07-01T17:00:00Z'},
        {'employee_code': 'EMP99999', 'timestamp': '2025-07-01T09:00:00Z'},
    ]

    result = AttendanceService().sync_biometric(punches)

    assert result == {'synced_records': 1, 'skipped_codes': ['EMP99999']}
    record = EmployeeAttendance.objects.get(employee=teacher)
    assert record.status == 'late'
    assert record.source == 'biometric'
    assert record.check_in_time == time(9, 30)
    assert record.check_out_time == time(17, 0)


def test_biometric_sync_rejects_malformed_punches(teacher):
    with pytest.raises(ValidationError):
        AttendanceService().sync_biometric([{'employee_code': teacher.employee_code, 'timestamp': 'yesterday'}])
    with pytest.raises(ValidationError):
        AttendanceService().sync_biometric([{'timestamp': '2025-07-01T09:00:00Z'}])


def test_employee_summary(teacher):
    AttendanceService().upsert_employee_attendance([
        {'employee_id': teacher.pk, 'date': '2025-07-01', 'status': 'present'},
        {'employee_id': teacher.pk, 'date': '2025-07-02', 'status': 'absent'},
        {'employee_id': teacher.pk, 'date': '2025-07-03', 'status': 'late'},
        {'employee_id': teacher.pk, 'date': '2025-07-04', 'status': 'on_leave'},
    ])
    result = AttendanceService().employee_summary(teacher.pk, '2025-07-01', '2025-07-31')
    assert result['summary']['total'] == 4
    assert result['summary']['attendance_percentage'] == 50.0
    assert [r.date for r in result['records']][0] == date(2025, 7, 4)


def test_summarize_without_records():
    summary = summarize([])
    assert summary['total'] == 0
    assert summary['attendance_percentage'] == 0.0
    assert summary['present'] == 0


# ==================== STUDENTS ====================
@pytest.fixture
def class_8a(make_class):
    return make_class(standard='8', section='A')


def test_class_teacher_takes_attendance(class_8a, teacher, make_student, admit):
    first, second = make_student(), make_student()
    admit(first, class_8a)
    admit(second, class_8a)
    service = AttendanceService()
    school_class = service.resolve_class('8', 'A', medium='English')

    service.upsert_student_attendance(school_class.pk, [
        {'student_id': first.pk, 'date': '2025-07-01', 'status': 'present'},
        {'student_id': second.pk, 'date': '2025-07-01', 'status': 'absent'},
    ], actor_employee=teacher)
    service.upsert_student_attendance(school_class.pk, [
        {'student_id': second.pk, 'date': '2025-07-01', 'status': 'late'},
    ], actor_employee=teacher)

    statuses = dict(StudentAttendance.objects.values_list('student_id', 'status'))
    assert statuses == {first.pk: 'present', second.pk: 'late'}


def test_only_class_teacher_may_take_attendance(class_8a, make_employee, make_student, admit):
    student = make_student()
    admit(student, class_8a)
    with pytest.raises(Forbidden):
        AttendanceService().upsert_student_attendance(
            class_8a.pk, [{'student_id': student.pk, 'date': '2025-07-01', 'status': 'present'}],
            actor_employee=make_employee(),
        )


def test_student_attendance_requires_admission_to_the_class(class_8a, make_student):
    outsider = make_student()
    with pytest.raises(NotFound) as excinfo:
        AttendanceService().upsert_student_attendance(
            class_8a.pk, [{'student_id': outsider.pk, 'date': '2025-07-01', 'status': 'present'}],
        )
    assert excinfo.value.details == {'student_ids': [str(outsider.pk)]}


def test_resolve_class_reports_missing_section(class_8a):
    with pytest.raises(NotFound):
        AttendanceService().resolve_class('8', 'Q')


def test_class_attendance_by_date_or_month(class_8a, make_student, admit):
    student = make_student()
    admit(student, class_8a)
    service = AttendanceService()
    service.upsert_student_attendance(class_8a.pk, [
        {'student_id': student.pk, 'date': '2025-07-01', 'status': 'present'},
        {'student_id': student.pk, 'date': '2025-07-15', 'status': 'absent'},
        {'student_id': student.pk, 'date': '2025-08-01', 'status': 'present'},
    ])

    assert service.class_attendance(class_8a.pk, date='2025-07-15').get().status == 'absent'
    assert service.class_attendance(class_8a.pk, month='2025-07').count() == 2
    with pytest.raises(ValidationError):
        service.class_attendance(class_8a.pk, date='2025-07-15', month='2025-07')
    with pytest.raises(ValidationError):
        service.class_attendance(class_8a.pk)


def test_student_summary(class_8a, make_student, admit):
    student = make_student()
    admit(student, class_8a)
    AttendanceService().upsert_student_attendance(class_8a.pk, [
        {'student_id': student.pk, 'date': datetime(2025, 7, day, 10, tzinfo=timezone.utc), 'status': status}
        for day, status in [(1, 'present'), (2, 'present'), (3, 'half_day'), (4, 'absent')]
    ])
    result = AttendanceService().student_summary(student.pk, date(2025, 7, 1), date(2025, 7, 31))
    assert result['summary']['total'] == 4
    assert result['summary']['absent'] == 1
    assert result['summary']['attendance_percentage'] == 75.0
