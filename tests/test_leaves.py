from datetime import date, timedelta

import pytest

from campus.exceptions import Forbidden, InvalidState, NotFound, ValidationError
from campus.models import EmployeeAttendance, EmployeeLeave, LeaveStatusHistory, StudentAttendance
from campus.services import AttendanceService, LeaveService, StudentLeaveService
from campus.utils import today_utc

pytestmark = pytest.mark.django_db


# ==================== EMPLOYEE LEAVE ====================
@pytest.fixture
def leave(teacher):
    return LeaveService().create_leave(teacher.pk, '2025-08-04', '2025-08-06', 'sick', 'Fever')


def test_create_leave_records_pending_history(leave):
    assert leave.status == 'pending'
    assert leave.total_days == 3
    history = list(leave.status_history.all())
    assert [(h.status, h.comment) for h in history] == [('pending', 'Leave request created.')]


def test_create_leave_validates_input(teacher):
    service = LeaveService()
    with pytest.raises(ValidationError):
        service.create_leave(teacher.pk, '2025-08-06', '2025-08-04', 'sick', 'Fever')
    with pytest.raises(ValidationError):
        service.create_leave(teacher.pk, '2025-08-04', '2025-08-06', 'holiday', 'Fever')
    with pytest.raises(ValidationError):
        service.create_leave(teacher.pk, '2025-08-04', '2025-08-06', 'sick', '  ')
    assert EmployeeLeave.objects.count() == 0


def test_approval_marks_each_day_on_leave(leave, teacher):
    LeaveService().transition_leave(leave.pk, 'approved', comment='Get well soon')

    leave.refresh_from_db()
    assert leave.status == 'approved'
    assert list(leave.status_history.values_list('status', flat=True)) == ['pending', 'approved']
    records = EmployeeAttendance.objects.filter(employee=teacher).order_by('date')
    assert [r.date for r in records] == [date(2025, 8, 4), date(2025, 8, 5), date(2025, 8, 6)]
    assert {r.status for r in records} == {'on_leave'}
    assert {r.remarks for r in records} == {'Approved Leave: Fever'}


def test_approval_overwrites_existing_attendance(leave, teacher):
    AttendanceService().upsert_employee_attendance([
        {'employee_id': teacher.pk, 'date': '2025-08-05', 'status': 'present'},
    ])
    LeaveService().transition_leave(leave.pk, 'approved')

    assert EmployeeAttendance.objects.filter(employee=teacher).count() == 3
    assert EmployeeAttendance.objects.get(employee=teacher, date=date(2025, 8, 5)).status == 'on_leave'


def test_rejection_leaves_attendance_untouched(leave, teacher):
    LeaveService().transition_leave(leave.pk, 'rejected', comment='Exam week')
    assert EmployeeAttendance.objects.filter(employee=teacher).count() == 0
    assert LeaveStatusHistory.objects.filter(leave=leave).count() == 2


def test_transition_happens_once(leave):
    service = LeaveService()
    service.transition_leave(leave.pk, 'approved')
    with pytest.raises(InvalidState):
        service.transition_leave(leave.pk, 'rejected')
    with pytest.raises(InvalidState):
        service.transition_leave(leave.pk, 'approved')
    assert LeaveStatusHistory.objects.filter(leave=leave).count() == 2


def test_transition_rejects_unknown_status_and_leave(leave):
    with pytest.raises(InvalidState):
        LeaveService().transition_leave(leave.pk, 'archived')
    with pytest.raises(InvalidState):
        LeaveService().transition_leave(leave.pk, 'pending')
    with pytest.raises(NotFound):
        LeaveService().transition_leave('00000000-0000-0000-0000-000000000000', 'approved')


def test_list_leaves_filters(leave, make_employee):
    other = make_employee(full_name='Ravi Shah')
    LeaveService().create_leave(other.pk, '2025-09-01', '2025-09-01', 'casual', 'Wedding')
    service = LeaveService()

    assert service.list_leaves(leave_type='casual').get().employee_id == other.pk
    assert service.list_leaves(search='ravi').count() == 1
    assert service.list_leaves(start_date='2025-08-05', end_date='2025-08-31').get().pk == leave.pk
    assert service.list_leaves(status='approved').count() == 0


# ==================== STUDENT LEAVE ====================
@pytest.fixture
def pupil(make_class, make_student, admit):
    student = make_student(first_name='Kiran')
    admit(student, make_class(standard='6', section='B'))
    return student


def test_student_leave_request_creates_on_leave_days(pupil):
    start = today_utc() + timedelta(days=3)
    records = StudentLeaveService().request_leave(pupil.pk, start, start + timedelta(days=1), 'Family function')

    assert len(records) == 2
    assert {r.status for r in records} == {'on_leave'}
    history = StudentLeaveService().leave_history(pupil.pk)
    assert history == [{
        'id': records[0].pk, 'from_date': start, 'to_date': start + timedelta(days=1), 'reason': 'Family function',
    }]


def test_student_leave_requires_an_admission(make_student):
    with pytest.raises(NotFound):
        StudentLeaveService().request_leave(make_student().pk, '2030-01-01', '2030-01-02', 'Travel')


def test_student_can_cancel_future_leave(pupil):
    start = today_utc() + timedelta(days=5)
    records = StudentLeaveService().request_leave(pupil.pk, start, start + timedelta(days=2), 'Travel')

    cancelled = StudentLeaveService().cancel_leave(records[0].pk, pupil.pk)

    assert cancelled == 3
    rows = StudentAttendance.objects.filter(student=pupil)
    assert {r.status for r in rows} == {'absent'}
    assert {r.remarks for r in rows} == {'Leave Cancelled by Student'}
    assert StudentLeaveService().leave_history(pupil.pk) == []


def test_cancel_stops_at_the_end_of_the_period(pupil):
    start = today_utc() + timedelta(days=5)
    first = StudentLeaveService().request_leave(pupil.pk, start, start, 'Travel')
    StudentLeaveService().request_leave(pupil.pk, start + timedelta(days=1), start + timedelta(days=1), 'Dentist')

    assert StudentLeaveService().cancel_leave(first[0].pk, pupil.pk) == 1
    assert len(StudentLeaveService().leave_history(pupil.pk)) == 1


def test_ongoing_leave_cannot_be_cancelled(pupil):
    today = today_utc()
    records = StudentLeaveService().request_leave(pupil.pk, today, today + timedelta(days=1), 'Sick')
    with pytest.raises(InvalidState) as excinfo:
        StudentLeaveService().cancel_leave(records[0].pk, pupil.pk)
    assert excinfo.value.message == 'Past or ongoing leave requests cannot be cancelled.'


def test_student_cannot_cancel_someone_elses_leave(pupil, make_student):
    start = today_utc() + timedelta(days=5)
    records = StudentLeaveService().request_leave(pupil.pk, start, start, 'Travel')
    with pytest.raises(Forbidden):
        StudentLeaveService().cancel_leave(records[0].pk, make_student().pk)
    with pytest.raises(NotFound):
        StudentLeaveService().cancel_leave('00000000-0000-0000-0000-000000000000', pupil.pk)
