# services/leaves.py
import logging
from datetime import timedelta

from django.db import DEFAULT_DB_ALIAS
from django.db.models import Q

from ..exceptions import Forbidden, InvalidState, NotFound, ValidationError
from ..models import Admission, Employee, EmployeeLeave, LeaveStatusHistory, Student, StudentAttendance
from ..rules import check_date_range, check_leave_cancellable, check_leave_transition, enforce
from ..utils import expand_date_range, normalize_date, today_utc
from .attendance import AttendanceService
from .base import Service

logger = logging.getLogger(__name__)

LEAVE_TYPES = [value for value, _ in EmployeeLeave.LEAVE_TYPE_CHOICES]
LEAVE_STATUSES = [value for value, _ in EmployeeLeave.STATUS_CHOICES]
CANCELLED_REMARK = 'Leave Cancelled by Student'


class LeaveService(Service):
    """
    Employee leave requests.

    A request starts as pending and moves once, to approved or rejected.
    Every state, including the initial one, appends a LeaveStatusHistory row.
    Approval marks each day of the leave as on_leave attendance.
    """

    def __init__(self, using=DEFAULT_DB_ALIAS, attendance=None):
        super().__init__(using)
        self.attendance = attendance or AttendanceService(using=self.using)

    def create_leave(self, employee_id, start_date, end_date, leave_type, reason, supporting_document_url=None):
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        if leave_type not in LEAVE_TYPES:
            raise ValidationError(f"Invalid leave type. Must be one of: {', '.join(LEAVE_TYPES)}")
        if not reason or not reason.strip():
            raise ValidationError('A reason is required.')

        with self.atomic():
            employee = self.get_or_404(Employee, 'Employee not found.', pk=employee_id)
            leave = self.objects(EmployeeLeave).create(
                employee=employee,
                leave_type=leave_type,
                start_date=start_date,
                end_date=end_date,
                reason=reason.strip(),
                supporting_document_url=supporting_document_url,
            )
            self.objects(LeaveStatusHistory).create(leave=leave, status='pending', comment='Leave request created.')

        logger.info(f"Leave {leave.pk} requested by {employee.employee_code} ({start_date} to {end_date})")
        return leave

    def transition_leave(self, leave_id, new_status, comment=None):
        if new_status not in LEAVE_STATUSES:
            raise InvalidState(f"Invalid status. Must be one of: {', '.join(LEAVE_STATUSES)}")

        with self.atomic():
            try:
                leave = (self.objects(EmployeeLeave)
                         .select_for_update()
                         .select_related('employee')
                         .get(pk=leave_id))
            except EmployeeLeave.DoesNotExist:
                raise NotFound('Leave request not found.')
            enforce(check_leave_transition(leave.status, new_status), InvalidState)

            leave.status = new_status
            leave.save(using=self.using, update_fields=['status', 'updated_at'])
            self.objects(LeaveStatusHistory).create(leave=leave, status=new_status, comment=comment)

            if new_status == 'approved':
                self.attendance.upsert_employee_days(
                    leave.employee_id,
                    expand_date_range(leave.start_date, leave.end_date),
                    'on_leave',
                    source='manual',
                    remarks=f"Approved Leave: {leave.reason}",
                )

        logger.info(f"Leave {leave.pk} {new_status}")
        return leave

    def list_leaves(self, department=None, leave_type=None, status=None, start_date=None, end_date=None, search=None):
        leaves = (self.objects(EmployeeLeave)
                  .select_related('employee__department')
                  .prefetch_related('status_history'))
        if department:
            leaves = leaves.filter(employee__department__name__iexact=department)
        if leave_type:
            leaves = leaves.filter(leave_type=leave_type)
        if status:
            leaves = leaves.filter(status=status)
        if start_date:
            leaves = leaves.filter(end_date__gte=normalize_date(start_date, 'start_date'))
        if end_date:
            leaves = leaves.filter(start_date__lte=normalize_date(end_date, 'end_date'))
        if search:
            leaves = leaves.filter(
                Q(employee__full_name__icontains=search)
                | Q(employee__employee_code__icontains=search)
                | Q(reason__icontains=search)
            )
        return leaves.order_by('-created_at')


class StudentLeaveService(Service):
    """
    Student leave is recorded directly as on_leave attendance rows.

    A leave period is a run of consecutive on_leave days sharing the same
    remark; it is identified by the attendance row of its first day.
    """

    def _current_class_id(self, student):
        admission = (self.objects(Admission)
                     .filter(student=student)
                     .order_by('-admission_date', '-created_at')
                     .first())
        if admission is None:
            raise NotFound("Could not find student's class enrollment.")
        return admission.school_class_id

    def request_leave(self, student_id, start_date, end_date, reason):
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        if not reason or not reason.strip():
            raise ValidationError('A reason is required.')
        reason = reason.strip()

        with self.atomic():
            student = self.get_or_404(Student, 'Student profile not found.', pk=student_id)
            class_id = self._current_class_id(student)
            records = []
            for day in expand_date_range(start_date, end_date):
                record, _ = self.objects(StudentAttendance).update_or_create(
                    student=student,
                    date=day,
                    defaults={'status': 'on_leave', 'remarks': reason, 'source': 'manual'},
                    create_defaults={
                        'school_class_id': class_id, 'status': 'on_leave', 'remarks': reason, 'source': 'manual',
                    },
                )
                records.append(record)

        logger.info(f"Student {student_id} on leave {start_date} to {end_date}")
        return records

    def cancel_leave(self, attendance_id, student_id):
        with self.atomic():
            first_day = self.get_or_404(StudentAttendance, 'Leave record not found.', pk=attendance_id)
            if str(first_day.student_id) != str(student_id):
                raise Forbidden('You are not authorized to cancel this leave request.')
            if first_day.status != 'on_leave':
                raise InvalidState('This record is not a leave record and cannot be cancelled.')
            enforce(check_leave_cancellable(first_day.date, today_utc()), InvalidState)

            candidates = (self.objects(StudentAttendance)
                          .filter(student_id=student_id, status='on_leave', remarks=first_day.remarks,
                                  date__gte=first_day.date)
                          .order_by('date'))
            period_ids, expected = [], first_day.date
            for day in candidates:
                if day.date != expected:
                    break
                period_ids.append(day.pk)
                expected += timedelta(days=1)

            self.objects(StudentAttendance).filter(pk__in=period_ids).update(
                status='absent', remarks=CANCELLED_REMARK,
            )

        logger.info(f"Student {student_id} cancelled {len(period_ids)} leave day(s)")
        return len(period_ids)

    def leave_history(self, student_id):
        """Leave periods as [{'id', 'from_date', 'to_date', 'reason'}]."""
        days = (self.objects(StudentAttendance)
                .filter(student_id=student_id, status='on_leave')
                .order_by('date'))
        periods = []
        for day in days:
            current = periods[-1] if periods else None
            if (current and day.date == current['to_date'] + timedelta(days=1)
                    and (day.remarks or '') == current['reason']):
                current['to_date'] = day.date
            else:
                periods.append({'id': day.pk, 'from_date': day.date, 'to_date': day.date, 'reason': day.remarks or ''})
        return periods
