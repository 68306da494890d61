# services/attendance.py
import logging
from collections import Counter, defaultdict
from datetime import datetime, time

from django.utils import timezone

from ..exceptions import Forbidden, NotFound, ValidationError
from ..models import (
    ATTENDANCE_STATUS_CHOICES, Admission, Class, Employee, EmployeeAttendance, Student, StudentAttendance,
)
from ..rules import check_date_range, enforce
from ..utils import expand_date_range, month_bounds, normalize_date
from .base import Service

logger = logging.getLogger(__name__)

VALID_STATUSES = [value for value, _ in ATTENDANCE_STATUS_CHOICES]
ATTENDED_STATUSES = ('present', 'late', 'half_day')

LATE_AFTER = time(9, 5)
HALF_DAY_BEFORE = time(14, 0)


def validate_status(status):
    if status not in VALID_STATUSES:
        raise ValidationError(f"Invalid status '{status}'. Must be one of: {', '.join(VALID_STATUSES)}")
    return status


def summarize(statuses):
    """Per-status counts and the share of days attended, as a percentage."""
    counts = Counter(statuses)
    total = sum(counts.values())
    attended = sum(counts[s] for s in ATTENDED_STATUSES)
    summary = {status: counts.get(status, 0) for status in VALID_STATUSES}
    summary['total'] = total
    summary['attendance_percentage'] = round(attended / total * 100, 2) if total else 0.0
    return summary


def classify_punches(check_in, check_out):
    status = 'present'
    if check_in.time() > LATE_AFTER:
        status = 'late'
    if check_out is not None and check_out.time() < HALF_DAY_BEFORE:
        status = 'half_day'
    return status


class AttendanceService(Service):
    """
    Idempotent daily attendance for students and employees.

    Rows are keyed by (person, date): writing the same day again updates the
    existing row. Every batch runs in one transaction.
    """

    # ==================== EMPLOYEES ====================
    def _employee_ids(self, employee_ids):
        found = set(self.objects(Employee).filter(pk__in=employee_ids).values_list('pk', flat=True))
        missing = sorted({str(pk) for pk in employee_ids} - {str(pk) for pk in found})
        if missing:
            raise NotFound('One or more employees were not found.', details={'employee_ids': missing})

    def upsert_employee_days(self, employee_id, days, status, source='manual', remarks=None,
                             check_in_time=None, check_out_time=None):
        """Upsert one row per day; shared by manual marking and leave approval."""
        records = []
        for day in days:
            record, _ = self.objects(EmployeeAttendance).update_or_create(
                employee_id=employee_id,
                date=day,
                defaults={
                    'status': status,
                    'source': source,
                    'remarks': remarks,
                    'check_in_time': check_in_time,
                    'check_out_time': check_out_time,
                },
            )
            records.append(record)
        return records

    def upsert_employee_attendance(self, entries, source='manual'):
        if not entries:
            raise ValidationError('At least one attendance entry is required.')
        cleaned = []
        for entry in entries:
            cleaned.append({
                'employee_id': entry.get('employee_id'),
                'date': normalize_date(entry.get('date')),
                'status': validate_status(entry.get('status')),
                'remarks': entry.get('remarks'),
                'check_in_time': entry.get('check_in_time'),
                'check_out_time': entry.get('check_out_time'),
            })

        with self.atomic():
            self._employee_ids({e['employee_id'] for e in cleaned})
            for entry in cleaned:
                self.upsert_employee_days(
                    entry['employee_id'], [entry['date']], entry['status'], source=source,
                    remarks=entry['remarks'], check_in_time=entry['check_in_time'],
                    check_out_time=entry['check_out_time'],
                )

        logger.info(f"{len(cleaned)} employee attendance row(s) upserted")
        return {'count': len(cleaned)}

    def mark_employee_range(self, employee_ids, start_date, end_date, status, remarks=None):
        if not employee_ids:
            raise ValidationError('A non-empty list of employee ids is required.')
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        validate_status(status)
        days = expand_date_range(start_date, end_date)

        with self.atomic():
            self._employee_ids(employee_ids)
            for employee_id in employee_ids:
                self.upsert_employee_days(employee_id, days, status, source='manual_bulk', remarks=remarks)

        count = len(days) * len(employee_ids)
        logger.info(f"Bulk attendance marked for {count} record(s)")
        return {'count': count}

    def sync_biometric(self, punches):
        """
        punches: [{'employee_code': ..., 'timestamp': datetime or ISO string}].

        The first punch of a day is the check-in and the last one the
        check-out. Unknown employee codes are skipped and reported.
        """
        by_day = defaultdict(list)
        for punch in punches or []:
            moment = punch.get('timestamp')
            if isinstance(moment, str):
                try:
                    moment = datetime.fromisoformat(moment.replace('Z', '+00:00'))
                except ValueError:
                    raise ValidationError(f"Invalid punch timestamp: '{moment}'")
            if not isinstance(moment, datetime) or not punch.get('employee_code'):
                raise ValidationError('Each punch needs an employee_code and a timestamp.')
            if timezone.is_aware(moment):
                moment = timezone.localtime(moment)
            by_day[(punch.get('employee_code'), moment.date())].append(moment)

        employees = {
            e.employee_code: e
            for e in self.objects(Employee).filter(employee_code__in={code for code, _ in by_day})
        }
        skipped = sorted({code for code, _ in by_day if code not in employees})
        synced = 0

        with self.atomic():
            for (code, day), moments in sorted(by_day.items()):
                employee = employees.get(code)
                if employee is None:
                    continue
                moments.sort()
                check_in = moments[0]
                check_out = moments[-1] if len(moments) > 1 else None
                self.upsert_employee_days(
                    employee.pk, [day], classify_punches(check_in, check_out),
                    source='biometric',
                    remarks='Synced from biometric device.',
                    check_in_time=check_in.time(),
                    check_out_time=check_out.time() if check_out else None,
                )
                synced += 1

        if skipped:
            logger.warning(f"Biometric sync skipped unknown employee codes: {', '.join(map(str, skipped))}")
        logger.info(f"Biometric sync upserted {synced} record(s)")
        return {'synced_records': synced, 'skipped_codes': skipped}

    def employee_summary(self, employee_id, start_date, end_date):
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        employee = self.get_or_404(Employee, 'Employee not found.', pk=employee_id)
        records = list(self.objects(EmployeeAttendance)
                       .filter(employee=employee, date__range=(start_date, end_date))
                       .order_by('-date'))
        return {
            'employee': employee,
            'records': records,
            'summary': summarize(r.status for r in records),
        }

    # ==================== STUDENTS ====================
    def resolve_class(self, standard, section, medium=None):
        """Class of the active academic year for a standard and section."""
        academic_year = self.active_academic_year()
        classes = self.objects(Class).filter(academic_year=academic_year, standard=str(standard), section=section)
        if medium:
            classes = classes.filter(medium=medium)
        school_class = classes.first()
        if school_class is None:
            raise NotFound(f"No class found for standard {standard}, section {section}.")
        return school_class

    def upsert_student_attendance(self, class_id, entries, actor_employee=None):
        """
        entries: [{'student_id', 'date', 'status', 'remarks'?}].

        When `actor_employee` is given, only that class's teacher may submit.
        """
        if not entries:
            raise ValidationError('At least one attendance entry is required.')
        cleaned = [
            {
                'student_id': entry.get('student_id'),
                'date': normalize_date(entry.get('date')),
                'status': validate_status(entry.get('status')),
                'remarks': entry.get('remarks'),
            }
            for entry in entries
        ]

        with self.atomic():
            school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
            if actor_employee is not None and school_class.class_teacher_id != actor_employee.pk:
                raise Forbidden('Only the class teacher can take attendance for this class.')

            student_ids = {str(e['student_id']) for e in cleaned}
            admitted = {
                str(pk) for pk in self.objects(Admission)
                .filter(school_class=school_class, student_id__in=student_ids)
                .values_list('student_id', flat=True)
            }
            missing = sorted(student_ids - admitted)
            if missing:
                raise NotFound('Some students are not admitted to this class.', details={'student_ids': missing})

            for entry in cleaned:
                self.objects(StudentAttendance).update_or_create(
                    student_id=entry['student_id'],
                    date=entry['date'],
                    defaults={
                        'school_class': school_class,
                        'status': entry['status'],
                        'remarks': entry['remarks'],
                        'source': 'manual',
                    },
                )

        logger.info(f"{len(cleaned)} student attendance row(s) upserted for {school_class.class_name}")
        return {'count': len(cleaned)}

    def class_attendance(self, class_id, date=None, month=None):
        if date and month:
            raise ValidationError('Provide either a date or a month, not both.')
        if not date and not month:
            raise ValidationError('A date or a month (YYYY-MM) is required.')
        school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
        records = self.objects(StudentAttendance).filter(school_class=school_class).select_related('student')
        if date:
            return records.filter(date=normalize_date(date))
        first, last = month_bounds(month)
        return records.filter(date__range=(first, last)).order_by('date')

    def student_summary(self, student_id, start_date, end_date):
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        student = self.get_or_404(Student, 'Student not found.', pk=student_id)
        records = list(self.objects(StudentAttendance)
                       .filter(student=student, date__range=(start_date, end_date))
                       .order_by('date'))
        return {
            'student': student,
            'records': records,
            'summary': summarize(r.status for r in records),
        }

    def student_monthly_attendance(self, student_id, month):
        """Day-by-day attendance of one student for a 'YYYY-MM' month."""
        first, last = month_bounds(month)
        student = self.get_or_404(Student, 'Student not found.', pk=student_id)
        records = list(self.objects(StudentAttendance)
                       .filter(student=student, date__range=(first, last))
                       .order_by('date'))
        return {
            'student': student,
            'records': records,
            'summary': summarize(r.status for r in records),
        }
