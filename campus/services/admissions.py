# services/admissions.py
import logging

from django.db import IntegrityError

from ..exceptions import CapacityExceeded, DuplicateEnrollment, NotFound, ValidationError, conflict_from_integrity_error
from ..models import Admission, Class, CourseOffering, Student, StudentCourseEnrollment
from ..rules import check_capacity, check_single_admission_per_year, enforce
from ..utils import parse_uuid, timestamp_numbers, today_utc
from .base import Service

logger = logging.getLogger(__name__)


def unique_ids(ids, label='student_ids'):
    """Parse identifiers as UUIDs, rejecting empty or repeated ones and keeping the caller's order."""
    if not ids or not isinstance(ids, (list, tuple)):
        raise ValidationError(f"{label} must be a non-empty list.")
    seen = []
    for value in ids:
        pk = parse_uuid(value, label)
        if pk in seen:
            raise ValidationError(f"Duplicate id in {label}: {pk}")
        seen.append(pk)
    return seen


class AdmissionService(Service):
    """Admits students to classes while enforcing capacity and one class per academic year."""

    def lock_class(self, class_id):
        class_id = parse_uuid(class_id, 'class_id')
        try:
            return self.objects(Class).select_for_update().select_related('academic_year').get(pk=class_id)
        except Class.DoesNotExist:
            raise NotFound('Class not found.')

    def check_students_exist(self, student_ids):
        found = {str(pk) for pk in self.objects(Student).filter(pk__in=student_ids).values_list('pk', flat=True)}
        missing = sorted(str(pk) for pk in student_ids if str(pk) not in found)
        if missing:
            raise NotFound('One or more students were not found.', details={'student_ids': missing})

    def check_capacity(self, school_class, incoming_count):
        current = self.objects(Admission).filter(school_class=school_class).count()
        enforce(check_capacity(school_class.capacity, current, incoming_count), CapacityExceeded)

    def check_not_admitted_this_year(self, school_class, student_ids):
        already = (self.objects(Admission)
                   .filter(student_id__in=student_ids, school_class__academic_year=school_class.academic_year)
                   .values_list('student_id', flat=True)
                   .distinct())
        enforce(check_single_admission_per_year(already), DuplicateEnrollment)

    def enroll_in_mandatory_offerings(self, school_class, student_ids):
        offerings = list(self.objects(CourseOffering).filter(school_class=school_class, is_mandatory=True))
        enrollments = [
            StudentCourseEnrollment(student_id=student_id, course_offering=offering)
            for student_id in student_ids
            for offering in offerings
        ]
        self.objects(StudentCourseEnrollment).bulk_create(enrollments, ignore_conflicts=True)
        return len(enrollments)

    def admit_students(self, class_id, student_ids):
        student_ids = unique_ids(student_ids)

        with self.atomic():
            school_class = self.lock_class(class_id)
            self.check_students_exist(student_ids)
            self.check_capacity(school_class, len(student_ids))
            self.check_not_admitted_this_year(school_class, student_ids)

            admission_date = today_utc()
            numbers = timestamp_numbers(len(student_ids))
            admissions = [
                Admission(
                    student_id=student_id,
                    school_class=school_class,
                    admission_number=admission_number,
                    gr_number=gr_number,
                    admission_date=admission_date,
                )
                for student_id, (admission_number, gr_number) in zip(student_ids, numbers)
            ]
            try:
                with self.atomic():
                    self.objects(Admission).bulk_create(admissions)
            except IntegrityError as exc:
                raise conflict_from_integrity_error(exc, 'Generated admission numbers collided; please retry.')
            self.enroll_in_mandatory_offerings(school_class, student_ids)

        logger.info(f"{len(admissions)} student(s) admitted to class {school_class.class_name}")
        return {'count': len(admissions)}

    def batch_update_roll_numbers(self, updates):
        """updates: [{'admission_id': ..., 'roll_number': ...}], applied all or nothing."""
        if not updates:
            raise ValidationError('updates must be a non-empty list.')
        for item in updates:
            roll_number = item.get('roll_number')
            if not item.get('admission_id') or isinstance(roll_number, bool) or not isinstance(roll_number, int) or roll_number < 1:
                raise ValidationError('Each update needs an admission_id and a positive integer roll_number.')

        with self.atomic():
            for item in updates:
                updated = self.objects(Admission).filter(pk=item['admission_id']).update(roll_number=item['roll_number'])
                if not updated:
                    raise NotFound(f"Admission {item['admission_id']} not found.")

        logger.info(f"{len(updates)} roll number(s) updated")
        return {'count': len(updates)}
