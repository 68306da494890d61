# services/promotion.py
import logging

from ..exceptions import CapacityExceeded, DuplicateEnrollment, NotFound
from ..models import Admission, CourseOffering, StudentCourseEnrollment
from ..rules import check_capacity, check_single_admission_per_year, enforce
from .admissions import AdmissionService, unique_ids

logger = logging.getLogger(__name__)


class PromotionService(AdmissionService):
    """
    Moves students to a target class and re-derives their subject enrollments.

    After promotion a student's enrollments are exactly the target class's
    offerings; enrollments tied to their previous classes are removed.
    """

    def current_admissions(self, student_ids):
        """The latest admission of each student."""
        latest = {}
        for admission in (self.objects(Admission)
                          .filter(student_id__in=student_ids)
                          .order_by('student_id', '-admission_date', '-created_at')):
            latest.setdefault(admission.student_id, admission)
        return list(latest.values())

    def promote_students(self, student_ids, target_class_id):
        student_ids = unique_ids(student_ids)

        with self.atomic():
            target = self.lock_class(target_class_id)
            admissions = self.current_admissions(student_ids)
            admitted = {str(a.student_id) for a in admissions}
            missing = sorted(str(pk) for pk in student_ids if str(pk) not in admitted)
            if missing:
                raise NotFound('Students without an admission cannot be promoted.', details={'student_ids': missing})

            prior_class_ids = set(
                self.objects(Admission)
                .filter(student_id__in=student_ids)
                .exclude(school_class=target)
                .values_list('school_class_id', flat=True)
            )
            already_in_target = {a.student_id for a in admissions if a.school_class_id == target.pk}
            incoming = len({a.student_id for a in admissions} - already_in_target)
            current = self.objects(Admission).filter(school_class=target).count()
            enforce(check_capacity(target.capacity, current, incoming), CapacityExceeded)

            others = (self.objects(Admission)
                      .filter(student_id__in=student_ids, school_class__academic_year=target.academic_year)
                      .exclude(pk__in=[a.pk for a in admissions])
                      .values_list('student_id', flat=True))
            enforce(check_single_admission_per_year(others), DuplicateEnrollment)

            promoted = self.objects(Admission).filter(pk__in=[a.pk for a in admissions]).update(school_class=target)

            removed, _ = self.objects(StudentCourseEnrollment).filter(
                student_id__in=student_ids,
                course_offering__school_class_id__in=prior_class_ids,
            ).delete()

            offerings = list(self.objects(CourseOffering).filter(school_class=target))
            self.objects(StudentCourseEnrollment).bulk_create(
                [
                    StudentCourseEnrollment(student_id=student_id, course_offering=offering)
                    for student_id in student_ids
                    for offering in offerings
                ],
                ignore_conflicts=True,
            )

        logger.info(
            f"{promoted} admission(s) promoted to {target.class_name}; "
            f"{removed} stale enrollment(s) removed"
        )
        return {
            'promoted_count': promoted,
            'target_class_id': str(target.pk),
            'subject_enrollments': {
                'enrolled_subjects': len(offerings),
                'total_enrollments': len(offerings) * len(student_ids),
            },
        }
