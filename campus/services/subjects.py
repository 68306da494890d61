# services/subjects.py
import logging

from ..exceptions import Conflict, NotFound, ValidationError
from ..models import Admission, Class, CourseOffering, Employee, StudentCourseEnrollment, Subject
from ..rules import check_no_dependents, check_offering_removal, enforce
from ..utils import subject_code_base
from .base import Service

logger = logging.getLogger(__name__)


class SubjectService(Service):
    """
    Subject catalogue and the offering synchronizer.

    A subject is offered to one standard; each of the chosen sections of that
    standard in the active academic year gets a CourseOffering.
    """

    def _validate(self, name, standard, sections):
        if not name or not name.strip():
            raise ValidationError('Subject name is required.')
        if not standard:
            raise ValidationError('Standard is required.')
        if not sections:
            raise ValidationError('At least one section is required.')

    def _target_classes(self, academic_year, standard, sections):
        classes = list(self.objects(Class).filter(
            academic_year=academic_year, standard=str(standard), section__in=sections,
        ))
        missing = sorted(set(sections) - {c.section for c in classes})
        if missing:
            raise NotFound(
                f"No class found for standard {standard}, section(s): {', '.join(missing)}.",
                details={'sections': missing},
            )
        return classes

    def _generate_code(self, name, standard):
        base = subject_code_base(name, standard)
        code, counter = base, 1
        while self.objects(Subject).filter(code=code).exists():
            code = f"{base}-{counter}"
            counter += 1
        return code

    def _enroll_admitted_students(self, offerings):
        """Enroll every student admitted to each offering's class; existing rows are kept."""
        by_class = {offering.school_class_id: offering for offering in offerings}
        admissions = self.objects(Admission).filter(school_class_id__in=list(by_class)).values_list('student_id', 'school_class_id')
        enrollments = [
            StudentCourseEnrollment(student_id=student_id, course_offering=by_class[class_id])
            for student_id, class_id in admissions
        ]
        self.objects(StudentCourseEnrollment).bulk_create(enrollments, ignore_conflicts=True)
        return len(enrollments)

    def create_subject(self, name, standard, sections, teacher_id=None, is_mandatory=True):
        self._validate(name, standard, sections)
        name = name.strip()

        with self.atomic():
            if self.objects(Subject).filter(name__iexact=name).exists():
                raise Conflict(f"Subject '{name}' already exists.")
            teacher = self.get_or_404(Employee, 'Teacher not found.', pk=teacher_id) if teacher_id else None
            academic_year = self.active_academic_year()
            classes = self._target_classes(academic_year, standard, sections)

            subject = Subject(name=name, code=self._generate_code(name, standard))
            self.save_unique(subject, f"Subject '{name}' already exists.")
            offerings = self.objects(CourseOffering).bulk_create([
                CourseOffering(school_class=c, subject=subject, teacher=teacher, is_mandatory=is_mandatory)
                for c in classes
            ])
            enrolled = self._enroll_admitted_students(offerings) if is_mandatory else 0

        logger.info(f"Subject {subject.code} created with {len(offerings)} offering(s), {enrolled} enrollment(s)")
        return subject

    def synchronize_offerings(self, subject_id, name, standard, sections, teacher_id, is_mandatory=True):
        """
        Reconcile the subject's offerings with (standard x sections).

        Offerings outside the target set are deleted, shared ones get the new
        teacher and mandatory flag, and missing ones are created. Nothing is
        written when a removed offering still has enrollments.
        """
        self._validate(name, standard, sections)
        if not teacher_id:
            raise ValidationError('Teacher is required.')
        name = name.strip()

        with self.atomic():
            subject = self.get_or_404(Subject, 'Subject not found.', pk=subject_id)
            teacher = self.get_or_404(Employee, 'Teacher not found.', pk=teacher_id)
            academic_year = self.active_academic_year()

            if self.objects(Subject).filter(name__iexact=name).exclude(pk=subject.pk).exists():
                raise Conflict(f"Another subject named '{name}' already exists.")

            target_ids = {c.pk for c in self._target_classes(academic_year, standard, sections)}
            existing = {o.school_class_id: o for o in self.objects(CourseOffering).filter(subject=subject)}

            to_delete = [o for class_id, o in existing.items() if class_id not in target_ids]
            to_update = [o for class_id, o in existing.items() if class_id in target_ids]
            to_create = [class_id for class_id in target_ids if class_id not in existing]

            enrolled = self.objects(StudentCourseEnrollment).filter(course_offering__in=to_delete).count()
            enforce(check_offering_removal(enrolled), Conflict)

            if subject.name != name:
                subject.name = name
                self.save_unique(subject, f"Another subject named '{name}' already exists.")

            self.objects(CourseOffering).filter(pk__in=[o.pk for o in to_delete]).delete()
            self.objects(CourseOffering).filter(pk__in=[o.pk for o in to_update]).update(
                teacher=teacher, is_mandatory=is_mandatory,
            )
            self.objects(CourseOffering).bulk_create([
                CourseOffering(school_class_id=class_id, subject=subject, teacher=teacher, is_mandatory=is_mandatory)
                for class_id in to_create
            ])

        logger.info(
            f"Subject {subject.code} synchronized: "
            f"{len(to_delete)} removed, {len(to_update)} updated, {len(to_create)} created"
        )
        return subject

    def delete_subject(self, subject_id):
        with self.atomic():
            subject = self.get_or_404(Subject, 'Subject not found.', pk=subject_id)
            offerings = self.objects(CourseOffering).filter(subject=subject).count()
            enforce(check_no_dependents('subject', offerings, 'class offering(s)'), Conflict)
            subject.delete(using=self.using)
        logger.info(f"Subject {subject_id} deleted")

    # ==================== ENROLLMENT ====================
    def enroll_students(self, subject_id, student_ids):
        """Enroll students into the subject's offering for their admitted class."""
        if not student_ids:
            raise ValidationError('student_ids must be a non-empty list.')

        with self.atomic():
            subject = self.get_or_404(Subject, 'Subject not found.', pk=subject_id)
            offerings = {o.school_class_id: o for o in self.objects(CourseOffering).filter(subject=subject)}
            if not offerings:
                raise NotFound('This subject is not offered to any class.')

            admissions = self.objects(Admission).filter(student_id__in=student_ids, school_class_id__in=list(offerings))
            pairs = {(a.student_id, offerings[a.school_class_id].pk) for a in admissions}
            if not pairs:
                raise NotFound('None of the students are admitted to a class offering this subject.')

            existing = set(
                self.objects(StudentCourseEnrollment)
                .filter(course_offering_id__in=[o.pk for o in offerings.values()], student_id__in=student_ids)
                .values_list('student_id', 'course_offering_id')
            )
            new_pairs = pairs - existing
            self.objects(StudentCourseEnrollment).bulk_create(
                [StudentCourseEnrollment(student_id=s, course_offering_id=o) for s, o in new_pairs],
                ignore_conflicts=True,
            )

        return {
            'enrolled_count': len(new_pairs),
            'already_enrolled_count': len(pairs & existing),
        }

    def withdraw_student(self, subject_id, student_id):
        deleted, _ = self.objects(StudentCourseEnrollment).filter(
            student_id=student_id, course_offering__subject_id=subject_id,
        ).delete()
        if not deleted:
            raise NotFound('Enrollment not found for this student and subject.')

    def enrolled_students(self, subject_id):
        self.get_or_404(Subject, 'Subject not found.', pk=subject_id)
        return (self.objects(StudentCourseEnrollment)
                .filter(course_offering__subject_id=subject_id)
                .select_related('student', 'course_offering__school_class'))

    # ==================== TEACHER VIEWS ====================
    def teacher_offerings(self, employee_id):
        return (self.objects(CourseOffering)
                .filter(teacher_id=employee_id)
                .select_related('subject', 'school_class', 'teacher')
                .order_by('school_class__class_name', 'subject__name'))

    def teacher_offering(self, employee_id, offering_id):
        return self.get_or_404(
            CourseOffering, 'Subject not found or you are not authorized to view it.',
            pk=offering_id, teacher_id=employee_id,
        )
