# services/classes.py
import logging
from collections import OrderedDict

from django.db.models import Count, ProtectedError

from ..exceptions import CapacityExceeded, Conflict, NotFound, ValidationError
from ..models import (
    AcademicYear, Admission, Class, CourseOffering, Employee, Student,
    StudentCourseEnrollment, Subject, MEDIUM_CHOICES,
)
from ..rules import check_capacity, check_no_dependents, check_offering_removal, enforce
from .base import Service

logger = logging.getLogger(__name__)

VALID_MEDIUMS = [value for value, _ in MEDIUM_CHOICES]
CLASS_TEACHER_ROLES = ('teacher', 'admin')


class ClassService(Service):
    """Class registry: creation, edits, deletion and subject assignment."""

    def _validate(self, data):
        missing = [f for f in ('class_name', 'standard', 'section', 'medium', 'capacity') if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={'missing': missing})
        capacity = data['capacity']
        if isinstance(capacity, bool) or not isinstance(capacity, int) or capacity < 1:
            raise ValidationError('Capacity must be a positive integer.')
        if data['medium'] not in VALID_MEDIUMS:
            raise ValidationError(f"Invalid medium. Must be one of: {', '.join(VALID_MEDIUMS)}")

    def _class_teacher(self, teacher_id):
        if not teacher_id:
            return None
        teacher = self.get_or_404(Employee, 'Teacher not found.', pk=teacher_id)
        if teacher.role not in CLASS_TEACHER_ROLES:
            raise ValidationError('Class teacher must be an employee with the teacher or admin role.')
        return teacher

    def create_class(self, data):
        self._validate(data)
        if not data.get('academic_year_id'):
            raise ValidationError('Academic year is required.')

        with self.atomic():
            academic_year = self.get_or_404(AcademicYear, 'Academic year not found.', pk=data['academic_year_id'])
            teacher = self._class_teacher(data.get('class_teacher_id'))
            school_class = Class(
                class_name=data['class_name'],
                academic_year=academic_year,
                standard=str(data['standard']),
                section=data['section'],
                medium=data['medium'],
                capacity=data['capacity'],
                class_teacher=teacher,
            )
            self.save_unique(
                school_class,
                'A class with the same standard, section and medium already exists for this academic year.',
            )

        logger.info(f"Class {school_class.class_name} created in {academic_year.name}")
        return school_class

    def update_class(self, class_id, data):
        self._validate(data)
        with self.atomic():
            school_class = self.get_or_404(
                Class, 'Class not found. Cannot update a non-existent class.', pk=class_id
            )
            admitted = self.objects(Admission).filter(school_class=school_class).count()
            enforce(check_capacity(data['capacity'], admitted, 0), CapacityExceeded)

            school_class.class_name = data['class_name']
            school_class.standard = str(data['standard'])
            school_class.section = data['section']
            school_class.medium = data['medium']
            school_class.capacity = data['capacity']
            if 'class_teacher_id' in data:
                school_class.class_teacher = self._class_teacher(data['class_teacher_id'])
            self.save_unique(
                school_class,
                'A class with the same standard, section and medium already exists for this academic year.',
            )
        return school_class

    def delete_class(self, class_id):
        with self.atomic():
            school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
            admitted = self.objects(Admission).filter(school_class=school_class).count()
            enforce(check_no_dependents('class', admitted, 'admitted student(s)'), Conflict)
            try:
                school_class.delete(using=self.using)
            except ProtectedError as exc:
                raise Conflict(
                    'Cannot delete class: attendance records still reference it.',
                    details={'protected_count': len(exc.protected_objects)},
                )
        logger.info(f"Class {class_id} deleted")

    # ==================== SUBJECT ASSIGNMENT ====================
    def add_subjects_to_class(self, class_id, subject_ids, teacher_id=None, is_mandatory=True):
        if not subject_ids:
            raise ValidationError('subject_ids must be a non-empty list.')

        with self.atomic():
            school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
            subjects = list(self.objects(Subject).filter(pk__in=subject_ids))
            missing = {str(pk) for pk in subject_ids} - {str(s.pk) for s in subjects}
            if missing:
                raise NotFound('One or more subjects were not found.', details={'subject_ids': sorted(missing)})

            existing = list(
                self.objects(CourseOffering)
                .filter(school_class=school_class, subject__in=subjects)
                .values_list('subject_id', flat=True)
            )
            if existing:
                ids = sorted(str(pk) for pk in existing)
                raise Conflict(
                    f"One or more subjects are already assigned to this class. Subject IDs: {', '.join(ids)}",
                    details={'subject_ids': ids},
                )

            teacher = self.get_or_404(Employee, 'Teacher not found.', pk=teacher_id) if teacher_id else None
            offerings = self.objects(CourseOffering).bulk_create([
                CourseOffering(school_class=school_class, subject=subject, teacher=teacher, is_mandatory=is_mandatory)
                for subject in subjects
            ])

        logger.info(f"{len(offerings)} subject(s) added to class {school_class.class_name}")
        return offerings

    def remove_subject_from_class(self, class_id, subject_id):
        with self.atomic():
            offering = (self.objects(CourseOffering)
                        .filter(school_class_id=class_id, subject_id=subject_id)
                        .first())
            if offering is None:
                raise NotFound('Subject is not assigned to this class.')
            enrolled = self.objects(StudentCourseEnrollment).filter(course_offering=offering).count()
            enforce(check_offering_removal(enrolled), Conflict)
            offering.delete(using=self.using)

    def remove_student_from_class(self, class_id, student_id):
        with self.atomic():
            self.objects(StudentCourseEnrollment).filter(
                student_id=student_id, course_offering__school_class_id=class_id
            ).delete()
            deleted, _ = self.objects(Admission).filter(school_class_id=class_id, student_id=student_id).delete()
            if not deleted:
                raise NotFound('Admission record not found. The student may not be enrolled in this class.')
        logger.info(f"Student {student_id} removed from class {class_id}")

    # ==================== LOOKUPS ====================
    def list_classes(self):
        return (self.objects(Class)
                .select_related('academic_year', 'class_teacher')
                .annotate(student_count=Count('admissions', distinct=True)))

    def list_standards(self, standard=None):
        classes = self.objects(Class).order_by('standard', 'section')
        if standard:
            return sorted(set(classes.filter(standard=standard).values_list('section', flat=True)))

        grouped = OrderedDict()
        for std, section in classes.values_list('standard', 'section'):
            grouped.setdefault(std, set()).add(section)
        return [{'standard': std, 'sections': sorted(sections)} for std, sections in grouped.items()]

    def unassigned_students(self):
        return (self.objects(Student)
                .filter(admissions__isnull=True)
                .select_related('family_details')
                .order_by('first_name'))

    def available_subjects(self, class_id):
        school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
        return (self.objects(Subject)
                .exclude(course_offerings__school_class=school_class)
                .order_by('name'))

    def teacher_classes(self, employee_id):
        """Classes the employee leads as class teacher, by name."""
        classes = list(self.list_classes().filter(class_teacher_id=employee_id).order_by('class_name'))
        if not classes:
            raise NotFound('No classes found where you are assigned as the class teacher.')
        return classes
