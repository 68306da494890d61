# services/timetables.py
import logging

from django.db.models import Q

from ..exceptions import Conflict, NotFound, ValidationError
from ..models import AcademicYear, Class, Employee, Subject, Timetable, TimetableSlot
from .base import Service, replace_child_set

logger = logging.getLogger(__name__)

DAYS = [value for value, _ in TimetableSlot.DAY_CHOICES]
STATUSES = [value for value, _ in Timetable.STATUS_CHOICES]


class TimetableService(Service):
    """One timetable per class and academic year; slot edits replace every slot."""

    def _slot_rows(self, slots):
        if not slots:
            raise ValidationError('Timetable slots must be provided as a non-empty list.')
        subject_ids = {s['subject_id'] for s in slots if s.get('subject_id')}
        teacher_ids = {s['teacher_id'] for s in slots if s.get('teacher_id')}
        if len(self.objects(Subject).filter(pk__in=subject_ids)) != len(subject_ids):
            raise NotFound('One or more slot subjects were not found.')
        if len(self.objects(Employee).filter(pk__in=teacher_ids)) != len(teacher_ids):
            raise NotFound('One or more slot teachers were not found.')

        rows = []
        for slot in slots:
            if slot.get('day_of_week') not in DAYS:
                raise ValidationError(f"Invalid day_of_week. Must be one of: {', '.join(DAYS)}")
            if not slot.get('start_time') or not slot.get('end_time'):
                raise ValidationError('Every slot needs a start_time and an end_time.')
            if slot['start_time'] >= slot['end_time']:
                raise ValidationError('Slot start_time must be before end_time.')
            rows.append({
                'day_of_week': slot['day_of_week'],
                'start_time': slot['start_time'],
                'end_time': slot['end_time'],
                'is_break': bool(slot.get('is_break')),
                'subject_id': slot.get('subject_id'),
                'teacher_id': slot.get('teacher_id'),
                'room_number': slot.get('room_number'),
            })
        return rows

    def create_timetable(self, class_id, academic_year_id, slots, created_by, status='DRAFT'):
        if status not in STATUSES:
            raise ValidationError(f"Invalid status. Must be one of: {', '.join(STATUSES)}")

        with self.atomic():
            school_class = self.get_or_404(Class, 'Class not found.', pk=class_id)
            academic_year = self.get_or_404(AcademicYear, 'Academic year not found.', pk=academic_year_id)
            if self.objects(Timetable).filter(school_class=school_class, academic_year=academic_year).exists():
                raise Conflict(
                    'Timetable for this class and academic year already exists. Use the update endpoint to modify it.'
                )
            rows = self._slot_rows(slots)
            timetable = Timetable(school_class=school_class, academic_year=academic_year,
                                  status=status, created_by=created_by)
            self.save_unique(timetable, 'Timetable for this class and academic year already exists.')
            replace_child_set(timetable, TimetableSlot, 'timetable', rows, using=self.using)

        logger.info(f"Timetable created for {school_class.class_name}")
        return timetable

    def update_timetable(self, timetable_id, data, updated_by):
        with self.atomic():
            timetable = self.get_or_404(Timetable, 'Timetable not found.', pk=timetable_id)
            if data.get('class_id'):
                timetable.school_class = self.get_or_404(Class, 'Class not found.', pk=data['class_id'])
            if data.get('academic_year_id'):
                timetable.academic_year = self.get_or_404(
                    AcademicYear, 'Academic year not found.', pk=data['academic_year_id']
                )
            if data.get('status'):
                if data['status'] not in STATUSES:
                    raise ValidationError(f"Invalid status. Must be one of: {', '.join(STATUSES)}")
                timetable.status = data['status']
            timetable.updated_by = updated_by
            self.save_unique(timetable, 'Timetable for this class and academic year already exists.')

            if data.get('slots') is not None:
                replace_child_set(timetable, TimetableSlot, 'timetable', self._slot_rows(data['slots']),
                                  using=self.using)

        logger.info(f"Timetable {timetable.pk} updated")
        return timetable

    def delete_timetable(self, timetable_id):
        deleted, _ = self.objects(Timetable).filter(pk=timetable_id).delete()
        if not deleted:
            raise NotFound('Timetable not found.')

    def list_timetables(self, search=None, class_id=None, section=None, academic_year=None, status=None):
        timetables = self.objects(Timetable).select_related('school_class', 'academic_year', 'created_by')
        if search:
            timetables = timetables.filter(
                Q(school_class__class_name__icontains=search) | Q(created_by__username__icontains=search)
            )
        if class_id:
            timetables = timetables.filter(school_class_id=class_id)
        if section:
            timetables = timetables.filter(school_class__section__iexact=section)
        if academic_year:
            timetables = timetables.filter(academic_year__name=academic_year)
        if status:
            timetables = timetables.filter(status=status)
        return timetables.order_by('-updated_at')
