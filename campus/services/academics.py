# services/academics.py
import logging

from ..exceptions import Conflict, ValidationError
from ..models import AcademicYear, Department, SchoolConfiguration
from ..rules import check_date_range, enforce
from ..utils import normalize_date
from .base import Service

logger = logging.getLogger(__name__)


class AcademicYearService(Service):
    """At most one academic year is active; activating one deactivates the rest."""

    def create_year(self, name, start_date, end_date, is_active=False):
        name = (name or '').strip()
        if not name:
            raise ValidationError('Academic year name is required.')
        start_date = normalize_date(start_date, 'start_date')
        end_date = normalize_date(end_date, 'end_date')
        enforce(check_date_range(start_date, end_date), ValidationError)
        if start_date == end_date:
            raise ValidationError('Academic year must span more than one day.')

        with self.atomic():
            if self.objects(AcademicYear).filter(name=name).exists():
                raise Conflict(f"Academic year '{name}' already exists.")
            year = AcademicYear(name=name, start_date=start_date, end_date=end_date)
            self.save_unique(year, f"Academic year '{name}' already exists.")
            if is_active:
                year = self.activate(year.pk)

        logger.info(f"Academic year {name} created")
        return year

    def activate(self, year_id):
        with self.atomic():
            year = self.get_or_404(AcademicYear, 'Academic year not found.', pk=year_id)
            (self.objects(AcademicYear)
                .select_for_update()
                .filter(is_active=True)
                .exclude(pk=year.pk)
                .update(is_active=False))
            year.is_active = True
            year.save(using=self.using, update_fields=['is_active', 'updated_at'])
        logger.info(f"Academic year {year.name} activated")
        return year

    def list_years(self):
        return self.objects(AcademicYear).order_by('-start_date')


class DepartmentService(Service):

    def create_department(self, name):
        name = (name or '').strip()
        if not name:
            raise ValidationError('Department name is required.')
        department = Department(name=name)
        return self.save_unique(department, f"Department '{name}' already exists.")

    def get_or_create_by_name(self, name):
        department, created = self.objects(Department).get_or_create(name=name.strip())
        if created:
            logger.info(f"Department {department.name} created")
        return department


class SchoolConfigurationService(Service):
    FIELDS = ('school_name', 'school_code', 'email', 'phone_number', 'address', 'logo_url')

    def get(self):
        return self.objects(SchoolConfiguration).order_by('created_at').first()

    def update(self, data):
        with self.atomic():
            config = self.get()
            if config is None:
                if not data.get('school_name'):
                    raise ValidationError('School name is required.')
                config = SchoolConfiguration()
            for field in self.FIELDS:
                if field in data:
                    setattr(config, field, data[field])
            config.save(using=self.using)
        return config
