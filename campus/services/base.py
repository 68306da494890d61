# services/base.py
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import DEFAULT_DB_ALIAS, IntegrityError, transaction

from ..exceptions import (
    ConfigurationError, NotFound, ValidationError, conflict_from_integrity_error, validation_from_django_error,
)
from ..models import AcademicYear

logger = logging.getLogger(__name__)


class Service:
    """
    Base for the transactional engines.

    A service is bound to a database alias at construction; every query and
    transaction it runs goes through that alias.
    """

    def __init__(self, using=DEFAULT_DB_ALIAS):
        self.using = using

    def atomic(self):
        return transaction.atomic(using=self.using)

    def objects(self, model):
        return model._default_manager.db_manager(self.using)

    def get_or_404(self, model, message=None, **lookup):
        try:
            return self.objects(model).get(**lookup)
        except model.DoesNotExist:
            raise NotFound(message or f"{model._meta.verbose_name.capitalize()} not found.")
        except DjangoValidationError as exc:
            raise validation_from_django_error(exc, 'Invalid identifier.')

    def active_academic_year(self):
        year = self.objects(AcademicYear).filter(is_active=True).first()
        if year is None:
            raise ConfigurationError('No active academic year is configured.')
        return year

    def save_unique(self, instance, message, **save_kwargs):
        """Save inside a savepoint, reporting a unique-constraint violation as Conflict."""
        try:
            with self.atomic():
                instance.save(using=self.using, **save_kwargs)
        except IntegrityError as exc:
            raise conflict_from_integrity_error(exc, message)
        return instance


def replace_child_set(parent, model, fk_name, rows, using=DEFAULT_DB_ALIAS, order_field=None):
    """
    Delete every child of `parent` and bulk-insert `rows` in their place.

    `rows` are dicts of child field values. When `order_field` is given it is
    filled with the 1-based position of each row.
    """
    manager = model._default_manager.db_manager(using)
    with transaction.atomic(using=using):
        deleted, _ = manager.filter(**{fk_name: parent}).delete()
        children = []
        for position, row in enumerate(rows, start=1):
            values = dict(row)
            if order_field:
                values[order_field] = position
            values[fk_name] = parent
            children.append(model(**values))
        manager.bulk_create(children)
    logger.info(f"Replaced {deleted} {model.__name__} row(s) of {parent.pk} with {len(children)}")
    return children


def clean_values(model, values, section, fields=None):
    """
    Validate one payload section against the editable columns of `model`.

    Unknown keys are rejected. Known values go through the model field's own
    conversion and validators, so the returned dict holds dates, decimals and
    checked choices instead of raw request data. `fields` narrows the
    accepted columns.
    """
    if not isinstance(values, dict):
        raise ValidationError(f"{section} must be an object.")
    columns = {
        field.name: field for field in model._meta.concrete_fields
        if field.editable and not field.primary_key and not field.is_relation
        and (fields is None or field.name in fields)
    }
    unknown = sorted(set(values) - set(columns))
    if unknown:
        raise ValidationError(f"Unknown field(s) in {section}: {', '.join(unknown)}", details={section: unknown})

    cleaned, errors = {}, {}
    for name, value in values.items():
        try:
            cleaned[name] = columns[name].clean(value, None)
        except DjangoValidationError as exc:
            errors[name] = exc.messages
    if errors:
        raise ValidationError(f"Invalid values in {section}.", details={section: errors})
    return cleaned
