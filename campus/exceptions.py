# exceptions.py
import logging

from django.core.exceptions import ValidationError as DjangoValidationError
from django.db import IntegrityError
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.response import Response
from rest_framework.views import exception_handler

logger = logging.getLogger(__name__)


class CampusError(APIException):
    """Base class for domain errors; `details` carries the offending records."""
    status_code = status.HTTP_400_BAD_REQUEST
    default_detail = 'Request could not be processed.'
    default_code = 'error'

    def __init__(self, message=None, details=None):
        super().__init__(detail=message or self.default_detail, code=self.default_code)
        self.message = str(self.detail)
        self.details = details

    def __str__(self):
        return self.message


class ValidationError(CampusError):
    default_detail = 'Invalid input.'
    default_code = 'validation_error'


class NotFound(CampusError):
    status_code = status.HTTP_404_NOT_FOUND
    default_detail = 'Resource not found.'
    default_code = 'not_found'


class Conflict(CampusError):
    status_code = status.HTTP_409_CONFLICT
    default_detail = 'Request conflicts with existing data.'
    default_code = 'conflict'


class CapacityExceeded(Conflict):
    default_detail = 'Class capacity exceeded.'
    default_code = 'capacity_exceeded'


class DuplicateEnrollment(Conflict):
    default_detail = 'Student is already enrolled.'
    default_code = 'duplicate_enrollment'


class Forbidden(CampusError):
    status_code = status.HTTP_403_FORBIDDEN
    default_detail = 'You do not have permission to perform this action.'
    default_code = 'forbidden'


class InvalidState(CampusError):
    default_detail = 'Operation not allowed in the current state.'
    default_code = 'invalid_state'


class ConfigurationError(CampusError):
    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_detail = 'Server configuration error.'
    default_code = 'configuration_error'


def conflict_from_integrity_error(exc, message):
    """Translate a unique-constraint violation into a Conflict."""
    logger.warning(f"Integrity error: {exc}")
    return Conflict(message, details={'constraint': str(exc)})


def validation_from_django_error(exc, message='Invalid input.'):
    """Translate a Django model or field validation error into a ValidationError."""
    details = exc.message_dict if hasattr(exc, 'error_dict') else {'errors': exc.messages}
    return ValidationError(message, details=details)


def campus_exception_handler(exc, context):
    """Render every API error as {'success': False, 'error': ..., 'details': ...}."""
    if isinstance(exc, IntegrityError):
        exc = conflict_from_integrity_error(exc, 'A record with the same unique values already exists.')
    elif isinstance(exc, DjangoValidationError):
        exc = validation_from_django_error(exc)

    response = exception_handler(exc, context)
    if response is None:
        view = context.get('view')
        logger.error(f"Unhandled error in {view.__class__.__name__}: {exc}", exc_info=exc)
        return Response(
            {'success': False, 'error': 'Internal server error', 'details': None},
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    if isinstance(exc, CampusError):
        error, details = exc.message, exc.details
    elif isinstance(response.data, dict) and set(response.data) == {'detail'}:
        error, details = str(response.data['detail']), None
    else:
        # Serializer field errors
        error, details = 'Invalid input.', response.data

    response.data = {'success': False, 'error': error, 'details': details}
    return response
