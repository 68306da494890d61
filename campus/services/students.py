# services/students.py
import logging

from django.contrib.auth import get_user_model
from django.contrib.auth.password_validation import validate_password
from django.core.exceptions import ValidationError as DjangoValidationError

from ..exceptions import NotFound, ValidationError
from ..models import (
    Admission, Student, StudentAddress, StudentDetails, StudentDocument, StudentFacilities,
    StudentFamilyDetails, StudentHostelDetails, StudentPaymentDetails, StudentPreviousAcademicDetails,
)
from ..utils import normalize_date, today_utc, username_base
from .admissions import AdmissionService
from .base import clean_values

logger = logging.getLogger(__name__)
User = get_user_model()

# One-to-one detail tables keyed by the payload section that fills them
DETAIL_MODELS = {
    'details': StudentDetails,
    'family_details': StudentFamilyDetails,
    'previous_academic_details': StudentPreviousAcademicDetails,
    'payment_details': StudentPaymentDetails,
    'hostel_details': StudentHostelDetails,
    'facilities': StudentFacilities,
}

STUDENT_FIELDS = ('first_name', 'last_name', 'dob', 'gender', 'profile_avatar_url', 'status')
ADDRESS_FIELDS = ('address_line', 'village', 'taluka', 'district', 'primary_contact', 'secondary_contact')
MEDIUM_ABBREVIATIONS = {'English': 'EM', 'Gujarati': 'GM', 'Hindi': 'HM'}


def medium_abbreviation(medium):
    return MEDIUM_ABBREVIATIONS.get(medium) or (medium or '')[:2].upper()


class StudentService(AdmissionService):
    """
    Student lifecycle.

    Creating a student writes the login account, the student, the admission,
    any supplied detail rows and the mandatory subject enrollments in one
    transaction. Login accounts start without a usable password; an
    administrator sets one through `set_credentials`.
    """

    def _unique_username(self, first_name, last_name):
        base = username_base(first_name, last_name)
        username, counter = base, 0
        while self.objects(User).filter(username=username).exists():
            counter += 1
            username = f"{base}{counter}"
        return username

    def _clean_details(self, data):
        return {
            model: clean_values(model, data[section], section)
            for section, model in DETAIL_MODELS.items() if data.get(section)
        }

    def _upsert_details(self, student, details):
        for model, values in details.items():
            self.objects(model).update_or_create(student=student, defaults=values)

    def create_student(self, data):
        info = data.get('student') or {}
        admission_data = data.get('admission') or {}
        if not data.get('class_id') or not info or not admission_data:
            raise ValidationError('class_id, student and admission are required.')
        if not info.get('first_name') or not info.get('last_name'):
            raise ValidationError('First name and last name are required.')
        if not admission_data.get('admission_number') or not admission_data.get('gr_number'):
            raise ValidationError('Admission number and GR number are required.')
        info = clean_values(Student, info, 'student', fields=STUDENT_FIELDS)
        admission_data = clean_values(Admission, admission_data, 'admission')
        addresses = data.get('addresses') or ([data['address']] if data.get('address') else [])
        addresses = [clean_values(StudentAddress, a, 'addresses') for a in addresses]
        documents = [clean_values(StudentDocument, d, 'documents') for d in data.get('documents') or []]
        details = self._clean_details(data)

        with self.atomic():
            school_class = self.lock_class(data['class_id'])
            self.check_capacity(school_class, 1)

            user = User(username=self._unique_username(info['first_name'], info['last_name']), role='student')
            user.set_unusable_password()
            user.save(using=self.using)

            student = self.objects(Student).create(
                user=user,
                **{field: info[field] for field in STUDENT_FIELDS if info.get(field) is not None},
            )
            admission = Admission(
                student=student,
                school_class=school_class,
                admission_number=admission_data['admission_number'],
                gr_number=admission_data['gr_number'],
                roll_number=admission_data.get('roll_number'),
                form_number=admission_data.get('form_number'),
                admission_date=normalize_date(admission_data.get('admission_date') or today_utc(), 'admission_date'),
            )
            self.save_unique(admission, 'Admission number or GR number already exists.')

            self._upsert_details(student, details)
            self.objects(StudentAddress).bulk_create([StudentAddress(student=student, **a) for a in addresses])
            self.objects(StudentDocument).bulk_create([StudentDocument(student=student, **d) for d in documents])
            enrolled = self.enroll_in_mandatory_offerings(school_class, [student.pk])

        logger.info(f"Student {student.full_name} created as {user.username} with {enrolled} enrollment(s)")
        return student

    def update_student(self, student_id, data):
        details = self._clean_details(data)
        with self.atomic():
            student = self.get_or_404(Student, 'Student not found.', pk=student_id)

            info = clean_values(Student, data.get('student') or {}, 'student', fields=STUDENT_FIELDS)
            for field in STUDENT_FIELDS:
                if field in info:
                    setattr(student, field, info[field])
            student.save(using=self.using)

            admission_data = clean_values(Admission, data.get('admission') or {}, 'admission', fields=('admission_number',))
            admission_number = admission_data.get('admission_number')
            if admission_number:
                admission = self.objects(Admission).filter(student=student).order_by('-admission_date').first()
                if admission is None:
                    raise NotFound('Student has no admission to update.')
                admission.admission_number = admission_number
                self.save_unique(admission, 'Admission number already exists.')

            self._upsert_details(student, details)

            address = data.get('address')
            if address:
                address = clean_values(StudentAddress, address, 'address')
                primary = self.objects(StudentAddress).filter(student=student).order_by('created_at').first()
                if primary is None:
                    self.objects(StudentAddress).create(student=student, **address)
                else:
                    for field in ADDRESS_FIELDS:
                        if field in address:
                            setattr(primary, field, address[field])
                    primary.save(using=self.using)

        logger.info(f"Student {student.pk} updated")
        return student

    def delete_student(self, student_id):
        with self.atomic():
            student = self.get_or_404(Student, 'Student not found.', pk=student_id)
            user = student.user
            student.delete(using=self.using)
            if user is not None:
                user.delete(using=self.using)
        logger.info(f"Student {student_id} deleted")

    def basic_profile(self, student_id):
        """
        Header card shown to a signed-in student.

        The name reads surname, given name, father's name in capitals and the
        class reads like "8 (EM)-A".
        """
        student = self.get_or_404(Student, 'Student profile not found.', pk=student_id)
        admission = (self.objects(Admission).filter(student=student).select_related('school_class')
                     .order_by('-admission_date', '-created_at').first())
        family = self.objects(StudentFamilyDetails).filter(student=student).first()
        address = self.objects(StudentAddress).filter(student=student).order_by('created_at').first()

        name = ' '.join(filter(None, [student.last_name, student.first_name, family and family.father_name]))
        standard = None
        if admission:
            school_class = admission.school_class
            standard = f"{school_class.standard} ({medium_abbreviation(school_class.medium)})-{school_class.section}"
        return {
            'id': str(student.pk),
            'name': name.upper(),
            'gr_number': admission.gr_number if admission else None,
            'roll_number': admission.roll_number if admission else None,
            'standard': standard,
            'mobile': family.father_contact if family else None,
            'address': ' '.join(filter(None, [address.address_line, address.taluka])) if address else None,
            'profile_avatar_url': student.profile_avatar_url,
        }

    # ==================== CREDENTIALS ====================
    def set_credentials(self, student_id, password, username=None):
        """Create or update the student's login; the password is stored hashed."""
        if not password:
            raise ValidationError('A password is required.')

        with self.atomic():
            student = self.get_or_404(Student, 'Student not found.', pk=student_id)
            user = student.user
            if user is None:
                if not username:
                    admission = self.objects(Admission).filter(student=student).order_by('-admission_date').first()
                    if admission is None:
                        raise NotFound('Student has no admission; a username is required.')
                    username = admission.gr_number
                user = User(username=username, role='student')
            elif username:
                user.username = username

            try:
                validate_password(password, user)
            except DjangoValidationError as exc:
                raise ValidationError('Password does not meet the requirements.', details={'password': exc.messages})
            user.set_password(password)
            self.save_unique(user, f"Username '{user.username}' is already taken.")
            if student.user_id != user.pk:
                student.user = user
                student.save(using=self.using, update_fields=['user', 'updated_at'])

        logger.info(f"Credentials set for student {student.pk}")
        return user

    def list_credentials(self, class_id=None):
        """Students with their usernames; passwords are never exposed."""
        students = self.objects(Student).select_related('user').order_by('first_name', 'last_name')
        if class_id:
            students = students.filter(admissions__school_class_id=class_id)
        return [
            {
                'student_id': str(s.pk),
                'name': s.full_name,
                'username': s.user.username if s.user else None,
                'has_password': bool(s.user and s.user.has_usable_password()),
            }
            for s in students
        ]
