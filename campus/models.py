# models.py
from django.db import models
from django.db.models import Q
from django.contrib.auth.models import AbstractUser
from django.core.validators import MinValueValidator
import uuid


# ==================== SHARED CHOICES ====================
GENDER_CHOICES = [('male', 'Male'), ('female', 'Female'), ('other', 'Other')]

MEDIUM_CHOICES = [('English', 'English'), ('Hindi', 'Hindi'), ('Gujarati', 'Gujarati')]

ATTENDANCE_STATUS_CHOICES = [
    ('present', 'Present'),
    ('absent', 'Absent'),
    ('late', 'Late'),
    ('half_day', 'Half Day'),
    ('on_leave', 'On Leave'),
]

ATTENDANCE_SOURCE_CHOICES = [
    ('biometric', 'Biometric'),
    ('manual', 'Manual'),
    ('manual_bulk', 'Manual Bulk'),
]


class BaseModel(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


# ==================== USER MANAGEMENT ====================
class User(AbstractUser):
    ROLE_CHOICES = [
        ('student', 'Student'),
        ('teacher', 'Teacher'),
        ('staff', 'Staff'),
        ('admin', 'Admin'),
    ]

    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='student')

    class Meta:
        indexes = [
            models.Index(fields=['role'], name='campus_user_role_idx'),
        ]

    def __str__(self):
        return f"{self.username} ({self.role})"

    @property
    def is_admin_role(self):
        return self.is_superuser or self.role == 'admin'


# ==================== SCHOOL / REFERENCE DATA ====================
class SchoolConfiguration(BaseModel):
    school_name = models.CharField(max_length=200)
    school_code = models.CharField(max_length=50, blank=True, null=True)
    email = models.EmailField(blank=True, null=True)
    phone_number = models.CharField(max_length=20, blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    logo_url = models.URLField(blank=True, null=True)

    def __str__(self):
        return self.school_name


class AcademicYear(BaseModel):
    name = models.CharField(max_length=20, unique=True)
    start_date = models.DateField()
    end_date = models.DateField()
    is_active = models.BooleanField(default=False)

    class Meta:
        ordering = ['-start_date']
        constraints = [
            models.UniqueConstraint(
                fields=['is_active'],
                condition=Q(is_active=True),
                name='unique_active_academic_year',
            ),
            models.CheckConstraint(
                condition=Q(start_date__lt=models.F('end_date')),
                name='academic_year_start_before_end',
            ),
        ]

    def __str__(self):
        return self.name


class Department(BaseModel):
    name = models.CharField(max_length=100, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return self.name


# ==================== EMPLOYEE MANAGEMENT ====================
class Employee(BaseModel):
    ROLE_CHOICES = [
        ('teacher', 'Teacher'),
        ('admin', 'Admin'),
        ('librarian', 'Librarian'),
        ('staff', 'Staff'),
    ]
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('resigned', 'Resigned'),
        ('inactive', 'Inactive'),
    ]

    user = models.OneToOneField(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='employee')
    employee_code = models.CharField(max_length=20, unique=True)
    full_name = models.CharField(max_length=200)
    email = models.EmailField(unique=True)
    phone_number = models.CharField(max_length=20, unique=True, blank=True, null=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)
    dob = models.DateField(blank=True, null=True)
    address = models.TextField(blank=True, null=True)
    highest_qualification = models.CharField(max_length=100, blank=True, null=True)
    years_of_experience = models.PositiveIntegerField(blank=True, null=True)
    joining_date = models.DateField()
    resignation_date = models.DateField(blank=True, null=True)
    department = models.ForeignKey(Department, on_delete=models.SET_NULL, null=True, blank=True, related_name='employees')
    designation = models.CharField(max_length=100, blank=True, null=True)
    role = models.CharField(max_length=20, choices=ROLE_CHOICES, default='teacher')
    employment_type = models.CharField(max_length=50, blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')
    profile_avatar_url = models.URLField(blank=True, null=True)

    class Meta:
        ordering = ['employee_code']
        indexes = [
            models.Index(fields=['role'], name='campus_employee_role_idx'),
            models.Index(fields=['status'], name='campus_employee_status_idx'),
        ]

    def __str__(self):
        return f"{self.employee_code} - {self.full_name}"


class EmployeeSalary(BaseModel):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='salaries')
    basic_salary = models.DecimalField(max_digits=12, decimal_places=2)
    allowances = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    deductions = models.DecimalField(max_digits=12, decimal_places=2, default=0)
    effective_from_date = models.DateField()
    effective_to_date = models.DateField(blank=True, null=True)

    class Meta:
        ordering = ['-effective_from_date']

    @property
    def net_salary(self):
        return self.basic_salary + self.allowances - self.deductions

    def __str__(self):
        return f"{self.employee.employee_code} from {self.effective_from_date}"


class EmployeeDocument(BaseModel):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='documents')
    document_name = models.CharField(max_length=200)
    document_type = models.CharField(max_length=50, blank=True, null=True)
    file_url = models.URLField()
    is_verified = models.BooleanField(default=False)

    def __str__(self):
        return self.document_name


class EmployeeAttendance(BaseModel):
    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='attendance')
    date = models.DateField()
    status = models.CharField(max_length=20, choices=ATTENDANCE_STATUS_CHOICES)
    check_in_time = models.TimeField(blank=True, null=True)
    check_out_time = models.TimeField(blank=True, null=True)
    source = models.CharField(max_length=20, choices=ATTENDANCE_SOURCE_CHOICES, default='biometric')
    remarks = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['employee', 'date'], name='unique_employee_attendance_day'),
        ]
        indexes = [
            models.Index(fields=['date'], name='campus_empatt_date_idx'),
        ]

    def __str__(self):
        return f"{self.employee.employee_code} {self.date} {self.status}"


class EmployeeLeave(BaseModel):
    LEAVE_TYPE_CHOICES = [
        ('sick', 'Sick'),
        ('casual', 'Casual'),
        ('annual', 'Annual'),
        ('other', 'Other'),
    ]
    STATUS_CHOICES = [
        ('pending', 'Pending'),
        ('approved', 'Approved'),
        ('rejected', 'Rejected'),
    ]

    employee = models.ForeignKey(Employee, on_delete=models.CASCADE, related_name='leaves')
    leave_type = models.CharField(max_length=20, choices=LEAVE_TYPE_CHOICES)
    start_date = models.DateField()
    end_date = models.DateField()
    reason = models.TextField()
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='pending')
    supporting_document_url = models.URLField(blank=True, null=True)

    class Meta:
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['employee'], name='campus_leave_employee_idx'),
            models.Index(fields=['status'], name='campus_leave_status_idx'),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(start_date__lte=models.F('end_date')),
                name='employee_leave_start_before_end',
            ),
        ]

    @property
    def total_days(self):
        return (self.end_date - self.start_date).days + 1

    def __str__(self):
        return f"{self.employee.employee_code} - {self.leave_type} - {self.start_date} to {self.end_date}"


class LeaveStatusHistory(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    leave = models.ForeignKey(EmployeeLeave, on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20, choices=EmployeeLeave.STATUS_CHOICES)
    comment = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ['created_at']
        verbose_name_plural = "Leave status history"

    def __str__(self):
        return f"{self.leave_id} -> {self.status}"


# ==================== CLASS / SUBJECT MANAGEMENT ====================
class Class(BaseModel):
    class_name = models.CharField(max_length=50)
    academic_year = models.ForeignKey(AcademicYear, on_delete=models.PROTECT, related_name='classes')
    standard = models.CharField(max_length=10)
    section = models.CharField(max_length=5)
    medium = models.CharField(max_length=20, choices=MEDIUM_CHOICES, default='English')
    capacity = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    class_teacher = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='classes_led')

    class Meta:
        verbose_name_plural = "Classes"
        ordering = ['standard', 'section']
        constraints = [
            models.UniqueConstraint(
                fields=['academic_year', 'standard', 'section', 'medium'],
                name='unique_class_per_year',
            ),
            models.CheckConstraint(condition=Q(capacity__gt=0), name='class_capacity_positive'),
        ]

    def __str__(self):
        return f"{self.class_name} ({self.academic_year})"


class Subject(BaseModel):
    name = models.CharField(max_length=100, unique=True)
    code = models.CharField(max_length=30, unique=True)

    class Meta:
        ordering = ['name']

    def __str__(self):
        return f"{self.code} - {self.name}"


class CourseOffering(BaseModel):
    school_class = models.ForeignKey(Class, on_delete=models.CASCADE, related_name='course_offerings')
    subject = models.ForeignKey(Subject, on_delete=models.PROTECT, related_name='course_offerings')
    teacher = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='course_offerings')
    is_mandatory = models.BooleanField(default=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['school_class', 'subject'], name='unique_subject_per_class'),
        ]

    def __str__(self):
        return f"{self.subject.name} @ {self.school_class.class_name}"


class CourseMaterial(BaseModel):
    course_offering = models.ForeignKey(CourseOffering, on_delete=models.CASCADE, related_name='materials')
    name = models.CharField(max_length=200)
    file_url = models.URLField()

    def __str__(self):
        return self.name


# ==================== STUDENT MANAGEMENT ====================
class Student(BaseModel):
    STATUS_CHOICES = [
        ('active', 'Active'),
        ('inactive', 'Inactive'),
        ('alumni', 'Alumni'),
    ]

    user = models.OneToOneField(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='student')
    first_name = models.CharField(max_length=100)
    last_name = models.CharField(max_length=100)
    dob = models.DateField(blank=True, null=True)
    gender = models.CharField(max_length=10, choices=GENDER_CHOICES, blank=True, null=True)
    profile_avatar_url = models.URLField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='active')

    class Meta:
        ordering = ['first_name', 'last_name']
        indexes = [
            models.Index(fields=['status'], name='campus_student_status_idx'),
        ]

    def __str__(self):
        return self.full_name

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}"

    @property
    def current_admission(self):
        return self.admissions.select_related('school_class').order_by('-admission_date', '-created_at').first()


class StudentDetails(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='details')
    middle_name = models.CharField(max_length=100, blank=True, null=True)
    birth_place = models.CharField(max_length=100, blank=True, null=True)
    religion = models.CharField(max_length=50, blank=True, null=True)
    caste = models.CharField(max_length=50, blank=True, null=True)
    reservation_category = models.CharField(max_length=50, blank=True, null=True)
    blood_group = models.CharField(max_length=5, blank=True, null=True)
    aadhar_number = models.CharField(max_length=20, unique=True, blank=True, null=True)
    uid_number = models.CharField(max_length=30, unique=True, blank=True, null=True)
    apaar_id = models.CharField(max_length=30, unique=True, blank=True, null=True)
    pen_number = models.CharField(max_length=30, unique=True, blank=True, null=True)

    class Meta:
        verbose_name_plural = "Student details"


class StudentFamilyDetails(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='family_details')
    father_name = models.CharField(max_length=200)
    father_occupation = models.CharField(max_length=100, blank=True, null=True)
    father_contact = models.CharField(max_length=20, blank=True, null=True)
    father_income = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    mother_name = models.CharField(max_length=200)
    mother_occupation = models.CharField(max_length=100, blank=True, null=True)
    mother_contact = models.CharField(max_length=20, blank=True, null=True)
    mother_income = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)
    guardian_name = models.CharField(max_length=200, blank=True, null=True)
    guardian_relation = models.CharField(max_length=50, blank=True, null=True)
    guardian_contact = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        verbose_name_plural = "Student family details"


class StudentPreviousAcademicDetails(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='previous_academic_details')
    previous_school_name = models.CharField(max_length=200, blank=True, null=True)
    previous_school_address = models.TextField(blank=True, null=True)
    previous_standard = models.CharField(max_length=10, blank=True, null=True)
    school_udise_code = models.CharField(max_length=30, blank=True, null=True)
    board_seat_number = models.CharField(max_length=30, blank=True, null=True)
    board_sid_number = models.CharField(max_length=30, blank=True, null=True)

    class Meta:
        verbose_name_plural = "Student previous academic details"


class StudentPaymentDetails(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='payment_details')
    account_holder_name = models.CharField(max_length=200, blank=True, null=True)
    bank_name = models.CharField(max_length=100, blank=True, null=True)
    ifsc_code = models.CharField(max_length=20, blank=True, null=True)
    account_number = models.CharField(max_length=30, blank=True, null=True)
    bank_branch = models.CharField(max_length=100, blank=True, null=True)
    has_scholarship = models.BooleanField(default=False)
    scholarship_amount = models.DecimalField(max_digits=12, decimal_places=2, blank=True, null=True)

    class Meta:
        verbose_name_plural = "Student payment details"


class StudentHostelDetails(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='hostel_details')
    hostel_name = models.CharField(max_length=200, blank=True, null=True)
    warden_name = models.CharField(max_length=200, blank=True, null=True)
    warden_contact = models.CharField(max_length=20, blank=True, null=True)
    hostel_contact = models.CharField(max_length=20, blank=True, null=True)
    hostel_address = models.TextField(blank=True, null=True)

    class Meta:
        verbose_name_plural = "Student hostel details"


class StudentFacilities(models.Model):
    student = models.OneToOneField(Student, on_delete=models.CASCADE, primary_key=True, related_name='facilities')
    cafeteria = models.BooleanField(default=False)
    transportation = models.BooleanField(default=False)
    hostel = models.BooleanField(default=False)

    class Meta:
        verbose_name_plural = "Student facilities"


class StudentAddress(BaseModel):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='addresses')
    address_line = models.TextField()
    village = models.CharField(max_length=100, blank=True, null=True)
    taluka = models.CharField(max_length=100, blank=True, null=True)
    district = models.CharField(max_length=100, blank=True, null=True)
    primary_contact = models.CharField(max_length=20, blank=True, null=True)
    secondary_contact = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        # The earliest address is the student's primary address
        ordering = ['created_at']
        verbose_name_plural = "Student addresses"


class StudentDocument(BaseModel):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='documents')
    document_type = models.CharField(max_length=50)
    file_url = models.URLField()

    def __str__(self):
        return f"{self.student} - {self.document_type}"


class Admission(BaseModel):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='admissions')
    school_class = models.ForeignKey(Class, on_delete=models.PROTECT, related_name='admissions')
    admission_number = models.CharField(max_length=50, unique=True)
    gr_number = models.CharField(max_length=50, unique=True)
    roll_number = models.PositiveIntegerField(blank=True, null=True)
    admission_date = models.DateField()
    form_number = models.CharField(max_length=50, blank=True, null=True)

    class Meta:
        ordering = ['school_class', 'roll_number']
        indexes = [
            models.Index(fields=['school_class'], name='campus_admission_class_idx'),
            models.Index(fields=['student'], name='campus_admission_student_idx'),
        ]

    def __str__(self):
        return f"{self.admission_number} - {self.student}"


class StudentCourseEnrollment(BaseModel):
    STATUS_CHOICES = [
        ('enrolled', 'Enrolled'),
        ('withdrawn', 'Withdrawn'),
        ('completed', 'Completed'),
    ]

    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='course_enrollments')
    course_offering = models.ForeignKey(CourseOffering, on_delete=models.CASCADE, related_name='enrollments')
    enrollment_date = models.DateField(auto_now_add=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='enrolled')
    final_grade = models.CharField(max_length=5, blank=True, null=True)

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['student', 'course_offering'], name='unique_student_course_enrollment'),
        ]

    def __str__(self):
        return f"{self.student} in {self.course_offering_id}"


class StudentAttendance(BaseModel):
    student = models.ForeignKey(Student, on_delete=models.CASCADE, related_name='attendance')
    school_class = models.ForeignKey(Class, on_delete=models.PROTECT, related_name='student_attendance')
    date = models.DateField()
    status = models.CharField(max_length=20, choices=ATTENDANCE_STATUS_CHOICES)
    source = models.CharField(max_length=20, choices=ATTENDANCE_SOURCE_CHOICES, default='manual')
    remarks = models.TextField(blank=True, null=True)

    class Meta:
        ordering = ['-date']
        constraints = [
            models.UniqueConstraint(fields=['student', 'date'], name='unique_student_attendance_day'),
        ]
        indexes = [
            models.Index(fields=['school_class', 'date'], name='campus_stuatt_class_date_idx'),
        ]

    def __str__(self):
        return f"{self.student} {self.date} {self.status}"


# ==================== TRANSPORT ====================
class Bus(BaseModel):
    STATUS_CHOICES = [
        ('ACTIVE', 'Active'),
        ('INACTIVE', 'Inactive'),
    ]

    name = models.CharField(max_length=100)
    number = models.CharField(max_length=30, unique=True)
    driver = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='buses')
    route_from = models.CharField(max_length=200)
    departure_time = models.TimeField(blank=True, null=True)
    route_to = models.CharField(max_length=200)
    arrival_time = models.TimeField(blank=True, null=True)
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='ACTIVE')

    class Meta:
        verbose_name_plural = "Buses"
        ordering = ['number']

    def __str__(self):
        return f"{self.number} - {self.name}"


class BusStop(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    bus = models.ForeignKey(Bus, on_delete=models.CASCADE, related_name='stops')
    name = models.CharField(max_length=200)
    arrival_time = models.TimeField(blank=True, null=True)
    stop_order = models.PositiveIntegerField()

    class Meta:
        ordering = ['stop_order']
        constraints = [
            models.UniqueConstraint(fields=['bus', 'stop_order'], name='unique_bus_stop_order'),
        ]

    def __str__(self):
        return f"{self.stop_order}. {self.name}"


# ==================== TIMETABLE ====================
class Timetable(BaseModel):
    STATUS_CHOICES = [
        ('DRAFT', 'Draft'),
        ('ACTIVE', 'Active'),
        ('ARCHIVED', 'Archived'),
    ]

    school_class = models.ForeignKey(Class, on_delete=models.CASCADE, related_name='timetables')
    academic_year = models.ForeignKey(AcademicYear, on_delete=models.PROTECT, related_name='timetables')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default='DRAFT')
    created_by = models.ForeignKey(User, on_delete=models.PROTECT, related_name='created_timetables')
    updated_by = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True, related_name='updated_timetables')

    class Meta:
        constraints = [
            models.UniqueConstraint(fields=['school_class', 'academic_year'], name='unique_timetable_per_class_year'),
        ]

    def __str__(self):
        return f"{self.school_class.class_name} ({self.status})"


class TimetableSlot(models.Model):
    DAY_CHOICES = [
        ('MONDAY', 'Monday'),
        ('TUESDAY', 'Tuesday'),
        ('WEDNESDAY', 'Wednesday'),
        ('THURSDAY', 'Thursday'),
        ('FRIDAY', 'Friday'),
        ('SATURDAY', 'Saturday'),
        ('SUNDAY', 'Sunday'),
    ]

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    timetable = models.ForeignKey(Timetable, on_delete=models.CASCADE, related_name='slots')
    day_of_week = models.CharField(max_length=10, choices=DAY_CHOICES)
    start_time = models.TimeField()
    end_time = models.TimeField()
    is_break = models.BooleanField(default=False)
    subject = models.ForeignKey(Subject, on_delete=models.SET_NULL, null=True, blank=True, related_name='timetable_slots')
    teacher = models.ForeignKey(Employee, on_delete=models.SET_NULL, null=True, blank=True, related_name='timetable_slots')
    room_number = models.CharField(max_length=20, blank=True, null=True)

    class Meta:
        ordering = ['day_of_week', 'start_time']

    def __str__(self):
        return f"{self.day_of_week} {self.start_time}-{self.end_time}"


# ==================== AUDIT ====================
class AuditLog(models.Model):
    OPERATION_CHOICES = [
        ('INSERT', 'Insert'),
        ('UPDATE', 'Update'),
        ('DELETE', 'Delete'),
    ]

    event_time = models.DateTimeField(auto_now_add=True)
    event_type = models.CharField(max_length=50)

    # Who
    user = models.ForeignKey(User, on_delete=models.SET_NULL, null=True, blank=True)
    username = models.CharField(max_length=150, blank=True, null=True)
    user_role = models.CharField(max_length=20, blank=True, null=True)

    # What
    table_name = models.CharField(max_length=50)
    record_id = models.CharField(max_length=64, blank=True, null=True)
    operation = models.CharField(max_length=20, choices=OPERATION_CHOICES, blank=True, null=True)
    new_values = models.JSONField(blank=True, null=True)

    # Context
    ip_address = models.GenericIPAddressField(blank=True, null=True)
    user_agent = models.TextField(blank=True, null=True)
    endpoint = models.CharField(max_length=255, blank=True, null=True)
    http_method = models.CharField(max_length=10, blank=True, null=True)
    request_id = models.UUIDField(blank=True, null=True)

    class Meta:
        ordering = ['-event_time']
        indexes = [
            models.Index(fields=['event_time'], name='campus_audit_time_idx'),
            models.Index(fields=['event_type'], name='campus_audit_type_idx'),
            models.Index(fields=['table_name', 'record_id'], name='campus_audit_record_idx'),
        ]

    def __str__(self):
        return f"{self.event_time} {self.event_type} {self.table_name}"
