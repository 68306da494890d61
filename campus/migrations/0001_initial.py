import django.contrib.auth.models
import django.contrib.auth.validators
import django.core.validators
import django.db.models.deletion
import django.utils.timezone
import uuid
from django.conf import settings
from django.db import migrations, models


GENDER_CHOICES = [('male', 'Male'), ('female', 'Female'), ('other', 'Other')]
MEDIUM_CHOICES = [('English', 'English'), ('Hindi', 'Hindi'), ('Gujarati', 'Gujarati')]
ATTENDANCE_STATUS_CHOICES = [
    ('present', 'Present'), ('absent', 'Absent'), ('late', 'Late'), ('half_day', 'Half Day'), ('on_leave', 'On Leave'),
]
ATTENDANCE_SOURCE_CHOICES = [('biometric', 'Biometric'), ('manual', 'Manual'), ('manual_bulk', 'Manual Bulk')]
LEAVE_STATUS_CHOICES = [('pending', 'Pending'), ('approved', 'Approved'), ('rejected', 'Rejected')]


def base_fields():
    return [
        ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
        ('created_at', models.DateTimeField(auto_now_add=True)),
        ('updated_at', models.DateTimeField(auto_now=True)),
    ]


def student_key(related_name):
    return ('student', models.OneToOneField(
        on_delete=django.db.models.deletion.CASCADE, primary_key=True, related_name=related_name,
        serialize=False, to='campus.student',
    ))


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('auth', '0012_alter_user_first_name_max_length'),
    ]

    operations = [
        migrations.CreateModel(
            name='User',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('password', models.CharField(max_length=128, verbose_name='password')),
                ('last_login', models.DateTimeField(blank=True, null=True, verbose_name='last login')),
                ('is_superuser', models.BooleanField(default=False, help_text='Designates that this user has all permissions without explicitly assigning them.', verbose_name='superuser status')),
                ('username', models.CharField(error_messages={'unique': 'A user with that username already exists.'}, help_text='Required. 150 characters or fewer. Letters, digits and @/./+/-/_ only.', max_length=150, unique=True, validators=[django.contrib.auth.validators.UnicodeUsernameValidator()], verbose_name='username')),
                ('first_name', models.CharField(blank=True, max_length=150, verbose_name='first name')),
                ('last_name', models.CharField(blank=True, max_length=150, verbose_name='last name')),
                ('email', models.EmailField(blank=True, max_length=254, verbose_name='email address')),
                ('is_staff', models.BooleanField(default=False, help_text='Designates whether the user can log into this admin site.', verbose_name='staff status')),
                ('is_active', models.BooleanField(default=True, help_text='Designates whether this user should be treated as active. Unselect this instead of deleting accounts.', verbose_name='active')),
                ('date_joined', models.DateTimeField(default=django.utils.timezone.now, verbose_name='date joined')),
                ('role', models.CharField(choices=[('student', 'Student'), ('teacher', 'Teacher'), ('staff', 'Staff'), ('admin', 'Admin')], default='student', max_length=20)),
                ('groups', models.ManyToManyField(blank=True, help_text='The groups this user belongs to. A user will get all permissions granted to each of their groups.', related_name='user_set', related_query_name='user', to='auth.group', verbose_name='groups')),
                ('user_permissions', models.ManyToManyField(blank=True, help_text='Specific permissions for this user.', related_name='user_set', related_query_name='user', to='auth.permission', verbose_name='user permissions')),
            ],
            options={
                'verbose_name': 'user',
                'verbose_name_plural': 'users',
                'abstract': False,
                'indexes': [models.Index(fields=['role'], name='campus_user_role_idx')],
            },
            managers=[
                ('objects', django.contrib.auth.models.UserManager()),
            ],
        ),
        migrations.CreateModel(
            name='SchoolConfiguration',
            fields=base_fields() + [
                ('school_name', models.CharField(max_length=200)),
                ('school_code', models.CharField(blank=True, max_length=50, null=True)),
                ('email', models.EmailField(blank=True, max_length=254, null=True)),
                ('phone_number', models.CharField(blank=True, max_length=20, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('logo_url', models.URLField(blank=True, null=True)),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='AcademicYear',
            fields=base_fields() + [
                ('name', models.CharField(max_length=20, unique=True)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('is_active', models.BooleanField(default=False)),
            ],
            options={
                'ordering': ['-start_date'],
                'constraints': [
                    models.UniqueConstraint(condition=models.Q(('is_active', True)), fields=('is_active',), name='unique_active_academic_year'),
                    models.CheckConstraint(condition=models.Q(('start_date__lt', models.F('end_date'))), name='academic_year_start_before_end'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Department',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, unique=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='Employee',
            fields=base_fields() + [
                ('employee_code', models.CharField(max_length=20, unique=True)),
                ('full_name', models.CharField(max_length=200)),
                ('email', models.EmailField(max_length=254, unique=True)),
                ('phone_number', models.CharField(blank=True, max_length=20, null=True, unique=True)),
                ('gender', models.CharField(blank=True, choices=GENDER_CHOICES, max_length=10, null=True)),
                ('dob', models.DateField(blank=True, null=True)),
                ('address', models.TextField(blank=True, null=True)),
                ('highest_qualification', models.CharField(blank=True, max_length=100, null=True)),
                ('years_of_experience', models.PositiveIntegerField(blank=True, null=True)),
                ('joining_date', models.DateField()),
                ('resignation_date', models.DateField(blank=True, null=True)),
                ('designation', models.CharField(blank=True, max_length=100, null=True)),
                ('role', models.CharField(choices=[('teacher', 'Teacher'), ('admin', 'Admin'), ('librarian', 'Librarian'), ('staff', 'Staff')], default='teacher', max_length=20)),
                ('employment_type', models.CharField(blank=True, max_length=50, null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('resigned', 'Resigned'), ('inactive', 'Inactive')], default='active', max_length=20)),
                ('profile_avatar_url', models.URLField(blank=True, null=True)),
                ('department', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='employees', to='campus.department')),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='employee', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['employee_code'],
                'indexes': [
                    models.Index(fields=['role'], name='campus_employee_role_idx'),
                    models.Index(fields=['status'], name='campus_employee_status_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='EmployeeSalary',
            fields=base_fields() + [
                ('basic_salary', models.DecimalField(decimal_places=2, max_digits=12)),
                ('allowances', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('deductions', models.DecimalField(decimal_places=2, default=0, max_digits=12)),
                ('effective_from_date', models.DateField()),
                ('effective_to_date', models.DateField(blank=True, null=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='salaries', to='campus.employee')),
            ],
            options={
                'ordering': ['-effective_from_date'],
            },
        ),
        migrations.CreateModel(
            name='EmployeeDocument',
            fields=base_fields() + [
                ('document_name', models.CharField(max_length=200)),
                ('document_type', models.CharField(blank=True, max_length=50, null=True)),
                ('file_url', models.URLField()),
                ('is_verified', models.BooleanField(default=False)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='documents', to='campus.employee')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='EmployeeAttendance',
            fields=base_fields() + [
                ('date', models.DateField()),
                ('status', models.CharField(choices=ATTENDANCE_STATUS_CHOICES, max_length=20)),
                ('check_in_time', models.TimeField(blank=True, null=True)),
                ('check_out_time', models.TimeField(blank=True, null=True)),
                ('source', models.CharField(choices=ATTENDANCE_SOURCE_CHOICES, default='biometric', max_length=20)),
                ('remarks', models.TextField(blank=True, null=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='campus.employee')),
            ],
            options={
                'ordering': ['-date'],
                'indexes': [models.Index(fields=['date'], name='campus_empatt_date_idx')],
                'constraints': [models.UniqueConstraint(fields=('employee', 'date'), name='unique_employee_attendance_day')],
            },
        ),
        migrations.CreateModel(
            name='EmployeeLeave',
            fields=base_fields() + [
                ('leave_type', models.CharField(choices=[('sick', 'Sick'), ('casual', 'Casual'), ('annual', 'Annual'), ('other', 'Other')], max_length=20)),
                ('start_date', models.DateField()),
                ('end_date', models.DateField()),
                ('reason', models.TextField()),
                ('status', models.CharField(choices=LEAVE_STATUS_CHOICES, default='pending', max_length=20)),
                ('supporting_document_url', models.URLField(blank=True, null=True)),
                ('employee', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='leaves', to='campus.employee')),
            ],
            options={
                'ordering': ['-created_at'],
                'indexes': [
                    models.Index(fields=['employee'], name='campus_leave_employee_idx'),
                    models.Index(fields=['status'], name='campus_leave_status_idx'),
                ],
                'constraints': [
                    models.CheckConstraint(condition=models.Q(('start_date__lte', models.F('end_date'))), name='employee_leave_start_before_end'),
                ],
            },
        ),
        migrations.CreateModel(
            name='LeaveStatusHistory',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('status', models.CharField(choices=LEAVE_STATUS_CHOICES, max_length=20)),
                ('comment', models.TextField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('leave', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='campus.employeeleave')),
            ],
            options={
                'verbose_name_plural': 'Leave status history',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='Class',
            fields=base_fields() + [
                ('class_name', models.CharField(max_length=50)),
                ('standard', models.CharField(max_length=10)),
                ('section', models.CharField(max_length=5)),
                ('medium', models.CharField(choices=MEDIUM_CHOICES, default='English', max_length=20)),
                ('capacity', models.PositiveIntegerField(validators=[django.core.validators.MinValueValidator(1)])),
                ('academic_year', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='classes', to='campus.academicyear')),
                ('class_teacher', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='classes_led', to='campus.employee')),
            ],
            options={
                'verbose_name_plural': 'Classes',
                'ordering': ['standard', 'section'],
                'constraints': [
                    models.UniqueConstraint(fields=('academic_year', 'standard', 'section', 'medium'), name='unique_class_per_year'),
                    models.CheckConstraint(condition=models.Q(('capacity__gt', 0)), name='class_capacity_positive'),
                ],
            },
        ),
        migrations.CreateModel(
            name='Subject',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100, unique=True)),
                ('code', models.CharField(max_length=30, unique=True)),
            ],
            options={
                'ordering': ['name'],
            },
        ),
        migrations.CreateModel(
            name='CourseOffering',
            fields=base_fields() + [
                ('is_mandatory', models.BooleanField(default=True)),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_offerings', to='campus.class')),
                ('subject', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='course_offerings', to='campus.subject')),
                ('teacher', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='course_offerings', to='campus.employee')),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('school_class', 'subject'), name='unique_subject_per_class')],
            },
        ),
        migrations.CreateModel(
            name='CourseMaterial',
            fields=base_fields() + [
                ('name', models.CharField(max_length=200)),
                ('file_url', models.URLField()),
                ('course_offering', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='materials', to='campus.courseoffering')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Student',
            fields=base_fields() + [
                ('first_name', models.CharField(max_length=100)),
                ('last_name', models.CharField(max_length=100)),
                ('dob', models.DateField(blank=True, null=True)),
                ('gender', models.CharField(blank=True, choices=GENDER_CHOICES, max_length=10, null=True)),
                ('profile_avatar_url', models.URLField(blank=True, null=True)),
                ('status', models.CharField(choices=[('active', 'Active'), ('inactive', 'Inactive'), ('alumni', 'Alumni')], default='active', max_length=20)),
                ('user', models.OneToOneField(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='student', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['first_name', 'last_name'],
                'indexes': [models.Index(fields=['status'], name='campus_student_status_idx')],
            },
        ),
        migrations.CreateModel(
            name='StudentDetails',
            fields=[
                student_key('details'),
                ('middle_name', models.CharField(blank=True, max_length=100, null=True)),
                ('birth_place', models.CharField(blank=True, max_length=100, null=True)),
                ('religion', models.CharField(blank=True, max_length=50, null=True)),
                ('caste', models.CharField(blank=True, max_length=50, null=True)),
                ('reservation_category', models.CharField(blank=True, max_length=50, null=True)),
                ('blood_group', models.CharField(blank=True, max_length=5, null=True)),
                ('aadhar_number', models.CharField(blank=True, max_length=20, null=True, unique=True)),
                ('uid_number', models.CharField(blank=True, max_length=30, null=True, unique=True)),
                ('apaar_id', models.CharField(blank=True, max_length=30, null=True, unique=True)),
                ('pen_number', models.CharField(blank=True, max_length=30, null=True, unique=True)),
            ],
            options={
                'verbose_name_plural': 'Student details',
            },
        ),
        migrations.CreateModel(
            name='StudentFamilyDetails',
            fields=[
                student_key('family_details'),
                ('father_name', models.CharField(max_length=200)),
                ('father_occupation', models.CharField(blank=True, max_length=100, null=True)),
                ('father_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('father_income', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('mother_name', models.CharField(max_length=200)),
                ('mother_occupation', models.CharField(blank=True, max_length=100, null=True)),
                ('mother_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('mother_income', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
                ('guardian_name', models.CharField(blank=True, max_length=200, null=True)),
                ('guardian_relation', models.CharField(blank=True, max_length=50, null=True)),
                ('guardian_contact', models.CharField(blank=True, max_length=20, null=True)),
            ],
            options={
                'verbose_name_plural': 'Student family details',
            },
        ),
        migrations.CreateModel(
            name='StudentPreviousAcademicDetails',
            fields=[
                student_key('previous_academic_details'),
                ('previous_school_name', models.CharField(blank=True, max_length=200, null=True)),
                ('previous_school_address', models.TextField(blank=True, null=True)),
                ('previous_standard', models.CharField(blank=True, max_length=10, null=True)),
                ('school_udise_code', models.CharField(blank=True, max_length=30, null=True)),
                ('board_seat_number', models.CharField(blank=True, max_length=30, null=True)),
                ('board_sid_number', models.CharField(blank=True, max_length=30, null=True)),
            ],
            options={
                'verbose_name_plural': 'Student previous academic details',
            },
        ),
        migrations.CreateModel(
            name='StudentPaymentDetails',
            fields=[
                student_key('payment_details'),
                ('account_holder_name', models.CharField(blank=True, max_length=200, null=True)),
                ('bank_name', models.CharField(blank=True, max_length=100, null=True)),
                ('ifsc_code', models.CharField(blank=True, max_length=20, null=True)),
                ('account_number', models.CharField(blank=True, max_length=30, null=True)),
                ('bank_branch', models.CharField(blank=True, max_length=100, null=True)),
                ('has_scholarship', models.BooleanField(default=False)),
                ('scholarship_amount', models.DecimalField(blank=True, decimal_places=2, max_digits=12, null=True)),
            ],
            options={
                'verbose_name_plural': 'Student payment details',
            },
        ),
        migrations.CreateModel(
            name='StudentHostelDetails',
            fields=[
                student_key('hostel_details'),
                ('hostel_name', models.CharField(blank=True, max_length=200, null=True)),
                ('warden_name', models.CharField(blank=True, max_length=200, null=True)),
                ('warden_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('hostel_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('hostel_address', models.TextField(blank=True, null=True)),
            ],
            options={
                'verbose_name_plural': 'Student hostel details',
            },
        ),
        migrations.CreateModel(
            name='StudentFacilities',
            fields=[
                student_key('facilities'),
                ('cafeteria', models.BooleanField(default=False)),
                ('transportation', models.BooleanField(default=False)),
                ('hostel', models.BooleanField(default=False)),
            ],
            options={
                'verbose_name_plural': 'Student facilities',
            },
        ),
        migrations.CreateModel(
            name='StudentAddress',
            fields=base_fields() + [
                ('address_line', models.TextField()),
                ('village', models.CharField(blank=True, max_length=100, null=True)),
                ('taluka', models.CharField(blank=True, max_length=100, null=True)),
                ('district', models.CharField(blank=True, max_length=100, null=True)),
                ('primary_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('secondary_contact', models.CharField(blank=True, max_length=20, null=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='addresses', to='campus.student')),
            ],
            options={
                'verbose_name_plural': 'Student addresses',
                'ordering': ['created_at'],
            },
        ),
        migrations.CreateModel(
            name='StudentDocument',
            fields=base_fields() + [
                ('document_type', models.CharField(max_length=50)),
                ('file_url', models.URLField()),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='documents', to='campus.student')),
            ],
            options={
                'abstract': False,
            },
        ),
        migrations.CreateModel(
            name='Admission',
            fields=base_fields() + [
                ('admission_number', models.CharField(max_length=50, unique=True)),
                ('gr_number', models.CharField(max_length=50, unique=True)),
                ('roll_number', models.PositiveIntegerField(blank=True, null=True)),
                ('admission_date', models.DateField()),
                ('form_number', models.CharField(blank=True, max_length=50, null=True)),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='admissions', to='campus.class')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='admissions', to='campus.student')),
            ],
            options={
                'ordering': ['school_class', 'roll_number'],
                'indexes': [
                    models.Index(fields=['school_class'], name='campus_admission_class_idx'),
                    models.Index(fields=['student'], name='campus_admission_student_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='StudentCourseEnrollment',
            fields=base_fields() + [
                ('enrollment_date', models.DateField(auto_now_add=True)),
                ('status', models.CharField(choices=[('enrolled', 'Enrolled'), ('withdrawn', 'Withdrawn'), ('completed', 'Completed')], default='enrolled', max_length=20)),
                ('final_grade', models.CharField(blank=True, max_length=5, null=True)),
                ('course_offering', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='enrollments', to='campus.courseoffering')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='course_enrollments', to='campus.student')),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('student', 'course_offering'), name='unique_student_course_enrollment')],
            },
        ),
        migrations.CreateModel(
            name='StudentAttendance',
            fields=base_fields() + [
                ('date', models.DateField()),
                ('status', models.CharField(choices=ATTENDANCE_STATUS_CHOICES, max_length=20)),
                ('source', models.CharField(choices=ATTENDANCE_SOURCE_CHOICES, default='manual', max_length=20)),
                ('remarks', models.TextField(blank=True, null=True)),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='student_attendance', to='campus.class')),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='attendance', to='campus.student')),
            ],
            options={
                'ordering': ['-date'],
                'indexes': [models.Index(fields=['school_class', 'date'], name='campus_stuatt_class_date_idx')],
                'constraints': [models.UniqueConstraint(fields=('student', 'date'), name='unique_student_attendance_day')],
            },
        ),
        migrations.CreateModel(
            name='Bus',
            fields=base_fields() + [
                ('name', models.CharField(max_length=100)),
                ('number', models.CharField(max_length=30, unique=True)),
                ('route_from', models.CharField(max_length=200)),
                ('departure_time', models.TimeField(blank=True, null=True)),
                ('route_to', models.CharField(max_length=200)),
                ('arrival_time', models.TimeField(blank=True, null=True)),
                ('status', models.CharField(choices=[('ACTIVE', 'Active'), ('INACTIVE', 'Inactive')], default='ACTIVE', max_length=20)),
                ('driver', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='buses', to='campus.employee')),
            ],
            options={
                'verbose_name_plural': 'Buses',
                'ordering': ['number'],
            },
        ),
        migrations.CreateModel(
            name='BusStop',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('name', models.CharField(max_length=200)),
                ('arrival_time', models.TimeField(blank=True, null=True)),
                ('stop_order', models.PositiveIntegerField()),
                ('bus', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='stops', to='campus.bus')),
            ],
            options={
                'ordering': ['stop_order'],
                'constraints': [models.UniqueConstraint(fields=('bus', 'stop_order'), name='unique_bus_stop_order')],
            },
        ),
        migrations.CreateModel(
            name='Timetable',
            fields=base_fields() + [
                ('status', models.CharField(choices=[('DRAFT', 'Draft'), ('ACTIVE', 'Active'), ('ARCHIVED', 'Archived')], default='DRAFT', max_length=20)),
                ('academic_year', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='timetables', to='campus.academicyear')),
                ('created_by', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='created_timetables', to=settings.AUTH_USER_MODEL)),
                ('school_class', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='timetables', to='campus.class')),
                ('updated_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='updated_timetables', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'constraints': [models.UniqueConstraint(fields=('school_class', 'academic_year'), name='unique_timetable_per_class_year')],
            },
        ),
        migrations.CreateModel(
            name='TimetableSlot',
            fields=[
                ('id', models.UUIDField(default=uuid.uuid4, editable=False, primary_key=True, serialize=False)),
                ('day_of_week', models.CharField(choices=[('MONDAY', 'Monday'), ('TUESDAY', 'Tuesday'), ('WEDNESDAY', 'Wednesday'), ('THURSDAY', 'Thursday'), ('FRIDAY', 'Friday'), ('SATURDAY', 'Saturday'), ('SUNDAY', 'Sunday')], max_length=10)),
                ('start_time', models.TimeField()),
                ('end_time', models.TimeField()),
                ('is_break', models.BooleanField(default=False)),
                ('room_number', models.CharField(blank=True, max_length=20, null=True)),
                ('subject', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='timetable_slots', to='campus.subject')),
                ('teacher', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='timetable_slots', to='campus.employee')),
                ('timetable', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='slots', to='campus.timetable')),
            ],
            options={
                'ordering': ['day_of_week', 'start_time'],
            },
        ),
        migrations.CreateModel(
            name='AuditLog',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('event_time', models.DateTimeField(auto_now_add=True)),
                ('event_type', models.CharField(max_length=50)),
                ('username', models.CharField(blank=True, max_length=150, null=True)),
                ('user_role', models.CharField(blank=True, max_length=20, null=True)),
                ('table_name', models.CharField(max_length=50)),
                ('record_id', models.CharField(blank=True, max_length=64, null=True)),
                ('operation', models.CharField(blank=True, choices=[('INSERT', 'Insert'), ('UPDATE', 'Update'), ('DELETE', 'Delete')], max_length=20, null=True)),
                ('new_values', models.JSONField(blank=True, null=True)),
                ('ip_address', models.GenericIPAddressField(blank=True, null=True)),
                ('user_agent', models.TextField(blank=True, null=True)),
                ('endpoint', models.CharField(blank=True, max_length=255, null=True)),
                ('http_method', models.CharField(blank=True, max_length=10, null=True)),
                ('request_id', models.UUIDField(blank=True, null=True)),
                ('user', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'ordering': ['-event_time'],
                'indexes': [
                    models.Index(fields=['event_time'], name='campus_audit_time_idx'),
                    models.Index(fields=['event_type'], name='campus_audit_type_idx'),
                    models.Index(fields=['table_name', 'record_id'], name='campus_audit_record_idx'),
                ],
            },
        ),
    ]
