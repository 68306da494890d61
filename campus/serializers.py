# serializers.py
from django.contrib.auth import authenticate, get_user_model
from rest_framework import serializers

from .models import (
    AcademicYear, Admission, Bus, BusStop, Class, CourseMaterial, CourseOffering, Department, Employee,
    EmployeeAttendance, EmployeeDocument, EmployeeLeave, EmployeeSalary, LeaveStatusHistory, SchoolConfiguration,
    Student, StudentAddress, StudentAttendance, StudentCourseEnrollment, StudentDetails, StudentDocument,
    StudentFacilities, StudentFamilyDetails, StudentHostelDetails, StudentPaymentDetails,
    StudentPreviousAcademicDetails, Subject, Timetable, TimetableSlot, ATTENDANCE_STATUS_CHOICES,
)

User = get_user_model()


# ==================== AUTHENTICATION ====================
class UserSerializer(serializers.ModelSerializer):
    role_display = serializers.CharField(source='get_role_display', read_only=True)

    class Meta:
        model = User
        fields = ['id', 'username', 'email', 'first_name', 'last_name', 'role', 'role_display', 'is_active',
                  'last_login']
        read_only_fields = fields


class LoginSerializer(serializers.Serializer):
    username = serializers.CharField()
    password = serializers.CharField(write_only=True)

    def validate(self, data):
        username = data.get('username').strip()
        user = authenticate(request=self.context.get('request'), username=username, password=data.get('password'))
        if not user:
            raise serializers.ValidationError({'password': 'Invalid username or password'})
        if not user.is_active:
            raise serializers.ValidationError({'username': 'This account is disabled.'})
        data['user'] = user
        return data


# ==================== SCHOOL / REFERENCE DATA ====================
class SchoolConfigurationSerializer(serializers.ModelSerializer):
    class Meta:
        model = SchoolConfiguration
        fields = ['id', 'school_name', 'school_code', 'email', 'phone_number', 'address', 'logo_url', 'updated_at']
        read_only_fields = ['id', 'updated_at']


class AcademicYearSerializer(serializers.ModelSerializer):
    class Meta:
        model = AcademicYear
        fields = ['id', 'name', 'start_date', 'end_date', 'is_active']
        read_only_fields = ['id', 'is_active']


class AcademicYearCreateSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=20)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    is_active = serializers.BooleanField(default=False)


class DepartmentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Department
        fields = ['id', 'name']


# ==================== EMPLOYEES ====================
class EmployeeSalarySerializer(serializers.ModelSerializer):
    net_salary = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)

    class Meta:
        model = EmployeeSalary
        fields = ['id', 'basic_salary', 'allowances', 'deductions', 'net_salary', 'effective_from_date',
                  'effective_to_date']


class EmployeeDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = EmployeeDocument
        fields = ['id', 'document_name', 'document_type', 'file_url', 'is_verified']


class EmployeeListSerializer(serializers.ModelSerializer):
    department = serializers.CharField(source='department.name', default=None, read_only=True)

    class Meta:
        model = Employee
        fields = ['id', 'employee_code', 'full_name', 'email', 'phone_number', 'department', 'designation', 'role',
                  'status', 'joining_date']


class EmployeeSerializer(EmployeeListSerializer):
    username = serializers.CharField(source='user.username', default=None, read_only=True)
    salaries = EmployeeSalarySerializer(many=True, read_only=True)
    documents = EmployeeDocumentSerializer(many=True, read_only=True)

    class Meta(EmployeeListSerializer.Meta):
        fields = EmployeeListSerializer.Meta.fields + [
            'username', 'gender', 'dob', 'address', 'highest_qualification', 'years_of_experience',
            'resignation_date', 'employment_type', 'profile_avatar_url', 'salaries', 'documents',
        ]


class EmployeeAttendanceSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source='employee.employee_code', read_only=True)
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)

    class Meta:
        model = EmployeeAttendance
        fields = ['id', 'employee', 'employee_code', 'employee_name', 'date', 'status', 'check_in_time',
                  'check_out_time', 'source', 'remarks']


class LeaveStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = LeaveStatusHistory
        fields = ['id', 'status', 'comment', 'created_at']


class EmployeeLeaveSerializer(serializers.ModelSerializer):
    employee_code = serializers.CharField(source='employee.employee_code', read_only=True)
    employee_name = serializers.CharField(source='employee.full_name', read_only=True)
    department = serializers.CharField(source='employee.department.name', default=None, read_only=True)
    total_days = serializers.IntegerField(read_only=True)
    status_history = LeaveStatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = EmployeeLeave
        fields = ['id', 'employee', 'employee_code', 'employee_name', 'department', 'leave_type', 'start_date',
                  'end_date', 'total_days', 'reason', 'status', 'supporting_document_url', 'status_history',
                  'created_at']


class LeaveCreateSerializer(serializers.Serializer):
    employee_id = serializers.UUIDField()
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    leave_type = serializers.ChoiceField(choices=EmployeeLeave.LEAVE_TYPE_CHOICES)
    reason = serializers.CharField()
    supporting_document_url = serializers.URLField(required=False, allow_null=True)


class LeaveTransitionSerializer(serializers.Serializer):
    # Not a ChoiceField: unknown statuses surface as InvalidState from the service
    status = serializers.CharField()
    comment = serializers.CharField(required=False, allow_blank=True, allow_null=True)


# ==================== ATTENDANCE INPUT ====================
class EmployeeAttendanceEntrySerializer(serializers.Serializer):
    employee_id = serializers.UUIDField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=ATTENDANCE_STATUS_CHOICES)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)
    check_in_time = serializers.TimeField(required=False, allow_null=True)
    check_out_time = serializers.TimeField(required=False, allow_null=True)


class BulkEmployeeAttendanceSerializer(serializers.Serializer):
    employee_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)
    start_date = serializers.DateField()
    end_date = serializers.DateField()
    status = serializers.ChoiceField(choices=ATTENDANCE_STATUS_CHOICES)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class BiometricPunchSerializer(serializers.Serializer):
    employee_code = serializers.CharField()
    timestamp = serializers.DateTimeField()


class StudentAttendanceEntrySerializer(serializers.Serializer):
    student_id = serializers.UUIDField()
    date = serializers.DateField()
    status = serializers.ChoiceField(choices=ATTENDANCE_STATUS_CHOICES)
    remarks = serializers.CharField(required=False, allow_blank=True, allow_null=True)


class StudentAttendanceSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.full_name', read_only=True)

    class Meta:
        model = StudentAttendance
        fields = ['id', 'student', 'student_name', 'school_class', 'date', 'status', 'source', 'remarks']


class StudentLeaveRequestSerializer(serializers.Serializer):
    from_date = serializers.DateField()
    to_date = serializers.DateField()
    reason = serializers.CharField()


# ==================== CLASSES / SUBJECTS ====================
class ClassSerializer(serializers.ModelSerializer):
    academic_year_name = serializers.CharField(source='academic_year.name', read_only=True)
    class_teacher_name = serializers.CharField(source='class_teacher.full_name', default=None, read_only=True)
    student_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = Class
        fields = ['id', 'class_name', 'academic_year', 'academic_year_name', 'standard', 'section', 'medium',
                  'capacity', 'class_teacher', 'class_teacher_name', 'student_count']


class SubjectSerializer(serializers.ModelSerializer):
    class Meta:
        model = Subject
        fields = ['id', 'name', 'code']


class CourseOfferingSerializer(serializers.ModelSerializer):
    subject_name = serializers.CharField(source='subject.name', read_only=True)
    class_name = serializers.CharField(source='school_class.class_name', read_only=True)
    section = serializers.CharField(source='school_class.section', read_only=True)
    teacher_name = serializers.CharField(source='teacher.full_name', default=None, read_only=True)

    class Meta:
        model = CourseOffering
        fields = ['id', 'subject', 'subject_name', 'school_class', 'class_name', 'section', 'teacher',
                  'teacher_name', 'is_mandatory']


class SubjectDetailSerializer(SubjectSerializer):
    course_offerings = CourseOfferingSerializer(many=True, read_only=True)

    class Meta(SubjectSerializer.Meta):
        fields = SubjectSerializer.Meta.fields + ['course_offerings']


class CourseMaterialSerializer(serializers.ModelSerializer):
    class Meta:
        model = CourseMaterial
        fields = ['id', 'name', 'file_url', 'created_at']


class TeacherOfferingSerializer(CourseOfferingSerializer):
    """A teacher's view of one offering: class details, materials and enrolled students."""
    subject_code = serializers.CharField(source='subject.code', read_only=True)
    standard = serializers.CharField(source='school_class.standard', read_only=True)
    medium = serializers.CharField(source='school_class.medium', read_only=True)
    materials = CourseMaterialSerializer(many=True, read_only=True)
    students = serializers.SerializerMethodField()

    class Meta(CourseOfferingSerializer.Meta):
        fields = CourseOfferingSerializer.Meta.fields + ['subject_code', 'standard', 'medium', 'materials', 'students']

    def get_students(self, obj):
        enrollments = obj.enrollments.select_related('student').order_by('student__first_name', 'student__last_name')
        return [
            {'id': str(e.student_id), 'name': e.student.full_name, 'profile_avatar_url': e.student.profile_avatar_url}
            for e in enrollments
        ]


class SubjectWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100)
    standard = serializers.CharField(max_length=10)
    sections = serializers.ListField(child=serializers.CharField(max_length=5), allow_empty=False)
    teacher_id = serializers.UUIDField(required=False, allow_null=True)
    is_mandatory = serializers.BooleanField(default=True)


class EnrollmentSerializer(serializers.ModelSerializer):
    student_name = serializers.CharField(source='student.full_name', read_only=True)
    class_name = serializers.CharField(source='course_offering.school_class.class_name', read_only=True)

    class Meta:
        model = StudentCourseEnrollment
        fields = ['id', 'student', 'student_name', 'course_offering', 'class_name', 'enrollment_date', 'status',
                  'final_grade']


class IdListSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class StudentIdsSerializer(serializers.Serializer):
    student_ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


class PromotionSerializer(StudentIdsSerializer):
    target_class_id = serializers.UUIDField()


class RollNumberUpdateSerializer(serializers.Serializer):
    admission_id = serializers.UUIDField()
    roll_number = serializers.IntegerField(min_value=1)


# ==================== STUDENTS ====================
class AdmissionSerializer(serializers.ModelSerializer):
    class_name = serializers.CharField(source='school_class.class_name', read_only=True)

    class Meta:
        model = Admission
        fields = ['id', 'school_class', 'class_name', 'admission_number', 'gr_number', 'roll_number',
                  'admission_date', 'form_number']


class StudentDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentDetails
        exclude = ['student']


class StudentFamilyDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentFamilyDetails
        exclude = ['student']


class StudentPreviousAcademicDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentPreviousAcademicDetails
        exclude = ['student']


class StudentPaymentDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentPaymentDetails
        exclude = ['student']


class StudentHostelDetailsSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentHostelDetails
        exclude = ['student']


class StudentFacilitiesSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentFacilities
        exclude = ['student']


class StudentAddressSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentAddress
        fields = ['id', 'address_line', 'village', 'taluka', 'district', 'primary_contact', 'secondary_contact']


class StudentDocumentSerializer(serializers.ModelSerializer):
    class Meta:
        model = StudentDocument
        fields = ['id', 'document_type', 'file_url']


class StudentListSerializer(serializers.ModelSerializer):
    full_name = serializers.CharField(read_only=True)
    admission = serializers.SerializerMethodField()

    class Meta:
        model = Student
        fields = ['id', 'first_name', 'last_name', 'full_name', 'gender', 'dob', 'status', 'admission']

    def get_admission(self, obj):
        admission = obj.current_admission
        return AdmissionSerializer(admission).data if admission else None


class StudentSerializer(StudentListSerializer):
    """Full student profile; the login account shows only its username."""
    username = serializers.CharField(source='user.username', default=None, read_only=True)
    details = StudentDetailsSerializer(read_only=True)
    family_details = StudentFamilyDetailsSerializer(read_only=True)
    previous_academic_details = StudentPreviousAcademicDetailsSerializer(read_only=True)
    payment_details = StudentPaymentDetailsSerializer(read_only=True)
    hostel_details = StudentHostelDetailsSerializer(read_only=True)
    facilities = StudentFacilitiesSerializer(read_only=True)
    addresses = StudentAddressSerializer(many=True, read_only=True)
    documents = StudentDocumentSerializer(many=True, read_only=True)

    class Meta(StudentListSerializer.Meta):
        fields = StudentListSerializer.Meta.fields + [
            'username', 'profile_avatar_url', 'details', 'family_details', 'previous_academic_details',
            'payment_details', 'hostel_details', 'facilities', 'addresses', 'documents',
        ]


class CredentialsSerializer(serializers.Serializer):
    password = serializers.CharField(write_only=True)
    username = serializers.CharField(required=False, allow_blank=False, max_length=150)


class StudentImportSerializer(serializers.Serializer):
    class_id = serializers.UUIDField()
    file = serializers.FileField()

    def validate_file(self, value):
        if not value.name.lower().endswith(('.xlsx', '.xls')):
            raise serializers.ValidationError('Only .xlsx or .xls files are accepted.')
        return value


# ==================== TRANSPORT ====================
class BusStopSerializer(serializers.ModelSerializer):
    class Meta:
        model = BusStop
        fields = ['id', 'name', 'arrival_time', 'stop_order']
        read_only_fields = ['id', 'stop_order']


class BusSerializer(serializers.ModelSerializer):
    driver_name = serializers.CharField(source='driver.full_name', default=None, read_only=True)
    stops = BusStopSerializer(many=True, read_only=True)

    class Meta:
        model = Bus
        fields = ['id', 'name', 'number', 'driver', 'driver_name', 'route_from', 'departure_time', 'route_to',
                  'arrival_time', 'status', 'stops']


class BusWriteSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=100, required=False)
    number = serializers.CharField(max_length=30, required=False)
    driver_id = serializers.UUIDField(required=False, allow_null=True)
    driver_name = serializers.CharField(required=False, allow_blank=True)
    route_from = serializers.CharField(max_length=200, required=False)
    departure_time = serializers.TimeField(required=False, allow_null=True)
    route_to = serializers.CharField(max_length=200, required=False)
    arrival_time = serializers.TimeField(required=False, allow_null=True)
    status = serializers.ChoiceField(choices=Bus.STATUS_CHOICES, required=False)
    stops = BusStopSerializer(many=True, required=False)


# ==================== TIMETABLE ====================
class TimetableSlotSerializer(serializers.ModelSerializer):
    subject_name = serializers.CharField(source='subject.name', default=None, read_only=True)
    teacher_name = serializers.CharField(source='teacher.full_name', default=None, read_only=True)

    class Meta:
        model = TimetableSlot
        fields = ['id', 'day_of_week', 'start_time', 'end_time', 'is_break', 'subject', 'subject_name', 'teacher',
                  'teacher_name', 'room_number']


class TimetableSerializer(serializers.ModelSerializer):
    class_name = serializers.CharField(source='school_class.class_name', read_only=True)
    academic_year_name = serializers.CharField(source='academic_year.name', read_only=True)
    created_by = serializers.CharField(source='created_by.username', read_only=True)
    slots = TimetableSlotSerializer(many=True, read_only=True)

    class Meta:
        model = Timetable
        fields = ['id', 'school_class', 'class_name', 'academic_year', 'academic_year_name', 'status', 'created_by',
                  'slots', 'updated_at']


class TimetableSlotWriteSerializer(serializers.Serializer):
    day_of_week = serializers.ChoiceField(choices=TimetableSlot.DAY_CHOICES)
    start_time = serializers.TimeField()
    end_time = serializers.TimeField()
    is_break = serializers.BooleanField(default=False)
    subject_id = serializers.UUIDField(required=False, allow_null=True)
    teacher_id = serializers.UUIDField(required=False, allow_null=True)
    room_number = serializers.CharField(max_length=20, required=False, allow_blank=True, allow_null=True)


class TimetableWriteSerializer(serializers.Serializer):
    class_id = serializers.UUIDField(required=False)
    academic_year_id = serializers.UUIDField(required=False)
    status = serializers.ChoiceField(choices=Timetable.STATUS_CHOICES, required=False)
    slots = TimetableSlotWriteSerializer(many=True, required=False)
