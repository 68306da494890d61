# admin.py
from django.contrib import admin
from django.contrib.auth.admin import UserAdmin as BaseUserAdmin

from .models import (
    AcademicYear, Admission, AuditLog, Bus, BusStop, Class, CourseMaterial, CourseOffering, Department, Employee,
    EmployeeAttendance, EmployeeDocument, EmployeeLeave, EmployeeSalary, LeaveStatusHistory, SchoolConfiguration,
    Student, StudentAddress, StudentAttendance, StudentCourseEnrollment, StudentDocument, StudentFamilyDetails,
    Subject, Timetable, TimetableSlot, User,
)

admin.site.site_header = "CAMPUS ERP ADMINISTRATION"
admin.site.site_title = "Admin Portal"
admin.site.index_title = "Welcome to Admin Dashboard"


# ==================== CUSTOM ADMIN CLASSES ====================
class ReadOnlyAdminMixin:
    """Mixin to make admin read-only"""
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ==================== USER MANAGEMENT ====================
@admin.register(User)
class CustomUserAdmin(BaseUserAdmin):
    list_display = ('username', 'email', 'first_name', 'last_name', 'role', 'is_active', 'last_login')
    list_filter = ('role', 'is_active', 'is_staff')
    search_fields = ('username', 'email', 'first_name', 'last_name')
    ordering = ('-date_joined',)

    fieldsets = BaseUserAdmin.fieldsets + (
        ('Role', {'fields': ('role',)}),
    )
    add_fieldsets = (
        (None, {
            'classes': ('wide',),
            'fields': ('username', 'email', 'role', 'password1', 'password2'),
        }),
    )


@admin.register(AuditLog)
class AuditLogAdmin(ReadOnlyAdminMixin, admin.ModelAdmin):
    list_display = ('event_time', 'event_type', 'username', 'table_name', 'operation', 'ip_address')
    list_filter = ('event_type', 'operation', 'table_name')
    search_fields = ('username', 'record_id', 'endpoint')
    date_hierarchy = 'event_time'


# ==================== SCHOOL / REFERENCE DATA ====================
@admin.register(SchoolConfiguration)
class SchoolConfigurationAdmin(admin.ModelAdmin):
    list_display = ('school_name', 'school_code', 'email', 'phone_number')


@admin.register(AcademicYear)
class AcademicYearAdmin(admin.ModelAdmin):
    list_display = ('name', 'start_date', 'end_date', 'is_active')
    list_filter = ('is_active',)


@admin.register(Department)
class DepartmentAdmin(admin.ModelAdmin):
    search_fields = ('name',)


# ==================== EMPLOYEE MANAGEMENT ====================
class EmployeeSalaryInline(admin.TabularInline):
    model = EmployeeSalary
    extra = 0


class EmployeeDocumentInline(admin.TabularInline):
    model = EmployeeDocument
    extra = 0


@admin.register(Employee)
class EmployeeAdmin(admin.ModelAdmin):
    list_display = ('employee_code', 'full_name', 'email', 'department', 'role', 'status')
    list_filter = ('role', 'status', 'department')
    search_fields = ('employee_code', 'full_name', 'email')
    inlines = [EmployeeSalaryInline, EmployeeDocumentInline]


@admin.register(EmployeeAttendance)
class EmployeeAttendanceAdmin(admin.ModelAdmin):
    list_display = ('employee', 'date', 'status', 'check_in_time', 'check_out_time', 'source')
    list_filter = ('status', 'source', 'date')
    search_fields = ('employee__employee_code', 'employee__full_name')


class LeaveStatusHistoryInline(ReadOnlyAdminMixin, admin.TabularInline):
    model = LeaveStatusHistory
    extra = 0


@admin.register(EmployeeLeave)
class EmployeeLeaveAdmin(admin.ModelAdmin):
    list_display = ('employee', 'leave_type', 'start_date', 'end_date', 'status')
    list_filter = ('status', 'leave_type')
    # Status changes go through the API so history and attendance stay in step
    readonly_fields = ('status',)
    inlines = [LeaveStatusHistoryInline]


# ==================== CLASS / SUBJECT MANAGEMENT ====================
class CourseOfferingInline(admin.TabularInline):
    model = CourseOffering
    extra = 0


@admin.register(Class)
class ClassAdmin(admin.ModelAdmin):
    list_display = ('class_name', 'academic_year', 'standard', 'section', 'medium', 'capacity', 'class_teacher')
    list_filter = ('academic_year', 'standard', 'medium')
    inlines = [CourseOfferingInline]


class CourseMaterialInline(admin.TabularInline):
    model = CourseMaterial
    extra = 0


@admin.register(CourseOffering)
class CourseOfferingAdmin(admin.ModelAdmin):
    list_display = ('subject', 'school_class', 'teacher', 'is_mandatory')
    list_filter = ('is_mandatory', 'school_class__standard')
    search_fields = ('subject__name', 'school_class__class_name')
    inlines = [CourseMaterialInline]


@admin.register(Subject)
class SubjectAdmin(admin.ModelAdmin):
    list_display = ('code', 'name')
    search_fields = ('code', 'name')


@admin.register(StudentCourseEnrollment)
class StudentCourseEnrollmentAdmin(admin.ModelAdmin):
    list_display = ('student', 'course_offering', 'enrollment_date', 'status')
    list_filter = ('status',)


# ==================== STUDENT MANAGEMENT ====================
class StudentFamilyDetailsInline(admin.StackedInline):
    model = StudentFamilyDetails
    extra = 0


class StudentAddressInline(admin.TabularInline):
    model = StudentAddress
    extra = 0


class StudentDocumentInline(admin.TabularInline):
    model = StudentDocument
    extra = 0


@admin.register(Student)
class StudentAdmin(admin.ModelAdmin):
    list_display = ('first_name', 'last_name', 'gender', 'status')
    list_filter = ('status', 'gender')
    search_fields = ('first_name', 'last_name', 'admissions__admission_number', 'admissions__gr_number')
    exclude = ('user',)
    inlines = [StudentFamilyDetailsInline, StudentAddressInline, StudentDocumentInline]


@admin.register(Admission)
class AdmissionAdmin(admin.ModelAdmin):
    list_display = ('admission_number', 'gr_number', 'student', 'school_class', 'roll_number', 'admission_date')
    list_filter = ('school_class__academic_year',)
    search_fields = ('admission_number', 'gr_number', 'student__first_name', 'student__last_name')


@admin.register(StudentAttendance)
class StudentAttendanceAdmin(admin.ModelAdmin):
    list_display = ('student', 'school_class', 'date', 'status', 'source')
    list_filter = ('status', 'date')


# ==================== TRANSPORT ====================
class BusStopInline(admin.TabularInline):
    model = BusStop
    extra = 0


@admin.register(Bus)
class BusAdmin(admin.ModelAdmin):
    list_display = ('number', 'name', 'driver', 'route_from', 'route_to', 'status')
    inlines = [BusStopInline]


# ==================== TIMETABLE ====================
class TimetableSlotInline(admin.TabularInline):
    model = TimetableSlot
    extra = 0


@admin.register(Timetable)
class TimetableAdmin(admin.ModelAdmin):
    list_display = ('school_class', 'academic_year', 'status', 'created_by', 'updated_at')
    list_filter = ('status', 'academic_year')
    inlines = [TimetableSlotInline]
