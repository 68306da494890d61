# views.py
import logging

from django.contrib.auth import get_user_model
from django.db.models import Q
from django.http import HttpResponse
from rest_framework import permissions, status, viewsets
from rest_framework.decorators import action
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.response import Response
from rest_framework.views import APIView
from rest_framework_simplejwt.tokens import RefreshToken

from .exceptions import Forbidden, NotFound
from .middleware.request_logging import client_ip
from .models import AuditLog, Bus, Department, Employee, EmployeeLeave, Student, Subject, Timetable
from .serializers import (
    AcademicYearCreateSerializer, AcademicYearSerializer, BiometricPunchSerializer, BulkEmployeeAttendanceSerializer,
    BusSerializer, BusWriteSerializer, ClassSerializer, CourseOfferingSerializer, CredentialsSerializer,
    DepartmentSerializer, EmployeeAttendanceEntrySerializer, EmployeeAttendanceSerializer, EmployeeLeaveSerializer,
    EmployeeListSerializer, EmployeeSerializer, EnrollmentSerializer, IdListSerializer, LeaveCreateSerializer,
    LeaveTransitionSerializer, LoginSerializer, PromotionSerializer, RollNumberUpdateSerializer,
    SchoolConfigurationSerializer, StudentAttendanceEntrySerializer, StudentAttendanceSerializer,
    StudentIdsSerializer, StudentImportSerializer, StudentLeaveRequestSerializer, StudentListSerializer,
    StudentSerializer, SubjectDetailSerializer, SubjectSerializer, SubjectWriteSerializer, TeacherOfferingSerializer,
    TimetableSerializer, TimetableWriteSerializer, UserSerializer,
)
from .services import (
    AcademicYearService, AdmissionService, AttendanceService, ClassService, DepartmentService, EmployeeService,
    LeaveService, PromotionService, SchoolConfigurationService, StudentLeaveService, StudentService,
    SubjectService, TimetableService, TransportService,
)
from .spreadsheets import build_template, import_students

logger = logging.getLogger(__name__)
User = get_user_model()

STAFF_ROLES = ['admin', 'staff', 'teacher']


# ==================== HELPERS ====================
def require_admin(request):
    if not request.user.is_admin_role:
        raise Forbidden('You do not have permission to perform this action.')


def require_roles(request, allowed_roles):
    if not request.user.is_admin_role and request.user.role not in allowed_roles:
        raise Forbidden('You do not have permission to perform this action.')


def audit(request, event_type, table_name, operation, record_id=None, new_values=None, user=None):
    user = user or (request.user if request.user.is_authenticated else None)
    AuditLog.objects.create(
        event_type=event_type,
        user=user,
        username=user.username if user else request.data.get('username'),
        user_role=user.role if user else None,
        table_name=table_name,
        record_id=str(record_id) if record_id is not None else None,
        operation=operation,
        new_values=new_values,
        ip_address=client_ip(request),
        user_agent=request.META.get('HTTP_USER_AGENT', ''),
        endpoint=request.path,
        http_method=request.method,
        request_id=getattr(request, 'request_id', None),
    )


def success(data=None, message=None, status_code=status.HTTP_200_OK):
    body = {'success': True}
    if message:
        body['message'] = message
    if data is not None:
        body['data'] = data
    return Response(body, status=status_code)


def validated(serializer_class, data, **kwargs):
    serializer = serializer_class(data=data, **kwargs)
    serializer.is_valid(raise_exception=True)
    return serializer.validated_data


def current_employee(request, message='Only employees can use this endpoint.'):
    employee = getattr(request.user, 'employee', None)
    if employee is None:
        raise Forbidden(message)
    return employee


def current_student(request):
    student = getattr(request.user, 'student', None)
    if student is None:
        raise NotFound('Student profile not found.')
    return student


class PaginatedListMixin:
    """Wrap a paginated page in the success envelope."""

    def paginated(self, queryset, serializer_class):
        page = self.paginate_queryset(queryset)
        if page is None:
            return success(serializer_class(queryset, many=True).data)
        return Response({
            'success': True,
            'count': self.paginator.page.paginator.count,
            'next': self.paginator.get_next_link(),
            'previous': self.paginator.get_previous_link(),
            'data': serializer_class(page, many=True).data,
        })


# ==================== AUTHENTICATION VIEWS ====================
class LoginView(APIView):
    permission_classes = [permissions.AllowAny]

    def post(self, request):
        serializer = LoginSerializer(data=request.data, context={'request': request})
        if not serializer.is_valid():
            audit(request, 'USER_LOGIN', 'User', 'INSERT',
                  new_values={'username': request.data.get('username'), 'status': 'failed'})
            logger.warning(f"Failed login for {request.data.get('username')}")
            return Response({
                'success': False,
                'error': 'Invalid username or password',
                'details': serializer.errors,
            }, status=status.HTTP_400_BAD_REQUEST)

        user = serializer.validated_data['user']
        refresh = RefreshToken.for_user(user)
        audit(request, 'USER_LOGIN', 'User', 'INSERT', record_id=user.pk,
              new_values={'status': 'success', 'role': user.role}, user=user)

        return Response({
            'access': str(refresh.access_token),
            'refresh': str(refresh),
            'user': UserSerializer(user).data,
        }, status=status.HTTP_200_OK)


class ProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return success(UserSerializer(request.user).data)


# ==================== SCHOOL / REFERENCE DATA ====================
class SchoolConfigurationView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        config = SchoolConfigurationService().get()
        if config is None:
            raise NotFound('School configuration has not been set up.')
        return success(SchoolConfigurationSerializer(config).data)

    def put(self, request):
        require_admin(request)
        data = validated(SchoolConfigurationSerializer, request.data, partial=True)
        config = SchoolConfigurationService().update(data)
        audit(request, 'CONFIG_CHANGE', 'SchoolConfiguration', 'UPDATE', record_id=config.pk,
              new_values=SchoolConfigurationSerializer(config).data)
        return success(SchoolConfigurationSerializer(config).data, 'School configuration saved')


class AcademicYearViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        return success(AcademicYearSerializer(AcademicYearService().list_years(), many=True).data)

    def create(self, request):
        require_admin(request)
        data = validated(AcademicYearCreateSerializer, request.data)
        year = AcademicYearService().create_year(**data)
        audit(request, 'ACADEMIC_YEAR_CREATE', 'AcademicYear', 'INSERT', record_id=year.pk,
              new_values={'name': year.name, 'is_active': year.is_active})
        return success(AcademicYearSerializer(year).data, 'Academic year created', status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'])
    def activate(self, request, pk=None):
        require_admin(request)
        year = AcademicYearService().activate(pk)
        audit(request, 'ACADEMIC_YEAR_ACTIVATE', 'AcademicYear', 'UPDATE', record_id=year.pk,
              new_values={'is_active': True})
        return success(AcademicYearSerializer(year).data, f'Academic year {year.name} is now active')


class DepartmentViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        return success(DepartmentSerializer(Department.objects.all(), many=True).data)

    def create(self, request):
        require_admin(request)
        department = DepartmentService().create_department(request.data.get('name'))
        audit(request, 'DEPARTMENT_CREATE', 'Department', 'INSERT', record_id=department.pk,
              new_values={'name': department.name})
        return success(DepartmentSerializer(department).data, 'Department created', status.HTTP_201_CREATED)


# ==================== CLASS MANAGEMENT ====================
class ClassViewSet(viewsets.ViewSet):
    """Class CRUD, subject assignment and admissions."""
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        require_roles(request, STAFF_ROLES)
        classes = ClassService().list_classes()
        academic_year = request.query_params.get('academic_year')
        if academic_year:
            classes = classes.filter(academic_year__name=academic_year)
        return success(ClassSerializer(classes, many=True).data)

    def create(self, request):
        require_admin(request)
        school_class = ClassService().create_class(request.data)
        audit(request, 'CLASS_CREATE', 'Class', 'INSERT', record_id=school_class.pk,
              new_values={'class_name': school_class.class_name, 'capacity': school_class.capacity})
        return success(ClassSerializer(school_class).data, 'Class created successfully', status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        require_admin(request)
        school_class = ClassService().update_class(pk, request.data)
        audit(request, 'CLASS_UPDATE', 'Class', 'UPDATE', record_id=school_class.pk,
              new_values={'class_name': school_class.class_name, 'capacity': school_class.capacity})
        return success(ClassSerializer(school_class).data, 'Class updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        ClassService().delete_class(pk)
        audit(request, 'CLASS_DELETE', 'Class', 'DELETE', record_id=pk)
        return success(message='Class deleted successfully')

    @action(detail=False, methods=['get'])
    def standards(self, request):
        return success(ClassService().list_standards(request.query_params.get('standard')))

    @action(detail=False, methods=['get'], url_path='unassigned-students')
    def unassigned_students(self, request):
        require_roles(request, STAFF_ROLES)
        return success(StudentListSerializer(ClassService().unassigned_students(), many=True).data)

    @action(detail=True, methods=['get'], url_path='available-subjects')
    def available_subjects(self, request, pk=None):
        return success(SubjectSerializer(ClassService().available_subjects(pk), many=True).data)

    @action(detail=True, methods=['post'])
    def subjects(self, request, pk=None):
        require_admin(request)
        data = validated(IdListSerializer, {'ids': request.data.get('subject_ids')})
        offerings = ClassService().add_subjects_to_class(
            pk, data['ids'],
            teacher_id=request.data.get('teacher_id'),
            is_mandatory=request.data.get('is_mandatory', True),
        )
        audit(request, 'CLASS_SUBJECTS_ADD', 'CourseOffering', 'INSERT', record_id=pk,
              new_values={'subject_ids': [str(o.subject_id) for o in offerings]})
        return success(CourseOfferingSerializer(offerings, many=True).data,
                       f'{len(offerings)} subject(s) added to class', status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'subjects/(?P<subject_id>[^/.]+)')
    def remove_subject(self, request, pk=None, subject_id=None):
        require_admin(request)
        ClassService().remove_subject_from_class(pk, subject_id)
        audit(request, 'CLASS_SUBJECT_REMOVE', 'CourseOffering', 'DELETE', record_id=pk,
              new_values={'subject_id': subject_id})
        return success(message='Subject removed from class')

    @action(detail=True, methods=['post'])
    def admit(self, request, pk=None):
        require_admin(request)
        data = validated(StudentIdsSerializer, request.data)
        result = AdmissionService().admit_students(pk, data['student_ids'])
        audit(request, 'STUDENT_ADMIT', 'Admission', 'INSERT', record_id=pk,
              new_values={'student_ids': [str(s) for s in data['student_ids']]})
        return success(result, f"{result['count']} student(s) admitted", status.HTTP_201_CREATED)

    @action(detail=True, methods=['delete'], url_path=r'students/(?P<student_id>[^/.]+)')
    def remove_student(self, request, pk=None, student_id=None):
        require_admin(request)
        ClassService().remove_student_from_class(pk, student_id)
        audit(request, 'STUDENT_REMOVE', 'Admission', 'DELETE', record_id=pk, new_values={'student_id': student_id})
        return success(message='Student removed from class')


class PromotionView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        require_admin(request)
        data = validated(PromotionSerializer, request.data)
        result = PromotionService().promote_students(data['student_ids'], data['target_class_id'])
        audit(request, 'STUDENT_PROMOTE', 'Admission', 'UPDATE', record_id=data['target_class_id'],
              new_values={'student_ids': [str(s) for s in data['student_ids']], **result})
        return success(result, f"{result['promoted_count']} student(s) promoted")


# ==================== SUBJECT MANAGEMENT ====================
class SubjectViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        subjects = Subject.objects.prefetch_related(
            'course_offerings__school_class', 'course_offerings__teacher', 'course_offerings__subject',
        )
        search = request.query_params.get('search')
        if search:
            subjects = subjects.filter(Q(name__icontains=search) | Q(code__icontains=search))
        return success(SubjectDetailSerializer(subjects, many=True).data)

    def retrieve(self, request, pk=None):
        subject = SubjectService().get_or_404(Subject, 'Subject not found.', pk=pk)
        return success(SubjectDetailSerializer(subject).data)

    def create(self, request):
        require_admin(request)
        data = validated(SubjectWriteSerializer, request.data)
        subject = SubjectService().create_subject(**data)
        audit(request, 'SUBJECT_CREATE', 'Subject', 'INSERT', record_id=subject.pk,
              new_values={'name': subject.name, 'code': subject.code, 'sections': data['sections']})
        return success(SubjectDetailSerializer(subject).data, 'Subject created successfully', status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        require_admin(request)
        data = validated(SubjectWriteSerializer, request.data)
        subject = SubjectService().synchronize_offerings(
            pk, data['name'], data['standard'], data['sections'], data.get('teacher_id'),
            is_mandatory=data['is_mandatory'],
        )
        audit(request, 'SUBJECT_UPDATE', 'Subject', 'UPDATE', record_id=subject.pk,
              new_values={'name': subject.name, 'standard': data['standard'], 'sections': data['sections']})
        return success(SubjectDetailSerializer(subject).data, 'Subject updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        SubjectService().delete_subject(pk)
        audit(request, 'SUBJECT_DELETE', 'Subject', 'DELETE', record_id=pk)
        return success(message='Subject deleted successfully')

    @action(detail=True, methods=['get', 'post'])
    def students(self, request, pk=None):
        if request.method == 'GET':
            require_roles(request, STAFF_ROLES)
            return success(EnrollmentSerializer(SubjectService().enrolled_students(pk), many=True).data)

        require_admin(request)
        data = validated(StudentIdsSerializer, request.data)
        result = SubjectService().enroll_students(pk, data['student_ids'])
        audit(request, 'SUBJECT_ENROLL', 'StudentCourseEnrollment', 'INSERT', record_id=pk, new_values=result)
        return success(result, f"{result['enrolled_count']} student(s) enrolled")

    @action(detail=True, methods=['delete'], url_path=r'students/(?P<student_id>[^/.]+)')
    def withdraw(self, request, pk=None, student_id=None):
        require_admin(request)
        SubjectService().withdraw_student(pk, student_id)
        audit(request, 'SUBJECT_WITHDRAW', 'StudentCourseEnrollment', 'DELETE', record_id=pk,
              new_values={'student_id': student_id})
        return success(message='Student withdrawn from subject')


# ==================== STUDENT MANAGEMENT ====================
class StudentViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    """Student CRUD with audit logging"""
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        students = Student.objects.prefetch_related('admissions__school_class')
        class_id = self.request.query_params.get('class_id')
        search = self.request.query_params.get('search')
        status_filter = self.request.query_params.get('status')
        if class_id:
            students = students.filter(admissions__school_class_id=class_id)
        if status_filter:
            students = students.filter(status=status_filter)
        if search:
            students = students.filter(
                Q(first_name__icontains=search) | Q(last_name__icontains=search)
                | Q(admissions__admission_number__icontains=search) | Q(admissions__gr_number__icontains=search)
            ).distinct()
        return students.order_by('first_name', 'last_name')

    def list(self, request):
        require_roles(request, STAFF_ROLES)
        return self.paginated(self.get_queryset(), StudentListSerializer)

    def retrieve(self, request, pk=None):
        require_roles(request, STAFF_ROLES)
        student = StudentService().get_or_404(Student, 'Student not found.', pk=pk)
        return success(StudentSerializer(student).data)

    def create(self, request):
        require_admin(request)
        student = StudentService().create_student(request.data)
        audit(request, 'STUDENT_CREATE', 'Student', 'INSERT', record_id=student.pk,
              new_values={'name': student.full_name, 'class_id': str(request.data.get('class_id'))})
        return success(StudentSerializer(student).data, 'Student created successfully', status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        require_admin(request)
        student = StudentService().update_student(pk, request.data)
        audit(request, 'STUDENT_UPDATE', 'Student', 'UPDATE', record_id=student.pk,
              new_values={'sections': sorted(request.data.keys())})
        return success(StudentSerializer(student).data, 'Student updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        StudentService().delete_student(pk)
        audit(request, 'STUDENT_DELETE', 'Student', 'DELETE', record_id=pk)
        return success(message='Student deleted successfully')

    @action(detail=True, methods=['post'], url_path='credentials')
    def set_credentials(self, request, pk=None):
        require_admin(request)
        data = validated(CredentialsSerializer, request.data)
        user = StudentService().set_credentials(pk, data['password'], username=data.get('username'))
        audit(request, 'CREDENTIALS_SET', 'User', 'UPDATE', record_id=user.pk, new_values={'username': user.username})
        return success({'student_id': pk, 'username': user.username}, 'Credentials saved')

    @action(detail=False, methods=['get'], url_path='credentials')
    def credentials(self, request):
        require_admin(request)
        return success(StudentService().list_credentials(request.query_params.get('class_id')))

    @action(detail=False, methods=['post'], url_path='roll-numbers')
    def roll_numbers(self, request):
        require_admin(request)
        serializer = RollNumberUpdateSerializer(data=request.data.get('updates'), many=True)
        serializer.is_valid(raise_exception=True)
        result = AdmissionService().batch_update_roll_numbers(serializer.validated_data)
        audit(request, 'ROLL_NUMBER_UPDATE', 'Admission', 'UPDATE', new_values=result)
        return success(result, f"{result['count']} roll number(s) updated")

    @action(detail=False, methods=['post'], url_path='import', parser_classes=[MultiPartParser, FormParser])
    def bulk_import(self, request):
        require_admin(request)
        data = validated(StudentImportSerializer, request.data)
        result = import_students(data['file'], data['class_id'], StudentService())
        imported_count = len(result['created'])

        audit(request, 'BULK_IMPORT', 'Student', 'INSERT', new_values={
            'imported_count': imported_count,
            'total_rows': result['total_rows'],
            'error_count': len(result['errors']),
            'file_name': data['file'].name,
        })
        return Response({
            'success': True,
            'message': f'Successfully imported {imported_count} students',
            'importedCount': imported_count,
            'totalRows': result['total_rows'],
            'errorCount': len(result['errors']),
            'errors': result['errors'] or None,
        }, status=status.HTTP_201_CREATED)

    @action(detail=False, methods=['get'], url_path='template')
    def template(self, request):
        response = HttpResponse(
            build_template(),
            content_type='application/vnd.openxmlformats-officedocument.spreadsheetml.sheet',
        )
        response['Content-Disposition'] = 'attachment; filename="student_import_template.xlsx"'
        return response


# ==================== EMPLOYEE MANAGEMENT ====================
class EmployeeViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def get_queryset(self):
        employees = Employee.objects.select_related('department', 'user')
        params = self.request.query_params
        if params.get('role'):
            employees = employees.filter(role=params['role'])
        if params.get('department'):
            employees = employees.filter(department__name__iexact=params['department'])
        if params.get('status'):
            employees = employees.filter(status=params['status'])
        if params.get('search'):
            employees = employees.filter(
                Q(full_name__icontains=params['search']) | Q(employee_code__icontains=params['search'])
            )
        return employees.order_by('employee_code')

    def list(self, request):
        require_roles(request, STAFF_ROLES)
        return self.paginated(self.get_queryset(), EmployeeListSerializer)

    def retrieve(self, request, pk=None):
        require_roles(request, STAFF_ROLES)
        employee = EmployeeService().get_or_404(Employee, 'Employee not found.', pk=pk)
        return success(EmployeeSerializer(employee).data)

    def create(self, request):
        require_admin(request)
        employee = EmployeeService().create_employee(request.data)
        audit(request, 'EMPLOYEE_CREATE', 'Employee', 'INSERT', record_id=employee.pk,
              new_values={'employee_code': employee.employee_code, 'role': employee.role})
        return success(EmployeeSerializer(employee).data, 'Employee created successfully', status.HTTP_201_CREATED)

    def partial_update(self, request, pk=None):
        require_admin(request)
        employee = EmployeeService().update_employee(pk, request.data)
        audit(request, 'EMPLOYEE_UPDATE', 'Employee', 'UPDATE', record_id=employee.pk,
              new_values={'fields': sorted(request.data.keys())})
        return success(EmployeeSerializer(employee).data, 'Employee updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        EmployeeService().delete_employee(pk)
        audit(request, 'EMPLOYEE_DELETE', 'Employee', 'DELETE', record_id=pk)
        return success(message='Employee deleted successfully')

    @action(detail=True, methods=['get'], url_path='attendance-summary')
    def attendance_summary(self, request, pk=None):
        require_roles(request, STAFF_ROLES)
        result = AttendanceService().employee_summary(
            pk, request.query_params.get('start_date'), request.query_params.get('end_date'),
        )
        return success({
            'employee': EmployeeListSerializer(result['employee']).data,
            'records': EmployeeAttendanceSerializer(result['records'], many=True).data,
            'summary': result['summary'],
        })


# ==================== ATTENDANCE ====================
class EmployeeAttendanceView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        require_admin(request)
        serializer = EmployeeAttendanceEntrySerializer(data=request.data.get('entries'), many=True)
        serializer.is_valid(raise_exception=True)
        result = AttendanceService().upsert_employee_attendance(serializer.validated_data)
        audit(request, 'ATTENDANCE_UPSERT', 'EmployeeAttendance', 'UPDATE', new_values=result)
        return success(result, f"{result['count']} attendance record(s) saved")


class BulkEmployeeAttendanceView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        require_admin(request)
        data = validated(BulkEmployeeAttendanceSerializer, request.data)
        result = AttendanceService().mark_employee_range(**data)
        audit(request, 'ATTENDANCE_BULK', 'EmployeeAttendance', 'UPDATE', new_values=result)
        return success(result, f"Attendance marked for {result['count']} record(s)")


class BiometricSyncView(APIView):
    permission_classes = [permissions.IsAuthenticated]
    parser_classes = [JSONParser]

    def post(self, request):
        require_admin(request)
        serializer = BiometricPunchSerializer(data=request.data.get('punches'), many=True)
        serializer.is_valid(raise_exception=True)
        result = AttendanceService().sync_biometric(serializer.validated_data)
        audit(request, 'BIOMETRIC_SYNC', 'EmployeeAttendance', 'UPDATE', new_values=result)
        return success(result, f"{result['synced_records']} record(s) synced")


class ClassAttendanceView(APIView):
    """Administrators read and write a class's daily attendance."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, class_id):
        require_roles(request, STAFF_ROLES)
        records = AttendanceService().class_attendance(
            class_id, date=request.query_params.get('date'), month=request.query_params.get('month'),
        )
        return success(StudentAttendanceSerializer(records, many=True).data)

    def post(self, request, class_id):
        require_admin(request)
        serializer = StudentAttendanceEntrySerializer(data=request.data.get('entries'), many=True)
        serializer.is_valid(raise_exception=True)
        result = AttendanceService().upsert_student_attendance(class_id, serializer.validated_data)
        audit(request, 'ATTENDANCE_UPSERT', 'StudentAttendance', 'UPDATE', record_id=class_id, new_values=result)
        return success(result, f"{result['count']} attendance record(s) saved")


class TakeAttendanceView(APIView):
    """A class teacher submits attendance for their own class by standard and section."""
    permission_classes = [permissions.IsAuthenticated]

    def post(self, request):
        employee = current_employee(request, 'Only teachers can take attendance.')
        service = AttendanceService()
        school_class = service.resolve_class(
            request.data.get('standard'), request.data.get('section'), request.data.get('medium'),
        )
        serializer = StudentAttendanceEntrySerializer(data=request.data.get('entries'), many=True)
        serializer.is_valid(raise_exception=True)
        result = service.upsert_student_attendance(school_class.pk, serializer.validated_data, actor_employee=employee)
        audit(request, 'ATTENDANCE_TAKE', 'StudentAttendance', 'UPDATE', record_id=school_class.pk, new_values=result)
        return success(result, f"{result['count']} attendance record(s) saved")


class StudentAttendanceSummaryView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, student_id):
        student = getattr(request.user, 'student', None)
        if student is None or str(student.pk) != str(student_id):
            require_roles(request, STAFF_ROLES)
        result = AttendanceService().student_summary(
            student_id, request.query_params.get('start_date'), request.query_params.get('end_date'),
        )
        return success({
            'student': StudentListSerializer(result['student']).data,
            'records': StudentAttendanceSerializer(result['records'], many=True).data,
            'summary': result['summary'],
        })


class StudentMonthlyAttendanceView(APIView):
    """Staff read one student's attendance for a month given as ?month=YYYY-MM."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, student_id):
        require_roles(request, STAFF_ROLES)
        result = AttendanceService().student_monthly_attendance(student_id, request.query_params.get('month'))
        return success({
            'student': StudentListSerializer(result['student']).data,
            'records': StudentAttendanceSerializer(result['records'], many=True).data,
            'summary': result['summary'],
        })


# ==================== TEACHER PORTAL ====================
class TeacherClassesView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        employee = current_employee(request)
        return success(ClassSerializer(ClassService().teacher_classes(employee.pk), many=True).data)


class TeacherSubjectsView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        employee = current_employee(request)
        offerings = SubjectService().teacher_offerings(employee.pk)
        return success(CourseOfferingSerializer(offerings, many=True).data)


class TeacherSubjectDetailView(APIView):
    """One offering the signed-in teacher teaches, with materials and enrolled students."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request, offering_id):
        employee = current_employee(request)
        offering = SubjectService().teacher_offering(employee.pk, offering_id)
        return success(TeacherOfferingSerializer(offering).data)


# ==================== STUDENT PORTAL ====================
class StudentBasicProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return success(StudentService().basic_profile(current_student(request).pk))


class StudentFullProfileView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        return success(StudentSerializer(current_student(request)).data)


# ==================== LEAVE MANAGEMENT ====================
class LeaveViewSet(PaginatedListMixin, viewsets.GenericViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        params = request.query_params
        leaves = LeaveService().list_leaves(
            department=params.get('department'),
            leave_type=params.get('leave_type'),
            status=params.get('status'),
            start_date=params.get('start_date'),
            end_date=params.get('end_date'),
            search=params.get('search'),
        )
        if not request.user.is_admin_role:
            employee = getattr(request.user, 'employee', None)
            if employee is None:
                raise Forbidden('Only employees can view leave requests.')
            leaves = leaves.filter(employee=employee)
        return self.paginated(leaves, EmployeeLeaveSerializer)

    def create(self, request):
        data = validated(LeaveCreateSerializer, request.data)
        employee = getattr(request.user, 'employee', None)
        if not request.user.is_admin_role and (employee is None or employee.pk != data['employee_id']):
            raise Forbidden('You can only request leave for yourself.')
        leave = LeaveService().create_leave(**data)
        audit(request, 'LEAVE_REQUEST', 'EmployeeLeave', 'INSERT', record_id=leave.pk,
              new_values={'start_date': str(leave.start_date), 'end_date': str(leave.end_date)})
        return success(EmployeeLeaveSerializer(leave).data, 'Leave request submitted', status.HTTP_201_CREATED)

    @action(detail=True, methods=['post'], url_path='status')
    def transition(self, request, pk=None):
        require_admin(request)
        data = validated(LeaveTransitionSerializer, request.data)
        leave = LeaveService().transition_leave(pk, data['status'], data.get('comment'))
        audit(request, 'LEAVE_STATUS', 'EmployeeLeave', 'UPDATE', record_id=leave.pk,
              new_values={'status': leave.status, 'comment': data.get('comment')})
        leave = EmployeeLeave.objects.prefetch_related('status_history').get(pk=leave.pk)
        return success(EmployeeLeaveSerializer(leave).data, f'Leave request {leave.status}')


class StudentLeaveView(APIView):
    """The signed-in student's own leave periods."""
    permission_classes = [permissions.IsAuthenticated]

    def get(self, request):
        student = current_student(request)
        return success(StudentLeaveService().leave_history(student.pk))

    def post(self, request):
        student = current_student(request)
        data = validated(StudentLeaveRequestSerializer, request.data)
        records = StudentLeaveService().request_leave(student.pk, data['from_date'], data['to_date'], data['reason'])
        audit(request, 'STUDENT_LEAVE_REQUEST', 'StudentAttendance', 'INSERT', record_id=records[0].pk,
              new_values={'from_date': str(data['from_date']), 'to_date': str(data['to_date'])})
        return success({'id': str(records[0].pk), 'days': len(records)}, 'Leave request submitted',
                       status.HTTP_201_CREATED)


class StudentLeaveCancelView(APIView):
    permission_classes = [permissions.IsAuthenticated]

    def delete(self, request, attendance_id):
        student = current_student(request)
        cancelled = StudentLeaveService().cancel_leave(attendance_id, student.pk)
        audit(request, 'STUDENT_LEAVE_CANCEL', 'StudentAttendance', 'UPDATE', record_id=attendance_id,
              new_values={'cancelled_days': cancelled})
        return success({'cancelled_days': cancelled}, 'Leave request cancelled')


# ==================== TRANSPORT ====================
class BusViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        buses = Bus.objects.select_related('driver').prefetch_related('stops')
        return success(BusSerializer(buses, many=True).data)

    def create(self, request):
        require_admin(request)
        bus = TransportService().create_bus(validated(BusWriteSerializer, request.data))
        audit(request, 'BUS_CREATE', 'Bus', 'INSERT', record_id=bus.pk, new_values={'number': bus.number})
        return success(BusSerializer(bus).data, 'Bus created successfully', status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        require_admin(request)
        bus = TransportService().update_bus(pk, validated(BusWriteSerializer, request.data))
        audit(request, 'BUS_UPDATE', 'Bus', 'UPDATE', record_id=bus.pk, new_values={'number': bus.number})
        return success(BusSerializer(bus).data, 'Bus updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        TransportService().delete_bus(pk)
        audit(request, 'BUS_DELETE', 'Bus', 'DELETE', record_id=pk)
        return success(message='Bus deleted successfully')

    @action(detail=False, methods=['get'])
    def routes(self, request):
        return success(TransportService().list_routes())


# ==================== TIMETABLE ====================
class TimetableViewSet(viewsets.ViewSet):
    permission_classes = [permissions.IsAuthenticated]

    def list(self, request):
        params = request.query_params
        timetables = TimetableService().list_timetables(
            search=params.get('search'),
            class_id=params.get('class_id'),
            section=params.get('section'),
            academic_year=params.get('academic_year'),
            status=params.get('status'),
        ).prefetch_related('slots__subject', 'slots__teacher')
        return success(TimetableSerializer(timetables, many=True).data)

    def retrieve(self, request, pk=None):
        timetable = TimetableService().get_or_404(Timetable, 'Timetable not found.', pk=pk)
        return success(TimetableSerializer(timetable).data)

    def create(self, request):
        require_admin(request)
        data = validated(TimetableWriteSerializer, request.data)
        timetable = TimetableService().create_timetable(
            data.get('class_id'), data.get('academic_year_id'), data.get('slots'),
            created_by=request.user, status=data.get('status', 'DRAFT'),
        )
        audit(request, 'TIMETABLE_CREATE', 'Timetable', 'INSERT', record_id=timetable.pk,
              new_values={'slots': len(data.get('slots') or [])})
        return success(TimetableSerializer(timetable).data, 'Timetable created successfully', status.HTTP_201_CREATED)

    def update(self, request, pk=None):
        require_admin(request)
        data = validated(TimetableWriteSerializer, request.data)
        timetable = TimetableService().update_timetable(pk, data, updated_by=request.user)
        audit(request, 'TIMETABLE_UPDATE', 'Timetable', 'UPDATE', record_id=timetable.pk,
              new_values={'status': timetable.status})
        return success(TimetableSerializer(timetable).data, 'Timetable updated successfully')

    def destroy(self, request, pk=None):
        require_admin(request)
        TimetableService().delete_timetable(pk)
        audit(request, 'TIMETABLE_DELETE', 'Timetable', 'DELETE', record_id=pk)
        return success(message='Timetable deleted successfully')
