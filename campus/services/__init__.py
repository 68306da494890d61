from .academics import AcademicYearService, DepartmentService, SchoolConfigurationService
from .admissions import AdmissionService
from .attendance import AttendanceService
from .base import Service, replace_child_set
from .classes import ClassService
from .employees import EmployeeService
from .leaves import LeaveService, StudentLeaveService
from .promotion import PromotionService
from .students import StudentService
from .subjects import SubjectService
from .timetables import TimetableService
from .transport import TransportService

__all__ = [
    'AcademicYearService', 'AdmissionService', 'AttendanceService', 'ClassService', 'DepartmentService',
    'EmployeeService', 'LeaveService', 'PromotionService', 'SchoolConfigurationService', 'Service',
    'StudentLeaveService', 'StudentService', 'SubjectService', 'TimetableService', 'TransportService',
    'replace_child_set',
]
