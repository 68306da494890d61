# urls.py
from django.urls import include, path
from rest_framework.routers import DefaultRouter

from . import views

router = DefaultRouter()
router.register(r'academic-years', views.AcademicYearViewSet, basename='academic-year')
router.register(r'departments', views.DepartmentViewSet, basename='department')
router.register(r'classes', views.ClassViewSet, basename='class')
router.register(r'subjects', views.SubjectViewSet, basename='subject')
router.register(r'students', views.StudentViewSet, basename='student')
router.register(r'employees', views.EmployeeViewSet, basename='employee')
router.register(r'leaves', views.LeaveViewSet, basename='leave')
router.register(r'buses', views.BusViewSet, basename='bus')
router.register(r'timetables', views.TimetableViewSet, basename='timetable')

urlpatterns = [
    # Authentication endpoints
    path('auth/login/', views.LoginView.as_view(), name='login'),
    path('auth/profile/', views.ProfileView.as_view(), name='profile'),

    path('school-configuration/', views.SchoolConfigurationView.as_view(), name='school-configuration'),
    path('promotions/', views.PromotionView.as_view(), name='promotion'),

    # Attendance
    path('attendance/employees/', views.EmployeeAttendanceView.as_view(), name='employee-attendance'),
    path('attendance/employees/bulk/', views.BulkEmployeeAttendanceView.as_view(), name='employee-attendance-bulk'),
    path('attendance/employees/biometric-sync/', views.BiometricSyncView.as_view(), name='biometric-sync'),
    path('attendance/classes/<uuid:class_id>/', views.ClassAttendanceView.as_view(), name='class-attendance'),
    path('attendance/take/', views.TakeAttendanceView.as_view(), name='take-attendance'),
    path('attendance/students/<uuid:student_id>/summary/', views.StudentAttendanceSummaryView.as_view(),
         name='student-attendance-summary'),
    path('attendance/students/<uuid:student_id>/monthly/', views.StudentMonthlyAttendanceView.as_view(),
         name='student-attendance-monthly'),

    # Teacher portal
    path('teacher/classes/', views.TeacherClassesView.as_view(), name='teacher-classes'),
    path('teacher/subjects/', views.TeacherSubjectsView.as_view(), name='teacher-subjects'),
    path('teacher/subjects/<uuid:offering_id>/', views.TeacherSubjectDetailView.as_view(),
         name='teacher-subject-detail'),

    # Student portal
    path('student/profile/basic-info/', views.StudentBasicProfileView.as_view(), name='student-basic-profile'),
    path('student/profile/full-profile/', views.StudentFullProfileView.as_view(), name='student-full-profile'),

    # Student leave
    path('student-leaves/', views.StudentLeaveView.as_view(), name='student-leaves'),
    path('student-leaves/<uuid:attendance_id>/', views.StudentLeaveCancelView.as_view(), name='student-leave-cancel'),

    path('', include(router.urls)),
]
