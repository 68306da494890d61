# services/employees.py
import logging

from django.contrib.auth import get_user_model
from django.db import IntegrityError

from ..exceptions import ValidationError, conflict_from_integrity_error
from ..models import Department, Employee, EmployeeDocument, EmployeeSalary
from ..utils import next_employee_code, normalize_date
from .academics import DepartmentService
from .base import Service, clean_values

logger = logging.getLogger(__name__)
User = get_user_model()

EMPLOYEE_FIELDS = (
    'full_name', 'email', 'phone_number', 'gender', 'dob', 'address', 'highest_qualification',
    'years_of_experience', 'joining_date', 'resignation_date', 'designation', 'role',
    'employment_type', 'status', 'profile_avatar_url',
)
SALARY_FIELDS = ('basic_salary', 'allowances', 'deductions', 'effective_from_date', 'effective_to_date')
# Payload keys handled outside the employee columns
EMPLOYEE_SECTIONS = ('department_id', 'department', 'salary', 'documents')
CONFLICT_MESSAGE = 'An employee with the same employee code, email or phone number already exists.'

USER_ROLE_FOR_EMPLOYEE = {'teacher': 'teacher', 'admin': 'admin'}


def user_role_for(employee_role):
    return USER_ROLE_FOR_EMPLOYEE.get(employee_role, 'staff')


class EmployeeService(Service):
    """Employee lifecycle: codes, linked login, salary history and documents."""

    def _clean_employee(self, data):
        unknown = sorted(set(data) - set(EMPLOYEE_FIELDS) - set(EMPLOYEE_SECTIONS))
        if unknown:
            raise ValidationError(f"Unknown field(s): {', '.join(unknown)}", details={'employee': unknown})
        return clean_values(Employee, {f: data[f] for f in EMPLOYEE_FIELDS if f in data}, 'employee')

    def _next_code(self):
        last = self.objects(Employee).filter(employee_code__startswith='EMP').order_by('-employee_code').first()
        return next_employee_code(last.employee_code if last else None)

    def create_employee(self, data):
        missing = [f for f in ('full_name', 'email', 'joining_date', 'department_id') if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={'missing': missing})
        values = self._clean_employee({f: v for f, v in data.items() if v is not None})
        salary = clean_values(EmployeeSalary, data['salary'], 'salary') if data.get('salary') else None
        documents = [clean_values(EmployeeDocument, d, 'documents') for d in data.get('documents') or []]

        try:
            with self.atomic():
                department = self.get_or_404(Department, 'Department not found.', pk=data['department_id'])
                code = self._next_code()
                role = values.get('role') or 'teacher'

                user = User(username=code, email=values['email'], role=user_role_for(role))
                user.set_unusable_password()
                user.save(using=self.using)

                values['joining_date'] = normalize_date(values['joining_date'], 'joining_date')
                values['role'] = role
                employee = self.objects(Employee).create(
                    user=user, employee_code=code, department=department, **values,
                )

                if salary:
                    self.objects(EmployeeSalary).create(
                        employee=employee,
                        effective_from_date=employee.joining_date,
                        **{f: salary[f] for f in SALARY_FIELDS if f in salary and f != 'effective_from_date'},
                    )
                self.objects(EmployeeDocument).bulk_create(
                    [EmployeeDocument(employee=employee, **d) for d in documents]
                )
        except IntegrityError as exc:
            raise conflict_from_integrity_error(exc, CONFLICT_MESSAGE)

        logger.info(f"Employee {employee.employee_code} created")
        return employee

    def update_employee(self, employee_id, data):
        values = self._clean_employee(data)
        salary = clean_values(EmployeeSalary, data['salary'], 'salary') if data.get('salary') else None
        documents = [clean_values(EmployeeDocument, d, 'documents') for d in data.get('documents') or []]

        try:
            with self.atomic():
                employee = self.get_or_404(Employee, 'Employee not found.', pk=employee_id)
                for field, value in values.items():
                    setattr(employee, field, value)
                if data.get('department'):
                    employee.department = DepartmentService(self.using).get_or_create_by_name(data['department'])
                employee.save(using=self.using)

                if employee.user_id and 'role' in values:
                    self.objects(User).filter(pk=employee.user_id).update(role=user_role_for(employee.role))

                if salary:
                    latest = self.objects(EmployeeSalary).filter(employee=employee).order_by('-effective_from_date').first()
                    if latest is None:
                        self.objects(EmployeeSalary).create(
                            employee=employee,
                            effective_from_date=salary.get('effective_from_date') or employee.joining_date,
                            **{f: salary[f] for f in SALARY_FIELDS if f in salary and f != 'effective_from_date'},
                        )
                    else:
                        for field in SALARY_FIELDS:
                            if field in salary:
                                setattr(latest, field, salary[field])
                        latest.save(using=self.using)

                self.objects(EmployeeDocument).bulk_create(
                    [EmployeeDocument(employee=employee, **d) for d in documents]
                )
        except IntegrityError as exc:
            raise conflict_from_integrity_error(exc, CONFLICT_MESSAGE)

        logger.info(f"Employee {employee.employee_code} updated")
        return employee

    def delete_employee(self, employee_id):
        with self.atomic():
            employee = self.get_or_404(Employee, 'Employee not found.', pk=employee_id)
            user = employee.user
            employee.delete(using=self.using)
            if user is not None:
                user.delete(using=self.using)
        logger.info(f"Employee {employee_id} deleted")
