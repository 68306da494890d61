# rules.py
"""
Business invariants as plain functions.

Each check returns a RuleResult and never touches the database, so services
compute the inputs (counts, ids, dates) and call `enforce` before mutating.
"""
from dataclasses import dataclass, field


@dataclass(frozen=True)
class RuleResult:
    ok: bool
    message: str = ''
    details: dict = field(default_factory=dict)

    @classmethod
    def passed(cls):
        return cls(ok=True)

    @classmethod
    def violation(cls, message, **details):
        return cls(ok=False, message=message, details=details)


def enforce(result, error_class):
    if not result.ok:
        raise error_class(result.message, details=result.details or None)
    return result


def check_capacity(capacity, current_count, incoming_count):
    total = current_count + incoming_count
    if total > capacity:
        return RuleResult.violation(
            f"Class capacity exceeded. Capacity is {capacity}, but this action would result in {total} students.",
            capacity=capacity,
            current_count=current_count,
            incoming_count=incoming_count,
        )
    return RuleResult.passed()


def check_single_admission_per_year(already_admitted_ids):
    """A student may hold at most one admission per academic year."""
    offending = sorted(str(pk) for pk in already_admitted_ids)
    if offending:
        return RuleResult.violation(
            f"Students already admitted to a class in this academic year: {', '.join(offending)}",
            student_ids=offending,
        )
    return RuleResult.passed()


def check_offering_removal(enrolled_count):
    if enrolled_count > 0:
        return RuleResult.violation(
            f"Cannot remove subject from one or more sections as {enrolled_count} student(s) are enrolled. "
            "Please withdraw them before changing the sections.",
            enrolled_count=enrolled_count,
        )
    return RuleResult.passed()


def check_no_dependents(label, dependent_count, dependent_label):
    if dependent_count > 0:
        return RuleResult.violation(
            f"Cannot delete {label}: {dependent_count} {dependent_label} still reference it.",
            dependent_count=dependent_count,
        )
    return RuleResult.passed()


LEAVE_TRANSITIONS = {
    'pending': {'approved', 'rejected'},
}


def check_leave_transition(current_status, new_status):
    allowed = LEAVE_TRANSITIONS.get(current_status, set())
    if new_status not in allowed:
        return RuleResult.violation(
            f"Cannot change leave status from '{current_status}' to '{new_status}'.",
            current_status=current_status,
            requested_status=new_status,
        )
    return RuleResult.passed()


def check_leave_cancellable(start_date, today):
    if start_date <= today:
        return RuleResult.violation(
            'Past or ongoing leave requests cannot be cancelled.',
            start_date=start_date.isoformat(),
        )
    return RuleResult.passed()


def check_date_range(start_date, end_date):
    if start_date > end_date:
        return RuleResult.violation(
            'Start date cannot be after end date.',
            start_date=start_date.isoformat(),
            end_date=end_date.isoformat(),
        )
    return RuleResult.passed()
