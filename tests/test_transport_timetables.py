import uuid
from datetime import time

import pytest

from campus.exceptions import Conflict, NotFound, ValidationError
from campus.models import Bus, BusStop, Timetable, TimetableSlot
from campus.services import TimetableService, TransportService

pytestmark = pytest.mark.django_db


# ==================== TRANSPORT ====================
def bus_payload(**overrides):
    data = {
        'name': 'Morning Route',
        'number': 'GJ-01-1234',
        'route_from': 'Depot',
        'route_to': 'School',
        'departure_time': time(7, 0),
        'stops': [
            {'name': 'Market', 'arrival_time': time(7, 10)},
            {'name': 'Temple', 'arrival_time': time(7, 20)},
        ],
    }
    data.update(overrides)
    return data


def stop_names(bus):
    return list(BusStop.objects.filter(bus=bus).order_by('stop_order').values_list('stop_order', 'name'))


def test_create_bus_numbers_stops_in_order():
    bus = TransportService().create_bus(bus_payload())
    assert stop_names(bus) == [(1, 'Market'), (2, 'Temple')]


def test_update_bus_replaces_every_stop():
    bus = TransportService().create_bus(bus_payload())

    TransportService().update_bus(bus.pk, {'stops': [{'name': 'Lake'}, {'name': 'Market'}, {'name': 'Mill'}]})

    assert stop_names(bus) == [(1, 'Lake'), (2, 'Market'), (3, 'Mill')]
    assert BusStop.objects.count() == 3


def test_update_bus_without_stops_keeps_them(teacher):
    bus = TransportService().create_bus(bus_payload())
    TransportService().update_bus(bus.pk, {'name': 'Evening Route', 'driver_name': 'asha mehta'})

    bus.refresh_from_db()
    assert bus.name == 'Evening Route'
    assert bus.driver == teacher
    assert stop_names(bus) == [(1, 'Market'), (2, 'Temple')]


def test_update_bus_with_empty_stops_clears_them():
    bus = TransportService().create_bus(bus_payload())
    TransportService().update_bus(bus.pk, {'stops': []})
    assert stop_names(bus) == []


def test_bus_numbers_are_unique():
    TransportService().create_bus(bus_payload())
    other = TransportService().create_bus(bus_payload(number='GJ-01-9999', stops=[]))
    with pytest.raises(Conflict):
        TransportService().create_bus(bus_payload())
    with pytest.raises(Conflict):
        TransportService().update_bus(other.pk, {'number': 'GJ-01-1234'})
    assert Bus.objects.count() == 2


def test_bus_validation_and_lookups():
    with pytest.raises(ValidationError):
        TransportService().create_bus(bus_payload(route_to=''))
    with pytest.raises(ValidationError):
        TransportService().create_bus(bus_payload(stops=[{'arrival_time': time(7, 0)}]))
    with pytest.raises(NotFound):
        TransportService().create_bus(bus_payload(driver_name='Nobody'))
    with pytest.raises(NotFound):
        TransportService().delete_bus(uuid.uuid4())
    assert Bus.objects.count() == 0


def test_list_routes(teacher):
    TransportService().create_bus(bus_payload(driver_id=teacher.pk))
    TransportService().create_bus(bus_payload(number='GJ-01-0002', stops=[], route_to='Hostel'))
    TransportService().create_bus(bus_payload(number='GJ-01-0003', status='INACTIVE'))

    routes = {r['bus_number']: r for r in TransportService().list_routes()}

    assert set(routes) == {'GJ-01-1234', 'GJ-01-0002'}
    assert routes['GJ-01-1234']['route'] == 'Depot -> Market -> Temple -> School'
    assert routes['GJ-01-1234']['driver_name'] == 'Asha Mehta'
    assert routes['GJ-01-0002']['route'] == 'Depot -> Hostel'
    assert routes['GJ-01-0002']['driver_name'] == 'Not Assigned'


# ==================== TIMETABLES ====================
@pytest.fixture
def weekly_slots(make_subject, teacher):
    maths = make_subject(name='Maths')
    return [
        {'day_of_week': 'MONDAY', 'start_time': time(9, 0), 'end_time': time(9, 45),
         'subject_id': maths.pk, 'teacher_id': teacher.pk, 'room_number': '101'},
        {'day_of_week': 'MONDAY', 'start_time': time(9, 45), 'end_time': time(10, 0), 'is_break': True},
    ]


def test_create_timetable(make_class, academic_year, admin_user, weekly_slots):
    school_class = make_class()
    timetable = TimetableService().create_timetable(school_class.pk, academic_year.pk, weekly_slots, admin_user)

    assert timetable.status == 'DRAFT'
    slots = list(TimetableSlot.objects.filter(timetable=timetable).order_by('start_time'))
    assert [s.is_break for s in slots] == [False, True]
    assert slots[0].room_number == '101'


def test_one_timetable_per_class_and_year(make_class, academic_year, admin_user, weekly_slots):
    school_class = make_class()
    TimetableService().create_timetable(school_class.pk, academic_year.pk, weekly_slots, admin_user)
    with pytest.raises(Conflict):
        TimetableService().create_timetable(school_class.pk, academic_year.pk, weekly_slots, admin_user)


def test_update_timetable_replaces_slots(make_class, academic_year, admin_user, teacher_user, weekly_slots):
    timetable = TimetableService().create_timetable(make_class().pk, academic_year.pk, weekly_slots, admin_user)
    replacement = [{'day_of_week': 'TUESDAY', 'start_time': time(11, 0), 'end_time': time(11, 45)}]

    TimetableService().update_timetable(timetable.pk, {'status': 'ACTIVE', 'slots': replacement}, teacher_user)

    timetable.refresh_from_db()
    assert timetable.status == 'ACTIVE'
    assert timetable.updated_by == teacher_user
    assert list(TimetableSlot.objects.filter(timetable=timetable).values_list('day_of_week', flat=True)) == ['TUESDAY']


@pytest.mark.parametrize('slot', [
    {'day_of_week': 'FUNDAY', 'start_time': time(9, 0), 'end_time': time(9, 45)},
    {'day_of_week': 'MONDAY', 'start_time': time(10, 0), 'end_time': time(9, 0)},
    {'day_of_week': 'MONDAY', 'start_time': time(9, 0)},
])
def test_invalid_slots_are_rejected(make_class, academic_year, admin_user, slot):
    with pytest.raises(ValidationError):
        TimetableService().create_timetable(make_class().pk, academic_year.pk, [slot], admin_user)
    assert Timetable.objects.count() == 0


def test_slot_references_must_exist(make_class, academic_year, admin_user):
    slot = {'day_of_week': 'MONDAY', 'start_time': time(9, 0), 'end_time': time(9, 45), 'subject_id': uuid.uuid4()}
    with pytest.raises(NotFound):
        TimetableService().create_timetable(make_class().pk, academic_year.pk, [slot], admin_user)


def test_list_and_delete_timetables(make_class, academic_year, admin_user, weekly_slots):
    first = TimetableService().create_timetable(make_class(section='A').pk, academic_year.pk, weekly_slots, admin_user)
    TimetableService().create_timetable(
        make_class(section='B').pk, academic_year.pk, weekly_slots, admin_user, status='ACTIVE',
    )

    assert TimetableService().list_timetables(section='a').get().pk == first.pk
    assert TimetableService().list_timetables(status='ACTIVE', academic_year='2025-26').count() == 1

    TimetableService().delete_timetable(first.pk)
    assert not TimetableSlot.objects.filter(timetable_id=first.pk).exists()
    with pytest.raises(NotFound):
        TimetableService().delete_timetable(first.pk)
