# services/transport.py
import logging

from ..exceptions import Conflict, NotFound, ValidationError
from ..models import Bus, BusStop, Employee
from .base import Service, replace_child_set

logger = logging.getLogger(__name__)

BUS_FIELDS = ('name', 'route_from', 'departure_time', 'route_to', 'arrival_time', 'status')


class TransportService(Service):
    """Buses and their ordered stops; editing stops replaces the whole list."""

    def _driver(self, data):
        if data.get('driver_id'):
            return self.get_or_404(Employee, 'Driver not found.', pk=data['driver_id'])
        if data.get('driver_name'):
            driver = self.objects(Employee).filter(full_name__iexact=data['driver_name'].strip()).first()
            if driver is None:
                raise NotFound(f"Driver '{data['driver_name']}' not found.")
            return driver
        return None

    def _stop_rows(self, stops):
        rows = []
        for stop in stops:
            if not stop.get('name'):
                raise ValidationError('Every stop needs a name.')
            rows.append({'name': stop['name'], 'arrival_time': stop.get('arrival_time')})
        return rows

    def create_bus(self, data):
        missing = [f for f in ('name', 'number', 'route_from', 'route_to') if not data.get(f)]
        if missing:
            raise ValidationError(f"Missing required fields: {', '.join(missing)}", details={'missing': missing})

        with self.atomic():
            if self.objects(Bus).filter(number=data['number']).exists():
                raise Conflict(f"A bus with number {data['number']} already exists.")
            bus = Bus(number=data['number'], driver=self._driver(data),
                      **{f: data[f] for f in BUS_FIELDS if data.get(f) is not None})
            self.save_unique(bus, f"A bus with number {data['number']} already exists.")
            replace_child_set(bus, BusStop, 'bus', self._stop_rows(data.get('stops') or []),
                              using=self.using, order_field='stop_order')

        logger.info(f"Bus {bus.number} created")
        return bus

    def update_bus(self, bus_id, data):
        with self.atomic():
            bus = self.get_or_404(Bus, 'Bus not found.', pk=bus_id)
            number = data.get('number')
            if number and number != bus.number:
                if self.objects(Bus).filter(number=number).exclude(pk=bus.pk).exists():
                    raise Conflict(f"A bus with number {number} already exists.")
                bus.number = number
            for field in BUS_FIELDS:
                if field in data:
                    setattr(bus, field, data[field])
            if 'driver_id' in data or 'driver_name' in data:
                bus.driver = self._driver(data)
            self.save_unique(bus, f"A bus with number {bus.number} already exists.")

            if data.get('stops') is not None:
                replace_child_set(bus, BusStop, 'bus', self._stop_rows(data['stops']),
                                  using=self.using, order_field='stop_order')

        logger.info(f"Bus {bus.number} updated")
        return bus

    def delete_bus(self, bus_id):
        deleted, _ = self.objects(Bus).filter(pk=bus_id).delete()
        if not deleted:
            raise NotFound('Bus not found.')
        logger.info(f"Bus {bus_id} deleted")

    def list_routes(self):
        """Active buses with their route as 'from -> stops -> to'."""
        routes = []
        for bus in self.objects(Bus).filter(status='ACTIVE').select_related('driver').prefetch_related('stops'):
            parts = [bus.route_from] + [stop.name for stop in bus.stops.all()] + [bus.route_to]
            routes.append({
                'id': str(bus.pk),
                'bus_number': bus.number,
                'driver_name': bus.driver.full_name if bus.driver else 'Not Assigned',
                'route': ' -> '.join(p for p in parts if p),
            })
        return routes
