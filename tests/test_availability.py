from datetime import date, datetime, time

import pytest
from conftest import SERVICE_DAY

from cleanbook.domain.scheduling.availability_service import (
    AvailabilityService,
    BusyInterval,
    compute_available_slots,
    slot_starts,
)
from cleanbook.exceptions import ConflictError, InvalidRequestError, NotFoundError


def _availability(slots):
    return {s.time: s.available for s in slots}


def test_business_day_has_nine_hourly_slots():
    starts = slot_starts(date(2025, 6, 1))
    assert [s.strftime("%H:%M") for s in starts] == [
        "09:00", "10:00", "11:00", "12:00", "13:00", "14:00", "15:00", "16:00", "17:00",
    ]


def test_two_hour_booking_blocks_two_slots():
    day = date(2025, 6, 1)
    busy = [BusyInterval(1, datetime(2025, 6, 1, 10), datetime(2025, 6, 1, 12), "confirmed")]

    slots = _availability(compute_available_slots(day, busy))

    assert slots["10:00"] is False
    assert slots["11:00"] is False
    assert slots["09:00"] is True
    assert slots["12:00"] is True
    assert sum(slots.values()) == 7


def test_slots_from_stored_bookings(db_session, services, make_booking):
    make_booking(services["Basic House Cleaning"], scheduled_time=time(10, 0))

    slots = AvailabilityService(db_session).get_available_slots(SERVICE_DAY)

    assert len(slots) == 9
    assert all(s.duration_minutes == 60 for s in slots)
    assert _availability(slots)["11:00"] is False
    assert _availability(slots)["12:00"] is True


def test_duration_follows_service(db_session, services, make_booking):
    make_booking(services["Deep House Cleaning"], scheduled_time=time(13, 0))

    slots = _availability(AvailabilityService(db_session).get_available_slots(SERVICE_DAY))

    assert [t for t, free in slots.items() if not free] == ["13:00", "14:00", "15:00", "16:00"]
    assert slots["17:00"] is True


def test_cancelled_bookings_do_not_hold_slots(db_session, services, make_booking):
    make_booking(services["Basic House Cleaning"], status="cancelled")

    slots = AvailabilityService(db_session).get_available_slots(SERVICE_DAY)

    assert all(s.available for s in slots)


def test_service_filter_is_validated_and_echoed(db_session, services):
    availability = AvailabilityService(db_session)

    slots = availability.get_available_slots(SERVICE_DAY, services["Office Cleaning"].id)
    assert {s.service_type for s in slots} == {"commercial"}

    with pytest.raises(NotFoundError):
        availability.get_available_slots(SERVICE_DAY, 9999)


def test_overlapping_window_is_a_conflict(db_session, services, make_booking):
    make_booking(services["Basic House Cleaning"], scheduled_time=time(10, 0))
    availability = AvailabilityService(db_session)

    with pytest.raises(ConflictError):
        availability.ensure_window_free(SERVICE_DAY, time(11, 0), "Basic House Cleaning")

    # Starts exactly when the existing booking ends
    availability.ensure_window_free(SERVICE_DAY, time(12, 0), "Basic House Cleaning")


def test_booking_does_not_conflict_with_itself(db_session, services, make_booking):
    booking = make_booking(services["Basic House Cleaning"], scheduled_time=time(10, 0))

    AvailabilityService(db_session).ensure_window_free(
        SERVICE_DAY, time(11, 0), "Basic House Cleaning", exclude_booking_id=booking.id
    )


@pytest.mark.parametrize("start", [time(8, 0), time(18, 0), time(20, 30)])
def test_start_outside_business_hours_is_rejected(db_session, start):
    with pytest.raises(InvalidRequestError):
        AvailabilityService(db_session).ensure_window_free(SERVICE_DAY, start, "Basic House Cleaning")
