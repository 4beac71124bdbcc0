from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from searchgear.bookings.exceptions import InvalidDateRangeException
from searchgear.bookings.models import BookingRead, BookingStatus
from searchgear.bookings.utils import as_utc, compute_return_date, compute_total_price, validate_date_range


def test_return_date_defaults_to_departure_plus_days():
    assert compute_return_date(date(2030, 5, 30), 3) == date(2030, 6, 2)


def test_explicit_return_date_is_preserved():
    explicit = date(2030, 6, 10)
    assert compute_return_date(date(2030, 5, 30), 3, explicit) == explicit


def test_return_date_same_day_is_accepted():
    assert compute_return_date(date(2030, 5, 30), 1, date(2030, 5, 30)) == date(2030, 5, 30)


def test_return_date_before_departure_is_rejected():
    with pytest.raises(InvalidDateRangeException) as exc_info:
        compute_return_date(date(2030, 5, 30), 3, date(2030, 5, 29))
    assert exc_info.value.message == "Return date cannot be before departure date"


def test_naive_datetime_is_read_as_utc():
    assert as_utc(datetime(2030, 1, 15, 10, 30)) == datetime(2030, 1, 15, 10, 30, tzinfo=timezone.utc)


def test_aware_datetime_is_kept():
    manila = timezone(timedelta(hours=8))
    paid_at = datetime(2030, 1, 15, 10, 30, tzinfo=manila)
    assert as_utc(paid_at) is paid_at


def test_total_price():
    assert compute_total_price(Decimal("15000"), 3) == Decimal("45000")


@pytest.mark.parametrize("start, end", [(None, date(2030, 1, 1)), (date(2030, 1, 1), None), (None, None)])
def test_date_range_requires_both_bounds(start, end):
    with pytest.raises(InvalidDateRangeException) as exc_info:
        validate_date_range(start, end)
    assert exc_info.value.message == "Start and end dates are required"


def test_date_range_rejects_swapped_bounds():
    with pytest.raises(InvalidDateRangeException):
        validate_date_range(date(2030, 2, 1), date(2030, 1, 1))


def _booking_read(status: BookingStatus, departure_date: date) -> BookingRead:
    return BookingRead(
        id="0123456789abcdef0123456789abcdef",
        quote_request_id="q1",
        user_id="u1",
        pickup_location="Manila",
        dropoff_location="Baguio",
        departure_date=departure_date,
        number_of_days=3,
        bus_type="49-seater",
        number_of_passengers=45,
        price_per_day=15000,
        total_price=45000,
        status=status,
        payment_status="pending",
        booking_type="confirmed",
        created_at="2030-01-01T00:00:00",
        updated_at="2030-01-01T00:00:00",
    )


@pytest.mark.parametrize("status, active", [
    (BookingStatus.CONFIRMED, True),
    (BookingStatus.IN_PROGRESS, True),
    (BookingStatus.COMPLETED, False),
    (BookingStatus.CANCELLED, False),
])
def test_is_active(status, active):
    assert _booking_read(status, date.today()).is_active is active


def test_derived_fields():
    booking = _booking_read(BookingStatus.CONFIRMED, date.today() + timedelta(days=5))
    dumped = booking.model_dump(by_alias=True)

    assert dumped["bookingNumber"] == "BK-89ABCDEF"
    assert dumped["daysUntilDeparture"] == 5
    assert dumped["isActive"] is True
