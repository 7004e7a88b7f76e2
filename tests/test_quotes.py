import pytest

from cleanbook.domain.quotes.schemas import QuoteCreate, QuoteUpdate
from cleanbook.domain.quotes.service import QuoteService
from cleanbook.exceptions import InvalidRequestError, NotFoundError


def _quote_request(service, **overrides):
    data = {
        "service_id": service.id,
        "square_meters": 100,
        "address": "8 Ocean Dr, Miami Beach, FL 33139",
        "contact_email": "Lead@Example.com",
        "contact_name": " Lena Lead ",
        "contact_phone": "(305) 555-0147",
        "preferred_date": "2030-07-01",
    }
    data.update(overrides)
    return QuoteCreate(**data)


def test_quote_is_priced_like_a_booking(db_session, services):
    quote = QuoteService(db_session).create_quote(_quote_request(services["Basic House Cleaning"]))

    assert quote.estimated_price == 200.0
    assert quote.status == "pending"
    assert quote.contact_name == "Lena Lead"
    assert quote.service_name == "Basic House Cleaning"


def test_long_requirements_add_the_surcharge(db_session, services):
    quote = QuoteService(db_session).create_quote(
        _quote_request(services["Basic House Cleaning"], special_requirements="x" * 150)
    )

    assert quote.estimated_price == 240.0


def test_quote_for_unknown_service(db_session):
    class Missing:
        id = 404

    with pytest.raises(NotFoundError):
        QuoteService(db_session).create_quote(_quote_request(Missing))


def test_quote_rejects_bad_area(services):
    with pytest.raises(ValueError):
        _quote_request(services["Basic House Cleaning"], square_meters=0)


def test_instant_estimate_has_no_surcharge(db_session, services):
    quotes = QuoteService(db_session)

    assert quotes.get_instant_estimate(services["Office Cleaning"].id, 25) == 150.0
    assert quotes.get_instant_estimate(services["Office Cleaning"].id, 75) == 225.0
    with pytest.raises(InvalidRequestError):
        quotes.get_instant_estimate(services["Office Cleaning"].id, 0)


def test_staff_update_and_status_filter(db_session, services):
    quotes = QuoteService(db_session)
    first = quotes.create_quote(_quote_request(services["Basic House Cleaning"]))
    quotes.create_quote(_quote_request(services["Deep House Cleaning"]))

    updated = quotes.update_quote(first.id, QuoteUpdate(status="sent", estimated_price=185.0))

    assert (updated.status, updated.estimated_price) == ("sent", 185.0)
    assert [q.id for q in quotes.get_quotes(status="sent")] == [first.id]
    assert len(quotes.get_quotes()) == 2


def test_update_rejects_unknown_status():
    with pytest.raises(ValueError):
        QuoteUpdate(status="maybe")


def test_update_missing_quote(db_session):
    with pytest.raises(NotFoundError):
        QuoteService(db_session).update_quote(99, QuoteUpdate(admin_notes="called"))


def test_surcharge_ignores_html_escaping(db_session, services):
    requirements = "A&B " * 24  # 96 characters as typed, longer once escaped

    quote = QuoteService(db_session).create_quote(
        _quote_request(services["Basic House Cleaning"], special_requirements=requirements)
    )

    assert len(quote.special_requirements) > 100
    assert quote.estimated_price == 200.0


def test_escaped_text_over_the_threshold_is_surcharged(db_session, services):
    requirements = "<b>" + "x" * 98  # 101 characters

    quote = QuoteService(db_session).create_quote(
        _quote_request(services["Basic House Cleaning"], special_requirements=requirements)
    )

    assert quote.estimated_price == 240.0
