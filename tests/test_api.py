from conftest import SERVICE_DAY, auth_headers

from cleanbook.models import Booking


def test_health(client):
    assert client.get("/health").json() == {"status": "healthy"}


def test_available_slots_endpoint(client, services, make_booking):
    basic = services["Basic House Cleaning"]
    make_booking(basic)

    response = client.get(
        "/calendar/available-slots",
        params={"date": SERVICE_DAY.isoformat(), "service_id": basic.id},
    )

    assert response.status_code == 200
    body = response.json()
    assert body["date"] == SERVICE_DAY.isoformat()
    slots = {s["time"]: s for s in body["available_slots"]}
    assert [t for t, s in slots.items() if not s["available"]] == ["10:00", "11:00"]
    assert slots["09:00"]["duration_minutes"] == 60
    assert slots["09:00"]["service_type"] == "residential"


def test_bad_slot_date_is_a_validation_error(client):
    response = client.get("/calendar/available-slots", params={"date": "03/06/2030"})

    assert response.status_code == 400
    assert response.json()["error"] == "validation"


def test_request_validation_errors_use_the_error_envelope(client, services, customer):
    response = client.post(
        "/bookings",
        json={
            "service_id": services["Basic House Cleaning"].id,
            "scheduled_date": SERVICE_DAY.isoformat(),
            "scheduled_time": "10:00",
            "address": "12 Palm Way, Miami, FL 33101",
            "square_meters": -4,
        },
        headers=auth_headers(customer),
    )

    assert response.status_code == 400
    body = response.json()
    assert body["error"] == "validation"
    assert body["detail"][0]["loc"][-1] == "square_meters"


def test_booking_requires_authentication(client, services):
    response = client.get("/bookings")

    assert response.status_code == 401
    assert response.json()["error"] == "unauthorized"


def test_bad_token_is_unauthorized(client):
    response = client.get("/bookings", headers={"Authorization": "Bearer not-a-jwt"})

    assert response.status_code == 401
    assert response.json() == {"error": "unauthorized", "detail": "Invalid or expired token"}


def test_unknown_route_uses_the_error_envelope(client):
    response = client.get("/no-such-endpoint")

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_customer_books_and_cannot_double_book(client, services, customer):
    payload = {
        "service_id": services["Deep House Cleaning"].id,
        "scheduled_date": SERVICE_DAY.isoformat(),
        "scheduled_time": "14:00:00",
        "address": "12 Palm Way, Miami, FL 33101",
        "square_meters": 100,
    }

    created = client.post("/bookings", json=payload, headers=auth_headers(customer))
    assert created.status_code == 201
    body = created.json()
    assert body["total_price"] == 360.0
    assert body["scheduled_time"] == "14:00"
    assert body["status"] == "pending"

    clash = client.post(
        "/bookings", json={**payload, "scheduled_time": "15:00"}, headers=auth_headers(customer)
    )
    assert clash.status_code == 409
    assert clash.json()["error"] == "conflict"


def test_customer_cannot_confirm(client, services, customer, make_booking):
    booking = make_booking(services["Basic House Cleaning"], user=customer)

    response = client.put(
        f"/bookings/{booking.id}", json={"status": "confirmed"}, headers=auth_headers(customer)
    )

    assert response.status_code == 403
    assert response.json()["error"] == "forbidden"


def test_customer_cancels_own_booking(client, services, customer, make_booking):
    booking = make_booking(services["Basic House Cleaning"], user=customer)

    response = client.post(f"/bookings/{booking.id}/cancel", headers=auth_headers(customer))

    assert response.status_code == 200
    assert response.json()["status"] == "cancelled"


def test_other_customers_bookings_are_hidden(client, services, customer, other_customer, make_booking):
    booking = make_booking(services["Basic House Cleaning"], user=customer)

    response = client.get(f"/bookings/{booking.id}", headers=auth_headers(other_customer))

    assert response.status_code == 404
    assert response.json()["error"] == "not_found"


def test_guest_booking_and_lookup(client, services):
    response = client.post(
        "/guest/bookings",
        json={
            "service_id": services["Basic House Cleaning"].id,
            "scheduled_date": SERVICE_DAY.isoformat(),
            "scheduled_time": "09:00",
            "address": "3 Coral St, Key West, FL 33040",
            "square_meters": 40,
            "guest_name": "Gus Guest",
            "guest_email": "gus@example.com",
            "guest_phone": "305-555-0199",
            "billing_address": "3 Coral St",
            "billing_city": "Key West",
            "billing_state": "FL",
            "billing_zip_code": "33040",
        },
    )
    assert response.status_code == 201
    booking_id = response.json()["id"]

    found = client.get(f"/guest/bookings/{booking_id}", params={"email": "GUS@example.com"})
    assert found.status_code == 200
    assert client.get(f"/guest/bookings/{booking_id}", params={"email": "x@example.com"}).status_code == 404


def test_admin_endpoints_reject_customers(client, customer):
    response = client.get("/admin/bookings", headers=auth_headers(customer))

    assert response.status_code == 403
    assert response.json() == {"error": "forbidden", "detail": "Admin access required"}


def test_invoice_issuance_is_idempotent_per_booking(client, services, admin_user, make_booking):
    booking = make_booking(services["Basic House Cleaning"])

    first = client.post(f"/admin/invoices/booking/{booking.id}", headers=auth_headers(admin_user))
    assert first.status_code == 201
    invoice = first.json()
    assert invoice["invoice_number"].startswith("PP-")
    assert invoice["total_amount"] == 107.0
    assert invoice["tax_amount"] == 7.0
    assert len(invoice["items"]) == 1

    second = client.post(f"/admin/invoices/booking/{booking.id}", headers=auth_headers(admin_user))
    assert second.status_code == 409
    assert second.json()["error"] == "conflict"


def test_invoice_payment_flow(client, services, admin_user, make_booking):
    booking = make_booking(services["Basic House Cleaning"])
    headers = auth_headers(admin_user)
    invoice_id = client.post(f"/admin/invoices/booking/{booking.id}", headers=headers).json()["id"]

    paid = client.post(
        f"/admin/invoices/{invoice_id}/mark-paid", json={"payment_method": "cash"}, headers=headers
    )
    assert paid.status_code == 200
    assert paid.json()["status"] == "paid"

    listing = client.get("/admin/invoices", params={"status": "paid"}, headers=headers).json()
    assert listing["total"] == 1
    assert listing["invoices"][0]["id"] == invoice_id

    assert client.delete(f"/admin/invoices/{invoice_id}", headers=headers).status_code == 200
    assert client.get(f"/admin/invoices/{invoice_id}", headers=headers).status_code == 404


def test_staff_reschedule(client, services, admin_user, make_booking):
    booking = make_booking(services["Basic House Cleaning"])

    response = client.put(
        f"/admin/calendar/bookings/{booking.id}/reschedule",
        json={"new_date": SERVICE_DAY.isoformat(), "new_time": "15:00", "reason": "Customer request"},
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 200
    assert response.json()["scheduled_time"] == "15:00"


def test_report_endpoint(client, services, admin_user, make_booking):
    make_booking(services["Basic House Cleaning"], status="completed")

    response = client.get(
        "/admin/reports",
        params={"start_date": SERVICE_DAY.isoformat(), "end_date": SERVICE_DAY.isoformat()},
        headers=auth_headers(admin_user),
    )

    assert response.status_code == 200
    analytics = response.json()["analytics"]
    assert analytics["total_bookings"] == 1
    assert analytics["total_revenue"] == 107.0
    assert analytics["collection_rate"] == 0


def test_stats_reject_unknown_period(client, admin_user):
    response = client.get("/admin/stats", params={"period": "hourly"}, headers=auth_headers(admin_user))

    assert response.status_code == 400


def test_referenced_service_cannot_be_deleted(client, db_session, services, admin_user, make_booking):
    office = services["Office Cleaning"]
    make_booking(office)
    headers = auth_headers(admin_user)

    response = client.delete(f"/admin/services/{office.id}", headers=headers)
    assert response.status_code == 409
    assert db_session.query(Booking).filter(Booking.service_id == office.id).count() == 1

    unused = services["Deep House Cleaning"]
    assert client.delete(f"/admin/services/{unused.id}", headers=headers).status_code == 200


def test_quote_estimate_endpoint(client, services):
    response = client.get(
        "/quotes/estimate",
        params={"service_id": services["Office Cleaning"].id, "square_meters": 100},
    )

    assert response.status_code == 200
    assert response.json()["estimate"] == 300.0
