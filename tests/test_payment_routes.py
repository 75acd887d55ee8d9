from conftest import auth_headers, booking_payload


def booking_and_payment(client, guest, hotel, room):
    booking = client.post(
        "/bookings", json=booking_payload(hotel, [(room, 2)]), headers=auth_headers(guest)
    ).json()["data"]
    response = client.post(
        "/payments",
        json={
            "booking_id": booking["id"],
            "payment_method": "Credit Card",
            "card_details": {"last4": "4242", "brand": "Visa"},
        },
        headers=auth_headers(guest),
    )
    assert response.status_code == 201, response.text
    return booking, response.json()["data"]


def deliver(client, transaction_id, outcome, **response):
    return client.post(
        "/payments/webhook/callback",
        json={
            "transaction_id": transaction_id,
            "status": outcome,
            "gateway_transaction_id": "pay_987",
            "response": response,
        },
    )


def test_initiate_returns_gateway_request(client, guest, hotel, room):
    booking, data = booking_and_payment(client, guest, hotel, room)

    payment = data["payment"]
    assert payment["status"] == "Initiated"
    assert payment["amount"] == 7080.0
    assert payment["card_last4"] == "4242"
    assert payment["refund"]["refund_status"] == "Not Initiated"
    assert data["gateway_request"] == {
        "amount": 7080.0,
        "currency": "INR",
        "description": f"Booking payment {booking['booking_id']}",
        "receipt": payment["transaction_id"],
    }


def test_callback_is_idempotent(client, guest, hotel, room):
    booking, data = booking_and_payment(client, guest, hotel, room)
    txn = data["payment"]["transaction_id"]

    first = deliver(client, txn, "Success", status="captured")
    second = deliver(client, txn, "Success", status="captured")

    assert first.status_code == second.status_code == 200
    assert first.json()["data"] == second.json()["data"]
    booking_now = client.get(f"/bookings/{booking['id']}", headers=auth_headers(guest)).json()["data"]
    assert booking_now["status"] == "Confirmed"
    assert booking_now["payment_status"] == "Paid"

    assert deliver(client, txn, "Failed").status_code == 400


def test_callback_validation(client):
    assert deliver(client, "TXN-missing", "Success").status_code == 404
    assert deliver(client, "TXN-missing", "Maybe").status_code == 400


def test_second_payment_conflicts(client, guest, hotel, room):
    booking, _ = booking_and_payment(client, guest, hotel, room)
    response = client.post(
        "/payments",
        json={"booking_id": booking["id"], "payment_method": "UPI"},
        headers=auth_headers(guest),
    )
    assert response.status_code == 409


def test_retry_flow_over_http(client, guest, hotel, room):
    _, data = booking_and_payment(client, guest, hotel, room)
    payment_id = data["payment"]["id"]
    txn = data["payment"]["transaction_id"]

    for _ in range(3):
        deliver(client, txn, "Failed", error="Insufficient funds")
        response = client.post(f"/payments/{payment_id}/retry", headers=auth_headers(guest))
        assert response.status_code == 200
        assert response.json()["data"]["status"] == "Processing"

    deliver(client, txn, "Failed")
    response = client.post(f"/payments/{payment_id}/retry", headers=auth_headers(guest))
    assert response.status_code == 400
    assert response.json()["message"] == "Maximum retry attempts (3) exceeded"


def test_refund_flow_over_http(client, guest, admin, hotel, room):
    booking, data = booking_and_payment(client, guest, hotel, room)
    payment_id = data["payment"]["id"]
    deliver(client, data["payment"]["transaction_id"], "Success")

    response = client.post(
        f"/payments/{payment_id}/refund-request",
        json={"reason": "Cannot travel", "amount": 3000},
        headers=auth_headers(guest),
    )
    assert response.status_code == 200
    assert response.json()["data"]["refund"]["refund_status"] == "Pending"

    assert client.post(f"/payments/{payment_id}/refund", json={}, headers=auth_headers(guest)).status_code == 403

    response = client.post(f"/payments/{payment_id}/refund", json={}, headers=auth_headers(admin))
    assert response.status_code == 200
    payment = response.json()["data"]
    assert payment["status"] == "Partial"
    assert payment["refund"]["refund_amount"] == 3000.0

    booking_now = client.get(f"/bookings/{booking['id']}", headers=auth_headers(guest)).json()["data"]
    assert booking_now["payment_status"] == "Partial"


def test_cancel_after_admin_refund_says_refund_already_processed(client, guest, admin, hotel, room):
    booking, data = booking_and_payment(client, guest, hotel, room)
    payment_id = data["payment"]["id"]
    deliver(client, data["payment"]["transaction_id"], "Success")
    response = client.post(
        f"/payments/{payment_id}/refund", json={"reason": "goodwill"}, headers=auth_headers(admin)
    )
    assert response.json()["data"]["status"] == "Refunded"

    response = client.post(f"/bookings/{booking['id']}/cancel", headers=auth_headers(guest))

    assert response.status_code == 200
    cancelled = response.json()["data"]
    assert cancelled["refund_amount"] == 0
    assert cancelled["message"] == "Booking cancelled. Refund already processed"
    assert cancelled["booking"]["payment_status"] == "Refunded"


def test_payment_reads(client, guest, other_guest, admin, hotel, room):
    _, data = booking_and_payment(client, guest, hotel, room)
    payment = data["payment"]
    deliver(client, payment["transaction_id"], "Success")

    assert client.get(f"/payments/{payment['id']}", headers=auth_headers(guest)).status_code == 200
    assert client.get(f"/payments/{payment['id']}", headers=auth_headers(other_guest)).status_code == 403

    verify = client.get(f"/payments/verify/{payment['transaction_id']}", headers=auth_headers(guest))
    assert verify.json()["data"]["status"] == "Success"

    mine = client.get("/payments/me", headers=auth_headers(guest)).json()
    assert mine["pagination"]["total"] == 1

    invoice = client.get(f"/payments/{payment['id']}/invoice", headers=auth_headers(guest)).json()["data"]
    assert invoice["invoice_number"] == f"INV-{payment['transaction_id']}"

    stats = client.get("/payments/stats", headers=auth_headers(admin)).json()["data"]
    assert stats["total_amount"] == 7080.0
