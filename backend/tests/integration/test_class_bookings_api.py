"""Private class booking endpoints: the end time is derived from the class."""

from datetime import date, timedelta
from typing import Any, Dict

import pytest

CLASS_BOOKINGS = "/api/v1/class-bookings"


def _payload(class_id: str, booking_date, start: str = "10:00") -> Dict[str, Any]:
    return {"class_id": class_id, "booking_date": booking_date.isoformat(), "start_time": start}


@pytest.mark.integration
class TestCreateClassBooking:
    def test_end_time_is_derived(self, client, auth_headers, test_class, booking_date) -> None:
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "10:30"), headers=auth_headers
        )

        assert response.status_code == 201, response.text
        data = response.json()
        assert data["class_id"] == test_class.id
        assert data["start_time"] == "10:30:00"
        assert data["end_time"] == "11:30:00"
        assert data["total_price"] == 50.0
        assert data["status"] == "pending"
        assert data["payment_status"] == "pending"

    def test_end_time_is_not_accepted(self, client, auth_headers, test_class, booking_date) -> None:
        response = client.post(
            CLASS_BOOKINGS,
            json={**_payload(test_class.id, booking_date), "end_time": "12:00"},
            headers=auth_headers,
        )
        assert response.status_code == 400

    def test_overlapping_lesson_is_409(
        self, client, auth_headers, other_auth_headers, test_class, booking_date
    ) -> None:
        first = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "10:00"), headers=auth_headers
        )
        assert first.status_code == 201

        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "09:30"), headers=other_auth_headers
        )
        assert response.status_code == 409
        assert response.json()["code"] == "BOOKING_CONFLICT"

    def test_back_to_back_lessons(
        self, client, auth_headers, other_auth_headers, test_class, booking_date
    ) -> None:
        client.post(CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "10:00"), headers=auth_headers)
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "11:00"), headers=other_auth_headers
        )
        assert response.status_code == 201

    def test_start_before_opening_is_400(self, client, auth_headers, test_class, booking_date) -> None:
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "08:00"), headers=auth_headers
        )
        assert response.status_code == 400
        assert response.json()["errors"]["field"] == "start_time"

    def test_malformed_start_is_400(self, client, auth_headers, test_class, booking_date) -> None:
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "10am"), headers=auth_headers
        )
        assert response.status_code == 400

    def test_past_date_is_400(self, client, auth_headers, test_class) -> None:
        response = client.post(
            CLASS_BOOKINGS,
            json=_payload(test_class.id, date.today() - timedelta(days=1)),
            headers=auth_headers,
        )
        assert response.status_code == 400
        assert response.json()["errors"]["field"] == "booking_date"

    def test_lesson_may_run_past_closing(
        self, client, auth_headers, test_class, booking_date
    ) -> None:
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date, "21:30"), headers=auth_headers
        )
        assert response.status_code == 201
        assert response.json()["end_time"] == "22:30:00"

    def test_unknown_class_is_404(self, client, auth_headers, booking_date) -> None:
        response = client.post(
            CLASS_BOOKINGS, json=_payload("01HZZZZZZZZZZZZZZZZZZZZZZZ", booking_date), headers=auth_headers
        )
        assert response.status_code == 404
        assert response.json()["code"] == "CLASS_NOT_FOUND"

    def test_requires_authentication(self, client, test_class, booking_date) -> None:
        response = client.post(CLASS_BOOKINGS, json=_payload(test_class.id, booking_date))
        assert response.status_code == 401


@pytest.mark.integration
class TestClassBookingLifecycle:
    @pytest.fixture
    def lesson(self, client, auth_headers, test_class, booking_date) -> Dict[str, Any]:
        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date), headers=auth_headers
        )
        assert response.status_code == 201
        return response.json()

    def test_payment_confirms(self, client, auth_headers, lesson) -> None:
        response = client.post(
            f"{CLASS_BOOKINGS}/{lesson['id']}/payment",
            json={"receipt_ref": "receipts/lesson.pdf", "terms_accepted": True},
            headers=auth_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"
        assert response.json()["payment_status"] == "paid"

    def test_cancel_frees_the_slot(
        self, client, auth_headers, other_auth_headers, test_class, booking_date, lesson
    ) -> None:
        cancelled = client.post(f"{CLASS_BOOKINGS}/{lesson['id']}/cancel", headers=auth_headers)
        assert cancelled.status_code == 200

        response = client.post(
            CLASS_BOOKINGS, json=_payload(test_class.id, booking_date), headers=other_auth_headers
        )
        assert response.status_code == 201

    def test_other_users_get_404(self, client, other_auth_headers, lesson) -> None:
        response = client.get(f"{CLASS_BOOKINGS}/{lesson['id']}", headers=other_auth_headers)
        assert response.status_code == 404

    def test_list_own_class_bookings(self, client, auth_headers, other_auth_headers, lesson) -> None:
        mine = client.get(CLASS_BOOKINGS, headers=auth_headers)
        theirs = client.get(CLASS_BOOKINGS, headers=other_auth_headers)
        assert [b["id"] for b in mine.json()] == [lesson["id"]]
        assert theirs.json() == []

    def test_room_and_class_bookings_are_separate(self, client, auth_headers, lesson) -> None:
        response = client.get(f"/api/v1/bookings/{lesson['id']}", headers=auth_headers)
        assert response.status_code == 404
