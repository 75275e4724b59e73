from datetime import date, timedelta

def book(client, clinic, start, duration_minutes=30):
    return client.post(
        "/api/v1/appointments",
        json={
            "patient_id": clinic["patient"]["id"],
            "provider_id": clinic["provider"]["id"],
            "scheduled_at": start,
            "duration_minutes": duration_minutes,
            "appointment_type": "consultation",
            "reason": "Annual checkup"
        }
    )

def slot_starts(client, clinic, day):
    response = client.get(
        f"/api/v1/providers/{clinic['provider']['id']}/availability",
        params={"date": day.isoformat(), "slot_minutes": 30}
    )
    return [slot["start"] for slot in response.json()["slots"]]

class TestBooking:

    def test_book_appointment(self, client, clinic, next_monday):
        """Test booking a free slot."""
        start = f"{next_monday.isoformat()}T10:00:00"

        response = book(client, clinic, start)
        assert response.status_code == 201

        data = response.json()
        assert data["scheduled_at"] == start
        assert data["status"] == "scheduled"
        assert data["duration_minutes"] == 30

    def test_booked_slot_leaves_availability(self, client, clinic, next_monday):
        book(client, clinic, f"{next_monday.isoformat()}T10:00:00")

        starts = slot_starts(client, clinic, next_monday)
        day = next_monday.isoformat()
        assert len(starts) == 15
        assert f"{day}T10:00:00" not in starts
        assert starts[:3] == [f"{day}T09:00:00", f"{day}T09:30:00", f"{day}T10:30:00"]
        assert starts[-1] == f"{day}T16:30:00"

    def test_overlapping_booking_is_rejected(self, client, clinic, next_monday):
        book(client, clinic, f"{next_monday.isoformat()}T10:00:00")

        response = book(client, clinic, f"{next_monday.isoformat()}T10:15:00")
        assert response.status_code == 409
        assert "not available" in response.json()["detail"]

    def test_booking_past_window_end_is_rejected(self, client, clinic, next_monday):
        response = book(client, clinic, f"{next_monday.isoformat()}T16:45:00")
        assert response.status_code == 409

    def test_non_positive_duration_uses_default(self, client, clinic, next_monday):
        response = book(client, clinic, f"{next_monday.isoformat()}T11:00:00", duration_minutes=0)
        assert response.status_code == 201
        assert response.json()["duration_minutes"] == 30

    def test_duration_longer_than_a_day_is_rejected(self, client, clinic, next_monday):
        response = book(client, clinic, f"{next_monday.isoformat()}T09:00:00", duration_minutes=5000000000)
        assert response.status_code == 422

    def test_booking_in_the_past_is_rejected(self, client, clinic):
        last_week = date.today() - timedelta(days=7)
        response = book(client, clinic, f"{last_week.isoformat()}T10:00:00")
        assert response.status_code == 400

    def test_unknown_patient(self, client, clinic, next_monday):
        response = client.post(
            "/api/v1/appointments",
            json={
                "patient_id": 999,
                "provider_id": clinic["provider"]["id"],
                "scheduled_at": f"{next_monday.isoformat()}T10:00:00"
            }
        )
        assert response.status_code == 404

    def test_unknown_provider(self, client, clinic, next_monday):
        response = client.post(
            "/api/v1/appointments",
            json={
                "patient_id": clinic["patient"]["id"],
                "provider_id": 999,
                "scheduled_at": f"{next_monday.isoformat()}T10:00:00"
            }
        )
        assert response.status_code == 404

class TestAppointmentLifecycle:

    def test_cancel_frees_slot(self, client, clinic, next_monday):
        appointment = book(client, clinic, f"{next_monday.isoformat()}T10:00:00").json()

        response = client.post(
            f"/api/v1/appointments/{appointment['id']}/cancel",
            json={"reason": "Patient request"}
        )
        assert response.status_code == 200

        data = response.json()
        assert data["status"] == "cancelled"
        assert data["cancelled_reason"] == "Patient request"
        assert data["cancelled_at"] is not None

        assert len(slot_starts(client, clinic, next_monday)) == 16
        assert book(client, clinic, f"{next_monday.isoformat()}T10:00:00").status_code == 201

    def test_cancel_twice(self, client, clinic, next_monday):
        appointment = book(client, clinic, f"{next_monday.isoformat()}T10:00:00").json()
        client.post(f"/api/v1/appointments/{appointment['id']}/cancel")

        response = client.post(f"/api/v1/appointments/{appointment['id']}/cancel")
        assert response.status_code == 409

    def test_confirm_then_complete(self, client, clinic, next_monday):
        appointment = book(client, clinic, f"{next_monday.isoformat()}T10:00:00").json()

        response = client.post(f"/api/v1/appointments/{appointment['id']}/confirm")
        assert response.status_code == 200
        assert response.json()["status"] == "confirmed"

        response = client.post(f"/api/v1/appointments/{appointment['id']}/complete")
        assert response.status_code == 200
        assert response.json()["status"] == "completed"

        response = client.post(f"/api/v1/appointments/{appointment['id']}/cancel")
        assert response.status_code == 409

    def test_confirm_cancelled_appointment(self, client, clinic, next_monday):
        appointment = book(client, clinic, f"{next_monday.isoformat()}T10:00:00").json()
        client.post(f"/api/v1/appointments/{appointment['id']}/cancel")

        response = client.post(f"/api/v1/appointments/{appointment['id']}/confirm")
        assert response.status_code == 409

    def test_get_and_list(self, client, clinic, next_monday):
        first = book(client, clinic, f"{next_monday.isoformat()}T14:00:00").json()
        second = book(client, clinic, f"{next_monday.isoformat()}T09:00:00").json()

        response = client.get(f"/api/v1/appointments/{first['id']}")
        assert response.status_code == 200
        assert response.json()["reason"] == "Annual checkup"

        response = client.get(
            "/api/v1/appointments",
            params={"provider_id": clinic["provider"]["id"], "date": next_monday.isoformat()}
        )
        assert response.status_code == 200
        assert [a["id"] for a in response.json()] == [second["id"], first["id"]]

    def test_get_missing_appointment(self, client, test_db):
        response = client.get("/api/v1/appointments/999")
        assert response.status_code == 404
