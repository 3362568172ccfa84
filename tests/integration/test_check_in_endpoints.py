from fastapi import status

from gym_schedule.models import MembershipStatus


def book_monday(client, headers, class_id, member_id, booking_date="2026-10-19", start_time="06:00"):
    response = client.post(
        "/bookings/",
        json={"class_id": class_id, "member_id": member_id, "booking_date": booking_date, "start_time": start_time},
        headers=headers,
    )
    assert response.status_code == 201
    return response.json()


class TestCheckIn:
    def test_walk_in(self, client, auth_headers, test_member):
        response = client.post("/check-ins/", json={"member_id": test_member.id}, headers=auth_headers)

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["member_name"] == "Anna Kowalska"
        assert data["membership_type"] == "Monthly"
        assert data["check_out_time"] is None
        assert data["booking_id"] is None

    def test_walk_in_updates_last_check_in(self, client, auth_headers, test_member):
        client.post("/check-ins/", json={"member_id": test_member.id}, headers=auth_headers)

        members = client.get("/members/", headers=auth_headers).json()

        assert members[0]["last_check_in"] is not None

    def test_check_in_with_booking_marks_attendance(self, client, auth_headers, test_class, test_member):
        booking = book_monday(client, auth_headers, test_class.id, test_member.id)

        response = client.post(
            "/check-ins/",
            json={"member_id": test_member.id, "booking_id": booking["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 201
        assert response.json()["class_id"] == test_class.id
        bookings = client.get("/bookings/", params={"member_id": test_member.id}, headers=auth_headers).json()
        assert bookings[0]["status"] == "attended"

        feed = client.get("/activity/", headers=auth_headers).json()
        assert [entry["type"] for entry in feed[:2]] == ["checkin", "class_attended"]

    def test_booking_of_another_member(self, client, auth_headers, test_class, test_member, second_member):
        booking = book_monday(client, auth_headers, test_class.id, second_member.id)

        response = client.post(
            "/check-ins/",
            json={"member_id": test_member.id, "booking_id": booking["id"]},
            headers=auth_headers,
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"]["code"] == "InvalidState"

    def test_booking_for_another_day_is_not_recorded(self, client, auth_headers, test_class, test_member):
        booking = book_monday(client, auth_headers, test_class.id, test_member.id, "2026-10-21", "18:00")

        response = client.post(
            "/check-ins/",
            json={"member_id": test_member.id, "booking_id": booking["id"]},
            headers=auth_headers,
        )

        assert response.status_code == 412
        assert client.get("/check-ins/", headers=auth_headers).json() == []

    def test_unknown_booking(self, client, auth_headers, test_member):
        response = client.post("/check-ins/", json={"member_id": test_member.id, "booking_id": 999}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_inactive_member(self, client, auth_headers, member_factory):
        member = member_factory("frozen@example.com", status=MembershipStatus.INACTIVE)

        response = client.post("/check-ins/", json={"member_id": member.id}, headers=auth_headers)

        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_unknown_member(self, client, auth_headers):
        response = client.post("/check-ins/", json={"member_id": 999}, headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_member_role_cannot_check_in(self, client, headers_for, test_member):
        response = client.post("/check-ins/", json={"member_id": test_member.id}, headers=headers_for(test_member))

        assert response.status_code == status.HTTP_403_FORBIDDEN


class TestCheckOut:
    def test_check_out(self, client, auth_headers, test_member):
        check_in = client.post("/check-ins/", json={"member_id": test_member.id}, headers=auth_headers).json()

        response = client.post(f"/check-ins/{check_in['id']}/check-out", headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["check_out_time"] is not None

    def test_check_out_twice(self, client, auth_headers, test_member):
        check_in = client.post("/check-ins/", json={"member_id": test_member.id}, headers=auth_headers).json()
        client.post(f"/check-ins/{check_in['id']}/check-out", headers=auth_headers)

        response = client.post(f"/check-ins/{check_in['id']}/check-out", headers=auth_headers)

        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_check_in(self, client, auth_headers):
        response = client.post("/check-ins/999/check-out", headers=auth_headers)

        assert response.status_code == status.HTTP_404_NOT_FOUND


def test_list_check_ins_by_member(client, auth_headers, test_member, second_member):
    client.post("/check-ins/", json={"member_id": test_member.id}, headers=auth_headers)
    client.post("/check-ins/", json={"member_id": second_member.id}, headers=auth_headers)

    response = client.get("/check-ins/", params={"member_id": second_member.id}, headers=auth_headers)

    assert [c["member_name"] for c in response.json()] == ["Boris Ivanov"]
