import pytest
from fastapi import Depends, status
from sqlalchemy.orm import Session

from smartrooms.db import get_db
from smartrooms.errors import Forbidden
from smartrooms.main import app
from smartrooms.models.booking import Booking
from smartrooms.models.role import RoleName
from smartrooms.routers.bookings import get_booking_service
from smartrooms.services.bookings import BookingService

from tests.conf_tests import (
    client,
    clear_db,
    datetime_at,
    headers_for,
    make_user,
    test_db,
    test_user,
    moderator,
    admin,
    auth_headers,
    moderator_headers,
    admin_headers,
    test_room,
    test_booking,
)


def booking_payload(room_id, **overrides):
    payload = {
        "roomId": room_id,
        "startDate": datetime_at(14).isoformat(),
        "endDate": datetime_at(15).isoformat(),
        "purpose": "Sprint planning",
    }
    payload.update(overrides)
    return payload


def attendee_ids(test_db, booking_id):
    test_db.expire_all()
    return sorted(user.id for user in test_db.get(Booking, booking_id).users)


@pytest.fixture
def reject_overlaps():
    def override_booking_service(db: Session = Depends(get_db)):
        return BookingService(db, reject_overlaps=True)

    app.dependency_overrides[get_booking_service] = override_booking_service
    yield
    del app.dependency_overrides[get_booking_service]


# Create
# pylint: disable-next=redefined-outer-name
def test_create_booking_success(auth_headers, test_room, test_db):
    attendee = make_user(test_db)
    response = client.post(
        "/api/bookings",
        json=booking_payload(test_room.id, userIds=[attendee.id]),
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["roomId"] == test_room.id
    assert data["purpose"] == "Sprint planning"
    assert data["startDate"] == datetime_at(14).isoformat()
    assert data["isApproved"] is False
    assert attendee_ids(test_db, data["id"]) == [attendee.id]


# pylint: disable-next=redefined-outer-name
def test_create_booking_unauthorized(test_room):
    response = client.post("/api/bookings", json=booking_payload(test_room.id))
    assert response.status_code in [
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
    ]


# pylint: disable-next=redefined-outer-name
def test_create_booking_without_room_id(auth_headers, test_db):
    payload = booking_payload(None)
    del payload["roomId"]
    response = client.post("/api/bookings", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {"success": False, "error": "roomId cannot be null."}
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_create_booking_without_room_id_and_purpose(auth_headers):
    response = client.post(
        "/api/bookings",
        json={"startDate": datetime_at(9).isoformat(), "endDate": datetime_at(10).isoformat()},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_create_booking_room_not_found(auth_headers):
    response = client.post("/api/bookings", json=booking_payload(999), headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_create_booking_end_before_start(auth_headers, test_room):
    response = client.post(
        "/api/bookings",
        json=booking_payload(test_room.id, endDate=datetime_at(13).isoformat()),
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert any("startDate must be before endDate" in message for message in response.json()["error"])


# pylint: disable-next=redefined-outer-name
def test_create_booking_unknown_attendee_rolls_back(auth_headers, test_room, test_db):
    response = client.post(
        "/api/bookings",
        json=booking_payload(test_room.id, userIds=[424242]),
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert test_db.query(Booking).count() == 0


# pylint: disable-next=redefined-outer-name
def test_create_approved_booking_needs_moderator(auth_headers, moderator_headers, test_room):
    payload = booking_payload(test_room.id, isApproved=True)
    response = client.post("/api/bookings", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN

    response = client.post("/api/bookings", json=payload, headers=moderator_headers)
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json()["isApproved"] is True


# pylint: disable-next=redefined-outer-name
def test_overlapping_bookings_allowed_by_default(auth_headers, test_room, test_booking):
    payload = booking_payload(
        test_room.id,
        startDate=test_booking.start_date.isoformat(),
        endDate=test_booking.end_date.isoformat(),
    )
    response = client.post("/api/bookings", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_201_CREATED


# pylint: disable-next=redefined-outer-name
def test_overlapping_booking_rejected_when_enabled(reject_overlaps, auth_headers, test_room, test_booking):
    payload = booking_payload(
        test_room.id,
        startDate=datetime_at(10).replace(minute=30).isoformat(),
        endDate=datetime_at(12).isoformat(),
    )
    response = client.post("/api/bookings", json=payload, headers=auth_headers)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert "already booked" in response.json()["error"]

    adjacent = booking_payload(
        test_room.id,
        startDate=datetime_at(11).isoformat(),
        endDate=datetime_at(12).isoformat(),
    )
    assert client.post("/api/bookings", json=adjacent, headers=auth_headers).status_code == status.HTTP_201_CREATED


# Read
# pylint: disable-next=redefined-outer-name
def test_get_bookings(auth_headers, test_room, test_booking, test_db):
    attendee = make_user(test_db)
    test_booking.users.append(attendee)
    test_db.commit()

    response = client.get("/api/bookings", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert len(data) == 1
    assert data[0]["id"] == test_booking.id
    assert data[0]["room"] == {"id": test_room.id, "name": test_room.name}
    assert data[0]["users"] == [
        {"id": attendee.id, "position": attendee.position, "picture": attendee.picture, "email": attendee.email}
    ]


# pylint: disable-next=redefined-outer-name
def test_get_booking(auth_headers, test_booking, test_db):
    attendee = make_user(test_db)
    test_booking.users.append(attendee)
    test_db.commit()

    response = client.get(f"/api/bookings/{test_booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert data["id"] == test_booking.id
    assert data["purpose"] == "Team Meeting"
    assert data["users"] == [
        {
            "id": attendee.id,
            "firstName": attendee.first_name,
            "lastName": attendee.last_name,
            "position": attendee.position,
            "picture": attendee.picture,
            "email": attendee.email,
        }
    ]


# pylint: disable-next=redefined-outer-name
def test_get_booking_not_found(auth_headers):
    response = client.get("/api/bookings/999", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json() == {"success": False, "error": "Booking not found."}


# pylint: disable-next=redefined-outer-name
def test_get_booking_users(auth_headers, test_booking, test_db):
    attendee = make_user(test_db)
    test_booking.users.append(attendee)
    test_db.commit()

    response = client.get(f"/api/bookings/{test_booking.id}/users", headers=auth_headers)
    assert response.status_code == status.HTTP_200_OK
    data = response.json()
    assert [user["id"] for user in data] == [attendee.id]
    assert "hashedPassword" not in data[0]


# pylint: disable-next=redefined-outer-name
def test_get_booking_users_not_found(auth_headers):
    response = client.get("/api/bookings/999/users", headers=auth_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# Approve
# pylint: disable-next=redefined-outer-name
def test_approve_as_user_forbidden(auth_headers, test_booking, test_db):
    response = client.put(f"/api/bookings/{test_booking.id}/approve", headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
    test_db.expire_all()
    assert test_db.get(Booking, test_booking.id).is_approved is False


# pylint: disable-next=redefined-outer-name
def test_approve_as_admin_forbidden(admin_headers, test_booking):
    response = client.put(f"/api/bookings/{test_booking.id}/approve", headers=admin_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_approve_as_moderator(moderator_headers, test_booking):
    response = client.put(f"/api/bookings/{test_booking.id}/approve", headers=moderator_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Booking approved successfully."}

    data = client.get(f"/api/bookings/{test_booking.id}", headers=moderator_headers).json()
    assert data["isApproved"] is True


# pylint: disable-next=redefined-outer-name
def test_approve_not_found(moderator_headers):
    response = client.put("/api/bookings/999/approve", headers=moderator_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_approve_rechecks_role_inside_service(test_db, test_booking, moderator):
    service = BookingService(test_db)
    user = make_user(test_db, RoleName.USER)
    with pytest.raises(Forbidden):
        service.approve(test_booking.id, user.id)

    service.approve(test_booking.id, moderator.id)
    assert test_db.get(Booking, test_booking.id).is_approved is True


# pylint: disable-next=redefined-outer-name
def test_update_cannot_unapprove(moderator_headers, test_booking, test_db):
    client.put(f"/api/bookings/{test_booking.id}/approve", headers=moderator_headers)
    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"purpose": "Retro", "isApproved": False},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    test_db.expire_all()
    booking = test_db.get(Booking, test_booking.id)
    assert booking.is_approved is True
    assert booking.purpose == "Retro"


# Update
# pylint: disable-next=redefined-outer-name
def test_update_booking_user_forbidden(auth_headers, test_booking):
    response = client.put(
        f"/api/bookings/{test_booking.id}", json={"purpose": "Should Fail"}, headers=auth_headers
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_update_booking_partial(admin_headers, test_booking, test_db):
    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"endDate": datetime_at(12).isoformat()},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Booking updated successfully."}
    test_db.expire_all()
    booking = test_db.get(Booking, test_booking.id)
    assert booking.end_date == datetime_at(12)
    assert booking.start_date == datetime_at(10)
    assert booking.purpose == "Team Meeting"


# pylint: disable-next=redefined-outer-name
def test_update_booking_replaces_attendees(moderator_headers, test_booking, test_db):
    first, second, third = make_user(test_db), make_user(test_db), make_user(test_db)
    test_booking.users.extend([first, second])
    test_db.commit()

    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"userIds": [third.id]},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert attendee_ids(test_db, test_booking.id) == [third.id]


# pylint: disable-next=redefined-outer-name
def test_update_booking_empty_user_ids_keeps_attendees(moderator_headers, test_booking, test_user, test_db):
    test_booking.users.append(test_user)
    test_db.commit()

    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"purpose": "New purpose", "userIds": []},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert attendee_ids(test_db, test_booking.id) == [test_user.id]
    response = client.get(f"/api/bookings/{test_booking.id}/users", headers=moderator_headers)
    assert [user["id"] for user in response.json()] == [test_user.id]


# pylint: disable-next=redefined-outer-name
def test_update_booking_only_empty_user_ids_is_empty_patch(moderator_headers, test_booking):
    response = client.put(
        f"/api/bookings/{test_booking.id}", json={"userIds": []}, headers=moderator_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_booking_dates_with_offset_stored_as_utc(auth_headers, moderator_headers, test_room):
    response = client.post(
        "/api/bookings",
        json=booking_payload(
            test_room.id,
            startDate="2030-06-01T10:00:00+02:00",
            endDate="2030-06-01T11:00:00+02:00",
        ),
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    data = response.json()
    assert data["startDate"] == "2030-06-01T08:00:00"
    assert data["endDate"] == "2030-06-01T09:00:00"

    response = client.put(
        f"/api/bookings/{data['id']}",
        json={"endDate": "2030-06-01T12:00:00+02:00"},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK

    data = client.get(f"/api/bookings/{data['id']}", headers=moderator_headers).json()
    assert data["startDate"] == "2030-06-01T08:00:00"
    assert data["endDate"] == "2030-06-01T10:00:00"


# pylint: disable-next=redefined-outer-name
def test_update_with_offset_before_stored_start_rejected(moderator_headers, test_booking):
    # Stored start is 10:00 UTC; 11:00+02:00 is 09:00 UTC
    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"endDate": "2030-06-01T11:00:00+02:00"},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "startDate must be before endDate"


# pylint: disable-next=redefined-outer-name
def test_update_booking_unknown_attendee_changes_nothing(moderator_headers, test_booking, test_db):
    attendee = make_user(test_db)
    test_booking.users.append(attendee)
    test_db.commit()

    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"purpose": "Changed", "userIds": [attendee.id, 424242]},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    test_db.expire_all()
    assert test_db.get(Booking, test_booking.id).purpose == "Team Meeting"
    assert attendee_ids(test_db, test_booking.id) == [attendee.id]


# pylint: disable-next=redefined-outer-name
def test_update_booking_bad_dates(moderator_headers, test_booking):
    response = client.put(
        f"/api/bookings/{test_booking.id}",
        json={"startDate": datetime_at(12).isoformat()},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST


# pylint: disable-next=redefined-outer-name
def test_update_booking_unknown_room(moderator_headers, test_booking):
    response = client.put(
        f"/api/bookings/{test_booking.id}", json={"roomId": 999}, headers=moderator_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_booking_not_found(moderator_headers):
    response = client.put("/api/bookings/999", json={"purpose": "x"}, headers=moderator_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_update_booking_empty_patch(moderator_headers, test_booking):
    response = client.put(f"/api/bookings/{test_booking.id}", json={}, headers=moderator_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# Delete
# pylint: disable-next=redefined-outer-name
def test_delete_booking(admin_headers, test_booking, test_db):
    booking_id = test_booking.id
    test_booking.users.append(make_user(test_db))
    test_db.commit()

    response = client.delete(f"/api/bookings/{booking_id}", headers=admin_headers)
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Booking deleted successfully."}
    test_db.expire_all()
    assert test_db.get(Booking, booking_id) is None


# pylint: disable-next=redefined-outer-name
def test_delete_booking_user_forbidden(auth_headers, test_booking):
    response = client.delete(f"/api/bookings/{test_booking.id}", headers=auth_headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_delete_booking_not_found(moderator_headers):
    response = client.delete("/api/bookings/999", headers=moderator_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND


# Attendees
# pylint: disable-next=redefined-outer-name
def test_add_users_to_booking(moderator_headers, test_booking, test_db):
    first, second = make_user(test_db), make_user(test_db)
    test_booking.users.append(first)
    test_db.commit()

    response = client.post(
        f"/api/bookings/{test_booking.id}/users",
        json={"userIds": [first.id, second.id]},
        headers=moderator_headers,
    )
    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {"message": "Users added to the booking successfully."}
    assert attendee_ids(test_db, test_booking.id) == sorted([first.id, second.id])


# pylint: disable-next=redefined-outer-name
def test_add_users_all_or_nothing(admin_headers, test_booking, test_db):
    existing = make_user(test_db)
    response = client.post(
        f"/api/bookings/{test_booking.id}/users",
        json={"userIds": [existing.id, 424242]},
        headers=admin_headers,
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "One or more users not found."
    assert attendee_ids(test_db, test_booking.id) == []


# pylint: disable-next=redefined-outer-name
def test_add_users_requires_moderator_or_admin(auth_headers, test_booking, test_user):
    response = client.post(
        f"/api/bookings/{test_booking.id}/users",
        json={"userIds": [test_user.id]},
        headers=auth_headers,
    )
    assert response.status_code == status.HTTP_403_FORBIDDEN


# pylint: disable-next=redefined-outer-name
def test_add_users_booking_not_found(moderator_headers, test_user):
    response = client.post(
        "/api/bookings/999/users", json={"userIds": [test_user.id]}, headers=moderator_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND


# pylint: disable-next=redefined-outer-name
def test_remove_user_from_booking(moderator_headers, test_booking, test_db):
    attendee, other = make_user(test_db), make_user(test_db)
    test_booking.users.extend([attendee, other])
    test_db.commit()

    response = client.delete(
        f"/api/bookings/{test_booking.id}/users/{attendee.id}", headers=moderator_headers
    )
    assert response.status_code == status.HTTP_200_OK
    assert attendee_ids(test_db, test_booking.id) == [other.id]


# pylint: disable-next=redefined-outer-name
def test_remove_user_not_linked(moderator_headers, test_booking, test_db):
    attendee, stranger = make_user(test_db), make_user(test_db)
    test_booking.users.append(attendee)
    test_db.commit()

    response = client.delete(
        f"/api/bookings/{test_booking.id}/users/{stranger.id}", headers=moderator_headers
    )
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "User is not associated with the booking."
    assert attendee_ids(test_db, test_booking.id) == [attendee.id]


# pylint: disable-next=redefined-outer-name
def test_remove_unknown_user(moderator_headers, test_booking):
    response = client.delete(
        f"/api/bookings/{test_booking.id}/users/424242", headers=moderator_headers
    )
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "User not found."


# pylint: disable-next=redefined-outer-name
def test_remove_user_booking_not_found(moderator_headers, test_user):
    response = client.delete(f"/api/bookings/999/users/{test_user.id}", headers=moderator_headers)
    assert response.status_code == status.HTTP_404_NOT_FOUND
    assert response.json()["error"] == "Booking not found."


# pylint: disable-next=redefined-outer-name
def test_revoked_role_takes_effect_next_request(test_db, test_booking):
    moderator_user = make_user(test_db, RoleName.MODERATOR)
    headers = headers_for(moderator_user)
    assert client.delete("/api/bookings/999", headers=headers).status_code == status.HTTP_404_NOT_FOUND

    moderator_user.roles = []
    test_db.commit()
    response = client.delete(f"/api/bookings/{test_booking.id}", headers=headers)
    assert response.status_code == status.HTTP_403_FORBIDDEN
