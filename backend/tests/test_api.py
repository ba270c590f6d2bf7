"""HTTP-level tests against an in-memory SQLite database."""

import pytest

from slotbook.models.generated import (
    AvailabilitySchedules,
    Bookings,
    Clients,
    Durations,
    EventOptions,
    Events,
    Organizations,
    Users,
)

BASE = "/events/ana/intro-call"


@pytest.fixture
def seeded(db_session):
    """Ana (admin, member of Acme) owns 'intro-call': Mondays 09:00-11:00 Madrid time."""
    org = Organizations(id=1, name="Acme")
    ana_client = Clients(id=1, first_name="Ana", last_name="Pérez")
    guest = Clients(id=2, first_name="Luis", last_name="Gómez")
    ana = Users(id=1, username="ana", role="admin", client_id=1, organization_id=1)
    other = Users(id=2, username="bob", role="user")
    db_session.add_all([org, ana_client, guest, ana, other])
    db_session.flush()

    db_session.add_all([
        Events(id="evt-1", url_slug="intro-call", title="Intro call", user_id=1, organization_id=1),
        Events(id="evt-2", url_slug="no-default", title="Broken", user_id=1),
        Durations(id=1, duration_minutes=30),
        Durations(id=2, duration_minutes=60),
    ])
    db_session.flush()

    db_session.add_all([
        EventOptions(id=1, event_id="evt-1", duration_id=1, capacity=1, is_default=1),
        EventOptions(id=2, event_id="evt-1", duration_id=2, capacity=2, is_default=0),
        EventOptions(id=3, event_id="evt-2", duration_id=1, capacity=1, is_default=0),
        AvailabilitySchedules(
            id=1, event_id="evt-1", day_of_week="monday",
            start_time="09:00", end_time="11:00", timezone="Europe/Madrid",
        ),
        # Global rule of Ana's organization on Wednesdays
        AvailabilitySchedules(
            id=2, organization_id=1, day_of_week="wednesday",
            start_time="15:00", end_time="16:00", timezone="Europe/Madrid",
        ),
        # Inactive rule
        AvailabilitySchedules(
            id=3, event_id="evt-1", day_of_week="tuesday",
            start_time="09:00", end_time="17:00", timezone="Europe/Madrid", is_active=0,
        ),
        # Someone else's global rule
        AvailabilitySchedules(
            id=4, user_id=2, day_of_week="thursday",
            start_time="09:00", end_time="17:00", timezone="UTC",
        ),
        AvailabilitySchedules(
            id=5, event_id="evt-2", day_of_week="monday",
            start_time="09:00", end_time="11:00", timezone="UTC",
        ),
        Bookings(id=1, event_option_id=1, date="2030-01-07", time_slot="09:30", status="confirmed", client_id=2),
        Bookings(id=2, event_option_id=1, date="2030-01-07", time_slot="10:00", status="cancelled", client_id=2),
        Bookings(id=3, event_option_id=1, date="2030-01-14", time_slot="09:00", status="pending"),
    ])
    db_session.commit()
    return db_session


class TestEventEndpoint:
    def test_event_data(self, client, seeded):
        resp = client.get(BASE)

        assert resp.status_code == 200
        event = resp.json()["event"]
        assert event["slug"] == "intro-call"
        assert event["defaultOptionId"] == 1
        assert event["meetingType"] == "google_meet"
        assert event["requiresConfirmation"] is False
        assert event["owners"][0]["name"] == "Ana Pérez"
        assert event["owners"][0]["role"] == "Administrator"
        assert event["owners"][1] == {"name": "Acme", "avatarUrl": None, "role": "Organization"}
        assert [o["durationMinutes"] for o in event["eventOptions"]] == [30, 60]

    def test_unknown_event(self, client, seeded):
        resp = client.get("/events/ana/missing")
        assert resp.status_code == 404
        assert "error" in resp.json()

    def test_unknown_user(self, client, seeded):
        assert client.get("/events/nobody/intro-call").status_code == 404

    def test_missing_default_option(self, client, seeded):
        resp = client.get("/events/ana/no-default")
        assert resp.status_code == 500
        assert "default" in resp.json()["error"]


class TestSlotsEndpoint:
    def test_monday_slots(self, client, seeded):
        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-07", "timezone": "Europe/Madrid"})

        assert resp.status_code == 200
        slots = resp.json()["slots"]
        assert [s["startTime"] for s in slots] == ["09:00", "09:30", "10:00", "10:30"]
        assert [s["available"] for s in slots] == [True, False, True, True]
        assert slots[0]["sourceTimezone"] == "Europe/Madrid"
        assert slots[0]["displayTime"] == "09:00"
        assert slots[0]["timezoneWarning"] is None

    def test_display_time_in_requester_zone(self, client, seeded):
        resp = client.get(
            f"{BASE}/slots",
            params={"date": "2030-01-07", "timezone": "America/New_York", "timeFormat": "12h"},
        )

        slots = resp.json()["slots"]
        assert slots[0]["startTime"] == "09:00"
        assert slots[0]["displayTime"] == "3:00am"
        assert slots[0]["displayTimezone"] == "America/New_York"

    def test_unknown_zone_degrades(self, client, seeded):
        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-07", "timezone": "Mars/Base"})

        assert resp.status_code == 200
        slot = resp.json()["slots"][0]
        assert slot["displayTime"] == "09:00"
        assert slot["displayTimezone"] == "Europe/Madrid"
        assert "Mars/Base" in slot["timezoneWarning"]

    @pytest.mark.parametrize("region", ["America", "Europe"])
    def test_region_name_degrades(self, client, seeded, region):
        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-07", "timezone": region})

        assert resp.status_code == 200
        slot = resp.json()["slots"][0]
        assert slot["displayTime"] == "09:00"
        assert slot["displayTimezone"] == "Europe/Madrid"
        assert region in slot["timezoneWarning"]

    def test_booking_stored_with_seconds_takes_capacity(self, client, seeded):
        seeded.add(Bookings(id=10, event_option_id=1, date="2030-01-21", time_slot="10:00:00", status="confirmed"))
        seeded.commit()

        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-21"})

        available = {s["startTime"]: s["available"] for s in resp.json()["slots"]}
        assert available == {"09:00": True, "09:30": True, "10:00": False, "10:30": True}

    def test_larger_option(self, client, seeded):
        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-07", "eventOptionId": 2})

        slots = resp.json()["slots"]
        assert [s["startTime"] for s in slots] == ["09:00", "10:00"]
        assert all(s["available"] for s in slots)

    def test_organization_rules_apply(self, client, seeded):
        resp = client.get(f"{BASE}/slots", params={"date": "2030-01-09"})

        assert [s["startTime"] for s in resp.json()["slots"]] == ["15:00", "15:30"]

    def test_inactive_and_foreign_rules_are_ignored(self, client, seeded):
        for day in ("2030-01-08", "2030-01-10"):
            assert client.get(f"{BASE}/slots", params={"date": day}).json()["slots"] == []

    def test_past_date(self, client, seeded):
        resp = client.get(f"{BASE}/slots", params={"date": "2020-01-06"})

        assert resp.status_code == 200
        assert resp.json()["slots"] == []

    @pytest.mark.parametrize(
        "params",
        [
            {"date": "07/01/2030"},
            {"date": "2030-02-30"},
            {},
            {"date": "2030-01-07", "eventOptionId": "abc"},
            {"date": "2030-01-07", "timeFormat": "am/pm"},
            {"date": "2030-01-07", "timezone": "../../etc"},
        ],
    )
    def test_malformed_input(self, client, seeded, params):
        resp = client.get(f"{BASE}/slots", params=params)
        assert resp.status_code == 400

    def test_unknown_event(self, client, seeded):
        resp = client.get("/events/ana/missing/slots", params={"date": "2030-01-07"})
        assert resp.status_code == 404


class TestAvailabilityEndpoint:
    def test_month(self, client, seeded):
        resp = client.get(f"{BASE}/availability", params={"year": 2030, "month": 1})

        assert resp.status_code == 200
        body = resp.json()
        assert body["availableDates"] == [
            "2030-01-02", "2030-01-07", "2030-01-09", "2030-01-14", "2030-01-16",
            "2030-01-21", "2030-01-23", "2030-01-28", "2030-01-30",
        ]
        assert body["availabilityCount"]["2030-01-07"] == 3
        assert body["availabilityCount"]["2030-01-14"] == 3
        assert body["availabilityCount"]["2030-01-21"] == 4
        assert body["availabilityCount"]["2030-01-02"] == 2

    @pytest.mark.parametrize("params", [{"year": 2030, "month": 13}, {"year": 30, "month": 1}, {"month": 1}])
    def test_bad_month(self, client, seeded, params):
        assert client.get(f"{BASE}/availability", params=params).status_code == 400

    def test_missing_default_option(self, client, seeded):
        resp = client.get("/events/ana/no-default/availability", params={"year": 2030, "month": 1})
        assert resp.status_code == 500


class TestRangeEndpoint:
    def test_range(self, client, seeded):
        resp = client.get(
            f"{BASE}/slots/range",
            params={"startDate": "2030-01-07", "endDate": "2030-01-13", "timezone": "UTC"},
        )

        assert resp.status_code == 200
        by_date = resp.json()["slotsByDate"]
        assert list(by_date) == ["2030-01-07", "2030-01-09"]
        assert by_date["2030-01-07"][0]["displayTime"] == "08:00"

    def test_inverted_range(self, client, seeded):
        resp = client.get(f"{BASE}/slots/range", params={"startDate": "2030-01-13", "endDate": "2030-01-07"})

        assert resp.status_code == 400
        assert "before" in resp.json()["error"]

    def test_too_wide(self, client, seeded):
        resp = client.get(f"{BASE}/slots/range", params={"startDate": "2030-01-01", "endDate": "2030-03-01"})

        assert resp.status_code == 400
        assert "31 days" in resp.json()["error"]


class TestDashboardBookings:
    def test_bookings_grouped_by_date(self, client, seeded):
        resp = client.get(
            "/dashboard/events/intro-call/bookings",
            params={"username": "ana", "startDate": "2030-01-01", "endDate": "2030-01-31"},
        )

        assert resp.status_code == 200
        by_date = resp.json()["bookingsByDate"]
        assert list(by_date) == ["2030-01-07", "2030-01-14"]
        assert [b["status"] for b in by_date["2030-01-07"]] == ["confirmed", "cancelled"]
        assert by_date["2030-01-07"][0]["person"] == {"firstName": "Luis", "lastName": "Gómez"}
        assert by_date["2030-01-14"][0]["person"] is None

    def test_no_default_option(self, client, seeded):
        resp = client.get(
            "/dashboard/events/no-default/bookings",
            params={"username": "ana", "startDate": "2030-01-01", "endDate": "2030-01-31"},
        )
        assert resp.status_code == 404

    def test_range_over_31_days(self, client, seeded):
        resp = client.get(
            "/dashboard/events/intro-call/bookings",
            params={"username": "ana", "startDate": "2030-01-01", "endDate": "2030-03-01"},
        )

        assert resp.status_code == 400
        assert "31 days" in resp.json()["error"]

    def test_timezone_parameter_is_ignored(self, client, seeded):
        resp = client.get(
            "/dashboard/events/intro-call/bookings",
            params={"username": "ana", "startDate": "2030-01-07", "endDate": "2030-01-07", "timezone": "America"},
        )

        assert resp.status_code == 200
        assert resp.json()["bookingsByDate"]["2030-01-07"][0]["timeSlot"] == "09:30"


class TestHealth:
    def test_health(self, client, seeded):
        assert client.get("/health").json() == {"database": True}
