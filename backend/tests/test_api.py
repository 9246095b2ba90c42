from decimal import Decimal

from conftest import add_appointment


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert "redis" in response.json()


# ── /slots ───────────────────────────────────────────────────────────────


def _day_params(tenant, professional, services, on_date="2026-10-20"):
    return [
        ("tenant_id", tenant.id),
        ("professional_id", professional.id),
        ("date", on_date),
    ] + [("service_id", s.id) for s in services]


def test_slots_day(client, db, tenant, professionals, services):
    joao, _ = professionals
    add_appointment(db, tenant.id, joao, "2026-10-20T09:00:00-03:00", services[:1])

    response = client.get("/slots/day", params=_day_params(tenant, joao, services))

    assert response.status_code == 200
    body = response.json()
    assert body["total_duration_min"] == 45
    assert Decimal(str(body["total_price"])) == Decimal("60.5")
    slots = {s["time"]: s for s in body["slots"]}
    assert slots["08:00"] == {"time": "08:00", "end": "08:45", "is_available": True, "reason": None}
    assert slots["09:00"]["is_available"] is False
    assert slots["09:00"]["reason"] == "booked"
    assert body["available_count"] == sum(s["is_available"] for s in body["slots"])
    assert body["is_fully_booked"] is False


def test_slots_day_today_cutoff(client, tenant, professionals, services):
    joao, _ = professionals
    response = client.get(
        "/slots/day", params=_day_params(tenant, joao, services[:1], on_date="2026-10-19")
    )

    slots = {s["time"]: s for s in response.json()["slots"]}
    assert slots["10:00"]["reason"] == "past"
    assert slots["10:20"]["is_available"] is True


def test_slots_day_closed_weekday_is_fully_booked(client, tenant, professionals, services):
    joao, _ = professionals
    response = client.get(
        "/slots/day", params=_day_params(tenant, joao, services, on_date="2026-10-25")
    )

    assert response.status_code == 200
    assert response.json()["slots"] == []
    assert response.json()["is_fully_booked"] is True


def test_slots_day_rejects_past_and_far_dates(client, tenant, professionals, services):
    joao, _ = professionals

    past = client.get("/slots/day", params=_day_params(tenant, joao, services, "2026-10-18"))
    far = client.get("/slots/day", params=_day_params(tenant, joao, services, "2026-11-04"))
    last = client.get("/slots/day", params=_day_params(tenant, joao, services, "2026-11-03"))

    assert past.status_code == 400
    assert far.status_code == 400
    assert last.status_code == 200


def test_slots_day_unknown_service(client, tenant, professionals):
    joao, _ = professionals
    response = client.get(
        "/slots/day",
        params={"tenant_id": tenant.id, "professional_id": joao.id, "date": "2026-10-20", "service_id": 999},
    )
    assert response.status_code == 404


def test_slots_day_requires_a_service(client, tenant, professionals):
    joao, _ = professionals
    response = client.get(
        "/slots/day",
        params={"tenant_id": tenant.id, "professional_id": joao.id, "date": "2026-10-20"},
    )
    assert response.status_code == 422


def test_reschedule_slots(client, db, tenant, professionals, services):
    joao, _ = professionals
    appt = add_appointment(db, tenant.id, joao, "2026-10-20T09:00:00-03:00", services)

    response = client.get(
        "/slots/reschedule", params={"appointment_id": appt.id, "date": "2026-10-20"}
    )

    assert response.status_code == 200
    body = response.json()
    assert body["professional_id"] == joao.id
    assert body["total_duration_min"] == 45
    slots = {s["time"]: s for s in body["slots"]}
    assert slots["09:00"]["is_available"] is True


def test_reschedule_unknown_appointment(client, tenant):
    response = client.get("/slots/reschedule", params={"appointment_id": 404, "date": "2026-10-20"})
    assert response.status_code == 404


def test_bookable_dates(client, tenant):
    response = client.get("/slots/dates", params={"tenant_id": tenant.id})

    body = response.json()
    assert body["start_date"] == "2026-10-19"
    assert body["end_date"] == "2026-11-03"
    assert "2026-10-25" not in body["dates"]  # Sunday
    assert body["dates"][0] == "2026-10-19"


# ── /calendar ────────────────────────────────────────────────────────────


def test_calendar_days(client, tenant):
    response = client.get(
        "/calendar/days", params={"tenant_id": tenant.id, "anchor": "2026-10-21", "mode": "week"}
    )

    assert response.status_code == 200
    # default hours: Monday..Saturday
    assert response.json()["days"] == [f"2026-10-{d}" for d in range(19, 25)]


def test_calendar_days_rejects_unknown_mode(client, tenant):
    response = client.get(
        "/calendar/days", params={"tenant_id": tenant.id, "anchor": "2026-10-21", "mode": "month"}
    )
    assert response.status_code == 422


def test_calendar_grid(client, db, tenant, professionals, services):
    joao, _ = professionals
    add_appointment(db, tenant.id, joao, "2026-10-20T09:00:00-03:00", services)
    add_appointment(db, tenant.id, joao, "2026-10-20T09:20:00-03:00", services[:1])

    response = client.get(
        "/calendar/grid",
        params={"tenant_id": tenant.id, "anchor": "2026-10-20", "mode": "day"},
    )

    assert response.status_code == 200
    (day,) = response.json()["days"]
    assert [e["has_conflict"] for e in day["events"]] == [True, True]
    assert all(e["height"] >= 48 for e in day["events"])


def test_calendar_grid_rejects_bad_row_height(client, tenant):
    response = client.get(
        "/calendar/grid",
        params={"tenant_id": tenant.id, "anchor": "2026-10-20", "row_height": 0},
    )
    assert response.status_code == 400


# ── /business_hours ──────────────────────────────────────────────────────


def test_business_hours_defaults(client, tenant):
    response = client.get(f"/business_hours/{tenant.id}")

    assert response.status_code == 200
    body = response.json()
    assert (body["open_hour"], body["close_hour"], body["step_minutes"]) == (8, 20, 20)
    assert body["open_weekdays"] == ["mon", "tue", "wed", "thu", "fri", "sat"]


def test_business_hours_put_then_get(client, tenant):
    payload = {
        "open_time": "09:00",
        "close_time": "18:00",
        "slot_interval": 30,
        "open_days": ["tue", "wed", "thu", "fri", "sat"],
        "lunch_start": "12:00",
        "lunch_end": "13:00",
        "use_custom_hours": True,
        "custom_hours": {"sat": {"open": "09:00", "close": "14:00"}},
    }
    put = client.put(f"/business_hours/{tenant.id}", json=payload)
    assert put.status_code == 200

    body = client.get(f"/business_hours/{tenant.id}").json()
    assert body["open_hour"] == 9
    assert body["step_minutes"] == 30
    assert body["lunch_start"] == "12:00"
    assert body["weekday_overrides"]["sat"]["close"] == "14:00"

    # update in place
    payload["close_time"] = "19:00"
    assert client.put(f"/business_hours/{tenant.id}", json=payload).json()["close_hour"] == 19


def test_business_hours_put_rejects_invalid(client, tenant):
    response = client.put(
        f"/business_hours/{tenant.id}",
        json={"open_time": "18:00", "close_time": "09:00", "slot_interval": 20},
    )

    assert response.status_code == 400
    # nothing stored, defaults still apply
    assert client.get(f"/business_hours/{tenant.id}").json()["open_hour"] == 8


def test_business_hours_put_unknown_tenant(client):
    response = client.put(
        "/business_hours/999",
        json={"open_time": "09:00", "close_time": "18:00", "slot_interval": 20},
    )
    assert response.status_code == 404


def test_business_hours_patch_and_delete_not_allowed(client, tenant):
    assert client.patch(f"/business_hours/{tenant.id}").status_code == 405
    assert client.delete(f"/business_hours/{tenant.id}").status_code == 405


# ── /blocked_times ───────────────────────────────────────────────────────


def test_blocked_times_crud(client, tenant, professionals):
    joao, _ = professionals
    created = client.post(
        "/blocked_times/",
        json={
            "tenant_id": tenant.id,
            "professional_id": joao.id,
            "date": "2026-10-20",
            "start_time": "14:00:00",
            "end_time": "15:30",
            "reason": "Dentist",
        },
    )
    assert created.status_code == 201
    block = created.json()
    assert (block["start_time"], block["end_time"]) == ("14:00", "15:30")

    listed = client.get("/blocked_times/", params={"tenant_id": tenant.id, "on_date": "2026-10-20"})
    assert [b["id"] for b in listed.json()] == [block["id"]]
    assert client.get(f"/blocked_times/{block['id']}").status_code == 200

    assert client.patch(f"/blocked_times/{block['id']}").status_code == 405
    assert client.delete(f"/blocked_times/{block['id']}").status_code == 204
    assert client.get(f"/blocked_times/{block['id']}").status_code == 404


def test_blocked_time_must_end_after_start(client, tenant):
    response = client.post(
        "/blocked_times/",
        json={"tenant_id": tenant.id, "date": "2026-10-20", "start_time": "15:00", "end_time": "14:00"},
    )
    assert response.status_code == 400


def test_blocked_time_shows_up_in_slots(client, tenant, professionals, services):
    joao, pedro = professionals
    client.post(
        "/blocked_times/",
        json={"tenant_id": tenant.id, "date": "2026-10-20", "start_time": "14:00", "end_time": "15:00"},
    )

    for professional in (joao, pedro):
        response = client.get("/slots/day", params=_day_params(tenant, professional, services[:1]))
        slots = {s["time"]: s for s in response.json()["slots"]}
        assert slots["14:20"]["reason"] == "blocked"


def test_slots_day_can_exclude_an_appointment(client, db, tenant, professionals, services):
    joao, _ = professionals
    appt = add_appointment(db, tenant.id, joao, "2026-10-20T09:00:00-03:00", services[:1])
    params = _day_params(tenant, joao, services[:1]) + [("exclude_appointment_id", appt.id)]

    slots = {s["time"]: s for s in client.get("/slots/day", params=params).json()["slots"]}
    assert slots["09:00"]["is_available"] is True


def test_reschedule_rejects_past_and_far_dates(client, db, tenant, professionals, services):
    joao, _ = professionals
    appt = add_appointment(db, tenant.id, joao, "2026-10-20T09:00:00-03:00", services)

    past = client.get("/slots/reschedule", params={"appointment_id": appt.id, "date": "2026-10-16"})
    far = client.get("/slots/reschedule", params={"appointment_id": appt.id, "date": "2026-11-04"})

    assert past.status_code == 400
    assert far.status_code == 400
