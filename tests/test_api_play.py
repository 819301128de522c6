from app.services.seeding import DEMO_TOUR_ID

PLAY = f"/api/play/{DEMO_TOUR_ID}"
DEMO_PASSWORDS = ["1212", "mystery", "MAGNIFY", "4521", "AGENT"]


def test_lobby_lists_only_active_tours(client):
    client.post("/api/tours", json={"name": "Hidden Draft"})
    names = [t["name"] for t in client.get("/api/play/tours").json()]
    assert names == ["The Sherlock Holmes Institute Final Exam"]


def test_new_session_starts_in_intro_and_sets_cookie(client):
    resp = client.get(PLAY)
    assert resp.status_code == 200
    assert "mt_session_id" in resp.cookies
    body = resp.json()
    assert body["state"] == "intro"
    assert body["stop_count"] == 5
    assert body["current_stop"] is None


def test_inactive_or_unknown_tour_is_not_playable(client):
    tour = client.post("/api/tours", json={"name": "Draft"}).json()
    assert client.get(f"/api/play/{tour['id']}").status_code == 404
    assert client.post("/api/play/missing/start").status_code == 404


def test_player_view_hides_answers(client):
    body = client.post(f"{PLAY}/start").json()
    stop = body["current_stop"]
    assert stop["name"] == "Mystery Served HQ"
    assert "password" not in stop
    assert "correct_answer" not in stop
    assert "tips" not in stop
    assert body["tips"] == []


def test_session_persists_between_requests(client):
    client.post(f"{PLAY}/start")
    body = client.get(PLAY).json()
    assert body["state"] == "playing"
    assert body["stop_index"] == 0


def test_separate_visitors_have_separate_sessions(client):
    client.post(f"{PLAY}/start")
    client.cookies.clear()
    assert client.get(PLAY).json()["state"] == "intro"


def test_wrong_answer_is_not_an_error(client):
    client.post(f"{PLAY}/start")
    resp = client.post(f"{PLAY}/answer", json={"answer": "nope"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["correct"] is False
    assert [n["kind"] for n in body["notifications"]] == ["error", "hint"]
    assert body["session"]["failed_attempts"] == 1


def test_hint_toggle_shows_tips(client):
    client.post(f"{PLAY}/start")
    body = client.post(f"{PLAY}/hint").json()
    assert body["hint_visible"] is True
    assert body["tips"] == ["The Cuban comes highly recommended!", "Ask for half to-go for later stops"]
    assert client.post(f"{PLAY}/hint").json()["tips"] == []


def test_skip_after_failures(client):
    client.post(f"{PLAY}/start")
    assert client.post(f"{PLAY}/skip").status_code == 409
    client.post(f"{PLAY}/answer", json={"answer": "a"})
    body = client.post(f"{PLAY}/answer", json={"answer": "b"}).json()
    assert body["session"]["can_skip"] is True
    assert "skip_available" in [n["kind"] for n in body["notifications"]]

    body = client.post(f"{PLAY}/skip").json()
    assert body["skipped"] is True
    assert body["session"]["state"] == "transition"


def test_transition_shows_next_stop_directions(client):
    client.post(f"{PLAY}/start")
    body = client.post(f"{PLAY}/answer", json={"answer": "1212"}).json()
    next_stop = body["session"]["next_stop"]
    assert next_stop["name"] == "Bodega on Central"
    assert next_stop["maps_url"].startswith("https://www.google.com/maps/dir/?api=1&destination=1120%20Central")


def test_out_of_order_actions_are_conflicts(client):
    assert client.post(f"{PLAY}/answer", json={"answer": "1212"}).status_code == 409
    assert client.post(f"{PLAY}/advance").status_code == 409
    resp = client.post(f"{PLAY}/certificate", json={"name": "Ada"})
    assert resp.status_code == 409
    assert "detail" in resp.json()


def test_full_playthrough_and_certificate(client):
    client.post(f"{PLAY}/start")
    for index, password in enumerate(DEMO_PASSWORDS):
        body = client.post(f"{PLAY}/answer", json={"answer": password}).json()
        assert body["correct"] is True
        if index < len(DEMO_PASSWORDS) - 1:
            assert body["session"]["state"] == "transition"
            assert client.post(f"{PLAY}/advance").json()["stop_index"] == index + 1
    assert body["session"]["state"] == "completed"

    cert = client.post(f"{PLAY}/certificate", json={"name": "Ada"}).json()
    assert cert["agent_name"] == "Ada"
    assert cert["tour_name"] == "The Sherlock Holmes Institute Final Exam"
    again = client.post(f"{PLAY}/certificate", json={}).json()
    assert again["agent_name"] == "Mystery Agent"
    assert again["credential_id"] == cert["credential_id"]


def test_restart_picks_up_edited_stops(client):
    client.post(f"{PLAY}/start")
    client.patch("/api/stops/stop-1", json={"name": "Renamed HQ"})
    assert client.get(PLAY).json()["current_stop"]["name"] == "Mystery Served HQ"

    body = client.post(f"{PLAY}/restart").json()
    assert body["state"] == "intro"
    assert client.post(f"{PLAY}/start").json()["current_stop"]["name"] == "Renamed HQ"


def test_empty_active_tour_cannot_start(client):
    tour = client.post("/api/tours", json={"name": "Empty", "is_active": True}).json()
    resp = client.post(f"/api/play/{tour['id']}/start")
    assert resp.status_code == 409
