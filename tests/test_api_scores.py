import pytest

from leaderboard.models.score import Score

ALERT = "X-hackatonLeaderboardApp-alert"
PARAMS = "X-hackatonLeaderboardApp-params"
ERROR = "X-hackatonLeaderboardApp-error"


def _create(client, name="alice", points=10):
    r = client.post("/api/scores", json={"name": name, "points": points})
    assert r.status_code == 201, r.text
    return r.json()


def test_create_assigns_id_and_location(client):
    r = client.post("/api/scores", json={"name": "alice", "points": 10})
    assert r.status_code == 201, r.text
    body = r.json()
    assert body == {"id": 1, "name": "alice", "points": 10}
    assert r.headers["Location"] == "/api/scores/1"
    assert r.headers[ALERT] == "hackatonLeaderboardApp.score.created"
    assert r.headers[PARAMS] == "1"


def test_create_with_id_is_rejected_and_not_stored(client, session):
    r = client.post("/api/scores", json={"id": 7, "name": "bob", "points": 3})
    assert r.status_code == 400
    body = r.json()
    assert body["errorKey"] == "idexists"
    assert body["entityName"] == "score"
    assert body["message"] == "error.idexists"
    assert body["title"] == "A new score cannot already have an ID"
    assert r.headers[ERROR] == "error.idexists"
    assert r.headers[PARAMS] == "score"
    assert session.query(Score).count() == 0


@pytest.mark.parametrize("score_id", [0, -5])
def test_create_with_zero_or_negative_id_is_rejected_as_existing(client, session, score_id):
    r = client.post("/api/scores", json={"id": score_id, "name": "bob", "points": 3})
    assert r.status_code == 400
    assert r.json()["errorKey"] == "idexists"
    assert r.headers[ERROR] == "error.idexists"
    assert session.query(Score).count() == 0


def test_update_without_id_is_rejected(client):
    r = client.put("/api/scores", json={"name": "alice", "points": 20})
    assert r.status_code == 400
    assert r.json()["errorKey"] == "idnull"
    assert r.headers[ERROR] == "error.idnull"


def test_update_replaces_whole_entity(client):
    created = _create(client)
    r = client.put(
        "/api/scores",
        json={"id": created["id"], "name": "alice2", "points": 20},
    )
    assert r.status_code == 200, r.text
    assert r.json() == {"id": created["id"], "name": "alice2", "points": 20}
    assert r.headers[ALERT] == "hackatonLeaderboardApp.score.updated"
    assert r.headers[PARAMS] == str(created["id"])

    r = client.get(f"/api/scores/{created['id']}")
    assert r.json()["points"] == 20


def test_get_one_and_not_found(client):
    created = _create(client)
    r = client.get(f"/api/scores/{created['id']}")
    assert r.status_code == 200
    assert r.json() == created

    r = client.get("/api/scores/999")
    assert r.status_code == 404
    assert r.content == b""


def test_delete_then_get_is_not_found(client):
    created = _create(client)
    r = client.delete(f"/api/scores/{created['id']}")
    assert r.status_code == 200
    assert r.headers[ALERT] == "hackatonLeaderboardApp.score.deleted"
    assert r.headers[PARAMS] == str(created["id"])

    assert client.get(f"/api/scores/{created['id']}").status_code == 404


def test_delete_unknown_id_is_idempotent(client):
    r = client.delete("/api/scores/424242")
    assert r.status_code == 200
    assert r.headers[PARAMS] == "424242"


def test_list_returns_page_and_pagination_headers(client):
    for i in range(25):
        _create(client, name=f"team-{i:02d}", points=i)

    r = client.get("/api/scores?page=0&size=20")
    assert r.status_code == 200
    assert len(r.json()) == 20
    assert r.headers["X-Total-Count"] == "25"
    link = r.headers["Link"]
    assert '</api/scores?page=1&size=20>; rel="next"' in link
    assert 'rel="prev"' not in link
    assert '</api/scores?page=1&size=20>; rel="last"' in link
    assert '</api/scores?page=0&size=20>; rel="first"' in link

    r = client.get("/api/scores?page=1&size=20")
    assert len(r.json()) == 5
    assert '</api/scores?page=0&size=20>; rel="prev"' in r.headers["Link"]
    assert 'rel="next"' not in r.headers["Link"]


def test_list_default_page_size(client):
    for i in range(22):
        _create(client, name=f"t{i}", points=i)
    r = client.get("/api/scores")
    assert r.status_code == 200
    assert len(r.json()) == 20
    assert r.headers["X-Total-Count"] == "22"


def test_list_sorted_by_points_desc(client):
    _create(client, name="low", points=1)
    _create(client, name="high", points=99)
    _create(client, name="mid", points=50)

    r = client.get("/api/scores", params={"sort": "points,desc"})
    assert [s["name"] for s in r.json()] == ["high", "mid", "low"]


def test_list_rejects_unknown_sort_property(client):
    r = client.get("/api/scores", params={"sort": "secret,asc"})
    assert r.status_code == 400
    assert r.json()["errorKey"] == "sortinvalid"


def test_list_empty(client):
    r = client.get("/api/scores")
    assert r.status_code == 200
    assert r.json() == []
    assert r.headers["X-Total-Count"] == "0"
    assert r.headers["Link"] == '</api/scores?page=0&size=20>; rel="last",</api/scores?page=0&size=20>; rel="first"'


def test_invalid_body_maps_to_bad_request(client):
    r = client.post("/api/scores", json={"points": 5})
    assert r.status_code == 400
    body = r.json()
    assert body["message"] == "error.validation"
    assert any(err["field"] == "name" for err in body["fieldErrors"])


def test_out_of_range_id_in_path_is_bad_request(client):
    too_big = 2**63
    r = client.get(f"/api/scores/{too_big}")
    assert r.status_code == 400
    assert r.json()["message"] == "error.validation"

    r = client.delete(f"/api/scores/{too_big}")
    assert r.status_code == 400
    assert r.json()["message"] == "error.validation"

    r = client.get(f"/api/scores/{-(2**63) - 1}")
    assert r.status_code == 400


def test_out_of_range_body_values_are_bad_request(client, session):
    r = client.put("/api/scores", json={"id": 2**63, "name": "x", "points": 1})
    assert r.status_code == 400
    assert any(err["field"] == "id" for err in r.json()["fieldErrors"])

    r = client.post("/api/scores", json={"name": "x", "points": 2**63})
    assert r.status_code == 400
    assert any(err["field"] == "points" for err in r.json()["fieldErrors"])
    assert session.query(Score).count() == 0


def test_page_beyond_storable_offset_is_bad_request(client):
    r = client.get("/api/scores", params={"page": 2**62, "size": 20})
    assert r.status_code == 400
    assert r.json()["errorKey"] == "pageinvalid"

    r = client.get("/api/scores", params={"page": 2**63, "size": 1})
    assert r.status_code == 400
    assert r.json()["message"] == "error.validation"


def test_alice_lifecycle(client):
    r = client.post("/api/scores", json={"name": "alice", "points": 10})
    assert r.status_code == 201
    assert r.json() == {"id": 1, "name": "alice", "points": 10}

    r = client.put("/api/scores", json={"id": 1, "name": "alice", "points": 20})
    assert r.status_code == 200
    assert r.json() == {"id": 1, "name": "alice", "points": 20}

    assert client.delete("/api/scores/1").status_code == 200
    assert client.get("/api/scores/1").status_code == 404
