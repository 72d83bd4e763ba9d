"""API tests for /people routes."""


class TestCreatePerson:
    def test_create(self, client):
        resp = client.post("/people", json={"name": "Pramod", "group_tag": "family"})
        assert resp.status_code == 201
        data = resp.json()
        assert data["name"] == "Pramod"
        assert data["group_tag"] == "family"
        assert isinstance(data["id"], int)

    def test_group_defaults_to_friend(self, client):
        data = client.post("/people", json={"name": "Amit"}).json()
        assert data["group_tag"] == "friend"

    def test_create_then_get(self, client):
        body = {"name": "Isha", "dob": "1995-04-02", "phone": "555-0100",
                "email": "isha@example.com", "notes": "Sister", "group_tag": "family"}
        created = client.post("/people", json=body).json()
        fetched = client.get(f"/people/{created['id']}").json()
        assert fetched == {"id": created["id"], **body}

    def test_email_stored_as_sent(self, client):
        created = client.post("/people", json={"name": "Isha", "email": "Isha@EXAMPLE.COM"}).json()
        assert created["email"] == "Isha@EXAMPLE.COM"
        assert client.get(f"/people/{created['id']}").json()["email"] == "Isha@EXAMPLE.COM"

    def test_missing_name_is_400(self, client):
        resp = client.post("/people", json={"group_tag": "family"})
        assert resp.status_code == 400
        assert resp.json()["detail"][0]["loc"] == ["body", "name"]

    def test_empty_name_is_400_and_not_persisted(self, client):
        resp = client.post("/people", json={"name": ""})
        assert resp.status_code == 400
        assert client.get("/people").json() == []

    def test_bad_email_is_400(self, client):
        resp = client.post("/people", json={"name": "X", "email": "nope"})
        assert resp.status_code == 400
        assert resp.json()["detail"][0]["loc"] == ["body", "email"]

    def test_all_failures_listed(self, client):
        resp = client.post("/people", json={"name": "", "email": "nope"})
        assert resp.status_code == 400
        locs = {tuple(e["loc"]) for e in resp.json()["detail"]}
        assert locs == {("body", "name"), ("body", "email")}


class TestListPeople:
    def test_list(self, client, make_person):
        make_person("A")
        make_person("B")
        resp = client.get("/people")
        assert resp.status_code == 200
        assert [p["name"] for p in resp.json()] == ["A", "B"]

    def test_filters(self, client, make_person):
        make_person("Pramod", group_tag="family")
        make_person("Prakash", group_tag="friend")
        make_person("Isha", group_tag="family")
        assert [p["name"] for p in client.get("/people", params={"q": "pra"}).json()] == ["Pramod", "Prakash"]
        assert [p["name"] for p in client.get("/people", params={"group": "family"}).json()] == ["Pramod", "Isha"]
        both = client.get("/people", params={"q": "pra", "group": "family"}).json()
        assert [p["name"] for p in both] == ["Pramod"]


class TestGetPerson:
    def test_not_found(self, client):
        resp = client.get("/people/999")
        assert resp.status_code == 404
        assert "not found" in resp.json()["detail"]

    def test_non_integer_id(self, client):
        assert client.get("/people/abc").status_code == 400


class TestUpdatePerson:
    def test_partial(self, client, make_person):
        p = make_person("Ravi", group_tag="colleague", email="ravi@work.com")
        resp = client.put(f"/people/{p['id']}", json={"phone": "123"})
        assert resp.status_code == 200
        data = resp.json()
        assert data["phone"] == "123"
        assert data["email"] == "ravi@work.com"
        assert data["group_tag"] == "colleague"

    def test_explicit_null_clears(self, client, make_person):
        p = make_person("Ravi", notes="old")
        data = client.put(f"/people/{p['id']}", json={"notes": None}).json()
        assert data["notes"] is None

    def test_empty_group_kept_null_group_defaults(self, client, make_person):
        p = make_person("Ravi", group_tag="colleague")
        assert client.put(f"/people/{p['id']}", json={"group_tag": ""}).json()["group_tag"] == ""
        assert client.put(f"/people/{p['id']}", json={"group_tag": None}).json()["group_tag"] == "friend"

    def test_not_found(self, client):
        assert client.put("/people/999", json={"name": "Ghost"}).status_code == 404

    def test_invalid(self, client, make_person):
        p = make_person("Ravi")
        assert client.put(f"/people/{p['id']}", json={"email": "bad"}).status_code == 400
        assert client.put(f"/people/{p['id']}", json={"name": ""}).status_code == 400
        assert client.put(f"/people/{p['id']}", json={"name": None}).status_code == 400
        assert client.get(f"/people/{p['id']}").json()["name"] == "Ravi"


class TestDeletePerson:
    def test_delete(self, client, make_person):
        p = make_person("Temp")
        resp = client.delete(f"/people/{p['id']}")
        assert resp.status_code == 204
        assert resp.content == b""
        assert client.get(f"/people/{p['id']}").status_code == 404

    def test_idempotent(self, client):
        assert client.delete("/people/999").status_code == 204

    def test_cascades(self, client, make_person):
        a, b, c = make_person("A"), make_person("B"), make_person("C")
        client.post("/relationships", json={"person_id": a["id"], "related_person_id": b["id"], "relationship_type": "x"})
        client.post("/relationships", json={"person_id": c["id"], "related_person_id": a["id"], "relationship_type": "y"})
        client.post("/relationships", json={"person_id": b["id"], "related_person_id": c["id"], "relationship_type": "z"})
        client.delete(f"/people/{a['id']}")
        rels = client.get("/relationships").json()
        assert [r["relationship_type"] for r in rels] == ["z"]


class TestPersonRelationships:
    def test_lists_both_directions(self, client, make_person):
        a, b = make_person("A"), make_person("B")
        client.post("/relationships", json={"person_id": a["id"], "related_person_id": b["id"], "relationship_type": "x"})
        client.post("/relationships", json={"person_id": b["id"], "related_person_id": a["id"], "relationship_type": "y"})
        resp = client.get(f"/people/{a['id']}/relationships")
        assert resp.status_code == 200
        assert [r["relationship_type"] for r in resp.json()] == ["x", "y"]

    def test_unknown_person(self, client):
        assert client.get("/people/5/relationships").status_code == 404
