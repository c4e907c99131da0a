# ============================================================================
# SERVICE DOCUMENT
# ============================================================================


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_service_document_lists_entity_sets(client):
    response = client.get("/odata/")

    assert response.status_code == 200
    assert set(response.json()["entity_sets"]) == {
        "Buildings",
        "Rooms",
        "Employees",
        "Managers",
        "Teams",
        "Photos",
    }


# ============================================================================
# READ
# ============================================================================


def test_read_entity_set(client):
    response = client.get("/odata/Buildings")

    assert response.status_code == 200
    assert response.json() == [
        {"id": "1", "name": "Building 1"},
        {"id": "2", "name": "Building 2"},
        {"id": "3", "name": "Building 3"},
    ]


def test_read_unknown_entity_set(client):
    response = client.get("/odata/Unknown")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_read_entity(client):
    response = client.get("/odata/Employees/1")

    assert response.status_code == 200
    data = response.json()
    assert data["employee_id"] == "1"
    assert data["employee_name"] == "Frederic Fall"
    assert data["entry_date"] == "2003-07-01"
    assert "image" not in data
    assert "manager" not in data


def test_read_entity_named_key(client):
    response = client.get("/odata/Employees/EmployeeId='2'")

    assert response.status_code == 200
    assert response.json()["employee_name"] == "Peter Burke"


def test_read_entity_composite_key(client):
    response = client.get("/odata/Photos/(Name='Logo',ImageFormat='svg')")

    assert response.status_code == 200
    assert response.json() == {"name": "Logo", "image_format": "svg", "mime_type": "image/svg+xml"}


def test_read_entity_composite_key_requires_names(client):
    response = client.get("/odata/Photos/Logo")

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_read_entity_not_found(client):
    response = client.get("/odata/Buildings/99")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


# ============================================================================
# CREATE / UPDATE / DELETE
# ============================================================================


def test_create_entity(client):
    response = client.post("/odata/Buildings", json={"name": "Building 4"})

    assert response.status_code == 201
    assert response.json() == {"id": "4", "name": "Building 4"}

    response = client.get("/odata/Buildings/4")
    assert response.status_code == 200
    assert response.json()["name"] == "Building 4"


def test_create_entity_with_taken_key(client):
    """Test that a taken key is replaced by a generated one instead of overwriting."""
    response = client.post("/odata/Teams", json={"id": "1", "name": "Impostor"})

    assert response.status_code == 201
    assert response.json()["id"] != "1"
    assert client.get("/odata/Teams/1").json()["name"] == "Team 1"


def test_create_entity_invalid_payload(client):
    response = client.post("/odata/Rooms", json={"name": "Lab", "seats": "many"})

    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"


def test_update_entity(client):
    response = client.put("/odata/Rooms/1", json={"id": "ignored", "name": "Board Room", "seats": 12})

    assert response.status_code == 200
    data = response.json()
    assert data["id"] == "1"
    assert data["name"] == "Board Room"
    assert data["seats"] == 12
    assert data["version"] is None

    # Navigation links survive the replacement
    response = client.get("/odata/Rooms/1/Building")
    assert response.status_code == 200
    assert response.json()["name"] == "Building 1"


def test_update_entity_keeps_media_content(client):
    response = client.put("/odata/Managers/1", json={"employee_name": "Walter W."})
    assert response.status_code == 200

    response = client.get("/odata/Managers/1/$value")
    assert response.status_code == 200
    assert response.headers["content-type"] == "image/jpeg"
    assert response.content == b"\xff\xd8\xff\xe0walter"


def test_update_entity_not_found(client):
    response = client.put("/odata/Rooms/99", json={"name": "Ghost"})

    assert response.status_code == 404


def test_delete_entity(client):
    response = client.delete("/odata/Teams/1")
    assert response.status_code == 204

    response = client.get("/odata/Teams/1")
    assert response.status_code == 404

    response = client.get("/odata/Teams")
    assert [team["name"] for team in response.json()] == ["Team 2"]


def test_delete_entity_not_found(client):
    response = client.delete("/odata/Teams/99")

    assert response.status_code == 404


# ============================================================================
# MEDIA RESOURCES
# ============================================================================


def test_read_media_resource(client):
    response = client.get("/odata/Photos/Name='Logo',ImageFormat='png'/$value")

    assert response.status_code == 200
    assert response.headers["content-type"] == "image/png"
    assert response.content == b"\x89PNG\r\n\x1a\nlogo"


def test_read_media_resource_without_content(client):
    response = client.get("/odata/Managers/2/$value")

    assert response.status_code == 404


def test_write_media_resource_not_implemented(client):
    response = client.put(
        "/odata/Photos/Name='Logo',ImageFormat='png'/$value",
        content=b"new",
        headers={"Content-Type": "image/png"},
    )

    assert response.status_code == 501
    assert response.json()["code"] == "NOT_IMPLEMENTED"


# ============================================================================
# NAVIGATION
# ============================================================================


def test_read_related_to_many(client):
    response = client.get("/odata/Buildings/2/Rooms")

    assert response.status_code == 200
    assert [room["name"] for room in response.json()] == ["Room 2", "Room 3"]


def test_read_related_to_many_by_key(client):
    response = client.get("/odata/Buildings/2/Rooms/3")

    assert response.status_code == 200
    assert response.json()["name"] == "Room 3"


def test_read_related_to_many_by_unrelated_key(client):
    response = client.get("/odata/Buildings/2/Rooms/1")

    assert response.status_code == 404


def test_read_related_to_one(client):
    response = client.get("/odata/Employees/1/Manager")

    assert response.status_code == 200
    assert response.json()["employee_name"] == "Walter Winter"


def test_read_related_from_subclass(client):
    response = client.get("/odata/Managers/2/Employees")

    assert response.status_code == 200
    assert [e["employee_name"] for e in response.json()] == ["John Field", "Maria Hill"]


def test_read_related_to_one_missing(client):
    response = client.get("/odata/Managers/2/Manager")

    assert response.status_code == 404


def test_read_related_unknown_navigation(client):
    response = client.get("/odata/Buildings/1/Nope")

    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"


def test_write_link_not_implemented(client):
    response = client.put("/odata/Buildings/1/$links/Rooms", json={"id": "3"})

    assert response.status_code == 501


def test_delete_link_not_implemented(client):
    response = client.delete("/odata/Buildings/1/$links/Rooms")

    assert response.status_code == 501
