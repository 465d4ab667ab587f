PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 32


def _create_guide(client, guide_data, **overrides):
    resp = client.post("/api/v1/guides", json={**guide_data, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def _create_homestay(client, homestay_data, **overrides):
    resp = client.post("/api/v1/homestays", json={**homestay_data, **overrides})
    assert resp.status_code == 201, resp.text
    return resp.json()


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_create_and_get_guide(client, guide_data):
    created = _create_guide(client, guide_data)

    assert created["name"] == "Ravi Oraon"
    assert created["availability"] == "available"
    assert created["location"] == {"district": "Latehar", "state": "Jharkhand"}
    assert created["pricing"] == {"halfDay": 800.0, "fullDay": 1500.0, "multiDay": None, "workshop": None}
    assert created["createdAt"] == created["updatedAt"]

    fetched = client.get(f"/api/v1/guides/{created['id']}")
    assert fetched.status_code == 200
    assert fetched.json() == created


def test_create_guide_validation_errors(client, guide_data):
    resp = client.post("/api/v1/guides", json={**guide_data, "specializations": [], "pricing": {"halfDay": -5, "fullDay": 10}})

    assert resp.status_code == 422
    detail = {(e["kind"], e["field"]) for e in resp.json()["detail"]}
    assert detail == {
        ("EmptyRequiredCollection", "specializations"),
        ("OutOfRangeValue", "pricing.halfDay"),
    }


def test_patch_guide(client, guide_data):
    created = _create_guide(client, guide_data)

    resp = client.patch(f"/api/v1/guides/{created['id']}", json={"availability": "busy"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["availability"] == "busy"
    assert body["name"] == created["name"]
    assert body["createdAt"] == created["createdAt"]
    assert body["updatedAt"] >= created["updatedAt"]


def test_patch_guide_rejects_null_required(client, guide_data):
    created = _create_guide(client, guide_data)
    resp = client.patch(f"/api/v1/guides/{created['id']}", json={"name": None})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["kind"] == "MissingRequiredField"
    assert resp.json()["detail"][0]["field"] == "name"


def test_unknown_guide_is_404(client):
    assert client.get("/api/v1/guides/nope").status_code == 404
    assert client.patch("/api/v1/guides/nope", json={"availability": "busy"}).status_code == 404
    assert client.delete("/api/v1/guides/nope").status_code == 404


def test_filter_and_search_guides(client, guide_data):
    trekker = _create_guide(client, guide_data)
    weaver = _create_guide(
        client,
        guide_data,
        name="Lalita Munda",
        bio="Tussar silk weaving demonstrations in Godda.",
        specializations=["handloom"],
        location={"district": "Godda"},
        availability="busy",
    )

    def ids(resp):
        assert resp.status_code == 200, resp.text
        return [g["id"] for g in resp.json()]

    assert ids(client.get("/api/v1/guides", params={"specialization": "handloom"})) == [weaver["id"]]
    assert ids(client.get("/api/v1/guides", params={"availability": "available"})) == [trekker["id"]]
    assert ids(client.get("/api/v1/guides", params={"district": "Latehar"})) == [trekker["id"]]
    assert ids(client.get("/api/v1/guides/search", params={"q": "silk"})) == [weaver["id"]]
    assert ids(client.get("/api/v1/guides/search", params={"q": "surfing"})) == []


def test_invalid_availability_filter(client):
    resp = client.get("/api/v1/guides", params={"availability": "asleep"})
    assert resp.status_code == 422
    assert resp.json()["detail"] == [
        {"kind": "InvalidEnumValue", "field": "availability", "message": resp.json()["detail"][0]["message"]}
    ]


def test_delete_guide(client, guide_data):
    created = _create_guide(client, guide_data)
    assert client.delete(f"/api/v1/guides/{created['id']}").status_code == 204
    assert client.get(f"/api/v1/guides/{created['id']}").status_code == 404


def test_create_homestay_defaults_and_ignores_status(client, homestay_data):
    created = _create_homestay(client, homestay_data, status="pending")

    assert created["status"] == "active"
    assert created["propertyType"] == "entire"
    assert created["amenities"] == []
    assert created["images"] == []
    assert created["houseRules"] is None
    assert created["location"]["state"] == "Jharkhand"
    assert created["location"]["coordinates"] is None
    assert created["pricing"]["basePrice"] == 1800.0


def test_homestay_base_price_boundary(client, homestay_data):
    resp = client.post("/api/v1/homestays", json={**homestay_data, "pricing": {"basePrice": 99}})
    assert resp.status_code == 422
    assert resp.json()["detail"][0]["field"] == "pricing.basePrice"
    assert resp.json()["detail"][0]["kind"] == "OutOfRangeValue"

    _create_homestay(client, homestay_data, pricing={"basePrice": 100})


def test_homestay_price_range_and_status(client, homestay_data):
    cheap = _create_homestay(client, homestay_data, pricing={"basePrice": 600})
    mid = _create_homestay(client, homestay_data, pricing={"basePrice": 1500})
    _create_homestay(client, homestay_data, pricing={"basePrice": 4000})
    client.patch(f"/api/v1/homestays/{mid['id']}", json={"status": "inactive"})

    resp = client.get("/api/v1/homestays", params={"min_price": 500, "max_price": 2000})
    assert [h["id"] for h in resp.json()] == [cheap["id"], mid["id"]]

    resp = client.get("/api/v1/homestays", params={"status": "inactive"})
    assert [h["id"] for h in resp.json()] == [mid["id"]]


def test_search_homestays(client, homestay_data):
    created = _create_homestay(client, homestay_data)
    resp = client.get("/api/v1/homestays/search", params={"q": "Santhali"})
    assert [h["id"] for h in resp.json()] == [created["id"]]


def test_upload_homestay_image(client, homestay_data, tmp_path, monkeypatch):
    from localstay.config import settings

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "CLOUDINARY_URL", "")
    created = _create_homestay(client, homestay_data)

    resp = client.post(
        f"/api/v1/homestays/{created['id']}/images",
        files={"image": ("porch.png", PNG_BYTES, "image/png")},
    )

    assert resp.status_code == 201, resp.text
    (url,) = resp.json()["images"]
    assert url.startswith("/static/uploads/") and url.endswith(".png")
    assert (tmp_path / url.rsplit("/", 1)[1]).read_bytes() == PNG_BYTES


def test_upload_rejects_non_images(client, homestay_data, tmp_path, monkeypatch):
    from localstay.config import settings

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    created = _create_homestay(client, homestay_data)

    resp = client.post(
        f"/api/v1/homestays/{created['id']}/images",
        files={"image": ("notes.txt", b"just some plain text here", "text/plain")},
    )
    assert resp.status_code == 400
    assert client.get(f"/api/v1/homestays/{created['id']}").json()["images"] == []


def test_upload_to_unknown_homestay(client):
    resp = client.post("/api/v1/homestays/nope/images", files={"image": ("a.png", PNG_BYTES, "image/png")})
    assert resp.status_code == 404


def test_create_guide_with_null_name_is_missing(client, guide_data):
    resp = client.post("/api/v1/guides", json={**guide_data, "name": None})
    assert resp.status_code == 422
    (error,) = resp.json()["detail"]
    assert (error["kind"], error["field"]) == ("MissingRequiredField", "name")


def test_default_rate_limit_middleware_is_installed():
    from slowapi.middleware import SlowAPIMiddleware

    from localstay.main import app

    assert any(m.cls is SlowAPIMiddleware for m in app.user_middleware)


def test_upload_discards_image_when_listing_cannot_take_it(client, homestay_data, tmp_path, monkeypatch):
    from localstay.config import settings
    from localstay.services import homestays

    monkeypatch.setattr(settings, "UPLOAD_DIR", str(tmp_path))
    monkeypatch.setattr(settings, "CLOUDINARY_URL", "")
    created = _create_homestay(client, homestay_data)
    # Listing removed between the existence check and the append
    monkeypatch.setattr(homestays, "add_homestay_image", lambda db, homestay_id, url: None)

    resp = client.post(
        f"/api/v1/homestays/{created['id']}/images",
        files={"image": ("porch.png", PNG_BYTES, "image/png")},
    )

    assert resp.status_code == 404
    assert list(tmp_path.iterdir()) == []
