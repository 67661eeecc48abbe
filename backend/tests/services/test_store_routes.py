"""HTTP route tests: status codes, envelopes and payload shapes.

Tests cover:
    - Create (201) with derived slug; validation failures (400) with field details
    - 404 envelope for unknown slugs and store ids
    - Review flow through the API and materialized reviews on reads
    - Top-rated report serialized with "averageRating"
    - Tag report, pagination, proximity and partial updates
    - 409 DUPLICATE_SLUG envelope on a slug race
    - Health probes
"""

from uuid import uuid4

from storedir.infrastructure.store_repository import SqlStoreRepository


def _payload(author, name="Coffee Shop", tags=None, coordinates=None):
    return {
        "name": name,
        "tags": tags or [],
        "location": {
            "type": "Point",
            "coordinates": coordinates or [-79.3832, 43.6532],
            "address": "1 Front St, Toronto",
        },
        "author_id": str(author.id),
    }


async def _create(client, author, **kwargs) -> dict:
    resp = await client.post("/api/v1/stores", json=_payload(author, **kwargs))
    assert resp.status_code == 201
    return resp.json()


async def test_create_store_returns_201_with_slug(client, author):
    first = await _create(client, author)
    second = await _create(client, author)
    assert first["slug"] == "coffee-shop"
    assert second["slug"] == "coffee-shop-2"
    assert first["reviews"] == []
    assert first["author_id"] == str(author.id)


async def test_create_store_blank_name_returns_400(client, author):
    resp = await client.post(
        "/api/v1/stores", json=_payload(author, name="   "),
    )
    assert resp.status_code == 400
    error = resp.json()["error"]
    assert error["code"] == "VALIDATION_ERROR"
    assert any("name" in d["field"] for d in error["details"])


async def test_create_store_bad_coordinates_returns_400(client, author):
    resp = await client.post(
        "/api/v1/stores", json=_payload(author, coordinates=[1.0, 2.0, 3.0]),
    )
    assert resp.status_code == 400


async def test_create_store_unknown_author_returns_400(client, author):
    payload = _payload(author)
    payload["author_id"] = str(uuid4())
    resp = await client.post("/api/v1/stores", json=payload)
    assert resp.status_code == 400
    assert resp.json()["error"]["context"]["field"] == "author_id"


async def test_create_store_symbol_name_returns_400(client, author):
    resp = await client.post("/api/v1/stores", json=_payload(author, name="***"))
    assert resp.status_code == 400
    assert resp.json()["error"]["context"]["field"] == "name"


async def test_get_unknown_slug_returns_404_envelope(client):
    resp = await client.get("/api/v1/stores/does-not-exist")
    assert resp.status_code == 404
    error = resp.json()["error"]
    assert error["code"] == "RESOURCE_NOT_FOUND"
    assert error["category"] == "resource_not_found"


async def test_review_flow_materializes_on_read(client, author):
    store = await _create(client, author)
    for rating in (5, 3):
        resp = await client.post(
            f"/api/v1/stores/id/{store['id']}/reviews",
            json={"rating": rating, "text": "Nice", "author_id": str(author.id)},
        )
        assert resp.status_code == 201
        assert resp.json()["store_id"] == store["id"]

    fetched = (await client.get("/api/v1/stores/coffee-shop")).json()
    assert sorted(r["rating"] for r in fetched["reviews"]) == [3, 5]


async def test_review_rating_out_of_range_returns_400(client, author):
    store = await _create(client, author)
    resp = await client.post(
        f"/api/v1/stores/id/{store['id']}/reviews", json={"rating": 0},
    )
    assert resp.status_code == 400


async def test_review_for_unknown_store_returns_404(client):
    resp = await client.post(
        f"/api/v1/stores/id/{uuid4()}/reviews", json={"rating": 4},
    )
    assert resp.status_code == 404


async def test_top_stores_uses_average_rating_key(client, author):
    store = await _create(client, author)
    lonely = await _create(client, author, name="Lonely")
    for rating in (4, 5):
        await client.post(
            f"/api/v1/stores/id/{store['id']}/reviews", json={"rating": rating},
        )
    await client.post(
        f"/api/v1/stores/id/{lonely['id']}/reviews", json={"rating": 5},
    )

    resp = await client.get("/api/v1/stores/top")
    assert resp.status_code == 200
    top = resp.json()
    assert len(top) == 1
    assert top[0]["slug"] == "coffee-shop"
    assert top[0]["averageRating"] == 4.5
    assert len(top[0]["reviews"]) == 2


async def test_tags_report(client, author):
    await _create(client, author, name="A", tags=["wifi", "vegan"])
    await _create(client, author, name="B", tags=["wifi"])

    resp = await client.get("/api/v1/stores/tags", params={"tag": "vegan"})
    assert resp.status_code == 200
    body = resp.json()
    assert body["tags"] == [
        {"tag": "wifi", "count": 2},
        {"tag": "vegan", "count": 1},
    ]
    assert [s["name"] for s in body["stores"]] == ["A"]


async def test_list_stores_paginates(client, author):
    for i in range(7):
        await _create(client, author, name=f"Store {i}")

    first = (await client.get("/api/v1/stores")).json()
    assert first["total"] == 7
    assert first["pages"] == 2
    assert len(first["stores"]) == 6

    second = (await client.get("/api/v1/stores", params={"page": 2})).json()
    assert [s["name"] for s in second["stores"]] == ["Store 0"]


async def test_search_endpoint(client, author):
    await _create(client, author, name="Bean Counter")
    await _create(client, author, name="Bookshop")
    resp = await client.get("/api/v1/stores/search", params={"q": "bean"})
    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()] == ["Bean Counter"]


async def test_near_endpoint(client, author):
    await _create(client, author, name="Here")
    await _create(client, author, name="Montreal", coordinates=[-73.5673, 45.5017])
    resp = await client.get(
        "/api/v1/stores/near", params={"lng": -79.3832, "lat": 43.6532},
    )
    assert resp.status_code == 200
    body = resp.json()
    assert [s["name"] for s in body] == ["Here"]
    assert body[0]["distance_m"] < 1.0


async def test_patch_rename_rederives_slug(client, author):
    store = await _create(client, author)
    resp = await client.patch(
        f"/api/v1/stores/id/{store['id']}", json={"name": "Tea Room"},
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "tea-room"
    assert (await client.get("/api/v1/stores/tea-room")).status_code == 200


async def test_patch_rename_to_same_base_returns_200(client, author):
    first = await _create(client, author)
    await _create(client, author)
    resp = await client.patch(
        f"/api/v1/stores/id/{first['id']}", json={"name": "Coffee Shop!"},
    )
    assert resp.status_code == 200
    assert resp.json()["slug"] == "coffee-shop"


async def test_patch_slug_is_forbidden(client, author):
    store = await _create(client, author)
    resp = await client.patch(
        f"/api/v1/stores/id/{store['id']}", json={"slug": "custom"},
    )
    assert resp.status_code == 400


async def test_patch_unknown_store_returns_404(client):
    resp = await client.patch(f"/api/v1/stores/id/{uuid4()}", json={"name": "X"})
    assert resp.status_code == 404


async def test_slug_race_returns_409(client, author, monkeypatch):
    await _create(client, author)

    async def stale_lookup(self, base):
        return []

    monkeypatch.setattr(SqlStoreRepository, "find_slugs_like", stale_lookup)
    resp = await client.post("/api/v1/stores", json=_payload(author))
    assert resp.status_code == 409
    error = resp.json()["error"]
    assert error["code"] == "DUPLICATE_SLUG"
    assert error["message"] == "Slug 'coffee-shop' already exists. Retry the request."
    assert error["context"]["slug"] == "coffee-shop"


async def test_health_probes(client):
    live = await client.get("/api/v1/health/")
    assert live.status_code == 200
    assert live.json()["status"] == "healthy"

    ready = await client.get("/api/v1/health/ready")
    assert ready.status_code == 200
    assert ready.json()["checks"]["database"] == "healthy"
