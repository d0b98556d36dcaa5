import pytest


@pytest.fixture
def stored_shapes(fake_supabase, user_id):
    fake_supabase.tables["canvas_objects"] = [
        {"id": 1, "user_id": user_id, "object_type": "rectangle",
         "object_data": {"width": 100, "height": 60, "x": 100, "y": 100, "fillColor": "#3b82f6", "strokeColor": "#1e40af"},
         "created_at": "2025-01-01T00:00:00+00:00"},
        {"id": 2, "user_id": user_id, "object_type": "line",
         "object_data": {"x1": 50, "y1": 50, "x2": 150, "y2": 150, "strokeColor": "#ef4444", "strokeWidth": 3},
         "created_at": "2025-01-01T00:00:01+00:00"},
        {"id": 3, "user_id": "someone-else", "object_type": "circle",
         "object_data": {"radius": 30, "x": 200, "y": 150, "fillColor": "#10b981", "strokeColor": "#059669"},
         "created_at": "2025-01-01T00:00:02+00:00"},
    ]
    return fake_supabase.tables["canvas_objects"]


def test_list_returns_only_callers_objects(client, auth_headers, stored_shapes):
    resp = client.get("/api/canvas/objects", headers=auth_headers)
    assert resp.status_code == 200
    objects = resp.json()["objects"]
    assert [(o["id"], o["type"]) for o in objects] == [(1, "rectangle"), (2, "line")]


def test_move_rectangle(client, auth_headers, stored_shapes):
    resp = client.patch("/api/canvas/objects/1", json={"x": 10, "y": 20}, headers=auth_headers)
    assert resp.status_code == 200
    params = resp.json()["parameters"]
    assert (params["x"], params["y"]) == (10, 20)
    assert params["width"] == 100


def test_move_line_translates_both_ends(client, auth_headers, stored_shapes):
    resp = client.patch("/api/canvas/objects/2", json={"x": 60, "y": 40}, headers=auth_headers)
    params = resp.json()["parameters"]
    assert (params["x1"], params["y1"], params["x2"], params["y2"]) == (60, 40, 160, 140)


def test_move_foreign_object_is_404(client, auth_headers, stored_shapes):
    resp = client.patch("/api/canvas/objects/3", json={"x": 0, "y": 0}, headers=auth_headers)
    assert resp.status_code == 404


def test_delete(client, auth_headers, stored_shapes, fake_supabase):
    resp = client.delete("/api/canvas/objects/1", headers=auth_headers)
    assert resp.status_code == 204
    assert [r["id"] for r in fake_supabase.tables["canvas_objects"]] == [2, 3]

    assert client.delete("/api/canvas/objects/1", headers=auth_headers).status_code == 404


def test_storage_failure_is_500(client, auth_headers, fake_supabase):
    fake_supabase.fail_tables.add("canvas_objects")
    resp = client.get("/api/canvas/objects", headers=auth_headers)
    assert resp.status_code == 500


def test_move_row_with_unsupported_type_is_404(client, auth_headers, fake_supabase, user_id):
    fake_supabase.tables["canvas_objects"] = [
        {"id": 7, "user_id": user_id, "object_type": "rect", "object_data": {"x": 1, "y": 1},
         "created_at": "2025-01-01T00:00:00+00:00"},
    ]
    assert client.get("/api/canvas/objects", headers=auth_headers).json()["objects"] == []

    resp = client.patch("/api/canvas/objects/7", json={"x": 0, "y": 0}, headers=auth_headers)

    assert resp.status_code == 404
    assert fake_supabase.tables["canvas_objects"][0]["object_data"] == {"x": 1, "y": 1}
