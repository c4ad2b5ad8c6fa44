def test_pics_are_admin_managed_and_soft_deleted(client, users):
    admin = users["admin"]["headers"]
    r = client.post("/pics", json={"name": "Sari", "phone": "0812"}, headers=admin)
    assert r.status_code == 200
    sari = r.json()["id"]
    client.post("/pics", json={"name": "Budi"}, headers=admin)

    names = [p["name"] for p in client.get("/pics", headers=users["inputer"]["headers"]).json()]
    assert names == ["Budi", "Sari"]

    assert client.post("/pics", json={"name": "X"}, headers=users["inputer"]["headers"]).status_code == 403

    r = client.patch(f"/pics/{sari}", json={"name": "Sari W", "role": "Operator"}, headers=admin)
    assert r.json()["name"] == "Sari W"
    assert r.json()["phone"] == "0812"

    assert client.delete(f"/pics/{sari}", headers=admin).status_code == 200
    names = [p["name"] for p in client.get("/pics", headers=admin).json()]
    assert names == ["Budi"]
    assert client.delete("/pics/missing", headers=admin).status_code == 404


def test_category_name_resolves_on_order_creation(client, users):
    admin = users["admin"]["headers"]
    r = client.post("/categories", json={"name": "Offset Printing"}, headers=admin)
    assert r.status_code == 200
    category = r.json()
    assert category["slug"] == "offset-printing"
    assert client.post("/categories", json={"name": "Offset Printing"}, headers=admin).status_code == 400

    payload = {"title": "Kalender", "category": "Offset Printing", "tasks": [{"name": "Cetak"}]}
    r = client.post("/orders/task-based", json=payload, headers=users["inputer"]["headers"])
    assert r.status_code == 200
    order = client.get(f"/orders/{r.json()['order_id']}", headers=admin).json()
    assert order["category_id"] == category["id"]

    payload["category"] = "Sablon"
    r = client.post("/orders/task-based", json=payload, headers=users["inputer"]["headers"])
    assert r.status_code == 400

    order_id = order["id"]
    r = client.patch(f"/orders/{order_id}", json={"category_id": "does-not-exist"}, headers=admin)
    assert r.status_code == 400
    assert client.get(f"/orders/{order_id}", headers=admin).json()["category_id"] == category["id"]
    r = client.patch(f"/orders/{order_id}", json={"category_id": "Offset Printing"}, headers=admin)
    assert r.status_code == 200
    assert r.json()["category_id"] == category["id"]

    assert client.delete(f"/categories/{category['id']}", headers=admin).status_code == 200
    assert client.get("/categories", headers=admin).json() == []


def test_template_order_builds_steps_and_eta(client, users):
    admin = users["admin"]["headers"]
    category = client.post("/categories", json={"name": "Digital"}, headers=admin).json()
    template = {
        "category_id": category["id"],
        "code": "STK",
        "name": "Stiker",
        "steps": [
            {"id": "setup", "name": "Setting", "type": "FIXED", "order_index": 1, "base_duration_minutes": 30},
            {"id": "print", "name": "Print", "type": "RATE", "order_index": 2,
             "base_duration_minutes": 0, "rate_per_unit_minutes": 2, "unit": "lembar"},
        ],
    }
    r = client.post("/templates", json=template, headers=admin)
    assert r.status_code == 200
    template_id = r.json()["id"]
    assert client.post("/templates", json=template, headers=users["inputer"]["headers"]).status_code == 403

    listed = client.get("/templates", params={"category_id": category["id"]}, headers=users["inputer"]["headers"])
    assert [t["code"] for t in listed.json()] == ["STK"]

    headers = users["inputer"]["headers"]
    r = client.post(
        "/orders",
        json={"title": "Stiker bulat", "client_name": "Toko A", "value_idr": 200000,
              "template_id": template_id, "quantities": {"print": 15}},
        headers=headers,
    )
    assert r.status_code == 200
    order = client.get(f"/orders/{r.json()['order_id']}", headers=headers).json()
    assert order["is_task_based"] is False
    assert order["category_id"] == category["id"]
    assert [s["duration_minutes"] for s in order["steps"]] == [30, 30]
    assert order["eta_at"] is not None

    r = client.post(f"/orders/{order['id']}/adjustments",
                    json={"reason": "Antri mesin", "minutes_delta": 60}, headers=headers)
    assert r.status_code == 200
    assert r.json()["adjustments"][0]["created_by"] == users["inputer"]["id"]
    assert r.json()["eta_at"] != order["eta_at"]

    r = client.post("/orders", json={"title": "X", "template_id": "missing"}, headers=headers)
    assert r.status_code == 404
    r = client.post("/orders", json={"title": "X", "template_id": template_id}, headers=users["approver"]["headers"])
    assert r.status_code == 403
