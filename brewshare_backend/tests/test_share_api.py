from brewshare_backend.app.routers import share as share_router

def test_import_bean_text(client):
    r = client.post("/api/share/import", json={"text": "【咖啡豆】Ethiopia Yirgacheffe\n容量: 200g\n产地: 埃塞俄比亚"})
    assert r.status_code == 200
    body = r.json()
    assert body["ok"] is True and body["kind"] == "bean"
    assert body["record"]["capacity"] == "200"
    assert body["record"]["remaining"] == "200"
    assert body["record"]["roastLevel"] == "浅度烘焙"

def test_import_unrecognized_is_not_an_error(client):
    r = client.post("/api/share/import", json={"text": "hello"})
    assert r.status_code == 200
    assert r.json() == {"ok": False, "kind": None, "record": None}

def test_method_json_errors_carry_kind(client):
    r = client.post("/api/share/method/json", json={"text": '{"method": "A"}'})
    assert r.status_code == 422
    assert r.json()["detail"]["error"] == "EmptyStages"

    r = client.post("/api/share/method/json", json={"text": "{broken"})
    assert r.status_code == 422
    assert r.json()["detail"]["error"] == "MalformedJson"

def test_method_json_success(client):
    text = '```json\n{"method": "A", "params": {"stages": [{"time": 30, "pourType": "spiral"}]}}\n```'
    r = client.post("/api/share/method/json", json={"text": text})
    assert r.status_code == 200
    rec = r.json()["record"]
    assert rec["name"] == "A"
    assert rec["params"]["stages"][0]["pourType"] == "circle"
    assert rec["params"]["grindSize"] == "中细"

def test_clean(client):
    r = client.post("/api/share/clean", json={"text": 'see: {"a": 1} thanks'})
    assert r.json() == {"ok": True, "text": '{"a": 1}'}

def test_exports(client, sample_method, sample_bean, sample_note):
    r = client.post("/api/share/export/method", json=sample_method.model_dump(by_alias=True, mode="json"))
    assert r.status_code == 200
    assert r.json()["text"].startswith("【冲煮方案】")

    r = client.post("/api/share/export/method/json", json=sample_method.model_dump(by_alias=True, mode="json"))
    assert r.status_code == 200
    assert '"method": "改良分段式一刀流"' in r.json()["json"]

    r = client.post("/api/share/export/bean", json=sample_bean.model_dump(by_alias=True, mode="json"))
    assert r.status_code == 200
    assert "剩余150g" in r.json()["text"]

    r = client.post("/api/share/export/note", json=sample_note.model_dump(by_alias=True, mode="json"))
    assert r.status_code == 200
    assert "综合评分: 4/5" in r.json()["text"]

def test_export_bean_requires_name(client):
    r = client.post("/api/share/export/bean", json={"capacity": "200"})
    assert r.status_code == 422

def test_oversized_input_is_rejected(client, monkeypatch):
    monkeypatch.setattr(share_router, "MAX_INPUT_CHARS", 10)
    r = client.post("/api/share/import", json={"text": "x" * 11})
    assert r.status_code == 413
