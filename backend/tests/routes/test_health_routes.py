def test_root(client):
    r = client.get("/")

    assert r.status_code == 200
    assert r.json()["docs"] == "/docs"


def test_health(client):
    r = client.get("/api/v1/health")

    assert r.status_code == 200
    body = r.json()
    assert body["status"] == "healthy"
    assert body["database"] == "ok"
    assert body["timestamp"].endswith("Z")


def test_health_lite(client):
    r = client.get("/api/v1/health/lite")

    assert r.json() == {"status": "ok"}


def test_unknown_route_uses_problem_envelope(client):
    r = client.get("/api/v1/nope")

    assert r.status_code == 404
    assert r.json()["type"] == "about:blank"
    assert r.json()["instance"] == "/api/v1/nope"


def test_prometheus_metrics(client):
    client.get("/api/v1/health/lite")

    r = client.get("/metrics/prometheus")

    assert r.status_code == 200
    assert r.headers["content-type"].startswith("text/plain")
    assert r.headers["cache-control"] == "no-cache, no-store, must-revalidate"
    assert "tennisplan_prometheus_scrapes_total" in r.text
    assert "tennisplan_http_requests_total" in r.text
