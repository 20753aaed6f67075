from datetime import date


def test_export_is_an_attachment(client, make_session, trainer, shared_plan, player_anna):
    make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))

    r = client.get("/api/v1/admin/export")

    assert r.status_code == 200
    assert r.headers["content-disposition"].startswith('attachment; filename="tennisplan-backup-')
    body = r.json()
    assert body["format"] == "tennisplan-backup"
    assert body["sessions"][0]["player_ids"] == [player_anna.id]


def test_export_import_round_trip(client, make_session, trainer, shared_plan, player_anna):
    make_session(trainer, shared_plan, [player_anna], date(2024, 6, 3))
    document = client.get("/api/v1/admin/export").json()

    client.post("/api/v1/admin/reset")
    r = client.post("/api/v1/admin/import", json=document)

    assert r.status_code == 200
    assert r.json()["source"] == "backup"
    assert client.get("/api/v1/billing/2024-06").json()["totals"]["revenue"] == 40.0


def test_import_legacy(client):
    state = {
        "trainer": {"name": "Tom"},
        "spieler": [{"id": "1", "name": "Lena"}],
        "tarife": [{"id": "t", "name": "Einzel", "preisProStunde": 30, "abrechnung": "proSpieler"}],
        "trainings": [
            {
                "id": "x",
                "datum": "2024-06-03",
                "uhrzeitVon": "10:00",
                "uhrzeitBis": "11:00",
                "status": "durchgefuehrt",
                "spielerIds": ["1"],
                "tarifId": "t",
            }
        ],
        "abrechnungPaid": {"2024-06": ["1"]},
    }

    r = client.post("/api/v1/admin/import/legacy", json=state)

    assert r.status_code == 200
    assert r.json()["payments"] == 1
    summary = client.get("/api/v1/billing/2024-06").json()
    assert summary["players"][0]["paid"] is True
    assert summary["players"][0]["payment"]["method"] == "transfer"
    assert summary["totals"]["paid_non_cash"] == 30.0


def test_import_unknown_format(client):
    r = client.post("/api/v1/admin/import", json={"hello": "world"})

    assert r.status_code == 400
    assert r.json()["code"] == "UNKNOWN_IMPORT_FORMAT"


def test_stats_and_reset(client, trainer, player_anna):
    assert client.get("/api/v1/admin/stats").json()["players"] == 1

    r = client.post("/api/v1/admin/reset")

    assert r.status_code == 200
    assert r.json()["deleted"]["players"] == 1
    assert client.get("/api/v1/admin/stats").json()["players"] == 0
