import pytest

from gmaps_enricher.core.config import Settings
from gmaps_enricher.jobs import run_query_server


@pytest.fixture(autouse=True)
def reset_executor(monkeypatch, tmp_path):
    submitted = {}

    class DummyExecutor:
        def submit(self, fn, args):
            submitted["called"] = True
            submitted["args"] = args

    template = tmp_path / "seed_template.txt"
    template.write_text("fraza Warszawa\nfraza Krakow\n", encoding="utf-8")
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(run_query_server, "_executor", DummyExecutor())
    monkeypatch.setattr(run_query_server, "get_settings", lambda: Settings(seed_template_path=str(template)))
    yield submitted


def test_status_endpoint():
    client = run_query_server.app.test_client()
    response = client.get("/status")
    assert response.status_code == 200
    assert response.get_json()["status"] == "ok"


def test_scrape_rejects_invalid_body(reset_executor):
    client = run_query_server.app.test_client()
    response = client.post("/scrape", data="nope", content_type="application/json")
    assert response.status_code == 400
    assert "called" not in reset_executor


def test_scrape_uses_defaults(reset_executor):
    client = run_query_server.app.test_client()
    response = client.post("/scrape", json={"email": True, "langCode": "pl", "json": True})

    assert response.status_code == 202
    args = reset_executor["args"]
    assert args["input_file"] == "default_input.txt"
    assert args["results_file"] == "default_results.csv"
    assert args["json_output"] is True
    assert args["settings"].lang == "pl"
    assert args["settings"].extract_emails is True


def test_scrape_with_phrase_builds_seed_file(reset_executor, tmp_path):
    client = run_query_server.app.test_client()
    response = client.post("/scrape", json={"phrase": "piekarnia"})

    assert response.status_code == 202
    args = reset_executor["args"]
    assert args["input_file"] == "piekarnia_seeds.txt"
    assert args["results_file"] == "piekarnia_results.csv"
    assert (tmp_path / "piekarnia_seeds.txt").read_text(encoding="utf-8") == "piekarnia Warszawa\npiekarnia Krakow\n"


def test_createfile(tmp_path):
    client = run_query_server.app.test_client()
    assert client.post("/createfile", json={}).status_code == 400

    response = client.post("/createfile", json={"phrase": "kwiaciarnia"})

    assert response.status_code == 200
    assert response.get_json()["data"]["file"] == "kwiaciarnia_seeds.txt"
    assert (tmp_path / "kwiaciarnia_seeds.txt").exists()


def test_createfile_missing_template(monkeypatch):
    monkeypatch.setattr(run_query_server, "get_settings", lambda: Settings(seed_template_path="missing.txt"))
    client = run_query_server.app.test_client()
    assert client.post("/createfile", json={"phrase": "x"}).status_code == 500


@pytest.mark.parametrize("phrase", ["../escaped", "nested/name", "..\\escaped", "/tmp/escaped"])
def test_phrase_with_path_parts_is_rejected(reset_executor, tmp_path, phrase):
    client = run_query_server.app.test_client()

    assert client.post("/createfile", json={"phrase": phrase}).status_code == 400
    assert client.post("/scrape", json={"phrase": phrase}).status_code == 400

    assert "called" not in reset_executor
    assert not (tmp_path.parent / "escaped_seeds.txt").exists()
    assert sorted(path.name for path in tmp_path.iterdir()) == ["seed_template.txt"]
