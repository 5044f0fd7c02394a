"""Tests for the HTTP routes."""

from datetime import date

import pytest
from fastapi.testclient import TestClient

from api.routes import get_store
from content.store import ContentStore
from db.database import get_session
from db.models import ModelScore, Regulation
from main import app
from tests.conftest import make_article


@pytest.fixture
def client(content_db, add_articles):
    add_articles(
        make_article("1", day=1, slug="gpt-5-ships", headline="OpenAI ships GPT-5",
                     tags=["llm", "openai"], is_featured=True, image="https://img/1.jpg", view_count=3),
        make_article("2", day=2, headline="Claude learns tools", tags=["llm"], category="AI Agents"),
        make_article("3", day=3, headline="Chip export rules", tags=["policy"], category="Regulation",
                     is_breaking=True),
    )
    session = get_session()
    session.add_all([
        ModelScore(id=1, name="Alpha", company="A", score_overall=80.0, score_coding=95.0),
        ModelScore(id=2, name="Beta", company="B", score_overall=90.0, score_coding=70.0),
        Regulation(id="reg-1", title="EU AI Act", region="EU", status="enacted", impact="high",
                   deadline=date(2026, 8, 2), sort_order=1),
    ])
    session.commit()
    session.close()

    store = ContentStore()
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health_reports_capabilities(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "ok"
    assert data["capabilities"]["slugs"] is True


def test_latest(client):
    resp = client.get("/api/articles/latest?limit=2")
    assert [a["id"] for a in resp.json()] == ["3", "2"]


def test_article_by_slug_and_id(client):
    by_slug = client.get("/api/articles/gpt-5-ships").json()
    by_id = client.get("/api/articles/1").json()
    assert by_slug["article"]["id"] == by_id["article"]["id"] == "1"
    assert [a["id"] for a in by_slug["related"]] == ["2"]
    assert by_slug["article"]["published_at"] == "Jan 1, 2026"


def test_article_page_counts_a_view(client):
    client.get("/api/articles/1")
    latest = {a["id"]: a for a in client.get("/api/articles/latest").json()}
    assert latest["1"]["view_count"] == 4


def test_missing_article_404(client):
    assert client.get("/api/articles/nope").status_code == 404
    assert client.get("/api/articles/nope/related").status_code == 404


def test_record_view(client):
    assert client.post("/api/articles/2/view").status_code == 204
    popular = client.get("/api/articles/popular").json()
    assert [a["id"] for a in popular][:2] == ["1", "2"]


def test_paged_end_flag(client):
    first = client.get("/api/articles/page?size=2").json()
    second = client.get("/api/articles/page?size=2&offset=2").json()
    assert first["end"] is False
    assert second["end"] is True
    assert [a["id"] for a in second["articles"]] == ["1"]


def test_search(client):
    assert [a["id"] for a in client.get("/api/articles/search?q=claude").json()] == ["2"]
    assert client.get("/api/articles/search").status_code == 422


def test_category_and_tag_pages(client):
    agents = client.get("/api/categories/agents").json()
    assert [a["id"] for a in agents["articles"]] == ["2"]

    tag = client.get("/api/tags/llm?sort=trending").json()
    assert [a["id"] for a in tag["articles"]] == ["1", "2"]
    assert "llm" not in tag["related_tags"]
    assert set(tag["related_tags"]) == {"openai", "policy"}

    assert client.get("/api/tags/llm?sort=oldest").status_code == 422


def test_popular_tags(client):
    tags = client.get("/api/tags/popular?limit=1").json()
    assert tags == [{"tag": "llm", "count": 2}]


def test_bookmarks_keep_order_and_drop_missing(client):
    resp = client.get("/api/bookmarks?ids=3,gone,1")
    assert [a["id"] for a in resp.json()] == ["3", "1"]


def test_models_ranked_by_dimension(client):
    overall = client.get("/api/models").json()
    assert [(m["name"], m["rank"]) for m in overall] == [("Beta", 1), ("Alpha", 2)]
    coding = client.get("/api/models?dimension=coding").json()
    assert [m["name"] for m in coding] == ["Alpha", "Beta"]


def test_vote(client):
    assert client.post("/api/models/1/vote").status_code == 204
    models = {m["id"]: m for m in client.get("/api/models").json()}
    assert models[1]["vote_count"] == 1


def test_regulations_include_countdown(client):
    regs = client.get("/api/regulations").json()
    assert regs[0]["id"] == "reg-1"
    assert regs[0]["deadline"] == "2026-08-02"
    assert "days_remaining" in regs[0]
    assert 0.05 <= regs[0]["progress"] <= 1.0


def test_home_sections(client):
    home = client.get("/api/home").json()
    assert [a["id"] for a in home["hero"]] == ["1"]
    assert [a["id"] for a in home["breaking"]] == ["3"]
    assert [m["name"] for m in home["models"]] == ["Beta", "Alpha"]
    assert home["voices"] == []


def test_subscribe(client):
    ok = client.post("/api/newsletter/subscribe", json={"email": "Reader@Example.com"})
    assert ok.status_code == 200
    assert ok.json() == {"status": "subscribed"}

    again = client.post("/api/newsletter/subscribe", json={"email": "reader@example.com"})
    assert again.status_code == 200

    bad = client.post("/api/newsletter/subscribe", json={"email": "nope"})
    assert bad.status_code == 422
    assert bad.json()["reason"] == "invalid_email"
    assert bad.json()["field"] == "email"

    assert client.get("/api/newsletter/stats").json() == {"total": 1}


def test_app_mounts_api_routes():
    paths = {route.path for route in app.routes}
    assert {"/api/home", "/api/articles/{slug_or_id}", "/api/newsletter/subscribe"} <= paths


def test_unexpected_enum_values_do_not_break_pages(client):
    session = get_session()
    session.add_all([
        Regulation(id="reg-2", title="State bill", region="US", status="Enacted", impact="high", sort_order=2),
        ModelScore(id=3, name="Gamma", company="G", score_overall=85.0, trend="steady"),
    ])
    session.commit()
    session.close()

    home = client.get("/api/home")
    assert home.status_code == 200
    assert [r["status"] for r in home.json()["regulations"]] == ["enacted", "enacted"]

    models = client.get("/api/models")
    assert models.status_code == 200
    assert {m["name"]: m["trend"] for m in models.json()}["Gamma"] == "same"
    assert client.get("/api/regulations").status_code == 200
