import pytest
from datetime import datetime, timedelta
from fastapi.testclient import TestClient
from prompt_vault.database import Base
from prompt_vault.config import Settings
from prompt_vault.main import create_app


@pytest.fixture(scope="function")
def client(tmp_path):
    """Run the app against a fresh database for each test."""
    settings = Settings(
        database_url=f"sqlite:///{tmp_path / 'api.db'}",
        static_dir=str(tmp_path / "static"),
    )
    with TestClient(create_app(settings)) as client:
        yield client


def create_prompt(client, **overrides):
    body = {"title": "Title", "content": "Body", "tags": [], "notes": None, "favorite": False}
    body.update(overrides)
    response = client.post("/api/prompts", json=body)
    assert response.status_code == 201
    return response.json()


def test_root_endpoint(client):
    """Test root endpoint returns correct information."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["message"] == "Prompt Vault"
    assert "version" in response.json()


def test_health_check(client):
    """Test health check endpoint."""
    response = client.get("/api/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_create_prompt(client):
    """Test creating a prompt returns 201 and the wire shape."""
    data = create_prompt(client, title="Summarize", tags="Writing, writing, AI", notes=" keep short ", favorite="true")

    assert set(data) == {
        "id", "title", "content", "tags", "notes", "favorite",
        "useCount", "lastUsed", "createdAt", "updatedAt",
    }
    assert data["title"] == "Summarize"
    assert data["tags"] == ["writing", "ai"]
    assert data["notes"] == "keep short"
    assert data["favorite"] is True
    assert data["useCount"] == 0
    assert data["lastUsed"] is None
    assert data["createdAt"] == data["updatedAt"]


@pytest.mark.parametrize("favorite,expected", [(True, True), ("1", True), (1, True), ("yes", False), (False, False), (None, False)])
def test_create_prompt_favorite_values(client, favorite, expected):
    data = create_prompt(client, favorite=favorite)
    assert data["favorite"] is expected


def test_create_prompt_requires_title_and_content(client):
    """Test blank or missing fields are rejected with 400."""
    response = client.post("/api/prompts", json={"title": "  ", "content": "Body"})
    assert response.status_code == 400
    assert response.json() == {"detail": "Title and content are required"}

    response = client.post("/api/prompts", json={"title": "Title"})
    assert response.status_code == 400

    response = client.post("/api/prompts", json=["not", "an", "object"])
    assert response.status_code == 400

    assert client.get("/api/prompts").json() == []


def test_get_prompt(client):
    created = create_prompt(client, title="Find me")

    response = client.get(f"/api/prompts/{created['id']}")
    assert response.status_code == 200
    assert response.json() == created


def test_get_nonexistent_prompt(client):
    """Test getting a prompt that doesn't exist."""
    response = client.get("/api/prompts/12345")
    assert response.status_code == 404
    assert response.json() == {"detail": "Prompt not found"}


def test_get_prompt_with_invalid_id(client):
    response = client.get("/api/prompts/not-a-number")
    assert response.status_code == 400


def test_update_prompt(client):
    created = create_prompt(client, title="Old", tags=["a"], favorite=True)
    client.post(f"/api/prompts/{created['id']}/copy")

    response = client.put(
        f"/api/prompts/{created['id']}",
        json={"title": "New", "content": "New body", "tags": ["B", " c "], "notes": "n", "favorite": False},
    )
    assert response.status_code == 200
    data = response.json()
    assert data["title"] == "New"
    assert data["tags"] == ["b", "c"]
    assert data["favorite"] is False
    assert data["useCount"] == 1
    assert data["createdAt"] == created["createdAt"]


def test_update_errors(client):
    created = create_prompt(client)

    response = client.put(f"/api/prompts/{created['id']}", json={"title": "", "content": "x"})
    assert response.status_code == 400

    response = client.put("/api/prompts/999", json={"title": "T", "content": "C"})
    assert response.status_code == 404


def test_delete_prompt(client):
    created = create_prompt(client)

    response = client.delete(f"/api/prompts/{created['id']}")
    assert response.status_code == 200
    assert response.json() == {"success": True}

    response = client.delete(f"/api/prompts/{created['id']}")
    assert response.status_code == 404


def test_copy_records_usage(client):
    created = create_prompt(client)

    for expected in (1, 2):
        response = client.post(f"/api/prompts/{created['id']}/copy")
        assert response.status_code == 200
        data = response.json()
        assert data["useCount"] == expected
        assert data["lastUsed"] == data["updatedAt"]

    assert client.post("/api/prompts/999/copy").status_code == 404


def test_toggle_favorite(client):
    created = create_prompt(client)

    response = client.post(f"/api/prompts/{created['id']}/favorite")
    assert response.status_code == 200
    assert response.json()["favorite"] is True

    response = client.post(f"/api/prompts/{created['id']}/favorite")
    assert response.json()["favorite"] is False

    assert client.post("/api/prompts/999/favorite").status_code == 404


def test_list_prompts_filters(client):
    research = create_prompt(client, title="Literature review", tags=["research"], favorite=True)
    plain = create_prompt(client, title="Foo Bar", content="draft", tags=["research"])
    create_prompt(client, title="Email", content="Reply politely", tags=["writing"], favorite=True)

    response = client.get("/api/prompts", params={"search": "foo"})
    assert [p["id"] for p in response.json()] == [plain["id"]]

    response = client.get("/api/prompts", params={"tag": "Research", "favorite": "true"})
    assert [p["id"] for p in response.json()] == [research["id"]]

    # Only the literal "true" turns on the favorite filter
    response = client.get("/api/prompts", params={"favorite": "1"})
    assert len(response.json()) == 3

    response = client.get("/api/prompts", params={"search": "   "})
    assert len(response.json()) == 3


def test_list_prompts_order(client):
    favorite = create_prompt(client, title="Pinned", favorite=True)
    older = create_prompt(client, title="Older")
    newer = create_prompt(client, title="Newer")

    ids = [p["id"] for p in client.get("/api/prompts").json()]
    assert ids == [favorite["id"], newer["id"], older["id"]]


def test_list_tags(client):
    create_prompt(client, tags=["python", "coding"])
    create_prompt(client, tags="Coding")
    last_x = create_prompt(client, tags=["x"])

    response = client.get("/api/tags")
    assert response.status_code == 200
    assert response.json() == [
        {"tag": "coding", "count": 2},
        {"tag": "python", "count": 1},
        {"tag": "x", "count": 1},
    ]

    client.delete(f"/api/prompts/{last_x['id']}")
    assert {"tag": "x", "count": 1} not in client.get("/api/tags").json()


def test_timestamps_carry_utc_offset(client):
    """Test wire timestamps are explicit UTC so browsers do not read them as local time."""
    created = create_prompt(client)
    used = client.post(f"/api/prompts/{created['id']}/copy").json()

    for value in (used["lastUsed"], used["createdAt"], used["updatedAt"]):
        parsed = datetime.fromisoformat(value)
        assert parsed.tzinfo is not None
        assert parsed.utcoffset() == timedelta(0)


def test_numeric_text_fields_are_accepted(client):
    data = create_prompt(client, title=2024, content=3.5, notes=7)
    assert data["title"] == "2024"
    assert data["content"] == "3.5"
    assert data["notes"] == "7"

    response = client.post("/api/prompts", json={"title": True, "content": "Body"})
    assert response.status_code == 400


def test_storage_failure_returns_500(client):
    """Test a database failure surfaces as an internal error."""
    Base.metadata.drop_all(bind=client.app.state.store.engine)

    response = client.get("/api/prompts")
    assert response.status_code == 500
    assert response.json() == {"detail": "Internal storage error"}

    response = client.post("/api/prompts", json={"title": "Title", "content": "Body"})
    assert response.status_code == 500


def test_web_ui_served_from_root(tmp_path):
    static_dir = tmp_path / "static"
    (static_dir / "assets").mkdir(parents=True)
    (static_dir / "index.html").write_text("<html>vault</html>")
    (static_dir / "assets" / "app.js").write_text("console.log('vault')")
    settings = Settings(database_url=f"sqlite:///{tmp_path / 'ui.db'}", static_dir=str(static_dir))

    with TestClient(create_app(settings)) as client:
        response = client.get("/")
        assert response.status_code == 200
        assert "<html>vault</html>" in response.text

        response = client.get("/assets/app.js")
        assert response.status_code == 200
        assert "console.log" in response.text

        # Client-side routes fall back to the app shell
        response = client.get("/prompts/3")
        assert response.status_code == 200
        assert "<html>vault</html>" in response.text

        # API routes still take precedence
        assert client.get("/api/health").json() == {"status": "ok"}
        assert client.get("/api/prompts").json() == []
