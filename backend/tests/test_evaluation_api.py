import app.services.quiz_generation as quiz_generation_module
from app.core.errors import AIServiceError
from app.db.session import get_document_repository, get_user_repository
from app.models.document import Document


def _start(client, headers):
    r = client.post("/evaluation/start", headers=headers)
    assert r.status_code == 200, r.text
    return r.json()


def test_start_hides_answer_key(client, auth_headers):
    body = _start(client, auth_headers)
    assert body["state"] == "in_progress"
    assert body["currentExercise"] == 0
    assert len(body["exercises"]) == 5
    first = body["exercises"][0]
    assert first["id"] == "linux-1"
    for key in ("validation", "output", "hint", "pattern"):
        assert key not in first


def test_session_requires_a_started_evaluation(client, auth_headers):
    r = client.get("/evaluation/session", headers=auth_headers)
    assert r.status_code == 404

    _start(client, auth_headers)
    r = client.get("/evaluation/session", headers=auth_headers)
    assert r.status_code == 200
    assert r.json()["source"] == "standard"


def test_execute_advances_on_correct_command(client, auth_headers):
    _start(client, auth_headers)

    r = client.post("/evaluation/execute", json={"command": "ls"}, headers=auth_headers)
    assert r.status_code == 200
    body = r.json()
    assert body["correct"] is False
    assert body["hint"]
    assert body["session"]["currentExercise"] == 0

    r = client.post("/evaluation/execute", json={"command": "ls -al"}, headers=auth_headers)
    body = r.json()
    assert body["correct"] is True
    assert body["session"]["currentExercise"] == 1
    assert body["session"]["score"] == 10


def test_submit_on_terminal_exercise_is_rejected(client, auth_headers):
    _start(client, auth_headers)
    r = client.post("/evaluation/submit", json={"code": "echo hi"}, headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["error_code"] == "invalid_input"


def test_full_evaluation_records_score_once(client, make_user, login):
    user = make_user()
    headers = login(user.email)
    _start(client, headers)

    for command in ("ls -la", "mkdir projet", "chmod +x a.sh"):
        assert client.post("/evaluation/execute", json={"command": command}, headers=headers).json()["correct"]
    client.post("/evaluation/submit", json={"code": 'echo "Hello BTS CIEL"; date'}, headers=headers)
    r = client.post(
        "/evaluation/submit",
        json={"code": "def calculate_average(l):\n    return sum(l) / len(l)"},
        headers=headers,
    )
    assert r.json()["session"]["completed"] is True

    r = client.post("/evaluation/execute", json={"command": "ls -la"}, headers=headers)
    assert r.status_code == 409
    assert r.json()["error_code"] == "evaluation_completed"

    r = client.post("/evaluation/finish", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["score"] == 70
    assert body["totalPoints"] == 70
    assert body["percentage"] == 100
    assert body["category"] == "Général"
    assert body["previousRank"] == 0
    assert body["newRank"] == 1

    r = client.post("/evaluation/finish", headers=headers)
    assert r.status_code == 200
    assert r.json()["newRank"] is None

    stored = next(u for u in get_user_repository().load_all() if u.id == user.id)
    assert [(s.category, s.score) for s in stored.scores] == [("Général", 70)]


def test_finish_early_counts_partial_score(client, auth_headers):
    _start(client, auth_headers)
    client.post("/evaluation/execute", json={"command": "ls -la"}, headers=auth_headers)

    r = client.post("/evaluation/finish", headers=auth_headers)
    body = r.json()
    assert body["score"] == 10
    assert body["percentage"] == 14
    assert body["session"]["state"] == "completed"


def _store_documents(*docs):
    repo = get_document_repository()
    repo.save_all(list(docs))


def test_generate_builds_ai_session(client, auth_headers, monkeypatch):
    doc = Document(name="calc.py", size=40, filename="a.py", content="def add(a, b):\n    return a + b\n")
    _store_documents(doc)

    def _fake_generate(prompt, **kwargs):
        assert "def add" in prompt
        return {
            "exercises": [
                {
                    "id": "ai-1",
                    "title": "Addition",
                    "description": "d",
                    "type": "code",
                    "task": "Écrivez add",
                    "validation": "def add",
                    "points": 10,
                }
            ],
            "timeLimit": 600,
        }

    monkeypatch.setattr(quiz_generation_module, "ollama_generate_json", _fake_generate)

    r = client.post("/evaluation/generate", json={"documentIds": [doc.id]}, headers=auth_headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["source"] == "ai"
    assert body["timeLimit"] == 600
    assert body["timeRemaining"] <= 600
    assert [e["id"] for e in body["exercises"]] == ["ai-1"]

    r = client.post("/evaluation/submit", json={"code": "def add(x, y): return x + y"}, headers=auth_headers)
    assert r.json()["correct"] is True


def test_generate_without_code_documents(client, auth_headers):
    doc = Document(name="notes.txt", size=5, filename="n.txt", content="Bonjour")
    _store_documents(doc)

    r = client.post("/evaluation/generate", json={"documentIds": [doc.id]}, headers=auth_headers)
    assert r.status_code == 400

    r = client.post("/evaluation/generate", json={"documentIds": []}, headers=auth_headers)
    assert r.status_code == 400


def test_generate_reports_ai_failure(client, auth_headers, monkeypatch):
    doc = Document(name="calc.py", size=40, filename="a.py", content="def add(a, b): return a + b")
    _store_documents(doc)

    def _fail(prompt, **kwargs):
        raise AIServiceError("ollama not responding")

    monkeypatch.setattr(quiz_generation_module, "ollama_generate_json", _fail)

    r = client.post("/evaluation/generate", json={"documentIds": [doc.id]}, headers=auth_headers)
    assert r.status_code == 502
    assert r.json()["error_code"] == "ai_unavailable"


def test_finish_without_points_leaves_leaderboard_untouched(client, make_user, login):
    user = make_user()
    headers = login(user.email)
    _start(client, headers)

    r = client.post("/evaluation/finish", headers=headers)
    assert r.status_code == 200
    body = r.json()
    assert body["score"] == 0
    assert body["percentage"] == 0
    assert body["previousRank"] is None
    assert body["newRank"] is None
    assert body["rankChanged"] is False
    assert body["session"]["completed"] is True

    stored = next(u for u in get_user_repository().load_all() if u.id == user.id)
    assert stored.scores == []


def test_generate_accepts_fractional_points(client, auth_headers, monkeypatch):
    doc = Document(name="calc.py", size=40, filename="a.py", content="def add(a, b): return a + b")
    _store_documents(doc)

    def _fake_generate(prompt, **kwargs):
        return {
            "exercises": [
                {"id": "ai-1", "type": "code", "task": "t", "validation": "def add", "points": 12.5},
                {"id": "ai-2", "type": "terminal", "task": "t", "validation": "ls -la", "points": 7.5},
            ],
        }

    monkeypatch.setattr(quiz_generation_module, "ollama_generate_json", _fake_generate)

    r = client.post("/evaluation/generate", json={"documentIds": [doc.id]}, headers=auth_headers)
    assert r.status_code == 200, r.text
    body = r.json()
    assert [e["points"] for e in body["exercises"]] == [13, 8]
    assert body["timeLimit"] == 1800
