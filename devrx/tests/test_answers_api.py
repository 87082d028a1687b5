from datetime import datetime, timedelta, timezone
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine, select

from devrx.main import app
from devrx.api.dependencies import get_advisor, get_session, get_session_factory
from devrx.db.base import enable_sqlite_foreign_keys
from devrx.db.schemas import Answer, Comment, Question, User
from devrx.services.llm_service import AiAdvisor


ALICE = {"X-User-Id": "alice"}
BOB = {"X-User-Id": "bob"}
CAROL = {"X-User-Id": "carol"}


@pytest.fixture(name="engine")
def engine_fixture():
    engine = enable_sqlite_foreign_keys(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine) -> Generator[Session, None, None]:
    with Session(engine) as session:
        yield session


@pytest.fixture(name="client")
def client_fixture(engine, session: Session) -> Generator[TestClient, None, None]:
    def override_get_session() -> Generator[Session, None, None]:
        yield session

    app.dependency_overrides[get_session] = override_get_session
    app.dependency_overrides[get_session_factory] = lambda: (lambda: Session(engine))
    app.dependency_overrides[get_advisor] = lambda: AiAdvisor(None)
    client = TestClient(app)
    yield client
    app.dependency_overrides.clear()


@pytest.fixture(name="question_id")
def question_fixture(client: TestClient) -> int:
    response = client.post(
        "/api/questions",
        json={"title": "Docker container exits", "content": "Exit code 137", "tags": ["docker"]},
        headers=ALICE,
    )
    assert response.status_code == 201, response.text
    return response.json()["id"]


def _answer(client: TestClient, question_id: int, content: str, headers: dict) -> dict:
    response = client.post(
        f"/api/questions/{question_id}/answers", json={"content": content}, headers=headers
    )
    assert response.status_code == 201, response.text
    return response.json()


def _reputation(session: Session, user_id: str) -> int:
    session.expire_all()
    return session.get(User, user_id).reputation


def test_create_answer_awards_reputation(
    client: TestClient, session: Session, question_id: int
) -> None:
    data = _answer(client, question_id, "It ran out of memory", BOB)
    assert data["questionId"] == question_id
    assert data["userId"] == "bob"
    assert data["votes"] == 0
    assert data["isAccepted"] is False
    assert _reputation(session, "bob") == 5


def test_create_answer_on_missing_question(client: TestClient, session: Session) -> None:
    response = client.post("/api/questions/999/answers", json={"content": "Hello"}, headers=BOB)
    assert response.status_code == 404
    assert session.exec(select(Answer)).all() == []
    assert _reputation(session, "bob") == 0


def test_create_answer_requires_content(client: TestClient, question_id: int) -> None:
    response = client.post(
        f"/api/questions/{question_id}/answers", json={"content": ""}, headers=BOB
    )
    assert response.status_code == 400


def test_answers_ordered_accepted_then_votes_then_age(
    client: TestClient, session: Session, question_id: int
) -> None:
    base = datetime(2024, 5, 1, tzinfo=timezone.utc)
    session.add(User(id="dave"))
    session.commit()
    session.add_all(
        [
            Answer(question_id=question_id, user_id="dave", content="older", votes=3, created_at=base),
            Answer(
                question_id=question_id,
                user_id="dave",
                content="newer",
                votes=3,
                created_at=base + timedelta(hours=1),
            ),
            Answer(question_id=question_id, user_id="dave", content="top", votes=9, created_at=base),
            Answer(
                question_id=question_id,
                user_id="dave",
                content="accepted",
                votes=-1,
                is_accepted=True,
                created_at=base + timedelta(days=1),
            ),
        ]
    )
    session.commit()

    answers = client.get(f"/api/questions/{question_id}").json()["answers"]
    assert [answer["content"] for answer in answers] == ["accepted", "top", "older", "newer"]
    assert answers[0]["user"]["id"] == "dave"


def test_accept_answer(client: TestClient, session: Session, question_id: int) -> None:
    answer = _answer(client, question_id, "Raise the memory limit", BOB)

    response = client.put(f"/api/answers/{answer['id']}/accept", headers=ALICE)
    assert response.status_code == 200
    assert response.json() == {"message": "Answer accepted"}

    session.expire_all()
    assert session.get(Answer, answer["id"]).is_accepted is True
    assert session.get(Question, question_id).is_solved is True
    assert _reputation(session, "bob") == 20


def test_accept_answer_twice_is_a_no_op(
    client: TestClient, session: Session, question_id: int
) -> None:
    answer = _answer(client, question_id, "Raise the memory limit", BOB)
    client.put(f"/api/answers/{answer['id']}/accept", headers=ALICE)
    response = client.put(f"/api/answers/{answer['id']}/accept", headers=ALICE)
    assert response.status_code == 200
    assert _reputation(session, "bob") == 20


def test_accepting_another_answer_moves_the_flag(
    client: TestClient, session: Session, question_id: int
) -> None:
    first = _answer(client, question_id, "Raise the memory limit", BOB)
    second = _answer(client, question_id, "Fix the leak instead", CAROL)

    client.put(f"/api/answers/{first['id']}/accept", headers=ALICE)
    client.put(f"/api/answers/{second['id']}/accept", headers=ALICE)

    session.expire_all()
    accepted = session.exec(
        select(Answer).where(Answer.question_id == question_id).where(Answer.is_accepted == True)  # noqa: E712
    ).all()
    assert [answer.id for answer in accepted] == [second["id"]]
    assert session.get(Question, question_id).is_solved is True
    assert _reputation(session, "bob") == 5
    assert _reputation(session, "carol") == 20


def test_accept_answer_forbidden_for_non_author(
    client: TestClient, session: Session, question_id: int
) -> None:
    answer = _answer(client, question_id, "Raise the memory limit", BOB)

    response = client.put(f"/api/answers/{answer['id']}/accept", headers=BOB)
    assert response.status_code == 403

    session.expire_all()
    assert session.get(Answer, answer["id"]).is_accepted is False
    assert session.get(Question, question_id).is_solved is False
    assert _reputation(session, "bob") == 5


def test_accept_missing_answer(client: TestClient) -> None:
    response = client.put("/api/answers/999/accept", headers=ALICE)
    assert response.status_code == 404


def test_get_answer_view(client: TestClient, question_id: int) -> None:
    answer = _answer(client, question_id, "Check dmesg", BOB)
    client.post("/api/comments", json={"content": "Worked", "answerId": answer["id"]}, headers=ALICE)

    data = client.get(f"/api/answers/{answer['id']}").json()
    assert data["content"] == "Check dmesg"
    assert data["user"]["id"] == "bob"
    assert [comment["content"] for comment in data["comments"]] == ["Worked"]
    assert data["comments"][0]["user"]["id"] == "alice"

    assert client.get("/api/answers/999").status_code == 404


def test_update_answer_author_only(client: TestClient, question_id: int) -> None:
    answer = _answer(client, question_id, "Check dmesg", BOB)

    forbidden = client.put(f"/api/answers/{answer['id']}", json={"content": "Mine"}, headers=ALICE)
    assert forbidden.status_code == 403

    response = client.put(
        f"/api/answers/{answer['id']}", json={"content": "Check dmesg for OOM"}, headers=BOB
    )
    assert response.status_code == 200
    assert response.json()["content"] == "Check dmesg for OOM"


class TestComments:
    def test_comment_on_question(self, client: TestClient, question_id: int) -> None:
        response = client.post(
            "/api/comments",
            json={"content": "Which image?", "questionId": question_id},
            headers=BOB,
        )
        assert response.status_code == 201
        data = response.json()
        assert data["questionId"] == question_id
        assert data["answerId"] is None
        assert data["user"]["id"] == "bob"

        comments = client.get(f"/api/questions/{question_id}/comments").json()
        assert [comment["content"] for comment in comments] == ["Which image?"]

    def test_comment_on_answer(self, client: TestClient, question_id: int) -> None:
        answer = _answer(client, question_id, "Check dmesg", BOB)
        response = client.post(
            "/api/comments", json={"content": "Thanks", "answerId": answer["id"]}, headers=ALICE
        )
        assert response.status_code == 201
        comments = client.get(f"/api/answers/{answer['id']}/comments").json()
        assert [comment["content"] for comment in comments] == ["Thanks"]

    def test_comment_requires_exactly_one_target(
        self, client: TestClient, session: Session, question_id: int
    ) -> None:
        answer = _answer(client, question_id, "Check dmesg", BOB)
        both = client.post(
            "/api/comments",
            json={"content": "Both", "questionId": question_id, "answerId": answer["id"]},
            headers=ALICE,
        )
        neither = client.post("/api/comments", json={"content": "Neither"}, headers=ALICE)
        assert both.status_code == 400
        assert neither.status_code == 400
        assert session.exec(select(Comment)).all() == []

    def test_comment_on_missing_target(self, client: TestClient) -> None:
        question = client.post(
            "/api/comments", json={"content": "Hello", "questionId": 999}, headers=ALICE
        )
        answer = client.post("/api/comments", json={"content": "Hello", "answerId": 999}, headers=ALICE)
        assert question.status_code == 404
        assert answer.status_code == 404

    def test_comment_requires_auth(self, client: TestClient, question_id: int) -> None:
        response = client.post("/api/comments", json={"content": "Hi", "questionId": question_id})
        assert response.status_code == 401
