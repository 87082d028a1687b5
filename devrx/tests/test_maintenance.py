from typing import Generator

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel, Session, create_engine

from devrx.db.base import enable_sqlite_foreign_keys
from devrx.db.schemas import Answer, Question, QuestionTag, Tag, User, Vote
from devrx.services.maintenance_service import MaintenanceService


@pytest.fixture(name="session")
def session_fixture() -> Generator[Session, None, None]:
    engine = enable_sqlite_foreign_keys(
        create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        yield session
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="drifted")
def drifted_fixture(session: Session) -> dict:
    """Counters that disagree with the vote and link rows."""
    session.add_all([User(id="alice"), User(id="bob"), User(id="carol")])
    session.commit()
    tag = Tag(name="kotlin", count=9)
    untouched = Tag(name="scala", count=0)
    question = Question(user_id="alice", title="Coroutines", content="Leak?", votes=7)
    session.add_all([tag, untouched, question])
    session.commit()
    answer = Answer(question_id=question.id, user_id="bob", content="Cancel the scope", votes=1)
    session.add(answer)
    session.add(QuestionTag(question_id=question.id, tag_id=tag.id))
    session.commit()
    session.add_all(
        [
            Vote(user_id="bob", question_id=question.id, value=1),
            Vote(user_id="carol", question_id=question.id, value=1),
            Vote(user_id="alice", answer_id=answer.id, value=-1),
        ]
    )
    session.commit()
    return {"question": question.id, "answer": answer.id, "tag": tag.id, "untouched": untouched.id}


def test_recount_repairs_counters(session: Session, drifted: dict) -> None:
    corrected = MaintenanceService(session).recount_aggregates()

    assert corrected == {"questions": 1, "answers": 1, "tags": 1}
    session.expire_all()
    assert session.get(Question, drifted["question"]).votes == 2
    assert session.get(Answer, drifted["answer"]).votes == -1
    assert session.get(Tag, drifted["tag"]).count == 1
    assert session.get(Tag, drifted["untouched"]).count == 0


def test_recount_is_stable(session: Session, drifted: dict) -> None:
    service = MaintenanceService(session)
    service.recount_aggregates()
    assert service.recount_aggregates() == {"questions": 0, "answers": 0, "tags": 0}


def test_dry_run_changes_nothing(session: Session, drifted: dict) -> None:
    corrected = MaintenanceService(session).recount_aggregates(dry_run=True)

    assert corrected == {"questions": 1, "answers": 1, "tags": 1}
    session.expire_all()
    assert session.get(Question, drifted["question"]).votes == 7
    assert session.get(Answer, drifted["answer"]).votes == 1
    assert session.get(Tag, drifted["tag"]).count == 9
