import threading

import pytest

from app.core.errors import InvalidInputError, NotFoundError
from app.models.user import ScoreRecord, User
from app.services.ranking import compute_leaderboard, compute_rank, submit_score


class _MemoryUsers:
    def __init__(self, users):
        self.users = list(users)
        self.saves = 0
        self._lock = threading.RLock()

    def load_all(self):
        return [u.model_copy(deep=True) for u in self.users]

    def save_all(self, items):
        self.saves += 1
        self.users = [u.model_copy(deep=True) for u in items]

    def locked(self):
        return self._lock


def _user(name, *scores, validated=True, category="Réseaux"):
    return User(
        id=name.lower(),
        email=f"{name.lower()}@example.com",
        password="x",
        name=name,
        category=category,
        validated=validated,
        scores=[ScoreRecord(category=c, score=s, date=1000 + i) for i, (c, s) in enumerate(scores)],
    )


def test_leaderboard_sums_scores_and_orders_descending():
    users = [
        _user("Ann", ("Réseaux", 10)),
        _user("Ben", ("Réseaux", 5), ("Réseaux", 20)),
        _user("Cid"),
    ]

    board = compute_leaderboard(users)
    assert [e.name for e in board] == ["Ben", "Ann", "Cid"]
    assert [e.total_score for e in board] == [25, 10, 0]


def test_leaderboard_filters_by_category_and_excludes_unvalidated():
    users = [
        _user("Ann", ("Réseaux", 10), ("Programmation", 50)),
        _user("Ben", ("Réseaux", 30)),
        _user("Dan", ("Réseaux", 99), validated=False),
    ]

    board = compute_leaderboard(users, "Réseaux")
    assert [(e.name, e.total_score) for e in board] == [("Ben", 30), ("Ann", 10)]


def test_leaderboard_ties_keep_collection_order():
    users = [_user("Ann", ("X", 5)), _user("Ben", ("X", 5)), _user("Cid", ("X", 5))]
    assert [e.name for e in compute_leaderboard(users, "X")] == ["Ann", "Ben", "Cid"]


def test_last_activity_falls_back_to_creation_date():
    user = _user("Ann")
    assert compute_leaderboard([user])[0].last_activity == user.created_at


def test_compute_rank_matches_leaderboard_position():
    users = [_user("Ann", ("X", 1)), _user("Ben", ("X", 3)), _user("Cid", ("X", 2))]
    board = compute_leaderboard(users, "X")
    for pos, entry in enumerate(board, start=1):
        assert compute_rank(users, entry.id, "X") == pos
    assert compute_rank(users, "nobody", "X") == 0


def test_first_submission_has_no_previous_rank_and_does_not_notify():
    repo = _MemoryUsers([_user("Ann"), _user("Ben", ("X", 5))])
    events = []

    result = submit_score(repo, "ann", "X", 10, notify=events.append)

    assert result.previous_rank == 0
    assert result.new_rank == 1
    assert result.rank_changed is True
    assert result.total_score == 10
    assert events == []
    assert repo.saves == 1


def test_overtaking_notifies_once_with_old_and_new_rank():
    repo = _MemoryUsers([_user("Ann", ("X", 20)), _user("Ben", ("X", 5))])
    events = []

    result = submit_score(repo, "ben", "X", 30, notify=events.append)

    assert (result.previous_rank, result.new_rank) == (2, 1)
    assert len(events) == 1
    event = events[0]
    assert event.user_email == "ben@example.com"
    assert (event.old_rank, event.new_rank, event.total_score) == (2, 1, 35)


def test_unchanged_rank_does_not_notify():
    repo = _MemoryUsers([_user("Ann", ("X", 20)), _user("Ben", ("X", 5))])
    events = []

    result = submit_score(repo, "ann", "X", 1, notify=events.append)

    assert result.rank_changed is False
    assert events == []


def test_notifier_failure_does_not_fail_submission():
    repo = _MemoryUsers([_user("Ann", ("X", 20)), _user("Ben", ("X", 5))])

    def _boom(event):
        raise RuntimeError("smtp down")

    result = submit_score(repo, "ben", "X", 30, notify=_boom)
    assert result.new_rank == 1
    assert len(repo.users[1].scores) == 2


def test_submission_appends_a_record():
    repo = _MemoryUsers([_user("Ann")])

    submit_score(repo, "ann", "Réseaux", 7.5)

    scores = repo.users[0].scores
    assert len(scores) == 1
    assert scores[0].category == "Réseaux"
    assert scores[0].score == 7.5


@pytest.mark.parametrize(
    "category,score",
    [
        ("", 5),
        (None, 5),
        ("X", None),
        ("X", -1),
        ("X", True),
        ("X", "10"),
        ("X", float("nan")),
        ("X", float("inf")),
        ("X", float("-inf")),
    ],
)
def test_invalid_submissions_are_rejected(category, score):
    repo = _MemoryUsers([_user("Ann")])
    with pytest.raises(InvalidInputError):
        submit_score(repo, "ann", category, score)
    assert repo.saves == 0


def test_unknown_user_is_not_found():
    repo = _MemoryUsers([_user("Ann")])
    with pytest.raises(NotFoundError):
        submit_score(repo, "ghost", "X", 1)
