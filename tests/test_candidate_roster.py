from src.core.candidate_roster import CandidateRoster, missing_resume_fields
from src.models.candidate import CandidateSort, CandidateStatus
from src.models.interview import ResumeData

from conftest import make_answer


def _roster() -> tuple[CandidateRoster, dict[str, str]]:
    roster = CandidateRoster()
    ids = {}
    for name, email in [("Zoe", "zoe@example.com"), ("adam", "adam@corp.io"), ("Mia", "mia@example.com")]:
        ids[name] = roster.add_candidate(name, email, "555-0100").id
    return roster, ids


def test_missing_resume_fields():
    assert missing_resume_fields(None) == ["name", "email", "phone"]
    assert missing_resume_fields(ResumeData(name="Ada", email=" ", phone="555")) == ["email"]
    assert missing_resume_fields(ResumeData(name="Ada", email="a@b.c", phone="555")) == []


def test_first_answer_moves_candidate_in_progress():
    roster, ids = _roster()
    assert roster.get(ids["Zoe"]).status == CandidateStatus.PENDING

    assert roster.add_answer(ids["Zoe"], make_answer(70)) is True
    candidate = roster.get(ids["Zoe"])
    assert candidate.status == CandidateStatus.IN_PROGRESS
    assert len(candidate.answers) == 1

    assert roster.add_answer("missing", make_answer(70)) is False


def test_complete_candidate_stamps_result():
    roster, ids = _roster()
    assert roster.complete_candidate(ids["Mia"], 82, "Strong") is True

    candidate = roster.get(ids["Mia"])
    assert candidate.status == CandidateStatus.COMPLETED
    assert candidate.score == 82
    assert candidate.summary == "Strong"
    assert candidate.completed_at is not None


def test_list_candidates_search_filter_sort():
    roster, ids = _roster()
    roster.complete_candidate(ids["Zoe"], 60, "")
    roster.complete_candidate(ids["Mia"], 90, "")

    assert [c.name for c in roster.list_candidates()] == ["Mia", "Zoe", "adam"]
    assert [c.name for c in roster.list_candidates(sort_by=CandidateSort.NAME)] == ["adam", "Mia", "Zoe"]
    assert [c.name for c in roster.list_candidates(search="EXAMPLE")] == ["Mia", "Zoe"]
    assert [c.name for c in roster.list_candidates(status=CandidateStatus.PENDING)] == ["adam"]


def test_returned_candidates_are_copies():
    roster, ids = _roster()
    roster.get(ids["Zoe"]).answers.append(make_answer(10))
    assert roster.get(ids["Zoe"]).answers == []


def test_update_and_snapshot_restore():
    roster, ids = _roster()
    updated = roster.update_candidate(ids["adam"], summary="Needs review")
    assert updated.summary == "Needs review"
    assert roster.update_candidate("missing", summary="x") is None

    restored = CandidateRoster()
    restored.restore(roster.snapshot())
    assert len(restored) == 3
    assert restored.get(ids["adam"]).summary == "Needs review"

    restored.clear_all()
    assert len(restored) == 0
