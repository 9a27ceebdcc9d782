import importlib.util
from pathlib import Path

import pytest

from cuore.crud.onboarding import OnboardingCRUD
from cuore.onboarding_scoring.services import OnboardingSubmissionService

SCRIPT = Path(__file__).resolve().parent.parent / "scripts" / "recalculate_cuore_scores.py"


@pytest.fixture(scope="module")
def script():
    spec = importlib.util.spec_from_file_location("recalculate_cuore_scores", SCRIPT)
    module = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(module)
    return module


def test_stored_score_matches_recomputation(script, db, clock, payload):
    OnboardingSubmissionService(db, clock=clock).submit("user-1", payload)
    assert script.audit_user(db, "user-1") is None


def test_mismatch_is_reported_and_fixed(script, db, clock, payload):
    record = OnboardingSubmissionService(db, clock=clock).submit("user-1", payload).record
    OnboardingCRUD.update_cuore_score(db, record, 12.3)

    assert script.audit_user(db, "user-1") == (12.3, 65.0)
    assert script.audit_user(db, "user-1", fix=True) == (12.3, 65.0)
    assert script.audit_user(db, "user-1") is None
    assert OnboardingCRUD.find_by_user(db, "user-1").scores["cuore_score"] == 65.0


def test_unknown_user_is_skipped(script, db):
    assert script.audit_user(db, "ghost") is None
