#!/usr/bin/env python3
"""
Audit stored Cuore Scores against their stored sub-scores.

The composite is a pure function of the sub-scores kept on each record, so
re-deriving it must reproduce the stored value exactly. This script reports
every record where it does not and can rewrite the stored value.

Usage:
    # Check all users
    python recalculate_cuore_scores.py

    # Check one user
    python recalculate_cuore_scores.py --user-id 42

    # Rewrite mismatching scores
    python recalculate_cuore_scores.py --fix
"""
import sys
import os
import argparse
from typing import List, Optional, Tuple

# Add parent directory to path
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from cuore.crud.onboarding import OnboardingCRUD
from cuore.db.session import SessionLocal
from cuore.onboarding_scoring.composite import compose
from cuore.onboarding_scoring.domain import ScoreSet


def audit_user(db, user_id: str, fix: bool = False) -> Optional[Tuple[float, float]]:
    """
    Re-derive one user's composite.

    Returns:
        (stored, recomputed) when they differ, otherwise None
    """
    record = OnboardingCRUD.find_by_user(db, user_id)
    if record is None:
        return None

    recomputed = compose(ScoreSet.from_dict(record.scores))
    stored = record.cuore_score
    if recomputed == stored:
        return None

    if fix:
        OnboardingCRUD.update_cuore_score(db, record, recomputed)
    return stored, recomputed


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Audit stored Cuore Scores")
    parser.add_argument("--user-id", type=str, help="Audit a single user")
    parser.add_argument("--fix", action="store_true", help="Rewrite mismatching scores")
    args = parser.parse_args(argv)

    db = SessionLocal()
    try:
        user_ids = [args.user_id] if args.user_id else OnboardingCRUD.list_user_ids(db)
        print(f"Auditing {len(user_ids)} record(s)...")

        mismatches = 0
        for user_id in user_ids:
            diff = audit_user(db, user_id, fix=args.fix)
            if diff:
                mismatches += 1
                stored, recomputed = diff
                action = "fixed" if args.fix else "mismatch"
                print(f"  {action}: user {user_id} stored={stored} recomputed={recomputed}")

        print(f"Done: {mismatches} mismatch(es) out of {len(user_ids)}")
        return 1 if mismatches and not args.fix else 0
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
