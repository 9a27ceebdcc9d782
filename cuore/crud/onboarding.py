from typing import Any, Dict, List, Optional
import logging

from sqlalchemy.orm import Session

from cuore.models.onboarding import OnboardingHistory, OnboardingRecord

logger = logging.getLogger(__name__)


def _insert_for(db: Session):
    """Dialect-specific INSERT construct that supports ON CONFLICT."""
    dialect = db.get_bind().dialect.name
    if dialect == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    elif dialect == "sqlite":
        from sqlalchemy.dialects.sqlite import insert
    else:
        raise RuntimeError(f"Atomic upsert is not supported on dialect '{dialect}'")
    return insert


class OnboardingCRUD:

    @staticmethod
    def find_by_user(db: Session, user_id: str) -> Optional[OnboardingRecord]:
        return (
            db.query(OnboardingRecord)
            .filter(OnboardingRecord.user_id == user_id)
            .populate_existing()
            .first()
        )

    @staticmethod
    def upsert_by_user(
        db: Session,
        user_id: str,
        values: Dict[str, Any],
        history: Optional[Dict[str, Any]] = None,
    ) -> OnboardingRecord:
        """Create or fully overwrite the user's record in one statement.

        INSERT ... ON CONFLICT (user_id) DO UPDATE keeps the existence check
        and the write atomic, so concurrent reassessments for the same user
        cannot produce two rows. The optional history snapshot is committed
        in the same transaction.
        """
        insert = _insert_for(db)
        stmt = insert(OnboardingRecord).values(user_id=user_id, **values)
        stmt = stmt.on_conflict_do_update(
            index_elements=["user_id"],
            set_={key: stmt.excluded[key] for key in values},
        )

        try:
            db.execute(stmt)
            if history is not None:
                db.add(OnboardingHistory(user_id=user_id, **history))
            db.commit()
        except Exception as e:
            db.rollback()
            logger.error(f"❌ [OnboardingCRUD] Upsert failed for user {user_id}: {str(e)}")
            raise

        record = OnboardingCRUD.find_by_user(db, user_id)
        logger.info(f"✅ [OnboardingCRUD] Stored onboarding record for user {user_id} (cuore_score={record.cuore_score})")
        return record

    @staticmethod
    def list_history(db: Session, user_id: str, limit: Optional[int] = None) -> List[OnboardingHistory]:
        query = (
            db.query(OnboardingHistory)
            .filter(OnboardingHistory.user_id == user_id)
            .order_by(OnboardingHistory.recorded_at.asc(), OnboardingHistory.id.asc())
        )
        if limit:
            query = query.limit(limit)
        return query.all()

    @staticmethod
    def list_user_ids(db: Session) -> List[str]:
        return [row[0] for row in db.query(OnboardingRecord.user_id).order_by(OnboardingRecord.user_id).all()]

    @staticmethod
    def update_cuore_score(db: Session, record: OnboardingRecord, cuore_score: float) -> OnboardingRecord:
        scores = dict(record.scores or {})
        scores["cuore_score"] = cuore_score
        record.scores = scores
        record.cuore_score = cuore_score
        db.commit()
        db.refresh(record)
        return record


onboarding = OnboardingCRUD()
