"""
리뷰 서비스 계층

New reviews are always unmoderated. The only mutation is the moderation
flag, toggled by an administrator.
"""

from typing import Any

from sqlalchemy import func
from sqlalchemy.orm import Session, selectinload

from bunyod_tour.database import db_transaction
from bunyod_tour.exceptions import NotFoundError, ValidationError
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import Review, Tour
from bunyod_tour.utils.multilingual import dump_json_list
from bunyod_tour.validators import CommonValidators

logger = get_logger("review_service")


class ReviewService:
    """리뷰 관련 서비스 클래스"""

    def __init__(self, db: Session):
        self.db = db

    def _query(self):
        return self.db.query(Review).options(
            selectinload(Review.tour).selectinload(Tour.tour_category_assignments)
        )

    def create_review(self, payload: dict[str, Any]) -> Review:
        """리뷰 작성 (항상 미승인 상태로 저장)"""
        reviewer_name = (payload.get("reviewer_name") or "").strip()
        if not reviewer_name:
            raise ValidationError("Reviewer name is required", details=[{"field": "reviewerName"}])

        try:
            rating = CommonValidators.validate_rating(payload.get("rating"))
        except ValueError as e:
            raise ValidationError(str(e), details=[{"field": "rating"}])

        text = (payload.get("text") or "").strip()
        if not text:
            raise ValidationError("Review text is required", details=[{"field": "text"}])

        tour_id = payload.get("tour_id")
        if tour_id in (None, ""):
            raise ValidationError("Tour ID is required", details=[{"field": "tourId"}])
        try:
            tour = self.db.get(Tour, int(tour_id))
        except (TypeError, ValueError):
            tour = None
        if tour is None:
            raise ValidationError("Invalid tour ID", details=[{"field": "tourId"}])

        with db_transaction(self.db):
            review = Review(
                tour_id=tour.id,
                reviewer_name=reviewer_name,
                rating=rating,
                text=text,
                photos=dump_json_list(payload.get("photos")),
                is_moderated=False,
            )
            self.db.add(review)

        logger.info(f"Review {review.id} submitted for tour {tour.id} (awaiting moderation)")
        return self.get_review(review.id)

    def get_review(self, review_id: int) -> Review:
        review = self._query().filter(Review.id == review_id).first()
        if review is None:
            raise NotFoundError("Review not found")
        return review

    def list_reviews(self) -> list[Review]:
        """전체 리뷰 목록 (관리자)"""
        return self._query().order_by(Review.created_at.desc(), Review.id.desc()).all()

    def list_public_reviews(self, tour_id: int) -> list[Review]:
        """승인된 리뷰만 조회"""
        return (
            self._query()
            .filter(Review.tour_id == tour_id, Review.is_moderated.is_(True))
            .order_by(Review.created_at.desc(), Review.id.desc())
            .all()
        )

    def get_review_stats(self, tour_id: int) -> dict[str, Any]:
        """
        승인된 리뷰 통계

        Returns:
            averageRating (소수점 1자리, 리뷰 없으면 0), totalReviews,
            ratingDistribution (평점 오름차순, 리뷰가 있는 평점만)
        """
        moderated = (Review.tour_id == tour_id, Review.is_moderated.is_(True))
        average, total = (
            self.db.query(func.avg(Review.rating), func.count(Review.id)).filter(*moderated).one()
        )
        distribution = (
            self.db.query(Review.rating, func.count(Review.id))
            .filter(*moderated)
            .group_by(Review.rating)
            .order_by(Review.rating)
            .all()
        )
        return {
            "averageRating": round(float(average), 1) if average else 0,
            "totalReviews": total,
            "ratingDistribution": [
                {"rating": rating, "count": count} for rating, count in distribution
            ],
        }

    def set_moderation(self, review_id: int, is_moderated: Any) -> Review:
        """승인 상태 변경 (불리언만 허용)"""
        if not isinstance(is_moderated, bool):
            raise ValidationError(
                "isModerated must be a boolean value", details=[{"field": "isModerated"}]
            )
        review = self.get_review(review_id)
        with db_transaction(self.db):
            review.is_moderated = is_moderated
        logger.info(f"Review {review_id} moderation -> {is_moderated}")
        return self.get_review(review_id)


def get_review_service(db: Session) -> ReviewService:
    """ReviewService 인스턴스 생성"""
    return ReviewService(db)
