"""
Data access layer

`Store` wraps one database session and is the only place handlers and
services touch the ORM. It is created per request by the `get_store`
dependency, so tests can hand in a session bound to an in-memory database.
"""

from datetime import datetime
from typing import Iterable, List, Optional
import uuid

from sqlmodel import Session, select, col

from guestfeedback.models import (
    Form,
    FormField,
    Hotel,
    Notification,
    PaymentMethod,
    Review,
    ReviewStatus,
    User,
    UserRole,
    WebSession,
)


class Store:
    """Repository over a SQLModel session"""

    def __init__(self, session: Session):
        self.session = session

    # Unit of work

    def add(self, *instances) -> None:
        for instance in instances:
            self.session.add(instance)

    def delete(self, instance) -> None:
        self.session.delete(instance)

    def flush(self) -> None:
        self.session.flush()

    def commit(self) -> None:
        try:
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

    def rollback(self) -> None:
        self.session.rollback()

    def refresh(self, instance) -> None:
        self.session.refresh(instance)

    # Users

    def get_user(self, user_id: uuid.UUID) -> Optional[User]:
        return self.session.get(User, user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return self.session.exec(
            select(User).where(User.email == email.strip().lower())
        ).first()

    def get_user_by_verification_token(self, token: str) -> Optional[User]:
        return self.session.exec(
            select(User).where(User.verification_token == token)
        ).first()

    def get_user_by_reset_token(self, token: str) -> Optional[User]:
        return self.session.exec(
            select(User).where(User.reset_token == token)
        ).first()

    def list_platform_admins(self) -> List[User]:
        return list(self.session.exec(
            select(User).where(User.role == UserRole.PLATFORM_ADMIN)
        ).all())

    # Web sessions

    def get_web_session(self, session_id: str) -> Optional[WebSession]:
        return self.session.get(WebSession, session_id)

    def delete_expired_web_sessions(self, user_id: uuid.UUID, now: datetime) -> None:
        expired = self.session.exec(
            select(WebSession).where(
                (WebSession.user_id == user_id) & (WebSession.expires_at <= now)
            )
        ).all()
        for record in expired:
            self.session.delete(record)

    def delete_web_sessions(self, user_id: uuid.UUID) -> None:
        for record in self.session.exec(select(WebSession).where(WebSession.user_id == user_id)).all():
            self.session.delete(record)

    # Hotels

    def get_hotel(self, hotel_id: uuid.UUID) -> Optional[Hotel]:
        return self.session.get(Hotel, hotel_id)

    def get_hotel_by_slug(self, slug: str) -> Optional[Hotel]:
        return self.session.exec(select(Hotel).where(Hotel.slug == slug)).first()

    def get_hotel_by_subscription(self, subscription_id: str) -> Optional[Hotel]:
        return self.session.exec(
            select(Hotel).where(Hotel.subscription_id == subscription_id)
        ).first()

    def list_hotels(self, skip: int = 0, limit: int = 100) -> List[Hotel]:
        return list(self.session.exec(
            select(Hotel).order_by(col(Hotel.created_at).desc()).offset(skip).limit(limit)
        ).all())

    # Forms

    def get_form(self, form_id: uuid.UUID, hotel_id: uuid.UUID) -> Optional[Form]:
        """Form lookup always scoped to the owning hotel"""
        return self.session.exec(
            select(Form).where((Form.id == form_id) & (Form.hotel_id == hotel_id))
        ).first()

    def find_form(self, form_id: uuid.UUID) -> Optional[Form]:
        """Unscoped lookup, for platform admins only"""
        return self.session.get(Form, form_id)

    def list_all_forms(self, hotel_id: Optional[uuid.UUID] = None, skip: int = 0, limit: int = 100) -> List[Form]:
        query = select(Form)
        if hotel_id is not None:
            query = query.where(Form.hotel_id == hotel_id)
        return list(self.session.exec(
            query.order_by(col(Form.created_at).desc()).offset(skip).limit(limit)
        ).all())

    def list_forms(self, hotel_id: uuid.UUID, public_only: bool = False) -> List[Form]:
        query = select(Form).where(Form.hotel_id == hotel_id)
        if public_only:
            query = query.where((Form.is_active == True) & (Form.is_public == True))  # noqa: E712
        return list(self.session.exec(query.order_by(col(Form.created_at))).all())

    def replace_form_fields(self, form: Form, fields: Iterable[FormField]) -> None:
        form.fields.clear()
        self.session.flush()
        for position, field in enumerate(fields):
            field.position = position
            form.fields.append(field)

    # Reviews

    def get_review(self, review_id: uuid.UUID) -> Optional[Review]:
        return self.session.get(Review, review_id)

    def list_reviews(
        self,
        hotel_id: uuid.UUID,
        status: Optional[ReviewStatus] = None,
        include_deleted: bool = False,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Review]:
        query = select(Review).where(Review.hotel_id == hotel_id)
        if status is not None:
            query = query.where(Review.status == status)
        if not include_deleted:
            query = query.where(Review.is_deleted == False)  # noqa: E712
        query = query.order_by(col(Review.submitted_at).desc()).offset(skip).limit(limit)
        return list(self.session.exec(query).all())

    def search_reviews(
        self,
        hotel_id: Optional[uuid.UUID] = None,
        status: Optional[ReviewStatus] = None,
        rating: Optional[int] = None,
        skip: int = 0,
        limit: int = 100,
    ) -> List[Review]:
        """Cross-tenant review search for platform admins; deleted reviews excluded"""
        query = select(Review).where(Review.is_deleted == False)  # noqa: E712
        if hotel_id is not None:
            query = query.where(Review.hotel_id == hotel_id)
        if status is not None:
            query = query.where(Review.status == status)
        if rating is not None:
            query = query.where(Review.overall_rating == rating)
        query = query.order_by(col(Review.submitted_at).desc()).offset(skip).limit(limit)
        return list(self.session.exec(query).all())

    # Notifications

    def get_notification(self, notification_id: uuid.UUID) -> Optional[Notification]:
        return self.session.get(Notification, notification_id)

    def list_notifications(
        self, user_id: uuid.UUID, unread_only: bool = False, limit: int = 50
    ) -> List[Notification]:
        query = select(Notification).where(Notification.user_id == user_id)
        if unread_only:
            query = query.where(Notification.is_read == False)  # noqa: E712
        return list(self.session.exec(
            query.order_by(col(Notification.created_at).desc()).limit(limit)
        ).all())

    # Payment methods

    def get_payment_method(self, method_id: uuid.UUID) -> Optional[PaymentMethod]:
        return self.session.get(PaymentMethod, method_id)

    def list_payment_methods(self, hotel_id: uuid.UUID) -> List[PaymentMethod]:
        return list(self.session.exec(
            select(PaymentMethod)
            .where(PaymentMethod.hotel_id == hotel_id)
            .order_by(col(PaymentMethod.created_at))
        ).all())
