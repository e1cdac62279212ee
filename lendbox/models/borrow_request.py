import enum
from datetime import datetime
from lendbox.extensions import db


class RequestStatus(enum.Enum):
    PENDING = "PENDING"
    APPROVED = "APPROVED"
    REJECTED = "REJECTED"
    RETURNED = "RETURNED"    # lender got the item back, borrower has not confirmed yet
    COMPLETED = "COMPLETED"

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.REJECTED, RequestStatus.COMPLETED)


class BorrowRequest(db.Model):
    __tablename__ = "borrow_requests"

    id = db.Column(db.Integer, primary_key=True)

    item_id = db.Column(db.Integer, db.ForeignKey("items.id"), nullable=False, index=True)
    borrower_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    lender_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    status = db.Column(
        db.Enum(RequestStatus, native_enum=False, length=20),
        nullable=False,
        default=RequestStatus.PENDING,
        index=True,
    )

    request_message = db.Column(db.String(500), nullable=True)
    response_message = db.Column(db.String(500), nullable=True)

    borrow_date = db.Column(db.Date, nullable=False)
    return_date = db.Column(db.Date, nullable=False)

    returned_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # optimistic lock: a concurrent writer that loaded an older row fails on flush
    version = db.Column(db.Integer, nullable=False)

    item = db.relationship("Item", backref="borrow_requests")
    borrower = db.relationship("User", foreign_keys=[borrower_id], backref="sent_requests")
    lender = db.relationship("User", foreign_keys=[lender_id], backref="received_requests")

    __mapper_args__ = {"version_id_col": version}
