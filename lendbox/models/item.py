import enum
from datetime import datetime
from lendbox.extensions import db


class ItemStatus(enum.Enum):
    AVAILABLE = "AVAILABLE"
    LOANED = "LOANED"
    UNAVAILABLE = "UNAVAILABLE"  # owner-controlled, never touched by borrow requests


class Item(db.Model):
    __tablename__ = "items"

    id = db.Column(db.Integer, primary_key=True)
    owner_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    title = db.Column(db.String(200), nullable=False)

    status = db.Column(
        db.Enum(ItemStatus, native_enum=False, length=20),
        nullable=False,
        default=ItemStatus.AVAILABLE,
    )

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # optimistic lock: two approvals racing for one item cannot both loan it
    version = db.Column(db.Integer, nullable=False)
    __mapper_args__ = {"version_id_col": version}

    owner = db.relationship("User", backref="items")
