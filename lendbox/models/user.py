from datetime import datetime
from lendbox.extensions import db


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=datetime.utcnow)
