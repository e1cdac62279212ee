from __future__ import annotations

from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm.exc import StaleDataError

from lendbox.errors import ConflictError
from lendbox.extensions import db


@contextmanager
def unit_of_work():
    """
    Request and item writes land in one commit or not at all.
    - clean exit: commit
    - any exception: rollback, then re-raise
    - stale versioned row (concurrent writer won): ConflictError
    """
    try:
        yield db.session
        db.session.commit()
    except StaleDataError as exc:
        db.session.rollback()
        current_app.logger.warning(f"[unit_of_work] stale write rejected: {exc}")
        raise ConflictError("Request or item was modified by another operation") from exc
    except SQLAlchemyError as exc:
        db.session.rollback()
        current_app.logger.exception(f"[unit_of_work] transaction failed: {exc}")
        raise
    except Exception:
        db.session.rollback()
        raise
