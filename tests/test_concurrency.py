from datetime import timedelta

import pytest
from sqlalchemy import text

from lendbox.errors import ConflictError
from lendbox.extensions import db
from lendbox.models import BorrowRequest, Item, ItemStatus, RequestStatus
from lendbox.repositories.item_repo import ItemRepo
from lendbox.services.borrow_request_service import BorrowRequestService
from lendbox.services.payloads import CreateRequestPayload


@pytest.fixture
def pending(item, borrower, tomorrow):
    payload = CreateRequestPayload(borrow_date=tomorrow, return_date=tomorrow + timedelta(days=5))
    return BorrowRequestService.create_request(item.id, payload, borrower.id)


def test_second_of_two_concurrent_approvals_conflicts(pending, lender, item, monkeypatch):
    """
    Another connection approves the same request after this call loaded it.
    The versioned UPDATE of the slower call matches no row -> ConflictError,
    and its item write is rolled back with it.
    """
    request_id = pending.id
    real_get_for_update = ItemRepo.get_for_update

    def racing_get_for_update(item_id):
        with db.engine.begin() as conn:
            conn.execute(
                text(
                    "UPDATE borrow_requests SET status = 'APPROVED', version = version + 1 "
                    "WHERE id = :id"
                ),
                {"id": request_id},
            )
        return real_get_for_update(item_id)

    monkeypatch.setattr(ItemRepo, "get_for_update", staticmethod(racing_get_for_update))

    with pytest.raises(ConflictError):
        BorrowRequestService.approve(request_id, None, lender.id)

    monkeypatch.undo()
    db.session.expire_all()
    assert db.session.get(BorrowRequest, request_id).status is RequestStatus.APPROVED
    assert db.session.get(Item, item.id).status is ItemStatus.AVAILABLE


def test_sequential_duplicate_approval_observes_new_status(pending, lender, item):
    BorrowRequestService.approve(pending.id, None, lender.id)
    with pytest.raises(ConflictError) as exc:
        BorrowRequestService.approve(pending.id, None, lender.id)
    assert exc.value.message == "Only pending requests can be approved"
    db.session.refresh(item)
    assert item.status is ItemStatus.LOANED


def test_two_requests_for_one_item_cannot_both_be_approved(pending, lender, stranger, item, tomorrow, monkeypatch):
    """
    Request b for the same item is approved on another connection while
    approve(a) is between its availability check and its item write.
    The item's versioned UPDATE matches no row, so a stays PENDING.
    """
    payload = CreateRequestPayload(borrow_date=tomorrow, return_date=tomorrow + timedelta(days=2))
    other = BorrowRequestService.create_request(item.id, payload, stranger.id)
    first_id, other_id = pending.id, other.id
    real_save = ItemRepo.save

    def racing_save(racing_item):
        with db.engine.begin() as conn:
            conn.execute(
                text(
                    "UPDATE borrow_requests SET status = 'APPROVED', version = version + 1 "
                    "WHERE id = :id"
                ),
                {"id": other_id},
            )
            conn.execute(
                text("UPDATE items SET status = 'LOANED', version = version + 1 WHERE id = :id"),
                {"id": racing_item.id},
            )
        return real_save(racing_item)

    monkeypatch.setattr(ItemRepo, "save", staticmethod(racing_save))

    with pytest.raises(ConflictError):
        BorrowRequestService.approve(first_id, None, lender.id)

    monkeypatch.undo()
    db.session.expire_all()
    assert db.session.get(BorrowRequest, first_id).status is RequestStatus.PENDING
    assert db.session.get(BorrowRequest, other_id).status is RequestStatus.APPROVED
    assert db.session.get(Item, item.id).status is ItemStatus.LOANED
