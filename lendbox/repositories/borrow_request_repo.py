from lendbox.models.borrow_request import BorrowRequest, RequestStatus
from lendbox.extensions import db

class BorrowRequestRepo:
    @staticmethod
    def get(request_id: int):
        return db.session.get(BorrowRequest, request_id)

    @staticmethod
    def get_for_update(request_id: int):
        return (
            db.session.query(BorrowRequest)
            .filter(BorrowRequest.id == request_id)
            .with_for_update()
            .first()
        )

    @staticmethod
    def save(borrow_request: BorrowRequest):
        db.session.add(borrow_request)
        db.session.flush()
        return borrow_request

    @staticmethod
    def delete(borrow_request: BorrowRequest):
        db.session.delete(borrow_request)
        db.session.flush()

    @staticmethod
    def list_by_borrower(borrower_id: int, status: RequestStatus | None = None):
        q = BorrowRequest.query.filter_by(borrower_id=borrower_id)
        if status is not None:
            q = q.filter_by(status=status)
        return q.order_by(BorrowRequest.id.desc()).all()

    @staticmethod
    def list_by_lender(lender_id: int, status: RequestStatus | None = None):
        q = BorrowRequest.query.filter_by(lender_id=lender_id)
        if status is not None:
            q = q.filter_by(status=status)
        return q.order_by(BorrowRequest.id.desc()).all()

    @staticmethod
    def count_by_borrower_and_status(borrower_id: int, status: RequestStatus) -> int:
        return BorrowRequest.query.filter_by(borrower_id=borrower_id, status=status).count()

    @staticmethod
    def count_by_lender_and_status(lender_id: int, status: RequestStatus) -> int:
        return BorrowRequest.query.filter_by(lender_id=lender_id, status=status).count()
