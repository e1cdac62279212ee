from datetime import date, datetime
from functools import wraps

from flask import current_app

from lendbox.errors import LendingError, NotFoundError, ValidationError, ConflictError
from lendbox.models.borrow_request import BorrowRequest, RequestStatus
from lendbox.models.item import ItemStatus
from lendbox.repositories.borrow_request_repo import BorrowRequestRepo
from lendbox.repositories.item_repo import ItemRepo
from lendbox.services.payloads import CreateRequestPayload, clean_message, parse_status
from lendbox.services.policy import check_transition, require_participant
from lendbox.services.unit_of_work import unit_of_work


def _logged(operation: str):
    """Log every rejected operation with its error kind, then re-raise."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            try:
                return fn(*args, **kwargs)
            except LendingError as e:
                current_app.logger.warning(
                    f"[borrow_request] {operation} rejected ({e.kind}): {e.message}"
                )
                raise
        return wrapper
    return decorator


class BorrowRequestService:
    @staticmethod
    def _max_message_length() -> int:
        return int(current_app.config.get("MAX_MESSAGE_LENGTH", 500))

    @staticmethod
    def _load(request_id: int, for_update: bool = True) -> BorrowRequest:
        if for_update:
            borrow_request = BorrowRequestRepo.get_for_update(request_id)
        else:
            borrow_request = BorrowRequestRepo.get(request_id)
        if not borrow_request:
            raise NotFoundError("Request not found")
        return borrow_request

    @staticmethod
    @_logged("create")
    def create_request(item_id: int, payload: CreateRequestPayload, borrower_id: int) -> BorrowRequest:
        with unit_of_work():
            item = ItemRepo.get(item_id)
            if not item:
                raise NotFoundError("Item not found")

            if payload.borrow_date < date.today():
                raise ValidationError("Borrow date cannot be in the past")
            if payload.return_date <= payload.borrow_date:
                raise ValidationError("Return date must be after borrow date")

            message = clean_message(
                payload.request_message, "request_message",
                BorrowRequestService._max_message_length(),
            )

            if item.status is not ItemStatus.AVAILABLE:
                raise ValidationError("Item is not available for borrowing")
            if item.owner_id == borrower_id:
                raise ValidationError("Cannot borrow your own item")

            borrow_request = BorrowRequest(
                item_id=item.id,
                borrower_id=borrower_id,
                lender_id=item.owner_id,
                status=RequestStatus.PENDING,
                borrow_date=payload.borrow_date,
                return_date=payload.return_date,
                request_message=message,
            )
            BorrowRequestRepo.save(borrow_request)

        current_app.logger.info(
            f"[borrow_request] created id={borrow_request.id} item={item_id} "
            f"borrower={borrower_id} lender={borrow_request.lender_id}"
        )
        return borrow_request

    @staticmethod
    @_logged("list_sent")
    def list_sent(user_id: int, status=None):
        return BorrowRequestRepo.list_by_borrower(user_id, parse_status(status))

    @staticmethod
    @_logged("list_received")
    def list_received(user_id: int, status=None):
        return BorrowRequestRepo.list_by_lender(user_id, parse_status(status))

    @staticmethod
    @_logged("get")
    def get_by_id(request_id: int, user_id: int) -> BorrowRequest:
        borrow_request = BorrowRequestService._load(request_id, for_update=False)
        require_participant(borrow_request, user_id)
        return borrow_request

    @staticmethod
    @_logged("approve")
    def approve(request_id: int, response_message, user_id: int) -> BorrowRequest:
        with unit_of_work():
            borrow_request = BorrowRequestService._load(request_id)
            transition = check_transition(borrow_request, user_id, "approve")
            message = clean_message(
                response_message, "response_message",
                BorrowRequestService._max_message_length(),
            )

            # another approved request may have taken the item meanwhile
            item = ItemRepo.get_for_update(borrow_request.item_id)
            if item.status is not ItemStatus.AVAILABLE:
                raise ConflictError("Item is no longer available")

            borrow_request.status = transition.target
            if message:
                borrow_request.response_message = message
            item.status = ItemStatus.LOANED

            ItemRepo.save(item)
            BorrowRequestRepo.save(borrow_request)

        current_app.logger.info(
            f"[borrow_request] approved id={request_id} item={borrow_request.item_id} -> LOANED"
        )
        return borrow_request

    @staticmethod
    @_logged("reject")
    def reject(request_id: int, response_message, user_id: int) -> BorrowRequest:
        # item status is not checked nor touched here
        with unit_of_work():
            borrow_request = BorrowRequestService._load(request_id)
            transition = check_transition(borrow_request, user_id, "reject")
            message = clean_message(
                response_message, "response_message",
                BorrowRequestService._max_message_length(),
            )

            borrow_request.status = transition.target
            if message:
                borrow_request.response_message = message
            BorrowRequestRepo.save(borrow_request)

        current_app.logger.info(f"[borrow_request] rejected id={request_id}")
        return borrow_request

    @staticmethod
    @_logged("mark_returned")
    def mark_returned(request_id: int, user_id: int) -> BorrowRequest:
        with unit_of_work():
            borrow_request = BorrowRequestService._load(request_id)
            transition = check_transition(borrow_request, user_id, "mark_returned")

            item = ItemRepo.get_for_update(borrow_request.item_id)

            borrow_request.status = transition.target
            borrow_request.returned_at = datetime.utcnow()
            item.status = ItemStatus.AVAILABLE

            ItemRepo.save(item)
            BorrowRequestRepo.save(borrow_request)

        current_app.logger.info(
            f"[borrow_request] returned id={request_id} item={borrow_request.item_id} -> AVAILABLE"
        )
        return borrow_request

    @staticmethod
    @_logged("confirm_return")
    def confirm_return(request_id: int, user_id: int) -> BorrowRequest:
        with unit_of_work():
            borrow_request = BorrowRequestService._load(request_id)
            transition = check_transition(borrow_request, user_id, "confirm_return")

            now = datetime.utcnow()
            if borrow_request.returned_at and now < borrow_request.returned_at:
                # clock went backwards; completed_at must not precede returned_at
                now = borrow_request.returned_at

            borrow_request.status = transition.target
            borrow_request.completed_at = now
            BorrowRequestRepo.save(borrow_request)

        current_app.logger.info(f"[borrow_request] completed id={request_id}")
        return borrow_request

    @staticmethod
    @_logged("cancel")
    def cancel(request_id: int, user_id: int) -> None:
        with unit_of_work():
            borrow_request = BorrowRequestService._load(request_id)
            check_transition(borrow_request, user_id, "cancel")
            BorrowRequestRepo.delete(borrow_request)

        current_app.logger.info(f"[borrow_request] canceled id={request_id}")
