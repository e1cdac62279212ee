from flask import Blueprint, request, jsonify, g

from lendbox.errors import ValidationError
from lendbox.services.borrow_request_service import BorrowRequestService
from lendbox.services.payloads import CreateRequestPayload
from lendbox.services.statistics_service import StatisticsService
from lendbox.utils.decorators import identity_required
from lendbox.utils.serializers import borrow_request_to_dict

borrow_request_bp = Blueprint("borrow_requests", __name__)


def _ok(data, message, code=200):
    return jsonify({"success": True, "message": message, "data": data}), code


def _response_message():
    data = request.get_json(silent=True) or {}
    return data.get("response_message")


@borrow_request_bp.post("")
@identity_required
def create_request():
    data = request.get_json(silent=True) or {}
    item_id = request.args.get("item_id", type=int)
    if item_id is None:
        try:
            item_id = int(data["item_id"])
        except (KeyError, TypeError, ValueError):
            raise ValidationError("item_id is required")

    payload = CreateRequestPayload.from_json(data)
    br = BorrowRequestService.create_request(item_id, payload, g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Borrow request created successfully", 201)


@borrow_request_bp.get("/sent")
@identity_required
def sent_requests():
    rows = BorrowRequestService.list_sent(g.user_id, request.args.get("status"))
    return _ok([borrow_request_to_dict(x, g.user_id) for x in rows], "Sent requests retrieved successfully")


@borrow_request_bp.get("/received")
@identity_required
def received_requests():
    rows = BorrowRequestService.list_received(g.user_id, request.args.get("status"))
    return _ok([borrow_request_to_dict(x, g.user_id) for x in rows], "Received requests retrieved successfully")


@borrow_request_bp.get("/statistics")
@identity_required
def statistics():
    stats = StatisticsService.for_user(g.user_id)
    return _ok(stats.to_dict(), "Statistics retrieved successfully")


@borrow_request_bp.get("/<int:request_id>")
@identity_required
def get_request(request_id):
    br = BorrowRequestService.get_by_id(request_id, g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Request retrieved successfully")


@borrow_request_bp.post("/<int:request_id>/approve")
@identity_required
def approve_request(request_id):
    br = BorrowRequestService.approve(request_id, _response_message(), g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Request approved successfully")


@borrow_request_bp.post("/<int:request_id>/reject")
@identity_required
def reject_request(request_id):
    br = BorrowRequestService.reject(request_id, _response_message(), g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Request rejected successfully")


@borrow_request_bp.post("/<int:request_id>/return")
@identity_required
def mark_returned(request_id):
    br = BorrowRequestService.mark_returned(request_id, g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Item marked as returned successfully")


@borrow_request_bp.post("/<int:request_id>/confirm")
@identity_required
def confirm_return(request_id):
    br = BorrowRequestService.confirm_return(request_id, g.user_id)
    return _ok(borrow_request_to_dict(br, g.user_id), "Return confirmed successfully")


@borrow_request_bp.delete("/<int:request_id>")
@identity_required
def cancel_request(request_id):
    BorrowRequestService.cancel(request_id, g.user_id)
    return _ok(None, "Request canceled successfully")
