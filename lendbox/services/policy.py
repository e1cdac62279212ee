"""Who may move a borrow request, and from which state.

Every mutating operation goes through ``check_transition``: the role check
runs before the state check, so a wrong actor always gets an
AuthorizationError even when the request is also in the wrong state.
"""
import enum
from typing import NamedTuple, Optional

from lendbox.errors import AuthorizationError, ConflictError
from lendbox.models.borrow_request import BorrowRequest, RequestStatus


class Role(enum.Enum):
    BORROWER = "borrower"
    LENDER = "lender"


class Transition(NamedTuple):
    role: Role
    source: RequestStatus
    target: Optional[RequestStatus]  # None: the request is deleted
    action: str
    conflict_message: str


TRANSITIONS = {
    "approve": Transition(
        Role.LENDER, RequestStatus.PENDING, RequestStatus.APPROVED,
        "approve this request", "Only pending requests can be approved",
    ),
    "reject": Transition(
        Role.LENDER, RequestStatus.PENDING, RequestStatus.REJECTED,
        "reject this request", "Only pending requests can be rejected",
    ),
    "cancel": Transition(
        Role.BORROWER, RequestStatus.PENDING, None,
        "cancel this request", "Only pending requests can be canceled",
    ),
    "mark_returned": Transition(
        Role.LENDER, RequestStatus.APPROVED, RequestStatus.RETURNED,
        "mark the item as returned", "Only approved requests can be marked as returned",
    ),
    "confirm_return": Transition(
        Role.BORROWER, RequestStatus.RETURNED, RequestStatus.COMPLETED,
        "confirm the return", "Only returned requests can be confirmed",
    ),
}

_reachable = {t.source for t in TRANSITIONS.values()} | {
    t.target for t in TRANSITIONS.values() if t.target is not None
}
if _reachable != set(RequestStatus):
    raise RuntimeError(
        f"transition table does not cover statuses: {set(RequestStatus) - _reachable}"
    )


def role_holder(borrow_request: BorrowRequest, role: Role) -> int:
    if role is Role.LENDER:
        return borrow_request.lender_id
    if role is Role.BORROWER:
        return borrow_request.borrower_id
    raise ValueError(f"unknown role: {role!r}")


def role_of(borrow_request: BorrowRequest, user_id: int) -> Optional[Role]:
    if user_id == borrow_request.lender_id:
        return Role.LENDER
    if user_id == borrow_request.borrower_id:
        return Role.BORROWER
    return None


def require_role(borrow_request: BorrowRequest, user_id: int, role: Role, action: str) -> None:
    if role_holder(borrow_request, role) != user_id:
        raise AuthorizationError(f"Only the {role.value} may {action}")


def require_participant(borrow_request: BorrowRequest, user_id: int) -> None:
    if role_of(borrow_request, user_id) is None:
        raise AuthorizationError("Not authorized to view this request")


def require_status(borrow_request: BorrowRequest, expected: RequestStatus, message: str) -> None:
    if borrow_request.status is not expected:
        raise ConflictError(message)


def check_transition(borrow_request: BorrowRequest, user_id: int, operation: str) -> Transition:
    transition = TRANSITIONS[operation]
    require_role(borrow_request, user_id, transition.role, transition.action)
    require_status(borrow_request, transition.source, transition.conflict_message)
    return transition


def allowed_operations(borrow_request: BorrowRequest, user_id: int) -> list[str]:
    """Operations ``user_id`` could perform on the request right now."""
    if borrow_request.status.is_terminal:
        return []
    role = role_of(borrow_request, user_id)
    return [
        name
        for name, t in TRANSITIONS.items()
        if t.role is role and t.source is borrow_request.status
    ]
