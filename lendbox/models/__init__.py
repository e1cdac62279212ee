from lendbox.models.user import User
from lendbox.models.item import Item, ItemStatus
from lendbox.models.borrow_request import BorrowRequest, RequestStatus

__all__ = ["User", "Item", "ItemStatus", "BorrowRequest", "RequestStatus"]
