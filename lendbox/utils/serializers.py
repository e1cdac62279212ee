from lendbox.services.policy import allowed_operations


def _iso(value):
    return value.isoformat() if value is not None else None


def _user_to_dict(user):
    if user is None:
        return None
    return {"id": user.id, "username": user.username}


def item_to_dict(item):
    if item is None:
        return None
    return {
        "id": item.id,
        "title": item.title,
        "status": item.status.name,
        "owner_id": item.owner_id,
    }


def borrow_request_to_dict(br, viewer_id=None):
    data = {
        "id": br.id,
        "item": item_to_dict(br.item),
        "borrower": _user_to_dict(br.borrower),
        "lender": _user_to_dict(br.lender),
        "status": br.status.name,
        "request_message": br.request_message,
        "response_message": br.response_message,
        "borrow_date": _iso(br.borrow_date),
        "return_date": _iso(br.return_date),
        "returned_at": _iso(br.returned_at),
        "completed_at": _iso(br.completed_at),
        "created_at": _iso(br.created_at),
        "updated_at": _iso(br.updated_at),
    }
    if viewer_id is not None:
        data["allowed_actions"] = allowed_operations(br, viewer_id)
    return data
