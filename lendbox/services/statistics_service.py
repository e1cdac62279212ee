from __future__ import annotations

from dataclasses import dataclass, field

from lendbox.models.borrow_request import RequestStatus
from lendbox.repositories.borrow_request_repo import BorrowRequestRepo


@dataclass(frozen=True)
class RequestStatistics:
    sent: dict[RequestStatus, int] = field(default_factory=dict)
    received: dict[RequestStatus, int] = field(default_factory=dict)

    def combined(self, status: RequestStatus) -> int:
        return self.sent.get(status, 0) + self.received.get(status, 0)

    @property
    def total_sent(self) -> int:
        return sum(self.sent.values())

    @property
    def total_received(self) -> int:
        return sum(self.received.values())

    def to_dict(self) -> dict:
        data = {status.name.lower(): self.combined(status) for status in RequestStatus}
        data.update(
            total_sent=self.total_sent,
            total_received=self.total_received,
            sent={status.name: self.sent.get(status, 0) for status in RequestStatus},
            received={status.name: self.received.get(status, 0) for status in RequestStatus},
        )
        return data


class StatisticsService:
    @staticmethod
    def for_user(user_id: int) -> RequestStatistics:
        """
        Counts per status from both sides:
        - sent: user is the borrower
        - received: user is the lender
        Recomputed on every call.
        """
        sent = {
            status: BorrowRequestRepo.count_by_borrower_and_status(user_id, status)
            for status in RequestStatus
        }
        received = {
            status: BorrowRequestRepo.count_by_lender_and_status(user_id, status)
            for status in RequestStatus
        }
        return RequestStatistics(sent=sent, received=received)
