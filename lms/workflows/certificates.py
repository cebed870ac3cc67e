"""
Certificate approval workflow
"""

import logging
from datetime import datetime, timezone
from typing import Callable, Iterable, Optional

from lms.api import endpoints
from lms.config import config
from lms.errors import InvalidStateError, RecordNotFoundError
from lms.models import CertificateRequest, parse_timestamp
from lms.states import CertificateStatus

logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CertificateRequestCollection:
    """Certificate requests owned by the approval workflow"""

    def __init__(self, requests: Optional[Iterable[CertificateRequest]] = None):
        self._items: dict[str, CertificateRequest] = {r.id: r for r in requests or []}

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(list(self._items.values()))

    def get(self, request_id: str) -> CertificateRequest:
        try:
            return self._items[request_id]
        except KeyError:
            raise RecordNotFoundError(f"Certificate request {request_id} not found") from None

    def load(self, requests: Iterable[CertificateRequest]):
        self._items = {r.id: r for r in requests}

    def replace(self, request: CertificateRequest):
        if request.id not in self._items:
            raise RecordNotFoundError(f"Certificate request {request.id} not found")
        self._items[request.id] = request

    def with_status(self, status: CertificateStatus) -> list[CertificateRequest]:
        return [r for r in self._items.values() if r.status is status]

    def pending_count(self) -> int:
        return len(self.with_status(CertificateStatus.PENDING))


class CertificateWorkflow:
    """
    Approve/reject certificate requests.

    At most one transition is in flight per request id (`processing`);
    different ids may be processed concurrently. With `guard_terminal` on,
    a request that is no longer pending is refused before any API call.
    """

    def __init__(
        self,
        requests: CertificateRequestCollection,
        token: Optional[str] = None,
        api=endpoints,
        guard_terminal: Optional[bool] = None,
        clock: Callable[[], datetime] = utc_now
    ):
        self.requests = requests
        self.token = token
        self.api = api
        self.guard_terminal = config.GUARD_TERMINAL_CERTIFICATES if guard_terminal is None else guard_terminal
        self.clock = clock
        self.processing: set[str] = set()

    def is_processing(self, request_id: str) -> bool:
        return request_id in self.processing

    async def refresh(self) -> list[CertificateRequest]:
        """Reload all requests from the API"""
        rows = await self.api.get_certificate_requests(self.token)
        self.requests.load(rows)
        logger.info(f"Certificate requests loaded: {len(rows)} ({self.requests.pending_count()} pending)")
        return rows

    async def approve(self, request_id: str) -> CertificateRequest:
        return await self._transition(request_id, CertificateStatus.APPROVED)

    async def reject(self, request_id: str) -> CertificateRequest:
        return await self._transition(request_id, CertificateStatus.REJECTED)

    async def _transition(self, request_id: str, target: CertificateStatus) -> CertificateRequest:
        request = self.requests.get(request_id)

        if request_id in self.processing:
            raise InvalidStateError(f"Certificate request {request_id} is already being processed")
        if self.guard_terminal and request.status.is_terminal:
            raise InvalidStateError(f"Certificate request {request_id} is already {request.status.value}")

        call = self.api.approve_certificate if target is CertificateStatus.APPROVED else self.api.reject_certificate

        self.processing.add(request_id)
        try:
            delta = await call(self.token, request_id)
        finally:
            self.processing.discard(request_id)

        current = self.requests.get(request_id)
        if current.status.is_terminal:
            # Server accepted a transition for a request that is already closed here
            logger.warning(
                f"Certificate request {request_id} is already {current.status.value}; "
                f"{target.value} response not applied"
            )
            return current

        stamp_key = "approvedAt" if target is CertificateStatus.APPROVED else "rejectedAt"
        stamp = parse_timestamp((delta or {}).get(stamp_key)) or self.clock()
        updated = current.transition(target, stamp)
        self.requests.replace(updated)

        logger.info(f"Certificate request {target.value}: id={request_id}")
        return updated
