"""
Renewal Workflow - certificate renewal requests

Module: renewals.workflow
Date: 2026-10-17
Version: 0.1.0-alpha

CHANGELOG:
[2026-10-17 v0.1.0-alpha] Initial implementation
  - Form validation with per-field messages
  - Request creation in "pending" state with unique id
  - Backend-driven status updates
  - Status counters for the renewals report

ARCHITECTURE:
RenewalWorkflow works on a caller-owned list of RenewalRequest:
  - create() only appends fully valid requests
  - Requests leave "pending" only through apply_status()/receive(),
    i.e. when the backend or an operator says so
  - id and created_at never change once assigned
"""

import logging
import uuid
from dataclasses import dataclass, replace
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, List, Mapping, Optional

from ..core.constants import (
    CERTIFICATE_TYPES,
    RENEWAL_PRIORITIES,
    RENEWAL_STATUSES,
    STATUS_PENDING,
)


class RenewalError(Exception):
    """Base renewal workflow error"""
    pass


class RenewalValidationError(RenewalError):
    """One or more fields are invalid"""

    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        fields = ", ".join(sorted(self.errors))
        super().__init__(f"Invalid renewal request fields: {fields}")


class UnknownRenewalError(RenewalError):
    """No request with the given id"""
    pass


@dataclass(frozen=True)
class RenewalRequest:
    """A request to reissue a certificate with a new validity window"""
    id: str
    certificate_alias: str
    certificate_type: str
    current_expiry_date: str
    new_validity_days: int
    reason: str
    priority: str
    status: str
    created_at: str

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the camelCase wire format"""
        return {
            "id": self.id,
            "certificateAlias": self.certificate_alias,
            "certificateType": self.certificate_type,
            "currentExpiryDate": self.current_expiry_date,
            "newValidityDays": self.new_validity_days,
            "reason": self.reason,
            "priority": self.priority,
            "status": self.status,
            "createdAt": self.created_at,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "RenewalRequest":
        """
        Create from the wire format (e.g. backend response)

        Raises:
            RenewalValidationError: If any field is invalid
        """
        errors = validate_renewal_form(data)
        status = data.get("status")
        if status not in RENEWAL_STATUSES:
            errors["status"] = f"Status must be one of: {', '.join(RENEWAL_STATUSES)}"
        for key in ("id", "createdAt"):
            value = data.get(key)
            if value is None or not str(value).strip():
                errors[key] = f"{key} is required"
        if errors:
            raise RenewalValidationError(errors)

        return cls(
            id=str(data["id"]),
            certificate_alias=data["certificateAlias"].strip(),
            certificate_type=data["certificateType"],
            current_expiry_date=data["currentExpiryDate"].strip(),
            new_validity_days=_parse_days(data["newValidityDays"]),
            reason=data["reason"].strip(),
            priority=data["priority"],
            status=status,
            created_at=str(data["createdAt"]),
        )


def validate_renewal_form(form: Mapping[str, Any]) -> Dict[str, str]:
    """
    Validate a renewal form

    Args:
        form: camelCase form fields

    Returns:
        Mapping of field name to error message (empty when valid)
    """
    errors: Dict[str, str] = {}

    if not _is_filled(form.get("certificateAlias")):
        errors["certificateAlias"] = "Certificate alias is required"

    certificate_type = form.get("certificateType")
    if not _is_filled(certificate_type):
        errors["certificateType"] = "Certificate type is required"
    elif certificate_type not in CERTIFICATE_TYPES:
        errors["certificateType"] = (
            f"Certificate type must be one of: {', '.join(CERTIFICATE_TYPES)}"
        )

    expiry = form.get("currentExpiryDate")
    if not _is_filled(expiry):
        errors["currentExpiryDate"] = "Current expiry date is required"
    else:
        try:
            date.fromisoformat(expiry.strip())
        except ValueError:
            errors["currentExpiryDate"] = "Current expiry date must be a date (YYYY-MM-DD)"

    days = form.get("newValidityDays")
    if days is None or (isinstance(days, str) and not days.strip()):
        errors["newValidityDays"] = "New validity period is required"
    elif _parse_days(days) is None:
        errors["newValidityDays"] = "New validity period must be a positive number of days"

    if not _is_filled(form.get("reason")):
        errors["reason"] = "Reason for renewal is required"

    priority = form.get("priority")
    if not _is_filled(priority):
        errors["priority"] = "Priority is required"
    elif priority not in RENEWAL_PRIORITIES:
        errors["priority"] = f"Priority must be one of: {', '.join(RENEWAL_PRIORITIES)}"

    return errors


def _is_filled(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _parse_days(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        days = value
    elif isinstance(value, str) and value.strip().isdecimal():
        try:
            days = int(value.strip())
        except ValueError:
            # digit count beyond the interpreter's conversion limit
            return None
    else:
        return None
    return days if days > 0 else None


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class RenewalWorkflow:
    """
    Creates renewal requests and tracks their backend-driven status.

    The request list is owned by the caller and mutated in place.
    """

    def __init__(
        self,
        requests: Optional[List[RenewalRequest]] = None,
        id_factory: Callable[[], str] = lambda: str(uuid.uuid4()),
        clock: Callable[[], str] = _utc_now_iso,
    ):
        """
        Initialize renewal workflow

        Args:
            requests: Caller-owned collection (a new list if omitted)
            id_factory: Generates request identifiers
            clock: Returns the creation timestamp (ISO 8601)
        """
        self.logger = logging.getLogger("renewals.workflow")
        self.requests = requests if requests is not None else []
        self.id_factory = id_factory
        self.clock = clock

    def create(self, form: Mapping[str, Any]) -> RenewalRequest:
        """
        Validate the form and append a new pending request

        Raises:
            RenewalValidationError: Nothing is created
        """
        errors = validate_renewal_form(form)
        if errors:
            self.logger.info(f"Renewal request rejected: {sorted(errors)}")
            raise RenewalValidationError(errors)

        request = RenewalRequest(
            id=self._new_id(),
            certificate_alias=form["certificateAlias"].strip(),
            certificate_type=form["certificateType"],
            current_expiry_date=form["currentExpiryDate"].strip(),
            new_validity_days=_parse_days(form["newValidityDays"]),
            reason=form["reason"].strip(),
            priority=form["priority"],
            status=STATUS_PENDING,
            created_at=self.clock(),
        )
        self.requests.append(request)

        self.logger.info(
            f"Renewal request {request.id} created for {request.certificate_alias} "
            f"(priority={request.priority})"
        )
        return request

    def get(self, request_id: str) -> Optional[RenewalRequest]:
        for request in self.requests:
            if request.id == request_id:
                return request
        return None

    def apply_status(self, request_id: str, status: str) -> RenewalRequest:
        """
        Record a status decided by the backend or an operator

        Raises:
            RenewalValidationError: Unknown status value
            UnknownRenewalError: No request with that id
        """
        if status not in RENEWAL_STATUSES:
            raise RenewalValidationError(
                {"status": f"Status must be one of: {', '.join(RENEWAL_STATUSES)}"}
            )

        for index, request in enumerate(self.requests):
            if request.id == request_id:
                updated = replace(request, status=status)
                self.requests[index] = updated
                self.logger.info(f"Renewal request {request_id}: {request.status} -> {status}")
                return updated

        raise UnknownRenewalError(f"Renewal request {request_id} not found")

    def receive(self, data: Mapping[str, Any]) -> RenewalRequest:
        """
        Accept a request as reported by the backend

        Known ids only take the reported status; unknown ids are appended.
        """
        incoming = RenewalRequest.from_dict(data)
        if self.get(incoming.id) is not None:
            return self.apply_status(incoming.id, incoming.status)

        self.requests.append(incoming)
        return incoming

    def by_status(self, status: str) -> List[RenewalRequest]:
        return [r for r in self.requests if r.status == status]

    def status_counts(self) -> Dict[str, int]:
        """Number of requests per status (every status present)"""
        counts = {status: 0 for status in RENEWAL_STATUSES}
        for request in self.requests:
            counts[request.status] = counts.get(request.status, 0) + 1
        return counts

    def _new_id(self) -> str:
        existing = {r.id for r in self.requests}
        request_id = self.id_factory()
        while request_id in existing:
            request_id = self.id_factory()
        return request_id
