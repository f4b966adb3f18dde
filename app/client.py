"""
Async client for the billing API.

Client-side rules live here: drafts are validated locally and must be
confirmed before submission, payments are checked against a freshly
fetched balance, deletes need an explicit confirmation, and transport
failures surface as TransportError without being retried.
"""

from datetime import date
from typing import Any, Dict, List, Optional

import httpx

from app.config import settings
from app.core.exceptions import (
    ConflictError,
    NotFoundError,
    TransportError,
    ValidationError,
)
from app.core.logging import get_logger
from app.services.drafts import BillSummary, DraftBill, is_valid_mobile
from app.services.pricing import ZERO, format_money, parse_money, round_money

logger = get_logger(__name__)

_STATUS_ERRORS = {
    400: ValidationError,
    404: NotFoundError,
    409: ConflictError,
    422: ValidationError,
}


class BillingClient:
    """
    Usage:
        async with BillingClient() as client:
            summary = await client.build_summary(draft)
            bill = await client.submit_bill(summary.confirm())
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        token: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        headers = {"Content-Type": "application/json"}
        token = token if token is not None else settings.API_TOKEN
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=base_url or settings.API_BASE_URL,
            timeout=timeout if timeout is not None else settings.CLIENT_TIMEOUT_SECONDS,
            headers=headers,
            transport=transport,
        )

    async def __aenter__(self) -> "BillingClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    async def _request(self, method: str, url: str, **kwargs) -> Any:
        try:
            response = await self._client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            logger.error("Request timed out", extra={"method": method, "url": url})
            raise TransportError("The server did not respond in time, please try again") from e
        except httpx.HTTPError as e:
            logger.error("Network error", extra={"method": method, "url": url, "error": str(e)})
            raise TransportError("Network error, please check your connection and try again") from e

        if response.is_success:
            return response.json().get("data")

        message, details = self._error_message(response)
        error_cls = _STATUS_ERRORS.get(response.status_code)
        if error_cls is None:
            logger.error(
                "Server error",
                extra={"method": method, "url": url, "status_code": response.status_code},
            )
            raise TransportError("Request failed, please try again")
        raise error_cls(message, details=details)

    @staticmethod
    def _error_message(response: httpx.Response):
        try:
            body = response.json()
        except ValueError:
            return response.text or "Request failed", []
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message", "Request failed"), error.get("details", [])
        return str(body.get("detail", "Request failed")), []

    # --- Teachers ---

    async def list_teachers(self) -> List[Dict[str, Any]]:
        return await self._request("GET", "/teachers")

    async def get_teacher(self, teacher_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/teachers/{teacher_id}")

    async def create_teacher(self, teacher_name: str, mobile: str, school_name: str) -> Dict[str, Any]:
        if not is_valid_mobile(mobile):
            raise ValidationError("Mobile number must be exactly 10 digits")
        return await self._request(
            "POST",
            "/teachers",
            json={"teacherName": teacher_name, "mobile": mobile, "schoolName": school_name},
        )

    async def update_teacher(self, teacher_id: str, **fields: Any) -> Dict[str, Any]:
        return await self._request("PUT", f"/teachers/{teacher_id}", json=fields)

    async def delete_teacher(self, teacher_id: str, confirmed: bool = False) -> None:
        if not confirmed:
            raise ValidationError("Deleting a teacher must be confirmed")
        await self._request("DELETE", f"/teachers/{teacher_id}")

    async def find_teacher_by_mobile(self, mobile: str) -> Optional[Dict[str, Any]]:
        """The teacher with exactly this mobile, or None."""
        if not is_valid_mobile(mobile):
            raise ValidationError("Mobile number must be exactly 10 digits")
        try:
            return await self._request("GET", f"/teachers/mobile/{mobile}")
        except NotFoundError:
            return None

    # --- Books ---

    async def list_books(self, active_only: bool = True) -> List[Dict[str, Any]]:
        params = {"active": "true"} if active_only else {}
        return await self._request("GET", "/books", params=params)

    async def create_book(self, name: str, default_price: Any) -> Dict[str, Any]:
        price = parse_money(default_price, "Please enter a valid price")
        if price < ZERO:
            raise ValidationError("Default price cannot be negative")
        return await self._request("POST", "/books", json={"name": name, "defaultPrice": str(price)})

    async def update_book(self, book_id: str, **fields: Any) -> Dict[str, Any]:
        if "defaultPrice" in fields:
            fields["defaultPrice"] = str(parse_money(fields["defaultPrice"], "Please enter a valid price"))
        return await self._request("PUT", f"/books/{book_id}", json=fields)

    async def delete_book(self, book_id: str, confirmed: bool = False) -> Dict[str, Any]:
        if not confirmed:
            raise ValidationError("Deleting a book must be confirmed")
        return await self._request("DELETE", f"/books/{book_id}")

    # --- Bills ---

    async def list_bills(self, query: Optional[str] = None, page: int = 1) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"page": page}
        if query:
            params["q"] = query
        return await self._request("GET", "/bills", params=params)

    async def get_bill(self, bill_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/bills/{bill_id}")

    async def get_bill_by_number(self, bill_number: str) -> Dict[str, Any]:
        return await self._request("GET", f"/bills/number/{bill_number.strip()}")

    async def build_summary(self, draft: DraftBill) -> BillSummary:
        """Validate locally, then resolve the teacher by mobile. Nothing is sent for a bad draft."""
        return await draft.validate(self.find_teacher_by_mobile)

    async def submit_bill(self, summary: BillSummary) -> Dict[str, Any]:
        """Create the bill from a confirmed summary."""
        payload = summary.to_payload()
        bill = await self._request("POST", "/bills", json=payload)
        logger.info("Bill submitted", extra={"bill_number": bill.get("billNumber")})
        return bill

    # --- Payments ---

    async def list_payments(self, bill_id: str) -> List[Dict[str, Any]]:
        return await self._request("GET", f"/payments/bill/{bill_id}")

    async def add_payment(
        self,
        bill_id: str,
        amount: Any,
        payment_date: Optional[date],
        collect_by: str = "",
    ) -> Dict[str, Any]:
        """
        Record a payment.

        The bill is re-fetched right before the amount is checked so a
        balance cached by the caller is never trusted. The server checks
        again under a lock and answers 409 if the balance moved.
        """
        value = parse_money(amount) if amount not in (None, "") else ZERO
        if value <= ZERO:
            raise ValidationError("Please enter a valid amount")
        if payment_date is None:
            raise ValidationError("Please select a payment date")

        bill = await self.get_bill(bill_id)
        if bill.get("isClosed"):
            raise ConflictError(f"Bill {bill.get('billNumber')} is closed")
        remain = round_money(bill["remainPayment"])
        if value > remain:
            raise ValidationError(
                f"Payment amount cannot exceed remaining payment ({format_money(remain, settings.CURRENCY_SYMBOL)})"
            )

        return await self._request(
            "POST",
            "/payments",
            json={
                "billId": str(bill_id),
                "amount": str(value),
                "paymentDate": payment_date.isoformat(),
                "collectBy": collect_by,
            },
        )

    async def delete_payment(self, payment_id: str, confirmed: bool = False) -> Dict[str, Any]:
        """Irreversible: the caller must pass confirmed=True after asking the user."""
        if not confirmed:
            raise ValidationError("Deleting a payment must be confirmed")
        return await self._request("DELETE", f"/payments/{payment_id}")

    async def reconcile(self, bill_id: str) -> Dict[str, Any]:
        return await self._request("GET", f"/bills/{bill_id}/reconciliation")

