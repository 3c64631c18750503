"""Agent inquiry submission (mock mail sender)."""

from propertyvue.logging import get_logger
from propertyvue.models import ContactHistoryEntry, ContactInquiry, ContactReceipt
from propertyvue.simulation import (
    NO_LATENCY,
    Clock,
    FaultInjector,
    IdFactory,
    Latency,
    new_id,
    utc_now,
)

logger = get_logger(__name__)

OPERATION = "contact.send_inquiry"
HISTORY_OPERATION = "contact.history"


def format_usd(amount: float) -> str:
    """Format a price as whole US dollars, e.g. "$450,000"."""
    return f"${amount:,.0f}"


def render_inquiry_email(inquiry: ContactInquiry) -> tuple[str, str]:
    """Build the subject and body of the email sent to the listing agent."""
    subject = f"New inquiry for {inquiry.property_title}"
    lines = [
        "New property inquiry received:",
        "",
        f"Property: {inquiry.property_title}",
        f"Reference: {inquiry.property_ref}",
        f"Price: {format_usd(inquiry.property_price)}",
        "",
        "Contact Information:",
        f"Name: {inquiry.name}",
        f"Phone: {inquiry.phone}",
        f"Email: {inquiry.email}",
        "",
        "Message:",
        inquiry.message.strip() or "No additional message provided.",
        "",
        "Please respond to this inquiry promptly.",
    ]
    return subject, "\n".join(lines)


class ContactService:
    """Sends buyer inquiries to listing agents.

    Nothing leaves the process: the rendered email is logged and returned in
    the receipt. Failures only happen when scheduled on the fault injector.
    """

    def __init__(
        self,
        *,
        latency: Latency = NO_LATENCY,
        faults: FaultInjector | None = None,
        clock: Clock = utc_now,
        id_factory: IdFactory = new_id,
    ) -> None:
        self._latency = latency
        self.faults = faults if faults is not None else FaultInjector()
        self._clock = clock
        self._id_factory = id_factory
        self._history: list[ContactHistoryEntry] = []

    async def send_inquiry(self, inquiry: ContactInquiry) -> ContactReceipt:
        """Send an inquiry.

        Raises:
            TransientFailureError: When the fault injector schedules a failure.
                Nothing is retried; the caller may offer a manual retry.
        """
        await self._latency.pause(OPERATION)
        self.faults.check(OPERATION)

        subject, body = render_inquiry_email(inquiry)
        receipt = ContactReceipt(
            contact_id=self._id_factory(),
            subject=subject,
            body=body,
            sent_at=self._clock(),
        )
        self._history.append(
            ContactHistoryEntry(
                id=receipt.contact_id,
                property_id=inquiry.property_ref,
                name=inquiry.name,
                email=inquiry.email,
                phone=inquiry.phone,
                message=inquiry.message,
                sent_date=receipt.sent_at,
            )
        )
        logger.info(
            "inquiry_sent",
            contact_id=receipt.contact_id,
            to=inquiry.agent_email,
            property_ref=inquiry.property_ref,
            subject=subject,
        )
        return receipt

    async def history(self, property_id: str) -> list[ContactHistoryEntry]:
        """Inquiries sent about a property in this session, newest first."""
        await self._latency.pause(HISTORY_OPERATION)
        return [e for e in reversed(self._history) if e.property_id == property_id]
