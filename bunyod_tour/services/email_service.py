"""
이메일 발송 서비스

Email is best-effort: ``EmailService.send`` reports failures through
``EmailResult`` instead of raising, and booking notifications never affect
the booking response.
"""

from dataclasses import dataclass
from html import escape
from typing import Optional

from fastapi_mail import ConnectionConfig, FastMail, MessageSchema, MessageType

from bunyod_tour.config import Settings
from bunyod_tour.logging_config import get_logger
from bunyod_tour.models import BookingRequest
from bunyod_tour.utils.multilingual import localize_field

NOT_CONFIGURED = "Email service not configured"


@dataclass(frozen=True)
class EmailResult:
    success: bool
    reason: Optional[str] = None


class EmailService:
    """이메일 서비스"""

    def __init__(self, settings: Settings, mailer: Optional[FastMail] = None):
        self.settings = settings
        self.logger = get_logger("email_service")
        self._mailer = mailer

    @property
    def is_configured(self) -> bool:
        return self._mailer is not None or self.settings.email_enabled

    def _get_mailer(self) -> FastMail:
        if self._mailer is None:
            conf = ConnectionConfig(
                MAIL_USERNAME=self.settings.mail_username,
                MAIL_PASSWORD=self.settings.mail_password,
                MAIL_FROM=self.settings.mail_from,
                MAIL_PORT=self.settings.mail_port,
                MAIL_SERVER=self.settings.mail_server,
                MAIL_STARTTLS=self.settings.mail_starttls,
                MAIL_SSL_TLS=self.settings.mail_ssl_tls,
                MAIL_FROM_NAME=self.settings.mail_from_name,
                USE_CREDENTIALS=True,
                VALIDATE_CERTS=True,
            )
            self._mailer = FastMail(conf)
        return self._mailer

    async def send(self, recipients: list[str], subject: str, html: str) -> EmailResult:
        """이메일 발송 (예외를 발생시키지 않음)"""
        if not self.is_configured:
            self.logger.info(f"Email skipped ({NOT_CONFIGURED}): {subject}")
            return EmailResult(success=False, reason=NOT_CONFIGURED)

        recipients = [address for address in recipients if address]
        if not recipients:
            return EmailResult(success=False, reason="No recipients")

        message = MessageSchema(
            subject=subject,
            recipients=recipients,
            body=html,
            subtype=MessageType.html,
        )
        try:
            await self._get_mailer().send_message(message)
        except Exception as e:
            self.logger.error(f"Failed to send email '{subject}' to {recipients}: {e}")
            return EmailResult(success=False, reason=str(e))

        self.logger.info(f"Email sent: {subject} -> {recipients}")
        return EmailResult(success=True)


class BookingNotifier:
    """예약 요청 알림 (관리자 + 고객)"""

    def __init__(self, email_service: EmailService, settings: Settings):
        self.email_service = email_service
        self.settings = settings
        self.logger = get_logger("booking_notifier")

    def _tour_title(self, booking: BookingRequest) -> str:
        if booking.tour is None:
            return "Tour"
        return localize_field(booking.tour.title, "en") or "Tour"

    def _details_html(self, booking: BookingRequest) -> str:
        return (
            f"<p><strong>Tour:</strong> {escape(self._tour_title(booking))}</p>"
            f"<p><strong>Name:</strong> {escape(booking.customer_name)}</p>"
            f"<p><strong>Email:</strong> {escape(booking.customer_email)}</p>"
            f"<p><strong>Preferred date:</strong> {escape(str(booking.preferred_date))}</p>"
            f"<p><strong>Number of people:</strong> {booking.number_of_people}</p>"
        )

    async def send_admin_notification(self, booking: BookingRequest) -> EmailResult:
        html = (
            "<h2>New booking request</h2>"
            f"{self._details_html(booking)}"
        )
        return await self.email_service.send(
            [self.settings.admin_notification_email],
            f"New booking request: {self._tour_title(booking)}",
            html,
        )

    async def send_customer_confirmation(self, booking: BookingRequest) -> EmailResult:
        html = (
            f"<h2>Thank you, {escape(booking.customer_name)}!</h2>"
            "<p>We have received your booking request and will contact you shortly.</p>"
            f"{self._details_html(booking)}"
        )
        return await self.email_service.send(
            [booking.customer_email],
            "Bunyod-Tour: booking request received",
            html,
        )

    async def notify(self, booking: BookingRequest) -> dict[str, EmailResult]:
        """두 알림을 독립적으로 발송하고 결과를 반환 (실패는 로그만 남김)"""
        results = {}
        for name, sender in (
            ("admin", self.send_admin_notification),
            ("customer", self.send_customer_confirmation),
        ):
            try:
                result = await sender(booking)
            except Exception as e:
                self.logger.error(f"Booking {booking.id}: {name} notification crashed: {e}", exc_info=True)
                result = EmailResult(success=False, reason=str(e))
            if not result.success:
                self.logger.info(f"Booking {booking.id}: {name} notification skipped: {result.reason}")
            results[name] = result
        return results
