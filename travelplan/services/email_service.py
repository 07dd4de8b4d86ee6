import smtplib
from html import escape
from datetime import date
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from email.utils import formataddr
from typing import Optional
from urllib.parse import urlencode
from travelplan.core.config import settings
from travelplan.core.logger import logger

SENDER_NAME = settings.APP_NAME


def generate_verification_link(token: str) -> str:
    query = urlencode({"token": token})
    return f"{settings.FRONTEND_BASE_URL}/auth/verify?{query}"


def generate_invitations_link() -> str:
    return f"{settings.FRONTEND_BASE_URL}/invitations"


def generate_signup_link() -> str:
    return f"{settings.FRONTEND_BASE_URL}/auth/signup"


def send_email_html(to_email: str, subject: str, html: str) -> bool:
    """
    Deliver one HTML email. Never raises: delivery problems are logged and
    reported through the return value.
    """
    if not settings.SMTP_HOST:
        logger.info(f"[Email] SMTP not configured, not sending '{subject}' to {to_email}")
        return False

    message = MIMEMultipart("alternative")
    message["From"] = formataddr((SENDER_NAME, settings.FROM_EMAIL))
    message["To"] = to_email
    message["Subject"] = subject
    message.attach(MIMEText(html, "html"))

    try:
        with smtplib.SMTP_SSL(settings.SMTP_HOST, settings.SMTP_PORT) as server:
            if settings.SMTP_USER:
                server.login(settings.SMTP_USER, settings.SMTP_PASSWORD or "")
            server.sendmail(settings.FROM_EMAIL, [to_email], message.as_string())
    except (smtplib.SMTPException, OSError) as e:
        logger.error(f"[Email] Failed to send '{subject}' to {to_email}: {e}")
        return False

    logger.info(f"[Email] Sent '{subject}' to {to_email}")
    return True


def send_verification_email(email: str, token: str) -> bool:
    verification_link = generate_verification_link(token)
    if not settings.SMTP_HOST:
        # Development: the link is all anyone needs
        logger.info(f"[Email] Verification link for {email}: {verification_link}")

    app_name = escape(settings.APP_NAME)
    link = escape(verification_link)
    html = f"""
    <html>
      <body>
        <h2>Welcome to {app_name}!</h2>
        <p>Thanks for signing up! Please verify your email address to start planning your next adventure.</p>
        <p>
          <a href="{link}" style="padding: 10px 20px; background-color: #667eea; color: white; text-decoration: none; border-radius: 5px;">Verify Email Address</a>
        </p>
        <p>This link expires in {settings.VERIFICATION_TOKEN_TTL_HOURS} hours.
           If you didn't create an account you can ignore this email.</p>
        <p>Or paste this link into your browser:<br><code>{link}</code></p>
      </body>
    </html>
    """
    return send_email_html(email, f"Verify your email address - {settings.APP_NAME}", html)


def _format_date(value: Optional[date]) -> Optional[str]:
    return value.strftime("%B %d, %Y") if value else None


def send_trip_invitation_email(
    invitee_email: str,
    invitee_name: str,
    inviter_name: str,
    trip_name: str,
    trip_description: Optional[str] = None,
    start_date: Optional[date] = None,
    end_date: Optional[date] = None,
    is_new_user: bool = False,
) -> bool:
    """
    Tell someone they were invited to a trip. People without an account get a
    signup link, everyone else is sent to their invitations page.

    Names and trip details are typed in by users and are escaped before they
    go into the HTML body.
    """
    link = escape(generate_signup_link() if is_new_user else generate_invitations_link())
    action = "Create your account" if is_new_user else "View invitation"

    dates = ""
    start, end = _format_date(start_date), _format_date(end_date)
    if start and end:
        dates = f"<p><strong>When:</strong> {start} - {end}</p>"
    elif start:
        dates = f"<p><strong>Starts:</strong> {start}</p>"

    description = f"<p>{escape(trip_description)}</p>" if trip_description else ""

    html = f"""
    <html>
      <body>
        <p>Hey {escape(invitee_name)},<br><br>
           <strong>{escape(inviter_name)}</strong> invited you to join <b>{escape(trip_name)}</b> on {escape(settings.APP_NAME)}!
        </p>
        {description}
        {dates}
        <p>
          <a href="{link}" style="padding: 10px 20px; background-color: #0984e3; color: white; text-decoration: none; border-radius: 5px;">{action}</a>
        </p>
        <p>Or paste this link into your browser:<br><code>{link}</code></p>
        <p>Happy planning!</p>
      </body>
    </html>
    """
    # Header value: plain text on a single line
    subject = " ".join(f"{inviter_name} invited you to {trip_name}".split())
    return send_email_html(invitee_email, subject, html)
