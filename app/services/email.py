from app.core.config import settings
from loguru import logger
import aiosmtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart


async def send_email_smtp(email_to: str, subject: str, body: str) -> bool:
    try:
        message = MIMEMultipart("alternative")
        message["Subject"] = subject
        message["From"] = f"{settings.EMAILS_FROM_NAME} <{settings.EMAILS_FROM_EMAIL}>"
        message["To"] = email_to

        html_part = MIMEText(body, "html")
        message.attach(html_part)

        await aiosmtplib.send(
            message,
            hostname=settings.SMTP_HOST,
            port=settings.SMTP_PORT,
            username=settings.SMTP_USER,
            password=settings.SMTP_PASSWORD,
            start_tls=settings.SMTP_TLS,
        )

        logger.info(f"Email sent successfully to {email_to}")
        return True
    except Exception as e:
        logger.error(f"Failed to send email: {str(e)}")
        return False


def _render(title: str, text: str, link: str, link_label: str, footnote: str) -> str:
    return f"""
    <!DOCTYPE html>
    <html>
    <head>
        <meta charset="UTF-8">
        <meta name="viewport" content="width=device-width, initial-scale=1.0">
    </head>
    <body style="margin: 0; padding: 0; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, 'Helvetica Neue', Arial, sans-serif; background-color: #f5f5f5;">
        <table cellpadding="0" cellspacing="0" border="0" width="100%" style="background-color: #f5f5f5; padding: 20px 0;">
            <tr>
                <td align="center">
                    <table cellpadding="0" cellspacing="0" border="0" width="600" style="max-width: 600px; background-color: #ffffff; border-radius: 8px;">
                        <tr>
                            <td style="padding: 40px 30px; text-align: center; background-color: #1E3A8A; border-radius: 8px 8px 0 0;">
                                <h1 style="margin: 0; color: #ffffff; font-size: 28px; font-weight: 600;">{settings.EMAILS_FROM_NAME}</h1>
                                <p style="margin: 10px 0 0 0; color: #BFDBFE; font-size: 16px;">Personnel and asset management</p>
                            </td>
                        </tr>
                        <tr>
                            <td style="padding: 40px 30px; text-align: center;">
                                <h2 style="margin: 0 0 20px 0; color: #1F2937; font-size: 24px; font-weight: 600;">{title}</h2>
                                <p style="margin: 0 0 30px 0; color: #4B5563; font-size: 16px; line-height: 24px;">{text}</p>
                                <a href="{link}" style="display: inline-block; padding: 14px 28px; background-color: #1E3A8A; color: #ffffff; border-radius: 6px; text-decoration: none; font-weight: 600;">{link_label}</a>
                                <p style="margin: 30px 0 0 0; color: #6B7280; font-size: 14px; line-height: 20px;">{footnote}</p>
                            </td>
                        </tr>
                        <tr>
                            <td style="padding: 30px; background-color: #F9FAFB; border-radius: 0 0 8px 8px; text-align: center;">
                                <p style="margin: 0; color: #9CA3AF; font-size: 12px; line-height: 18px;">
                                    This is an automated message, please do not reply.
                                </p>
                            </td>
                        </tr>
                    </table>
                </td>
            </tr>
        </table>
    </body>
    </html>
    """


async def send_verification_email(email_to: str, token: str) -> bool:
    subject = f"Verify your company account - {settings.EMAILS_FROM_NAME}"
    link = f"{settings.FRONTEND_URL}/verify-account?token={token}"
    hours = settings.VERIFICATION_TOKEN_EXPIRE_MINUTES // 60
    body = _render(
        title="Confirm your email",
        text="Thanks for registering your company. Confirm your email address to activate the account.",
        link=link,
        link_label="Verify account",
        footnote=f"The link is valid for {hours} hours. If you did not register, ignore this email.",
    )
    return await send_email_smtp(email_to, subject, body)


async def send_password_reset_email(email_to: str, token: str) -> bool:
    subject = f"Password reset - {settings.EMAILS_FROM_NAME}"
    link = f"{settings.FRONTEND_URL}/reset-password?token={token}"
    body = _render(
        title="Reset your password",
        text="A password reset was requested for your account.",
        link=link,
        link_label="Choose a new password",
        footnote=f"The link is valid for {settings.RESET_PASSWORD_TOKEN_EXPIRE_MINUTES} minutes.",
    )
    return await send_email_smtp(email_to, subject, body)
