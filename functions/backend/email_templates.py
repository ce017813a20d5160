"""
HTML bodies for the transactional e-mails.
"""

from __future__ import annotations

import html
from datetime import datetime, timezone

VERIFICATION_SUBJECT = "Verify your email address - NeedYou"
PASSWORD_RESET_SUBJECT = "Reset your password - NeedYou"

_BUTTON_STYLE = (
    "display: inline-block; background: linear-gradient(to right, #2563eb, #4f46e5); "
    "color: white; text-decoration: none; padding: 16px 48px; border-radius: 12px; "
    "font-weight: 600; font-size: 16px;"
)
_TEXT_STYLE = "color: #4b5563; font-size: 16px; line-height: 1.6; margin: 0 0 24px 0;"
_NOTE_STYLE = "color: #9ca3af; font-size: 12px; line-height: 1.5; margin: 8px 0 0 0;"

_LAYOUT = """<!DOCTYPE html>
<html>
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
  </head>
  <body style="margin: 0; padding: 0; font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, Arial, sans-serif; background-color: #f3f4f6;">
    <div style="max-width: 600px; margin: 0 auto; padding: 40px 20px;">
      <div style="text-align: center; margin-bottom: 40px;">
        <h1 style="color: #2563eb; font-size: 32px; margin: 0;">NeedYou</h1>
        <p style="color: #6b7280; font-size: 14px; margin-top: 8px;">Connect, Help, Grow</p>
      </div>
      <div style="background: white; border-radius: 16px; padding: 40px; box-shadow: 0 4px 6px rgba(0, 0, 0, 0.1);">
        {body}
        <div style="text-align: center; margin: 32px 0;">
          <a href="{link}" style="{button_style}">{button_label}</a>
        </div>
        <p style="color: #6b7280; font-size: 14px; line-height: 1.6; margin: 32px 0 0 0;">
          Or copy and paste this link into your browser:
        </p>
        <p style="color: #2563eb; font-size: 14px; word-break: break-all; margin: 8px 0 0 0;">{link}</p>
        <div style="margin-top: 40px; padding-top: 24px; border-top: 1px solid #e5e7eb;">
          <p style="{note_style}"><strong>Important:</strong> This link will expire in 1 hour for security reasons.</p>
          <p style="{note_style}">{footnote}</p>
        </div>
      </div>
      <div style="text-align: center; margin-top: 32px;">
        <p style="color: #9ca3af; font-size: 12px; margin: 0;">&copy; {year} NeedYou. All rights reserved.</p>
        <p style="color: #9ca3af; font-size: 12px; margin: 8px 0 0 0;">Need help? Contact us at support@needyou.com</p>
      </div>
    </div>
  </body>
</html>
"""


def _render(title: str, body: str, link: str, button_label: str, footnote: str) -> str:
    return _LAYOUT.format(
        title=title,
        body=body,
        link=html.escape(link, quote=True),
        button_label=button_label,
        button_style=_BUTTON_STYLE,
        note_style=_NOTE_STYLE,
        footnote=footnote,
        year=datetime.now(timezone.utc).year,
    )


def render_verification_email(user_name: str | None, verification_link: str) -> str:
    name = html.escape(user_name or "there")
    body = (
        f'<h2 style="color: #111827; font-size: 24px; margin: 0 0 16px 0;">Hi {name}!</h2>\n'
        f'        <p style="{_TEXT_STYLE}">Thanks for signing up for NeedYou! '
        "We're excited to have you on board.</p>\n"
        f'        <p style="{_TEXT_STYLE}">To complete your registration, please verify '
        "your email address by clicking the button below:</p>"
    )
    return _render(
        "Verify Your Email",
        body,
        verification_link,
        "Verify Email Address",
        "If you didn't create an account with NeedYou, you can safely ignore this email.",
    )


def render_password_reset_email(user_name: str | None, reset_link: str) -> str:
    name = html.escape(user_name or "there")
    body = (
        '<h2 style="color: #111827; font-size: 24px; margin: 0 0 16px 0;">Password Reset Request</h2>\n'
        f'        <p style="{_TEXT_STYLE}">Hi {name},</p>\n'
        f'        <p style="{_TEXT_STYLE}">We received a request to reset the password '
        "for your NeedYou account.</p>\n"
        f'        <p style="{_TEXT_STYLE}">Click the button below to choose a new password:</p>'
    )
    return _render(
        "Reset Your Password",
        body,
        reset_link,
        "Reset Password",
        "<strong>Security Note:</strong> If you didn't request a password reset, "
        "please ignore this email. Your password will remain unchanged.",
    )
