"""
HTML bodies for the notification emails.

Public API:
  password_reset_email(first_name, upn, password, portal_url, helpdesk_email) -> (subject, html)
  activity_confirmed_email(first_name, talent_team_email) -> (subject, html)
  license_removed_email(supplier_name, supplier_email, helpdesk_email) -> (subject, html)

Interpolated values are HTML-escaped; the templates are trusted and are not
passed through notifier.sanitize_html.
"""

from datetime import datetime, timezone
from html import escape
from typing import Optional, Tuple

# ---------------------------------------------------------------------------
# Shared styles
# ---------------------------------------------------------------------------

_RESET_STYLES = """
    body { font-family: 'Segoe UI', Arial, sans-serif; line-height: 1.6; color: #333; margin: 0; padding: 0; }
    .container { max-width: 600px; margin: 0 auto; padding: 20px; }
    .header { background: linear-gradient(135deg, #f093fb 0%, #f5576c 100%); color: white;
              padding: 30px; text-align: center; border-radius: 10px 10px 0 0; }
    .header h1 { margin: 0 0 10px 0; font-size: 28px; }
    .content { background: #f8f9fa; padding: 30px; border-radius: 0 0 10px 10px; }
    .credential-box { background: #fff; border-left: 4px solid #dc3545; padding: 20px; margin: 20px 0;
                      border-radius: 5px; box-shadow: 0 2px 4px rgba(0,0,0,0.1); }
    .credential-box h3 { margin-top: 0; color: #dc3545; }
    .credential-box code, .steps code { background: #e9ecef; padding: 4px 8px; border-radius: 3px;
                                        font-family: 'Courier New', monospace; font-size: 14px; color: #d63384; }
    .button { display: inline-block; background: #dc3545; color: white; padding: 14px 28px;
              text-decoration: none; border-radius: 5px; margin: 15px 0; font-weight: 600; }
    .warning { background: #fff3cd; border: 1px solid #ffeaa7; padding: 15px; border-radius: 5px; margin: 15px 0; }
    .info-box { background: #d1ecf1; border: 1px solid #bee5eb; padding: 15px; border-radius: 5px; margin: 15px 0; }
    .steps { background: #e7f3ff; padding: 20px; border-radius: 5px; margin: 15px 0; }
    .steps h3 { margin-top: 0; color: #0078d4; }
    .footer { text-align: center; color: #666; font-size: 12px; margin-top: 30px; padding-top: 20px;
              border-top: 1px solid #dee2e6; }
    .footer a { color: #007bff; text-decoration: none; }
"""

OUTLOOK_URL = "https://outlook.office.com/"
SIGNIN_URL = "https://office.com/signin"


def password_reset_email(
    first_name: str,
    upn: str,
    password: str,
    portal_url: str,
    helpdesk_email: str,
    year: Optional[int] = None,
) -> Tuple[str, str]:
    """Subject and body for the "your password has been reset" email."""
    year = year or datetime.now(timezone.utc).year
    name = escape(first_name)
    upn_html = escape(upn)
    password_html = escape(password)
    helpdesk = escape(helpdesk_email)
    portal = escape(portal_url, quote=True)

    subject = "🔑 Your EGG Events Password Has Been Reset"
    html = f"""<!DOCTYPE html>
<html>
<head>
<style>{_RESET_STYLES}</style>
</head>
<body>
  <div class="container">
    <div class="header">
      <h1>🔑 Password Reset Successful</h1>
      <p>Hello {name}!</p>
    </div>
    <div class="content">
      <p>Your EGG Events account password has been reset. You can sign in with the new credentials below.</p>

      <div class="credential-box">
        <h3>🔐 Your New Account Details</h3>
        <p><strong>Username:</strong> <code>{upn_html}</code></p>
        <p><strong>New Temporary Password:</strong> <code>{password_html}</code></p>
      </div>

      <div class="warning">
        ⚠️ <strong>Important Security Notice:</strong> You must change this temporary password when you first sign in.
      </div>

      <div class="info-box">
        ℹ️ <strong>Why was my password reset?</strong><br>
        <ul style="margin: 10px 0; padding-left: 20px;">
          <li>You or an administrator requested a password reset</li>
          <li>You forgot your password</li>
          <li>Routine security maintenance</li>
        </ul>
      </div>

      <h3>🌐 Access Your Account</h3>
      <a href="{OUTLOOK_URL}" class="button">📧 Sign In to Outlook</a>

      <div class="steps">
        <h3>🔑 How to Change Your Password</h3>
        <ol>
          <li>Click "Sign In to Outlook" above or go to <a href="{SIGNIN_URL}">office.com/signin</a></li>
          <li>Enter your username: <code>{upn_html}</code></li>
          <li>Enter your temporary password: <code>{password_html}</code></li>
          <li>Choose a new password of at least 8 characters mixing upper and lower case letters, numbers and symbols</li>
          <li>Confirm your new password and submit</li>
        </ol>
      </div>

      <h3>📋 Access Your Supplier Portal</h3>
      <p>After changing your password, you can open the Supplier Portal:</p>
      <a href="{portal}" class="button">🏢 Access Supplier Portal</a>

      <div class="warning">
        <strong>Note:</strong> The Supplier Portal requires your EGG account. If you cannot open it,
        try a private/incognito browser window and sign in with your EGG credentials.
      </div>

      <div class="footer">
        <p>If you didn't request this password reset, please contact us immediately.</p>
        <p>📧 Contact us: <a href="mailto:{helpdesk}">{helpdesk}</a></p>
        <p>© {year} EGG Events - Account Security System</p>
      </div>
    </div>
  </div>
</body>
</html>
"""
    return subject, html


def activity_confirmed_email(first_name: str, talent_team_email: str) -> Tuple[str, str]:
    """Thank-you email sent after a supplier answers "yes" to the activity check."""
    greeting = f"Dear {escape(first_name)}," if first_name else "Hello,"
    html = f"""
<p>{greeting}</p>
<p>Thank you for confirming your activity status!</p>
<p>Your access to <strong>egg</strong> resources has been maintained.</p>
<p>You will receive another check-in request in approximately one month.</p>
<p>If you have any questions, please contact: {escape(talent_team_email)}</p>
<p>Best regards,<br>egg Talent Team</p>
"""
    return "Thank you - Activity Confirmed", html


def license_removed_email(
    supplier_name: str,
    supplier_email: str,
    helpdesk_email: str,
) -> Tuple[str, str]:
    """Manager notification sent after a supplier answers "no"."""
    name = escape(supplier_name)
    html = f"""
<p>The account for <strong>{name}</strong> ({escape(supplier_email)}) has been deactivated at their request.</p>
<p><strong>Reason:</strong> User indicated they are no longer working with egg.</p>
<p><strong>Action Taken:</strong> Office 365 E1 license has been removed. The user can still sign in
but will not have access to email or SharePoint.</p>
<p>If this was done in error or you need to restore access, please contact IT helpdesk: {escape(helpdesk_email)}</p>
<p>Best regards,<br>egg Talent Management System</p>
"""
    return f"Freelancer Account Deactivated - {supplier_name}", html
