#!/usr/bin/env python3
"""
Dev helper: send a sample request to one of the local handlers.

Builds a representative payload for the chosen handler and POSTs it to the
running backend with the function key, then pretty-prints the response.

Usage
-----
# License grant for a new partner (invites a guest if no user matches)
python scripts/send_test_request.py license --email partner@example.com

# License removal
python scripts/send_test_request.py license --email partner@example.com --inactive

# Password reset by UPN
python scripts/send_test_request.py reset --upn jane.doe.talent@egg-events.com --email jane@example.com

# Activity check answer
python scripts/send_test_request.py activity --answer no --object-id <guid> --item-id 42

# Plain email
python scripts/send_test_request.py mail --email someone@example.com --sender noreply@egg-events.com

# Print the payload only
python scripts/send_test_request.py license --dry-run

Environment / .env
------------------
FUNCTION_KEY   Function key the backend expects (required unless --dry-run).
"""

import argparse
import json
import os
import sys
import textwrap
from pathlib import Path

import httpx
from dotenv import load_dotenv


# ---------------------------------------------------------------------------
# Payload builders
# ---------------------------------------------------------------------------

def _build_license_payload(args: argparse.Namespace) -> dict:
    payload = {
        "userEmail": args.email,
        "firstName": args.first_name,
        "lastName": args.last_name,
        "isActive": not args.inactive,
    }
    if args.upn:
        payload["entraUPN"] = args.upn
    if args.object_id:
        payload["entraObjectId"] = args.object_id
    return payload


def _build_reset_payload(args: argparse.Namespace) -> dict:
    payload = {
        "firstName": args.first_name,
        "lastName": args.last_name,
        "personalEmail": args.email,
    }
    if args.upn:
        payload["userPrincipalName"] = args.upn
    if args.object_id:
        payload["userId"] = args.object_id
    return payload


def _build_activity_payload(args: argparse.Namespace) -> dict:
    payload = {
        "response": args.answer,
        "supplierEmail": args.email,
        "supplierName": f"{args.first_name} {args.last_name}",
        "firstName": args.first_name,
        "entraObjectId": args.object_id or "00000000-0000-0000-0000-000000000000",
        "sharePointItemId": args.item_id,
    }
    if args.manager:
        payload["requestedByEmail"] = args.manager
    return payload


def _build_mail_payload(args: argparse.Namespace) -> dict:
    return {
        "recipients": [args.email],
        "from": args.sender,
        "fromName": "EGG Events",
        "subject": args.subject,
        "body": "<p>This is a <strong>test</strong> email from send_test_request.py</p>",
        "isHtml": True,
    }


_HANDLERS = {
    "license": ("/api/manageLicense", _build_license_payload),
    "reset": ("/api/resetFreelancerPassword", _build_reset_payload),
    "activity": ("/api/handleActivityResponse", _build_activity_payload),
    "mail": ("/api/sendEmail", _build_mail_payload),
}


# ---------------------------------------------------------------------------
# Pretty printer
# ---------------------------------------------------------------------------

def _print_response(response: httpx.Response) -> None:
    status = response.status_code
    symbol = "OK" if status == 200 else "FAIL"
    print(f"\n[{symbol}] HTTP {status}")
    try:
        body = response.json()
        print(json.dumps(body, indent=2))
    except ValueError:
        print(response.text)


# ---------------------------------------------------------------------------
# Main
# ---------------------------------------------------------------------------

def main() -> int:
    project_root = Path(__file__).resolve().parent.parent
    load_dotenv(project_root / ".env")
    load_dotenv(project_root / "backend" / ".env")

    parser = argparse.ArgumentParser(
        prog="send_test_request.py",
        description="Send a sample request to a local freelancer identity handler.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            Examples:
              python scripts/send_test_request.py license --email partner@example.com
              python scripts/send_test_request.py activity --answer yes --item-id 7
              python scripts/send_test_request.py mail --dry-run
        """),
    )
    parser.add_argument("handler", choices=list(_HANDLERS), help="Which handler to call")
    parser.add_argument(
        "--url",
        default="http://localhost:8000",
        help="Backend base URL (default: http://localhost:8000)",
    )
    parser.add_argument("--email", default="partner@example.com", help="Personal / recipient email")
    parser.add_argument("--first-name", default="Test")
    parser.add_argument("--last-name", default="Partner")
    parser.add_argument("--upn", default=None, help="Entra userPrincipalName")
    parser.add_argument("--object-id", default=None, help="Entra object ID")
    parser.add_argument("--inactive", action="store_true", help="license: remove instead of add")
    parser.add_argument("--answer", default="yes", choices=["yes", "no"], help="activity: Yes/No answer")
    parser.add_argument("--item-id", default="1", help="activity: SharePoint list item ID")
    parser.add_argument("--manager", default=None, help="activity: requestedByEmail")
    parser.add_argument("--sender", default="noreply@egg-events.com", help="mail: sender mailbox")
    parser.add_argument("--subject", default="Test email", help="mail: subject")
    parser.add_argument(
        "--key",
        default=None,
        metavar="KEY",
        help="Override the function key. Defaults to the FUNCTION_KEY env var.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the payload JSON without sending it.",
    )

    args = parser.parse_args()

    path, builder = _HANDLERS[args.handler]
    payload = builder(args)
    endpoint = f"{args.url.rstrip('/')}{path}"

    print(f"Handler  : {args.handler}")
    print(f"Endpoint : {endpoint}")

    if args.dry_run:
        print("\n[DRY RUN] Payload:")
        print(json.dumps(payload, indent=2))
        return 0

    key = args.key or os.getenv("FUNCTION_KEY", "")
    if not key:
        print(
            "ERROR: No function key found.\n"
            "Set FUNCTION_KEY in your environment or .env file, or pass --key.",
            file=sys.stderr,
        )
        return 1

    try:
        response = httpx.post(
            endpoint,
            json=payload,
            headers={"x-functions-key": key},
            timeout=60,
        )
        _print_response(response)
        return 0 if response.status_code == 200 else 1
    except httpx.ConnectError:
        print(
            f"\nERROR: Could not connect to {endpoint}\n"
            "Is the backend running? Start it with:\n"
            "  cd backend && uvicorn app.main:app --reload",
            file=sys.stderr,
        )
        return 1


if __name__ == "__main__":
    sys.exit(main())
