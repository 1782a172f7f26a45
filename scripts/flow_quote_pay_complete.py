#!/usr/bin/env python3
"""
Complete quote, payment and completion flow script.

DO NOT ADD BUSINESS LOGIC HERE.
This script only orchestrates API calls.
All rules live in the backend.

Usage:
    python scripts/flow_quote_pay_complete.py --couple-id couple-1 --vendor-id vendor-1 --event-date 2030-06-14
    python scripts/flow_quote_pay_complete.py --event-date 2030-06-14 --quote 5000000 --deposit 2000000

Flow:
    1. Create booking (couple)
    2. Send quote (vendor)
    3. Accept quote (couple)
    4. Pay deposit (couple)
    5. Pay balance (couple)
    6. Start service (vendor)
    7. Confirm completion (vendor, then couple)
    8. Show history and receipts
"""

import argparse
import json
import sys
import uuid

import httpx

BASE_URL = "http://localhost:8000"


def api_request(actor: str, method: str, endpoint: str, data: dict | None = None) -> dict:
    """Make API request as the given actor role."""
    headers = {"X-Actor-Role": actor}
    url = f"{BASE_URL}{endpoint}"

    if method == "GET":
        response = httpx.get(url, headers=headers, timeout=10.0, follow_redirects=True)
    elif method == "POST":
        response = httpx.post(url, headers=headers, json=data or {}, timeout=10.0, follow_redirects=True)
    else:
        raise ValueError(f"Unknown method: {method}")

    return {"status": response.status_code, "data": response.json() if response.text else {}}


def print_step(step: int, title: str):
    """Print step header."""
    print(f"\n{'='*60}")
    print(f"STEP {step}: {title}")
    print("="*60)


def print_result(result: dict, fields: list[str] | None = None):
    """Print result, optionally filtering fields."""
    if result["status"] >= 400:
        print(f"ERROR ({result['status']}): {json.dumps(result['data'], indent=2)}")
        return False

    print(f"Status: {result['status']}")
    data = result["data"]
    if fields and isinstance(data, dict):
        data = {k: data.get(k) for k in fields if k in data}
    print(json.dumps(data, indent=2))
    return True


def require(result: dict, fields: list[str] | None = None) -> dict:
    if not print_result(result, fields):
        sys.exit(1)
    return result["data"]


BOOKING_FIELDS = ["id", "status", "quoted_amount", "total_paid", "remaining_balance", "payment_progress"]


def main():
    parser = argparse.ArgumentParser(description="Complete quote, payment and completion flow")
    parser.add_argument("--couple-id", default="couple-demo", help="Couple identifier")
    parser.add_argument("--vendor-id", default="vendor-demo", help="Vendor identifier")
    parser.add_argument("--service-type", default="photography", help="Service type")
    parser.add_argument("--event-date", required=True, help="Event date (YYYY-MM-DD)")
    parser.add_argument("--quote", type=int, default=5000000, help="Quoted amount in centavos")
    parser.add_argument("--deposit", type=int, default=2000000, help="Deposit in centavos")
    parser.add_argument("--skip-complete", action="store_true", help="Stop after payment")
    args = parser.parse_args()

    base = "/api/v1/bookings"

    # Step 1: Create booking
    print_step(1, "Create booking (couple)")
    booking = require(api_request("couple", "POST", f"{base}/", {
        "couple_id": args.couple_id,
        "vendor_id": args.vendor_id,
        "service_type": args.service_type,
        "event_date": args.event_date,
    }), BOOKING_FIELDS)
    booking_id = booking["id"]

    # Step 2: Send quote
    print_step(2, "Send quote (vendor)")
    require(api_request("vendor", "POST", f"{base}/{booking_id}/quote", {"amount": args.quote}), BOOKING_FIELDS)

    # Step 3: Accept quote
    print_step(3, "Accept quote (couple)")
    require(api_request("couple", "POST", f"{base}/{booking_id}/transition", {
        "target_status": "quote_accepted",
        "expected_status": "quote_sent",
    }), BOOKING_FIELDS)

    # Step 4: Deposit
    print_step(4, "Pay deposit (couple)")
    payment = require(api_request("couple", "POST", f"{base}/{booking_id}/payments", {
        "amount": args.deposit,
        "payment_type": "deposit",
        "idempotency_key": f"deposit-{uuid.uuid4().hex}",
        "payment_method": "gcash",
    }))
    balance = payment["booking"]["remaining_balance"]

    # Step 5: Balance
    print_step(5, "Pay balance (couple)")
    require(api_request("couple", "POST", f"{base}/{booking_id}/payments", {
        "amount": balance,
        "payment_type": "balance",
        "idempotency_key": f"balance-{uuid.uuid4().hex}",
        "payment_method": "bank_transfer",
    }))

    if args.skip_complete:
        print("\nSkipping service and completion steps")
        return

    # Step 6: Start service
    print_step(6, "Start service (vendor)")
    require(api_request("vendor", "POST", f"{base}/{booking_id}/transition", {
        "target_status": "in_progress",
    }), BOOKING_FIELDS)

    # Step 7: Dual completion
    print_step(7, "Confirm completion (vendor, then couple)")
    require(api_request("vendor", "POST", f"{base}/{booking_id}/mark-completed", {
        "notes": "All deliverables handed over",
    }), BOOKING_FIELDS)
    require(api_request("couple", "POST", f"{base}/{booking_id}/mark-completed", {}), BOOKING_FIELDS)

    # Step 8: History and receipts
    print_step(8, "History and receipts")
    require(api_request("couple", "GET", f"{base}/{booking_id}/history"))
    require(api_request("couple", "GET", f"{base}/{booking_id}/receipts"))

    print(f"\nBooking {booking_id} completed")


if __name__ == "__main__":
    main()
