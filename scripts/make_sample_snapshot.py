#!/usr/bin/env python
from __future__ import annotations

import argparse
import json
from datetime import date, timedelta
from pathlib import Path


def build_snapshot(today: date) -> dict:
    past = (today - timedelta(days=20)).isoformat()
    upcoming = (today + timedelta(days=30)).isoformat()
    return {
        "clients": [{"id": "client-1", "name": "Meera Sharma"}],
        "bookings": [
            {
                "id": "booking-1",
                "client_id": "client-1",
                "booking_name": "Sharma Wedding",
                "package_amount": 250000,
            }
        ],
        "events": [
            {"id": "event-1", "booking_id": "booking-1", "event_name": "Haldi", "event_date": past, "time_slot": "morning"},
            {"id": "event-2", "booking_id": "booking-1", "event_name": "Sangeet", "event_date": past, "time_slot": "evening"},
            {
                "id": "event-3",
                "booking_id": "booking-1",
                "event_name": "Reception",
                "event_date": upcoming,
                "required_roles": {"photographer": 2, "videographer": 1},
            },
        ],
        "staff": [
            {"id": "staff-1", "name": "Arjun", "role": "photographer"},
            {"id": "staff-2", "name": "Kavya", "role": "videographer"},
        ],
        "assignments": [
            {"id": "assign-1", "event_id": "event-1", "staff_id": "staff-1", "role": "photographer"},
            {"id": "assign-2", "event_id": "event-2", "staff_id": "staff-1", "role": "photographer"},
            {"id": "assign-3", "event_id": "event-3", "staff_id": "staff-1", "role": "photographer"},
        ],
        "workflows": [
            {"id": "workflow-1", "event_id": "event-1", "still": {"rawDataSent": "completed"}},
        ],
        "client_payments": [
            {
                "id": "cp-1",
                "client_id": "client-1",
                "booking_id": "booking-1",
                "amount": 250000,
                "payment_status": "agreed",
                "payment_date": past,
            },
            {
                "id": "cp-2",
                "client_id": "client-1",
                "booking_id": "booking-1",
                "amount": 100000,
                "payment_status": "received",
                "payment_date": past,
                "payment_method": "UPI",
            },
        ],
        "staff_payments": [
            {"id": "sp-1", "staff_id": "staff-1", "event_id": "event-1", "type": "agreed", "amount": 8000, "payment_date": past},
            {"id": "sp-2", "staff_id": "staff-1", "event_id": "event-1", "type": "agreed", "amount": 9000, "payment_date": past},
            {"id": "sp-3", "staff_id": "staff-1", "type": "made", "amount": 5000, "payment_date": past, "payment_method": "Cash"},
        ],
        "expenses": [{"id": "exp-1", "date": past, "amount": 3500, "category": "travel"}],
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Generate a sample studio snapshot for PUT /api/snapshot")
    parser.add_argument("--output", required=True, help="Output file path (.json)")
    parser.add_argument("--today", default=None, help="Reference date, YYYY-MM-DD (defaults to today)")
    args = parser.parse_args()

    today = date.fromisoformat(args.today) if args.today else date.today()
    output = Path(args.output)
    output.parent.mkdir(parents=True, exist_ok=True)

    with output.open("w", encoding="utf-8") as fp:
        json.dump(build_snapshot(today), fp, ensure_ascii=False, indent=2)

    print(f"Sample snapshot written: {output}")


if __name__ == "__main__":
    main()
