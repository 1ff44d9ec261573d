"""CSV reports for admins.

Both reports accept an optional ``[start_date, end_date]`` window on the
``created_at`` of the rows they are built from (users for the activity
report, swap requests for the swap statistics report).  The end date is
inclusive of the whole day.

Per-user and per-day aggregates are computed in the database
(``get_user_activity`` and ``get_swap_stats_by_day``) and read back page
by page, so the reports stay complete past the PostgREST row cap.
"""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, timedelta
from typing import Any

from skillswap.db.supabase import fetch_all, get_supabase

logger = logging.getLogger(__name__)

USER_ACTIVITY_HEADER = [
    "User ID", "Name", "Email", "Location", "Join Date",
    "Total Swaps", "Accepted Swaps", "Total Ratings", "Average Rating",
]
SWAP_STATS_HEADER = ["Date", "Total Requests", "Accepted", "Rejected", "Pending", "Cancelled"]


def _window_params(start_date: date | None, end_date: date | None) -> dict[str, str | None]:
    """``created_at`` bounds: start inclusive, end exclusive (the next day)."""
    return {
        "p_start_date": start_date.isoformat() if start_date is not None else None,
        "p_end_date": (end_date + timedelta(days=1)).isoformat() if end_date is not None else None,
    }


def _to_csv(header: list[str], rows: list[list[Any]]) -> str:
    buffer = io.StringIO()
    writer = csv.writer(buffer, quoting=csv.QUOTE_MINIMAL, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def user_activity_report(start_date: date | None = None, end_date: date | None = None) -> str:
    """One line per user: swap participation and ratings received."""
    params = _window_params(start_date, end_date)
    activity = fetch_all(lambda: get_supabase().rpc("get_user_activity", params))

    rows = [
        [
            str(row["user_id"]),
            row.get("name") or "",
            row.get("email") or "",
            row.get("location") or "",
            row.get("created_at") or "",
            int(row.get("total_swaps") or 0),
            int(row.get("accepted_swaps") or 0),
            int(row.get("total_ratings") or 0),
            f"{float(row.get('average_rating') or 0.0):.2f}",
        ]
        for row in activity
    ]

    logger.info("user_activity_report_generated", extra={"rows": len(rows)})
    return _to_csv(USER_ACTIVITY_HEADER, rows)


def swap_stats_report(start_date: date | None = None, end_date: date | None = None) -> str:
    """Swap request counts per creation day, newest day first."""
    params = _window_params(start_date, end_date)
    per_day = fetch_all(lambda: get_supabase().rpc("get_swap_stats_by_day", params))

    rows = [
        [
            str(row["day"])[:10],
            int(row.get("total") or 0),
            int(row.get("accepted") or 0),
            int(row.get("rejected") or 0),
            int(row.get("pending") or 0),
            int(row.get("cancelled") or 0),
        ]
        for row in per_day
    ]

    logger.info("swap_stats_report_generated", extra={"rows": len(rows)})
    return _to_csv(SWAP_STATS_HEADER, rows)
