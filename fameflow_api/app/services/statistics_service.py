"""
Service layer for dashboard statistics.

All queries are read-only aggregate snapshots; no ordering guarantee is
given relative to writes happening at the same time.  Revenue is the sum
of ``orders.price`` over all orders, reported in currency units.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List

from ..core.db import Database
from ..schemas.admin import GrowthPoint, StatsRead
from .pricing_service import from_minor_units

GROWTH_DAYS = 7


class StatisticsService:
    """Service providing aggregated metrics for administrators."""

    def __init__(self, db: Database):
        self.db = db

    def overview(self) -> StatsRead:
        """Return totals for users, revenue, orders and active subscriptions.

        ``growth`` holds one entry per day for the last seven days (oldest
        first) with that day's revenue and number of new users.
        """
        with self.db.cursor() as cursor:
            total_users = cursor.execute("SELECT COUNT(*) FROM users").fetchone()[0]
            total_revenue = cursor.execute("SELECT COALESCE(SUM(price), 0) FROM orders").fetchone()[0]
            total_orders = cursor.execute("SELECT COUNT(*) FROM orders").fetchone()[0]
            active_subs = cursor.execute(
                "SELECT COUNT(*) FROM user_subscriptions WHERE status = 'Active'"
            ).fetchone()[0]
            growth = self._growth(cursor)
        return StatsRead(
            total_users=total_users,
            total_revenue=float(from_minor_units(total_revenue)),
            total_orders=total_orders,
            active_subs=active_subs,
            growth=growth,
        )

    @staticmethod
    def _growth(cursor) -> List[GrowthPoint]:
        # Use SQLite's clock so the window matches CURRENT_TIMESTAMP on the rows
        today = date.fromisoformat(cursor.execute("SELECT date('now')").fetchone()[0])
        start = today - timedelta(days=GROWTH_DAYS - 1)

        revenue_rows = cursor.execute(
            "SELECT date(created_at) AS day, COALESCE(SUM(price), 0) AS revenue FROM orders"
            " WHERE date(created_at) >= ? GROUP BY day",
            (start.isoformat(),),
        ).fetchall()
        user_rows = cursor.execute(
            "SELECT date(created_at) AS day, COUNT(*) AS users FROM users"
            " WHERE date(created_at) >= ? GROUP BY day",
            (start.isoformat(),),
        ).fetchall()
        revenue_by_day: Dict[str, int] = {row["day"]: row["revenue"] for row in revenue_rows}
        users_by_day: Dict[str, int] = {row["day"]: row["users"] for row in user_rows}

        points = []
        for offset in range(GROWTH_DAYS):
            day = start + timedelta(days=offset)
            key = day.isoformat()
            points.append(
                GrowthPoint(
                    name=day.strftime("%a"),
                    revenue=float(from_minor_units(revenue_by_day.get(key, 0))),
                    users=users_by_day.get(key, 0),
                )
            )
        return points
