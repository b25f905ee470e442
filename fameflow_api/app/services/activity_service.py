"""
Activity log service for recording and querying actions.

Orders, deposits, logins and back-office changes are written to the
``activity_logs`` table.  Recording happens after the action itself has
committed and on its own connection: a failure to write the log is
reported with a warning and never undoes or fails the action.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from typing import Any, Dict, List, Optional

from ..core.db import Database

logger = logging.getLogger(__name__)


class ActivityService:
    """Service class for writing and retrieving activity logs."""

    def __init__(self, db: Database):
        self.db = db

    def record(
        self,
        actor_type: str,
        action: str,
        actor_id: Optional[int] = None,
        details: Optional[dict] = None,
        ip_address: Optional[str] = None,
    ) -> None:
        """Insert a new activity record.

        Parameters
        ----------
        actor_type : str
            Who acted: ``"Admin"``, ``"User"`` or ``"Guest"``.
        action : str
            Dotted action name, e.g. ``"order.create"`` or ``"setting.update"``.
        actor_id : Optional[int]
            Primary key of the acting admin or user, if known.
        details : Optional[dict]
            Additional structured data about the action, stored as JSON.
        ip_address : Optional[str]
            Client address of the request.
        """
        details_json = json.dumps(details, default=str) if details else None
        try:
            with self.db.cursor() as cursor:
                cursor.execute(
                    """
                    INSERT INTO activity_logs (actor_type, actor_id, action, details, ip_address)
                    VALUES (?, ?, ?, ?, ?)
                    """,
                    (actor_type, actor_id, action, details_json, ip_address),
                )
        except sqlite3.Error as e:
            logger.warning("Could not record activity %s for %s %s: %s", action, actor_type, actor_id, e)

    def list_logs(
        self,
        actor_type: Optional[str] = None,
        action: Optional[str] = None,
        limit: int = 100,
        offset: int = 0,
    ) -> List[Dict[str, Any]]:
        """Retrieve activity records, newest first, with optional filters."""
        where_clauses: List[str] = []
        params: List[Any] = []
        if actor_type:
            where_clauses.append("actor_type = ?")
            params.append(actor_type)
        if action:
            where_clauses.append("action = ?")
            params.append(action)
        query = "SELECT id, actor_type, actor_id, action, details, ip_address, created_at FROM activity_logs"
        if where_clauses:
            query += " WHERE " + " AND ".join(where_clauses)
        query += " ORDER BY created_at DESC, id DESC LIMIT ? OFFSET ?"
        params.extend([limit, offset])
        with self.db.cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        logs = []
        for row in rows:
            details_data = None
            if row["details"]:
                try:
                    details_data = json.loads(row["details"])
                except json.JSONDecodeError:
                    details_data = row["details"]
            logs.append(
                {
                    "id": row["id"],
                    "actor_type": row["actor_type"],
                    "actor_id": row["actor_id"],
                    "action": row["action"],
                    "details": details_data,
                    "ip_address": row["ip_address"],
                    "created_at": row["created_at"],
                }
            )
        return logs
