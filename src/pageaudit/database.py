# src/pageaudit/database.py
"""SQLite storage for content records, metrics bundles and audit reports."""

import json
import sqlite3
from datetime import datetime
from typing import Optional, Dict, Any, List
import logging

from pageaudit.config import settings
from pageaudit.models import ContentRecord, MetricsBundle, to_plain

logger = logging.getLogger(__name__)

# user_id is stored as '' when absent so that UNIQUE(user_id, url) holds
CREATE_TABLES_SQL = """
CREATE TABLE IF NOT EXISTS content_records (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL,
    html_content TEXT,
    headers TEXT,
    title TEXT,
    description TEXT,
    metadata TEXT,
    favicon TEXT,
    text_content TEXT,
    updated_at TIMESTAMP NOT NULL,

    UNIQUE(user_id, url)
);

CREATE TABLE IF NOT EXISTS metrics_bundles (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    user_id TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL,
    version INTEGER NOT NULL,
    bundle TEXT NOT NULL,
    generated_at TIMESTAMP NOT NULL,

    UNIQUE(user_id, url)
);

CREATE TABLE IF NOT EXISTS audit_reports (
    report_id TEXT PRIMARY KEY,
    user_id TEXT NOT NULL DEFAULT '',
    url TEXT NOT NULL,
    mobile_report TEXT,
    desktop_report TEXT,
    created_at TIMESTAMP NOT NULL
);
"""


def _key(user_id: Optional[str]) -> str:
    return user_id or ""


def _loads(value: Optional[str]) -> Any:
    return json.loads(value) if value else None


class AuditDatabase:
    """SQLite database implementation for local storage."""

    def __init__(self, db_url: Optional[str] = None):
        """Initialize local SQLite database.

        Args:
            db_url: Database URL (sqlite:///path/to/db.db). Defaults to settings.DATABASE_URL.
        """
        self.db_url = db_url or settings.DATABASE_URL
        self.db_path = self.db_url.replace("sqlite:///", "")
        self.conn: Optional[sqlite3.Connection] = None
        self.connect()
        self.create_schema()

    def __enter__(self) -> "AuditDatabase":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def connect(self) -> None:
        """Establish SQLite connection."""
        self.conn = sqlite3.connect(self.db_path)
        self.conn.row_factory = sqlite3.Row
        logger.debug(f"Connected to local SQLite database: {self.db_path}")

    def close(self) -> None:
        """Close SQLite connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
            logger.debug("Closed local SQLite connection")

    def create_schema(self) -> None:
        """Create the tables if they don't exist."""
        with self.conn:
            self.conn.executescript(CREATE_TABLES_SQL)
        logger.debug("Schema verified/created for local SQLite")

    # ------------------------------------------------------------------
    # Content records
    # ------------------------------------------------------------------

    def save_content_record(self, record: ContentRecord) -> None:
        """Insert or replace the content record for (user_id, url)."""
        if not record.url:
            raise ValueError("The 'url' field is required.")

        with self.conn:
            self.conn.execute(
                """
                INSERT INTO content_records
                    (user_id, url, html_content, headers, title, description,
                     metadata, favicon, text_content, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(user_id, url) DO UPDATE SET
                    html_content = excluded.html_content,
                    headers = excluded.headers,
                    title = excluded.title,
                    description = excluded.description,
                    metadata = excluded.metadata,
                    favicon = excluded.favicon,
                    text_content = excluded.text_content,
                    updated_at = excluded.updated_at
                """,
                (
                    _key(record.user_id),
                    record.url,
                    record.html_content,
                    json.dumps(record.headers),
                    record.metadata.title,
                    record.metadata.description,
                    json.dumps(to_plain(record.metadata)),
                    record.favicon,
                    record.text_content,
                    datetime.now().isoformat(),
                ),
            )
        logger.debug(f"Saved content record for {record.url}")

    def get_content_record(self, user_id: Optional[str], url: str) -> Optional[ContentRecord]:
        """Load the content record for (user_id, url), or None."""
        cursor = self.conn.execute(
            "SELECT * FROM content_records WHERE user_id = ? AND url = ?",
            (_key(user_id), url),
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return ContentRecord.from_dict({
            "url": row["url"],
            "user_id": row["user_id"] or None,
            "html_content": row["html_content"],
            "headers": _loads(row["headers"]) or {},
            "metadata": _loads(row["metadata"]) or {
                "title": row["title"],
                "description": row["description"],
            },
            "favicon": row["favicon"],
            "text_content": row["text_content"],
        })

    # ------------------------------------------------------------------
    # Metrics bundles
    # ------------------------------------------------------------------

    def save_metrics_bundle(self, bundle: MetricsBundle) -> None:
        """Store a bundle, fully replacing any previous one for (user_id, url)."""
        data = bundle.to_dict()
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO metrics_bundles (user_id, url, version, bundle, generated_at)
                VALUES (?, ?, ?, ?, ?)
                ON CONFLICT(user_id, url) DO UPDATE SET
                    version = excluded.version,
                    bundle = excluded.bundle,
                    generated_at = excluded.generated_at
                """,
                (
                    _key(bundle.user_id),
                    bundle.url,
                    bundle.version,
                    json.dumps(data),
                    data["generated_at"],
                ),
            )
        logger.debug(f"Saved metrics bundle for {bundle.url}")

    def get_metrics_bundle(self, user_id: Optional[str], url: str) -> Optional[Dict[str, Any]]:
        """Load the latest bundle for (user_id, url) as a dict, or None."""
        cursor = self.conn.execute(
            "SELECT bundle FROM metrics_bundles WHERE user_id = ? AND url = ?",
            (_key(user_id), url),
        )
        row = cursor.fetchone()
        return _loads(row["bundle"]) if row else None

    def count_metrics_bundles(self, user_id: Optional[str] = None) -> int:
        """Count stored bundles, for one user or across all users when None."""
        if user_id is None:
            cursor = self.conn.execute("SELECT COUNT(*) FROM metrics_bundles")
        else:
            cursor = self.conn.execute(
                "SELECT COUNT(*) FROM metrics_bundles WHERE user_id = ?", (_key(user_id),)
            )
        return cursor.fetchone()[0]

    def list_urls(
        self, user_id: Optional[str], limit: Optional[int] = None, offset: int = 0
    ) -> List[Dict[str, Any]]:
        """List the URLs a user has generated metrics for, newest first.

        Args:
            user_id: Owner of the bundles (None for anonymous)
            limit: Maximum rows to return, all when None
            offset: Rows to skip, for paging

        Returns:
            List of {"url", "generated_at"} dicts
        """
        cursor = self.conn.execute(
            """
            SELECT url, generated_at FROM metrics_bundles
            WHERE user_id = ?
            ORDER BY generated_at DESC, id DESC
            LIMIT ? OFFSET ?
            """,
            (_key(user_id), -1 if limit is None else limit, offset),
        )
        return [{"url": row["url"], "generated_at": row["generated_at"]} for row in cursor]

    # ------------------------------------------------------------------
    # Audit reports
    # ------------------------------------------------------------------

    def save_audit_report(
        self,
        report_id: str,
        url: str,
        user_id: Optional[str] = None,
        mobile_report: Optional[Dict[str, Any]] = None,
        desktop_report: Optional[Dict[str, Any]] = None,
    ) -> None:
        """Insert or replace a raw audit report pair."""
        with self.conn:
            self.conn.execute(
                """
                INSERT INTO audit_reports
                    (report_id, user_id, url, mobile_report, desktop_report, created_at)
                VALUES (?, ?, ?, ?, ?, ?)
                ON CONFLICT(report_id) DO UPDATE SET
                    user_id = excluded.user_id,
                    url = excluded.url,
                    mobile_report = excluded.mobile_report,
                    desktop_report = excluded.desktop_report
                """,
                (
                    report_id,
                    _key(user_id),
                    url,
                    json.dumps(mobile_report) if mobile_report is not None else None,
                    json.dumps(desktop_report) if desktop_report is not None else None,
                    datetime.now().isoformat(),
                ),
            )
        logger.debug(f"Saved audit report {report_id} for {url}")

    def get_audit_report(self, report_id: str) -> Optional[Dict[str, Any]]:
        """Load an audit report with its raw reports decoded, or None."""
        cursor = self.conn.execute(
            "SELECT * FROM audit_reports WHERE report_id = ?", (report_id,)
        )
        row = cursor.fetchone()
        if row is None:
            return None
        return {
            "report_id": row["report_id"],
            "user_id": row["user_id"] or None,
            "url": row["url"],
            "mobile_report": _loads(row["mobile_report"]),
            "desktop_report": _loads(row["desktop_report"]),
            "created_at": row["created_at"],
        }

    def list_audit_reports(self, user_id: Optional[str]) -> List[Dict[str, Any]]:
        """List the latest audit report per URL for a user, newest first.

        Raw reports are not decoded; has_mobile and has_desktop tell which
        form factors were stored.
        """
        cursor = self.conn.execute(
            """
            SELECT report_id, url, created_at, has_mobile, has_desktop FROM (
                SELECT report_id, url, created_at, rowid AS seq,
                       mobile_report IS NOT NULL AS has_mobile,
                       desktop_report IS NOT NULL AS has_desktop,
                       ROW_NUMBER() OVER (
                           PARTITION BY url ORDER BY created_at DESC, rowid DESC
                       ) AS position
                FROM audit_reports
                WHERE user_id = ?
            )
            WHERE position = 1
            ORDER BY created_at DESC, seq DESC
            """,
            (_key(user_id),),
        )
        return [
            {
                "report_id": row["report_id"],
                "url": row["url"],
                "created_at": row["created_at"],
                "has_mobile": bool(row["has_mobile"]),
                "has_desktop": bool(row["has_desktop"]),
            }
            for row in cursor
        ]
