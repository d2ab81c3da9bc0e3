"""SQLite data store for disciplog."""

import json
import logging
import sqlite3
import uuid
from datetime import date, datetime
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from disciplog.analytics.score import calculate_discipline_score
from disciplog.models import (
    JournalEntry,
    PostSessionData,
    PreSessionData,
    Rule,
    RuleCategory,
    Session,
    SessionStatus,
    Trade,
)
from disciplog.validations import JournalInput, RuleInput, TradeInput

logger = logging.getLogger(__name__)


def _new_id() -> str:
    return str(uuid.uuid4())


def _parse_dt(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


def _load_payload(model, text: Optional[str]):
    """Parse a stored session payload, dropping values that no longer validate.

    Keys that fail validation are removed and logged; everything else is
    kept. Unparseable or non-object JSON reads as an empty payload.
    """
    try:
        data = json.loads(text) if text else {}
    except json.JSONDecodeError:
        logger.warning("Ignoring unparseable %s payload", model.__name__)
        data = {}
    if not isinstance(data, dict):
        logger.warning("Ignoring non-object %s payload", model.__name__)
        data = {}

    try:
        return model.model_validate(data)
    except ValidationError as e:
        bad_keys = {err["loc"][0] for err in e.errors() if err["loc"]}
        # errors name the alias; payloads may also use the field name
        aliases = {field.alias: name for name, field in model.model_fields.items() if field.alias}
        bad_keys |= {aliases[key] for key in bad_keys if key in aliases}
        logger.warning("Dropping unreadable %s keys: %s", model.__name__, sorted(map(str, bad_keys)))
        return model.model_validate({k: v for k, v in data.items() if k not in bad_keys})


class DataStore:
    """SQLite-based data store for disciplog."""

    REQUIRED_TABLES = [
        "rules",
        "sessions",
        "trades",
        "journal_entries",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Rules table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS rules (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    name TEXT NOT NULL,
                    description TEXT,
                    category TEXT NOT NULL,
                    is_active INTEGER NOT NULL DEFAULT 1,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # Sessions table; trade_counter hands out trade numbers
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS sessions (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    started_at TEXT NOT NULL,
                    ended_at TEXT,
                    status TEXT NOT NULL DEFAULT 'active',
                    pre_session TEXT NOT NULL DEFAULT '{}',
                    post_session TEXT,
                    discipline_score INTEGER,
                    trade_counter INTEGER NOT NULL DEFAULT 0,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            # Trades table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS trades (
                    id TEXT PRIMARY KEY,
                    session_id TEXT NOT NULL REFERENCES sessions(id) ON DELETE CASCADE,
                    user_id TEXT NOT NULL,
                    trade_number INTEGER NOT NULL,
                    result TEXT NOT NULL,
                    pnl REAL,
                    rules_followed INTEGER NOT NULL DEFAULT 1,
                    broken_rule_ids TEXT NOT NULL DEFAULT '[]',
                    emotion_tag TEXT NOT NULL,
                    notes TEXT,
                    logged_at TEXT NOT NULL,
                    UNIQUE(session_id, trade_number)
                )
            """)

            # Journal table
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS journal_entries (
                    id TEXT PRIMARY KEY,
                    user_id TEXT NOT NULL,
                    date TEXT NOT NULL,
                    title TEXT NOT NULL,
                    content TEXT NOT NULL DEFAULT '',
                    image_url TEXT,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)

            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_sessions_user_date ON sessions (user_id, date)"
            )
            cursor.execute(
                "CREATE INDEX IF NOT EXISTS idx_trades_session ON trades (session_id)"
            )

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Row mapping ====================

    @staticmethod
    def _row_to_rule(row: sqlite3.Row) -> Rule:
        return Rule(
            id=row["id"],
            user_id=row["user_id"],
            name=row["name"],
            description=row["description"],
            category=RuleCategory(row["category"]),
            is_active=bool(row["is_active"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_session(row: sqlite3.Row) -> Session:
        post_session = row["post_session"]
        return Session(
            id=row["id"],
            user_id=row["user_id"],
            date=date.fromisoformat(row["date"]),
            started_at=datetime.fromisoformat(row["started_at"]),
            ended_at=_parse_dt(row["ended_at"]),
            status=SessionStatus(row["status"]),
            pre_session=_load_payload(PreSessionData, row["pre_session"]),
            post_session=(
                _load_payload(PostSessionData, post_session) if post_session else None
            ),
            discipline_score=row["discipline_score"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    @staticmethod
    def _row_to_trade(row: sqlite3.Row) -> Trade:
        return Trade(
            id=row["id"],
            session_id=row["session_id"],
            user_id=row["user_id"],
            trade_number=row["trade_number"],
            result=row["result"],
            pnl=row["pnl"],
            rules_followed=bool(row["rules_followed"]),
            broken_rule_ids=json.loads(row["broken_rule_ids"] or "[]"),
            emotion_tag=row["emotion_tag"],
            notes=row["notes"],
            logged_at=datetime.fromisoformat(row["logged_at"]),
        )

    @staticmethod
    def _row_to_journal_entry(row: sqlite3.Row) -> JournalEntry:
        return JournalEntry(
            id=row["id"],
            user_id=row["user_id"],
            date=date.fromisoformat(row["date"]),
            title=row["title"],
            content=row["content"],
            image_url=row["image_url"],
            created_at=datetime.fromisoformat(row["created_at"]),
            updated_at=datetime.fromisoformat(row["updated_at"]),
        )

    # ==================== Rules ====================

    def create_rule(self, user_id: str, rule: RuleInput) -> Rule:
        """Create a rule for a user.

        Args:
            user_id: Owning user.
            rule: Validated rule fields.

        Returns:
            The stored rule.
        """
        now = datetime.now()
        created = Rule(
            id=_new_id(),
            user_id=user_id,
            name=rule.name,
            description=rule.description,
            category=rule.category,
            is_active=rule.is_active,
            created_at=now,
            updated_at=now,
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO rules
                (id, user_id, name, description, category, is_active, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    created.id,
                    created.user_id,
                    created.name,
                    created.description,
                    created.category.value,
                    1 if created.is_active else 0,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Created rule %s for %s", created.id, user_id)
        return created

    def get_rules(self, user_id: str, active_only: bool = False) -> list[Rule]:
        """Get a user's rules.

        Args:
            user_id: Owning user.
            active_only: Only return active rules.

        Returns:
            Rules ordered by category, then newest first.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            query = "SELECT * FROM rules WHERE user_id = ?"
            if active_only:
                query += " AND is_active = 1"
            query += " ORDER BY category, created_at DESC"
            cursor.execute(query, (user_id,))
            return [self._row_to_rule(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_rule(self, user_id: str, rule_id: str) -> Optional[Rule]:
        """Get a rule by ID.

        Returns:
            Rule if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM rules WHERE id = ? AND user_id = ?",
                (rule_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_rule(row) if row else None
        finally:
            conn.close()

    def update_rule(self, user_id: str, rule_id: str, rule: RuleInput) -> Optional[Rule]:
        """Replace the editable fields of a rule.

        Returns:
            The updated rule, or None if it does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE rules
                SET name = ?, description = ?, category = ?, is_active = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    rule.name,
                    rule.description,
                    rule.category.value,
                    1 if rule.is_active else 0,
                    datetime.now().isoformat(),
                    rule_id,
                    user_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return self.get_rule(user_id, rule_id)

    def set_rule_active(self, user_id: str, rule_id: str, is_active: bool) -> Optional[Rule]:
        """Activate or deactivate a rule.

        Returns:
            The updated rule, or None if it does not exist.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE rules SET is_active = ?, updated_at = ? WHERE id = ? AND user_id = ?",
                (1 if is_active else 0, datetime.now().isoformat(), rule_id, user_id),
            )
            conn.commit()
        finally:
            conn.close()
        return self.get_rule(user_id, rule_id)

    def delete_rule(self, user_id: str, rule_id: str) -> bool:
        """Delete a rule.

        Returns:
            True if a rule was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM rules WHERE id = ? AND user_id = ?",
                (rule_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    def count_active_rules(self, user_id: str) -> int:
        """Count a user's active rules."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT COUNT(*) AS count FROM rules WHERE user_id = ? AND is_active = 1",
                (user_id,),
            )
            return cursor.fetchone()["count"]
        finally:
            conn.close()

    # ==================== Sessions ====================

    def create_session(
        self,
        user_id: str,
        pre_session: PreSessionData,
        started_at: Optional[datetime] = None,
    ) -> Session:
        """Start a new active session.

        Args:
            user_id: Owning user.
            pre_session: Pre-session payload.
            started_at: Start timestamp; defaults to now. Its date becomes
                the session date.

        Returns:
            The new session.

        Raises:
            ValueError: If the user already has an active session.
        """
        started_at = started_at or datetime.now()
        session = Session(
            id=_new_id(),
            user_id=user_id,
            date=started_at.date(),
            started_at=started_at,
            status=SessionStatus.ACTIVE,
            pre_session=pre_session,
            created_at=started_at,
            updated_at=started_at,
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT id FROM sessions WHERE user_id = ? AND status = ?",
                (user_id, SessionStatus.ACTIVE.value),
            )
            active = cursor.fetchone()
            if active:
                raise ValueError(f"Session {active['id']} is still active; end it first")

            cursor.execute(
                """
                INSERT INTO sessions
                (id, user_id, date, started_at, status, pre_session, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    session.id,
                    session.user_id,
                    session.date.isoformat(),
                    started_at.isoformat(),
                    session.status.value,
                    pre_session.model_dump_json(by_alias=True, exclude_none=True),
                    started_at.isoformat(),
                    started_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Started session %s for %s", session.id, user_id)
        return session

    def get_session(self, user_id: str, session_id: str) -> Optional[Session]:
        """Get a session by ID.

        Returns:
            Session if found, None otherwise.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM sessions WHERE id = ? AND user_id = ?",
                (session_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_session(row) if row else None
        finally:
            conn.close()

    def get_active_session(self, user_id: str) -> Optional[Session]:
        """Get the user's active session, if any."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT * FROM sessions
                WHERE user_id = ? AND status = ?
                ORDER BY created_at DESC
                LIMIT 1
                """,
                (user_id, SessionStatus.ACTIVE.value),
            )
            row = cursor.fetchone()
            return self._row_to_session(row) if row else None
        finally:
            conn.close()

    def get_sessions(
        self,
        user_id: str,
        status: Optional[SessionStatus] = None,
        from_date: Optional[date] = None,
    ) -> list[Session]:
        """Get a user's sessions.

        Args:
            user_id: Owning user.
            status: Optional status filter.
            from_date: Optional start date filter.

        Returns:
            Sessions ordered by date, newest first.
        """
        query = "SELECT * FROM sessions WHERE user_id = ?"
        params: list = [user_id]
        if status is not None:
            query += " AND status = ?"
            params.append(SessionStatus(status).value)
        if from_date is not None:
            query += " AND date >= ?"
            params.append(from_date.isoformat())
        query += " ORDER BY date DESC, started_at DESC"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_session(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def end_session(
        self,
        user_id: str,
        session_id: str,
        post_session: PostSessionData,
        ended_at: Optional[datetime] = None,
    ) -> Session:
        """Complete a session and record its discipline score.

        The post-session payload, score, end time and status are written
        in one statement.

        Args:
            user_id: Owning user.
            session_id: Session to complete.
            post_session: Post-session payload.
            ended_at: End timestamp; defaults to now.

        Returns:
            The completed session.

        Raises:
            ValueError: If the session does not exist or is not active.
        """
        ended_at = ended_at or datetime.now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM sessions WHERE id = ? AND user_id = ?",
                (session_id, user_id),
            )
            row = cursor.fetchone()
            if row is None:
                raise ValueError(f"Session {session_id} not found")
            session = self._row_to_session(row)
            if session.status != SessionStatus.ACTIVE:
                raise ValueError(f"Session {session_id} is already completed")

            cursor.execute(
                "SELECT * FROM trades WHERE session_id = ?",
                (session_id,),
            )
            trades = [self._row_to_trade(r) for r in cursor.fetchall()]
            score = calculate_discipline_score(session.pre_session, post_session, trades)

            cursor.execute(
                """
                UPDATE sessions
                SET post_session = ?, discipline_score = ?, status = ?,
                    ended_at = ?, updated_at = ?
                WHERE id = ? AND status = ?
                """,
                (
                    post_session.model_dump_json(by_alias=True, exclude_none=True),
                    score,
                    SessionStatus.COMPLETED.value,
                    ended_at.isoformat(),
                    ended_at.isoformat(),
                    session_id,
                    SessionStatus.ACTIVE.value,
                ),
            )
            if cursor.rowcount != 1:
                conn.rollback()
                raise ValueError(f"Session {session_id} is already completed")
            conn.commit()
        finally:
            conn.close()

        logger.debug("Completed session %s with score %d", session_id, score)
        return session.model_copy(update={
            "post_session": post_session,
            "discipline_score": score,
            "status": SessionStatus.COMPLETED,
            "ended_at": ended_at,
            "updated_at": ended_at,
        })

    # ==================== Trades ====================

    def add_trade(
        self,
        user_id: str,
        session_id: str,
        trade: TradeInput,
        logged_at: Optional[datetime] = None,
    ) -> Trade:
        """Log a trade in an active session.

        The trade number comes from the session's counter, so it is the
        trade count plus one and numbers of deleted trades are not reused.

        Args:
            user_id: Owning user.
            session_id: Session the trade belongs to.
            trade: Validated trade fields.
            logged_at: Log timestamp; defaults to now.

        Returns:
            The stored trade.

        Raises:
            ValueError: If the session is missing or completed, or a broken
                rule ID is not one of the user's active rules.
        """
        logged_at = logged_at or datetime.now()
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT status FROM sessions WHERE id = ? AND user_id = ?",
                (session_id, user_id),
            )
            row = cursor.fetchone()
            if row is None:
                raise ValueError(f"Session {session_id} not found")
            if row["status"] != SessionStatus.ACTIVE.value:
                raise ValueError(f"Session {session_id} is completed; trades can no longer be logged")

            if trade.broken_rule_ids:
                cursor.execute(
                    "SELECT id FROM rules WHERE user_id = ? AND is_active = 1",
                    (user_id,),
                )
                active_ids = {r["id"] for r in cursor.fetchall()}
                unknown = [rid for rid in trade.broken_rule_ids if rid not in active_ids]
                if unknown:
                    raise ValueError(f"Unknown or inactive rule ids: {', '.join(unknown)}")

            cursor.execute(
                "UPDATE sessions SET trade_counter = trade_counter + 1 WHERE id = ?",
                (session_id,),
            )
            cursor.execute(
                "SELECT trade_counter FROM sessions WHERE id = ?",
                (session_id,),
            )
            trade_number = cursor.fetchone()["trade_counter"]

            stored = Trade(
                id=_new_id(),
                session_id=session_id,
                user_id=user_id,
                trade_number=trade_number,
                result=trade.result,
                pnl=trade.normalized_pnl,
                rules_followed=trade.rules_followed,
                broken_rule_ids=list(dict.fromkeys(trade.broken_rule_ids)),
                emotion_tag=trade.emotion_tag,
                notes=trade.notes,
                logged_at=logged_at,
            )
            cursor.execute(
                """
                INSERT INTO trades
                (id, session_id, user_id, trade_number, result, pnl, rules_followed,
                 broken_rule_ids, emotion_tag, notes, logged_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    stored.id,
                    stored.session_id,
                    stored.user_id,
                    stored.trade_number,
                    stored.result.value,
                    stored.pnl,
                    1 if stored.rules_followed else 0,
                    json.dumps(stored.broken_rule_ids),
                    stored.emotion_tag.value,
                    stored.notes,
                    logged_at.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        logger.debug("Logged trade #%d in session %s", stored.trade_number, session_id)
        return stored

    def get_trades(self, session_id: str) -> list[Trade]:
        """Get the trades of a session ordered by trade number."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM trades WHERE session_id = ? ORDER BY trade_number",
                (session_id,),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_user_trades(self, user_id: str) -> list[Trade]:
        """Get all of a user's trades in logging order."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM trades WHERE user_id = ? ORDER BY logged_at",
                (user_id,),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_trades_for_sessions(self, session_ids: list[str]) -> list[Trade]:
        """Get the trades belonging to any of the given sessions."""
        if not session_ids:
            return []
        placeholders = ", ".join("?" for _ in session_ids)
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                f"""
                SELECT * FROM trades
                WHERE session_id IN ({placeholders})
                ORDER BY logged_at
                """,
                list(session_ids),
            )
            return [self._row_to_trade(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def delete_trade(self, user_id: str, trade_id: str) -> bool:
        """Delete a trade. Remaining trades keep their numbers.

        Returns:
            True if a trade was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM trades WHERE id = ? AND user_id = ?",
                (trade_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    # ==================== Journal ====================

    def create_journal_entry(
        self,
        user_id: str,
        entry_date: date,
        entry: JournalInput,
    ) -> JournalEntry:
        """Save a journal entry.

        Returns:
            The stored entry.
        """
        now = datetime.now()
        created = JournalEntry(
            id=_new_id(),
            user_id=user_id,
            date=entry_date,
            title=entry.title,
            content=entry.content,
            image_url=entry.image_url,
            created_at=now,
            updated_at=now,
        )
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO journal_entries
                (id, user_id, date, title, content, image_url, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    created.id,
                    user_id,
                    entry_date.isoformat(),
                    created.title,
                    created.content,
                    created.image_url,
                    now.isoformat(),
                    now.isoformat(),
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return created

    def get_journal_entries(
        self, user_id: str, from_date: Optional[date] = None
    ) -> list[JournalEntry]:
        """Get journal entries, newest first.

        Args:
            user_id: Owning user.
            from_date: Optional start date filter.
        """
        query = "SELECT * FROM journal_entries WHERE user_id = ?"
        params: list = [user_id]
        if from_date:
            query += " AND date >= ?"
            params.append(from_date.isoformat())
        query += " ORDER BY date DESC, created_at DESC"

        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(query, params)
            return [self._row_to_journal_entry(row) for row in cursor.fetchall()]
        finally:
            conn.close()

    def get_journal_entry(self, user_id: str, entry_id: str) -> Optional[JournalEntry]:
        """Get a journal entry by ID."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT * FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            row = cursor.fetchone()
            return self._row_to_journal_entry(row) if row else None
        finally:
            conn.close()

    def update_journal_entry(
        self, user_id: str, entry_id: str, entry: JournalInput
    ) -> Optional[JournalEntry]:
        """Replace the title, content and image of a journal entry."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                UPDATE journal_entries
                SET title = ?, content = ?, image_url = ?, updated_at = ?
                WHERE id = ? AND user_id = ?
                """,
                (
                    entry.title,
                    entry.content,
                    entry.image_url,
                    datetime.now().isoformat(),
                    entry_id,
                    user_id,
                ),
            )
            conn.commit()
        finally:
            conn.close()
        return self.get_journal_entry(user_id, entry_id)

    def delete_journal_entry(self, user_id: str, entry_id: str) -> bool:
        """Delete a journal entry.

        Returns:
            True if an entry was deleted.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "DELETE FROM journal_entries WHERE id = ? AND user_id = ?",
                (entry_id, user_id),
            )
            conn.commit()
            return cursor.rowcount > 0
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
