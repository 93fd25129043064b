"""
Relational persistence for conversation turns and daily emotion counters.
"""
# companion/store.py
from __future__ import annotations
from datetime import date, datetime
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import (
    Boolean,
    bindparam,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    create_engine,
    text,
)
from sqlalchemy.engine import Connection, Engine

from companion.models import (
    ComparisonResult,
    ConversationTurn,
    DailySummary,
    FaceReading,
    TextEmotionResult,
    utcnow,
)

logger = logging.getLogger(__name__)

metadata = MetaData()

conversations = Table(
    "conversations",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("user_text", Text, nullable=False),
    Column("ai_response", Text, nullable=False),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
)

emotions = Table(
    "emotions",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("conversation_id", Integer, ForeignKey("conversations.id", ondelete="CASCADE")),
    Column("face_emotion", String(50)),
    Column("text_emotion", String(50)),
    Column("confidence_face", Integer),
    Column("confidence_text", Integer),
    Column("mismatch", Boolean, nullable=False, default=False),
    Column("concerning_mismatch", Boolean, nullable=False, default=False),
    Column("hiding_feelings", Boolean, nullable=False, default=False),
    Column("primary_emotion", String(50)),
    Column("severity", Integer, nullable=False, default=0),
    Column("created_at", DateTime(timezone=True), nullable=False, default=utcnow),
)

emotion_summary = Table(
    "emotion_summary",
    metadata,
    Column("id", Integer, primary_key=True, autoincrement=True),
    Column("date", Date, nullable=False, unique=True),
    Column("happy_count", Integer, nullable=False, default=0),
    Column("sad_count", Integer, nullable=False, default=0),
    Column("angry_count", Integer, nullable=False, default=0),
    Column("neutral_count", Integer, nullable=False, default=0),
    Column("updated_at", DateTime(timezone=True), nullable=False, default=utcnow),
)

# Daily counters keep four coarse buckets; anxious is counted with sad.
SUMMARY_COLUMNS: Dict[str, str] = {
    "happy": "happy_count",
    "sad": "sad_count",
    "anxious": "sad_count",
    "angry": "angry_count",
    "neutral": "neutral_count",
}


def make_engine(db_url: str) -> Engine:
    connect_args = {"check_same_thread": False} if db_url.startswith("sqlite") else {}
    return create_engine(db_url, pool_pre_ping=True, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    metadata.create_all(engine)
    logger.debug(f"[store] tables ready on {engine.url.render_as_string(hide_password=True)}")


def save_turn(
    conn: Connection,
    *,
    user_text: str,
    ai_response: str,
    text_emotion: TextEmotionResult,
    face_emotion: Optional[FaceReading],
    analysis: ComparisonResult,
    created_at: Optional[datetime] = None,
) -> int:
    """
    Insert one conversation row and its flat emotion-analysis row.

    Returns:
        The new conversation id.
    """
    created_at = created_at or utcnow()
    result = conn.execute(
        conversations.insert().values(
            user_text=user_text,
            ai_response=ai_response,
            created_at=created_at,
        )
    )
    conversation_id = int(result.inserted_primary_key[0])

    conn.execute(
        emotions.insert().values(
            conversation_id=conversation_id,
            face_emotion=face_emotion.emotion if face_emotion else None,
            text_emotion=text_emotion.emotion,
            confidence_face=face_emotion.confidence if face_emotion else None,
            confidence_text=text_emotion.confidence,
            mismatch=bool(analysis.mismatch),
            concerning_mismatch=bool(analysis.concerning_mismatch),
            hiding_feelings=bool(analysis.hiding_feelings),
            primary_emotion=analysis.primary_emotion,
            severity=int(analysis.severity),
            created_at=created_at,
        )
    )
    logger.debug(f"[store] saved conversation id={conversation_id}")
    return conversation_id


_DAY = bindparam("day", type_=Date)
_NOW = bindparam("now", type_=DateTime(timezone=True))

_ENSURE_DAY_ROW = text(
    """
    insert into emotion_summary (date, happy_count, sad_count, angry_count, neutral_count, updated_at)
    values (:day, 0, 0, 0, 0, :now)
    on conflict (date) do nothing
    """
).bindparams(_DAY, _NOW)


def increment_daily_summary(conn: Connection, emotion: str, day: date) -> None:
    """
    Add one to the day's counter for `emotion`, creating the row on first use.
    """
    column = SUMMARY_COLUMNS.get(emotion)
    if column is None:
        logger.warning(f"[store] no summary bucket for emotion={emotion!r}; skipping")
        return

    conn.execute(_ENSURE_DAY_ROW, {"day": day, "now": utcnow()})
    # column comes from SUMMARY_COLUMNS only, never from user input
    conn.execute(
        text(
            f"""
            update emotion_summary
            set {column} = {column} + 1, updated_at = :now
            where date = :day
            """
        ).bindparams(_DAY, _NOW),
        {"day": day, "now": utcnow()},
    )
    logger.debug(f"[store] summary {day} {column} += 1")


def get_daily_summary(conn: Connection, day: date) -> DailySummary:
    """
    Counters for one day; an all-zero row is created if the day has none yet.
    """
    row = conn.execute(
        text(
            """
            select happy_count, sad_count, angry_count, neutral_count
            from emotion_summary
            where date = :day
            """
        ).bindparams(_DAY),
        {"day": day},
    ).mappings().first()

    if row is None:
        conn.execute(_ENSURE_DAY_ROW, {"day": day, "now": utcnow()})
        return DailySummary(date=day)

    return DailySummary(
        date=day,
        happy=row["happy_count"] or 0,
        sad=row["sad_count"] or 0,
        angry=row["angry_count"] or 0,
        neutral=row["neutral_count"] or 0,
    )


def list_history(conn: Connection, limit: int = 50) -> List[ConversationTurn]:
    """
    Most recent turns first.
    """
    limit = max(1, int(limit))
    rows = conn.execute(
        text(
            """
            select c.id, c.user_text, c.ai_response, c.created_at,
                   e.face_emotion, e.text_emotion, e.confidence_face, e.confidence_text,
                   e.mismatch, e.severity
            from conversations c
            left join emotions e on c.id = e.conversation_id
            order by c.created_at desc, c.id desc
            limit :limit
            """
        ).columns(created_at=DateTime(timezone=True), mismatch=Boolean),
        {"limit": limit},
    ).mappings().all()

    return [
        ConversationTurn(
            id=r["id"],
            user_text=r["user_text"],
            ai_response=r["ai_response"],
            created_at=r["created_at"],
            face_emotion=r["face_emotion"],
            text_emotion=r["text_emotion"],
            confidence_face=r["confidence_face"],
            confidence_text=r["confidence_text"],
            mismatch=bool(r["mismatch"]),
            severity=r["severity"] or 0,
        )
        for r in rows
    ]


def recent_readings(conn: Connection, limit: int = 10) -> List[Dict[str, Any]]:
    """
    The last `limit` analysed turns in chronological order, shaped for the
    trend analyzer (`text_emotion` / `face_emotion` keys).
    """
    rows = conn.execute(
        text(
            """
            select e.text_emotion, e.face_emotion, e.confidence_text, e.created_at
            from emotions e
            order by e.created_at desc, e.id desc
            limit :limit
            """
        ).columns(created_at=DateTime(timezone=True)),
        {"limit": max(1, int(limit))},
    ).mappings().all()
    return [dict(r) for r in reversed(rows)]


def clear_history(conn: Connection) -> None:
    conn.execute(emotions.delete())
    conn.execute(conversations.delete())
    logger.debug("[store] history cleared")
