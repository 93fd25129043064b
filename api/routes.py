"""
REST endpoints for message analysis, history and insight.
"""
from datetime import date
import logging

from fastapi import APIRouter, File, HTTPException, Query, Request, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

from companion import store
from companion.exceptions import EmotionInputError, FaceAnalysisError, StorageError
from companion.face import analyze_face_frame, decode_image
from companion.models import (
    AnalyzeRequest,
    AnalyzeResponse,
    HistoryResponse,
    InsightResponse,
    SummaryResponse,
)
from companion.pipeline import build_insight, process_message, today_utc

router = APIRouter(prefix="/api")
logger = logging.getLogger(__name__)

FALLBACK_REPLY = "I'm sorry, I'm having trouble processing that right now."


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze(req: AnalyzeRequest, request: Request):
    """
    Analyze one chat message against the latest face reading, reply, and
    persist the turn.

    Returns:
        AnalyzeResponse, or a 500 payload carrying a fallback reply.
    """
    logger.debug(f"[api] /api/analyze face={req.face_emotion} text_len={len(req.user_text)}")
    settings = request.app.state.settings
    try:
        result = process_message(
            request.app.state.engine,
            req.user_text,
            req.face_emotion,
            settings,
            text_emotion=req.text_emotion,
        )
    except EmotionInputError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        logger.exception("[api] analyze failed")
        body = AnalyzeResponse(success=False, ai_response=FALLBACK_REPLY, error="Failed to analyze message")
        return JSONResponse(status_code=500, content=body.model_dump(mode="json"))

    return AnalyzeResponse(
        ai_response=result["ai_response"],
        emotion_analysis=result["emotion_analysis"],
        detected_emotion=result["detected_emotion"],
        conversation_id=result["conversation_id"],
    )


@router.get("/history", response_model=HistoryResponse)
def history(request: Request, limit: int | None = Query(None, ge=1, le=500)):
    limit = limit or request.app.state.settings.HISTORY_LIMIT
    try:
        with request.app.state.engine.begin() as conn:
            turns = store.list_history(conn, limit=limit)
    except SQLAlchemyError:
        logger.exception("[api] history fetch failed")
        raise HTTPException(status_code=500, detail="Failed to fetch history")
    return HistoryResponse(history=turns, count=len(turns))


@router.delete("/history")
def clear_history(request: Request):
    try:
        with request.app.state.engine.begin() as conn:
            store.clear_history(conn)
    except SQLAlchemyError:
        logger.exception("[api] history clear failed")
        raise HTTPException(status_code=500, detail="Failed to clear history")
    return {"success": True, "message": "History cleared"}


@router.get("/summary", response_model=SummaryResponse)
def summary(request: Request, day: date | None = Query(None, alias="date")):
    """
    Per-day emotion counters (defaults to today, UTC).
    """
    day = day or today_utc()
    try:
        with request.app.state.engine.begin() as conn:
            result = store.get_daily_summary(conn, day)
    except SQLAlchemyError:
        logger.exception("[api] summary fetch failed")
        raise HTTPException(status_code=500, detail="Failed to fetch summary")
    return SummaryResponse(summary=result)


@router.get("/insight", response_model=InsightResponse)
def insight(request: Request, limit: int | None = Query(None, ge=1, le=500)):
    limit = limit or request.app.state.settings.INSIGHT_WINDOW
    try:
        return InsightResponse(**build_insight(request.app.state.engine, limit=limit))
    except StorageError as e:
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/face")
async def analyze_face(request: Request, file: UploadFile = File(...)):
    """
    Classify the facial expression in one uploaded frame.

    Returns:
        {"face_emotion": FaceReading | None}; None means no usable face.
    """
    data = await file.read()
    logger.debug(f"[api] /api/face filename={file.filename} bytes={len(data)}")
    try:
        frame = decode_image(data)
        reading = analyze_face_frame(frame, request.app.state.settings)
    except FaceAnalysisError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ImportError:
        logger.exception("[api] face classifier unavailable")
        raise HTTPException(status_code=503, detail="Face classifier is not installed")
    return {"face_emotion": reading.model_dump(mode="json") if reading else None}
