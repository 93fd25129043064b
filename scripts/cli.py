"""
CLI to analyze a chat message or an emotion history -> JSON.
"""
from __future__ import annotations
import argparse, json
from companion.config import Settings
from companion.models import FaceReading
from companion.patterns import summarize_history
from companion.pipeline import analyze_message


def _analyze(args) -> dict:
    face = None
    if args.face:
        face = FaceReading(emotion=args.face, confidence=args.face_confidence)
    result = analyze_message(args.text, face, Settings())
    return {
        "ai_response": result["ai_response"],
        "detected_emotion": result["detected_emotion"],
        "text_emotion": result["text_emotion"].model_dump(mode="json"),
        "emotion_analysis": result["emotion_analysis"].model_dump(mode="json"),
    }


def _insight(args) -> dict:
    with open(args.history, "r", encoding="utf-8") as f:
        history = json.load(f)
    if not isinstance(history, list):
        raise SystemExit("history file must contain a JSON list of readings")
    summary = summarize_history(history)
    return {
        "pattern": summary["pattern"].model_dump(mode="json"),
        "volatility": summary["volatility"].model_dump(mode="json"),
        "interventions": [i.model_dump(mode="json") for i in summary["interventions"]],
        "insight": summary["insight"],
    }


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Emotion companion tools")
    sub = p.add_subparsers(dest="command", required=True)

    a = sub.add_parser("analyze", help="Analyze one message")
    a.add_argument("--text", required=True, help="User message")
    a.add_argument("--face", default=None, help="Face emotion label (optional)")
    a.add_argument("--face-confidence", type=float, default=80, help="Face confidence 0-100")
    a.set_defaults(func=_analyze)

    i = sub.add_parser("insight", help="Summarize a JSON list of readings")
    i.add_argument("--history", required=True, help="Path to JSON history file")
    i.set_defaults(func=_insight)
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    result = args.func(args)
    print(json.dumps(result, indent=2, ensure_ascii=False))
    return result


if __name__ == "__main__":
    main()
