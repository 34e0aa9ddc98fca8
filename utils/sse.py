# utils/sse.py
"""Server-sent event framing for the chat stream"""
import json
from typing import Any, Dict

DONE_EVENT = "data: [DONE]\n\n"

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",  # Stop nginx from buffering the stream
}


def format_event(payload: Dict[str, Any]) -> str:
    return f"data: {json.dumps(payload, ensure_ascii=False)}\n\n"
