from __future__ import annotations

import json
import logging
from typing import Any

log = logging.getLogger(__name__)


def extract_json_object(text: str) -> dict | None:
    """Pull the first balanced {...} out of free text (code fences, chatter around it)."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_str = False
        escaped = False
        for i in range(start, len(text)):
            c = text[i]
            if in_str:
                if escaped:
                    escaped = False
                elif c == "\\":
                    escaped = True
                elif c == '"':
                    in_str = False
                continue
            if c == '"':
                in_str = True
            elif c == "{":
                depth += 1
            elif c == "}":
                depth -= 1
                if depth == 0:
                    try:
                        obj = json.loads(text[start : i + 1])
                    except json.JSONDecodeError:
                        break
                    if isinstance(obj, dict):
                        return obj
                    break
        start = text.find("{", start + 1)
    return None


def extract_payload(reply: Any) -> dict[str, Any]:
    """Decode a collaborator reply into {"narration": str, "ops": dict | None}.

    Never raises: a reply without usable JSON comes back as plain narration.
    """
    payload: dict | None = None
    if isinstance(reply, dict):
        payload = reply
    elif isinstance(reply, str):
        payload = extract_json_object(reply)
        if payload is None:
            log.debug("Reply carried no JSON object")

    if payload is None:
        return {"narration": reply if isinstance(reply, str) else "", "ops": None}

    # A bare batch without the narration wrapper.
    ops = payload.get("ops") if "changes" not in payload else payload
    narration = payload.get("narration")
    return {
        "narration": narration if isinstance(narration, str) else "",
        "ops": ops if isinstance(ops, dict) else None,
    }
