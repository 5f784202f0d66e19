from __future__ import annotations


def race(rnd: int, *finishers: dict, name: str | None = None) -> dict:
    return {"round": rnd, "name": name or f"Round {rnd}", "finishers": list(finishers)}


def batch(*changes: dict) -> dict:
    return {"kind": "patch-v1", "changes": list(changes)}


def op(kind: str, path: str, value=None) -> dict:
    return {"op": kind, "path": path, "value": value}
