from __future__ import annotations

import copy
import logging
from typing import Any

from .. import config
from ..errors import UnresolvablePathError
from ..models import Operation, PatchResult, as_number, is_number
from .paths import MISSING, clamp_attribute, get_slot, resolve_parent, set_slot, to_keys

log = logging.getLogger(__name__)

REASON_NO_OPS = "no-ops"
REASON_NO_CHANGES = "no-changes"
REASON_ROLLED_BACK = "rolled-back"


def is_patch_batch(batch: Any) -> bool:
    if not isinstance(batch, dict):
        return False
    tagged = batch.get("kind") == config.PATCH_KIND or batch.get("_type") == config.LEGACY_PATCH_TYPE
    return tagged and isinstance(batch.get("changes"), list)


def apply_operation(state: dict, op: Operation) -> None:
    """Apply one operation in place. Raises UnresolvablePathError or ValueError."""
    keys = to_keys(op.path)
    parent, key = resolve_parent(state, keys)
    collection = keys[-2] if len(keys) > 1 else None

    if op.op == "set":
        set_slot(parent, key, clamp_attribute(keys, op.value), collection)
    elif op.op == "inc":
        current = get_slot(parent, key, collection)
        if not is_number(current):
            current = 0
        delta = as_number(op.value) or 0
        set_slot(parent, key, clamp_attribute(keys, current + delta), collection)
    elif op.op == "push":
        current = get_slot(parent, key, collection)
        if current is MISSING or not isinstance(current, list):
            current = []
            set_slot(parent, key, current, collection)
        current.append(op.value)
    else:
        raise ValueError(f"unknown op '{op.op}'")


def apply_ops(state: dict, batch: Any, *, atomic: bool = False) -> PatchResult:
    """Apply a patch batch to state in place.

    Operations are independent: one that cannot be resolved is skipped and the
    rest still apply, with no rollback. With atomic=True the batch runs on a
    copy that is committed only when every operation applied.
    """
    if not is_patch_batch(batch):
        log.info("Rejected patch batch: wrong tag or no change list")
        return PatchResult(ok=False, reason=REASON_NO_OPS)

    target = copy.deepcopy(state) if atomic else state
    changed: list[str] = []
    skipped: list[str] = []

    for raw in batch["changes"]:
        op = Operation.from_dict(raw)
        if op is None:
            log.debug("Skipping malformed operation %r", raw)
            skipped.append(str(raw.get("path")) if isinstance(raw, dict) else repr(raw))
            continue
        try:
            apply_operation(target, op)
        except (UnresolvablePathError, ValueError) as e:
            log.debug("Skipping %s %s: %s", op.op, op.path, e)
            skipped.append(op.path)
            continue
        changed.append(op.path)

    if atomic:
        if skipped:
            log.info("Atomic batch rolled back; unresolved: %s", ", ".join(skipped))
            return PatchResult(ok=False, reason=REASON_ROLLED_BACK, skipped=skipped)
        state.clear()
        state.update(target)

    if not changed:
        return PatchResult(ok=False, reason=REASON_NO_CHANGES, skipped=skipped)
    return PatchResult(ok=True, changed=changed, skipped=skipped)
