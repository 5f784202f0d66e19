from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from .. import config
from ..errors import BundleFormatError
from ..logic.sanity import validate_state
from ..mappings import BUNDLE_MODULE_TO_STATE
from .artifacts import read_json

log = logging.getLogger(__name__)

STATE_TO_BUNDLE_MODULE = {v: k for k, v in BUNDLE_MODULE_TO_STATE.items()}


def make_manifest(state: dict) -> dict[str, Any]:
    meta = state.get("meta") if isinstance(state.get("meta"), dict) else {}
    return {"version": config.BUNDLE_VERSION, "season": meta.get("season"), "timeline": meta.get("timeline")}


def modules_to_state(modules: dict) -> dict:
    if not isinstance(modules, dict):
        raise BundleFormatError("bundle modules must be a mapping")
    state = {key: modules.get(name) for name, key in BUNDLE_MODULE_TO_STATE.items() if name in modules}
    return validate_state(state)


def state_to_bundle(state: dict, manifest: dict | None = None) -> dict:
    """Pack a state into the single-file save format."""
    validate_state(state)
    modules = {STATE_TO_BUNDLE_MODULE.get(k, k): v for k, v in state.items()}
    return {"_type": config.BUNDLE_TYPE, "manifest": manifest or make_manifest(state), "modules": modules}


def bundle_to_state(bundle: Any) -> dict:
    if not isinstance(bundle, dict) or bundle.get("_type") != config.BUNDLE_TYPE or not bundle.get("modules"):
        raise BundleFormatError("Not a valid save bundle")
    return modules_to_state(bundle["modules"])


def load_bundle(path: Path) -> dict:
    return bundle_to_state(read_json(path, default=None))


def load_seed_dir(seed_dir: Path | None = None) -> dict:
    """Assemble a state from manifest.json plus the module files it lists."""
    base = seed_dir or config.SEED_DIR
    manifest = read_json(base / "manifest.json", default=None)
    if not isinstance(manifest, dict) or not isinstance(manifest.get("files"), list):
        raise BundleFormatError(f"Seed manifest missing or has no file list: {base / 'manifest.json'}")

    modules: dict[str, Any] = {}
    for name in manifest["files"]:
        path = base / str(name)
        if not path.exists():
            raise BundleFormatError(f"Seed module listed in manifest is missing: {path}")
        modules[Path(str(name)).stem] = read_json(path)
    log.info("Loaded %d seed modules from %s", len(modules), base)
    return modules_to_state(modules)
