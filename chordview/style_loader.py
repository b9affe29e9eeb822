"""Load a StyleConfig from the packaged defaults plus an optional user YAML file."""

from __future__ import annotations

import copy
import logging
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from chordview.diagram_models import StyleConfig

logger = logging.getLogger(__name__)

PKG_ROOT = Path(__file__).resolve().parent
DEFAULT_STYLE_PATH = PKG_ROOT / "style.default.yaml"


def _read_yaml(path: Path) -> Dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Style file {path} must contain a mapping, got {type(data).__name__}.")
    return data


def _deep_merge(a: Dict[str, Any], b: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(a)
    for k, v in (b or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = copy.deepcopy(v)
    return out


def load_style_data(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> Dict[str, Any]:
    """
    Return the merged style mapping: packaged defaults overlaid by *user_path*.

    A ``null`` value in the user file (e.g. ``open_glyph: null``) removes the
    default entry's effect by replacing it.

    Raises:
        FileNotFoundError: If *user_path* is given but does not exist.
        yaml.YAMLError:    If either file is not valid YAML.
    """
    dpath = Path(default_path) if default_path else DEFAULT_STYLE_PATH
    defaults = _read_yaml(dpath)
    if user_path is None:
        return defaults

    upath = Path(user_path)
    logger.debug("Merging user style %s over %s", upath, dpath)
    return _deep_merge(defaults, _read_yaml(upath))


def load_style(
    user_path: Optional[Path] = None,
    default_path: Optional[Path] = None,
) -> StyleConfig:
    """Build a :class:`StyleConfig` from the merged YAML style data."""
    return StyleConfig.from_mapping(load_style_data(user_path, default_path))
