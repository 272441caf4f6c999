from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml

from interfaces.types import Vec3
from .schema import CtfConstants, EnvProfile


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

PROJECT_ROOT = Path(__file__).resolve().parents[2]
CONFIG_ROOT = PROJECT_ROOT / "config"

# Lets a deployment pick a profile without editing env.yaml.
PROFILE_ENV_VAR = "CTF_ENV_PROFILE"


def _load_yaml(config_root: Path, name: str) -> Dict[str, Any]:
    """Load a YAML config file from the config/ directory."""
    path = config_root / name
    if not path.exists():
        raise FileNotFoundError(f"Missing config file: {path}")
    with path.open("r", encoding="utf-8") as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"Expected mapping at top of {path}, got {type(data)}")
    return data


def _select_profile(
    env_cfg: Dict[str, Any],
    override: Optional[str],
) -> Tuple[str, Dict[str, Any]]:
    """Return (active_profile_name, active_profile_mapping)."""
    profile_name = override or env_cfg.get("profile")
    if not profile_name:
        raise ValueError("env.yaml must define a 'profile' key.")
    profiles = env_cfg.get("profiles")
    if not isinstance(profiles, dict):
        raise ValueError("env.yaml must define a 'profiles' mapping.")
    if profile_name not in profiles:
        raise KeyError(f"Profile '{profile_name}' not found in env.yaml profiles.")
    return profile_name, profiles[profile_name] or {}


def _vec3(raw: Any, key: str, default: Vec3) -> Vec3:
    if raw is None:
        return default
    if not isinstance(raw, dict):
        raise ValueError(f"Arena key '{key}' must be a mapping with x/y/z, got {raw!r}")
    try:
        return Vec3.from_mapping(raw)
    except (KeyError, TypeError, ValueError) as exc:
        raise ValueError(f"Arena key '{key}' is not a valid position: {raw!r}") from exc


def _build_constants(arena_raw: Dict[str, Any]) -> CtfConstants:
    defaults = CtfConstants()
    return CtfConstants(
        flag_spawn=_vec3(arena_raw.get("flag_spawn"), "flag_spawn", defaults.flag_spawn),
        blue_score_location=_vec3(
            arena_raw.get("blue_score_location"),
            "blue_score_location",
            defaults.blue_score_location,
        ),
        red_score_location=_vec3(
            arena_raw.get("red_score_location"),
            "red_score_location",
            defaults.red_score_location,
        ),
        neutral_flag_name=str(arena_raw.get("neutral_flag_name", defaults.neutral_flag_name)),
        flag_drop_name=str(arena_raw.get("flag_drop_name", defaults.flag_drop_name)),
        search_radius=float(arena_raw.get("search_radius", defaults.search_radius)),
        item_metadata_slot=int(arena_raw.get("item_metadata_slot", defaults.item_metadata_slot)),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_environment(
    config_root: Optional[Path] = None,
    profile: Optional[str] = None,
) -> EnvProfile:
    """Main entry point: returns a fully resolved EnvProfile."""
    root = config_root or CONFIG_ROOT

    env_cfg = _load_yaml(root, "env.yaml")
    arenas_cfg = _load_yaml(root, "arenas.yaml")

    active_profile_name, active_profile = _select_profile(
        env_cfg, profile or os.getenv(PROFILE_ENV_VAR)
    )

    arena_name = active_profile.get("arena")
    if not arena_name:
        raise ValueError(f"Profile '{active_profile_name}' must name an 'arena'.")
    arenas = arenas_cfg.get("arenas") or {}
    if arena_name not in arenas:
        raise KeyError(f"Arena '{arena_name}' not found in arenas.yaml")

    constants = _build_constants(arenas[arena_name] or {})

    # perform basic validation before returning
    _validate(constants)

    return EnvProfile(
        name=active_profile_name,
        arena_name=arena_name,
        ctf=constants,
        debug=bool(active_profile.get("debug", False)),
        monitoring_log=active_profile.get("monitoring_log"),
    )


def _validate(constants: CtfConstants) -> None:
    """Minimal sanity checks for the arena constants."""
    if constants.search_radius <= 0:
        raise ValueError(f"search_radius must be positive, got {constants.search_radius}")
    if not constants.flag_drop_name:
        raise ValueError("flag_drop_name must not be empty")
    if not constants.neutral_flag_name:
        raise ValueError("neutral_flag_name must not be empty")
    if constants.item_metadata_slot < 0:
        raise ValueError(
            f"item_metadata_slot must be >= 0, got {constants.item_metadata_slot}"
        )
