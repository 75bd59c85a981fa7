# backend/fitlog/progression.py
from typing import Any, Dict

XP_PER_WORKOUT = 25
XP_PER_LEVEL_BASE = 200
CHALLENGE_JOIN_XP = 10


def level_from_xp(xp: int) -> int:
    """
    Linear progression:
      - Level 1: 0-199 XP
      - Level 2: 200-399 XP
      - ...
    Negative input is floored to level 1.
    """
    if xp < 0:
        return 1
    return (xp // XP_PER_LEVEL_BASE) + 1


def xp_threshold_for_level(level: int) -> int:
    if level <= 1:
        return 0
    return (level - 1) * XP_PER_LEVEL_BASE


def progress_to_next_level(xp: int) -> Dict[str, Any]:
    current_level = level_from_xp(xp)
    xp_for_current = xp_threshold_for_level(current_level)
    xp_for_next = xp_threshold_for_level(current_level + 1)

    current_level_xp = xp - xp_for_current
    next_level_xp = xp_for_next - xp_for_current

    return {
        "current_level": current_level,
        "current_level_xp": current_level_xp,
        "next_level_xp": next_level_xp,
        "progress_percentage": 100 * current_level_xp / next_level_xp,
    }
