"""
Pointer device and screen metrics via pyautogui.

Used for mouse simulation and as the default viewport provider when no Qt
screen is available. pyautogui fails to import on headless systems, in which
case the fallbacks below apply.
"""
from __future__ import annotations

from typing import Optional, Tuple

try:
    import pyautogui  # type: ignore
except Exception:  # pragma: no cover
    pyautogui = None

from GazeDwell.core.types import Point

FALLBACK_SCREEN = (1920, 1080)


def screen_size() -> Tuple[int, int]:
    if pyautogui is not None:
        try:
            w, h = pyautogui.size()
            return int(w), int(h)
        except Exception:
            pass
    return FALLBACK_SCREEN


def pointer_position() -> Optional[Point]:
    """Current OS cursor position in pixels, or None if it cannot be read."""
    if pyautogui is None:
        return None
    try:
        x, y = pyautogui.position()
    except Exception:
        return None
    return Point(float(x), float(y))
