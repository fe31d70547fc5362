"""Access-window math over a tide-height time series.

Pure functions, no I/O and no shared state.  Empty or degenerate input yields
``None`` / ``[]``; nothing here raises.
"""
from __future__ import annotations

from typing import Iterable, List, Optional

from crag_tides.core.models import Seconds, TidePoint, TideWindow


def _sorted(points: Iterable[TidePoint]) -> List[TidePoint]:
    return sorted(points, key=lambda p: p.timestamp_s)


def interpolate_height(points: List[TidePoint], at_s: Seconds) -> Optional[float]:
    """Height at *at_s*, linearly interpolated and clamped to the series ends."""
    if not points:
        return None
    if len(points) == 1:
        return points[0].height_m

    pts = _sorted(points)
    if at_s <= pts[0].timestamp_s:
        return pts[0].height_m
    if at_s >= pts[-1].timestamp_s:
        return pts[-1].height_m

    for i in range(len(pts) - 1):
        left, right = pts[i], pts[i + 1]
        if at_s < left.timestamp_s or at_s > right.timestamp_s:
            continue
        span = right.timestamp_s - left.timestamp_s
        if span <= 0:
            return left.height_m
        ratio = (at_s - left.timestamp_s) / span
        return left.height_m + (right.height_m - left.height_m) * ratio

    return pts[-1].height_m


def compute_raw_access_windows(points: List[TidePoint], threshold_m: float) -> List[TideWindow]:
    """Intervals where the height is at or below *threshold_m*.

    Single left-to-right sweep over the sorted samples.  A window opens at the
    first sample when the series starts at/below threshold, or where a falling
    tide crosses it; it closes where a rising tide crosses it, or at the last
    sample.  Crossing instants are interpolated on the threshold.
    """
    if not points:
        return []
    if len(points) == 1:
        p = points[0]
        if p.height_m <= threshold_m:
            return [TideWindow(start_s=p.timestamp_s, end_s=p.timestamp_s)]
        return []

    pts = _sorted(points)
    windows: List[TideWindow] = []
    active_start: Optional[Seconds] = pts[0].timestamp_s if pts[0].height_m <= threshold_m else None

    for i in range(len(pts) - 1):
        left, right = pts[i], pts[i + 1]
        left_below = left.height_m <= threshold_m
        right_below = right.height_m <= threshold_m
        if left_below == right_below:
            continue

        delta_h = right.height_m - left.height_m
        if delta_h == 0:
            continue

        ratio = (threshold_m - left.height_m) / delta_h
        crossing = left.timestamp_s + ratio * (right.timestamp_s - left.timestamp_s)

        if left_below:
            # tide rising past the threshold
            if active_start is not None:
                windows.append(TideWindow(start_s=active_start, end_s=crossing))
            active_start = None
        else:
            active_start = crossing

    if active_start is not None:
        windows.append(TideWindow(start_s=active_start, end_s=pts[-1].timestamp_s))

    return [w for w in windows if w.end_s > w.start_s]


def apply_window_buffer(windows: List[TideWindow], buffer_min: int) -> List[TideWindow]:
    """Shrink each window by *buffer_min* minutes at both ends.

    A zero buffer returns *windows* itself.  Windows the margin consumes
    entirely are dropped.
    """
    buffer_s = buffer_min * 60
    if buffer_s == 0:
        return windows

    out: List[TideWindow] = []
    for w in windows:
        shrunk = TideWindow(start_s=w.start_s + buffer_s, end_s=w.end_s - buffer_s)
        if shrunk.end_s > shrunk.start_s:
            out.append(shrunk)
    return out


def pick_next_window(windows: List[TideWindow], now_s: Seconds) -> Optional[TideWindow]:
    """Earliest-starting window not yet elapsed at *now_s* (may be in progress)."""
    best: Optional[TideWindow] = None
    for w in windows:
        if w.end_s <= now_s:
            continue
        if best is None or w.start_s < best.start_s:
            best = w
    return best


def is_accessible(windows: List[TideWindow], now_s: Seconds) -> bool:
    for w in windows:
        if w.start_s <= now_s <= w.end_s:
            return True
    return False
