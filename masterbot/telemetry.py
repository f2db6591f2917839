"""
Per-session performance log and the aggregate metrics derived from it.
"""

from collections import Counter, deque
from dataclasses import asdict, dataclass

from masterbot.constants import AVG_THINK_WINDOW, PERFORMANCE_LOG_SIZE, POWER_HISTORY_SIZE


@dataclass(frozen=True)
class PerformanceLogEntry:
    move_time_ms: float
    depth: int
    power: int
    cache_hit: bool
    lightweight: bool


@dataclass(frozen=True)
class PowerSample:
    power: int
    level: int
    timestamp_ms: int


@dataclass(frozen=True)
class PerformanceMetrics:
    avg_think_time_ms: float
    cache_hit_rate_pct: float
    lightweight_rate_pct: float
    depth_distribution: list[tuple[int, int]]
    power_history: list[PowerSample]

    def to_dict(self) -> dict:
        return asdict(self)


class PerformanceLog:
    """Ring buffer of the last moves plus a short power/level history."""

    def __init__(
        self,
        max_entries: int = PERFORMANCE_LOG_SIZE,
        max_history: int = POWER_HISTORY_SIZE,
    ) -> None:
        self.entries: deque[PerformanceLogEntry] = deque(maxlen=max_entries)
        self.power_history: deque[PowerSample] = deque(maxlen=max_history)

    def __len__(self) -> int:
        return len(self.entries)

    def append(self, entry: PerformanceLogEntry) -> None:
        self.entries.append(entry)

    def record_power(self, power: int, level: int, timestamp_ms: int) -> None:
        """Remember a power setting, skipping repeats of the previous one."""
        if self.power_history and self.power_history[-1].power == power:
            return
        self.power_history.append(PowerSample(power, level, timestamp_ms))

    def clear(self) -> None:
        self.entries.clear()
        self.power_history.clear()

    def metrics(self) -> PerformanceMetrics:
        entries = list(self.entries)
        if not entries:
            return PerformanceMetrics(0.0, 0.0, 0.0, [], list(self.power_history))

        window = entries[-AVG_THINK_WINDOW:]
        avg_think = sum(e.move_time_ms for e in window) / len(window)
        cache_hits = sum(1 for e in entries if e.cache_hit)
        lightweight = sum(1 for e in entries if e.lightweight)
        # Cache hits never searched, so they carry no depth information.
        depths = Counter(e.depth for e in entries if not e.cache_hit)

        return PerformanceMetrics(
            avg_think_time_ms=avg_think,
            cache_hit_rate_pct=cache_hits / len(entries) * 100,
            lightweight_rate_pct=lightweight / len(entries) * 100,
            depth_distribution=sorted(depths.items()),
            power_history=list(self.power_history),
        )
