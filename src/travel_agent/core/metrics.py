"""Usage counters with a coarse response-time histogram."""

from __future__ import annotations

import math
import time
from collections import deque
from dataclasses import dataclass, field
from typing import Any

from travel_agent.log import get_logger

logger = get_logger(__name__)

# Only the most recent conversation lengths feed the average
CONVERSATION_LENGTH_WINDOW = 1000


@dataclass
class Counter:
    total: int = 0
    successful: int = 0
    failed: int = 0

    def record(self, success: bool) -> None:
        self.total += 1
        if success:
            self.successful += 1
        else:
            self.failed += 1

    def as_dict(self) -> dict[str, int]:
        return {"total": self.total, "successful": self.successful, "failed": self.failed}


@dataclass
class ToolCounter(Counter):
    avg_duration: float = 0.0

    def record_duration(self, duration: float) -> None:
        self.avg_duration += (duration - self.avg_duration) / self.total

    def as_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = super().as_dict()
        data["avg_duration"] = round(self.avg_duration, 3)
        return data


@dataclass
class ResponseTimes:
    total: float = 0.0
    count: int = 0
    min: float = math.inf
    max: float = 0.0
    buckets: dict[str, int] = field(
        default_factory=lambda: {"fast": 0, "medium": 0, "slow": 0, "very_slow": 0}
    )

    def record(self, duration: float) -> None:
        self.total += duration
        self.count += 1
        self.min = min(self.min, duration)
        self.max = max(self.max, duration)
        self.buckets[bucket_for(duration)] += 1


@dataclass
class ConversationCounter:
    total: int = 0
    active: int = 0
    lengths: deque[int] = field(default_factory=lambda: deque(maxlen=CONVERSATION_LENGTH_WINDOW))

    def average_length(self) -> float:
        if not self.lengths:
            return 0.0
        return round(sum(self.lengths) / len(self.lengths), 1)


def bucket_for(duration: float) -> str:
    """Histogram bucket for a duration in seconds."""
    if duration < 1:
        return "fast"
    if duration < 5:
        return "medium"
    if duration < 30:
        return "slow"
    return "very_slow"


def _success_rate(counter: Counter) -> str:
    if counter.total == 0:
        return "0%"
    return f"{counter.successful / counter.total * 100:.2f}%"


class MetricsCollector:
    """Process-lifetime counters. Durations are in seconds."""

    def __init__(self) -> None:
        self.reset()

    def reset(self) -> None:
        self._requests = Counter()
        self._by_endpoint: dict[str, Counter] = {}
        self._tools = Counter()
        self._by_tool: dict[str, ToolCounter] = {}
        self._response_times = ResponseTimes()
        self._conversations = ConversationCounter()
        self._started = time.monotonic()

    def record_request(self, endpoint: str, duration: float, success: bool = True) -> None:
        self._requests.record(success)
        self._by_endpoint.setdefault(endpoint, Counter()).record(success)
        self._response_times.record(duration)
        logger.debug("request_recorded", endpoint=endpoint, duration=round(duration, 3), success=success)

    def record_tool_usage(self, tool_name: str, duration: float, success: bool = True) -> None:
        self._tools.record(success)
        counter = self._by_tool.setdefault(tool_name, ToolCounter())
        counter.record(success)
        counter.record_duration(duration)
        logger.debug("tool_usage_recorded", tool=tool_name, duration=round(duration, 3), success=success)

    def record_conversation(self, message_count: int) -> None:
        """Record a finished conversation and how many messages it held."""
        self._conversations.total += 1
        self._conversations.lengths.append(message_count)

    def update_active_conversations(self, count: int) -> None:
        self._conversations.active = count

    def snapshot(self) -> dict[str, Any]:
        times = self._response_times
        uptime = time.monotonic() - self._started
        return {
            "uptime": round(uptime, 1),
            "uptime_formatted": format_uptime(uptime),
            "requests": {
                **self._requests.as_dict(),
                "by_endpoint": {k: v.as_dict() for k, v in self._by_endpoint.items()},
                "success_rate": _success_rate(self._requests),
            },
            "tools": {
                **self._tools.as_dict(),
                "by_tool": {k: v.as_dict() for k, v in self._by_tool.items()},
                "success_rate": _success_rate(self._tools),
            },
            "performance": {
                "avg_response_time": round(times.total / times.count, 3) if times.count else 0,
                "min_response_time": 0 if times.min == math.inf else round(times.min, 3),
                "max_response_time": round(times.max, 3),
                "response_time_distribution": dict(times.buckets),
            },
            "conversations": {
                "total": self._conversations.total,
                "active": self._conversations.active,
                "avg_messages_per_conversation": self._conversations.average_length(),
            },
        }


def format_uptime(seconds: float) -> str:
    seconds = int(seconds)
    minutes, secs = divmod(seconds, 60)
    hours, minutes = divmod(minutes, 60)
    days, hours = divmod(hours, 24)
    if days:
        return f"{days}d {hours}h {minutes}m"
    if hours:
        return f"{hours}h {minutes}m"
    if minutes:
        return f"{minutes}m {secs}s"
    return f"{secs}s"
