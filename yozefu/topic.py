"""Metadata about topics: consumer groups, their members and their lag."""

from __future__ import annotations

import functools
from dataclasses import dataclass, field
from enum import Enum


@functools.total_ordering
class ConsumerGroupState(Enum):
    """All the states a Kafka consumer group can be in."""

    UNKNOWN = "Unknown"
    EMPTY = "Empty"
    DEAD = "Dead"
    STABLE = "Stable"
    PREPARING_REBALANCE = "PreparingRebalance"
    COMPLETING_REBALANCE = "CompletingRebalance"
    REBALANCING = "Rebalancing"
    UNKNOWN_REBALANCE = "UnknownRebalance"

    def __str__(self) -> str:
        return self.value

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, ConsumerGroupState):
            return NotImplemented
        members = list(type(self))
        return members.index(self) < members.index(other)


@dataclass(order=True)
class MemberAssignment:
    """Partitions of a topic assigned to a consumer group member."""

    topic: str = ""
    partitions: list[int] = field(default_factory=list)


@dataclass(order=True)
class ConsumerGroupMember:
    """A member of a consumer group with its offsets."""

    member: str = ""
    start_offset: int = 0
    end_offset: int = 0
    assignments: list[MemberAssignment] = field(default_factory=list)


@dataclass(order=True)
class ConsumerGroupDetail:
    """A consumer group, its members and its state."""

    name: str = ""
    members: list[ConsumerGroupMember] = field(default_factory=list)
    state: ConsumerGroupState = ConsumerGroupState.UNKNOWN

    def lag(self) -> int:
        """Total number of records the members have yet to consume."""
        return sum(m.end_offset - m.start_offset for m in self.members)


@dataclass(order=True)
class TopicDetail:
    """A topic with its partitions, replicas and consumer groups."""

    name: str = ""
    partitions: int = 0
    replicas: int = 0
    consumer_groups: list[ConsumerGroupDetail] = field(default_factory=list)
    count: int = 0