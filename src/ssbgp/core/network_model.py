from __future__ import annotations

import heapq
import random
from typing import Dict, List, Optional, Tuple

from ssbgp.core.types import Message, NodeId


class NetworkModel:
    """Pending messages ordered by delivery time.

    Messages on the same (sender, receiver) channel are delivered in the order
    they were sent, whatever the jitter.
    """

    def __init__(self, base_delay: int = 1, jitter: int = 0, seed: int = 0) -> None:
        self.base_delay = max(0, int(base_delay))
        self.jitter = max(0, int(jitter))
        self.seed = int(seed)
        self.rng = random.Random(self.seed)
        self._queue: List[Tuple[int, int, Message]] = []
        self._channel_due: Dict[Tuple[NodeId, NodeId], int] = {}
        self._seq = 0
        self.delivered_messages = 0

    def send(self, msg: Message, now: int) -> int:
        extra = self.rng.randint(0, self.jitter) if self.jitter > 0 else 0
        due = now + self.base_delay + extra
        channel = (msg.sender, msg.receiver)
        due = max(due, self._channel_due.get(channel, due))
        self._channel_due[channel] = due
        heapq.heappush(self._queue, (due, self._seq, msg))
        self._seq += 1
        return due

    def next_due(self) -> Optional[int]:
        return self._queue[0][0] if self._queue else None

    def pop(self) -> Tuple[int, Message]:
        due, _, msg = heapq.heappop(self._queue)
        self.delivered_messages += 1
        return due, msg

    def reset(self) -> None:
        self.rng = random.Random(self.seed)
        self._queue.clear()
        self._channel_due.clear()
        self._seq = 0
        self.delivered_messages = 0

    def __len__(self) -> int:
        return len(self._queue)
