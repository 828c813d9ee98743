from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Optional, Set

from ssbgp.core.route import Route
from ssbgp.core.types import NodeId

# (looped route, selected route, alternative route) -> the loop is worth suppressing
RecurrencePredicate = Callable[[Route, Route, Route], bool]


class LoopResponse(str, Enum):
    """What a node does when a route arrives with its own id in the AS-PATH."""

    PLAIN = "plain"
    WEAK = "weak"
    STRONG = "strong"


def same_class_as_selected(looped: Route, selected: Route, alternative: Route) -> bool:
    return looped.local_preference == selected.local_preference


def preference_gain(looped: Route, selected: Route, alternative: Route) -> bool:
    return alternative.valid and looped.local_preference > alternative.local_preference


def at_least_as_preferred(looped: Route, selected: Route, alternative: Route) -> bool:
    return alternative.valid and looped.local_preference >= alternative.local_preference


_PREDICATES: Dict[str, RecurrencePredicate] = {
    "same_class_as_selected": same_class_as_selected,
    "preference_gain": preference_gain,
    "at_least_as_preferred": at_least_as_preferred,
}

DEFAULT_PREDICATE = "same_class_as_selected"


def load_predicate(name: str) -> RecurrencePredicate:
    try:
        return _PREDICATES[name]
    except KeyError:
        raise KeyError(f"Unknown recurrence predicate {name!r}, expected one of {sorted(_PREDICATES)}") from None


@dataclass(frozen=True)
class LoopRecord:
    count: int
    last_route: Route


class LoopHistory:
    """Per-sender record of detected loops, kept until reset."""

    def __init__(self) -> None:
        self._records: Dict[NodeId, LoopRecord] = {}

    def record(self, sender: NodeId, route: Route) -> LoopRecord:
        previous = self._records.get(sender)
        count = 1 if previous is None else previous.count + 1
        rec = LoopRecord(count=count, last_route=route)
        self._records[sender] = rec
        return rec

    def get(self, sender: NodeId) -> LoopRecord | None:
        return self._records.get(sender)

    def clear(self) -> None:
        self._records.clear()

    def __len__(self) -> int:
        return len(self._records)


def is_recurrent(
    response: LoopResponse,
    node: NodeId,
    route: Route,
    selected: Route,
    alternative: Route,
    predicate: RecurrencePredicate,
    previous: Optional[LoopRecord] = None,
) -> bool:
    """Decide whether a loop through ``node`` will keep coming back.

    ``selected`` is the route the node used when the loop arrived,
    ``alternative`` the best one it has without the sender, and ``previous``
    the last loop seen from the same sender. WEAK only asks the predicate.
    STRONG also needs evidence that the loop is the node's own route coming
    back: either the looped AS-PATH up to ``node`` is the path the node is
    advertising, or the sender already looped this exact AS-PATH before.
    """
    if response is LoopResponse.PLAIN:
        return False
    if not (route.valid and selected.valid):
        return False
    if not predicate(route, selected, alternative):
        return False
    if response is LoopResponse.WEAK:
        return True
    if response is LoopResponse.STRONG:
        if route.as_path.sub_path_before(node) == selected.as_path:
            return True
        return previous is not None and previous.last_route.as_path == route.as_path
    return False


def on_loop_detected(
    response: LoopResponse,
    node: NodeId,
    sender: NodeId,
    route: Route,
    selected: Route,
    alternative: Route,
    history: LoopHistory,
    disabled: Set[NodeId],
    predicate: RecurrencePredicate,
) -> Optional[LoopRecord]:
    """Record the loop and disable ``sender`` if it is judged recurrent.

    Only the calling node's own history and disabled set are touched.
    Returns the sender's loop record if this call disabled it.
    """
    if response is LoopResponse.PLAIN:
        return None
    previous = history.get(sender)
    rec = history.record(sender, route)
    if sender in disabled:
        return None
    if not is_recurrent(response, node, route, selected, alternative, predicate, previous):
        return None
    disabled.add(sender)
    return rec
