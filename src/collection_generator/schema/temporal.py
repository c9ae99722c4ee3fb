"""Rendering of date / datetime / localdatetime samples.

Samples are parsed and re-rendered in the canonical format for their kind, so
the output always matches the advertised format. A sample that cannot be
parsed, or a missing one, falls back to the clock.
"""

import logging
from collections.abc import Callable
from datetime import date, datetime, time

from dateutil import parser as date_parser

from collection_generator.schema.nodes import TemporalNode

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]

DATE_FORMAT = "%Y-%m-%d"
LOCAL_DATETIME_FORMAT = "%Y-%m-%dT%H:%M:%S"


def system_clock() -> datetime:
    """Current instant with the local UTC offset attached."""
    return datetime.now().astimezone()


def _parse_sample(sample) -> datetime | None:
    if isinstance(sample, datetime):
        return sample
    if isinstance(sample, date):
        return datetime.combine(sample, time())
    if not isinstance(sample, str):
        return None
    try:
        return date_parser.isoparse(sample)
    except (ValueError, OverflowError):
        pass
    try:
        return date_parser.parse(sample)
    except (ValueError, OverflowError):
        return None


def resolve_temporal(node: TemporalNode, clock: Clock | None = None) -> str:
    """Render ``node`` in the canonical format for its kind."""
    clock = clock or system_clock
    instant = None
    if node.sample is not None:
        instant = _parse_sample(node.sample)
        if instant is None:
            logger.warning("Unparseable %s sample %r, using current time", node.kind, node.sample)
    if instant is None:
        instant = clock()

    if node.kind == "date":
        return instant.strftime(DATE_FORMAT)
    if node.kind == "localdatetime":
        return instant.strftime(LOCAL_DATETIME_FORMAT)
    if instant.tzinfo is None:
        instant = instant.astimezone()
    return instant.isoformat(timespec="seconds")
