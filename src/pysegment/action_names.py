"""Event type names derived from segment ids.

Segment ids are unique within a store, so prefixing the event kind with the
segment id is enough to keep event types from different segments apart.
"""

from __future__ import annotations

from pysegment._constants import EVENT_TYPE_PREFIX


def generate(segment_id: str, kind: str) -> str:
    return f"{EVENT_TYPE_PREFIX}{segment_id}/{kind}"
