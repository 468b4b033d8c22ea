"""Timestamp injection for stored documents."""
import time
from typing import Optional


def now() -> int:
    """Current epoch time in whole seconds."""
    return int(time.time())


def inject_timestamp(conf: dict, prev_conf: Optional[dict] = None) -> dict:
    """
    Stamp ``create_time`` and ``update_time`` on a candidate document.

    ``create_time`` is carried over from ``prev_conf`` (the stored version of
    the resource) and set to now when there is none. ``update_time`` is
    always now. Timestamps sent by the caller never survive.
    """
    created = prev_conf.get("create_time") if prev_conf else None

    current = now()
    conf["create_time"] = created if created is not None else current
    conf["update_time"] = current
    return conf
