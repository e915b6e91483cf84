"""Real-time notification layer for salesboard."""

from salesboard.realtime.broadcast import BroadcastHub, encode_event, jsonable
from salesboard.realtime.scheduler import CycleScheduler

__all__ = ["BroadcastHub", "CycleScheduler", "encode_event", "jsonable"]
