from .clock import LogicalClock
from .event_logger import EventLogger
