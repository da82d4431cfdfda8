"""Clock abstraction."""

from sitrep.core.time.abc import Time
from sitrep.core.time.fake import FakeTime
from sitrep.core.time.real import RealTime

__all__ = ["Time", "RealTime", "FakeTime"]
