from sandfleet.db.base import Base  # noqa: F401

from . import user       # noqa: F401
from . import vehicle    # noqa: F401
from . import incident   # noqa: F401
from . import telemetry  # noqa: F401
