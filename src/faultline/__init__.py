"""
faultline - fault barriers for Python.

Run a unit of work, absorb whatever it raises, and get the failure back as an
ordinary value. Extends to concurrent fan-out over threads or asyncio with a
strict join and no dropped faults.

- faultline.core: fault types, guards, Result envelope, logging, settings
- faultline.execution: run_catching, catching, muted, run_catching_async,
  run_all_catching and their asyncio counterparts
"""

__version__ = "0.1.0"

from faultline.core import *  # noqa
from faultline.execution import *  # noqa
