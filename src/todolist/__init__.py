"""
To-do list backend package.

The Task value object and its transfer codec are importable without pulling in
the web layer; the FastAPI app lives in todolist.main.
"""

from .models import Clock, Task, system_clock  # noqa: F401
from .transfer import decode_task, encode_task  # noqa: F401
