from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

import requests

if TYPE_CHECKING:
    from .config import Settings
    from .reporter import Reporter


@dataclass
class RuntimeContext:
    """Runtime context containing all shared dependencies.

    Credentials travel inside ``settings`` instead of module globals, so the
    clients can be driven with fake sessions and mock credentials.
    """

    settings: Settings
    reporter: Reporter
    session: requests.Session = field(default_factory=requests.Session)
