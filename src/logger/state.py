from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional

INITIALIZED: bool = False
LOG_DIR: Optional[Path] = None
PREFIX: Optional[str] = None
HANDLERS: List[logging.Handler] = []
