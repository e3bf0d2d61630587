from __future__ import annotations

from typing import Final

MARK_NONE: Final = 0
MARK_STAR: Final = 1
MARK_PRIME: Final = 2
