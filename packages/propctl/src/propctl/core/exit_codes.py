from __future__ import annotations

OK = 0
ERR_EXTRACT = 1
ERR_USAGE = 2
ERR_INTERNAL = 99
