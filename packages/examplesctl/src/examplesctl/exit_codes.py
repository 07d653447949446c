from __future__ import annotations

OK = 0
ERR_CHECKS_FAILED = 1
ERR_USAGE = 2
ERR_CONFIG = 10
ERR_PREREQ = 11
ERR_DISCOVERY = 12
ERR_PARSE = 13
ERR_NORMALIZATION = 14
ERR_CONSISTENCY = 15
ERR_POLICY = 16
ERR_FORMAT = 17
ERR_BUILD = 18
ERR_INTERNAL = 99
