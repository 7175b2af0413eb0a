import hashlib
import logging
from typing import Any

# Library logger
logger = logging.getLogger("dynalock")

# Applications that do not configure logging should not see
# "No handlers could be found" warnings.
logger.addHandler(logging.NullHandler())


def redact_key(key: dict[str, Any] | str | None) -> str:
    """
    Hashes key values so lock keys can be correlated in logs without being exposed.

    A dict key is redacted per attribute, a scalar key as a whole.
    """
    if key is None:
        return "<none>"
    try:
        if isinstance(key, dict):
            redacted = {}
            for name in sorted(key):
                val_str = str(key[name]).encode("utf-8")
                redacted[name] = hashlib.sha256(val_str).hexdigest()[:8]
            return str(redacted)
        return hashlib.sha256(str(key).encode("utf-8")).hexdigest()[:8]
    except Exception:
        return "<redaction_failed>"
