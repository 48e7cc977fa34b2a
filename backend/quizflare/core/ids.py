import string
import time
import uuid
from random import SystemRandom

_random = SystemRandom()
_ALPHABET = string.ascii_lowercase + string.digits


def now_ms() -> int:
    return int(time.time() * 1000)


def new_id(prefix: str) -> str:
    return f"{prefix}_{now_ms()}_{uuid.uuid4().hex[:8]}"


def new_creator_id() -> str:
    suffix = "".join(_random.choice(_ALPHABET) for _ in range(7))
    return f"guest_{now_ms()}_{suffix}"
