from dataclasses import dataclass
from typing import Optional


# fmt: off
@dataclass(frozen=True)
class LinkOptions:
    shortcode: Optional[str] = None  # Custom shortcode; a random one is generated when None
    ttl: Optional[int] = None        # Lifetime in seconds; the entry never expires when None
# fmt: on
