from __future__ import annotations
from enum import Enum


class AlphaOption(str, Enum):
    """
    How the alpha channel takes part in a pixel comparison.

    • IGNORE       – alpha plays no role
    • IGNORE_FIRST – `a` is treated as opaque, `b`'s RGB is premultiplied by b's alpha
    • COMPARE      – RGB compared unweighted, then |αa - αb| is added
    • MULTIPLY     – both RGBs premultiplied by their own alpha before differencing
    """
    IGNORE = "ignore"
    IGNORE_FIRST = "ignore_first"
    COMPARE = "compare"
    SUBTRACT = "compare"  # alias of COMPARE
    MULTIPLY = "multiply"

    @classmethod
    def _missing_(cls, value):
        # accept "ignoreFirst" / "IGNORE-FIRST" style spellings
        if isinstance(value, str):
            key = value.replace("-", "_").lower()
            if key == "ignorefirst":
                key = "ignore_first"
            if key == "subtract":
                key = "compare"
            for member in cls:
                if member.value == key:
                    return member
        return None


class EdgePolicy(str, Enum):
    """
    Convolution behaviour for pixels whose kernel window leaves the image.

    • PRESERVE – copy the source RGB unchanged (borders are not darkened)
    • TRUNCATE – skip the missing cells and sum what is left
    """
    PRESERVE = "preserve"
    TRUNCATE = "truncate"
