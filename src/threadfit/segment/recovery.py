"""
Recovery parsing of generator output into an ordered list of units.

Generators are asked for a JSON array of strings but frequently return
something near it: the array wrapped in a markdown fence, surrounded by
prose, or broken by quote characters that were never escaped. Recovery runs
an ordered chain of strategies; the first one that succeeds wins, and when
all of them fail the raw text is kept whole as a single unit.
"""

from __future__ import annotations

import json
import re
from typing import Callable, List, NamedTuple, Tuple

from ..core.errors import RecoveryFailure
from ..core.logging import log

FALLBACK = "fallback"

_FENCE_OPEN = re.compile(r"^```(?:json)?\s*", re.IGNORECASE)
_FENCE_CLOSE = re.compile(r"```\s*$")
# Item separator inside a broken array: '", "', or a comma ending the line
# when the array is pretty-printed. A bare '","' is element content.
_ITEM_SEPARATOR = re.compile(r'",(?: |[ \t]*\r?\n\s*)"')


class ParseOutcome(NamedTuple):
    """Result of running the recovery chain.

    ``ok`` is False only for the fallback, in which case ``units`` holds the
    raw text verbatim as its single element.
    """

    ok: bool
    units: List[str]
    strategy: str


def _clean_units(items: List[str], strategy: str) -> List[str]:
    units = [item.strip() for item in items]
    units = [u for u in units if u]
    if not units:
        raise RecoveryFailure(strategy, "no non-empty elements")
    return units


def _strip_fences(text: str) -> str:
    cleaned = _FENCE_OPEN.sub("", text.strip())
    return _FENCE_CLOSE.sub("", cleaned).strip()


def _decodes(text: str) -> bool:
    try:
        json.loads(text)
    except (ValueError, RecursionError):
        return False
    return True


def strict_decode(text: str) -> List[str]:
    """Decode ``text`` as a JSON array whose every element is a string."""
    try:
        parsed = json.loads(text.strip())
    except (ValueError, RecursionError) as e:
        raise RecoveryFailure("strict", str(e)) from e

    if not isinstance(parsed, list):
        raise RecoveryFailure("strict", f"expected array, got {type(parsed).__name__}")
    if not all(isinstance(item, str) for item in parsed):
        raise RecoveryFailure("strict", "array contains non-string elements")

    return _clean_units(parsed, "strict")


def extract_embedded(text: str) -> List[str]:
    """Strip markdown fences, find the array inside surrounding prose, decode it."""
    cleaned = _strip_fences(text)
    # Outermost brackets: first "[" to last "]"
    start = cleaned.find("[")
    end = cleaned.rfind("]")
    if start == -1 or end < start:
        raise RecoveryFailure("extracted", "no bracket-delimited array found")
    try:
        return strict_decode(cleaned[start : end + 1])
    except RecoveryFailure as e:
        raise RecoveryFailure("extracted", e.detail) from e


def heuristic_recover(text: str) -> List[str]:
    """Split a bracket-delimited array that JSON cannot decode.

    The usual cause is content with unescaped double quotes, so the interior
    is cut on the item separator rather than tokenised. Escaped quotes that
    do appear are un-escaped once.
    """
    content = _strip_fences(text)
    if not (content.startswith("[") and content.endswith("]")):
        raise RecoveryFailure("heuristic", "text is not bracket-delimited")
    if _decodes(content):
        raise RecoveryFailure("heuristic", "valid JSON that is not a string array")

    content = content[1:-1].strip()
    if not (content.startswith('"') and content.endswith('"')):
        raise RecoveryFailure("heuristic", "interior is not quoted")

    parts = _ITEM_SEPARATOR.split(content)

    items = []
    last = len(parts) - 1
    for i, part in enumerate(parts):
        if i == 0 and part.startswith('"'):
            part = part[1:]
        if i == last and part.endswith('"'):
            part = part[:-1]
        items.append(part.replace('\\"', '"'))

    return _clean_units(items, "heuristic")


Strategy = Callable[[str], List[str]]

RECOVERY_STRATEGIES: Tuple[Tuple[str, Strategy], ...] = (
    ("strict", strict_decode),
    ("extracted", extract_embedded),
    ("heuristic", heuristic_recover),
)


def parse_units(raw_text: str) -> ParseOutcome:
    """Run the recovery chain over ``raw_text``.

    Never raises for string input; the worst case is the fallback outcome,
    which keeps the whole text as one unit.
    """
    if not isinstance(raw_text, str):
        raise TypeError(f"raw_text must be str, got {type(raw_text).__name__}")

    for name, strategy in RECOVERY_STRATEGIES:
        try:
            units = strategy(raw_text)
        except RecoveryFailure as e:
            log.debug("segment.parse.strategy_failed", strategy=name, detail=e.detail)
            continue
        log.debug("segment.parse", strategy=name, units=len(units))
        return ParseOutcome(True, units, name)

    log.debug("segment.parse", strategy=FALLBACK, units=1)
    return ParseOutcome(False, [raw_text], FALLBACK)
