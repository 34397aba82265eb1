"""Turn free-text cooking instructions into numbered steps."""

import re

# Bullet glyphs some recipes use as step markers
STEP_MARKERS = ("▢", "□", "▪", "•")

# Control characters other than newline and tab
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")


def format_instructions(text: str | None) -> str:
    """
    Format instructions as numbered steps, one per line.

    Args:
        text: Raw instructions as returned by the API (may be None)

    Returns:
        Text like "1) Preheat oven.\\n2) Mix." or "" when there is nothing to show
    """
    if not text:
        return ""

    out = text.replace("\r\n", "\n").replace("\r", "\n")
    out = _CONTROL_CHARS.sub("", out)
    for marker in STEP_MARKERS:
        out = out.replace(marker, "")

    steps = [part.strip() for part in out.split("\n")]
    return "\n".join(f"{i}) {step}" for i, step in enumerate((s for s in steps if s), 1))
