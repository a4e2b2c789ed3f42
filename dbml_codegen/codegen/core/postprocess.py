"""
Text normalization applied to every generated file.

The emitter produces tab-indented code with a few layout quirks; these
rewrites bring it in line with the target style guide. Each rewrite is
a named, pure string transform so it can be tested in isolation. Line
breaks are matched as \\r?\\n and written back unchanged.
"""

import re
from dataclasses import dataclass
from pathlib import Path
from typing import List, Union

from ...logging_config import get_logger

logger = get_logger(__name__)

NL = r"(\r?\n)"


@dataclass(frozen=True)
class TextRewrite:
    """A named regex substitution over the whole file content."""

    name: str
    pattern: "re.Pattern[str]"
    replacement: str

    def apply(self, text: str) -> str:
        return self.pattern.sub(self.replacement, text)


def _rewrite(name: str, pattern: str, replacement: str) -> TextRewrite:
    return TextRewrite(name, re.compile(pattern), replacement)


REWRITES: List[TextRewrite] = [
    # "{ get; set; };" -> "{ get; set; }"
    _rewrite("property_terminator", r"\{ get; set; \};+", "{ get; set; }"),
    # Blank continuation line after a statement at one tab
    _rewrite("statement_blank_line", r";" + NL + r"\t(?:\r?\n\t)+", r";\1\t"),
    # Blank continuation line after an opening brace at two tabs
    _rewrite("brace_blank_line", r"\{" + NL + r"\t\t(?:\r?\n\t\t)+", r"{\1\t\t"),
    # Separate a conditional from the statement before it
    _rewrite(
        "blank_before_if",
        r";" + NL + r"\t\t\t\tif ",
        r";\1\t\t\t\t\1\t\t\t\tif ",
    ),
    # Separate a StringBuilder append from the block before it
    _rewrite(
        "blank_before_sb",
        r"\}" + NL + r"\t\t\t\tsb ",
        r"}\1\t\t\t\t\1\t\t\t\tsb ",
    ),
    # Three-line read-only auto-property -> "{ get; }"
    _rewrite(
        "readonly_property",
        r"\r?\n\t\t\{\r?\n\t\t\tget;\r?\n\t\t\}",
        " { get; }",
    ),
    _rewrite("expand_tabs", r"\t", "    "),
]

WIDEN_ACCESS = _rewrite("widen_access", r"internal static", "public virtual")


def normalize_text(text: str, widen_access: bool = False) -> str:
    """
    Apply every rewrite once, in order.

    Args:
        text: Generated file content
        widen_access: Also turn "internal static" into "public virtual"

    Returns:
        Normalized content
    """
    for rewrite in REWRITES:
        text = rewrite.apply(text)

    if widen_access:
        text = WIDEN_ACCESS.apply(text)

    return text


def normalize_file(file_path: Union[str, Path], widen_access: bool = False):
    """
    Normalize a generated file in place.

    Args:
        file_path: File to rewrite
        widen_access: Also turn "internal static" into "public virtual"
    """
    path = Path(file_path)

    # newline="" keeps \r\n intact in both directions
    with path.open("r", encoding="utf-8", newline="") as f:
        text = f.read()

    normalized = normalize_text(text, widen_access)

    with path.open("w", encoding="utf-8", newline="") as f:
        f.write(normalized)

    logger.debug("Normalized %s (widen_access=%s)", path, widen_access)
