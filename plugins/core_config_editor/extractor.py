# plugins/core_config_editor/extractor.py
import logging
import re
from dataclasses import dataclass
from typing import Any

from backend.core.errors import ParseError
from backend.core.jstext import blank_comments, matching_bracket
from .literal import format_literal, parse_literal

logger = logging.getLogger(__name__)

_EXPORT_HEAD = re.compile(
    r"(?<![\w$.])export\s+(const|let|var|default)\s+([A-Za-z_$][\w$]*)\s*=\s*(?=\{)"
)


@dataclass(frozen=True)
class ExtractedConfig:
    """The config statement cut out of its module. prefix + statement + suffix == source."""
    value: Any
    prefix: str
    suffix: str
    export_kind: str
    export_identifier: str


def _statement_end(code: str, open_brace: int) -> int:
    """Index just past the ';' closing the literal at open_brace, or -1."""
    close = matching_bracket(code, open_brace)
    if close is None:
        return -1
    i = close + 1
    while i < len(code) and code[i].isspace():
        i += 1
    if i < len(code) and code[i] == ";":
        return i + 1
    return -1


def extract_config(source: str) -> ExtractedConfig:
    """
    Finds the first ``export (const|let|var|default) NAME = {...};`` whose
    braces balance and parses its object literal. Offsets come from a copy
    with comments blanked out, so braces inside comments never count.
    """
    code = blank_comments(source)
    for match in _EXPORT_HEAD.finditer(code):
        open_brace = match.end()
        end = _statement_end(code, open_brace)
        if end < 0:
            logger.debug(f"Skipping unterminated export at offset {match.start()}.")
            continue

        literal_end = code.rindex("}", open_brace, end) + 1
        try:
            value = parse_literal(source[open_brace:literal_end])
        except ParseError as e:
            # report offsets relative to the whole file
            raise ParseError(e.reason, open_brace + max(e.position, 0)) from e

        return ExtractedConfig(
            value=value,
            prefix=source[:match.start()],
            suffix=source[end:],
            export_kind=match.group(1),
            export_identifier=match.group(2),
        )
    raise ParseError("No valid config export found in file")


def render_config(prefix: str, export_identifier: str, value: Any, suffix: str) -> str:
    """The statement is always written back as ``export const``."""
    return f"{prefix}export const {export_identifier} = {format_literal(value)};{suffix}"
