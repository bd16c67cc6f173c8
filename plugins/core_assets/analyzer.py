# plugins/core_assets/analyzer.py

"""
Import/usage analysis for the game's preload routine.

This is pattern matching over source text, not a JavaScript parser. Syntax
the patterns do not recognize (default imports, loader calls whose
arguments are expressions, aliased loader objects, ...) is simply not
counted as usage: the analyzer can report false negatives but never raises.
"""

import logging
import re
from typing import Dict, List

from backend.core.jstext import blank_comments, matching_bracket, split_top_level
from .models import AssetCategory, ImportBinding

logger = logging.getLogger(__name__)

AUDIO_LOADER_CALL = "LoadBase64Audio"
AUDIO_PATH_MARKER = "audio_"

_NAMED_IMPORT = re.compile(r"""import\s*\{\s*([^}]+)\}\s*from\s*['"]([^'"]+)['"]""")
_SPECIFIER = re.compile(r"^([A-Za-z_$][\w$]*)(?:\s+as\s+([A-Za-z_$][\w$]*))?$")
_IMAGE_LOADER = re.compile(r"\.\s*load\s*\.\s*(?:image|atlas)\s*\(")
_AUDIO_LOADER = re.compile(r"\b" + AUDIO_LOADER_CALL + r"\s*\(")
_AUDIO_ENTRY = re.compile(
    r"""\{\s*key\s*:\s*(['"])(.*?)\1\s*,\s*data\s*:\s*([A-Za-z_$][\w$]*)\s*,?\s*\}"""
)
_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")


def _infer_category(module_path: str) -> AssetCategory:
    return AssetCategory.AUDIO if AUDIO_PATH_MARKER in module_path else AssetCategory.OTHER


def _direct_bindings(code: str) -> List[ImportBinding]:
    bindings = []
    for match in _NAMED_IMPORT.finditer(code):
        module_path = match.group(2)
        for raw in match.group(1).split(","):
            specifier = _SPECIFIER.match(raw.strip())
            if not specifier:
                # trailing comma, string-named exports and similar
                continue
            exported, local = specifier.group(1), specifier.group(2) or specifier.group(1)
            bindings.append(ImportBinding(
                export_identifier=exported,
                local_name=local,
                module_path=module_path,
                category=_infer_category(module_path),
            ))
    return bindings


def _loader_arguments(code: str, pattern: re.Pattern) -> List[str]:
    """Argument text of every balanced call matched by ``pattern`` (which ends at the '(')."""
    calls = []
    for match in pattern.finditer(code):
        open_paren = match.end() - 1
        close_paren = matching_bracket(code, open_paren)
        if close_paren is not None:
            calls.append(code[open_paren + 1:close_paren])
    return calls


def analyze_source(text: str) -> List[ImportBinding]:
    """Extracts named import bindings and marks the ones a loader call consumes."""
    code = blank_comments(text)
    bindings = _direct_bindings(code)

    by_local: Dict[str, List[ImportBinding]] = {}
    for binding in bindings:
        by_local.setdefault(binding.local_name, []).append(binding)

    for args in _loader_arguments(code, _IMAGE_LOADER):
        for arg in split_top_level(args):
            if _IDENTIFIER.match(arg):
                for binding in by_local.get(arg, []):
                    binding.used = True

    for args in _loader_arguments(code, _AUDIO_LOADER):
        for entry in _AUDIO_ENTRY.finditer(args):
            identifier = entry.group(3)
            matched = by_local.get(identifier)
            if not matched:
                # loaded without a visible import: still evidence of use
                matched = [ImportBinding(export_identifier=identifier, local_name=identifier)]
                by_local[identifier] = matched
                bindings.extend(matched)
            for binding in matched:
                binding.used = True
                binding.category = AssetCategory.AUDIO

    logger.debug(
        f"Analyzed source: {len(bindings)} binding(s), "
        f"{sum(1 for b in bindings if b.used)} used."
    )
    return bindings
