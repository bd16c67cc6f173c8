# plugins/core_assets/naming.py

"""
Derived names shared with the game's existing generated modules.

Both functions are pure and must stay byte-for-byte compatible with files
already on disk: a module for ``public/assets/ui/button.png`` lives at
``media/ui_button.png.js`` and exports ``buttonPNG``. Directory structure is
flattened, so equal base names in different folders share an identifier.
"""

import re

ASSET_ROOT_PREFIX = "public/assets/"
MODULE_SUFFIX = ".js"
PATH_JOINER = "_"

_SEPARATORS = re.compile(r"[\\/]")
_SEGMENT_BREAK = re.compile(r"[-_\s]+(.)?")
_NON_WORD = re.compile(r"\W", re.ASCII)


def derived_module_path(asset_relative_path: str) -> str:
    path = asset_relative_path
    if path.replace("\\", "/").startswith(ASSET_ROOT_PREFIX):
        path = path[len(ASSET_ROOT_PREFIX):]
    return _SEPARATORS.sub(PATH_JOINER, path) + MODULE_SUFFIX


def derived_export_identifier(file_name: str) -> str:
    base = file_name.split(".")[0]
    camel = _SEGMENT_BREAK.sub(lambda m: m.group(1).upper() if m.group(1) else "", base)
    camel = _NON_WORD.sub("", camel)
    return camel + file_name.split(".")[-1].upper()
