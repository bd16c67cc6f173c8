# plugins/core_assets/models.py

from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.json_schema import SkipJsonSchema

from plugins.core_storage.contracts import FileHandle


class AssetCategory(str, Enum):
    IMAGE = "image"
    AUDIO = "audio"
    OTHER = "other"


class AssetFile(BaseModel):
    """
    One file found by a directory scan. Produced fresh on every scan and
    never mutated; the next scan replaces it wholesale.
    """
    name: str
    relative_path: str
    category: AssetCategory
    handle: SkipJsonSchema[Optional[FileHandle]] = Field(default=None, exclude=True, repr=False)

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)


class ModuleFile(AssetFile):
    """A generated base64 module under the media root."""


class ImportBinding(BaseModel):
    export_identifier: str
    local_name: str
    # None when the identifier only shows up inside a batched audio-loader call
    module_path: Optional[str] = None
    category: AssetCategory = AssetCategory.OTHER
    used: bool = False


class AssetRecord(AssetFile):
    """
    The externally visible unit: an asset plus its derived names and the
    two consistency flags. A snapshot; replacing an asset goes through the
    Base64 pipeline and a fresh scan, never through this object.

    Two assets with the same base name and extension in different folders
    derive the same export identifier, and their module paths collide when
    the underscore-joined paths coincide. This is inherited naming
    behavior and is kept as is.
    """
    expected_module_path: str
    expected_export_identifier: str
    has_base64: bool
    in_use: bool


class ScanSummary(BaseModel):
    total: int
    in_use: int
    missing_base64: int
    by_category: Dict[AssetCategory, int]


class AssetListResponse(BaseModel):
    assets: List[AssetRecord]
    summary: ScanSummary


class ReplaceResult(BaseModel):
    module_path: str
    export_identifier: str
    mime_type: str
