# plugins/core_build/models.py
import re
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from backend.core.errors import ValidationError

SUPPORTED_NETWORKS = (
    "google",
    "meta",
    "mintegral",
    "tiktok",
    "ironsource",
    "vungle",
    "unityads",
    "applovin",
    "adcolony",
    "kayzen",
)
# networks that take the zipped multi-file bundle instead of a single inlined HTML
SPLIT_NETWORKS = frozenset({"meta"})

BUILDS_ROOT = "temp/playable-ad-builds"
NETWORK_CONFIG_KEY = "adNetworkType"

_BUILD_NAME = re.compile(r"^[A-Za-z0-9_-]+$")


class BuildType(str, Enum):
    SPLIT = "split"
    INLINE = "inline"


class BuildPlan(BaseModel):
    network: str
    build_type: BuildType
    config_path: str
    out_dir: str


def plan_for(network: str) -> BuildPlan:
    if network not in SUPPORTED_NETWORKS:
        raise ValidationError(
            f"Unsupported ad network '{network}'. Supported: {', '.join(SUPPORTED_NETWORKS)}."
        )
    if network in SPLIT_NETWORKS:
        return BuildPlan(
            network=network,
            build_type=BuildType.SPLIT,
            config_path="vite/config-zip.prod.mjs",
            out_dir="dist-split",
        )
    return BuildPlan(
        network=network,
        build_type=BuildType.INLINE,
        config_path="vite/config-inline.prod.mjs",
        out_dir="dist-inline",
    )


def validate_build_name(name: str) -> str:
    if not name:
        raise ValidationError("Build name is required")
    if not _BUILD_NAME.match(name):
        raise ValidationError("Only letters, numbers, hyphens and underscores allowed")
    return name


class BuildRequest(BaseModel):
    networks: List[str] = Field(..., description="Ad networks to build, in order.")
    build_name: str = Field(..., description="Folder name under temp/playable-ad-builds.")
    overwrite: bool = Field(default=False, description="Replace an existing build folder of the same name.")


class NetworkStatus(str, Enum):
    COMPLETE = "complete"
    ERROR = "error"


class NetworkResult(BaseModel):
    network: str
    status: NetworkStatus
    output: Optional[str] = None
    error: Optional[str] = None


class BuildReport(BaseModel):
    build_name: str
    results: List[NetworkResult]

    @property
    def failed(self) -> List[str]:
        return [r.network for r in self.results if r.status == NetworkStatus.ERROR]
