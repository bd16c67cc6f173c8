# plugins/core_build/client.py
import logging
from typing import Optional

import httpx

from backend.core.errors import BuildTriggerError
from .models import BuildPlan

logger = logging.getLogger(__name__)

DEFAULT_BUILD_ENDPOINT = "http://localhost:3001/api/build"
DEFAULT_BUILD_TIMEOUT = 300.0


class BuildTriggerClient:
    """
    Talks to the external build service, which runs the bundler inside the
    project and answers ``{success, outDir}`` or ``{error}``.
    """
    def __init__(
        self,
        endpoint: str = DEFAULT_BUILD_ENDPOINT,
        timeout: float = DEFAULT_BUILD_TIMEOUT,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        if not endpoint:
            raise ValueError("BuildTriggerClient requires an 'endpoint'.")
        self.endpoint = endpoint
        self.timeout = timeout
        self.http_client = httpx.AsyncClient(timeout=timeout, transport=transport)

    async def trigger(self, plan: BuildPlan, project_name: str, ad_root_path: str) -> Optional[str]:
        """Runs one build and returns the ``outDir`` the service reported."""
        payload = {
            "network": plan.network,
            "buildType": plan.build_type.value,
            "configPath": plan.config_path,
            "projectName": project_name,
            "adRootPath": ad_root_path,
        }
        logger.info(f"Triggering {plan.build_type.value} build for '{plan.network}' at {self.endpoint}.")

        try:
            response = await self.http_client.post(self.endpoint, json=payload)
        except httpx.TimeoutException as e:
            raise BuildTriggerError(
                f"Build for '{plan.network}' timed out after {self.timeout:g}s."
            ) from e
        except httpx.RequestError as e:
            raise BuildTriggerError(f"Build service unreachable: {e}") from e

        try:
            data = response.json()
        except ValueError:
            data = {}
        if not isinstance(data, dict):
            data = {}

        if response.is_error:
            reason = data.get("error") or f"Build request failed: {response.reason_phrase}"
            raise BuildTriggerError(f"Failed to build {plan.network}: {reason}")
        if not data.get("success"):
            raise BuildTriggerError(f"Failed to build {plan.network}: build service did not report success.")

        logger.info(f"Build for '{plan.network}' completed.")
        return data.get("outDir")

    async def aclose(self) -> None:
        await self.http_client.aclose()
