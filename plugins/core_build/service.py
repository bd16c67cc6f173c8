# plugins/core_build/service.py
import logging
from typing import List, Optional
from uuid import UUID

from backend.core.errors import AdToolError, BuildTriggerError, NotFoundError, ValidationError
from plugins.core_config_editor.service import ConfigEditorService
from plugins.core_projects.models import ProjectHandles
from plugins.core_projects.service import ProjectService
from plugins.core_storage.contracts import EntryKind
from .client import BuildTriggerClient
from .models import (
    BUILDS_ROOT, NETWORK_CONFIG_KEY, BuildPlan, BuildReport, BuildRequest,
    NetworkResult, NetworkStatus, plan_for, validate_build_name,
)

logger = logging.getLogger(__name__)


class BuildService:
    def __init__(
        self,
        project_service: ProjectService,
        config_editor: ConfigEditorService,
        client: BuildTriggerClient,
    ):
        self._projects = project_service
        self._config = config_editor
        self._client = client

    @staticmethod
    def validate(request: BuildRequest) -> List[BuildPlan]:
        validate_build_name(request.build_name)
        if not request.networks:
            raise ValidationError("Please select at least one ad network")
        plans, seen = [], set()
        for network in request.networks:
            network = network.strip().lower()
            if network in seen:
                continue
            seen.add(network)
            plans.append(plan_for(network))
        return plans

    async def _check_build_name(self, project: ProjectHandles, build_name: str, overwrite: bool) -> None:
        try:
            await project.root.resolve_directory(f"{BUILDS_ROOT}/{build_name}")
        except NotFoundError:
            return
        if not overwrite:
            raise ValidationError("Build name already exists. Build again with overwrite to replace it.")
        logger.info(f"Build '{build_name}' already exists and will be overwritten.")

    async def build(self, project_id: UUID, request: BuildRequest) -> BuildReport:
        """
        Builds every requested network one after another; two bundler runs
        in the same project would fight over the config file and dist dir.
        A failing network is reported and the next one still runs.
        """
        plans = self.validate(request)
        project = await self._projects.open_registered(project_id)
        await self._check_build_name(project, request.build_name, request.overwrite)

        results = []
        for plan in plans:
            try:
                output = await self.build_network(project, plan, request.build_name)
                results.append(NetworkResult(network=plan.network, status=NetworkStatus.COMPLETE, output=output))
            except AdToolError as e:
                logger.error(f"Build failed for {plan.network}: {e.message}")
                results.append(NetworkResult(network=plan.network, status=NetworkStatus.ERROR, error=e.message))
        return BuildReport(build_name=request.build_name, results=results)

    async def build_network(self, project: ProjectHandles, plan: BuildPlan, build_name: str) -> Optional[str]:
        await self._config.rewrite(project, {NETWORK_CONFIG_KEY: plan.network})
        await self._client.trigger(plan, project_name=project.name, ad_root_path=project.root_path)
        return await self.collect_output(project, plan, build_name)

    async def collect_output(self, project: ProjectHandles, plan: BuildPlan, build_name: str) -> Optional[str]:
        """
        Copies the zip the bundler produced to ``temp/playable-ad-builds/<build>/<network>.zip``
        and removes the bundler's output directory.
        """
        try:
            out_dir = await project.root.get_directory(plan.out_dir)
        except NotFoundError as e:
            raise BuildTriggerError(f"Build for {plan.network} produced no '{plan.out_dir}' directory.") from e

        target_name = f"{plan.network}.zip"
        target_dir = await project.root.resolve_directory(f"{BUILDS_ROOT}/{build_name}", create=True)

        archives = [
            entry for entry in await out_dir.entries()
            if entry.kind == EntryKind.FILE and entry.name.endswith(".zip")
        ]
        if len(archives) > 1:
            logger.warning(
                f"'{plan.out_dir}' holds {len(archives)} archives; "
                f"the last one listed is kept as '{target_name}'."
            )
        for archive in archives:
            target = await target_dir.get_file(target_name, create=True)
            await target.write_bytes(await archive.read_bytes())

        await project.root.remove_entry(plan.out_dir, recursive=True)

        if not archives:
            logger.warning(f"Build for {plan.network} produced no .zip in '{plan.out_dir}'.")
            return None
        output = f"{BUILDS_ROOT}/{build_name}/{target_name}"
        logger.info(f"Collected {plan.network} build into '{output}'.")
        return output
