# plugins/core_assets/resolver.py
from typing import Dict, Iterable, List

from .models import AssetFile, AssetRecord, ImportBinding, ModuleFile
from .naming import derived_export_identifier, derived_module_path


def resolve_assets(
    assets: Iterable[AssetFile],
    modules: Iterable[ModuleFile],
    bindings: Iterable[ImportBinding],
) -> List[AssetRecord]:
    """
    Joins originals, generated modules and import bindings into records.
    Pure: recomputed from scratch on every call.
    """
    module_paths = {module.relative_path for module in modules}

    used_by_identifier: Dict[str, bool] = {}
    for binding in bindings:
        used_by_identifier[binding.export_identifier] = (
            used_by_identifier.get(binding.export_identifier, False) or binding.used
        )

    records = []
    for asset in assets:
        module_path = derived_module_path(asset.relative_path)
        export_identifier = derived_export_identifier(asset.name)
        records.append(AssetRecord(
            name=asset.name,
            relative_path=asset.relative_path,
            category=asset.category,
            handle=asset.handle,
            expected_module_path=module_path,
            expected_export_identifier=export_identifier,
            has_base64=module_path in module_paths,
            in_use=used_by_identifier.get(export_identifier, False),
        ))
    return records
