"""Export and import of configuration snapshots.

A snapshot is a JSON document carrying a version tag and the top-level
configuration fields in camelCase. Import is a partial merge: fields present
in the document replace the current values, everything else is kept.

Version 1.0 documents, written by the earlier browser calculator, used
different top-level names and stored the overhead collections as a mapping
from fixed keys to item lists. Both are normalized here, once, on load.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError
from pydantic.alias_generators import to_camel

from .models import Configuration


logger = logging.getLogger(__name__)

SNAPSHOT_VERSION = "2.0"

LEGACY_FIELD_NAMES = {
    "numEmployees": "technicianCount",
    "workDays": "baseCalendarWorkingDays",
    "location": "jurisdiction",
    "targetRate": "targetBillingRate",
    "coreHourly": "wageConfig",
    "benefitsList": "benefitsCategory",
    "variableOverhead": "variableOverheadCategories",
    "gasParams": "fuelModel",
    "fixedOverhead": "fixedOverheadCategories",
}

LEGACY_FUEL_FIELDS = {
    "milesPerDay": "milesPerWorkingDay",
    "mpg": "milesPerGallon",
    "gasPrice": "pricePerGallon",
}

CATEGORY_COLLECTIONS = ("variableOverheadCategories", "fixedOverheadCategories")

# Text fields where an empty value means "not set" and keeps the current one
TEXT_FIELDS = {"jurisdiction"}


class SnapshotImportError(ValueError):
    """Raised when a snapshot cannot be applied; nothing is changed."""


def export_snapshot(config: Configuration) -> Dict[str, Any]:
    """Serialize a configuration to the snapshot document format."""
    data: Dict[str, Any] = {"version": SNAPSHOT_VERSION}
    data.update(config.model_dump(mode="json", by_alias=True))
    return data


def save_snapshot(config: Configuration, output_path: Path) -> None:
    """Write a configuration snapshot as JSON.

    Args:
        config: Configuration to export
        output_path: Destination file
    """
    output_path.parent.mkdir(parents=True, exist_ok=True)
    with open(output_path, "w", encoding="utf-8") as f:
        json.dump(export_snapshot(config), f, indent=2)
    logger.info(f"Snapshot written to {output_path}")


def normalize_categories(raw: Any, field_name: str = "categories") -> List[Dict[str, Any]]:
    """Return a category collection in its canonical list form.

    Accepts either a list of ``{id, name, items}`` records or a legacy mapping
    of ``{key: [items]}``, which becomes one category per key named after the
    capitalized key.

    Raises:
        SnapshotImportError: If the value has neither shape
    """
    if isinstance(raw, list):
        if not all(isinstance(entry, dict) for entry in raw):
            raise SnapshotImportError(f"{field_name} must be a list of category records")
        return raw

    if isinstance(raw, dict):
        categories = []
        for key, items in raw.items():
            if not isinstance(items, list):
                raise SnapshotImportError(f"{field_name}.{key} must be a list of items")
            categories.append({"id": key, "name": str(key).capitalize(), "items": items})
        logger.debug(f"Converted keyed {field_name} into {len(categories)} categories")
        return categories

    raise SnapshotImportError(f"{field_name} must be a list or a mapping, got {type(raw).__name__}")


def normalize_benefits(raw: Any) -> Dict[str, Any]:
    """Return the benefits singleton as a category record.

    Accepts a category record, a bare item list, or the legacy
    ``{"general": [items]}`` mapping (whose lists are concatenated).
    """
    if isinstance(raw, dict) and "items" in raw:
        return raw
    if isinstance(raw, list):
        return {"id": "benefits", "name": "Benefits", "items": raw}
    if isinstance(raw, dict):
        items: List[Any] = []
        for key, entries in raw.items():
            if not isinstance(entries, list):
                raise SnapshotImportError(f"benefitsCategory.{key} must be a list of items")
            items.extend(entries)
        return {"id": "benefits", "name": "Benefits", "items": items}

    raise SnapshotImportError(f"benefitsCategory has unsupported shape {type(raw).__name__}")


def _translate_legacy(data: Dict[str, Any]) -> Dict[str, Any]:
    translated = dict(data)
    for old, new in LEGACY_FIELD_NAMES.items():
        if old in translated:
            value = translated.pop(old)
            translated.setdefault(new, value)

    wage = translated.get("wageConfig")
    if isinstance(wage, dict) and "insurance" in wage and "insuranceContribution" not in wage:
        wage = dict(wage)
        wage["insuranceContribution"] = wage.pop("insurance")
        translated["wageConfig"] = wage

    fuel = translated.get("fuelModel")
    if isinstance(fuel, dict):
        fuel = dict(fuel)
        for old, new in LEGACY_FUEL_FIELDS.items():
            if old in fuel:
                value = fuel.pop(old)
                fuel.setdefault(new, value)
        translated["fuelModel"] = fuel

    return translated


def import_snapshot(current: Configuration, data: Any) -> Configuration:
    """Merge a snapshot document into a configuration.

    Args:
        current: Configuration in effect before the import
        data: Parsed snapshot document

    Returns:
        New configuration; ``current`` is never modified

    Raises:
        SnapshotImportError: If the document structure is invalid
    """
    if not isinstance(data, dict):
        raise SnapshotImportError("Snapshot must be a JSON object")

    version = data.get("version")
    document = _translate_legacy(data)

    updates: Dict[str, Any] = {}
    for name, field in Configuration.model_fields.items():
        alias = field.alias or to_camel(name)
        for key in (alias, name):
            if key in document and not _is_absent(name, document[key]):
                updates[name] = document[key]
                break

    if "benefits_category" in updates:
        updates["benefits_category"] = normalize_benefits(updates["benefits_category"])
    for alias in CATEGORY_COLLECTIONS:
        name = _field_name(alias)
        if name in updates:
            updates[name] = normalize_categories(updates[name], alias)

    merged = current.model_dump()
    merged.update(updates)
    try:
        config = Configuration.model_validate(merged)
    except ValidationError as exc:
        raise SnapshotImportError(f"Invalid snapshot: {exc}") from exc

    ignored = sorted(set(document) - set(_known_keys()) - {"version"})
    if ignored:
        logger.debug(f"Ignored unrecognized snapshot fields: {ignored}")
    logger.info(f"Imported {len(updates)} field(s) from snapshot version {version or 'unknown'}")
    return config


def load_snapshot(path: Path, current: Optional[Configuration] = None) -> Configuration:
    """Read a snapshot file and merge it into ``current`` (blank if omitted).

    Raises:
        SnapshotImportError: If the file cannot be read or parsed
    """
    logger.debug(f"Loading snapshot from {path}")
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as exc:
        raise SnapshotImportError(f"{path} is not valid JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise SnapshotImportError(f"{path} is not UTF-8 text: {exc}") from exc
    except OSError as exc:
        raise SnapshotImportError(f"Cannot read {path}: {exc}") from exc

    return import_snapshot(current or Configuration(), data)


def _field_name(alias: str) -> str:
    for name, field in Configuration.model_fields.items():
        if (field.alias or to_camel(name)) == alias:
            return name
    return alias


def _known_keys() -> List[str]:
    keys = []
    for name, field in Configuration.model_fields.items():
        keys.append(name)
        keys.append(field.alias or to_camel(name))
    return keys


def _is_absent(name: str, value: Any) -> bool:
    if value is None:
        return True
    return name in TEXT_FIELDS and isinstance(value, str) and not value.strip()
