"""Tests for snapshot export and import."""

import json

import pytest

from tech_rate_calculator.defaults import default_configuration
from tech_rate_calculator.engine import RateCalculator
from tech_rate_calculator.models import Configuration
from tech_rate_calculator.snapshot import (
    SNAPSHOT_VERSION,
    SnapshotImportError,
    export_snapshot,
    import_snapshot,
    load_snapshot,
    normalize_categories,
    save_snapshot,
)


@pytest.fixture
def legacy_document():
    """A document saved by the 1.0 browser calculator."""
    return {
        "version": "1.0",
        "numEmployees": 2,
        "utilizationRate": 70,
        "workDays": 250,
        "location": "IL",
        "targetRate": 300,
        "coreHourly": {
            "wage": {"value": 35, "freq": "hourly", "unit": "currency"},
            "insurance": {"value": 3, "freq": "hourly", "unit": "currency"},
        },
        "benefitsList": {
            "general": [
                {"id": 1, "name": "Health Reimbursement", "value": 1000, "freq": "monthly", "unit": "currency"},
                {"id": 2, "name": "Paid Lunch", "value": 1, "freq": "daily", "unit": "hours"},
            ]
        },
        "variableOverhead": {
            "trucks": [{"id": 1, "name": "Lease Payment", "value": 3000, "freq": "yearly", "unit": "currency"}],
            "tools": [{"id": 1, "name": "New Setup", "value": 2000, "freq": "yearly"}],
        },
        "gasParams": {"isOpen": False, "milesPerDay": 60, "mpg": 15, "gasPrice": 3.5, "annualCost": 3500},
        "fixedOverhead": {
            "software": [{"id": 1, "name": "Dispatch", "value": 300, "freq": "monthly", "unit": "currency"}],
        },
    }


class TestExport:
    """Test snapshot serialization."""

    def test_version_and_camel_case(self):
        """Exports carry a version tag and camelCase keys."""
        data = export_snapshot(default_configuration())
        assert data["version"] == SNAPSHOT_VERSION
        assert "technicianCount" in data
        assert "variableOverheadCategories" in data
        assert "milesPerWorkingDay" in data["fuelModel"]
        assert "technician_count" not in data

    def test_json_serializable(self):
        """The document survives json.dumps."""
        json.dumps(export_snapshot(default_configuration()))

    def test_round_trip(self):
        """Exporting then importing reproduces the configuration."""
        config = default_configuration()
        restored = import_snapshot(Configuration(), export_snapshot(config))
        assert restored.model_dump() == config.model_dump()

        calculator = RateCalculator()
        original = calculator.calculate(config)
        again = calculator.calculate(restored)
        assert again.pricing == original.pricing
        assert again.costs == original.costs

    def test_save_and_load(self, tmp_path):
        """Files written by save_snapshot load back."""
        path = tmp_path / "nested" / "snapshot.json"
        config = default_configuration()
        save_snapshot(config, path)
        assert path.exists()
        assert load_snapshot(path).model_dump() == config.model_dump()


class TestImport:
    """Test merging documents into a configuration."""

    def test_partial_import(self):
        """Only fields present in the document change."""
        current = default_configuration()
        updated = import_snapshot(current, {"utilizationRate": 80})
        assert updated.utilization_rate == 80
        expected = current.model_dump()
        expected["utilization_rate"] = 80
        assert updated.model_dump() == expected
        assert current.utilization_rate == 65

    def test_null_fields_ignored(self):
        """Null values do not overwrite current settings."""
        updated = import_snapshot(default_configuration(), {"targetBillingRate": None})
        assert updated.target_billing_rate == 340

    def test_unknown_fields_ignored(self):
        """Unrecognized top-level keys are dropped."""
        updated = import_snapshot(Configuration(), {"theme": "dark", "technicianCount": 3})
        assert updated.technician_count == 3

    def test_malformed_numbers_coerced(self):
        """Non-numeric values become defaults instead of failing."""
        updated = import_snapshot(Configuration(), {"technicianCount": "abc", "targetBillingRate": "x"})
        assert updated.technician_count == 1
        assert updated.target_billing_rate == 0.0

    def test_unknown_recurrence_contributes_zero(self):
        """Items with an unknown recurrence load but cost nothing."""
        document = {
            "variableOverheadCategories": [
                {"id": "tools", "name": "Tools",
                 "items": [{"id": 1, "name": "Drill", "value": 500, "recurrence": "weekly"}]}
            ]
        }
        config = import_snapshot(Configuration(), document)
        result = RateCalculator().calculate(config, include_scenarios=False)
        assert result.costs.variable_category_totals[0].annual_total == 0.0

    def test_keyed_map_collections(self):
        """Keyed maps become ordered categories named after their keys."""
        document = {"variableOverheadCategories": {"trucks": [], "tools": [{"id": 1, "value": 5}]}}
        config = import_snapshot(Configuration(), document)
        categories = config.variable_overhead_categories
        assert [c.id for c in categories] == ["trucks", "tools"]
        assert [c.name for c in categories] == ["Trucks", "Tools"]
        assert categories[1].items[0].value == 5


class TestLegacyImport:
    """Test 1.0 documents."""

    def test_field_names_translated(self, legacy_document):
        """Legacy names land on the current fields."""
        config = import_snapshot(Configuration(), legacy_document)
        assert config.technician_count == 2
        assert config.utilization_rate == 70
        assert config.base_calendar_working_days == 250
        assert config.jurisdiction == "IL"
        assert config.target_billing_rate == 300
        assert config.wage_config.wage.value == 35
        assert config.wage_config.insurance_contribution.value == 3

    def test_collections_normalized(self, legacy_document):
        """Benefits flatten and keyed overhead becomes a list."""
        config = import_snapshot(Configuration(), legacy_document)
        assert len(config.benefits_category.items) == 2
        assert config.benefits_category.items[0].recurrence == "monthly"
        assert config.benefits_category.items[1].unit == "hours"
        assert [c.name for c in config.variable_overhead_categories] == ["Trucks", "Tools"]
        assert config.variable_overhead_categories[1].items[0].unit == "currency"
        assert config.fixed_overhead_categories[0].id == "software"

    def test_fuel_drivers_translated(self, legacy_document):
        """Fuel drivers are read and the stored annual cost is ignored."""
        config = import_snapshot(Configuration(), legacy_document)
        assert config.fuel_model.miles_per_working_day == 60
        assert config.fuel_model.miles_per_gallon == 15
        assert config.fuel_model.price_per_gallon == 3.5
        costs = RateCalculator().calculate(config, include_scenarios=False).costs
        assert costs.annual_fuel_cost == pytest.approx(60 / 15 * 3.5 * 250)

    def test_empty_location_keeps_jurisdiction(self):
        """A blank location leaves the current jurisdiction in place."""
        current = Configuration(jurisdiction="WI")
        assert import_snapshot(current, {"version": "1.0", "location": ""}).jurisdiction == "WI"
        assert import_snapshot(current, {"jurisdiction": "   "}).jurisdiction == "WI"
        assert import_snapshot(current, {"location": "il"}).jurisdiction == "IL"

    def test_legacy_calculates(self, legacy_document):
        """A legacy document produces a full result."""
        result = RateCalculator().calculate(import_snapshot(Configuration(), legacy_document))
        assert result.pricing.break_even_rate > 0
        assert result.costs.annual_unemployment_insurance == 507.93


class TestImportErrors:
    """Test rejected documents."""

    def test_not_an_object(self):
        """Top-level arrays are rejected."""
        with pytest.raises(SnapshotImportError):
            import_snapshot(Configuration(), [1, 2, 3])

    def test_collection_wrong_shape(self):
        """A numeric collection is rejected."""
        with pytest.raises(SnapshotImportError):
            import_snapshot(Configuration(), {"fixedOverheadCategories": 5})

    def test_keyed_map_with_non_list(self):
        """Keyed maps must hold item lists."""
        with pytest.raises(SnapshotImportError):
            normalize_categories({"trucks": "lots"}, "variableOverheadCategories")

    def test_category_items_not_list(self):
        """Category records need an item list."""
        with pytest.raises(SnapshotImportError):
            import_snapshot(
                Configuration(),
                {"variableOverheadCategories": [{"id": "x", "name": "X", "items": "nope"}]},
            )

    def test_invalid_boolean(self):
        """Unparseable flags are a structural error."""
        with pytest.raises(SnapshotImportError):
            import_snapshot(Configuration(), {"paymentFeeEnabled": "maybe"})

    def test_invalid_json_file(self, tmp_path):
        """Unparseable files raise SnapshotImportError."""
        path = tmp_path / "broken.json"
        path.write_text("{not json")
        with pytest.raises(SnapshotImportError):
            load_snapshot(path)

    def test_non_utf8_file(self, tmp_path):
        """Files that are not UTF-8 text raise SnapshotImportError."""
        path = tmp_path / "latin.json"
        path.write_bytes(b'{"technicianCount": "\xff\xfe"}')
        with pytest.raises(SnapshotImportError, match="UTF-8"):
            load_snapshot(path)

    def test_missing_file(self, tmp_path):
        """Unreadable files raise SnapshotImportError."""
        with pytest.raises(SnapshotImportError):
            load_snapshot(tmp_path / "missing.json")

    def test_failed_import_leaves_current_untouched(self):
        """A rejected document changes nothing."""
        current = default_configuration()
        before = current.model_dump()
        with pytest.raises(SnapshotImportError):
            import_snapshot(current, {"utilizationRate": 10, "fixedOverheadCategories": 5})
        assert current.model_dump() == before
