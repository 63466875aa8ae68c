"""Tests for item definition lookup."""

import json
from pathlib import Path
from tempfile import TemporaryDirectory
from unittest.mock import AsyncMock, Mock, patch

import httpx
import pytest

from vault_curator.adapters.definitions import ManifestDefinitions, enrich_names
from vault_curator.core import WeaponItem

DEFINITIONS = {
    "1216319404": {
        "displayProperties": {"name": "Fatebringer"},
        "inventory": {"tierTypeName": "Legendary"},
        "itemTypeDisplayName": "Hand Cannon",
        "classType": 3,
    },
    "3580904581": {
        "displayProperties": {"name": "Iron Helm"},
        "inventory": {"tierTypeName": "Legendary"},
        "itemTypeDisplayName": "Helmet",
        "classType": 0,
    },
}


def test_lookups() -> None:
    """Test name, tier, type and class lookups."""
    definitions = ManifestDefinitions({int(k): v for k, v in DEFINITIONS.items()})

    assert definitions.loaded
    assert definitions.get_item_name(1216319404) == "Fatebringer"
    assert definitions.get_tier_name(1216319404) == "Legendary"
    assert definitions.get_item_type_name(3580904581) == "Helmet"
    assert definitions.get_class_type(3580904581) == 0
    # Usable by any class
    assert definitions.get_class_type(1216319404) is None
    assert definitions.get_item_name(42) is None


def test_from_file() -> None:
    """Test loading definitions from a JSON file keyed by hash strings."""
    with TemporaryDirectory() as tmpdir:
        path = Path(tmpdir) / "definitions.json"
        path.write_text(json.dumps(DEFINITIONS), encoding="utf-8")

        definitions = ManifestDefinitions.from_file(path)

    assert definitions.get_item_name(3580904581) == "Iron Helm"


def test_from_file_errors_return_empty_lookup() -> None:
    """Test that unreadable or malformed files leave an empty lookup."""
    with TemporaryDirectory() as tmpdir:
        missing = ManifestDefinitions.from_file(Path(tmpdir) / "missing.json")

        broken = Path(tmpdir) / "broken.json"
        broken.write_text("{not json", encoding="utf-8")
        invalid_json = ManifestDefinitions.from_file(broken)

        bad_keys = Path(tmpdir) / "bad_keys.json"
        bad_keys.write_text(json.dumps({"abc": {}}), encoding="utf-8")
        non_numeric = ManifestDefinitions.from_file(bad_keys)

    assert not missing.loaded
    assert not invalid_json.loaded
    assert not non_numeric.loaded


def test_enrich_names_returns_new_items() -> None:
    """Test enrichment replaces names without mutating the input."""
    definitions = ManifestDefinitions({int(k): v for k, v in DEFINITIONS.items()})
    known = WeaponItem(instance_id="1", item_hash=1216319404)
    unknown = WeaponItem(instance_id="2", item_hash=42)

    enriched = enrich_names([known, unknown], definitions)

    assert enriched[0].name == "Fatebringer"
    assert enriched[0].instance_id == "1"
    assert known.name == "Unknown Item (1216319404)"
    assert enriched[1] is unknown


@pytest.mark.asyncio
async def test_from_url_success() -> None:
    """Test downloading definitions from a relative content path."""
    with patch("httpx.AsyncClient") as mock_client:
        mock_response = Mock()
        mock_response.raise_for_status = Mock()
        mock_response.json = Mock(return_value=DEFINITIONS)

        mock_get = AsyncMock(return_value=mock_response)
        mock_client.return_value.__aenter__.return_value.get = mock_get

        definitions = await ManifestDefinitions.from_url(
            "/common/destiny2_content/json/en/items.json", api_key="secret"
        )

        call_args = mock_get.call_args
        assert call_args.args[0] == "https://www.bungie.net/common/destiny2_content/json/en/items.json"
        assert call_args.kwargs["headers"] == {"X-API-Key": "secret"}

    assert definitions.get_item_name(1216319404) == "Fatebringer"


@pytest.mark.asyncio
async def test_from_url_error_returns_empty_lookup() -> None:
    """Test that download errors leave an empty lookup."""
    with patch("httpx.AsyncClient") as mock_client:
        mock_response = Mock()
        mock_response.raise_for_status = Mock(side_effect=httpx.HTTPError("API Error"))

        mock_get = AsyncMock(return_value=mock_response)
        mock_client.return_value.__aenter__.return_value.get = mock_get

        definitions = await ManifestDefinitions.from_url("https://example.com/items.json")

    assert not definitions.loaded
    assert definitions.get_item_name(1216319404) is None
