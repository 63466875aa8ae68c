"""Configuration management."""

import os
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Optional

import yaml

from vault_curator.core import (
    ArmorScorer,
    DuplicateOptions,
    ProtectionRules,
    ScoringThresholds,
    StatProfile,
    VaultCuratorError,
)
from vault_curator.core.entities import STAT_NAMES


@dataclass
class PathsConfig:
    """Path settings."""
    inventory_file: Path = Path("inventory.json")
    backup_file: Optional[Path] = None
    definitions_file: Optional[Path] = None
    reports_dir: Path = Path("reports")


@dataclass
class ProtectionConfig:
    """Protection rule settings."""
    protect_loadout_items: bool = True
    protect_locked: bool = True
    protect_masterworked: bool = True
    protect_exotics: bool = True
    protect_high_stat_armor: bool = True
    high_stat_threshold: int = 65
    protected_ids: list[str] = field(default_factory=list)

    def to_rules(self) -> ProtectionRules:
        return ProtectionRules(
            protect_loadout_items=self.protect_loadout_items,
            protect_locked=self.protect_locked,
            protect_masterworked=self.protect_masterworked,
            protect_exotics=self.protect_exotics,
            protect_high_stat_armor=self.protect_high_stat_armor,
            high_stat_threshold=self.high_stat_threshold,
            protected_ids=frozenset(str(i) for i in self.protected_ids),
        )


@dataclass
class PlannerConfig:
    """Planner settings."""
    only_vault: bool = True


@dataclass
class DuplicatesConfig:
    """Duplicate search settings."""
    include_weapons: bool = True
    include_armor: bool = True
    min_duplicates: int = 2
    keep_count: int = 1

    def to_options(self) -> DuplicateOptions:
        return DuplicateOptions(
            include_weapons=self.include_weapons,
            include_armor=self.include_armor,
            min_duplicates=self.min_duplicates,
            keep_count=self.keep_count,
        )


@dataclass
class ScoringConfig:
    """Scoring thresholds and extra stat profiles."""
    thresholds: dict = field(default_factory=dict)
    profiles: dict = field(default_factory=dict)

    def to_scorer(self) -> ArmorScorer:
        """Build a scorer; unknown threshold keys are ignored.

        Raises:
            VaultCuratorError: If an extra profile has invalid weights.
        """
        known = {f.name for f in fields(ScoringThresholds)}
        thresholds = ScoringThresholds(
            **{key: value for key, value in self.thresholds.items() if key in known}
        )
        scorer = ArmorScorer(thresholds=thresholds)

        for profile_id, profile in self.profiles.items():
            try:
                weights = profile.get("weights") or {}
                stat_profile = StatProfile(
                    name=profile.get("name", profile_id),
                    description=profile.get("description", ""),
                    **{stat: float(weights.get(stat, 0.0)) for stat in STAT_NAMES},
                )
            except (AttributeError, TypeError, ValueError) as e:
                raise VaultCuratorError(f"Invalid scoring profile {profile_id}: {e}") from e
            scorer = scorer.with_profile(profile_id, stat_profile)
        return scorer


@dataclass
class DefinitionsConfig:
    """Item definitions download settings."""
    url: Optional[str] = None
    timeout: float = 60.0


@dataclass
class Settings:
    """Application settings."""

    # API key (from environment only)
    bungie_api_key: Optional[str] = None

    # Config sections
    paths: PathsConfig = field(default_factory=PathsConfig)
    protection: ProtectionConfig = field(default_factory=ProtectionConfig)
    planner: PlannerConfig = field(default_factory=PlannerConfig)
    duplicates: DuplicatesConfig = field(default_factory=DuplicatesConfig)
    scoring: ScoringConfig = field(default_factory=ScoringConfig)
    definitions: DefinitionsConfig = field(default_factory=DefinitionsConfig)

    @property
    def protection_rules(self) -> ProtectionRules:
        return self.protection.to_rules()

    @property
    def duplicate_options(self) -> DuplicateOptions:
        return self.duplicates.to_options()

    @property
    def only_vault(self) -> bool:
        return self.planner.only_vault


def load_config(config_path: Path = Path("config.yaml")) -> dict:
    """Load configuration from YAML file."""
    if not config_path.exists():
        return {}

    with open(config_path, "r", encoding="utf-8") as f:
        return yaml.safe_load(f) or {}


def get_settings(config_path: Path = Path("config.yaml")) -> Settings:
    """Get application settings from YAML config and environment."""
    config = load_config(config_path)

    settings = Settings(bungie_api_key=os.getenv("BUNGIE_API_KEY"))

    if "paths" in config:
        for key, value in config["paths"].items():
            setattr(settings.paths, key, Path(value) if value is not None else None)

    for section in ("protection", "planner", "duplicates", "definitions"):
        if section in config:
            target = getattr(settings, section)
            known = {f.name for f in fields(target)}
            for key, value in config[section].items():
                if key in known:
                    setattr(target, key, value)

    if "scoring" in config:
        scoring = config["scoring"] or {}
        settings.scoring = ScoringConfig(
            thresholds=scoring.get("thresholds") or {},
            profiles=scoring.get("profiles") or {},
        )

    return settings
