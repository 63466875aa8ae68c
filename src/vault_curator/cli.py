"""CLI entry point for vault curator."""

import asyncio
from pathlib import Path
from typing import Optional

import typer

from vault_curator.adapters.definitions import ManifestDefinitions
from vault_curator.adapters.inventory import JsonSnapshotSource
from vault_curator.adapters.report import format_group
from vault_curator.config import Settings, get_settings
from vault_curator.core import Action, VaultCuratorError, summarize_duplicates
from vault_curator.use_cases import VaultCurator

cli = typer.Typer(help="Vault cleanup recommendations that respect saved builds.")

ConfigOption = typer.Option(Path("config.yaml"), "--config", "-c", help="Path to config.yaml")
InventoryOption = typer.Option(None, "--inventory", "-i", help="Inventory snapshot JSON")
BackupOption = typer.Option(None, "--backup", "-b", help="DIM backup JSON")


def app() -> None:
    """CLI entry point."""
    cli()


async def build_curator(
    settings: Settings,
    inventory: Optional[Path],
    backup: Optional[Path],
) -> VaultCurator:
    """Create a curator with snapshot, names and backup loaded."""
    curator = VaultCurator(
        scorer=settings.scoring.to_scorer(),
        only_vault=settings.only_vault,
    )

    await curator.load_inventory(JsonSnapshotSource(inventory or settings.paths.inventory_file))

    definitions = None
    if settings.paths.definitions_file:
        definitions = ManifestDefinitions.from_file(settings.paths.definitions_file)
    elif settings.definitions.url:
        definitions = await ManifestDefinitions.from_url(
            settings.definitions.url,
            api_key=settings.bungie_api_key,
            timeout=settings.definitions.timeout,
        )
    if definitions is not None and definitions.loaded:
        curator.enrich_names(definitions)

    backup_path = backup or settings.paths.backup_file
    if backup_path:
        curator.load_backup(path=backup_path)
    else:
        print("  ⚠️  No backup loaded: loadout and tag protection disabled")

    return curator


def _load(config: Path, inventory: Optional[Path], backup: Optional[Path]) -> tuple[Settings, VaultCurator]:
    settings = get_settings(config)
    try:
        curator = asyncio.run(build_curator(settings, inventory, backup))
    except VaultCuratorError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)
    return settings, curator


@cli.command()
def plan(
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
    backup: Optional[Path] = BackupOption,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write report to file"),
) -> None:
    """Generate a KEEP / REVIEW / JUNK plan."""
    settings, curator = _load(config, inventory, backup)
    curator.generate_plan(settings.protection_rules)
    report = curator.format_plan()

    if output is None:
        print()
        print(report)
        return

    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(report, encoding="utf-8")
    print(f"📄 Plan saved: {output}")


@cli.command()
def junk(
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
    backup: Optional[Path] = BackupOption,
) -> None:
    """List items recommended as junk."""
    settings, curator = _load(config, inventory, backup)
    curator.generate_plan(settings.protection_rules)

    for rec in curator.current_plan.by_action(Action.JUNK):
        print(f"  • {rec.item.name} [{rec.item.instance_id}] - {rec.reason}")


@cli.command()
def duplicates(
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
    limit: int = typer.Option(20, help="Maximum groups to show"),
) -> None:
    """Find duplicate items and suggest which copies to keep."""
    settings, curator = _load(config, inventory, None)
    groups = curator.find_duplicates(settings.duplicate_options)
    summary = summarize_duplicates(groups)

    print(f"\n✓ Groups: {summary.total_groups}")
    print(f"  • Extra copies: {summary.total_duplicates}")
    print(f"  • Discard: {summary.total_discard}")
    print(f"  • Review: {summary.total_review}")

    for group in groups[:limit]:
        print()
        print(format_group(group, curator.scorer))


@cli.command()
def analyze(
    instance_id: str,
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
) -> None:
    """Score one armor piece."""
    _, curator = _load(config, inventory, None)
    try:
        report = curator.analyze_armor(instance_id)
    except VaultCuratorError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    if report.summary is None:
        print(f"⚠️  {report.item.name} cannot be scored (not armor or no stats)")
        return
    print(report.summary)


@cli.command()
def compare(
    first_id: str,
    second_id: str,
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
) -> None:
    """Compare two armor pieces."""
    _, curator = _load(config, inventory, None)
    result = curator.compare_armor(first_id, second_id)

    if result.winner is None:
        print(f"🤝 No winner: {result.reason}")
    else:
        print(f"🏆 {result.winner.name} [{result.winner.instance_id}]: {result.reason}")


@cli.command()
def safety(
    instance_id: str,
    config: Path = ConfigOption,
    inventory: Optional[Path] = InventoryOption,
    backup: Optional[Path] = BackupOption,
) -> None:
    """Check whether an item can be dismantled safely."""
    _, curator = _load(config, inventory, backup)
    try:
        result = curator.check_build_safety(instance_id)
    except VaultCuratorError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    status = "✓ Safe to dismantle" if result.safe_to_dismantle else "✗ Not safe to dismantle"
    print(f"{status}: {result.item.name}")
    for reason in result.reasons:
        print(f"  • {reason}")


@cli.command("backup-summary")
def backup_summary(
    backup: Path = typer.Argument(..., help="DIM backup JSON"),
) -> None:
    """Summarise a DIM backup."""
    curator = VaultCurator()
    try:
        curator.load_backup(path=backup)
    except VaultCuratorError as e:
        print(f"❌ {e}")
        raise typer.Exit(code=1)

    for loadout in curator.manifest.loadouts:
        print(f"  • {loadout.name}: {len(loadout.item_ids)} items")


if __name__ == "__main__":
    app()
