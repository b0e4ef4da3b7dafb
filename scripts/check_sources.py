from pathlib import Path

from can_browser.config.loader import load_source_registry, registered_locations
from can_browser.core.exceptions import CanBrowserError
from can_browser.services.dataset_service import DatasetManager
from can_browser.validation.errors import summarise_issues

BASE_DIR = Path(__file__).parent.parent
CONFIG_DIR = BASE_DIR / "config"


def check_sources(config_dir: Path = CONFIG_DIR) -> int:
    """Load and index every configured source; returns the number that failed to load."""
    print(f"{'SOURCE':<16} | {'FRAMES':>8} | {'SIGNALS':>8} | {'VALUES':>8} | {'STATUS'}")
    print("-" * 85)

    try:
        global_config, cfg_by_key = load_source_registry(config_dir)
    except CanBrowserError as e:
        print(f"Error: {e}")
        return 1

    manager = DatasetManager(
        data_root=global_config.data_root,
        batch_size=global_config.index_batch_size,
        registered=registered_locations(cfg_by_key),
    )
    failures = 0

    for key, cfg in cfg_by_key.items():
        try:
            index = manager[cfg.location]
        except CanBrowserError as e:
            failures += 1
            print(f"{key:<16} | {'-':>8} | {'-':>8} | {'-':>8} | ❌ {e}")
            continue

        stats = index.stats
        status = "✅ OK" if not index.issues else f"⚠️ {summarise_issues(index.issues)}"
        print(
            f"{key:<16} | {stats.total_frames:>8,} | {stats.total_signals:>8,} | {stats.total_values:>8,} | {status}"
        )

    return failures


if __name__ == "__main__":
    raise SystemExit(1 if check_sources() else 0)
