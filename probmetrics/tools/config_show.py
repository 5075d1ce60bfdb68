"""CLI to display the resolved log loss configuration."""
from __future__ import annotations

import argparse
import json
import logging
from typing import Any, Dict, List, Optional

import yaml

from probmetrics.configs.loader import load_config

logger = logging.getLogger("config_show")


def parse_sets(entries: List[str]) -> Dict[str, Any]:
    cli_overrides: Dict[str, Any] = {}
    for entry in entries:
        if "=" not in entry:
            raise ValueError(f"Expected key=value, got {entry!r}")
        key, value = entry.split("=", 1)
        cursor = cli_overrides
        parts = key.split(".")
        for p in parts[:-1]:
            cursor = cursor.setdefault(p, {})
        cursor[parts[-1]] = value
    return cli_overrides


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Show resolved config")
    parser.add_argument("--profile", default=None)
    parser.add_argument("--section", default=None, help="e.g. log_loss")
    parser.add_argument("--as", dest="fmt", choices=["json", "yaml"], default="yaml")
    parser.add_argument("--set", dest="sets", action="append", default=[], help="e.g. log_loss.sum=true")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    cfg = load_config(profile=args.profile, cli_overrides=parse_sets(args.sets))
    logging.basicConfig(level=cfg.resolved.get("logging", {}).get("level", "INFO"))
    logger.info("Resolved config %s from %s", cfg.fingerprint, ", ".join(cfg.sources))

    resolved: Any = cfg.resolved
    if args.section:
        for part in args.section.split("."):
            resolved = resolved.get(part, {}) if isinstance(resolved, dict) else {}
    if args.fmt == "json":
        print(json.dumps(resolved, indent=2, ensure_ascii=False))
    else:
        print(yaml.safe_dump(resolved, allow_unicode=True, sort_keys=False))


if __name__ == "__main__":
    main()
