#!/usr/bin/env python3
"""
App Catalog CLI

Command-line interface for serving the catalog and inspecting bundles.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from catalog.scanner import BundleScanner
from common.exceptions import CatalogError, ConfigError
from common.logging_config import setup_logging
from server.app import CatalogApp
from server.config import CatalogConfig, find_config, read_config_data

logger = logging.getLogger(__name__)


def build_config(args) -> CatalogConfig:
    """Load the configuration file (if any) and apply command-line overrides."""
    config_path = Path(args.config) if args.config else find_config()

    overrides = {}
    if args.dir:
        overrides["bundle_dir"] = args.dir
    if getattr(args, "host", None):
        overrides["host"] = args.host
    if getattr(args, "port", None) is not None:
        overrides["port"] = args.port

    if config_path is not None:
        data = read_config_data(config_path)
        data.update(overrides)
    else:
        data = overrides

    return CatalogConfig.from_dict(data)


def cmd_serve(args, config: CatalogConfig) -> int:
    """Run the HTTP server until interrupted."""
    server = CatalogApp(config).create_server()
    try:
        server.serve_forever()
    except KeyboardInterrupt:
        logger.info("Shutting down")
    finally:
        server.server_close()
    return 0


def cmd_list(args, config: CatalogConfig) -> int:
    """List the bundles in the catalog directory."""
    scanner = BundleScanner(config.bundle_dir, config.extensions)
    apps = scanner.scan()

    if args.json:
        print(json.dumps({"apps": [app.to_dict() for app in apps]}, indent=2))
        return 0

    if not apps:
        print(f"No apps found in {config.bundle_dir}")
        return 0

    print(f"Found {len(apps)} app(s):\n")
    for app in apps:
        print(f"  {app.file_name}")
        print(f"    {app.display_name} {app.short_version} ({app.bundle_id})")
        print(f"    {app.size_str}")
        print()

    return 0


def cmd_info(args, config: CatalogConfig) -> int:
    """Show detailed bundle information."""
    scanner = BundleScanner(config.bundle_dir, config.extensions)
    app = scanner.find(args.file_name)

    print(f"Name:        {app.display_name}")
    print(f"File:        {app.file_name}")
    print(f"Bundle ID:   {app.bundle_id}")
    print(f"Version:     {app.short_version} ({app.version})")
    print(f"Size:        {app.size_str}")
    print(f"Created:     {app.created_at:%Y-%m-%d %H:%M:%S}")
    print(f"Modified:    {app.modified_at:%Y-%m-%d %H:%M:%S}")
    print(f"Icon:        {app.icon_path}")
    if not app.document.available:
        print("Metadata:    not available (values derived from file name)")

    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="appcatalog",
        description="Browsable catalog of application bundles",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable verbose output"
    )
    parser.add_argument("-c", "--config", help="Path to JSON configuration file")
    parser.add_argument("-d", "--dir", help="Directory containing bundles")

    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve
    serve_p = subparsers.add_parser("serve", help="Run the catalog web server")
    serve_p.add_argument("--host", help="Address to bind")
    serve_p.add_argument("-p", "--port", type=int, help="Port to listen on")
    serve_p.set_defaults(func=cmd_serve)

    # list
    list_p = subparsers.add_parser("list", help="List bundles")
    list_p.add_argument("--json", action="store_true", help="Output JSON")
    list_p.set_defaults(func=cmd_list)

    # info
    info_p = subparsers.add_parser("info", help="Show bundle details")
    info_p.add_argument("file_name", help="Bundle file name")
    info_p.set_defaults(func=cmd_info)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        config = build_config(args)
    except ConfigError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 2

    setup_logging(
        level=logging.DEBUG if args.verbose else logging.INFO,
        log_file=config.log_file,
        json_logs=config.json_logs,
        access_log=config.access_log,
    )

    try:
        return args.func(args, config)
    except CatalogError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
