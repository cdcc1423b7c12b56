#!/usr/bin/env python3
"""
Build a YML feed from its spreadsheet and write it to disk.

Uses the active profile of feeds_config.json unless --feed is given.
"""

import argparse
import logging
import sys
from pathlib import Path

# Add parent directory to path to import sheetfeed modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sheetfeed.config import get_settings, get_active_feed, get_feed_config, validate_feed_config
from sheetfeed.core.feed.models import FeedConfig
from sheetfeed.core.feed.service import generate_feed
from sheetfeed.core.feed.sheets_reader import GoogleSheetSource, load_service_account_info


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate a YML feed from Google Sheets")
    parser.add_argument("--feed", help="Feed profile name (default: active profile)")
    parser.add_argument("--config", help="Path to feeds_config.json")
    parser.add_argument("--output", help="Output file (default: profile output_filename)")
    parser.add_argument("--dry-run", action="store_true", help="Build without writing the file")
    return parser.parse_args(argv)


def main(argv=None):
    """Generate one feed; exit status 1 on any failure."""
    args = parse_args(argv)
    settings = get_settings()
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        feed_name = args.feed or get_active_feed(args.config)
        if not feed_name:
            raise ValueError("No --feed given and no active feed in config")

        profile = get_feed_config(feed_name, args.config)
        if profile is None:
            raise ValueError(f"Feed '{feed_name}' not found")

        is_valid, error = validate_feed_config(profile)
        if not is_valid:
            raise ValueError(f"Feed '{feed_name}': {error}")

        config = FeedConfig.from_dict(profile, name=feed_name)
        source = GoogleSheetSource(
            config.spreadsheet_id,
            credentials_info=load_service_account_info(settings.gcp_service_account_key)
        )
        output_path = None if args.dry_run else (args.output or config.output_filename)

        result = generate_feed(source, config, output_path=output_path)
        document = result.document

        print(f"Offers: {document.offers_count} | Categories: {document.categories_count} | Rows: {result.rows_count}")
        if document.corrections:
            print(f"⚠️ Escape fallback applied {len(document.corrections)} time(s)")
        if output_path:
            print(f"✅ {'Written' if result.written else 'Unchanged'}: {output_path}")
        else:
            print("✅ Dry run, nothing written")

    except Exception as e:
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
