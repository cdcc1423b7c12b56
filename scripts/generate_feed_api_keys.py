#!/usr/bin/env python3
"""
Issue X-Feed-Key values for feed profiles in feeds_config.json.

Profiles that already carry an api_key keep it unless --rotate is given.
"""

import argparse
import sys
from pathlib import Path

# Add parent directory to path to import sheetfeed modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sheetfeed.config import load_feeds_config, save_feeds_config
from sheetfeed.core.auth import generate_token


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Generate API keys for feed profiles")
    parser.add_argument("--feed", help="Only this feed profile (default: every profile)")
    parser.add_argument("--config", help="Path to feeds_config.json")
    parser.add_argument("--rotate", action="store_true", help="Replace existing keys too")
    return parser.parse_args(argv)


def main(argv=None):
    """Give the selected profiles an api_key; exit status 1 on any failure."""
    args = parse_args(argv)
    try:
        config = load_feeds_config(args.config)
        feeds = config["feeds"]

        if args.feed:
            if args.feed not in feeds:
                raise ValueError(f"Feed '{args.feed}' not found")
            names = [args.feed]
        else:
            names = list(feeds)

        issued = []
        for feed_name in names:
            if feeds[feed_name].get("api_key") and not args.rotate:
                continue
            feeds[feed_name]["api_key"] = generate_token()
            issued.append(feed_name)
            print(f"Generated API key for feed '{feed_name}': {feeds[feed_name]['api_key']}")

        if issued:
            save_feeds_config(config, args.config)
            print(f"\n✅ {len(issued)} key(s) saved. Clients send them as the X-Feed-Key header.")
        else:
            print("✅ Selected feeds already have API keys.")

    except Exception as e:
        print(f"❌ Error: {str(e)}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
