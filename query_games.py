#!/usr/bin/env python3
"""
Query the console game collection from the command line.

Prints one JSON document per line.  By default every game of the
platform (and year, if given) is printed; ``--summary`` restricts the
output to names and global sales, and ``--top N`` keeps only the N
best sellers.

Usage:
    python query_games.py --platform 3DS
    python query_games.py --platform 3DS --year 2011 --summary
    python query_games.py --platform 3DS --year 2011 --top 3

Connection settings come from the same environment variables as the
web application (MONGO_URL, MONGO_DB_NAME, GAMES_COLLECTION).
"""

import argparse
import json
import sys
from typing import List, Optional

from pymongo.errors import PyMongoError

from consolegame_api.app.core.config import settings
from consolegame_api.app.core.db import create_database
from consolegame_api.app.core.errors import ServiceError
from consolegame_api.app.services.game_service import GameService


def run_query(service: GameService, args: argparse.Namespace) -> List[dict]:
    if args.summary or args.top:
        return service.get_sales_summary(args.platform, args.year, limit=args.top)
    if args.year is not None:
        return service.get_by_platform_and_year(args.platform, args.year)
    return service.get_by_platform(args.platform)


def main(argv: Optional[List[str]] = None) -> int:
    ap = argparse.ArgumentParser(description="Query console games stored in MongoDB.")
    ap.add_argument("--platform", required=True, help="Platform code, e.g. 3DS or Wii")
    ap.add_argument("--year", help="Release year, e.g. 2011")
    ap.add_argument("--summary", action="store_true", help="Only print names and global sales")
    ap.add_argument("--top", type=int, help="Only print the N best sellers (implies --summary)")
    args = ap.parse_args(argv)

    if args.top is not None and args.top < 1:
        print("[!] --top must be a positive integer.", file=sys.stderr)
        return 1

    database = create_database()
    try:
        database.connect()
        games = run_query(GameService(database, settings.games_collection), args)
    except (ServiceError, PyMongoError) as exc:
        print(f"[!] {exc}", file=sys.stderr)
        return 2
    finally:
        database.disconnect()

    for game in games:
        print(json.dumps(game, ensure_ascii=False))
    return 0


if __name__ == "__main__":
    sys.exit(main())
