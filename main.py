"""
Sideout - Live volleyball statistics engine

Command-line entry point. Lists saved matches and exports box scores.
"""

import argparse
import sys

from PySide6.QtCore import QCoreApplication

from config import init_config, APP_NAME, APP_VERSION, PATHS
from logging_config import setup_logging


def main(argv=None) -> int:
    """Main entry point for Sideout."""
    parser = argparse.ArgumentParser(prog="sideout", description=f"{APP_NAME} {APP_VERSION}")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("list", help="List saved matches")

    export = sub.add_parser("export", help="Export a saved match box score")
    export.add_argument("match_id")
    export.add_argument("--format", choices=["pdf", "csv"], default="pdf")
    export.add_argument("--output", default=None)

    args = parser.parse_args(argv)

    # Initialize configuration and directories
    init_config()
    setup_logging()

    app = QCoreApplication.instance() or QCoreApplication(sys.argv[:1])
    app.setApplicationName(APP_NAME)
    app.setApplicationVersion(APP_VERSION)

    from app import MatchController
    controller = MatchController(autosave=False)

    if args.command == "list":
        for summary in controller.saved_matches():
            sets = f"{summary.home_sets_won}-{summary.opponent_sets_won}"
            print(f"{summary.match_id}  {summary.match_name}  [{summary.phase.value}]  sets {sets}")
        return 0

    if args.command == "export":
        result = controller.load_match(args.match_id)
        if not result.ok:
            print(result.message, file=sys.stderr)
            return 1
        output = args.output or str(PATHS.exports / f"{args.match_id}.{args.format}")
        if not controller.export_box_score(output, args.format):
            print(f"Export to {output} failed", file=sys.stderr)
            return 1
        print(output)
        return 0

    parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
