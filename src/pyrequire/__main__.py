"""python -m pyrequire -- Run a script (or a console) with require/load installed."""

from __future__ import annotations

import argparse
import code
import os
import sys
import traceback

from pyrequire.errors import LoadError
from pyrequire.main import create_loader, install, load_config, uninstall

BANNER = "pyrequire console  (require/load available, Ctrl+D to exit)"


def _parse_args(argv: list[str] | None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="pyrequire",
        description="Run a Python script with require() and load() installed.",
    )
    parser.add_argument(
        "-I",
        dest="include",
        action="append",
        default=[],
        metavar="DIR",
        help="prepend DIR to the load path (repeatable)",
    )
    parser.add_argument(
        "-r",
        dest="requires",
        action="append",
        default=[],
        metavar="NAME",
        help="require NAME before running the script (repeatable)",
    )
    parser.add_argument("script", nargs="?", help="script to load into the top-level scope")
    parser.add_argument("args", nargs=argparse.REMAINDER, help="arguments passed to the script")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    config = load_config()
    try:
        loader = create_loader(
            load_path=[*args.include, *config["load_path"]],
            preload=[*config["preload"], *args.requires],
        )
    except LoadError as exc:
        print(f"pyrequire: {exc}", file=sys.stderr)
        return 1
    install(loader)

    try:
        if args.script is None:
            code.InteractiveConsole(locals=loader.main.__dict__).interact(
                banner=BANNER, exitmsg="Bye."
            )
            return 0

        saved_argv = sys.argv
        sys.argv = [args.script, *args.args]
        try:
            loader.load(os.path.abspath(args.script))
        except SystemExit as exc:
            if exc.code is None or isinstance(exc.code, int):
                return exc.code or 0
            print(exc.code, file=sys.stderr)
            return 1
        except Exception:
            traceback.print_exc()
            return 1
        finally:
            sys.argv = saved_argv
        return 0
    finally:
        uninstall()


if __name__ == "__main__":
    sys.exit(main())
