"""Command-line front door for lazyexplorer.

Parses a subcommand, builds one ``ExplorerService`` over a shared catalog,
and prints results. Failure responses exit with their message.
"""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from . import config
from .catalog import (
    DirectoryCatalog,
    Entry,
    SortDirection,
    SortField,
    build_tree,
    filter_entries,
    flatten_tree,
    format_mtime,
    format_size,
)
from .errors import ExplorerError
from .opener import open_path
from .service import ExplorerService, Response

LOG_LEVEL_ENV = "LAZYEXPLORER_LOG_LEVEL"


def _configure_logging(level_name: str | None) -> None:
    level_name = (level_name or os.environ.get(LOG_LEVEL_ENV) or "WARNING").upper()
    level = logging.getLevelName(level_name)
    if not isinstance(level, int):
        raise SystemExit(f"Unknown log level: {level_name}")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


def _checked(response: Response) -> Response:
    if not response.ok:
        raise SystemExit(response.message)
    return response


def format_entry_row(entry: Entry) -> str:
    """One ``ls`` row: kind, size, mtime, name (folders get a trailing slash)."""
    kind = "d" if entry.is_dir else ("l" if entry.is_shortcut else "-")
    name = f"{entry.name}/" if entry.is_dir else entry.name
    return f"{kind} {format_size(entry.size):>10} {format_mtime(entry):19} {name}"


def _default_path(default_path: Path | None) -> Path:
    if default_path is not None:
        return default_path
    last_path = config.load_last_path()
    return last_path if last_path is not None else Path.cwd()


def _cmd_ls(service: ExplorerService, args: argparse.Namespace, default_path: Path | None) -> None:
    path = Path(args.path) if args.path else _default_path(default_path)
    _checked(service.list_directory(str(path)))
    if args.sort is not None:
        field: SortField | None = SortField(args.sort)
        direction = SortDirection.DESC if args.desc else SortDirection.ASC
        config.save_sort_preference(field, direction)
    else:
        field, direction = config.load_sort_preference()
    entries = service.catalog.sorted_entries(path, field, direction)
    for entry in filter_entries(entries, args.filter or ""):
        sys.stdout.write(format_entry_row(entry) + "\n")
    config.save_last_path(path.absolute())


def _cmd_tree(service: ExplorerService, args: argparse.Namespace, default_path: Path | None) -> None:
    root = Path(args.path) if args.path else _default_path(default_path)
    try:
        tree = build_tree(service.catalog, root, [Path(p) for p in args.expand or []])
    except ExplorerError as exc:
        raise SystemExit(exc.message) from exc
    for depth, node in flatten_tree(tree):
        label = f"{node.name}/" if node.is_dir else node.name
        marker = "" if not node.is_dir else ("- " if node.expanded else "+ ")
        suffix = f"  [{node.error}]" if node.error else ""
        sys.stdout.write(f"{'  ' * depth}{marker}{label}{suffix}\n")


def _transfer_target(destination: str, source: str) -> str:
    dest = Path(destination)
    if dest.is_dir() and Path(source).absolute() != dest.absolute():
        return str(dest / Path(source).name)
    return destination


def _cmd_cp(service: ExplorerService, args: argparse.Namespace) -> None:
    if len(args.sources) == 1:
        response = _checked(service.copy(args.sources[0], _transfer_target(args.destination, args.sources[0])))
        sys.stdout.write(f"{response.data['actualDestination']}\n")
        return
    _checked(service.copy_batch(args.sources, args.destination))


def _cmd_mv(service: ExplorerService, args: argparse.Namespace) -> None:
    if len(args.sources) == 1:
        _checked(service.move(args.sources[0], _transfer_target(args.destination, args.sources[0])))
        return
    _checked(service.move_batch(args.sources, args.destination))


def _cmd_rm(service: ExplorerService, args: argparse.Namespace) -> None:
    if len(args.paths) == 1:
        _checked(service.remove(args.paths[0]))
        return
    response = _checked(service.remove_batch(args.paths))
    sys.stdout.write(f"removed {response.data['removed']}\n")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="lazyexplorer",
        description="Browse directories, resolve folder shortcuts, and copy/move/rename safely.",
    )
    parser.add_argument("--log-level", default=None, help=f"Logging level (default: ${LOG_LEVEL_ENV} or WARNING).")
    commands = parser.add_subparsers(dest="command", required=True)

    ls_parser = commands.add_parser("ls", help="List a directory.")
    ls_parser.add_argument("path", nargs="?", default=None, help="Directory. Defaults to the last browsed one.")
    ls_parser.add_argument(
        "--sort",
        choices=[field.value for field in SortField],
        default=None,
        help="Sort field; remembered for later listings.",
    )
    ls_parser.add_argument("--desc", action="store_true", help="Sort descending.")
    ls_parser.add_argument("--filter", default=None, help="Only names containing this text.")

    tree_parser = commands.add_parser("tree", help="Show a directory tree.")
    tree_parser.add_argument("path", nargs="?", default=None)
    tree_parser.add_argument("--expand", action="append", metavar="DIR", help="Expand DIR (repeatable).")

    resolve_parser = commands.add_parser("resolve", help="Print the folder a .lnk shortcut points at.")
    resolve_parser.add_argument("path")

    mkdir_parser = commands.add_parser("mkdir", help="Create a folder.")
    mkdir_parser.add_argument("path")

    touch_parser = commands.add_parser("touch", help="Create an empty file.")
    touch_parser.add_argument("path")

    rename_parser = commands.add_parser("rename", help="Rename a file or folder.")
    rename_parser.add_argument("old")
    rename_parser.add_argument("new")

    rm_parser = commands.add_parser("rm", help="Delete paths (missing ones are skipped in batches).")
    rm_parser.add_argument("paths", nargs="+")

    for name, help_text in (("cp", "Copy into a path or folder."), ("mv", "Move into a path or folder.")):
        transfer_parser = commands.add_parser(name, help=help_text)
        transfer_parser.add_argument("sources", nargs="+")
        transfer_parser.add_argument("destination")

    open_parser = commands.add_parser("open", help="Open with the system default application.")
    open_parser.add_argument("path")
    return parser


def main(default_path: Path | None = None) -> None:
    """Parse CLI arguments and run one command.

    ``default_path`` is primarily for tests; when omitted ``ls``/``tree`` use
    the last browsed directory, then the current working directory.
    """
    args = build_parser().parse_args()
    _configure_logging(args.log_level)
    service = ExplorerService(
        catalog=DirectoryCatalog(max_entries=config.load_cache_max_entries()),
        open_file=open_path,
    )

    if args.command == "ls":
        _cmd_ls(service, args, default_path)
    elif args.command == "tree":
        _cmd_tree(service, args, default_path)
    elif args.command == "resolve":
        response = _checked(service.resolve_shortcut(args.path))
        sys.stdout.write(f"{response.data['targetPath']}\n")
    elif args.command == "mkdir":
        _checked(service.create_folder(args.path))
    elif args.command == "touch":
        _checked(service.create_file(args.path))
    elif args.command == "rename":
        _checked(service.rename(args.old, args.new))
    elif args.command == "rm":
        _cmd_rm(service, args)
    elif args.command == "cp":
        _cmd_cp(service, args)
    elif args.command == "mv":
        _cmd_mv(service, args)
    elif args.command == "open":
        _checked(service.open_file(args.path))


if __name__ == "__main__":
    main()
