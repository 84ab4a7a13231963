"""Command-line entry point — wires services and runs a subcommand.

Usage:
    python main.py heroic-games
    python main.py heroic-game <app_name>
    python main.py list
    python main.py command <tool_name> [--sandboxed | --no-sandboxed]
    python main.py add-heroic [--name NAME] <app_name> <executable> [ARGS ...]
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from gametools.config import Config, get_config
from gametools.context import AppContext
from gametools.core.heroic_detector import HeroicDetector
from gametools.data.tool_library import ToolLibrary
from gametools.logger import setup_logger
from gametools.models.launcher import describe_launcher
from gametools.models.tool import Tool


def create_context(config: Config | None = None) -> AppContext:
    """Wire all services and return an AppContext."""
    config = config or get_config()

    # Logger
    setup_logger(config.data_dir / "logs", level=config.log_level)

    tool_library = ToolLibrary(config.tools_file)
    tool_library.load()

    return AppContext(
        config=config,
        heroic_detector=HeroicDetector(config.home_dir),
        tool_library=tool_library,
    )


# ── Subcommands ──


def cmd_heroic_games(ctx: AppContext, args: argparse.Namespace) -> int:
    detector = ctx.heroic_detector
    if not detector.is_installed():
        print("Heroic Games Launcher not found on this system")
        return 1

    games = detector.detect_games()
    if not games:
        print("No games found in Heroic Games Launcher")
        return 0
    for game in games:
        print(f"{game.app_name}\t{game.display_name}\t{game.install_path}")
    return 0


def cmd_heroic_game(ctx: AppContext, args: argparse.Namespace) -> int:
    detector = ctx.heroic_detector
    game = detector.get_game_config(args.app_name)
    if game is None:
        print(f"Error: no Heroic config for '{args.app_name}'")
        return 1

    launcher = game.to_launcher_config(is_flatpak=detector.is_flatpak())
    print(describe_launcher(launcher))
    print(f"  Install path: {launcher.install_path}")
    print(f"  Wine prefix:  {launcher.wine_prefix}")
    print(f"  Wine version: {launcher.wine_version or '-'}")
    print(f"  Proton path:  {launcher.proton_path or '-'}")
    return 0


def cmd_list(ctx: AppContext, args: argparse.Namespace) -> int:
    for i, tool in enumerate(ctx.tool_library.all_tools()):
        mode = "manual" if tool.is_manual else tool.runtime.name.lower()
        print(f"{i}\t{tool.name}\t{mode}")
    return 0


def cmd_command(ctx: AppContext, args: argparse.Namespace) -> int:
    tool = ctx.tool_library.get(args.tool_name)
    if tool is None:
        print(f"Error: no tool named '{args.tool_name}'")
        return 1
    sandboxed = ctx.config.sandboxed if args.sandboxed is None else args.sandboxed
    print(tool.build_command(sandboxed))
    return 0


def cmd_add_heroic(ctx: AppContext, args: argparse.Namespace) -> int:
    game = ctx.heroic_detector.get_game_config(args.app_name)
    if game is None:
        print(f"Error: no Heroic config for '{args.app_name}'")
        return 1

    executable = Path(args.executable)
    tool = Tool.heroic(
        name=args.name or executable.stem,
        icon_path=None,
        executable_path=executable,
        game=game,
        arguments=" ".join(args.arguments),
    )
    ctx.tool_library.add(tool)
    ctx.tool_library.save()
    print(f"  Added: {tool.name} → {describe_launcher(tool.launcher_config(game.install_path))}")
    print(f"  Saved to {ctx.tool_library.path}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run tools natively, through Wine, Protontricks, Steam or Heroic's Proton.",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("heroic-games", help="List games installed through Heroic")
    p.set_defaults(func=cmd_heroic_games)

    p = sub.add_parser("heroic-game", help="Show a Heroic game's prefix and Proton build")
    p.add_argument("app_name", help="Heroic app name")
    p.set_defaults(func=cmd_heroic_game)

    p = sub.add_parser("list", help="List configured tools")
    p.set_defaults(func=cmd_list)

    p = sub.add_parser("command", help="Print the command line of a tool")
    p.add_argument("tool_name", help="Tool name")
    p.add_argument(
        "--sandboxed",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Wrap in flatpak-spawn (default: detect)",
    )
    p.set_defaults(func=cmd_command)

    p = sub.add_parser("add-heroic", help="Add a tool running inside a Heroic game's prefix")
    p.add_argument("--name", default="", help="Tool name (default: executable name)")
    p.add_argument("app_name", help="Heroic app name")
    p.add_argument("executable", help="Path to the executable")
    p.add_argument(
        "arguments",
        nargs=argparse.REMAINDER,
        help="Arguments appended verbatim; everything after the executable is taken as-is",
    )
    p.set_defaults(func=cmd_add_heroic)

    return parser


def main(argv: list[str] | None = None) -> int:
    """Application entry point."""
    args = build_parser().parse_args(argv)
    ctx = create_context()
    return args.func(ctx, args)


if __name__ == "__main__":
    sys.exit(main())
