"""Command line entry point: plan one path on a grid map."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any

from .global_planner import GlobalPlanner, load_params


def _parse_value(text: str) -> Any:
    lowered = text.strip().lower()
    if lowered in ("true", "false"):
        return lowered == "true"
    for convert in (int, float):
        try:
            return convert(text)
        except ValueError:
            pass
    return text


def _param(text: str) -> tuple[str, Any]:
    key, sep, value = text.partition("=")
    if not sep or not key:
        raise argparse.ArgumentTypeError(f"expected KEY=VALUE, got {text!r}")
    return key, _parse_value(value)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="gridplan", description="Plan a path from start to goal on an occupancy grid."
    )
    parser.add_argument(
        "--param", action="append", type=_param, default=[], metavar="KEY=VALUE",
        help="planner setting, e.g. cell_size=0.05 or planner_name=astar",
    )
    parser.add_argument(
        "--map", type=Path,
        help="JSON file holding 'inflation' and 'logodds' lists in row-major order",
    )
    parser.add_argument("--start", nargs=2, type=float, required=True, metavar=("X", "Y"))
    parser.add_argument("--goal", nargs=2, type=float, required=True, metavar=("X", "Y"))
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)

    params, _complete = load_params(dict(args.param))
    logging.basicConfig(level=logging.INFO if params.verbose else logging.WARNING)

    try:
        planner = GlobalPlanner(params)
    except ValueError as exc:
        parser.error(str(exc))

    if args.map is not None:
        try:
            grids = json.loads(args.map.read_text())
        except (OSError, ValueError) as exc:
            parser.error(f"cannot read map file: {exc}")
        total = planner.map_data.total_cells
        for name, apply in (("inflation", planner.on_inflation), ("logodds", planner.on_logodds)):
            grid = grids.get(name, [0] * total)
            if len(grid) != total:
                parser.error(f"map grid {name!r} has {len(grid)} cells, expected {total}")
            apply(grid)

    planner.on_pose(*args.start)
    planner.on_goal(*args.goal)
    if not planner.ready():
        print("gridplan: start, goal or map is missing", file=sys.stderr)
        return 1

    planner.setup_planner()
    try:
        message = planner.step()
    except ValueError as exc:
        print(f"gridplan: {exc}", file=sys.stderr)
        return 1
    if message is None:
        print("gridplan: no path found", file=sys.stderr)
        return 1

    for pose in message.poses:
        print(f"{pose.x:g} {pose.y:g}")
    return 0


if __name__ == "__main__":
    sys.exit(main())