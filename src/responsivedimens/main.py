"""Command-line interface."""
import argparse
import logging
from typing import List, Optional

from responsivedimens.analysis.curves import CURVE_STRATEGIES, plot_strategy_curves, strategy_table
from responsivedimens.config import EngineConfig
from responsivedimens.engine.calculator import ScalingEngine
from responsivedimens.engine.units import DimensionUnit, convert
from responsivedimens.logging_config import setup_logging
from responsivedimens.model.metrics import ScreenMetrics, UiModeType

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="responsivedimens",
        description="Compare scaling strategies for a base value on a given screen",
    )
    parser.add_argument("--width", type=float, required=True, help="Screen width in dp")
    parser.add_argument("--height", type=float, required=True, help="Screen height in dp")
    parser.add_argument("--base", type=float, default=16.0, help="Base value in dp (default: 16)")
    parser.add_argument("--density", type=float, default=1.0, help="Pixels per dp (default: 1.0)")
    parser.add_argument("--font-scale", type=float, default=1.0, help="User font scale (default: 1.0)")
    parser.add_argument(
        "--ui-mode",
        choices=[m.value for m in UiModeType],
        default=UiModeType.NORMAL.value,
        help="Device UI mode",
    )
    parser.add_argument(
        "--unit",
        choices=[u.value for u in DimensionUnit],
        default=DimensionUnit.DP.value,
        help="Output unit",
    )
    parser.add_argument("--config", help="Path to an engine configuration JSON file")
    parser.add_argument("--plot", action="store_true", help="Plot strategy curves with matplotlib")
    parser.add_argument(
        "--log-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        default="WARNING",
        help="Logging level",
    )
    return parser


def format_table(rows: List[tuple], unit: DimensionUnit) -> str:
    lines = [f"{'strategy':<14}{'value (' + unit.value + ')':>14}", "-" * 28]
    for name, value in rows:
        lines.append(f"{name:<14}{value:>14.2f}")
    return "\n".join(lines)


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    setup_logging(getattr(logging, args.log_level))

    config = EngineConfig.from_json_file(args.config) if args.config else EngineConfig()
    engine = ScalingEngine(config)

    metrics = ScreenMetrics(
        width=args.width,
        height=args.height,
        density=args.density,
        font_scale=args.font_scale,
        ui_mode=UiModeType(args.ui_mode),
    )
    unit = DimensionUnit(args.unit)
    logger.info(f"Screen {metrics.width}x{metrics.height} ({metrics.device_type}), base {args.base}")

    table = strategy_table(engine, args.base, metrics, CURVE_STRATEGIES)
    rows = [(str(strategy), convert(value, unit, metrics)) for strategy, value in table.items()]
    print(format_table(rows, unit))

    if args.plot:
        plot_strategy_curves(args.base, engine)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
