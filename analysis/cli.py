"""Command-line interface for hammer throw analysis."""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from analysis.throw_analyzer import ThrowAnalyzer
from calib import calibration_from_circle, fallback_calibration
from configs.settings import AppConfig, load_config
from contracts import IMPLEMENTS, CalibrationFrame, CircleDetection, ImplementSpec, ImplementType, Point
from contracts.versioning import make_envelope
from exceptions import ConfigError, HammerAnalysisError
from log_config.logger import enable_file_logging, get_logger
from trajectory.physics import DragTrajectorySimulator, vacuum_range

logger = get_logger(__name__)


def parse_points(raw: List[Any]) -> List[Tuple[float, float]]:
    points = []
    for item in raw:
        if isinstance(item, dict):
            points.append((float(item["x"]), float(item["y"])))
        else:
            x, y = item
            points.append((float(x), float(y)))
    return points


def parse_calibration(document: Dict[str, Any], config: AppConfig) -> CalibrationFrame:
    if "circle" in document:
        circle = document["circle"]
        return calibration_from_circle(
            CircleDetection(
                center_x=float(circle["center_x"]),
                center_y=float(circle["center_y"]),
                radius_px=float(circle["radius_px"]),
                confidence=float(circle.get("confidence", 1.0)),
            ),
            circle_diameter_m=config.calibration.circle_diameter_m,
        )
    if "calibration" not in document and "frame" in document:
        frame = document["frame"]
        return fallback_calibration(
            int(frame["width"]),
            int(frame["height"]),
            visible_width_m=config.calibration.fallback_width_m,
            confidence=config.calibration.fallback_confidence,
        )
    calibration = document["calibration"]
    origin = calibration["origin"]
    return CalibrationFrame(
        origin_pixel=Point(float(origin["x"]), float(origin["y"])),
        pixels_per_meter=float(calibration["pixels_per_meter"]),
        confidence=float(calibration.get("confidence", 1.0)),
    )


def parse_implement(raw: Any, config: AppConfig) -> ImplementSpec:
    if raw is None:
        return config.implement_spec
    if isinstance(raw, str):
        return IMPLEMENTS[ImplementType(raw)]
    return ImplementSpec(mass_kg=float(raw["mass_kg"]), diameter_mm=float(raw["diameter_mm"]))


def analyze_command(args, config: AppConfig) -> int:
    """Handle analyze command.

    Args:
        args: Parsed command-line arguments
        config: Loaded application configuration
    """
    input_path = Path(args.input)
    if not input_path.exists():
        print(f"Error: Input file not found: {input_path}", file=sys.stderr)
        return 1

    try:
        document = json.loads(input_path.read_text())
        points = parse_points(document["points"])
        calibration = parse_calibration(document, config)
        implement = parse_implement(args.implement or document.get("implement"), config)
        fps = float(document["fps"])
        frame_step = int(document.get("frame_step", 1))
    except (KeyError, TypeError, ValueError, HammerAnalysisError) as e:
        print(f"Error: Invalid input document: {e}", file=sys.stderr)
        return 1

    try:
        analysis = ThrowAnalyzer(config).analyze(points, calibration, fps, frame_step, implement)
    except (HammerAnalysisError, ValueError) as e:
        logger.error(f"Analysis failed: {e}")
        print(f"Error: {e}", file=sys.stderr)
        return 1

    result = analysis.result
    print("\n✓ Analysis complete!")
    print(f"  Tracked distance:   {result.tracked_distance:.2f} m")
    print(f"  Predicted distance: {result.predicted_distance:.2f} m (confidence {result.distance_confidence:.2f})")
    print(f"  Simulated distance: {analysis.simulation.distance_m:.2f} m ({analysis.implement.name} implement)")
    print(f"  Release: {result.release_velocity:.2f} m/s at {result.release_angle:.1f} deg")
    print(f"  Flight time: {result.flight_time:.2f} s")
    print(f"  Turns: {len(analysis.turns)}  View: {analysis.camera_view.view_type.value}")
    if analysis.failure_codes:
        print(f"  Flags: {', '.join(code.value for code in analysis.failure_codes)}")

    if args.output:
        output_path = Path(args.output)
        output_path.write_text(json.dumps(make_envelope(analysis.to_dict()), indent=2))
        print(f"\n  JSON result: {output_path}")
    return 0


def simulate_command(args, config: AppConfig) -> int:
    """Handle simulate command.

    Args:
        args: Parsed command-line arguments
        config: Loaded application configuration
    """
    implement = parse_implement(args.implement, config)
    try:
        simulation = DragTrajectorySimulator(config.physics).simulate_launch(
            args.speed, args.angle, args.height, implement
        )
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    print(f"Distance:    {simulation.distance_m:.2f} m (no drag: {vacuum_range(args.speed, args.angle):.2f} m)")
    print(f"Flight time: {simulation.flight_time_s:.2f} s")
    print(f"Max height:  {simulation.max_height_m:.2f} m")
    print(f"Landing:     {simulation.landing_velocity_m_s:.2f} m/s")
    if simulation.clamped:
        print("Warning: flight time cap reached before landing", file=sys.stderr)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="Hammer throw distance analysis",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Analyze a tracked throw
  hammer-analyze analyze throw.json --output result.json

  # Simulate a world-record release
  hammer-analyze simulate --speed 30.7 --angle 41.5 --height 1.8 --implement men
        """,
    )
    parser.add_argument("--config", help="Path to YAML configuration (default: bundled default.yaml)")
    parser.add_argument("--log-dir", help="Also write rotating log files to this directory")

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    analyze_parser = subparsers.add_parser("analyze", help="Analyze a tracked throw")
    analyze_parser.add_argument("input", help="JSON file with points, calibration or circle, fps, frame_step")
    analyze_parser.add_argument("--output", help="Write the versioned JSON result here")
    analyze_parser.add_argument(
        "--implement", choices=[t.value for t in ImplementType], help="Override the implement preset"
    )

    simulate_parser = subparsers.add_parser("simulate", help="Simulate a release with drag")
    simulate_parser.add_argument("--speed", type=float, required=True, help="Release speed (m/s)")
    simulate_parser.add_argument("--angle", type=float, required=True, help="Release angle (degrees)")
    simulate_parser.add_argument("--height", type=float, default=1.8, help="Release height (m)")
    simulate_parser.add_argument(
        "--implement", choices=[t.value for t in ImplementType], help="Implement preset"
    )

    args = parser.parse_args(argv)
    if not args.command:
        parser.print_help()
        return 2

    if args.log_dir:
        enable_file_logging(Path(args.log_dir))

    try:
        config = load_config(Path(args.config)) if args.config else load_config()
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.command == "analyze":
        return analyze_command(args, config)
    return simulate_command(args, config)


if __name__ == "__main__":
    sys.exit(main())
