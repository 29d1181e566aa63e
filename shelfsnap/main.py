"""
Main Entry Point for the ShelfSnap Planogram Comparator

This script provides a command-line interface for checking a detection
snapshot against a planogram. It orchestrates:

1. Scenario generation (planogram + detections) or loading from JSON
2. Cell derivation and center-in-cell matching
3. Discrepancy classification
4. Compliance reporting

Usage:
    # Generate data and run comparison
    python -m shelfsnap.main --generate-data --num-rows 3 --num-cols 6

    # Run with an existing scenario file
    python -m shelfsnap.main --input data/scenario_example.json

    # Presence-only audit, rejecting items on non-existent shelves
    python -m shelfsnap.main -i data/scenario.json --policy ignore --invalid-items reject
"""

import argparse
import json
import sys
from dataclasses import replace
from typing import List, Optional

from .comparison.comparator import (
    PlanogramComparator,
    describe_discrepancy,
    validate_against_ground_truth
)
from .comparison.policies import POLICIES
from .config import ComparatorConfig, INVALID_ITEM_POLICIES
from .data_models import ComparisonScenario, ComplianceReport
from .errors import ComparisonError
from .logger import get_logger
from .synthetic_data import (
    generate_scenario,
    save_scenario_to_json,
    load_scenario_from_json,
    visualize_scenario,
    SKUPattern
)

logger = get_logger("shelfsnap")


def print_header():
    """Print application header."""
    print("=" * 70)
    print("  SHELFSNAP PLANOGRAM COMPARATOR")
    print("  Detection snapshot vs. expected shelf layout")
    print("=" * 70)
    print()


def scenario_from_args(args) -> ComparisonScenario:
    return generate_scenario(
        num_rows=args.num_rows,
        num_cols=args.num_cols,
        fill_rate=args.fill_rate,
        noise_std=args.noise_std,
        missing_rate=args.missing_rate,
        misplaced_rate=args.misplaced_rate,
        overstock_rate=args.overstock_rate,
        sku_pattern=SKUPattern(args.sku_pattern),
        seed=args.seed,
        scenario_id=f"generated_{args.num_rows}x{args.num_cols}"
    )


def generate_data(args) -> ComparisonScenario:
    """
    Generate a synthetic scenario, reporting what was injected.

    Args:
        args: Command line arguments

    Returns:
        Generated ComparisonScenario
    """
    if args.quiet:
        scenario = scenario_from_args(args)
        if args.save_data:
            save_scenario_to_json(scenario, args.output_dir)
        return scenario

    print("Generating Synthetic Data...")
    print("-" * 40)
    print(f"  Shelf grid: {args.num_rows} shelves × {args.num_cols} columns")
    print(f"  Fill rate: {args.fill_rate:.1%}")
    print(f"  Noise std: {args.noise_std}")
    print(f"  Missing / misplaced rate: {args.missing_rate:.1%} / {args.misplaced_rate:.1%}")
    print(f"  Random seed: {args.seed}")
    print()

    scenario = scenario_from_args(args)

    print(f"Generated scenario: {scenario.scenario_id}")
    print(f"  Planogram items: {len(scenario.items)}")
    print(f"  Detections: {len(scenario.detections)}")
    if scenario.ground_truth:
        print(f"  Injected missing: {len(scenario.ground_truth.missing_item_ids)}")
        print(f"  Injected misplaced: {len(scenario.ground_truth.misplaced_item_ids)}")
        print(f"  Injected overstock: {len(scenario.ground_truth.overstock_detection_ids)}")
    print()

    if args.save_data:
        path = save_scenario_to_json(scenario, args.output_dir)
        print(f"Data saved to: {path}")
        print()

    return scenario


def load_data(args) -> ComparisonScenario:
    """Load scenario from JSON file."""
    print(f"Loading data from: {args.input}")
    print("-" * 40)

    scenario = load_scenario_from_json(args.input)

    print(f"Loaded scenario: {scenario.scenario_id}")
    print(f"  Planogram items: {len(scenario.items)}")
    print(f"  Detections: {len(scenario.detections)}")
    print()

    return scenario


def print_report(report: ComplianceReport, verbose: bool = True):
    """Print the compliance report."""
    print(report.summary())

    if verbose and report.discrepancies:
        print("\nDetailed Discrepancies (first 20):")
        print("-" * 40)

        for i, discrepancy in enumerate(report.discrepancies[:20]):
            print(f"  {i+1}. {describe_discrepancy(discrepancy)}")

        if len(report.discrepancies) > 20:
            print(f"  ... and {len(report.discrepancies) - 20} more discrepancies")
    print()


def run_validation(scenario: ComparisonScenario, report: ComplianceReport):
    """Score an existing report against the scenario's ground truth."""
    print("Ground Truth Validation:")
    print("-" * 40)

    metrics = validate_against_ground_truth(scenario, report=report)

    print(f"  True Positives:  {metrics['true_positives']}")
    print(f"  False Positives: {metrics['false_positives']}")
    print(f"  False Negatives: {metrics['false_negatives']}")
    print()
    print(f"  Precision: {metrics['precision']:.2%}")
    print(f"  Recall:    {metrics['recall']:.2%}")
    print(f"  F1 Score:  {metrics['f1_score']:.2%}")
    print()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Compare a shelf detection snapshot against a planogram',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Generate data and run comparison
  python -m shelfsnap.main --generate-data --num-rows 3 --num-cols 6

  # Load existing data
  python -m shelfsnap.main --input data/scenario_generated_3x4.json

  # Machine-readable output
  python -m shelfsnap.main --generate-data --json --quiet
        """
    )

    data_group = parser.add_mutually_exclusive_group()
    data_group.add_argument('--generate-data', '-g', action='store_true',
                            help='Generate synthetic data')
    data_group.add_argument('--input', '-i', type=str,
                            help='Path to input scenario JSON file')

    gen_group = parser.add_argument_group('Data Generation')
    gen_group.add_argument('--num-rows', type=int, default=3,
                           help='Number of shelves (default: 3)')
    gen_group.add_argument('--num-cols', type=int, default=4,
                           help='Number of columns per shelf (default: 4)')
    gen_group.add_argument('--fill-rate', type=float, default=0.9,
                           help='Share of grid cells with a product (default: 0.9)')
    gen_group.add_argument('--noise-std', type=float, default=0.01,
                           help='Detection center noise std (default: 0.01)')
    gen_group.add_argument('--missing-rate', type=float, default=0.05,
                           help='Missing product probability (default: 0.05)')
    gen_group.add_argument('--misplaced-rate', type=float, default=0.05,
                           help='Foreign label probability (default: 0.05)')
    gen_group.add_argument('--overstock-rate', type=float, default=0.5,
                           help='Stray detection probability per empty cell (default: 0.5)')
    gen_group.add_argument('--sku-pattern', type=str, default='unique',
                           choices=[p.value for p in SKUPattern],
                           help='Product distribution pattern (default: unique)')
    gen_group.add_argument('--seed', type=int, default=42,
                           help='Random seed (default: 42)')

    proc_group = parser.add_argument_group('Processing')
    proc_group.add_argument('--policy', type=str, default=None,
                            choices=sorted(POLICIES),
                            help='Misplacement policy (default: label)')
    proc_group.add_argument('--invalid-items', type=str, default=None,
                            choices=INVALID_ITEM_POLICIES,
                            help='Handling of items on non-existent shelves (default: missing)')

    out_group = parser.add_argument_group('Output')
    out_group.add_argument('--output-dir', type=str, default='data',
                           help='Output directory for generated data (default: data)')
    out_group.add_argument('--no-save', action='store_true',
                           help='Do not save generated data')
    out_group.add_argument('--visualize', '-v', action='store_true',
                           help='Show visualization plot')
    out_group.add_argument('--json', action='store_true',
                           help='Print the report as JSON')
    out_group.add_argument('--verbose', action='store_true',
                           help='Verbose output with detailed discrepancies')
    out_group.add_argument('--quiet', '-q', action='store_true',
                           help='Minimal output')
    out_group.add_argument('--log-level', type=str, default=None,
                           help='Logging level (default: INFO or $SHELFSNAP_LOG_LEVEL)')
    return parser


def resolve_config(args) -> ComparatorConfig:
    """Environment settings, overridden by explicit command-line flags."""
    config = ComparatorConfig.from_env()
    overrides = {}
    if args.policy:
        overrides['misplacement_policy'] = args.policy
    if args.invalid_items:
        overrides['invalid_item_policy'] = args.invalid_items
    if args.log_level:
        overrides['log_level'] = args.log_level.upper()
    return replace(config, **overrides)


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    parser = build_parser()
    args = parser.parse_args(argv)
    args.save_data = not args.no_save
    args.quiet = args.quiet or args.json

    try:
        config = resolve_config(args)
        comparator = PlanogramComparator(config)
        logger.setLevel(config.log_level)
    except ValueError as e:
        parser.error(str(e))

    if not args.quiet:
        print_header()

    if args.input:
        try:
            scenario = load_scenario_from_json(args.input) if args.quiet else load_data(args)
        except (OSError, ValueError, KeyError) as e:
            parser.error(f"cannot load scenario from {args.input}: {e}")
    else:
        try:
            scenario = generate_data(args)
        except ValueError as e:
            parser.error(str(e))

    try:
        report = comparator.analyze_scenario(scenario)
    except ComparisonError as e:
        logger.error("Comparison rejected: %s", e)
        return 2

    if args.json:
        print(json.dumps(report.to_dict(), indent=2))
    elif not args.quiet:
        print_report(report, verbose=args.verbose)

    if scenario.ground_truth and not args.quiet:
        run_validation(scenario, report)

    if args.visualize:
        try:
            visualize_scenario(scenario)
        except Exception as e:
            print(f"Visualization failed: {e}")

    if not args.quiet:
        print("=" * 70)
        print(f"Comparison complete. Compliance score: {report.compliance_score:.1%}")
        print("=" * 70)

    return 0


if __name__ == "__main__":
    sys.exit(main())
