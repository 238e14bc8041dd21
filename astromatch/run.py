"""
Command-line runner for the compatibility engine.

Usage:
    python -m astromatch.run --profiles data/sample_profiles.csv --viewer p01

The runner performs the following steps:
1. Load and validate configuration
2. Load profiles
3. Build the engine and tier table
4. Rank the deck for the viewer (if given)
5. Evaluate the engine over all profile pairs
6. Save the evaluation report
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional

import pandas as pd

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


def setup_logging(log_level: str) -> None:
    """Configure logging level from config."""
    level = getattr(logging, log_level.upper(), logging.INFO)
    logging.getLogger().setLevel(level)


def run(
    profiles_path: str,
    config_path: Optional[str] = None,
    viewer_id: Optional[str] = None,
    output_dir: Optional[str] = None
) -> Dict[str, Any]:
    """
    Score and evaluate a set of profiles.

    Args:
        profiles_path: Path to a CSV or JSON profile file
        config_path: Path to the configuration YAML file (defaults apply when None)
        viewer_id: If provided, rank every other profile for this viewer
        output_dir: If provided, write the report here instead of config default

    Returns:
        Dictionary with the ranked deck, the report and its path
    """
    from .configs import load_config, validate_config
    from .data_loading import load_profiles
    from .evaluation import create_evaluation_report
    from .inference import CompatibilityEngine, rank_candidates
    from .presentation import TierTable

    # =========================================================================
    # 1. Load and validate configuration
    # =========================================================================
    config: Dict[str, Any] = {}
    if config_path is not None:
        config = load_config(config_path)
        issues = validate_config(config)
        for issue in issues:
            logger.warning(f"Config issue: {issue}")

    setup_logging((config.get("global") or {}).get("log_level", "INFO"))

    # =========================================================================
    # 2. Load profiles
    # =========================================================================
    profiles = load_profiles(profiles_path)

    # =========================================================================
    # 3. Build engine and tier table
    # =========================================================================
    engine = CompatibilityEngine.from_config(config)
    tiers = TierTable.from_config(config)

    # =========================================================================
    # 4. Rank deck for the viewer
    # =========================================================================
    deck = None
    if viewer_id is not None:
        by_id = {p.id: p for p in profiles}
        if viewer_id not in by_id:
            raise KeyError(f"Viewer {viewer_id!r} not found in {profiles_path}")
        deck = rank_candidates(engine, by_id[viewer_id], profiles, tiers=tiers)
        with pd.option_context("display.width", 160, "display.max_columns", 20):
            logger.info(f"Deck for {viewer_id}:\n{deck.to_string(index=False)}")

    # =========================================================================
    # 5. Evaluate engine
    # =========================================================================
    report = create_evaluation_report(engine, profiles, tiers=tiers)
    logger.info("\n" + report.summary())

    # =========================================================================
    # 6. Save report
    # =========================================================================
    effective_output_dir = Path(output_dir or (config.get("global") or {}).get("output_dir", "artifacts"))
    effective_output_dir.mkdir(parents=True, exist_ok=True)
    report_path = effective_output_dir / "evaluation_report.json"
    report.save(str(report_path))

    return {
        "success": report.symmetry_check.is_symmetric,
        "deck": deck,
        "report": report,
        "report_path": str(report_path)
    }


def main(argv=None):
    """Main entry point for the runner."""
    parser = argparse.ArgumentParser(
        description="Score profiles with the compatibility engine"
    )
    parser.add_argument(
        "--profiles",
        type=str,
        required=True,
        help="Path to a CSV or JSON profile file"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=None,
        help="Path to configuration file"
    )
    parser.add_argument(
        "--viewer",
        type=str,
        default=None,
        help="Profile id to rank the deck for"
    )
    parser.add_argument(
        "--output-dir",
        type=str,
        default=None,
        help="Output directory for the report (overrides config)"
    )

    args = parser.parse_args(argv)

    try:
        result = run(args.profiles, config_path=args.config,
                     viewer_id=args.viewer, output_dir=args.output_dir)
        if result["success"]:
            logger.info("Run completed successfully")
            return 0
        else:
            logger.error("Run finished with symmetry violations")
            return 1
    except Exception as e:
        logger.exception(f"Run failed with error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
