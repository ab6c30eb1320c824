#!/usr/bin/env python3
"""
Quake Log Tools - Means of Death Plotter

Draws a grouped bar chart of kills per means of death, one bar group per
cause and one bar per match, from a Quake server log.
"""

import argparse
import logging
import sys
from typing import Dict, Any, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from quake_log_tools.base import QuakeTool, FileBasedTool
from quake_log_tools.log.events import DeathCause
from quake_log_tools.log.matches import Match, parse_matches

logger = logging.getLogger(__name__)


class MeansPlotter(FileBasedTool):
    """
    Plots kills by means of death for the matches of a Quake log.
    """

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the plotter with configuration.

        Args:
            config: Configuration dictionary from Config class
        """
        super().__init__(config)
        self.initialize_directories()

        self.flush_trailing = bool(self.get_config('report.flush_trailing_match', False))
        self.dpi = self.get_config('plot.dpi', 150)
        self.figure_size = (self.get_config('plot.width', 12), self.get_config('plot.height', 6))

    @staticmethod
    def causes_in(matches: List[Match]) -> List[DeathCause]:
        """Causes with at least one kill in any of the matches, in ordinal order."""
        seen = set()
        for match in matches:
            seen.update(cause for cause, count in match.kills_by_cause.items() if count)
        return sorted(seen)

    def plot(self, matches: List[Match], output_path: str, labels: List[str],
             title: Optional[str] = None) -> str:
        """
        Plot kills by cause for the given matches.

        Args:
            matches: Matches to plot, one bar series each
            output_path: Image path; relative paths land in the output directory
            labels: Legend label per match
            title: Optional chart title

        Returns:
            Path to the saved image
        """
        causes = self.causes_in(matches)
        positions = np.arange(len(causes))
        width = 0.8 / max(len(matches), 1)

        fig, ax = plt.subplots(figsize=self.figure_size)
        try:
            for i, (match, label) in enumerate(zip(matches, labels)):
                counts = [match.kills_by_cause.get(cause, 0) for cause in causes]
                ax.bar(positions + i * width, counts, width, label=label)

            ax.set_xticks(positions + width * (len(matches) - 1) / 2)
            ax.set_xticklabels([cause.label for cause in causes], rotation=45, ha='right')
            ax.set_ylabel("Kills")
            if title:
                ax.set_title(title, fontsize=14, fontweight='bold')
            if len(matches) > 1:
                ax.legend(loc='upper right')

            resolved_path = self.output_path(output_path)
            fig.savefig(resolved_path, dpi=self.dpi, bbox_inches='tight', facecolor='white')
        finally:
            plt.close(fig)

        logger.info(f"Chart saved to: {resolved_path}")
        return resolved_path

    def run(self, log_file: str, output: Optional[str] = None, match: Optional[int] = None,
            title: Optional[str] = None) -> Dict[str, Any]:
        """
        Plot kills by cause from a log file.

        Args:
            log_file: Path to the Quake server log
            output: Image path; a timestamped PNG in the output directory if omitted
            match: 1-based match number to plot alone; all matches if omitted
            title: Optional chart title

        Returns:
            Dictionary with plot results

        Raises:
            FileNotFoundError: If the log file doesn't exist
            ValueError: If the log has no completed match or ``match`` is out of range
        """
        matches = parse_matches(self.read_text(log_file), flush_trailing=self.flush_trailing)
        if not matches:
            raise ValueError(f"No completed matches found in {log_file}")

        if match is not None:
            if not 1 <= match <= len(matches):
                raise ValueError(f"Match {match} out of range (log has {len(matches)} matches)")
            selected = [matches[match - 1]]
            labels = [f"Match {match}"]
        else:
            selected = matches
            labels = [f"Match {number}" for number in range(1, len(matches) + 1)]

        if output is None:
            suffix = f"match{match}" if match is not None else ""
            output = self.generate_timestamped_filename("kills_by_means", "png", suffix=suffix)

        output_file = self.plot(selected, output, labels, title)

        return {
            "match_count": len(selected),
            "causes": [cause.label for cause in self.causes_in(selected)],
            "kill_count": sum(m.total_kills for m in selected),
            "output_file": output_file,
        }


def main(argv=None):
    """
    Main entry point for the means of death plotter.
    """
    parser = argparse.ArgumentParser(
        description="Plot kills per means of death from a Quake server log.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s games.log
    %(prog)s games.log --match 3 --title "Final"
    %(prog)s games.log --output charts/means.png

Configuration:
    - plot.dpi, plot.width, plot.height: Image settings
    - general.output_path: Directory for generated images
        """
    )
    parser.add_argument("log_file", help="Path to the Quake server log file")
    parser.add_argument("--output", help="Output image path (default: timestamped PNG in the output directory)")
    parser.add_argument("--match", type=int, help="Plot only this match (1-based)")
    parser.add_argument("--title", help="Chart title")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args(argv)

    try:
        config = MeansPlotter.load_config(args.profile)
        tool = MeansPlotter(config)
        result = tool.run(args.log_file, output=args.output, match=args.match, title=args.title)

        print(f"Chart written to {result['output_file']} "
              f"({result['kill_count']} kills, {result['match_count']} matches)")

        if args.console:
            logger.info(f"Plotting completed: {result}")
        return 0

    except FileNotFoundError as e:
        logger.error(f"File not found: {e}")
        return 1
    except ValueError as e:
        logger.error(f"Invalid input: {e}")
        return 1
    except Exception as e:
        logger.error(f"Unexpected error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
