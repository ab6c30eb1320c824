#!/usr/bin/env python3
"""
Quake Log Tools - Kill Report

Parses a Quake server log and reports, per match, the total kill count, the
players, the net kills per player and the kills per means of death.

The report is written as JSON with two parallel arrays, ``match_kills`` and
``match_by_means``, and can also be exported as an Excel workbook.
"""

import argparse
import logging
import sys
from typing import Dict, Any, Optional

import openpyxl
import pandas as pd

from quake_log_tools.base import QuakeTool, JSONTool
from quake_log_tools.log.report import (
    DEFAULT_MISSING_NAME_TEMPLATE, MISSING_NAME_POLICIES, MissingPlayerName,
    Report, generate_report,
)

logger = logging.getLogger(__name__)


class KillReport(JSONTool):
    """
    Builds per-match kill reports from Quake server logs.
    """

    EXCEL_SHEETS = ("Kills", "Means")

    def __init__(self, config: Optional[Dict[str, Any]] = None):
        """
        Initialize the KillReport with configuration.

        Args:
            config: Configuration dictionary from Config class
        """
        super().__init__(config)

        self.flush_trailing = bool(self.get_config('report.flush_trailing_match', False))
        self.missing_names = self.get_config('report.missing_names', 'placeholder')
        self.missing_name_template = self.get_config('report.missing_name_template',
                                                     DEFAULT_MISSING_NAME_TEMPLATE)

    def build(self, text: str) -> Report:
        """
        Parse log text and build the report.

        Args:
            text: Complete log text

        Returns:
            The Report

        Raises:
            MissingPlayerName: With the "strict" missing-name policy
        """
        return generate_report(text, self.flush_trailing, self.missing_names,
                               self.missing_name_template)

    def save_to_excel(self, report: Report, output_file: Optional[str] = None) -> str:
        """
        Save the report to an Excel workbook with one sheet per view.

        Args:
            report: Report to export
            output_file: Target path; a timestamped name in the output
                directory is used if omitted

        Returns:
            Path to the saved workbook
        """
        if output_file is None:
            output_file = self.generate_timestamped_filename("kill_report", "xlsx")
        excel_path = self.output_path(output_file)

        kills_df, means_df = report.to_dataframes()

        with pd.ExcelWriter(excel_path, engine='openpyxl') as writer:
            for sheet_name, df in zip(self.EXCEL_SHEETS, (kills_df, means_df)):
                df.to_excel(writer, sheet_name=sheet_name, index=False)
                worksheet = writer.sheets[sheet_name]

                # Size columns to their widest cell
                for idx, column in enumerate(df.columns, 1):
                    letter = openpyxl.utils.get_column_letter(idx)
                    widest = max([len(str(column))] + [len(str(value)) for value in df[column]])
                    worksheet.column_dimensions[letter].width = widest + 2

        logger.info(f"Kill report workbook saved to: {excel_path}")
        return excel_path

    def run(self, log_file: str, output: Optional[str] = None,
            excel: bool = False) -> Dict[str, Any]:
        """
        Run the kill report.

        Args:
            log_file: Path to the Quake server log
            output: JSON output path; the JSON is printed to stdout if omitted
            excel: Also write an Excel workbook

        Returns:
            Dictionary with run results

        Raises:
            FileNotFoundError: If the log file doesn't exist
            MissingPlayerName: With the "strict" missing-name policy
        """
        logger.info("Starting kill report...")

        text = self.read_text(log_file)
        report = self.build(text)

        result = {
            "success": True,
            "match_count": len(report),
            "kill_count": report.total_kills,
            "lines_dropped": report.lines_dropped,
            "output_file": None,
            "excel_file": None,
        }

        if output:
            result["output_file"] = self.write_json(report.to_dict(), output)
        else:
            print(report.to_json())

        if excel:
            result["excel_file"] = self.save_to_excel(report)

        if not len(report):
            logger.warning("No completed matches found in the log.")

        logger.info(f"Report complete: {result['kill_count']} kills in {result['match_count']} matches")
        return result


def main(argv=None):
    """
    Main entry point for the kill report command line tool.
    """
    parser = argparse.ArgumentParser(
        description="Parse a Quake server log and report kill statistics per match.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    %(prog)s games.log
    %(prog)s games.log --output report.json --excel
    %(prog)s games.log --missing-names omit --flush-trailing

Configuration:
    - report.flush_trailing_match: Keep a final match that lacks ShutdownGame
    - report.missing_names: placeholder, omit or strict
    - general.output_path: Directory for JSON and Excel output files
        """
    )
    parser.add_argument("log_file", help="Path to the Quake server log file")
    parser.add_argument(
        "--output",
        help="Write the JSON report to this file (relative paths land in the output directory). "
             "Prints to stdout if not specified."
    )
    parser.add_argument("--excel", action="store_true",
                        help="Also export the report as an Excel workbook")
    parser.add_argument("--flush-trailing", action="store_true", default=None,
                        help="Keep a final match that was never closed by ShutdownGame")
    parser.add_argument("--missing-names", choices=MISSING_NAME_POLICIES, default=None,
                        help="How to report kills by players that never announced a name")

    QuakeTool.add_standard_arguments(parser)
    args = parser.parse_args(argv)

    try:
        config = KillReport.load_config(args.profile)

        # Command line flags override the profile
        report_config = config.setdefault('report', {})
        if args.flush_trailing is not None:
            report_config['flush_trailing_match'] = args.flush_trailing
        if args.missing_names is not None:
            report_config['missing_names'] = args.missing_names

        tool = KillReport(config)
        result = tool.run(args.log_file, output=args.output, excel=args.excel)

        if args.console:
            logger.info(f"Kill report completed: {result}")

        return 0 if result["success"] else 1

    except FileNotFoundError as e:
        logger.error(f"Cannot read log file: {e}")
        return 1
    except MissingPlayerName as e:
        logger.error(f"Incomplete log: {e}")
        return 1
    except Exception as e:
        logger.error(f"Error: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
