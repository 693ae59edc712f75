"""
CSV formatter for Unix-friendly output
"""

import csv
import io
from typing import Any, List

from pullchain.cli.formatters.base import BaseFormatter


class CSVFormatter(BaseFormatter):
    """Format values as a single-column CSV"""

    def format(self, values: List[Any], **kwargs) -> str:
        """
        Format values as CSV

        Args:
            values: Pipeline output
            **kwargs: Options like 'column', 'header', 'quote_all'

        Returns:
            CSV string
        """
        if not values:
            return ""

        output = io.StringIO()
        writer = csv.writer(
            output,
            quoting=csv.QUOTE_MINIMAL if not kwargs.get("quote_all") else csv.QUOTE_ALL,
            lineterminator="\n",
        )

        if kwargs.get("header", True):
            writer.writerow([kwargs.get("column", "value")])
        writer.writerows([v] for v in values)

        return output.getvalue()
