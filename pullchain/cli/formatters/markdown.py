"""
Markdown formatter for documentation and sharing
"""

from typing import Any, List

from pullchain.cli.formatters.base import BaseFormatter


class MarkdownFormatter(BaseFormatter):
    """Format values as a Markdown table"""

    def format(self, values: List[Any], **kwargs) -> str:
        """
        Format values as a Markdown table

        Args:
            values: Pipeline output
            **kwargs: Options like 'column', 'show_footer', 'align'

        Returns:
            Markdown formatted table string
        """
        if not values:
            return "_No results found._"

        column = kwargs.get("column", "value")
        align = kwargs.get("align", "right")
        separator = {"center": ":---:", "left": ":---"}.get(align, "---:")

        lines = [f"| # | {column} |", f"| ---: | {separator} |"]
        for index, val in enumerate(values, start=1):
            if val is None:
                cell = "_None_"
            else:
                # Escape pipe characters
                cell = str(val).replace("|", "\\|")
            lines.append(f"| {index} | {cell} |")

        output = "\n".join(lines)

        if kwargs.get("show_footer", True):
            count = len(values)
            output += f"\n\n_{count} value{'s' if count != 1 else ''}_"

        return output
