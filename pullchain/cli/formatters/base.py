"""
Base formatter interface for CLI output

All formatters must implement the format() method.
"""

from typing import Any, List


class BaseFormatter:
    """Base class for all output formatters"""

    def format(self, values: List[Any], **kwargs) -> str:
        """
        Format materialized pipeline output

        Args:
            values: Values in the order the pipeline produced them
            **kwargs: Additional formatter-specific options
                (every formatter accepts 'column', the header name)

        Returns:
            Formatted string ready for output
        """
        raise NotImplementedError("Formatters must implement format() method")

    def get_name(self) -> str:
        """Get formatter name"""
        return self.__class__.__name__.replace("Formatter", "").lower()
