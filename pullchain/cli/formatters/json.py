"""
JSON formatter for machine-readable output
"""

import json
import math
from typing import Any, List

from pullchain.cli.formatters.base import BaseFormatter


class JSONFormatter(BaseFormatter):
    """Format values as a JSON array"""

    def format(self, values: List[Any], **kwargs) -> str:
        """
        Format values as JSON

        Args:
            values: Pipeline output
            **kwargs: Options like 'compact', 'indent'

        Returns:
            JSON string
        """

        # NaN and infinity are not valid JSON (convert to null)
        def clean_value(val):
            if isinstance(val, float):
                if math.isnan(val) or math.isinf(val):
                    return None
            return val

        cleaned = [clean_value(v) for v in values]

        if kwargs.get("compact", False):
            return json.dumps(cleaned, separators=(",", ":"))
        return json.dumps(cleaned, indent=kwargs.get("indent", 2))
