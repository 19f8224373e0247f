"""Plan rendering: PowerShell job scripts and terminal/JSON formatting."""

from batch_encoder.render.formatters import (
    OutputStyle,
    descriptor_to_dict,
    format_descriptor_human,
    format_plan_human,
    plan_to_dict,
)
from batch_encoder.render.powershell import (
    PowerShellRenderer,
    quote_arg,
    to_windows_path,
)

__all__ = [
    "OutputStyle",
    "PowerShellRenderer",
    "descriptor_to_dict",
    "format_descriptor_human",
    "format_plan_human",
    "plan_to_dict",
    "quote_arg",
    "to_windows_path",
]
