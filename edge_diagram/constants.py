# edge_diagram/constants.py
from __future__ import annotations

# Every generated diagram is a top-down Mermaid flowchart.
FLOWCHART_HEADER = "flowchart TD"

FORWARD_ARROW = "->"
BACKWARD_ARROW = "<-"
BIDIRECTIONAL_ARROW = "<->"

CACHE_SIZE_DEFAULT = 20
DEBOUNCE_SECONDS_DEFAULT = 0.1
RENDER_TIMEOUT_SECONDS_DEFAULT = 10.0

MMDC_COMMAND_DEFAULT = "mmdc"
MMDC_SCALE_DEFAULT = 20
MMDC_BACKGROUND_DEFAULT = "transparent"

OUTPUT_FORMATS: tuple[str, ...] = ("png", "mmd", "md")
OUTPUT_FORMAT_DEFAULT = "png"
