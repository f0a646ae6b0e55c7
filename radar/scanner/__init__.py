"""Scanner: asks the external generator for a fresh batch of records."""

from radar.scanner.extraction import extract_json_array, parse_records
from radar.scanner.generator import AnthropicGenerator, Generator
from radar.scanner.scan import build_prompt, is_scan_running, run_scan

__all__ = [
    "AnthropicGenerator",
    "Generator",
    "build_prompt",
    "extract_json_array",
    "is_scan_running",
    "parse_records",
    "run_scan",
]
