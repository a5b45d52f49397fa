"""
Response envelope for the agent-first CLI.
Every command prints one JSON object: the result payload plus the
follow-up commands an agent can run next.
"""

import json
import sys
from dataclasses import dataclass, asdict
from typing import Any, Dict, List, Optional, TextIO

import numpy as np

from settings import CLI_NAME


@dataclass(frozen=True)
class NextAction:
    """A suggested follow-up command."""
    command: str
    description: str


COMMON_ACTIONS = {
    "ROOT": NextAction(CLI_NAME, "Show available commands"),
    "STATUS": NextAction(f"{CLI_NAME} status", "View today's health overview"),
    "HRV": NextAction(f"{CLI_NAME} hrv", "View HRV trends"),
    "SLEEP": NextAction(f"{CLI_NAME} sleep", "View sleep analysis"),
    "ALERTS": NextAction(f"{CLI_NAME} alert", "Check health alerts"),
    "IMPORT": NextAction(f"{CLI_NAME} import <file>", "Import Apple Health data"),
}


class NumpyJSONEncoder(json.JSONEncoder):
    """Custom JSON encoder that handles numpy types."""
    def default(self, obj):
        if isinstance(obj, np.integer):
            return int(obj)
        elif isinstance(obj, np.floating):
            return float(obj)
        elif isinstance(obj, np.ndarray):
            return obj.tolist()
        elif isinstance(obj, np.bool_):
            return bool(obj)
        return super().default(obj)


def _full_command(command: str) -> str:
    return f"{CLI_NAME} {command}".strip()


def success(command: str, result: Any, next_actions: List[NextAction]) -> Dict[str, Any]:
    """Build a success envelope."""
    return {
        "ok": True,
        "command": _full_command(command),
        "result": result,
        "next_actions": [asdict(action) for action in next_actions]
    }


def error(command: str, message: str, code: str, fix: str,
          next_actions: List[NextAction]) -> Dict[str, Any]:
    """Build a failure envelope."""
    return {
        "ok": False,
        "command": _full_command(command),
        "error": {
            "message": message,
            "code": code
        },
        "fix": fix,
        "next_actions": [asdict(action) for action in next_actions]
    }


def emit(response: Dict[str, Any], stream: Optional[TextIO] = None) -> int:
    """
    Write the envelope as JSON.

    Returns:
        Process exit code: 0 for success envelopes, 1 for failures.
    """
    stream = stream or sys.stdout
    stream.write(json.dumps(response, indent=2, ensure_ascii=False, cls=NumpyJSONEncoder))
    stream.write("\n")
    return 0 if response.get("ok") else 1
