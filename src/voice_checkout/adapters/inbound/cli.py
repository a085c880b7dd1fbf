from __future__ import annotations

import json
from typing import Any, TextIO

from voice_checkout.adapters.inbound.tool_calls import ToolCallDispatcher


def run_cli(
    dispatcher: ToolCallDispatcher,
    session_id: str,
    tool_name: str,
    raw: str,
    out: TextIO | None = None,
) -> int:
    """
    raw: JSON object with the tool arguments.
    Example:
      demo update_order_data '{"cart":[{"menu_item":"Fries","quantity":2}],"confirm":"no"}'
    """
    try:
        payload: Any = json.loads(raw) if raw.strip() else {}
        if not isinstance(payload, dict):
            raise ValueError("arguments must be a JSON object")
    except ValueError as e:
        print(f"invalid_input: {e}", file=out)
        return 2

    result = dispatcher.dispatch(session_id, tool_name, payload)
    tag = "[ok]" if result.get("success") else "[ng]"
    print(tag, json.dumps(result, ensure_ascii=False, indent=2), file=out)
    return 0 if result.get("success") else 1
