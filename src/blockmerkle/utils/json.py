import json
from typing import Any, Optional


def json_dumps(obj: Any, indent: Optional[int] = None) -> str:
    if indent is not None:
        return json.dumps(obj, indent=indent, ensure_ascii=False)
    return json.dumps(obj, separators=(",", ":"), ensure_ascii=False)


def json_loads(s: str) -> Any:
    return json.loads(s)
