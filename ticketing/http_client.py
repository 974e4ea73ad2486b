import json
from typing import Any, Optional
from urllib import parse, request
from urllib.error import HTTPError, URLError


def post_json(
    url: str,
    payload: dict,
    headers: Optional[dict[str, str]] = None,
    query: Optional[dict[str, str]] = None,
    timeout: int = 20,
) -> Any:
    if query:
        url = f"{url}?{parse.urlencode(query)}"
    data = json.dumps(payload, ensure_ascii=False).encode("utf-8")
    req = request.Request(
        url,
        data=data,
        headers={"Content-Type": "application/json", **(headers or {})},
        method="POST",
    )
    try:
        with request.urlopen(req, timeout=timeout) as resp:
            raw = resp.read().decode("utf-8")
            return json.loads(raw) if raw.strip() else {}
    except HTTPError as exc:
        body = exc.read().decode("utf-8") if exc.fp else ""
        raise RuntimeError(f"HTTP {exc.code} calling {url}: {body}") from exc
    except URLError as exc:
        raise ConnectionError(f"Cannot reach {url}: {exc.reason}") from exc
