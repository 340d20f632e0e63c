# tubetable/__main__.py
from __future__ import annotations

import uvicorn

from tubetable.config import settings


def main() -> int:
    uvicorn.run("tubetable.main:app", host="0.0.0.0", port=int(settings.PORT or 8080))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
