# python main.py [service_name]
# Starts one backend service with uvicorn (default: sos)
import sys

import uvicorn

from common.constants import SERVICES


def run(service_name: str = "sos") -> None:
    if service_name not in SERVICES:
        raise SystemExit(f"Unknown service '{service_name}'. Available: {', '.join(SERVICES)}")
    module_path, port = SERVICES[service_name]
    uvicorn.run(f"{module_path}:app", host="0.0.0.0", port=port)


if __name__ == "__main__":
    run(*sys.argv[1:2])
