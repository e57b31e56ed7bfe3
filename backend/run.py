"""
Project Renewal Dashboard — development server.

Usage:
    python run.py
    python run.py --port 8000 --reload
"""
import argparse

import uvicorn

from app.config import get_settings


def main():
    settings = get_settings()

    parser = argparse.ArgumentParser(description=settings.APP_NAME)
    parser.add_argument("--host", default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true", help="Restart on code changes")
    parser.add_argument("--log-level", default=settings.LOG_LEVEL.lower())
    args = parser.parse_args()

    # Single process: the initiate rate limiter keeps its counters in memory
    print(f"{settings.APP_NAME} v{settings.APP_VERSION} on http://{args.host}:{args.port} (docs at /docs)")
    if not (settings.RAZORPAY_KEY_ID and settings.RAZORPAY_KEY_SECRET):
        print("Razorpay keys are not set; renewal payments will fail")

    uvicorn.run("app.main:app", host=args.host, port=args.port, reload=args.reload, log_level=args.log_level)


if __name__ == "__main__":
    main()
