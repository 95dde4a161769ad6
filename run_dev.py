#!/usr/bin/env python3
"""
Development server launcher.

Usage:
    python run_dev.py
    python run_dev.py --port 8080
    python run_dev.py --settings settings.dev.yaml
    python run_dev.py --no-scheduler   # API only, no background fetch
    python run_dev.py --reload         # code reload (restarts the fetch scheduler too)
"""

import argparse
import os


def main():
    parser = argparse.ArgumentParser(description="journalfeed dev server")
    parser.add_argument("--host", default="127.0.0.1", help="Host to bind (default: 127.0.0.1)")
    parser.add_argument("--port", type=int, default=8000, help="Port to bind (default: 8000)")
    parser.add_argument("--settings", default=None, help="YAML settings file (default: settings.yaml)")
    parser.add_argument("--no-scheduler", action="store_true", help="Do not start the fetch timer")
    parser.add_argument("--reload", action="store_true", default=False, help="Enable auto-reload")
    parser.add_argument("--log-level", default="info", choices=["debug", "info", "warning", "error"], help="Log level")

    args = parser.parse_args()

    # read by Settings at import time, and inherited by reload workers
    if args.settings:
        os.environ["JOURNALFEED_SETTINGS"] = args.settings
    if args.no_scheduler:
        os.environ["SCHEDULER__ENABLED"] = "false"

    import uvicorn
    from journalfeed.config import Config

    scheduler = "off" if not Config.scheduler.enabled else f"every {Config.scheduler.interval_minutes} min"

    print(f"""
╔══════════════════════════════════════════════════════════════╗
║              📰 journalfeed backend                          ║
╠══════════════════════════════════════════════════════════════╣
║  Host:      {args.host:<47} ║
║  Port:      {args.port:<47} ║
║  Database:  {Config.database_url[:47]:<47} ║
║  Provider:  {Config.ai_provider:<47} ║
║  Scheduler: {scheduler:<47} ║
║  Reload:    {str(args.reload):<47} ║
╠══════════════════════════════════════════════════════════════╣
║  API Docs: http://{args.host}:{args.port}/docs{' ' * 28}║
╚══════════════════════════════════════════════════════════════╝
    """)

    uvicorn.run(
        "main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level,
    )


if __name__ == "__main__":
    main()
