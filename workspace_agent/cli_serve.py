import argparse
import os

import uvicorn


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="workspace-agent-serve", description="Serve the workspace agent HTTP API"
    )
    parser.add_argument("--host", default=os.getenv("HOST", "127.0.0.1"))
    parser.add_argument("--port", type=int, default=int(os.getenv("PORT", "8000")))
    parser.add_argument(
        "--reload",
        action="store_true",
        default=os.getenv("RELOAD", "0") in {"1", "true", "True"},
        help="Reload on code changes (development)",
    )
    parser.add_argument(
        "--root", help="Project root to serve (defaults to AGENT_WORKSPACE_ROOT or cwd)"
    )
    args = parser.parse_args(argv)

    if args.root:
        # Settings are read from the environment when the app starts
        os.environ["AGENT_WORKSPACE_ROOT"] = os.path.abspath(args.root)

    uvicorn.run("workspace_agent.main:app", host=args.host, port=args.port, reload=args.reload)  # type: ignore[arg-type]
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
