"""Process CLI command — run files through the middleware into an output directory."""

import argparse
from pathlib import Path

from common_middleware.config import load_options
from common_middleware.errors import MiddlewareError
from common_middleware.pipeline import Pipeline
from common_middleware.plugin import middleware
from common_middleware.shared import SharedData


def cmd_process(args: argparse.Namespace) -> int:
    try:
        options = load_options(args.config)
    except (MiddlewareError, OSError) as e:
        print(f"ERROR: {e}")
        return 1

    shared = SharedData()
    app = Pipeline().use(middleware(options, shared))
    out_dir = Path(args.out)

    written = []
    errors = []
    claimed: dict[Path, str] = {}

    for raw in args.files:
        src = Path(raw)
        dest = out_dir / src.name
        if dest in claimed:
            errors.append({
                "path": str(src),
                "error": f"output {dest} already written from {claimed[dest]}",
            })
            continue
        claimed[dest] = str(src)
        try:
            file = app.load(src)
            app.render(file)
            app.write(file, dest, dry_run=args.dry_run)
        except (MiddlewareError, OSError) as e:
            errors.append({"path": str(src), "error": str(e)})
            continue
        written.append(str(dest))

    print("Middleware Process Results")
    print("─" * 40)
    print(f"  Written: {len(written)}")
    if errors:
        print(f"  Errors:  {len(errors)}")
        for e in errors:
            print(f"    - {e['path']}: {e['error']}")
    if len(shared):
        print(f"  Shared data keys: {', '.join(sorted(shared.snapshot()))}")

    if args.dry_run:
        print("\n[DRY RUN] No files were modified.")

    return 1 if errors else 0
