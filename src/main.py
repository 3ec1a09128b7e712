from __future__ import annotations

import argparse
import logging
import sys

from pearlwash.cli import print_order_details, run_cli
from pearlwash.client import ApiClient, TransportFailure
from pearlwash.config import ConfigError, load_config
from pearlwash.context import build_context, open_store
from pearlwash.db import DbError
from pearlwash.domain import InvalidInput
from pearlwash.importers import SeedImportError, import_customers_csv, import_seed_json
from pearlwash.repositories.customer_repo import CustomerRepository
from pearlwash.services.tracking_service import parse_order_id
from pearlwash.store import RecordNotFound
from web_app import create_app


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="PearlWash laundry booking service.")
    parser.add_argument("--config", default="config.toml", help="Path to config TOML (default: config.toml)")
    sub = parser.add_subparsers(dest="command")

    sub.add_parser("cli", help="Interactive menu against the configured store (default)")
    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", help="Bind address (default: [server] host)")
    serve.add_argument("--port", type=int, help="Port (default: [server] port)")

    seed = sub.add_parser("import-seed", help="Load a db.json style file into the store")
    seed.add_argument("path")
    customers = sub.add_parser("import-customers", help="Load customers from a CSV file")
    customers.add_argument("path")

    track = sub.add_parser("track", help="Look up an order through a running API")
    track.add_argument("order_id")
    track.add_argument("--base-url", help="API base URL (default: [api] base_url)")
    return parser


def _track_remote(client: ApiClient, raw: str) -> int:
    try:
        order = client.get_order(parse_order_id(raw))
    except InvalidInput as e:
        print(f"[INPUT ERROR] {e}")
        return 1
    except RecordNotFound:
        print("Order not found. Please check your order ID.")
        return 1
    except TransportFailure:
        print("Could not reach the booking service. Please try again.")
        return 1
    print_order_details(order)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    command = args.command or "cli"
    try:
        cfg = load_config(args.config)
        logging.basicConfig(
            level=getattr(logging, cfg.log_level, logging.INFO),
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )

        if command == "track":
            client = ApiClient(args.base_url or cfg.api.base_url, timeout=cfg.api.timeout)
            return _track_remote(client, args.order_id)

        if command == "serve":
            app = create_app(cfg)
            app.run(
                host=args.host or cfg.server.host,
                port=args.port or cfg.server.port,
                debug=cfg.server.debug,
            )
            return 0

        store = open_store(cfg)
        if command == "import-seed":
            counts = import_seed_json(args.path, store)
            print("Imported: " + ", ".join(f"{k}={v}" for k, v in counts.items()))
            return 0
        if command == "import-customers":
            n = import_customers_csv(args.path, CustomerRepository(store))
            print(f"Imported customers: {n}")
            return 0

        run_cli(build_context(cfg, store))
        return 0
    except ConfigError as e:
        print(f"[CONFIG ERROR] {e}")
        return 2
    except DbError as e:
        print(f"[DB ERROR] {e}")
        return 3
    except SeedImportError as e:
        print(f"[IMPORT ERROR] {e}")
        return 4
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130


if __name__ == "__main__":
    raise SystemExit(main(sys.argv[1:]))
