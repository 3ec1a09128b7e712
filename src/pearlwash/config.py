from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

try:
    import tomllib  # py311+
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None

from .domain import TIME_SLOTS

STORE_BACKENDS = ("json", "memory", "postgres")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class DbConfig:
    host: str
    port: int
    name: str
    user: str
    password: str
    sslmode: str = "disable"


@dataclass(frozen=True)
class StoreConfig:
    backend: str = "json"
    path: str = "data/db.json"


@dataclass(frozen=True)
class ServerConfig:
    host: str = "127.0.0.1"
    port: int = 3001
    debug: bool = False


@dataclass(frozen=True)
class ApiConfig:
    base_url: str = "http://localhost:3001"
    timeout: float = 15.0


@dataclass(frozen=True)
class BusinessConfig:
    strict_transitions: bool = False
    time_slots: tuple[str, ...] = TIME_SLOTS


@dataclass(frozen=True)
class AppConfig:
    name: str
    log_level: str
    store: StoreConfig
    db: Optional[DbConfig]
    server: ServerConfig
    api: ApiConfig
    business: BusinessConfig


def default_config() -> AppConfig:
    return AppConfig(
        name="PearlWash",
        log_level="INFO",
        store=StoreConfig(),
        db=None,
        server=ServerConfig(),
        api=ApiConfig(),
        business=BusinessConfig(),
    )


def load_config(path: str | Path) -> AppConfig:
    p = Path(path)
    if not p.exists():
        raise ConfigError(f"Config file not found: {p.resolve()}")

    if tomllib is None:
        raise ConfigError("tomllib not available. Use Python 3.11+.")

    try:
        data = tomllib.loads(p.read_text(encoding="utf-8"))
    except Exception as e:
        raise ConfigError(f"Failed to read config TOML: {e}") from e

    return parse_config(data)


def parse_config(data: dict) -> AppConfig:
    try:
        app = data.get("app", {})
        store = data.get("store", {})
        db = data.get("db")
        server = data.get("server", {})
        api = data.get("api", {})
        business = data.get("business", {})

        store_cfg = StoreConfig(
            backend=str(store.get("backend", "json")).lower(),
            path=str(store.get("path", "data/db.json")),
        )
        if store_cfg.backend not in STORE_BACKENDS:
            raise ConfigError(
                f"Unknown store backend {store_cfg.backend!r}; expected one of {', '.join(STORE_BACKENDS)}"
            )

        db_cfg = None
        if db is not None:
            db_cfg = DbConfig(
                host=str(db["host"]),
                port=int(db.get("port", 5432)),
                name=str(db["name"]),
                user=str(db["user"]),
                password=str(db["password"]),
                sslmode=str(db.get("sslmode", "disable")),
            )
        if store_cfg.backend == "postgres" and db_cfg is None:
            raise ConfigError("The postgres store backend needs a [db] section.")

        slots = business.get("time_slots")
        return AppConfig(
            name=str(app.get("name", "PearlWash")),
            log_level=str(app.get("log_level", "INFO")).upper(),
            store=store_cfg,
            db=db_cfg,
            server=ServerConfig(
                host=str(server.get("host", "127.0.0.1")),
                port=int(server.get("port", 3001)),
                debug=bool(server.get("debug", False)),
            ),
            api=ApiConfig(
                base_url=str(api.get("base_url", "http://localhost:3001")).rstrip("/"),
                timeout=float(api.get("timeout", 15.0)),
            ),
            business=BusinessConfig(
                strict_transitions=bool(business.get("strict_transitions", False)),
                time_slots=tuple(str(s) for s in slots) if slots else TIME_SLOTS,
            ),
        )
    except ConfigError:
        raise
    except KeyError as e:
        raise ConfigError(f"Missing config key: {e}") from e
    except Exception as e:
        raise ConfigError(f"Invalid config values: {e}") from e
