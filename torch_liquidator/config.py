"""Configuration loader: reads config.yaml, interpolates env vars, validates."""
from __future__ import annotations

import logging
import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from .utils import LAMPORTS_PER_SOL

logger = logging.getLogger(__name__)

EXECUTION_STRATEGIES = ("sequential", "bounded_parallel")

# ---------------------------------------------------------------------------
# Frozen config dataclasses
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class MonitorConfig:
    scan_interval_seconds: float = 60.0
    score_interval_seconds: float = 15.0
    min_profit_sol: float = 0.01
    risk_threshold: int = 60
    price_history_depth: int = 20
    token_scan_limit: int = 50
    borrower_scan_limit: int = 100

    @property
    def min_profit_lamports(self) -> int:
        return int(self.min_profit_sol * LAMPORTS_PER_SOL)


@dataclass(frozen=True)
class CacheConfig:
    profile_cooldown_seconds: float = 300.0
    max_age_seconds: float = 1800.0
    max_size: int = 1000


@dataclass(frozen=True)
class ExecutionConfig:
    strategy: str = "sequential"
    max_in_flight: int = 1


@dataclass(frozen=True)
class ChainConfig:
    rpc_endpoints: tuple[str, ...] = ()
    rpc_timeout: int = 30


@dataclass(frozen=True)
class VenueConfig:
    gateway_endpoints: tuple[str, ...] = ()
    gateway_timeout: int = 30


@dataclass(frozen=True)
class WatchConfig:
    wallet_address: str = ""
    poll_interval_seconds: float = 15.0
    auto_repay: bool = False


@dataclass(frozen=True)
class TelegramConfig:
    enabled: bool = False
    alert_bot_token: str = ""
    log_bot_token: str = ""
    chat_id: str = ""


@dataclass(frozen=True)
class NotificationsConfig:
    telegram: TelegramConfig = field(default_factory=TelegramConfig)


@dataclass(frozen=True)
class AppConfig:
    monitor: MonitorConfig = field(default_factory=MonitorConfig)
    cache: CacheConfig = field(default_factory=CacheConfig)
    execution: ExecutionConfig = field(default_factory=ExecutionConfig)
    chain: ChainConfig = field(default_factory=ChainConfig)
    venue: VenueConfig = field(default_factory=VenueConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    notifications: NotificationsConfig = field(default_factory=NotificationsConfig)


# ---------------------------------------------------------------------------
# Env interpolation
# ---------------------------------------------------------------------------

_ENV_VAR_RE = re.compile(r"\$\{([^}]+)}")


def _interpolate_env(value: Any) -> Any:
    """Recursively replace ${VAR} references with environment variable values."""
    if isinstance(value, str):
        return _ENV_VAR_RE.sub(lambda m: os.environ.get(m.group(1), ""), value)
    if isinstance(value, dict):
        return {k: _interpolate_env(v) for k, v in value.items()}
    if isinstance(value, list):
        return [_interpolate_env(item) for item in value]
    return value


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


# ---------------------------------------------------------------------------
# YAML → dataclass builders
# ---------------------------------------------------------------------------


def _build_monitor(raw: dict[str, Any]) -> MonitorConfig:
    return MonitorConfig(
        scan_interval_seconds=float(raw.get("scan_interval_seconds", 60.0)),
        score_interval_seconds=float(raw.get("score_interval_seconds", 15.0)),
        min_profit_sol=float(raw.get("min_profit_sol", 0.01)),
        risk_threshold=int(raw.get("risk_threshold", 60)),
        price_history_depth=int(raw.get("price_history_depth", 20)),
        token_scan_limit=int(raw.get("token_scan_limit", 50)),
        borrower_scan_limit=int(raw.get("borrower_scan_limit", 100)),
    )


def _build_cache(raw: dict[str, Any]) -> CacheConfig:
    return CacheConfig(
        profile_cooldown_seconds=float(raw.get("profile_cooldown_seconds", 300.0)),
        max_age_seconds=float(raw.get("max_age_seconds", 1800.0)),
        max_size=int(raw.get("max_size", 1000)),
    )


def _build_execution(raw: dict[str, Any]) -> ExecutionConfig:
    return ExecutionConfig(
        strategy=str(raw.get("strategy", "sequential")),
        max_in_flight=int(raw.get("max_in_flight", 1)),
    )


def _build_chain(raw: dict[str, Any]) -> ChainConfig:
    return ChainConfig(
        rpc_endpoints=tuple(e for e in raw.get("rpc_endpoints", []) if e),
        rpc_timeout=int(raw.get("rpc_timeout", 30)),
    )


def _build_venue(raw: dict[str, Any]) -> VenueConfig:
    return VenueConfig(
        gateway_endpoints=tuple(e for e in raw.get("gateway_endpoints", []) if e),
        gateway_timeout=int(raw.get("gateway_timeout", 30)),
    )


def _build_watch(raw: dict[str, Any]) -> WatchConfig:
    return WatchConfig(
        wallet_address=raw.get("wallet_address", ""),
        poll_interval_seconds=float(raw.get("poll_interval_seconds", 15.0)),
        auto_repay=_as_bool(raw.get("auto_repay", False)),
    )


def _build_notifications(raw: dict[str, Any]) -> NotificationsConfig:
    tg = raw.get("telegram", {})
    return NotificationsConfig(
        telegram=TelegramConfig(
            enabled=_as_bool(tg.get("enabled", False)),
            alert_bot_token=tg.get("alert_bot_token", ""),
            log_bot_token=tg.get("log_bot_token", ""),
            chat_id=str(tg.get("chat_id", "")),
        ),
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def load_config(config_path: str | Path | None = None) -> AppConfig:
    """Load and validate application configuration from YAML + .env.

    Args:
        config_path: Path to config.yaml. Defaults to ``config.yaml`` in the
            project root (one level up from this package).
    """
    load_dotenv()

    if config_path is None:
        config_path = Path(__file__).resolve().parent.parent / "config.yaml"
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    raw = _interpolate_env(raw)

    cfg = AppConfig(
        monitor=_build_monitor(raw.get("monitor", {})),
        cache=_build_cache(raw.get("cache", {})),
        execution=_build_execution(raw.get("execution", {})),
        chain=_build_chain(raw.get("chain", {})),
        venue=_build_venue(raw.get("venue", {})),
        watch=_build_watch(raw.get("watch", {})),
        notifications=_build_notifications(raw.get("notifications", {})),
    )

    _validate(cfg)
    logger.info("Configuration loaded from %s", config_path)
    return cfg


def _validate(cfg: AppConfig) -> None:
    """Raise on invalid configuration."""
    mon = cfg.monitor
    if mon.scan_interval_seconds < 1:
        raise ValueError("monitor.scan_interval_seconds must be >= 1")
    if mon.score_interval_seconds < 1:
        raise ValueError("monitor.score_interval_seconds must be >= 1")
    if not 0 <= mon.risk_threshold <= 100:
        raise ValueError("monitor.risk_threshold must be 0-100")
    if mon.price_history_depth < 2:
        raise ValueError("monitor.price_history_depth must be >= 2")
    if mon.min_profit_sol < 0:
        raise ValueError("monitor.min_profit_sol must be >= 0")
    if mon.token_scan_limit < 1 or mon.borrower_scan_limit < 1:
        raise ValueError("monitor scan limits must be >= 1")

    if cfg.cache.profile_cooldown_seconds <= 0 or cfg.cache.max_age_seconds <= 0:
        raise ValueError("cache ages must be > 0")
    if cfg.cache.max_size < 1:
        raise ValueError("cache.max_size must be >= 1")

    if cfg.execution.strategy not in EXECUTION_STRATEGIES:
        raise ValueError(
            f"execution.strategy must be one of: {', '.join(EXECUTION_STRATEGIES)}"
        )
    if cfg.execution.max_in_flight < 1:
        raise ValueError("execution.max_in_flight must be >= 1")

    if not cfg.chain.rpc_endpoints:
        raise ValueError("At least one chain RPC endpoint must be configured")
    if not cfg.venue.gateway_endpoints:
        raise ValueError("At least one venue gateway endpoint must be configured")

    if cfg.watch.poll_interval_seconds < 1:
        raise ValueError("watch.poll_interval_seconds must be >= 1")
