"""
Configuration management for AutoSwap.

Loads settings from a JSON file and environment variables.
"""

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, List, Optional

from autoswap.core.utils import mask_url

DEFAULT_CONFIG_PATH = "config.json"


@dataclass(frozen=True)
class Config:
    """Application configuration. Immutable for the process lifetime."""

    # Network
    rpc_url: Optional[str] = None
    chain_id: int = 0

    # Credentials (never logged)
    private_key: Optional[str] = None

    # Run
    cycle_count: int = 1
    enable_token_recovery: bool = True

    # Swap execution
    max_retries: int = 5
    retry_delay_seconds: float = 5.0
    swap_pause_seconds: float = 10.0
    deadline_minutes: int = 20
    fallback_gas_limit: int = 100_000

    # Approvals (whole tokens)
    approval_threshold: int = 1_000_000

    # Ledger timeouts (seconds)
    receipt_timeout: int = 120
    rpc_timeout: int = 30

    # Daily mode
    daily_cycles: int = 3
    daily_interval_hours: float = 24.0

    config_path: str = DEFAULT_CONFIG_PATH

    @classmethod
    def _load_json(cls, json_path: Path) -> Dict[str, Any]:
        """Load JSON configuration file."""
        if not json_path.exists():
            raise FileNotFoundError(f"Config file not found: {json_path}")

        with open(json_path, 'r') as f:
            return json.load(f)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], **overrides) -> "Config":
        """Build config from the camelCase JSON layout."""
        values = dict(
            rpc_url=data.get("rpcUrl"),
            chain_id=int(data.get("chainId", 0)),
            cycle_count=int(data.get("cycleCount", 1)),
            enable_token_recovery=bool(data.get("enableTokenRecovery", True)),
            max_retries=int(data.get("maxRetries", 5)),
            retry_delay_seconds=float(data.get("retryDelaySeconds", 5.0)),
            swap_pause_seconds=float(data.get("swapPauseSeconds", 10.0)),
            deadline_minutes=int(data.get("deadlineMinutes", 20)),
            fallback_gas_limit=int(data.get("fallbackGasLimit", 100_000)),
            approval_threshold=int(data.get("approvalThreshold", 1_000_000)),
            receipt_timeout=int(data.get("receiptTimeout", 120)),
            rpc_timeout=int(data.get("rpcTimeout", 30)),
            daily_cycles=int(data.get("dailyCycles", 3)),
            daily_interval_hours=float(data.get("dailyIntervalHours", 24.0)),
        )
        values.update(overrides)
        return cls(**values)

    @classmethod
    def from_env(cls, config_path: Optional[str] = None) -> "Config":
        """Load configuration from the JSON file + environment variables."""
        path = config_path or os.getenv("AUTOSWAP_CONFIG", DEFAULT_CONFIG_PATH)
        data = cls._load_json(Path(path))

        overrides = {
            "private_key": os.getenv("PRIVATE_KEY"),
            "config_path": str(path),
        }

        # RPC override lets the same file serve several endpoints
        rpc_override = os.getenv("RPC_URL")
        if rpc_override:
            overrides["rpc_url"] = rpc_override

        return cls.from_dict(data, **overrides)

    def validate(self) -> List[str]:
        """Return a list of configuration problems (empty when usable)."""
        problems = []

        if not self.rpc_url:
            problems.append("rpcUrl is not set")
        if self.chain_id <= 0:
            problems.append("chainId must be a positive integer")
        if not self.private_key:
            problems.append("PRIVATE_KEY is not set in the environment")
        if self.cycle_count <= 0:
            problems.append("cycleCount must be greater than 0")
        if self.max_retries <= 0:
            problems.append("maxRetries must be greater than 0")
        if self.retry_delay_seconds < 0 or self.swap_pause_seconds < 0:
            problems.append("delays cannot be negative")
        if self.daily_cycles <= 0:
            problems.append("dailyCycles must be greater than 0")
        if self.daily_interval_hours <= 0:
            problems.append("dailyIntervalHours must be greater than 0")

        return problems

    @property
    def daily_interval_seconds(self) -> float:
        return self.daily_interval_hours * 3600

    def get_summary(self) -> str:
        """Get a summary of current settings (credentials masked)."""
        return f"""Config: {self.config_path}
Network: Chain ID {self.chain_id}
RPC: {mask_url(self.rpc_url)}
Private Key: {'Loaded' if self.private_key else 'Missing'}

Execution:
  Default Cycles: {self.cycle_count}
  Token Recovery: {'Enabled' if self.enable_token_recovery else 'Disabled'}
  Max Retries: {self.max_retries}
  Retry Delay: {self.retry_delay_seconds:.0f}s
  Pause After Swap: {self.swap_pause_seconds:.0f}s
  Deadline: {self.deadline_minutes} min
  Fallback Gas Limit: {self.fallback_gas_limit:,}

Daily Mode:
  {self.daily_cycles} cycles every {self.daily_interval_hours:g}h
"""
