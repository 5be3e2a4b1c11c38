from __future__ import annotations
"""
dac.config: configuration for the DAC governance core

Covers:
- Donation rules (minimum accepted donation)
- Proposal rules (voting-window bounds, description length)
- Treasury identity (the principal that pays out on execution)

Environment overrides (all optional; sensible defaults provided):

  # Donations (base units)
  DAC_MIN_DONATION=1

  # Proposals (blocks; characters)
  DAC_MIN_DURATION_BLOCKS=0
  DAC_MAX_DURATION_BLOCKS=          # empty = unbounded
  DAC_MAX_DESCRIPTION_LEN=500

  # Treasury
  DAC_TREASURY_PRINCIPAL=dac-treasury

You can also load from a JSON or YAML file via `DAC_CONFIG_FILE=/path/to/config.(json|yaml|yml)`.
File values override defaults; environment overrides the file.
"""


from dataclasses import asdict, dataclass, field
from typing import Any, Dict, Optional
import json
import os
from pathlib import Path

import yaml


# -------------------------- Data classes --------------------------


@dataclass
class DonationRules:
    """Donations below `min_donation` are rejected. Zero is never accepted."""
    min_donation: int = 1

    def validate(self) -> None:
        if self.min_donation < 1:
            raise ValueError(f"min_donation must be at least 1 (got {self.min_donation}).")


@dataclass
class ProposalRules:
    """Bounds applied to new proposals before they reach the store."""
    min_duration_blocks: int = 0
    max_duration_blocks: Optional[int] = None  # None = unbounded
    max_description_len: int = 500            # characters

    def validate(self) -> None:
        if self.min_duration_blocks < 0:
            raise ValueError("min_duration_blocks must be non-negative.")
        if self.max_duration_blocks is not None and self.max_duration_blocks < self.min_duration_blocks:
            raise ValueError(
                f"max_duration_blocks ({self.max_duration_blocks}) must be >= "
                f"min_duration_blocks ({self.min_duration_blocks})."
            )
        if self.max_description_len <= 0:
            raise ValueError("max_description_len must be positive.")


@dataclass
class TreasuryConfig:
    """Identity of the treasury account used as the sender of payouts."""
    principal: str = "dac-treasury"

    def validate(self) -> None:
        if not self.principal or not self.principal.strip():
            raise ValueError("treasury principal must be a non-empty string.")


@dataclass
class DACConfig:
    """Top-level configuration container."""
    donations: DonationRules = field(default_factory=DonationRules)
    proposals: ProposalRules = field(default_factory=ProposalRules)
    treasury: TreasuryConfig = field(default_factory=TreasuryConfig)

    def validate(self) -> None:
        self.donations.validate()
        self.proposals.validate()
        self.treasury.validate()

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# -------------------------- Loaders --------------------------


def _getenv_int(name: str, default: int) -> int:
    v = os.getenv(name)
    if v is None or v == "":
        return default
    try:
        return int(str(v).replace("_", ""))
    except ValueError as e:
        raise ValueError(f"Invalid int for {name}: {v!r}") from e


def _getenv_opt_int(name: str, default: Optional[int]) -> Optional[int]:
    v = os.getenv(name)
    if v is None:
        return default
    if v.strip() == "" or v.strip().lower() in ("none", "unbounded"):
        return None
    return _getenv_int(name, 0)


def from_env(base: Optional[DACConfig] = None, prefix: str = "DAC_") -> DACConfig:
    """
    Build a DACConfig from environment variables, optionally layering on top of `base`.
    """
    cfg = base or DACConfig()

    min_donation = _getenv_int(f"{prefix}MIN_DONATION", cfg.donations.min_donation)

    min_dur = _getenv_int(f"{prefix}MIN_DURATION_BLOCKS", cfg.proposals.min_duration_blocks)
    max_dur = _getenv_opt_int(f"{prefix}MAX_DURATION_BLOCKS", cfg.proposals.max_duration_blocks)
    max_desc = _getenv_int(f"{prefix}MAX_DESCRIPTION_LEN", cfg.proposals.max_description_len)

    principal = os.getenv(f"{prefix}TREASURY_PRINCIPAL") or cfg.treasury.principal

    new_cfg = DACConfig(
        donations=DonationRules(min_donation=min_donation),
        proposals=ProposalRules(
            min_duration_blocks=min_dur,
            max_duration_blocks=max_dur,
            max_description_len=max_desc,
        ),
        treasury=TreasuryConfig(principal=principal),
    )
    new_cfg.validate()
    return new_cfg


def from_file(path: str | os.PathLike[str]) -> DACConfig:
    """
    Load configuration from a JSON or YAML file.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(p)

    text = p.read_text(encoding="utf-8")
    if p.suffix.lower() in (".yaml", ".yml"):
        data = yaml.safe_load(text) or {}
    else:
        data = json.loads(text or "{}")

    donations = data.get("donations", {})
    proposals = data.get("proposals", {})
    treasury = data.get("treasury", {})

    cfg = DACConfig(
        donations=DonationRules(
            min_donation=donations.get("min_donation", DonationRules().min_donation),
        ),
        proposals=ProposalRules(
            min_duration_blocks=proposals.get("min_duration_blocks", ProposalRules().min_duration_blocks),
            max_duration_blocks=proposals.get("max_duration_blocks", ProposalRules().max_duration_blocks),
            max_description_len=proposals.get("max_description_len", ProposalRules().max_description_len),
        ),
        treasury=TreasuryConfig(
            principal=treasury.get("principal", TreasuryConfig().principal),
        ),
    )
    cfg.validate()
    return cfg


def load() -> DACConfig:
    """
    Load configuration using the following precedence:
      1) File at $DAC_CONFIG_FILE (JSON/YAML)
      2) Environment variables (DAC_*), applied on top of defaults or file values
    """
    file_path = os.getenv("DAC_CONFIG_FILE")
    base = from_file(file_path) if file_path else DACConfig()
    return from_env(base=base)


# -------------------------- Utilities --------------------------


def pretty(cfg: Optional[DACConfig] = None) -> str:
    """Return a human-readable JSON string of the current config."""
    obj = (cfg or load()).to_dict()
    return json.dumps(obj, indent=2, sort_keys=True)


__all__ = [
    "DonationRules",
    "ProposalRules",
    "TreasuryConfig",
    "DACConfig",
    "from_env",
    "from_file",
    "load",
    "pretty",
]
