"""
elfdecode Configuration Management
===================================

Centralized configuration for the elfdecode toolkit using Python
dataclasses and TOML-based persistence.

Configuration is kept out of code: every tunable lives in a dataclass with
a sensible default, and a ``config.toml`` file in the project root (or a
path given on the command line) overrides any subset of it.

References:
    - TOML v1.0.0 Specification. https://toml.io/en/v1.0.0
    - tomllib -- Parse TOML files. https://docs.python.org/3/library/tomllib.html
"""

from __future__ import annotations

import tomllib
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Optional


# ---------------------------------------------------------------------------
# Default configuration file path relative to the project root
# ---------------------------------------------------------------------------
_DEFAULT_CONFIG_PATH: Path = Path(__file__).resolve().parent.parent / "config.toml"

TERMINATION_MODES: tuple[str, ...] = ("sentinel", "count")


# ========================== Decoder Settings ===============================


@dataclass(frozen=False, slots=True)
class DecoderConfig:
    """Configuration for the ELF decoder.

    ``termination`` selects how the program header scan ends: ``"sentinel"``
    stops at the first ``PT_NULL`` entry, ``"count"`` reads exactly the
    number of entries the header declares.
    """

    termination: str = "sentinel"
    max_file_size: int = 52_428_800  # 50 MiB
    decode_program_headers: bool = True


# =========================== Global Settings ===============================


@dataclass(frozen=False, slots=True)
class GlobalConfig:
    """Global settings: logging verbosity, log destination, output directory."""

    log_level: str = "INFO"
    log_file: Optional[str] = None
    log_json: bool = False
    output_dir: str = "output"


# =========================== Master Config =================================


@dataclass(frozen=False, slots=True)
class ElfDecodeConfig:
    """Master configuration aggregating global and decoder settings.

    Usage:
        >>> config = ElfDecodeConfig.load()                  # from default path
        >>> config = ElfDecodeConfig.load("custom.toml")     # from custom path
        >>> print(config.decoder.termination)
        'sentinel'
    """

    global_settings: GlobalConfig = field(default_factory=GlobalConfig)
    decoder: DecoderConfig = field(default_factory=DecoderConfig)

    # ------------------------------------------------------------------ #
    #  TOML Loading
    # ------------------------------------------------------------------ #

    @classmethod
    def load(cls, path: str | Path | None = None) -> ElfDecodeConfig:
        """Load configuration from a TOML file.

        If *path* is ``None`` the loader looks for ``config.toml`` in the
        project root.  Missing keys fall back to dataclass defaults.

        Args:
            path: Filesystem path to a TOML configuration file.

        Returns:
            A fully-populated :class:`ElfDecodeConfig` instance.

        Raises:
            FileNotFoundError: If the specified path does not exist
                *and* was explicitly provided by the caller.
            ValueError: If ``decoder.termination`` is not a known mode.
        """
        config_path = Path(path) if path is not None else _DEFAULT_CONFIG_PATH

        if not config_path.exists():
            if path is not None:
                raise FileNotFoundError(
                    f"Configuration file not found: {config_path}"
                )
            return cls()

        with open(config_path, "rb") as fh:
            raw: dict[str, Any] = tomllib.load(fh)

        config = cls(
            global_settings=cls._build_section(GlobalConfig, raw.get("global", {})),
            decoder=cls._build_section(DecoderConfig, raw.get("decoder", {})),
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Reject settings the decoder cannot honour."""
        if self.decoder.termination not in TERMINATION_MODES:
            raise ValueError(
                f"decoder.termination must be one of {TERMINATION_MODES}, "
                f"got {self.decoder.termination!r}"
            )
        if self.decoder.max_file_size <= 0:
            raise ValueError("decoder.max_file_size must be positive")

    # ------------------------------------------------------------------ #
    #  Serialisation helpers
    # ------------------------------------------------------------------ #

    def to_dict(self) -> dict[str, Any]:
        """Serialise the entire configuration tree to a plain dictionary."""
        return asdict(self)

    @staticmethod
    def _build_section(cls: type, data: dict[str, Any]) -> Any:
        """Instantiate a dataclass *cls* using only the keys it declares.

        Unknown keys in the TOML source are ignored so that
        forward-compatible config files do not break older code.
        """
        valid_keys = {f.name for f in cls.__dataclass_fields__.values()}  # type: ignore[attr-defined]
        filtered = {k: v for k, v in data.items() if k in valid_keys}
        return cls(**filtered)


# ========================= Module-level convenience ========================

def get_config(path: str | Path | None = None) -> ElfDecodeConfig:
    """Module-level convenience wrapper around :meth:`ElfDecodeConfig.load`.

    Caches the result so that repeated calls share one instance.
    """
    if not hasattr(get_config, "_cached") or path is not None:
        get_config._cached = ElfDecodeConfig.load(path)  # type: ignore[attr-defined]
    return get_config._cached  # type: ignore[attr-defined]
