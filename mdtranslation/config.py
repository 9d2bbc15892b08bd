"""
Configuration for mdtranslation.

Loads ``mdtranslation.yaml`` (searched upward from the working directory)
with environment variable overrides, and keeps a lazily-loaded global
instance.

Author: Olivier Vitrac, PhD, HDR | olivier.vitrac@adservio.fr | Adservio | 2026-10-19
"""

import os
import yaml
import logging
from pathlib import Path
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "mdtranslation.yaml"
DEFAULT_SOURCE_LANGUAGE = "en-US"
DEFAULT_PLUGINS = ["strikethrough", "footnotes", "table", "task_lists"]

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
VALID_BULLETS = ("-", "*", "+")
VALID_EMPHASIS = ("*", "_")
VALID_STRONG = ("**", "__")
VALID_CODE_FENCES = ("```", "~~~")
VALID_RULES = ("***", "---", "___")


@dataclass
class TokenizerConfig:
    """mistune parsing options."""
    plugins: List[str] = field(default_factory=lambda: list(DEFAULT_PLUGINS))


@dataclass
class SegmentationConfig:
    """Sentence segmentation options."""
    skip_code_blocks: bool = False          # Leave code block leaves unsegmented


@dataclass
class RenderConfig:
    """Markdown output style."""
    bullet: str = "-"
    emphasis: str = "*"
    strong: str = "**"
    code_fence: str = "```"
    rule: str = "***"


@dataclass
class TranslationConfig:
    """
    Top-level configuration.

    Combines tokenizer, segmentation and render sub-configurations.
    """
    source_language: str = DEFAULT_SOURCE_LANGUAGE
    log_level: str = "WARNING"

    # Sub-configs
    tokenizer: TokenizerConfig = field(default_factory=TokenizerConfig)
    segmentation: SegmentationConfig = field(default_factory=SegmentationConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "source_language": self.source_language,
            "log_level": self.log_level,
            "tokenizer": {
                "plugins": list(self.tokenizer.plugins),
            },
            "segmentation": {
                "skip_code_blocks": self.segmentation.skip_code_blocks,
            },
            "render": {
                "bullet": self.render.bullet,
                "emphasis": self.render.emphasis,
                "strong": self.render.strong,
                "code_fence": self.render.code_fence,
                "rule": self.render.rule,
            },
        }

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TranslationConfig":
        tokenizer_d = d.get("tokenizer") or {}
        segmentation_d = d.get("segmentation") or {}
        render_d = d.get("render") or {}
        return cls(
            source_language=str(d.get("source_language", DEFAULT_SOURCE_LANGUAGE)),
            log_level=str(d.get("log_level", "WARNING")),
            tokenizer=TokenizerConfig(
                plugins=list(tokenizer_d.get("plugins", DEFAULT_PLUGINS)),
            ),
            segmentation=SegmentationConfig(
                skip_code_blocks=bool(segmentation_d.get("skip_code_blocks", False)),
            ),
            render=RenderConfig(
                bullet=render_d.get("bullet", "-"),
                emphasis=render_d.get("emphasis", "*"),
                strong=render_d.get("strong", "**"),
                code_fence=render_d.get("code_fence", "```"),
                rule=render_d.get("rule", "***"),
            ),
        )


# =============================================================================
# Configuration Loader
# =============================================================================

def find_config_file(start_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find mdtranslation.yaml by searching upward from start_path.

    Search order:
    1. start_path / mdtranslation.yaml
    2. start_path / .mdtranslation / mdtranslation.yaml
    3. Parent directories (recursive)
    4. ~/.config/mdtranslation/mdtranslation.yaml

    Args:
        start_path: Starting directory (defaults to cwd)

    Returns:
        Path to config file or None if not found
    """
    if start_path is None:
        start_path = Path.cwd()

    current = Path(start_path).resolve()
    while True:
        for candidate in (current / CONFIG_FILENAME, current / ".mdtranslation" / CONFIG_FILENAME):
            if candidate.exists():
                return candidate
        parent = current.parent
        if parent == current:
            break
        current = parent

    user_config = Path.home() / ".config" / "mdtranslation" / CONFIG_FILENAME
    if user_config.exists():
        return user_config

    return None


def load_config(config_path: Optional[Path] = None) -> TranslationConfig:
    """
    Load configuration from YAML file with environment variable overrides.

    Environment variables override config file values:
    - MDTRANSLATION_SOURCE_LANGUAGE -> source_language
    - MDTRANSLATION_LOG_LEVEL -> log_level
    - MDTRANSLATION_PLUGINS -> tokenizer.plugins (comma separated)

    Args:
        config_path: Path to config file (auto-detected if None)

    Returns:
        TranslationConfig instance
    """
    config = TranslationConfig()

    if config_path is None:
        config_path = find_config_file()
    else:
        config_path = Path(config_path)

    if config_path and config_path.exists():
        logger.info(f"Loading config from: {config_path}")
        try:
            with open(config_path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise ValueError(f"expected a mapping, got {type(data).__name__}")
            config = TranslationConfig.from_dict(data)
        except (OSError, yaml.YAMLError, ValueError, TypeError) as e:
            logger.warning(f"Failed to load config: {e}, using defaults")
    elif config_path:
        logger.warning(f"Config file not found: {config_path}, using defaults")
    else:
        logger.info("No config file found, using defaults")

    config = _apply_env_overrides(config)
    _validate_config(config)
    return config


def _apply_env_overrides(config: TranslationConfig) -> TranslationConfig:
    """Apply environment variable overrides to config."""
    if os.environ.get("MDTRANSLATION_SOURCE_LANGUAGE"):
        config.source_language = os.environ["MDTRANSLATION_SOURCE_LANGUAGE"]

    if os.environ.get("MDTRANSLATION_LOG_LEVEL"):
        config.log_level = os.environ["MDTRANSLATION_LOG_LEVEL"]

    if os.environ.get("MDTRANSLATION_PLUGINS") is not None:
        raw = os.environ["MDTRANSLATION_PLUGINS"]
        config.tokenizer.plugins = [p.strip() for p in raw.split(",") if p.strip()]

    return config


def _validate_config(config: TranslationConfig) -> None:
    """Validate configuration and log warnings."""
    config.log_level = config.log_level.upper()
    if config.log_level not in VALID_LOG_LEVELS:
        logger.warning(f"Unknown log level '{config.log_level}', defaulting to 'WARNING'")
        config.log_level = "WARNING"

    if not config.source_language.strip():
        logger.warning(f"Empty source language, defaulting to '{DEFAULT_SOURCE_LANGUAGE}'")
        config.source_language = DEFAULT_SOURCE_LANGUAGE

    unknown = [p for p in config.tokenizer.plugins if p not in DEFAULT_PLUGINS]
    if unknown:
        logger.warning(f"Unknown tokenizer plugins {unknown}, ignoring them")
        config.tokenizer.plugins = [p for p in config.tokenizer.plugins if p in DEFAULT_PLUGINS]

    render = config.render
    defaults = RenderConfig()
    for name, valid in (
        ("bullet", VALID_BULLETS),
        ("emphasis", VALID_EMPHASIS),
        ("strong", VALID_STRONG),
        ("code_fence", VALID_CODE_FENCES),
        ("rule", VALID_RULES),
    ):
        value = getattr(render, name)
        if value not in valid:
            fallback = getattr(defaults, name)
            logger.warning(f"Unknown render.{name} '{value}', defaulting to '{fallback}'")
            setattr(render, name, fallback)


def save_config(config: TranslationConfig, path: Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: TranslationConfig instance
        path: Output path
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        yaml.dump(config.to_dict(), f, default_flow_style=False, sort_keys=False)

    logger.info(f"Configuration saved to: {path}")


# =============================================================================
# Global Config Instance
# =============================================================================

_global_config: Optional[TranslationConfig] = None


def get_config() -> TranslationConfig:
    """Get the global configuration instance (lazy-loaded)."""
    global _global_config
    if _global_config is None:
        _global_config = load_config()
    return _global_config


def set_config(config: Optional[TranslationConfig]) -> None:
    """Set (or reset with None) the global configuration."""
    global _global_config
    _global_config = config
