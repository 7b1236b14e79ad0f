"""
Feline Neuro Diagnosis - Configuration
======================================
Centralised settings for scoring weights, the chat assistant, history
storage and logging. Loads secrets from the project-level .env file.
"""
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Optional

from dotenv import load_dotenv

# ── Paths ───────────────────────────────────────────────────────────────
PROJECT_ROOT = Path(__file__).resolve().parent.parent
PACKAGE_DIR = Path(__file__).resolve().parent
DEFAULT_HISTORY_DIR = Path.home() / ".felineneuro" / "history"

# ── Load .env ───────────────────────────────────────────────────────────
load_dotenv(PROJECT_ROOT / ".env")

VERSION = "1.0.0"

# Engines the service knows how to build
ENGINE_WATERFALL = "waterfall"
ENGINE_FORWARD_CHAINING = "forward_chaining"
AVAILABLE_ENGINES = (ENGINE_WATERFALL, ENGINE_FORWARD_CHAINING)


@dataclass
class WaterfallConfig:
    """Weights for the weighted-scoring waterfall engine."""
    priority_weight: int = 10      # points per priority step below max + 1
    complexity_weight: int = 50    # points per distinct observation field
    min_referenced_fields: int = 1

    # Pathognomonic patterns: rule id -> (bonus, reason)
    specificity_bonuses: Dict[str, tuple] = field(default_factory=lambda: {
        "TRAUMATIC_BRAIN_INJURY": (150, "Trauma + severe seizures (highly specific)"),
        "SADDLE_THROMBUS": (120, "Classic triad (mobility + pain + cold limbs)"),
        "ACUTE_TOXICITY": (110, "Toxicity triad (sudden + seizures + eye signs)"),
        "THIAMINE_DEFICIENCY": (100, "Pathognomonic sign (neck flexion)"),
    })

    # Urgency level value -> boost
    severity_boosts: Dict[str, int] = field(default_factory=lambda: {
        "EMERGENCY": 100,
        "HIGH": 50,
        "MODERATE": 25,
        "LOW": 0,
    })


@dataclass
class ForwardChainingConfig:
    """Limits for the forward-chaining engine."""
    max_iterations: int = 10


@dataclass
class ChatConfig:
    """Configuration for the Gemini chat assistant."""
    api_key: Optional[str] = field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
    )
    model: str = "gemini-2.5-flash"
    temperature: float = 0.7
    max_output_tokens: int = 512
    request_timeout_seconds: int = 30
    max_retries: int = 2


@dataclass
class Settings:
    """Top-level application settings."""
    default_engine: str = field(
        default_factory=lambda: os.getenv("FELINE_DEFAULT_ENGINE", ENGINE_WATERFALL)
    )
    history_dir: Path = field(
        default_factory=lambda: Path(os.getenv("FELINE_HISTORY_DIR", str(DEFAULT_HISTORY_DIR)))
    )
    history_enabled: bool = field(
        default_factory=lambda: os.getenv("FELINE_HISTORY_ENABLED", "true").lower() != "false"
    )
    log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE") or None)

    waterfall: WaterfallConfig = field(default_factory=WaterfallConfig)
    forward_chaining: ForwardChainingConfig = field(default_factory=ForwardChainingConfig)
    chat: ChatConfig = field(default_factory=ChatConfig)

    def __post_init__(self):
        if self.default_engine not in AVAILABLE_ENGINES:
            self.default_engine = ENGINE_WATERFALL
        self.history_dir = Path(self.history_dir)


def get_settings() -> Settings:
    """Build settings from the current environment."""
    return Settings()
