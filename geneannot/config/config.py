"""
Core configuration management for geneannot
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from ..genomics.models import Level, TSSRegion

logger = logging.getLogger(__name__)


@dataclass
class Config:
    """Main configuration class for gene annotation runs"""

    # General settings
    project_name: str = "GeneAnnot_Analysis"
    n_threads: int = 1

    # Input/Output paths
    database: Optional[str] = None
    input_file: Optional[str] = None
    output_file: Optional[str] = None
    output_dir: Optional[str] = None

    # Analysis parameters
    annotation: Dict[str, Any] = field(default_factory=dict)
    batch: Dict[str, Any] = field(default_factory=dict)
    log_config: Dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        """Fill in defaults for any settings not given"""
        # tss_region is merged key by key
        self.annotation = {**self._get_default_annotation(), **self.annotation}
        self.annotation["tss_region"] = {
            **self._get_default_annotation()["tss_region"],
            **(self.annotation.get("tss_region") or {}),
        }
        self.batch = {**self._get_default_batch(), **self.batch}
        self.log_config = {**self._get_default_logging(), **self.log_config}

    def _get_default_annotation(self) -> Dict[str, Any]:
        """Default annotation configuration"""
        return {
            "tss_region": {"offset_5p": 2000, "offset_3p": 1000},
            "n_closest": 10,
            "level": "transcript",
            "closest_level": "gene",
            "max_workers": 1,
        }

    def _get_default_batch(self) -> Dict[str, Any]:
        """Default batch configuration"""
        return {
            "n_jobs": self.n_threads,
            "fail_fast": False,
        }

    def _get_default_logging(self) -> Dict[str, Any]:
        """Default logging configuration"""
        return {
            "level": "INFO",
            "log_file": None,
            "use_colors": True,
        }

    def get_tss_region(self) -> TSSRegion:
        """TSS region built from the annotation settings"""
        tss = self.annotation["tss_region"]
        return TSSRegion(int(tss["offset_5p"]), int(tss["offset_3p"]))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def load_config(config_file: Union[str, Path]) -> Config:
    """Load configuration from YAML or JSON file"""
    config_path = Path(config_file)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    logger.info(f"Loading configuration from {config_path}")

    # Parse by file suffix
    with open(config_path, "r") as f:
        if config_path.suffix.lower() in [".yaml", ".yml"]:
            config_dict = yaml.safe_load(f)
        elif config_path.suffix.lower() == ".json":
            config_dict = json.load(f)
        else:
            raise ValueError(f"Unsupported config file format: {config_path.suffix}")

    return Config(**(config_dict or {}))


def save_config(config: Config, output_file: Union[str, Path]) -> None:
    """Save configuration to YAML or JSON file"""
    output_path = Path(output_file)
    output_path.parent.mkdir(parents=True, exist_ok=True)

    config_dict = config.to_dict()

    with open(output_path, "w") as f:
        if output_path.suffix.lower() == ".json":
            json.dump(config_dict, f, indent=2)
        else:
            yaml.dump(config_dict, f, default_flow_style=False, indent=2)

    logger.info(f"Configuration saved to {output_path}")


def validate_config(config: Config) -> List[str]:
    """Validate configuration and return list of issues"""
    issues = []

    # Input files
    if config.database and not Path(config.database).exists():
        issues.append(f"Gene database does not exist: {config.database}")

    if config.input_file and not Path(config.input_file).exists():
        issues.append(f"Locations file does not exist: {config.input_file}")

    if config.n_threads <= 0:
        issues.append("Number of threads must be positive")

    # Annotation parameters
    tss = config.annotation.get("tss_region", {})
    for key in ["offset_5p", "offset_3p"]:
        value = tss.get(key)
        if not isinstance(value, int) or value < 0:
            issues.append(f"TSS region {key} must be a non-negative integer")

    n_closest = config.annotation.get("n_closest")
    if not isinstance(n_closest, int) or n_closest <= 0:
        issues.append("n_closest must be a positive integer")

    level_names = {level.name.lower() for level in Level}
    for key in ["level", "closest_level"]:
        value = str(config.annotation.get(key, "")).lower()
        if value not in level_names:
            issues.append(f"Annotation {key} must be one of {sorted(level_names)}")

    max_workers = config.annotation.get("max_workers")
    if not isinstance(max_workers, int) or max_workers <= 0:
        issues.append("max_workers must be a positive integer")

    # Batch parameters
    n_jobs = config.batch.get("n_jobs")
    if not isinstance(n_jobs, int) or n_jobs == 0 or n_jobs < -1:
        issues.append("Batch n_jobs must be a positive integer or -1")

    return issues


def get_default_config() -> Config:
    """Get default configuration object"""
    return Config()
