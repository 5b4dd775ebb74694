"""
Configuration management for the volfilter package.
Dataclass configuration persisted as JSON or YAML.
"""

from dataclasses import dataclass, field, fields
from typing import Dict, Any, Optional, List
from pathlib import Path
import json
import yaml

from .utils import normalize_radius


@dataclass
class FilterConfig:
    """Neighborhood filter parameters."""
    
    # Neighborhood
    radius: List[int] = field(default_factory=lambda: [1])  # (X[, Y[, Z]]) half-window sizes
    strategy: str = 'local_max'  # 'local_max', 'min', 'max', 'mean', 'median', 'variance', 'std'
    
    # Worker pool
    n_workers: Optional[int] = None  # None means the shared pool sized to the CPU count
    thread_name_prefix: str = 'SelectionFilter'
    
    def validate(self) -> None:
        """Check radius, strategy and worker settings.
        
        Raises:
            ValueError: If any parameter is invalid.
        """
        # late import, the filtering package depends on core
        from ..filtering.strategies import get_strategy
        
        normalize_radius(self.radius)
        get_strategy(self.strategy)
        if self.n_workers is not None and self.n_workers < 1:
            raise ValueError(f"n_workers must be at least 1, got {self.n_workers}")


@dataclass
class IOConfig:
    """Volume reading/writing parameters."""
    
    input_axes: Optional[str] = None  # None means read axes from the TIFF series
    compression: Optional[str] = None  # e.g. 'zlib'; None writes uncompressed
    supported_formats: List[str] = field(default_factory=lambda: ['.tif', '.tiff'])


@dataclass
class LoggingConfig:
    """Logging settings for command line runs."""
    
    verbose: bool = True
    log_level: str = 'INFO'


@dataclass
class Config:
    """Main configuration class combining all sections."""
    
    filter: FilterConfig = field(default_factory=FilterConfig)
    io: IOConfig = field(default_factory=IOConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.
        
        Returns:
            Dict[str, Any]: Configuration as dictionary.
        """
        def config_to_dict(config_obj):
            """Recursively convert dataclass to dictionary."""
            result = {}
            for field_name, field_value in config_obj.__dict__.items():
                if hasattr(field_value, '__dataclass_fields__'):
                    result[field_name] = config_to_dict(field_value)
                elif isinstance(field_value, Path):
                    result[field_name] = str(field_value)
                elif isinstance(field_value, tuple):
                    result[field_name] = list(field_value)
                else:
                    result[field_name] = field_value
            return result
        
        return config_to_dict(self)
    
    def save(self, filepath: Path, format: str = 'auto') -> None:
        """Save configuration to file.
        
        Args:
            filepath: Path to save configuration.
            format: File format ('json', 'yaml', or 'auto' to detect from extension).
        """
        filepath = Path(filepath)
        
        if format == 'auto':
            format = 'yaml' if filepath.suffix.lower() in ['.yml', '.yaml'] else 'json'
        if format not in ('json', 'yaml'):
            raise ValueError(f"Unsupported configuration format: {format}")
        
        config_dict = self.to_dict()
        
        with open(filepath, 'w') as f:
            if format == 'yaml':
                yaml.dump(config_dict, f, default_flow_style=False, indent=2)
            else:
                json.dump(config_dict, f, indent=2)
    
    @classmethod
    def load(cls, filepath: Path) -> 'Config':
        """Load configuration from JSON or YAML file.
        
        Args:
            filepath: Path to configuration file.
            
        Returns:
            Config: Loaded configuration object.
            
        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file holds unknown sections or keys.
        """
        filepath = Path(filepath)
        if not filepath.exists():
            raise FileNotFoundError(f"Configuration file not found: {filepath}")
        
        with open(filepath, 'r') as f:
            if filepath.suffix.lower() in ['.yml', '.yaml']:
                data = yaml.safe_load(f)
            else:
                data = json.load(f)
        
        return cls.from_dict(data or {})
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Config':
        """Build a configuration from a (possibly partial) dictionary."""
        sections = {f.name: f for f in fields(cls)}
        kwargs = {}
        for key, value in data.items():
            if key not in sections:
                raise ValueError(f"Unknown configuration section: {key}")
            if not isinstance(value, dict):
                raise ValueError(f"Section '{key}' must be a mapping, got {type(value).__name__}")
            section_class = sections[key].default_factory
            known = {f.name for f in fields(section_class)}
            unknown = set(value) - known
            if unknown:
                raise ValueError(f"Unknown keys in '{key}' section: {sorted(unknown)}")
            kwargs[key] = section_class(**value)
        return cls(**kwargs)


def create_default_config() -> Config:
    """Create default configuration."""
    return Config()
