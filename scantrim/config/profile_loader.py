"""Profile loader for configurable intake and trimming behavior."""

import os
import yaml
from pathlib import Path
from typing import Dict, Any, List, Union
from dataclasses import dataclass, field

PROFILE_ENV_VAR = "SCANTRIM_PROFILE"

# "all": keep a page only if every image on it passes the threshold
# "any": keep a page if at least one image passes
# "last": the last image evaluated on the page decides
RETENTION_RULES = ("all", "any", "last")


@dataclass
class ProfileConfig:
    """Configuration profile passed into the batch entry point."""
    name: str = "default"
    description: str = ""
    source_dir: str = "/home/printer/incoming"
    archive_root: str = "/home/printer/scans"
    blank_coverage_threshold: float = 1.0  # percent; pages below are discarded
    near_white_level: int = 60000  # 16-bit channel value
    reserved_suffixes: List[str] = field(default_factory=lambda: ["-new.pdf"])
    pdf_extension: str = ".pdf"
    original_filename: str = "original.pdf"
    processed_filename: str = "processed.pdf"
    retention_rule: str = "all"
    strict_validation: bool = False
    write_masks: bool = False
    
    def __post_init__(self):
        """Validate thresholds and retention rule."""
        if self.retention_rule not in RETENTION_RULES:
            raise ValueError(
                f"Invalid retention_rule: {self.retention_rule} "
                f"(must be one of {', '.join(RETENTION_RULES)})"
            )
        if not 0.0 <= self.blank_coverage_threshold <= 100.0:
            raise ValueError(
                f"blank_coverage_threshold must be within 0-100, got {self.blank_coverage_threshold}"
            )
        if not 0 <= self.near_white_level <= 65535:
            raise ValueError(
                f"near_white_level must be within 0-65535, got {self.near_white_level}"
            )
    
    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ProfileConfig':
        """Create ProfileConfig from dictionary."""
        defaults = cls()
        suffixes = data.get('reserved_suffixes', defaults.reserved_suffixes)
        if isinstance(suffixes, str):
            suffixes = [suffixes]
        return cls(
            name=data.get('name', 'default'),
            description=data.get('description', ''),
            source_dir=str(data.get('source_dir', defaults.source_dir)),
            archive_root=str(data.get('archive_root', defaults.archive_root)),
            blank_coverage_threshold=float(
                data.get('blank_coverage_threshold', defaults.blank_coverage_threshold)
            ),
            near_white_level=int(data.get('near_white_level', defaults.near_white_level)),
            reserved_suffixes=list(suffixes or []),
            pdf_extension=data.get('pdf_extension', defaults.pdf_extension),
            original_filename=data.get('original_filename', defaults.original_filename),
            processed_filename=data.get('processed_filename', defaults.processed_filename),
            retention_rule=data.get('retention_rule', defaults.retention_rule),
            strict_validation=bool(data.get('strict_validation', False)),
            write_masks=bool(data.get('write_masks', False)),
        )
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'name': self.name,
            'description': self.description,
            'source_dir': self.source_dir,
            'archive_root': self.archive_root,
            'blank_coverage_threshold': self.blank_coverage_threshold,
            'near_white_level': self.near_white_level,
            'reserved_suffixes': list(self.reserved_suffixes),
            'pdf_extension': self.pdf_extension,
            'original_filename': self.original_filename,
            'processed_filename': self.processed_filename,
            'retention_rule': self.retention_rule,
            'strict_validation': self.strict_validation,
            'write_masks': self.write_masks,
        }


def get_profiles_dir() -> Path:
    """Get directory containing profile YAML files.
    
    Returns:
        Path to profiles directory
    """
    # scantrim/config/profile_loader.py -> scantrim/config -> scantrim -> root
    project_root = Path(__file__).resolve().parent.parent.parent
    return project_root / "configs" / "profiles"


def get_default_profile_name() -> str:
    """Profile name from SCANTRIM_PROFILE, or "default"."""
    return os.getenv(PROFILE_ENV_VAR) or "default"


def load_profile_file(profile_path: Union[str, Path]) -> ProfileConfig:
    """Load a configuration profile from an explicit YAML file.
    
    Args:
        profile_path: Path to a profile YAML file
        
    Returns:
        ProfileConfig object
        
    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is empty or invalid
    """
    profile_path = Path(profile_path)
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile file not found: {profile_path}")
    
    try:
        with open(profile_path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in profile {profile_path}: {e}") from e
    
    if not data:
        raise ValueError(f"Profile file is empty: {profile_path}")
    if not isinstance(data, dict):
        raise ValueError(f"Profile must be a mapping: {profile_path}")
    
    try:
        return ProfileConfig.from_dict(data)
    except (TypeError, ValueError) as e:
        raise ValueError(f"Error loading profile {profile_path}: {e}") from e


def load_profile(profile_name: str = "default") -> ProfileConfig:
    """Load a named configuration profile from the profiles directory.
    
    Args:
        profile_name: Name of profile to load (without .yaml extension)
        
    Returns:
        ProfileConfig object
        
    Raises:
        FileNotFoundError: If profile file doesn't exist
        ValueError: If profile file is invalid
    """
    profile_path = get_profiles_dir() / f"{profile_name}.yaml"
    
    if not profile_path.exists():
        raise FileNotFoundError(f"Profile not found: {profile_name} (expected at {profile_path})")
    
    return load_profile_file(profile_path)


def list_available_profiles() -> list[str]:
    """List all available profile names.
    
    Returns:
        List of profile names (without .yaml extension)
    """
    profiles_dir = get_profiles_dir()
    
    if not profiles_dir.exists():
        return ["default"]
    
    profiles = [profile_file.stem for profile_file in profiles_dir.glob("*.yaml")]
    return sorted(profiles) if profiles else ["default"]


def get_default_profile() -> ProfileConfig:
    """Get default profile (always available).
    
    Returns:
        Profile named by SCANTRIM_PROFILE (or "default"); built-in defaults
        when no such profile file exists
    """
    try:
        return load_profile(get_default_profile_name())
    except FileNotFoundError:
        return ProfileConfig(name="default", description="Built-in defaults")
