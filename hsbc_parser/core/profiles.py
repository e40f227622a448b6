"""
Vendor profile loading.
"""
import yaml
from pathlib import Path
from typing import Dict, List, Optional
import logging

from pydantic import ValidationError

from ..models.schema import StatementProfile

logger = logging.getLogger(__name__)

DEFAULT_PROFILE = "hsbc_uae_v1"


class ProfileLoader:
    """Loads the statement profiles shipped as YAML files."""

    def __init__(self, profiles_dir: Path = None):
        self.profiles_dir = profiles_dir or Path(__file__).parent.parent / "profiles"
        self.profiles: Dict[str, StatementProfile] = {}
        self._load_profiles()

    def _load_profiles(self):
        """Load all available profiles."""
        if not self.profiles_dir.exists():
            logger.warning(f"Profiles directory not found: {self.profiles_dir}")
            return

        for yaml_file in sorted(self.profiles_dir.glob("*.yaml")):
            try:
                with open(yaml_file, 'r', encoding='utf-8') as f:
                    profile_data = yaml.safe_load(f) or {}
                profile = StatementProfile(**profile_data)
            except (yaml.YAMLError, ValidationError, TypeError) as e:
                logger.error(f"Error loading profile {yaml_file}: {e}")
                continue

            self.profiles[profile.profile_id] = profile
            logger.debug(f"Loaded profile: {profile.profile_id}")

    def get_profile(self, profile_id: str) -> Optional[StatementProfile]:
        """Get profile by ID."""
        return self.profiles.get(profile_id)

    def list_profiles(self) -> List[str]:
        """List all available profile IDs."""
        return list(self.profiles.keys())


def load_profile(profile_id: str = DEFAULT_PROFILE, profiles_dir: Path = None) -> StatementProfile:
    """
    Convenience function to fetch a single profile.

    Raises:
        ValueError: if no profile with that ID exists
    """
    loader = ProfileLoader(profiles_dir)
    profile = loader.get_profile(profile_id)
    if profile is None:
        raise ValueError(f"Profile not found: {profile_id}")
    return profile
