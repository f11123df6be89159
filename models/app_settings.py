"""
Global application settings and preferences.
Uses JSON file for persistent storage across sessions.

Includes:
- Horizon picking defaults (snap radius, auto-tracking)
- Velocity analysis (semblance scan) defaults
- Spectrum display scale
- Recently used processing flows

The settings directory defaults to ~/.osp and can be redirected with the
OSP_SETTINGS_DIR environment variable (read when the singleton is created).
"""
import os
import json
import logging
from pathlib import Path
from typing import Optional, Dict, List, Any

# Set up module logger
logger = logging.getLogger(__name__)


class AppSettings:
    """
    Singleton class for managing global application settings.

    Settings are automatically persisted to a JSON file
    (~/.osp/settings.json unless OSP_SETTINGS_DIR is set).
    """

    _instance: Optional['AppSettings'] = None

    ENV_SETTINGS_DIR = 'OSP_SETTINGS_DIR'
    DEFAULT_SETTINGS_DIR = Path.home() / '.osp'
    SETTINGS_FILENAME = 'settings.json'

    def __new__(cls):
        """Singleton pattern - only one instance exists."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self):
        """Initialize settings (only once due to singleton)."""
        if self._initialized:
            return

        env_dir = os.environ.get(self.ENV_SETTINGS_DIR)
        self.settings_dir = Path(env_dir) if env_dir else self.DEFAULT_SETTINGS_DIR
        self.settings_file = self.settings_dir / self.SETTINGS_FILENAME

        # Default values
        self._defaults = {
            # Interpretation
            'snap_radius': 10,
            'auto_track_enabled': False,
            'auto_track_window': 12,
            'auto_track_max_traces': 100,
            # Velocity analysis
            'semblance': {
                'v_min': 1500.0,
                'v_max': 4000.0,
                'v_step': 50.0,
                'window': 15,
            },
            # Spectrum display (100 = percent of peak)
            'spectrum_scale': 100.0,
            'recent_flows': [],
            'max_recent_flows': 10,
        }

        # Current settings (loaded from file or defaults)
        self._settings: Dict[str, Any] = {}

        # Load settings from file
        self._load_settings()

        self._initialized = True
        logger.info(f"AppSettings initialized from {self.settings_file}")

    @classmethod
    def reset_instance(cls) -> None:
        """Drop the singleton so the next access re-reads the environment."""
        cls._instance = None

    def _ensure_settings_dir(self):
        """Ensure the settings directory exists."""
        try:
            self.settings_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.warning(f"Could not create settings directory: {e}")

    def _load_settings(self):
        """Load settings from JSON file."""
        if self.settings_file.exists():
            try:
                with open(self.settings_file, 'r', encoding='utf-8') as f:
                    self._settings = json.load(f)
                logger.debug(f"Loaded settings from {self.settings_file}")
            except (OSError, json.JSONDecodeError) as e:
                logger.warning(f"Could not load settings file: {e}")
                self._settings = {}
        else:
            self._settings = {}
            logger.debug("No settings file found, using defaults")

        if not isinstance(self._settings, dict):
            logger.warning("Settings file does not contain an object, using defaults")
            self._settings = {}

    def _save_settings(self):
        """Save settings to JSON file."""
        try:
            self._ensure_settings_dir()
            with open(self.settings_file, 'w', encoding='utf-8') as f:
                json.dump(self._settings, f, indent=2, default=str)
            logger.debug(f"Saved settings to {self.settings_file}")
        except OSError as e:
            logger.error(f"Could not save settings: {e}")

    def _get(self, key: str, default=None):
        """Get a setting value, falling back to defaults."""
        if default is None:
            default = self._defaults.get(key)
        return self._settings.get(key, default)

    def _set(self, key: str, value: Any, save: bool = True):
        """Set a setting value and optionally save to file."""
        self._settings[key] = value
        if save:
            self._save_settings()

    def _get_int(self, key: str) -> int:
        value = self._get(key)
        try:
            return int(value)
        except (TypeError, ValueError):
            return int(self._defaults[key])

    def reset_to_defaults(self):
        """Reset all settings to default values."""
        self._settings = json.loads(json.dumps(self._defaults))
        self._save_settings()
        logger.info("Settings reset to defaults")

    # =========================================================================
    # Interpretation
    # =========================================================================

    def get_snap_radius(self) -> int:
        """Half-width (samples) of the snap-to-peak search."""
        return max(0, self._get_int('snap_radius'))

    def set_snap_radius(self, radius: int) -> None:
        if radius < 0:
            raise ValueError(f"Snap radius must be >= 0, got {radius}")
        self._set('snap_radius', int(radius))

    def get_auto_track_enabled(self) -> bool:
        value = self._get('auto_track_enabled', False)
        if isinstance(value, bool):
            return value
        return str(value).lower() in ('true', '1', 'yes')

    def set_auto_track_enabled(self, enabled: bool) -> None:
        self._set('auto_track_enabled', bool(enabled))

    def get_auto_track_window(self) -> int:
        return max(0, self._get_int('auto_track_window'))

    def get_auto_track_max_traces(self) -> int:
        return max(0, self._get_int('auto_track_max_traces'))

    # =========================================================================
    # Velocity analysis / spectrum
    # =========================================================================

    def get_semblance_params(self) -> Dict[str, float]:
        """
        Get the semblance scan defaults.

        Returns:
            Dictionary with v_min, v_max, v_step and window
        """
        default_params = self._defaults['semblance']
        params = self._get('semblance', default_params)

        if isinstance(params, dict):
            # Merge with defaults to ensure all keys exist
            return {**default_params, **params}
        return default_params.copy()

    def set_semblance_params(self, v_min: float = None, v_max: float = None,
                             v_step: float = None, window: int = None) -> None:
        """Update part of the semblance scan defaults."""
        params = self.get_semblance_params()
        if v_min is not None:
            params['v_min'] = float(v_min)
        if v_max is not None:
            params['v_max'] = float(v_max)
        if v_step is not None:
            if v_step <= 0:
                raise ValueError(f"Velocity step must be positive, got {v_step}")
            params['v_step'] = float(v_step)
        if window is not None:
            params['window'] = int(window)
        self._set('semblance', params)

    def get_spectrum_scale(self) -> float:
        value = self._get('spectrum_scale', 100.0)
        try:
            return float(value)
        except (TypeError, ValueError):
            return 100.0

    # =========================================================================
    # Recent flows
    # =========================================================================

    def get_recent_flows(self) -> List[str]:
        """Get list of recently saved/loaded flow files."""
        flows = self._get('recent_flows', [])
        return flows if isinstance(flows, list) else []

    def add_recent_flow(self, filepath: str):
        """Add flow file to the recent list."""
        recent = self.get_recent_flows().copy()
        if filepath in recent:
            recent.remove(filepath)
        recent.insert(0, filepath)
        recent = recent[:self._get_int('max_recent_flows')]
        self._set('recent_flows', recent)


def get_settings() -> AppSettings:
    """Get the global settings instance."""
    return AppSettings()
