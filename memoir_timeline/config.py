"""
Timeline Configuration Manager
Handles loading and saving timeline preferences (starting window, marker
sizing, overlap thresholds, label timezone).
"""

import copy
import json
import logging
import os

from memoir_timeline.rendering.marker_sizer import MarkerStyle
from memoir_timeline.rendering.viewport import STARTING_WINDOWS
from memoir_timeline.utils.error_handler import ConfigError
from memoir_timeline.utils.timestamp_parser import TimestampParser

# Configure logger
logger = logging.getLogger(__name__)


class TimelineConfig:
    """
    Manages timeline preferences.
    Preferences are stored under a 'timeline' key of a JSON settings file
    that may hold other application settings as well.
    """

    CONFIG_KEY = 'timeline'

    DEFAULT_CONFIG = {
        'viewport': {
            'starting_window': 'auto',
            'auto_zoom': 0.95,
            'max_zoom': 10000.0,
            'wheel_delta_scale': -0.1,
            'wheel_zoom_rate': 0.1,
            'center_weight': 0.0,
            'history_floor': '2025-01-01T00:00:00Z',
        },
        'markers': {
            'min_size': 8.0,
            'max_size': 40.0,
            'min_window_hours': 1.0,
            'max_window_hours': 5 * 365 * 24.0,
            'max_size_boost': 12.0,
            'size_exponent': 2.0,
            'opacity_min': 0.35,
            'opacity_max': 1.0,
            'opacity_exponent': 1.5,
            'neutral_score': 0.5,
        },
        'overlap': {
            'always_show_zoom': 200.0,
            'overlap_ratio': 0.8,
            'score_proximity_threshold': 0.15,
            'max_markers': 50,
            'reference_width_px': 1000,
        },
        'labels': {
            'timezone': 'UTC',
            'max_labeled_ticks': 8,
        },
        'hover': {
            'proximity_threshold': 3.0,
        },
    }

    def __init__(self, config_file=None):
        """
        Initialize timeline configuration manager.

        Args:
            config_file: Path to configuration file (optional)
        """
        self.config_file = config_file
        self.config = copy.deepcopy(self.DEFAULT_CONFIG)

        if config_file and os.path.exists(config_file):
            self.load()

    def load(self):
        """Load timeline preferences from the configuration file."""
        if not self.config_file or not os.path.exists(self.config_file):
            return

        try:
            if os.path.getsize(self.config_file) == 0:
                return

            with open(self.config_file, 'r') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Error loading timeline configuration from {self.config_file}: {e}")
            return

        timeline_data = data.get(self.CONFIG_KEY) if isinstance(data, dict) else None
        if not isinstance(timeline_data, dict):
            return

        for section, defaults in self.DEFAULT_CONFIG.items():
            values = timeline_data.get(section)
            if not isinstance(values, dict):
                continue
            for key, value in values.items():
                if key in defaults:
                    self.config[section][key] = value
                else:
                    logger.warning(f"Ignoring unknown timeline setting {section}.{key}")

        starting_window = self.config['viewport']['starting_window']
        if starting_window not in STARTING_WINDOWS:
            logger.warning(f"Invalid starting window '{starting_window}' in configuration, using 'auto'")
            self.config['viewport']['starting_window'] = 'auto'

    def save(self):
        """Save timeline preferences, keeping other keys of the file intact."""
        if not self.config_file:
            return

        existing_data = {}
        if os.path.exists(self.config_file) and os.path.getsize(self.config_file) > 0:
            try:
                with open(self.config_file, 'r') as f:
                    existing_data = json.load(f)
            except ValueError:
                # File exists but is not valid JSON, start fresh
                existing_data = {}
            if not isinstance(existing_data, dict):
                existing_data = {}

        existing_data[self.CONFIG_KEY] = self.config

        try:
            config_dir = os.path.dirname(self.config_file)
            if config_dir:
                os.makedirs(config_dir, exist_ok=True)

            with open(self.config_file, 'w') as f:
                json.dump(existing_data, f, indent=2)
        except OSError as e:
            logger.error(f"Error saving timeline configuration to {self.config_file}: {e}")

    def get(self, section, key):
        """
        Get a single setting.

        Args:
            section: Section name ('viewport', 'markers', ...)
            key: Setting name

        Returns:
            The setting value

        Raises:
            ConfigError: If the section or key does not exist
        """
        self._check_key(section, key)
        return self.config[section][key]

    def set(self, section, key, value):
        """
        Change a single setting and persist it.

        Args:
            section: Section name
            key: Setting name
            value: New value

        Raises:
            ConfigError: If the section or key does not exist, or the
                starting window is not one of the supported values
        """
        self._check_key(section, key)
        if section == 'viewport' and key == 'starting_window' and value not in STARTING_WINDOWS:
            raise ConfigError(
                f"Starting window must be one of {', '.join(STARTING_WINDOWS)}, got '{value}'",
                section, key
            )
        self.config[section][key] = value
        self.save()

    def section(self, name):
        """
        Get a copy of a whole section.

        Args:
            name: Section name

        Returns:
            dict: Copy of the section's settings
        """
        if name not in self.config:
            raise ConfigError(f"Unknown configuration section '{name}'", name)
        return dict(self.config[name])

    def _check_key(self, section, key):
        if section not in self.config:
            raise ConfigError(f"Unknown configuration section '{section}'", section)
        if key not in self.config[section]:
            raise ConfigError(f"Unknown configuration key '{section}.{key}'", section, key)

    @property
    def starting_window(self):
        return self.config['viewport']['starting_window']

    @property
    def history_floor_ms(self):
        """
        The absolute oldest date the user can always zoom out to.

        Returns:
            int: Epoch ms (the default floor when the setting is unparseable)
        """
        floor_ms = TimestampParser.to_epoch_ms(self.config['viewport']['history_floor'])
        if floor_ms is None:
            logger.warning(f"Invalid history_floor '{self.config['viewport']['history_floor']}', using default")
            floor_ms = TimestampParser.to_epoch_ms(self.DEFAULT_CONFIG['viewport']['history_floor'])
        return floor_ms

    @property
    def timezone(self):
        return TimestampParser.resolve_timezone(self.config['labels']['timezone'])

    def marker_style(self):
        """
        Build the marker sizing parameters.

        Returns:
            MarkerStyle: Parameters from the 'markers' section
        """
        return MarkerStyle(**{key: float(value) for key, value in self.config['markers'].items()})


