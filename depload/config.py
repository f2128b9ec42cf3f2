# -*- coding: utf-8 -*-
import json
import os
import time

CONFIG_FILE_NAME = "depload_config.json"


class Config:
    """Configuration"""
    # Workflow
    PROGRESS_INTERVAL = 5  # Wait box refresh period (exports / modules)
    CLEAR_IMPORT_COMMENTS = True  # Wipe repeatable comments on imports after loading
    WAIT_FOR_ANALYSIS = True  # Let auto-analysis finish before matching
    DEFAULT_FOLDER = ""  # Initial folder for the dependency search

    # Logging configuration
    LOG_ENABLED = True
    LOG_FILE = f"depload_{time.strftime('%Y%m%d_%H%M%S')}.log"
    EVENT_LOG_FILE = f"depload_events_{time.strftime('%Y%m%d_%H%M%S')}.jsonl"
    CONSOLE_QUIET = True  # Minimal console output


# json key -> Config attribute
_KEYS = {
    'progress_interval': 'PROGRESS_INTERVAL',
    'clear_import_comments': 'CLEAR_IMPORT_COMMENTS',
    'wait_for_analysis': 'WAIT_FOR_ANALYSIS',
    'default_folder': 'DEFAULT_FOLDER',
    'log_enabled': 'LOG_ENABLED',
    'console_quiet': 'CONSOLE_QUIET',
}


def _log_path(value, stem, suffix):
    """'auto' (or missing) means a timestamped file in the cwd"""
    if not value or (isinstance(value, str) and value.strip().lower() == "auto"):
        return f"{stem}_{time.strftime('%Y%m%d_%H%M%S')}{suffix}"
    return value


def progress_interval(value, default=Config.PROGRESS_INTERVAL):
    """Positive wait box period; bad values fall back to default"""
    try:
        return max(1, int(value))
    except (TypeError, ValueError):
        return default


def default_config_path():
    """Config file in the IDA user directory if available, else the cwd"""
    try:
        import ida_diskio
        user_dir = ida_diskio.get_user_idadir()
    except ImportError:
        user_dir = None
    if user_dir:
        return os.path.join(user_dir, CONFIG_FILE_NAME)
    return CONFIG_FILE_NAME


def load_config(path=None):
    """Load configuration"""
    config_file = path or default_config_path()
    config = Config()

    if os.path.exists(config_file):
        try:
            with open(config_file, 'r', encoding='utf-8') as f:
                data = json.load(f)
            for key, attr in _KEYS.items():
                setattr(config, attr, data.get(key, getattr(config, attr)))
            config.PROGRESS_INTERVAL = progress_interval(config.PROGRESS_INTERVAL)
            config.LOG_FILE = _log_path(data.get('log_file'), "depload", ".log")
            config.EVENT_LOG_FILE = _log_path(data.get('event_log_file'), "depload_events", ".jsonl")
            print(f"Config loaded: {config_file}")
        except (OSError, ValueError) as e:
            print(f"Failed to load config: {e}")
    else:
        # Create default config file
        try:
            default_config = {key: getattr(config, attr) for key, attr in _KEYS.items()}
            default_config['log_file'] = "auto"
            default_config['event_log_file'] = "auto"
            with open(config_file, 'w', encoding='utf-8') as f:
                json.dump(default_config, f, indent=2, ensure_ascii=False)
            print(f"Created default config: {config_file}")
        except OSError as e:
            print(f"Failed to create default config: {e}")

    return config
