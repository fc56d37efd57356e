import os
import platform
import tempfile
from pathlib import Path
from threading import Lock
from typing import Any, Dict, Optional, Union

import tomlkit


class ConfigManager:
    """Settings for assemblyscan and its plugins, stored as a TOML file.

    One instance exists per application name. The file is read once when the
    instance is created; later edits made outside this process are not seen
    until the instance is deleted with `delete_instance`.

    Attributes:
        app_name (str): The name of the application. (Default: 'assemblyscan')
        config_dir (Optional[Path]): Directory override for the configuration file.
        config (tomlkit.TOMLDocument): The loaded document. Formatting and comments are preserved on save.
        config_file_path (Path): The path to the configuration file.
    """

    _initialized: bool = False
    _instances: Dict[str, "ConfigManager"] = {}
    _lock = Lock()

    def __new__(
        cls, app_name: str = "assemblyscan", config_dir: Optional[Union[str, Path]] = None
    ) -> "ConfigManager":
        with cls._lock:
            if app_name not in cls._instances:
                instance = super(ConfigManager, cls).__new__(cls)
                instance._initialized = False
                cls._instances[app_name] = instance
            return cls._instances[app_name]

    def __init__(
        self, app_name: str = "assemblyscan", config_dir: Optional[Union[str, Path]] = None
    ) -> None:
        if self._initialized:
            return
        self._initialized = True

        self.app_name = app_name
        self.config_dir = Path(config_dir) / app_name if config_dir else None
        self.config = tomlkit.document()
        self.config_file_path = self._get_config_file_path()
        self._load_config()

    def _get_config_file_path(self) -> Path:
        if self.config_dir:
            return (Path(self.config_dir) / "config.toml").expanduser()
        if platform.system() == "Windows":
            config_dir = Path(os.getenv("APPDATA", str(Path("~\\AppData\\Roaming"))))
        else:
            config_dir = Path(os.getenv("XDG_CONFIG_HOME", str(Path("~/.config"))))
        return (config_dir / self.app_name / "config.toml").expanduser()

    def _load_config(self) -> None:
        if self.config_file_path.exists():
            with open(self.config_file_path, "r") as configfile:
                self.config = tomlkit.parse(configfile.read())

    def get(self, section: str, option: str, fallback: Optional[Any] = None) -> Any:
        """Gets a configuration value.

        Args:
            section (str): The section within the configuration file.
            option (str): The option within the section.
            fallback (Optional[Any]): The value returned if the option is not set.

        Returns:
            Any: The configuration value or the fallback value.
        """
        return self.config.get(section, {}).get(option, fallback)

    def get_bool(self, section: str, option: str, fallback: bool = False) -> bool:
        """Gets a configuration value as a boolean. Strings such as "false" or "0"
        (as written by hand-edited config files) are treated as False."""
        value = self.get(section, option, fallback)
        if isinstance(value, str):
            return value.strip().lower() not in ("", "false", "0", "no", "off")
        return bool(value)

    def set(self, section: str, option: str, value: Any) -> None:
        """Sets a configuration value and saves the configuration file.

        Args:
            section (str): The section within the configuration file.
            option (str): The option within the section.
            value (Any): The value to set.
        """
        if section not in self.config:
            self.config[section] = tomlkit.table()
        self.config[section][option] = value
        self._save_config()

    def _save_config(self) -> None:
        if not self.config_file_path.exists():
            self.config_file_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_file_path, "w") as configfile:
            configfile.write(tomlkit.dumps(self.config))

    def __getitem__(self, key: str) -> Any:
        """Dictionary-like access to a top level table. Returns None for a missing key,
        so check the result before indexing into it."""
        if key not in self.config:
            return None
        return self.config[key]

    @classmethod
    def delete_instance(cls, app_name: str) -> None:
        """Deletes the singleton instance for the given application name.

        Args:
            app_name (str): The name of the application.
        """
        with cls._lock:
            if app_name in cls._instances:
                del cls._instances[app_name]

    def get_data_dir_path(self) -> Path:
        """Determines the path to the data directory, which is searched for a GrokAssembly payload
        when `assembly.helper_path` is not set.

        Returns:
            Path: The path to the data directory.
        """
        if platform.system() == "Windows":
            data_dir = Path(os.getenv("LOCALAPPDATA", str(Path("~\\AppData\\Local"))))
        else:
            data_dir = Path(os.getenv("XDG_DATA_HOME", str(Path("~/.local/share"))))
        data_dir = data_dir / self.app_name
        return data_dir.expanduser()

    def get_temp_dir_path(self, section: str) -> Path:
        """Directory under which a plugin should create its working directories.

        Uses the `temp_dir` option of the given section, falling back to the system temp dir.
        """
        return Path(self.get(section, "temp_dir", tempfile.gettempdir())).expanduser()
