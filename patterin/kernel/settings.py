import ast
import os
import platform
from configparser import ConfigParser, MissingSectionHeaderError, NoSectionError
from pathlib import Path
from typing import Any, Generator, Optional, Union


def get_safe_path(
    name: str, create: Optional[bool] = False, system: Optional[str] = None
) -> str:
    """
    Locate the per-user configuration directory for `name`.

    macOS keeps it under Application Support, Windows under LOCALAPPDATA and everything
    else under ~/.config.

    @param name: directory name within the user configuration area
    @param create: create the directory if it does not exist yet
    @param system: platform override, defaults to platform.system()
    @return: directory path
    """
    system = system or platform.system()
    if system == "Windows":
        base = os.path.expandvars("%LOCALAPPDATA%")
    elif system == "Darwin":
        base = os.path.join(os.path.expanduser("~"), "Library", "Application Support")
    else:
        base = os.path.join(os.path.expanduser("~"), ".config")
    directory = os.path.join(base, name)
    if create:
        os.makedirs(directory, exist_ok=True)
    return directory


class Settings:
    """
    Settings are a thin layer over configparser. Conceptually a dictionary of
    dictionaries: the outer keys are sections, the inner keys are attributes and every
    value is held as a string.

    Values are read into the config dict by `read_configuration` and only reach the
    disk when `write_configuration` is called.

    `directory` is resolved through get_safe_path. An absolute directory is used as-is
    and None means `filename` is already a full path.
    """

    def __init__(self, directory, filename, ignore_settings=False):
        if directory is None:
            self._config_file = Path(filename)
        elif os.path.isabs(directory):
            os.makedirs(directory, exist_ok=True)
            self._config_file = Path(directory).joinpath(filename)
        else:
            self._config_file = Path(get_safe_path(directory, create=True)).joinpath(
                filename
            )
        self._config_dict = {}
        if not ignore_settings:
            self.read_configuration()

    def __contains__(self, item):
        return item in self._config_dict

    @property
    def config_file(self):
        return self._config_file

    def read_configuration(self, targetfile=None):
        """
        Merge the contents of the configuration file into the config dict. Missing or
        unreadable files leave the settings untouched.
        """
        if targetfile is None:
            targetfile = self._config_file
        try:
            parser = ConfigParser(interpolation=None)
            parser.read(targetfile, encoding="utf-8")
            for section in parser.sections():
                config_section = self._config_dict.setdefault(section, dict())
                for option in parser.options(section):
                    config_section[option] = parser.get(section, option)
        except (
            PermissionError,
            NoSectionError,
            MissingSectionHeaderError,
            FileNotFoundError,
        ):
            return

    def write_configuration(self, targetfile=None):
        """
        Write the config dict to disk.
        """
        if targetfile is None:
            targetfile = self._config_file
        parser = ConfigParser(interpolation=None)
        for section_key, section in self._config_dict.items():
            if not parser.has_section(section_key):
                parser.add_section(section_key)
            for key, value in section.items():
                parser.set(section_key, key, value)
        try:
            with open(targetfile, "w", encoding="utf-8") as fp:
                parser.write(fp)
        except (PermissionError, FileNotFoundError):
            return

    def literal_dict(self):
        """
        Config dict with every value passed through ast.literal_eval where possible.
        """
        result = dict()
        for section, section_dict in self._config_dict.items():
            literal_section = dict()
            result[section] = literal_section
            for key, value in section_dict.items():
                try:
                    value = ast.literal_eval(value)
                except (ValueError, SyntaxError):
                    pass
                literal_section[key] = value
        return result

    def set_dict(self, literal_dict):
        self._config_dict.clear()
        for section, values in literal_dict.items():
            self._config_dict[section] = {key: str(v) for key, v in values.items()}

    def read_persistent(
        self,
        t: type,
        section: str,
        key: str,
        default: Union[str, int, float, bool, list, tuple] = None,
    ) -> Any:
        """
        Read a single typed value.

        @param t: datatype the stored string is converted to.
        @param section: storing section
        @param key: reference item
        @param default: value returned when the item is missing or does not convert.
        @return: value
        """
        try:
            value = self._config_dict[section][key]
        except KeyError:
            return default
        if t == bool:
            return value == "True"
        if t in (list, tuple):
            try:
                return t(ast.literal_eval(value))
            except (ValueError, SyntaxError, TypeError):
                return default
        try:
            return t(value)
        except ValueError:
            return default

    def read_persistent_attributes(self, section: str, obj: Any):
        """
        Update every public attribute of obj that has a stored value. The attribute's
        current value decides the type the stored string is converted to.

        @param section:
        @param obj:
        @return:
        """
        for key, value in list(obj.__dict__.items()):
            if key.startswith("_"):
                continue
            t = type(value) if value is not None else str
            read_value = self.read_persistent(t, section, key)
            if read_value is None:
                continue
            setattr(obj, key, read_value)

    def write_persistent(
        self, section: str, key: str, value: Union[str, int, float, bool, list, tuple]
    ):
        """
        Store a single value. Values of other types are ignored.

        @param section: section to write key value
        @param key: The item key being written
        @param value: the value of the item.
        """
        if not isinstance(value, (str, int, float, bool, list, tuple)):
            return
        self._config_dict.setdefault(section, dict())[str(key)] = str(value)

    def write_persistent_attributes(self, section, obj):
        """
        Write all public attribute values of obj to the section provided.

        @param section: section to write to
        @param obj: object whose attributes should be written
        @return:
        """
        for key, value in obj.__dict__.items():
            if key.startswith("_"):
                continue
            self.write_persistent(section, key, value)

    def clear_persistent(self, section: str):
        self._config_dict.pop(section, None)

    def delete_persistent(self, section: str, key: str):
        try:
            del self._config_dict[section][key]
        except KeyError:
            pass

    def keylist(self, section: str) -> Generator[str, None, None]:
        """
        Keys stored within the given section.
        """
        yield from self._config_dict.get(section, ())
