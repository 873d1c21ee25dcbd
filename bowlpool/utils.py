# -*- coding: utf-8 -*-

import os.path
from collections.abc import Iterable

import regex as re
import yaml

##########
# Config #
##########

class Config:
    """Manages YAML configuration information for the project.  Config files are
    loaded in order, and each subsequent file is merged over the existing data,
    section by section (nested dicts are merged, other values are replaced).
    """
    config_dir:  str
    config_data: dict
    files:       list[str]

    def __init__(self, files: str | Iterable[str], config_dir: str = None):
        self.config_dir  = config_dir or '.'
        self.config_data = {}
        self.files       = []
        self.load(files)

    def load(self, files: str | Iterable[str]) -> None:
        """Load one or more config files (comma-separated string, or list of file
        names), relative to `config_dir` unless absolute
        """
        if isinstance(files, str):
            files = [f.strip() for f in files.split(',') if f.strip()]
        for file_name in files:
            path = os.path.join(self.config_dir, file_name)
            with open(path, 'r') as f:
                data = yaml.safe_load(f) or {}
            if not isinstance(data, dict):
                raise RuntimeError(f"Config file '{path}' must contain a mapping")
            merge_dict(self.config_data, data)
            self.files.append(path)

    def config(self, section: str) -> dict | None:
        """Return config data for the specified top-level section (or `None` if
        not present)
        """
        return self.config_data.get(section)

def merge_dict(base: dict, other: dict) -> dict:
    """Recursively merge `other` into `base` (in place), also returning `base`
    """
    for key, value in other.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            merge_dict(base[key], value)
        else:
            base[key] = value
    return base

##############
# parse_argv #
##############

def typecast(value: str) -> str | int | float | bool | None:
    """Simple typecasting for command line argument values
    """
    if value.isdecimal():
        return int(value)
    if re.fullmatch(r'-?\d+\.\d*|-?\.\d+', value):
        return float(value)
    if value.lower() in ('true', 'yes'):
        return True
    if value.lower() in ('false', 'no'):
        return False
    if value.lower() in ('none', 'null'):
        return None
    return value

def parse_argv(argv: list[str]) -> tuple[list, dict]:
    """Takes a list of arguments (typically a slice of sys.argv), and converts them
    into args (list) and kwargs (dict).  The latter is determined by the presence of
    an equal sign ('=') in the argument.
    """
    args = []
    kwargs = {}
    for arg in argv:
        if '=' in arg:
            key, value = arg.split('=', 1)
            kwargs[key] = typecast(value)
        else:
            args.append(typecast(arg))
    return args, kwargs

##################
# replace_tokens #
##################

def replace_tokens(fmt: str, **kwargs) -> str:
    """Replace tokens of the form `{token}` in `fmt` with the corresponding value
    from `kwargs`; tokens without a matching keyword are left as-is
    """
    def token_repl(m: re.Match) -> str:
        key = m.group(1)
        return str(kwargs[key]) if key in kwargs else m.group(0)

    return re.sub(r'\{(\w+)\}', token_repl, fmt)
