#!/usr/bin/env python
# -*- coding: utf-8 -*-

import sys
import json

import requests

from .utils import parse_argv, replace_tokens
from .core import cfg, DataFile, log, env_setting, ConfigError, InputUnavailable
from .game import (GameOutcome, normalize_outcomes, resolve_champion,
                   DFLT_EXCLUDE_NOTES, DFLT_CHAMP_NOTES)

DATA_SRC_KEY  = 'data_sources'
CFBD_SECT_KEY = 'cfbd'

data_src = cfg.config(DATA_SRC_KEY)
if not data_src or CFBD_SECT_KEY not in data_src:
    raise ConfigError(f"'{DATA_SRC_KEY}' or '{CFBD_SECT_KEY}' not found in config file")
CFBD = data_src.get(CFBD_SECT_KEY)

# optional in config file (usable defaults here)
HTTP_HEADERS   = CFBD.get('http_headers')   or {'Accept': 'application/json'}
HTTP_TIMEOUT   = CFBD.get('http_timeout')   or 30
SEASON_TYPE    = CFBD.get('season_type')    or 'postseason'
EXCLUDE_NOTES  = CFBD.get('exclude_notes')  or DFLT_EXCLUDE_NOTES
CHAMP_NOTES    = CFBD.get('champ_notes')    or DFLT_CHAMP_NOTES
API_KEY_VAR    = CFBD.get('api_key_var')    or 'CFBD_API_KEY'

# must be specified in config file
CFBD_GAMES_URL  = CFBD['games_url']
CFBD_GAMES_FILE = CFBD['games_file']

#############
# Game Data #
#############

def fetch_game_data(year: int) -> int:
    """Download postseason game data for the specified season, writing the (JSON)
    response to the data file for the year

    :raises InputUnavailable: if the request fails
    """
    url      = replace_tokens(CFBD_GAMES_URL, year=str(year))
    params   = {'year': int(year), 'seasonType': SEASON_TYPE}
    api_key  = env_setting(API_KEY_VAR)

    sess = requests.Session()
    sess.headers.update(HTTP_HEADERS)
    sess.headers['Authorization'] = f"Bearer {api_key}"
    try:
        req = sess.get(url, params=params, timeout=HTTP_TIMEOUT)
    except requests.RequestException as e:
        raise InputUnavailable(f"GET '{url}' failed: {e}") from e
    if not req.ok:
        raise InputUnavailable(f"GET '{url}' returned status code {req.status_code}")
    data = req.text
    log.debug(f"Downloaded {len(data)} bytes from '{url}'")

    file_path = DataFile(replace_tokens(CFBD_GAMES_FILE, year=str(year)))
    with open(file_path, 'w') as f:
        nbytes = f.write(data)
    log.debug(f"Wrote {nbytes} bytes to '{file_path}'")

    return 0

def load_game_data(year: int) -> list[dict]:
    """Return raw game records (previously fetched) for the specified year

    :raises InputUnavailable: if data file is missing or unreadable
    """
    file_path = DataFile(replace_tokens(CFBD_GAMES_FILE, year=str(year)))
    try:
        with open(file_path, 'r') as f:
            records = json.load(f)
    except FileNotFoundError as e:
        raise InputUnavailable(f"File {file_path} not found (fetch game data first)") from e
    except json.JSONDecodeError as e:
        raise InputUnavailable(f"Bad JSON in {file_path}: {e}") from e
    if not isinstance(records, list):
        raise InputUnavailable(f"Expected list of games in {file_path}")
    log.debug(f"Read {len(records)} game records from '{file_path}'")
    return records

def get_outcomes(year: int, fetch: bool = False) -> set[GameOutcome]:
    """Return outcomes for completed games in the pool for the specified season
    """
    if fetch:
        fetch_game_data(year)
    return normalize_outcomes(load_game_data(year), EXCLUDE_NOTES)

def get_champion(year: int, override: str = None) -> str | None:
    """Return overall champion for the season (or `None` if not resolvable); assumes
    that game data has already been fetched
    """
    if override:
        return resolve_champion([], CHAMP_NOTES, override)
    return resolve_champion(load_game_data(year), CHAMP_NOTES)

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: cfbd.py <util_func> [<args> ...]

    Functions/usage:
      - fetch_game_data year=<year>
    """
    if len(sys.argv) < 2:
        print(f"Utility function not specified", file=sys.stderr)
        return -1
    elif sys.argv[1] not in globals():
        print(f"Unknown utility function '{sys.argv[1]}'", file=sys.stderr)
        return -1

    util_func = globals()[sys.argv[1]]
    args, kwargs = parse_argv(sys.argv[2:])

    return util_func(*args, **kwargs)

if __name__ == '__main__':
    sys.exit(main())
