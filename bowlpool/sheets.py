#!/usr/bin/env python
# -*- coding: utf-8 -*-

"""Google Sheets access (v4 REST API) for the pool: poll responses are read from
the poll sheet, and ranked scores are written to the score sheet.  Requests are
authorized with service account credentials, read from the key file named in the
environment (or config file).
"""

import sys
import os.path
import json
from collections.abc import Iterable

import regex as re
import requests
from google.oauth2 import service_account
from google.auth.transport.requests import AuthorizedSession

from .utils import parse_argv
from .core import (cfg, BASE_DIR, DataFile, log, env_setting, ConfigError, InputUnavailable,
                   PublishError)
from .prediction import UserPrediction, normalize_predictions

DATA_SRC_KEY    = 'data_sources'
SHEETS_SECT_KEY = 'sheets'

data_src = cfg.config(DATA_SRC_KEY)
if not data_src or SHEETS_SECT_KEY not in data_src:
    raise ConfigError(f"'{DATA_SRC_KEY}' or '{SHEETS_SECT_KEY}' not found in config file")
SHEETS = data_src.get(SHEETS_SECT_KEY)

# optional in config file (usable defaults here)
API_URL          = SHEETS.get('api_url')          or 'https://sheets.googleapis.com/v4/spreadsheets'
HTTP_TIMEOUT     = SHEETS.get('http_timeout')     or 30
POLL_RANGE       = SHEETS.get('poll_range')       or 'A:AN'
SCORES_RANGE     = SHEETS.get('scores_range')     or 'A2:C'  # row 1 is header
VALUE_INPUT      = SHEETS.get('value_input')      or 'RAW'
SCOPES           = SHEETS.get('scopes')           or ['https://www.googleapis.com/auth/spreadsheets']
CREDENTIALS_VAR  = SHEETS.get('credentials_var')  or 'GOOGLE_APPLICATION_CREDENTIALS'
CREDENTIALS_FILE = SHEETS.get('credentials_file') or 'credentials.json'
POLL_SHEET_VAR   = SHEETS.get('poll_sheet_var')   or 'SHEET_ID_POLL'
SCORES_SHEET_VAR = SHEETS.get('scores_sheet_var') or 'SHEET_ID_SCORES'

# must be specified in config file
POLL_FILE = SHEETS['poll_file']

# e.g. 'A2:C' or 'Scores!A2:C'; the row number is where the first score row goes
RANGE_PATT = r'(?:(.+)!)?([A-Z]+)(\d+):([A-Z]+)'

def values_url(sheet_id: str, range: str, action: str = None) -> str:
    url = f"{API_URL}/{sheet_id}/values/{range}"
    return f"{url}:{action}" if action else url

def credentials_path() -> str:
    """Return path of the service account key file; relative paths are taken from
    the project base directory
    """
    path = env_setting(CREDENTIALS_VAR, required=False) or CREDENTIALS_FILE
    return path if os.path.isabs(path) else os.path.join(BASE_DIR, path)

def load_credentials() -> service_account.Credentials:
    """Return service account credentials (scoped for spreadsheet access)

    :raises ConfigError: if the key file is missing or invalid
    """
    path = credentials_path()
    if not os.path.isfile(path):
        raise ConfigError(f"Service account key file '{path}' not found")
    try:
        return service_account.Credentials.from_service_account_file(path, scopes=SCOPES)
    except ValueError as e:
        raise ConfigError(f"Bad service account key file '{path}': {e}") from e

def get_session() -> requests.Session:
    """Return session that authorizes (and refreshes tokens for) each request
    """
    return AuthorizedSession(load_credentials())

#############
# Poll Data #
#############

def fetch_poll_data(sheet_id: str = None) -> int:
    """Download all poll responses (including header row) from the poll sheet,
    writing the row values to the poll data file

    :raises InputUnavailable: if the request fails
    """
    sheet_id = sheet_id or env_setting(POLL_SHEET_VAR)
    url = values_url(sheet_id, POLL_RANGE)

    sess = get_session()
    try:
        req = sess.get(url, timeout=HTTP_TIMEOUT)
    except requests.RequestException as e:
        raise InputUnavailable(f"GET '{url}' failed: {e}") from e
    if not req.ok:
        raise InputUnavailable(f"GET '{url}' returned status code {req.status_code}")
    try:
        # `values` is omitted entirely for an empty sheet
        rows = req.json().get('values') or []
    except ValueError as e:
        raise InputUnavailable(f"Bad response from '{url}': {e}") from e
    log.debug(f"Downloaded {len(rows)} rows from '{url}'")

    file_path = DataFile(POLL_FILE)
    with open(file_path, 'w') as f:
        json.dump(rows, f, indent=2)
    log.debug(f"Wrote {len(rows)} rows to '{file_path}'")

    return 0

def load_poll_data() -> list[list[str]]:
    """Return raw poll rows (previously fetched), including header row

    :raises InputUnavailable: if data file is missing or unreadable
    """
    file_path = DataFile(POLL_FILE)
    try:
        with open(file_path, 'r') as f:
            rows = json.load(f)
    except FileNotFoundError as e:
        raise InputUnavailable(f"File {file_path} not found (fetch poll data first)") from e
    except json.JSONDecodeError as e:
        raise InputUnavailable(f"Bad JSON in {file_path}: {e}") from e
    if not isinstance(rows, list):
        raise InputUnavailable(f"Expected list of rows in {file_path}")
    log.debug(f"Read {len(rows)} poll rows from '{file_path}'")
    return rows

def get_predictions(fetch: bool = False) -> list[UserPrediction]:
    """Return normalized predictions from the poll responses
    """
    if fetch:
        fetch_poll_data()
    return normalize_predictions(load_poll_data())

##############
# Score Data #
##############

def tail_range(num_rows: int) -> str:
    """Return the part of the score range below `num_rows` written rows (open-ended)
    """
    m = re.fullmatch(RANGE_PATT, SCORES_RANGE)
    if not m:
        raise ConfigError(f"Bad scores_range '{SCORES_RANGE}' (expecting e.g. 'A2:C')")
    sheet, start_col, start_row, end_col = m.groups()
    prefix = f"{sheet}!" if sheet else ''
    return f"{prefix}{start_col}{int(start_row) + num_rows}:{end_col}"

def publish_scores(rows: Iterable[list], sheet_id: str = None) -> int:
    """Write ranked `[first_name, last_name, score]` rows to the score sheet (below
    the header row).  After the write succeeds, the rest of the score range is
    cleared, so that rows from a prior (larger) run do not linger; if the write
    fails, the sheet is left as it was.

    :return: number of rows written
    :raises PublishError: if either request fails
    """
    rows = [list(row) for row in rows]
    sheet_id = sheet_id or env_setting(SCORES_SHEET_VAR)
    tail = tail_range(len(rows))

    sess = get_session()
    upd_url = values_url(sheet_id, SCORES_RANGE)
    clear_url = values_url(sheet_id, tail, 'clear')
    try:
        req = sess.put(upd_url,
                       params={'valueInputOption': VALUE_INPUT},
                       json={'range': SCORES_RANGE, 'values': rows},
                       timeout=HTTP_TIMEOUT)
        if not req.ok:
            raise PublishError(f"PUT '{upd_url}' returned status code {req.status_code}")
        req = sess.post(clear_url, json={}, timeout=HTTP_TIMEOUT)
        if not req.ok:
            raise PublishError(f"POST '{clear_url}' returned status code {req.status_code}")
    except requests.RequestException as e:
        raise PublishError(f"Publishing scores failed: {e}") from e

    log.info(f"Published {len(rows)} score rows to sheet")
    return len(rows)

########
# Main #
########

def main() -> int:
    """Built-in driver to invoke various utility functions for the module

    Usage: sheets.py <util_func> [<args> ...]

    Functions/usage:
      - fetch_poll_data [sheet_id=<sheet_id>]
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
