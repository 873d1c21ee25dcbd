# -*- coding: utf-8 -*-

from os import environ, makedirs
import os.path
import logging
import logging.handlers

from dotenv import load_dotenv

from . import utils

######################
# Config/Environment #
######################

FILE_DIR     = os.path.dirname(os.path.realpath(__file__))
BASE_DIR     = os.path.realpath(os.path.join(FILE_DIR, os.pardir))

# secrets (API keys, sheet ids, key file location) may live in a local `.env` file
load_dotenv(os.path.join(BASE_DIR, '.env'))

CONFIG_DIR   = environ.get('BOWL_CONFIG_DIR') or os.path.join(BASE_DIR, 'config')
DFLT_CONFIG  = ['config.yml']
CONFIG_FILES = environ.get('BOWL_CONFIG_FILES') or DFLT_CONFIG
cfg          = utils.Config(CONFIG_FILES, CONFIG_DIR)

DEBUG        = int(environ.get('BOWL_DEBUG') or 0)

def env_setting(name: str, required: bool = True) -> str | None:
    """Return value of environment variable (possibly set via `.env` file)

    :raises ConfigError: if `required` and not set
    """
    value = environ.get(name)
    if not value and required:
        raise ConfigError(f"Environment variable '{name}' not set")
    return value

########
# Data #
########

DATA_DIR      = 'data'

def DataFile(file_name: str, dir: str = DATA_DIR) -> str:
    """Given name of file, return full path name (in DATA_DIR, or specified
    directory)
    """
    return os.path.join(BASE_DIR, dir, file_name)

###########
# Logging #
###########

LOGGER_NAME  = environ.get('BOWL_LOG_NAME') or 'bowlpool'
LOG_DIR      = 'log'
LOG_FILE     = LOGGER_NAME + '.log'
LOG_PATH     = os.path.join(BASE_DIR, LOG_DIR, LOG_FILE)
LOG_FMTR     = logging.Formatter('%(asctime)s %(levelname)s [%(filename)s:%(lineno)s]: %(message)s')
LOG_FILE_MAX = 25000000
LOG_FILE_NUM = 50

makedirs(os.path.dirname(LOG_PATH), exist_ok=True)
dflt_hand = logging.handlers.RotatingFileHandler(LOG_PATH, 'a', LOG_FILE_MAX, LOG_FILE_NUM)
dflt_hand.setLevel(logging.DEBUG)
dflt_hand.setFormatter(LOG_FMTR)

dbg_hand = logging.StreamHandler()
dbg_hand.setLevel(logging.DEBUG)
dbg_hand.setFormatter(LOG_FMTR)

log = logging.getLogger(LOGGER_NAME)
log.setLevel(logging.INFO)
log.addHandler(dflt_hand)
if DEBUG:
    log.setLevel(logging.DEBUG)
    if DEBUG > 1:
        log.addHandler(dbg_hand)

##############
# Exceptions #
##############

class DataError(RuntimeError):
    """Thrown if there is a problem with any of the data at runtime, whether
    due to bad external data or errrant internal processing
    """
    pass

class InputUnavailable(DataError):
    """Thrown if an upstream source (game results or poll responses) could not
    supply its data; the scoring run must be aborted (no partial scoring)
    """
    pass

class MalformedPrediction(DataError):
    """Thrown if a poll response is missing required identity fields; callers
    drop the response (with a diagnostic) rather than abort the run
    """
    pass

class PublishError(RuntimeError):
    """Thrown if ranked results could not be written to the score sheet
    """
    pass

class ConfigError(RuntimeError):
    """Thrown if there is a problem with a config file entry, or combination
    of entries
    """
    pass

class LogicError(RuntimeError):
    """Basically the same as an assert, but with a `raise` interface
    """
    pass

class ImplementationError(RuntimeError):
    """Thrown if there is a problem implementing an internal interface
    """
    pass
