import sys
import logging
import importlib.util

from SvnWarden.structure import compile_structure
from SvnWarden.mailer import normalize_project
from SvnWarden.exceptions import StructureSyntaxError, ConfigurationError

log = logging.getLogger(__name__)


def _load_module(cfg_file):
    spec = importlib.util.spec_from_file_location("cfg_mod", cfg_file)
    if spec is None:
        raise IOError("not a python file: %s" % cfg_file)
    cfg_mod = importlib.util.module_from_spec(spec)
    spec.loader.exec_module(cfg_mod)
    return cfg_mod


def get_config(cfg_file):
    try:
        cfg = _load_module(cfg_file).svnwarden_config
    except IOError:
        sys.exit("Could not load config file: %s" % cfg_file)
    except Exception as e:
        sys.exit("Invalid config file: %s\n%s" % (cfg_file, e))

    c = {}
    c["BYPASS_MESSAGE_PREFIX"] = cfg.get("BYPASS_MESSAGE_PREFIX", None)
    c["BYPASS_ALLOWED_USERS"] = cfg.get("BYPASS_ALLOWED_USERS", None)
    c["REJECT_BANNER"] = cfg.get("REJECT_BANNER", "")
    c["EMAIL_OUTPUT"] = cfg.get("EMAIL_OUTPUT", None)

    try:
        # compiled once here, so a broken spec rejects every commit
        structure = cfg.get("CHECK_STRUCTURE", None)
        if structure is not None:
            structure = compile_structure(structure)
        c["CHECK_STRUCTURE"] = structure

        c["EMAIL_COMMIT"] = [normalize_project(p)
                                for p in cfg.get("EMAIL_COMMIT", [])]
    except (StructureSyntaxError, ConfigurationError, RecursionError) as e:
        sys.exit("Invalid config file: %s\n%s" % (cfg_file, e))

    log.debug("loaded config file %s", cfg_file)
    return c
