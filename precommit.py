#!/usr/bin/env python
import os
import logging
from SvnWarden.svntransaction import SVNTransaction
from SvnWarden.structure import check_paths
from SvnWarden.exceptions import RestrictedOperationException
from SvnWarden.utils import get_config

log = logging.getLogger(__name__)

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                              "svnwarden_config.py")


def is_bypassed(svn_txn, cfg):
    bypass_msg = cfg["BYPASS_MESSAGE_PREFIX"]
    bypass_users = cfg["BYPASS_ALLOWED_USERS"]
    if not bypass_msg or not svn_txn.log.startswith(bypass_msg):
        return False
    if bypass_users is None:  # No user restriction
        return True
    assert type(bypass_users) in (list, tuple)
    return svn_txn.author in bypass_users


def check_structure(svn_txn, cfg):
    """
    Checks the paths added by the transaction against the CHECK_STRUCTURE
    spec. Updated and deleted paths are not checked.
    """
    spec = cfg["CHECK_STRUCTURE"]
    if spec is None:
        return

    errors = check_paths(spec, svn_txn.added())
    if errors:
        raise RestrictedOperationException("CHECK_STRUCTURE:", errors)


def run_checks(repos, txn, is_revision=False, cfg_file=DEFAULT_CONFIG):
    """
    Returns an error string if an invalid function found, else returns None.
    With the return value passed into sys.exit(), a None value translates
    into a successful exit (0) while a string value results in an errorneous
    exit (1) with the string itself written to stderr.
    """
    t = SVNTransaction(repos, txn, is_revision)
    c = get_config(cfg_file)

    ## Add mechanism to bypass checks
    if is_bypassed(t, c):
        log.info("checks bypassed by %s", t.author)
        return None

    try:
        check_structure(t, c)

    except RestrictedOperationException as e:
        log.info("rejecting commit by %s", t.author)
        return "%s %s" % (c["REJECT_BANNER"], e.get_message())

    else:
        return None


def main():
    usage = """usage: %prog REPOS TXN

Run pre-commit checks on a repository transaction."""
    from optparse import OptionParser
    parser = OptionParser(usage=usage)
    parser.add_option("-r", "--revision",
                    help="Test mode. TXN actually refers to a revision.",
                    action="store_true", default=False)
    parser.add_option("-c", "--config", default=DEFAULT_CONFIG,
                    help="Config file to use [default: %default]")
    parser.add_option("-v", "--verbose", action="store_true", default=False,
                    help="Log the checks to stderr.")
    (opts, args) = parser.parse_args()
    if len(args) != 2:
        parser.error("expected REPOS and TXN")
    repos, txn = args

    if opts.verbose:
        logging.basicConfig(level=logging.DEBUG)

    return run_checks(repos, txn, opts.revision, opts.config)

if __name__ == "__main__":
    import sys
    sys.exit(main())
