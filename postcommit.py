#!/usr/bin/env python
import os
import sys
import logging
from SvnWarden.svntransaction import SVNTransaction
from SvnWarden.mailer import commit_messages
from SvnWarden.utils import get_config

log = logging.getLogger(__name__)

DEFAULT_CONFIG = os.path.join(os.path.dirname(os.path.abspath(__file__)),
                              "svnwarden_config.py")


def write_messages(messages, output=None):
    "Appends the messages to the output file, or writes them to stdout"
    text = "".join(m.as_string() + "\n" for m in messages)
    if output is None:
        sys.stdout.write(text)
    else:
        with open(output, "a") as f:
            f.write(text)


def run_mailer(repos, rev, cfg_file=DEFAULT_CONFIG):
    """
    Composes the notifications for a committed revision. Returns the list
    of messages written out.
    """
    c = get_config(cfg_file)
    if not c["EMAIL_COMMIT"]:
        return []

    t = SVNTransaction(repos, rev, is_revision=True)
    messages = commit_messages(t, c["EMAIL_COMMIT"])
    if messages:
        write_messages(messages, c["EMAIL_OUTPUT"])
    log.info("r%s: %d notification(s)", rev, len(messages))
    return messages


def main():
    usage = """usage: %prog REPOS REV

Compose commit notifications for a repository revision."""
    from optparse import OptionParser
    parser = OptionParser(usage=usage)
    parser.add_option("-c", "--config", default=DEFAULT_CONFIG,
                    help="Config file to use [default: %default]")
    parser.add_option("-v", "--verbose", action="store_true", default=False,
                    help="Log to stderr.")
    (opts, args) = parser.parse_args()
    if len(args) != 2:
        parser.error("expected REPOS and REV")
    repos, rev = args

    if opts.verbose:
        logging.basicConfig(level=logging.DEBUG)

    run_mailer(repos, rev, opts.config)

if __name__ == "__main__":
    sys.exit(main())
