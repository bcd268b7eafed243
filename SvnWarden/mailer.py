"""
Post-commit notification emails.

Each project in the EMAIL_COMMIT config list describes one notification:

 match     compiled regex; the email is only composed if it is found in at
           least one changed path. Matches everything by default.
 from      address for the From: header. Required.
 to        addresses the email goes to. Required.
 tag       if present, the subject is prefixed with "[tag] ".
 cc, bcc, reply_to
           optional address lists.

The body looks like:

 Author:   jsilva
 Revision: 153
 Date:     2008-09-16 11:03:35 -0300 (Tue, 16 Sep 2008)
 Added files:
     trunk/conf/svn-hooks.conf
 Log Message:
     Setting up the conf directory.
"""
import re
import logging
from email.message import EmailMessage

from SvnWarden.exceptions import ConfigurationError
from SvnWarden.svntransaction import CHANGE_KINDS

log = logging.getLogger(__name__)

VALID_OPTIONS = ("match", "tag", "from", "to", "cc", "bcc", "reply_to")
OPTIONAL_HEADERS = ("reply_to", "cc", "bcc")

_REGEX_TYPE = type(re.compile(""))


def normalize_project(options):
    "Checks the options of an EMAIL_COMMIT project and fills in defaults"
    unknown = sorted(set(options) - set(VALID_OPTIONS))
    if unknown:
        raise ConfigurationError(
            "EMAIL_COMMIT: unknown option '%s'\nThe valid options are: %s"
            % (unknown[0], ", ".join(sorted(VALID_OPTIONS))))

    p = dict(options)
    if "match" in p:
        if not isinstance(p["match"], _REGEX_TYPE):
            raise ConfigurationError(
                "EMAIL_COMMIT: 'match' argument must be a compiled regex")
    else:
        p["match"] = re.compile(".")  # match all

    for header in ("from", "to"):
        if header not in p:
            raise ConfigurationError(
                "EMAIL_COMMIT: missing '%s' address" % header)
    return p


def _indent(text):
    return "\n".join("    " + line for line in text.split("\n"))


def format_body(author, rev, date, changes, log_msg):
    o = ["Author:   %s" % author,
         "Revision: %s" % rev,
         "Date:     %s" % date]
    for kind in CHANGE_KINDS:
        paths = changes.get(kind)
        if paths:
            o.append("%s files:" % kind.capitalize())
            o.extend("    %s" % p for p in paths)
    o.append("Log Message:")
    o.append(_indent(log_msg))
    return "\n".join(o) + "\n"


def build_message(project, rev, author, body):
    subject = "Commit revision %s by %s" % (rev, author)
    if project.get("tag"):
        subject = "[%s] %s" % (project["tag"], subject)

    msg = EmailMessage()
    msg["From"] = project["from"]
    msg["To"] = project["to"]
    msg["Subject"] = subject
    for header in OPTIONAL_HEADERS:
        addrs = project.get(header)
        if addrs:
            msg[header.replace("_", "-").title()] = addrs
    msg.set_content(body)
    return msg


def commit_messages(txn, projects):
    """
    Returns the notification messages for a committed revision, one for each
    project matching at least one of the changed paths.
    """
    body = format_body(txn.author, txn.rev, txn.date,
                       txn.changed_by_kind(), txn.log)
    changed = txn.changed()

    messages = []
    for p in projects:
        if any(p["match"].search(f) for f in changed):
            log.debug("composing mail for %s (r%s)", p["to"], txn.rev)
            messages.append(build_message(p, txn.rev, txn.author, body))
    return messages
