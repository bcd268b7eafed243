#!/usr/bin/env python
#
# Issues:
# ------
# * a copy + update shows up "A +" no "U +" in svnlook, so copied paths are
#   reported as added even when they were edited after the copy.
#
import re
import sys
import logging
import subprocess

log = logging.getLogger(__name__)

CHANGE_KINDS = ("added", "deleted", "updated", "prop_modified")


class SVNTransaction(object):
    def __init__(self, repos, txn, is_revision=False, svnlook_cmd="svnlook"):
        self.is_revision = is_revision
        self.svnlook_cmd = svnlook_cmd
        self.repos = repos
        self.txn = txn
        self.rev = (None, txn)[is_revision]
        self._load_changes()
        self._load_info()

    def added(self):
        """Returns the sorted list of paths added by this transaction.

        Copied paths count as added. Directory paths end with a "/", the
        way svnlook lists them.
        """
        return sorted(c.path for c in self.changes.values() if c.added)

    def changed(self):
        return sorted(self.changes.keys())

    def changed_by_kind(self):
        """Returns a dict of sorted path lists, keyed by change kind
        (added, deleted, updated and prop_modified). A path can show up
        under both updated and prop_modified.
        """
        d = dict((k, []) for k in CHANGE_KINDS)
        for c in self.changes.values():
            if c.added:
                d["added"].append(c.path)
            elif c.deleted:
                d["deleted"].append(c.path)
            elif c.updated:
                d["updated"].append(c.path)
            if c.prop_changed:
                d["prop_modified"].append(c.path)
        for paths in d.values():
            paths.sort()
        return d

    def _call(self, cmd):
        log.debug("running %s", " ".join(cmd))
        p = subprocess.Popen(cmd,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                universal_newlines=True)
        out, err = p.communicate()
        if err:
            sys.exit("[ERROR] %s" % err)
        return out

    def _svnlook(self, subcommand):
        r_opt = ("--transaction", "--revision")[self.is_revision]
        cmd = [self.svnlook_cmd] + subcommand.split()
        cmd += [r_opt, str(self.txn), self.repos]
        return self._call(cmd)

    def _load_changes(self):
        out = self._svnlook("changed --copy-info").strip("\n")
        change_items = (SVNChangeItem(entry.strip())
                            for entry in re.split(r"\n(?=\w)", out) if entry)
        self.changes = dict((c.path, c) for c in change_items)

    def _load_info(self):
        info = self._svnlook("info").split("\n", 3)
        info += [""] * (4 - len(info))
        self.author, self.date, _, self.log = info
        self.log = self.log.rstrip("\n")


class SVNChangeItem(object):
    def __init__(self, change_line):
        assert change_line[0] in "ADU_"
        assert change_line[1] in "U "
        assert change_line[2] in "+ "
        if change_line[2] == "+":
            assert change_line[0] == "A"

        self.added = (change_line[0] == "A")
        self.deleted = (change_line[0] == "D")
        self.updated = (change_line[0] == "U")
        self.prop_changed = (change_line[1] == "U")
        self.copied = (change_line[2] == "+")
        self.source = self.rev = None

        self.path = change_line[3:].strip()
        if self.copied:
            self.path, rem = self.path.split("\n", 1)
            self.path = self.path.strip()
            rem = rem.strip()
            assert rem[0] == "(" and rem[-1] == ")"
            self.source, self.rev = rem[1:-1].split()[1].split(":r")

