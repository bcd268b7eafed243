import re

c = svnwarden_config = {}

## Mechanism for bypassing commit checks
c["BYPASS_MESSAGE_PREFIX"] = "<Maintenance>"  # "None" to disallow bypass
c["BYPASS_ALLOWED_USERS"] = ("lsc", )  # "None" for no user restriction


c["REJECT_BANNER"] = """
*********************************************************************
*                SVN Warden : COMMIT REJECTED                       *
*********************************************************************
"""

## Repository structure. Only added paths are checked against it.
# Directories are lists of NAME, SPEC pairs, tried in order. NAME is a
# string, a compiled regex or a number (1: anything else, -1: nothing else,
# with the following string as help message). SPEC is "FILE", "DIR", a
# number (1: ok, -1: not ok) or another directory list.

tag_rx = re.compile(r"^[a-z]+-\d+\.\d+$")  # e.g. project-1.0
branch_rx = re.compile(r"^[a-z]+-")  # must start with letters and hyphen

project_struct = [
    "META.yml", "FILE",
    "Makefile.PL", "FILE",
    "ChangeLog", "FILE",
    "LICENSE", "FILE",
    "MANIFEST", "FILE",
    "README", "FILE",
    "t", [
        re.compile(r"\.t$"), "FILE",
    ],
    "lib", "DIR",
]

c["CHECK_STRUCTURE"] = [
    "trunk", project_struct,
    "branches", [
        branch_rx, project_struct,
    ],
    "tags", [
        tag_rx, project_struct,
        -1, "Tags must be named like project-1.0",
    ],
]

## Commit notifications, composed by the post-commit hook.
# EMAIL_OUTPUT is the file they are appended to ("None" for stdout).
c["EMAIL_OUTPUT"] = None

c["EMAIL_COMMIT"] = [
    {
        "match": re.compile(r"^trunk/"),
        "tag": "trunk",
        "from": "svn@example.com",
        "to": "dev@example.com",
    },
]
