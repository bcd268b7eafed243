import re

import pytest

import postcommit
from SvnWarden.mailer import (normalize_project, format_body, build_message,
                              commit_messages)
from SvnWarden.svntransaction import SVNTransaction
from SvnWarden.exceptions import ConfigurationError

PROJECT = {
    "from": "svn@example.com",
    "to": "dev@example.com",
}


def test_normalize_project():
    p = normalize_project(PROJECT)
    assert p["match"].search("any/path")
    assert p["to"] == "dev@example.com"
    assert "match" not in PROJECT


@pytest.mark.parametrize("options, message", [
    (dict(PROJECT, subject="x"), "unknown option 'subject'"),
    (dict(PROJECT, match="^trunk/"), "must be a compiled regex"),
    ({"to": "dev@example.com"}, "missing 'from' address"),
    ({"from": "svn@example.com"}, "missing 'to' address"),
])
def test_invalid_projects(options, message):
    with pytest.raises(ConfigurationError) as e:
        normalize_project(options)
    assert message in str(e.value)


def test_format_body():
    body = format_body("jsilva", "153", "2008-09-16 11:03:35 -0300", {
        "added": ["trunk/conf/svn-hooks.conf"],
        "deleted": ["trunk/conf/hooks.conf"],
        "updated": [],
        "prop_modified": ["trunk/conf/"],
    }, "Setting up the conf directory.\nSecond line.")
    assert body == (
        "Author:   jsilva\n"
        "Revision: 153\n"
        "Date:     2008-09-16 11:03:35 -0300\n"
        "Added files:\n"
        "    trunk/conf/svn-hooks.conf\n"
        "Deleted files:\n"
        "    trunk/conf/hooks.conf\n"
        "Prop_modified files:\n"
        "    trunk/conf/\n"
        "Log Message:\n"
        "    Setting up the conf directory.\n"
        "    Second line.\n"
    )


def test_build_message():
    p = normalize_project(dict(PROJECT, tag="TAG", cc="qa@example.com",
                               reply_to="list@example.com"))
    msg = build_message(p, "153", "jsilva", "body\n")
    assert msg["Subject"] == "[TAG] Commit revision 153 by jsilva"
    assert msg["From"] == "svn@example.com"
    assert msg["To"] == "dev@example.com"
    assert msg["Cc"] == "qa@example.com"
    assert msg["Reply-To"] == "list@example.com"
    assert msg["Bcc"] is None
    assert msg.get_content() == "body\n"


def test_untagged_subject():
    msg = build_message(normalize_project(PROJECT), "7", "lsc", "body\n")
    assert msg["Subject"] == "Commit revision 7 by lsc"


def test_commit_messages_match_changed_paths(fake_svnlook):
    fake_svnlook(["A   trunk/README", "U   branches/proj-x/README"])
    t = SVNTransaction("/repos", "42", is_revision=True)
    projects = [
        normalize_project(dict(PROJECT, match=re.compile(r"^trunk/"))),
        normalize_project(dict(PROJECT, match=re.compile(r"^tags/"),
                               to="release@example.com")),
        normalize_project(dict(PROJECT, to="all@example.com")),
    ]
    messages = commit_messages(t, projects)
    assert [m["To"] for m in messages] == ["dev@example.com",
                                           "all@example.com"]
    body = messages[0].get_content()
    assert "Revision: 42\n" in body
    assert "Added files:\n    trunk/README\n" in body
    assert "Updated files:\n    branches/proj-x/README\n" in body


def test_run_mailer(fake_svnlook, test_config, tmp_path, monkeypatch):
    fake_svnlook(["A   trunk/README"])
    output = tmp_path / "mail.txt"
    real_get_config = postcommit.get_config

    def get_config(cfg_file):
        c = real_get_config(cfg_file)
        c["EMAIL_OUTPUT"] = str(output)
        return c

    monkeypatch.setattr(postcommit, "get_config", get_config)
    messages = postcommit.run_mailer("/repos", "42", test_config)
    assert len(messages) == 1
    text = output.read_text()
    assert "Subject: [trunk] Commit revision 42 by jsilva" in text
    assert "Reply-To: dev-list@example.com" in text


def test_run_mailer_to_stdout(fake_svnlook, test_config, capsys):
    fake_svnlook(["A   tags/proj-1.0/"])
    postcommit.run_mailer("/repos", "43", test_config)
    out = capsys.readouterr().out
    assert "To: release@example.com" in out
    assert "Commit revision 43 by jsilva" in out
