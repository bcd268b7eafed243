import os

import pytest

from SvnWarden.svntransaction import SVNTransaction

TEST_CONFIG = os.path.join(os.path.dirname(__file__), "test_config.py")

INFO = "jsilva\n2008-09-16 11:03:35 -0300 (Tue, 16 Sep 2008)\n%d\n%s\n"


def svnlook_output(changed, log="Setting up the conf directory.",
                   author="jsilva"):
    "Canned 'svnlook changed' and 'svnlook info' output"
    info = INFO.replace("jsilva", author, 1) % (len(log), log)
    return {
        "changed --copy-info": "".join(line + "\n" for line in changed),
        "info": info,
    }


@pytest.fixture
def test_config():
    return TEST_CONFIG


@pytest.fixture
def fake_svnlook(monkeypatch):
    """
    Replaces the svnlook calls of SVNTransaction with canned output.
    Usage: fake_svnlook(["A   trunk/README"], log="...")
    """
    def install(changed, **kwargs):
        outputs = svnlook_output(changed, **kwargs)

        def _svnlook(self, subcommand):
            return outputs[subcommand]

        monkeypatch.setattr(SVNTransaction, "_svnlook", _svnlook)
        return outputs

    return install
