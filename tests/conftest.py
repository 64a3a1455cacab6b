# SPDX-License-Identifier: LGPL-3.0-or-later
import logging
import os
import sys
from pathlib import Path

import pytest

_THIS_DIR = Path(__file__).resolve().parent
_REPO_ROOT = _THIS_DIR.parent

for _p in (_REPO_ROOT, _THIS_DIR):
    if str(_p) not in sys.path:
        sys.path.insert(0, str(_p))

os.environ.setdefault("PYTHONPATH", str(_REPO_ROOT))


def pytest_configure(config):
    """Register custom markers"""
    config.addinivalue_line("markers", "unit: fast tests of a single module")
    config.addinivalue_line("markers", "integration: tests that translate whole sysconfig directories")


@pytest.fixture(autouse=True)
def _restore_netcompat_logger():
    # Log.setup() (CLI tests) turns propagation off and installs handlers; caplog needs propagation.
    logger = logging.getLogger("netcompat")
    propagate, handlers, level = logger.propagate, list(logger.handlers), logger.level
    logger.propagate = True
    yield
    for h in list(logger.handlers):
        if h not in handlers:
            logger.removeHandler(h)
            h.close()
    logger.propagate = propagate
    logger.setLevel(level)


@pytest.fixture
def sysconfig_dir(tmp_path):
    """Return a writer: write({"ifcfg-eth0": "...", ...}) -> directory path."""

    def _write(files):
        for name, text in files.items():
            (tmp_path / name).write_text(text, encoding="utf-8")
        return tmp_path

    return _write
