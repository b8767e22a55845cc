import logging
import os

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from controllers.labeling_session import LabelingSession  # noqa: E402


@pytest.fixture
def session_2d():
    """Single label 'fg' on a 100x100 grid, identity display transform."""
    return LabelingSession(["fg"], (100, 100))


@pytest.fixture
def make_session():
    def _make(names=("fg",), shape=(100, 100), **kwargs):
        return LabelingSession(list(names), shape, **kwargs)

    return _make


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield root
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)
