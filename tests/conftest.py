import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

hello_text = "hello"
world_text = "world"


class FS:
    def __init__(self, tmp_path):
        self.old = tmp_path / "old"
        self.new = tmp_path / "new"
        self.old_a = self.old / "a.txt"
        self.old_b = self.old / "b.txt"
        self.new_copy_of_a = self.new / "copy_of_a.txt"


@pytest.fixture
def fs(tmp_path):
    fs = FS(tmp_path)
    fs.old.mkdir()
    fs.new.mkdir()
    fs.old_a.write_text(hello_text)
    fs.old_b.write_text(world_text)
    fs.new_copy_of_a.write_text(hello_text)
    return fs


def make_tree(root, files: dict):
    """Create files under root from a {relative path: text} dict."""
    for rel, text in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(text)
    return root


@pytest.fixture
def deep_tree(tmp_path):
    # depth counts levels below the root: top.txt is at depth 1, l2.txt at depth 2...
    return make_tree(
        tmp_path / "deep",
        {
            "top.txt": "depth 1",
            "d1/l2.txt": "depth 2",
            "d1/d2/l3.txt": "depth 3",
            "d1/d2/d3/l4.txt": "depth 4",
        },
    )


@pytest.fixture
def cli_runner():
    return CliRunner()


@pytest.fixture(autouse=True)
def reset_logger():
    yield
    logger.remove()
    logger.add(sys.stderr)
