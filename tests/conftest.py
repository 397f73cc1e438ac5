import pytest

from main import main
from twig.commit_helpers import create_commit
from twig.file_helpers import put_blob
from twig.repo_utils import init_repository, load_state


@pytest.fixture
def repo(tmp_path):
    return init_repository(tmp_path)


@pytest.fixture
def state(repo):
    return load_state(repo)


@pytest.fixture
def twig(repo, capsys):
    """Run a CLI command against the test repository and return (exit code, stdout)."""

    def run(*argv):
        code = main(["-C", str(repo), *argv])
        return code, capsys.readouterr().out

    return run


def make_commit(root, parents, message, files, timestamp=1):
    blobs = {path: put_blob(root, content) for path, content in files.items()}
    return create_commit(root, parents, message, timestamp, blobs)
