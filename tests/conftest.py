import os
import sys
import tempfile

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

TESTS_DIR = os.path.dirname(os.path.abspath(__file__))
if TESTS_DIR not in sys.path:
    sys.path.insert(0, TESTS_DIR)

# Keep log files and data out of the checkout and the home directory.
_SCRATCH = tempfile.mkdtemp(prefix="bastion-tests-")
os.environ.setdefault("BASTION_LOG_DIR", os.path.join(_SCRATCH, "logs"))
os.environ.setdefault("BASTION_DATA_DIR", os.path.join(_SCRATCH, "data"))
os.environ["BASTION_MIRROR_DIR"] = ""
os.environ["BASTION_COMMAND_PREFIX"] = ">>"
os.environ["BASTION_DEBUG"] = "false"

import pytest  # noqa: E402

from fakes import FakeChannel, FakeGuild, FakeUser  # noqa: E402


@pytest.fixture
def system(tmp_path):
    from core.bot_system import BotSystem

    return BotSystem(data_dir=str(tmp_path / "data"), mirror_dir="")


@pytest.fixture
def guild():
    owner = FakeUser(1000, "owner")
    alice = FakeUser(1001, "alice", discriminator="1234")
    bob = FakeUser(1002, "bob", nick="bobby")
    return FakeGuild(555, "Test Guild", [owner, alice, bob])


@pytest.fixture
def channel():
    return FakeChannel()
