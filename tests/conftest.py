"""
Pytest configuration and shared fixtures for Chesster tests.
"""

import pytest
import sys
from pathlib import Path

# Add the project root to the path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from chesster.bus.events import ChannelInfo, EventKind, InboundEvent  # noqa: E402

BOT_ID = "UBOT"


class RecordingSend:
    """Stands in for Slack's say(); records every call."""

    def __init__(self, fail: bool = False):
        self.calls: list[dict] = []
        self.fail = fail

    async def __call__(self, text: str = "", **kwargs):
        self.calls.append({"text": text, **kwargs})
        if self.fail:
            raise RuntimeError("send failed")

    @property
    def texts(self) -> list[str]:
        return [call["text"] for call in self.calls]


@pytest.fixture
def bot_id():
    return BOT_ID


@pytest.fixture
def send():
    return RecordingSend()


@pytest.fixture
def public_channel():
    return ChannelInfo(id="CPUBLIC", name="general")


@pytest.fixture
def dm_channel():
    return ChannelInfo(id="DDIRECT", is_im=True)


@pytest.fixture
def group_dm_channel():
    return ChannelInfo(id="GGROUP", is_im=True, is_group=True)


@pytest.fixture
def make_event():
    """Build inbound events with sensible defaults."""
    def _make(text="", channel_id="CPUBLIC", kind=EventKind.MESSAGE, **kwargs):
        kwargs.setdefault("user", "UHUMAN")
        kwargs.setdefault("ts", "1700000000.000100")
        return InboundEvent(kind=kind, channel_id=channel_id, text=text, **kwargs)
    return _make


@pytest.fixture
def db_path(tmp_path):
    """Path for a throwaway database."""
    return tmp_path / "data" / "chesster.db"


@pytest.fixture
def failing_send():
    return RecordingSend(fail=True)


@pytest.fixture
def config_dir(tmp_path):
    """Create a temporary config directory."""
    config = tmp_path / "config"
    config.mkdir()
    return config
