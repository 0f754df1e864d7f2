"""
Tests
"""

import pytest

from dkgnode.config import NodeConfig


def test_defaults():
    config = NodeConfig.from_env({})
    assert config.threshold == 3
    assert config.message_prefix == "mug00"
    assert config.timestamp_expiry == 60
    assert config.replay_window == 60.0
    assert config.assignment_margin == 20


def test_from_env():
    config = NodeConfig.from_env({"DKG_THRESHOLD": "5", "DKG_ASSIGNMENT_TIMEOUT": "2.5", "DKG_MESSAGE_PREFIX": "mug01"})
    assert config.threshold == 5
    assert config.assignment_timeout == 2.5
    assert config.message_prefix == "mug01"


def test_overrides_win():
    clock = lambda: 42.0
    config = NodeConfig.from_env({"DKG_THRESHOLD": "5"}, threshold=2, clock=clock)
    assert config.threshold == 2
    assert config.clock() == 42.0


@pytest.mark.parametrize("env", [{"DKG_THRESHOLD": "three"}, {"DKG_THRESHOLD": "0"}, {"DKG_ASSIGNMENT_TIMEOUT": "-1"},
                                 {"DKG_SUBSCRIPTION_BUFFER": "0"}])
def test_invalid_values(env):
    with pytest.raises(ValueError):
        NodeConfig.from_env(env)
