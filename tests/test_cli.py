"""
Tests
"""

from click.testing import CliRunner

from dkgnode.cli import cli
from dkgnode.curve import H


def test_deal():
    result = CliRunner().invoke(cli, ["deal", "--nodes", "4", "--threshold", "3", "--secret", "abcdef"])
    assert result.exit_code == 0, result.output
    assert result.output.count("share=ok pedersen=ok") == 4


def test_deal_bad_threshold():
    result = CliRunner().invoke(cli, ["deal", "--nodes", "2", "--threshold", "3"])
    assert result.exit_code != 0


def test_h_point():
    result = CliRunner().invoke(cli, ["h-point"])
    assert result.exit_code == 0
    assert result.output.split() == [format(H.x, "x"), format(H.y, "x")]
