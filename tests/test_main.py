"""
Smoke tests for the demo entry point
"""

import pytest

from main import main


class TestMain:
    def test_default_curve(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--seed", "3"]) == 0
        out = capsys.readouterr().out
        assert "3 * G = Point(103, 239)" in out
        assert "[Alice] shared point:" in out

    def test_discrete_log_and_count(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--curve", "F43", "--scalar", "2", "--target", "13", "15", "--count-points", "--seed", "1"]) == 0
        out = capsys.readouterr().out
        assert "Point(13, 15) = 1 * G" in out
        assert "Number of points: 39" in out

    def test_target_not_on_curve(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--curve", "F1021-A", "--target", "56", "914", "--seed", "1"]) == 1
        assert "not on the curve" in capsys.readouterr().err

    def test_alternate_generator(self, capsys: pytest.CaptureFixture) -> None:
        assert main(["--curve", "F43", "--alternate-generator", "--seed", "5"]) == 0
        assert "[Bob] shared point:" in capsys.readouterr().out

    def test_missing_alternate_generator(self) -> None:
        assert main(["--curve", "F1021-B", "--alternate-generator", "--seed", "5"]) == 1

    def test_negative_scalar(self) -> None:
        with pytest.raises(SystemExit):
            main(["--scalar", "-1"])
