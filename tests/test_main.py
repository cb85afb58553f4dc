"""
Tests for the command-line runner's argument parsing.
Run: python -m pytest tests/ -v
"""

import sys
import os
import pytest

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from main import parse_args


class TestCanvasArgument:

    def test_width_by_height(self):
        assert parse_args(['--canvas', '1200x750']).canvas == (1200.0, 750.0)
        assert parse_args(['--canvas', '1600X1000']).canvas == (1600.0, 1000.0)

    def test_default_is_none(self):
        assert parse_args([]).canvas is None

    @pytest.mark.parametrize('value', ['800', '800x', 'wide', '800x500x2', '0x500'])
    def test_malformed_value_is_a_usage_error(self, value, capsys):
        with pytest.raises(SystemExit) as exc:
            parse_args(['--canvas', value])
        assert exc.value.code == 2
        err = capsys.readouterr().err
        assert '--canvas' in err
        assert 'Traceback' not in err


if __name__ == "__main__":
    pytest.main([__file__, '-v'])
