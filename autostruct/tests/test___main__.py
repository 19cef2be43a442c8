from unittest.mock import patch

import pytest

from autostruct import __main__


class TestCmdFunctions:
    @patch("autostruct.codegen.main.main")
    def test_cmd_generate_success(self, mock_main):
        result = __main__.cmd_generate(["-o", "out"])
        assert result == 0
        mock_main.assert_called_once_with(["-o", "out"])

    @patch("autostruct.codegen.main.main")
    def test_cmd_generate_failure(self, mock_main, capsys):
        mock_main.side_effect = SystemExit("Error: boom")
        result = __main__.cmd_generate([])
        assert result == 1
        assert "Error: boom" in capsys.readouterr().err

    @patch("autostruct.codegen.main.main")
    def test_cmd_generate_usage_error(self, mock_main):
        mock_main.side_effect = SystemExit(2)
        assert __main__.cmd_generate([]) == 2

    @patch("autostruct.codegen.types.main")
    def test_cmd_types_success(self, mock_main):
        assert __main__.cmd_types(["int4"]) == 0
        mock_main.assert_called_once_with(["int4"])

    @patch("autostruct.codegen.types.main")
    def test_cmd_types_failure(self, mock_main):
        mock_main.side_effect = SystemExit(1)
        assert __main__.cmd_types([]) == 1


class TestMain:
    def test_help(self, capsys):
        with patch("sys.argv", ["autostruct"]):
            assert __main__.main() == 0
        out = capsys.readouterr().out
        assert "Available commands:" in out
        assert "generate" in out

    def test_unknown_command(self, capsys):
        with patch("sys.argv", ["autostruct", "bogus"]):
            assert __main__.main() == 1
        assert "Unknown command: bogus" in capsys.readouterr().out

    @pytest.mark.parametrize("command", ["generate", "types"])
    def test_dispatch(self, command):
        handler = patch.dict(
            __main__.COMMANDS,
            {command: (lambda args: 7 if args == ["x"] else 0, "")},
        )
        with handler, patch("sys.argv", ["autostruct", command, "x"]):
            assert __main__.main() == 7
