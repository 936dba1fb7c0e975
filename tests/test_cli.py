"""
Tests for the GraphToTeX command-line interface.
"""

import logging

import ezdxf
import pytest
from graphtotex.__main__ import build_parser, main
from graphtotex.config import LOG_LEVEL_ENV, log_level_from_env
from graphtotex.logging_config import setup_logging


@pytest.fixture(autouse=True)
def reset_package_logger():
    yield
    logger = logging.getLogger("graphtotex")
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestCheck:

    def test_valid(self, capsys):
        assert main(["check", "x^2", "x^2 + y^2 = 4", ""]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "x^2: explicit: {x}^{2}"
        assert out[1].startswith("x^2 + y^2 = 4: implicit:")
        assert out[2] == ": (empty)"

    def test_invalid(self, capsys):
        assert main(["check", "x", "sinh(x)"]) == 1
        out = capsys.readouterr().out
        assert 'sinh(x): error: Unsupported function "sinh".' in out

    def test_surface(self, capsys):
        assert main(["check", "--3d", "x*y"]) == 0
        assert capsys.readouterr().out.startswith("x*y: surface: z = ")

    def test_example(self, capsys):
        assert main(["check", "--example", "sine"]) == 0
        assert len(capsys.readouterr().out.splitlines()) == 2

    def test_no_expressions(self):
        with pytest.raises(SystemExit):
            main(["check"])


class TestTikz:

    def test_stdout(self, capsys):
        assert main(["tikz", "x^2", "--no-grid"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("% GraphToTeX export")
        assert "% Grid" not in out
        assert "plot ({\\x},{pow(\\x,2)});" in out

    def test_bounds_and_file(self, tmp_path):
        target = tmp_path / "graph.tex"
        assert main(["tikz", "x", "--xmin", "0", "--xmax", "4", "-o", str(target)]) == 0
        text = target.read_text(encoding="utf-8")
        assert "\\clip (0,-10) rectangle (4,10);" in text

    def test_invalid_entry_warns(self, capsys):
        assert main(["tikz", "x + t"]) == 0
        assert "Warning: skipping 'x + t'" in capsys.readouterr().err

    def test_tikz3d(self, tmp_path):
        target = tmp_path / "surface.tex"
        assert main(["tikz3d", "x*y", "--yaw", "0", "--no-box", "-o", str(target)]) == 0
        text = target.read_text(encoding="utf-8")
        assert "view={0}{-31.5127}" in text
        assert "axis line style" not in text
        assert "{(x)*(y)};" in text


class TestDxf:

    def test_2d(self, tmp_path, capsys):
        target = tmp_path / "graph.dxf"
        assert main(["dxf", "sin(x)", "--samples", "100", "-o", str(target)]) == 0
        assert target.exists()
        assert f"Wrote {target}" in capsys.readouterr().out
        doc = ezdxf.readfile(str(target))
        assert len(doc.modelspace().query('LWPOLYLINE[layer=="CURVES"]')) == 1

    def test_3d(self, tmp_path):
        target = tmp_path / "surface"
        assert main(["dxf", "--3d", "x*y/10", "--no-grid", "-o", str(target)]) == 0
        doc = ezdxf.readfile(str(target) + ".dxf")
        msp = doc.modelspace()
        assert len(msp.query('HATCH[layer=="SURFACES"]')) > 0
        assert len(msp.query('TEXT')) == 3

    def test_output_required(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["dxf", "x"])

    @pytest.mark.parametrize("option,value", [
        ("--width", "0"),
        ("--height", "-5"),
        ("--width", "nan"),
        ("--height", "inf"),
        ("--width", "wide"),
    ])
    def test_bad_canvas_size(self, option, value, capsys):
        with pytest.raises(SystemExit) as excinfo:
            main(["dxf", "x", "-o", "graph.dxf", option, value])
        assert excinfo.value.code == 2
        assert f"argument {option}" in capsys.readouterr().err

    def test_canvas_size_parsed(self):
        args = build_parser().parse_args(["dxf", "x", "-o", "f", "--width", "640", "--height", "480.5"])
        assert (args.width, args.height) == (640.0, 480.5)


class TestLogging:

    def test_level_from_env(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENV, raising=False)
        assert log_level_from_env() == logging.WARNING
        monkeypatch.setenv(LOG_LEVEL_ENV, "debug")
        assert log_level_from_env() == logging.DEBUG
        monkeypatch.setenv(LOG_LEVEL_ENV, "15")
        assert log_level_from_env() == 15
        monkeypatch.setenv(LOG_LEVEL_ENV, "chatty")
        assert log_level_from_env(logging.ERROR) == logging.ERROR

    def test_setup_logging(self, tmp_path):
        import io
        stream = io.StringIO()
        log_file = tmp_path / "run.log"
        setup_logging(logging.DEBUG, log_file=str(log_file), stream=stream)
        setup_logging(logging.DEBUG, log_file=str(log_file), stream=stream)

        logger = logging.getLogger("graphtotex")
        assert len(logger.handlers) == 2
        logging.getLogger("graphtotex.test").info("hello")
        assert stream.getvalue().count("Logging initialized.") == 2
        assert "graphtotex.test - INFO - hello" in stream.getvalue()
