import logging

import cv2
import numpy as np

from autothresh.cli import main
from autothresh.config import BINARY_FILENAME, GRAY_FILENAME


def test_missing_argument_prints_usage(capsys):
    assert main([]) == 0
    out = capsys.readouterr().out
    assert "usage:" in out
    assert "Please enter a path." in out


def test_nonexistent_path(tmp_path, capsys, caplog):
    with caplog.at_level(logging.ERROR):
        assert main([str(tmp_path / "nope.png")]) == 0
    assert "Path not found" in caplog.text
    assert capsys.readouterr().out == ""


def test_prints_three_thresholds_and_saves(tmp_path, capsys):
    src = tmp_path / "two.png"
    cv2.imwrite(str(src), np.array([[0, 255]], dtype=np.uint8))
    out_dir = tmp_path / "out"

    assert main([str(src), "--out-dir", str(out_dir)]) == 0
    # mean, otsu, yen
    assert capsys.readouterr().out.split() == ["127", "0", "255"]
    assert (out_dir / GRAY_FILENAME).is_file()
    binary = cv2.imread(str(out_dir / BINARY_FILENAME), cv2.IMREAD_UNCHANGED)
    assert binary.tolist() == [[0, 0]]


def test_method_option_selects_binarization_threshold(tmp_path):
    src = tmp_path / "two.png"
    cv2.imwrite(str(src), np.array([[0, 255]], dtype=np.uint8))
    out_dir = tmp_path / "out"

    assert main([str(src), "--method", "otsu", "--out-dir", str(out_dir)]) == 0
    binary = cv2.imread(str(out_dir / BINARY_FILENAME), cv2.IMREAD_UNCHANGED)
    assert binary.tolist() == [[0, 255]]


def test_undecodable_image_reports_error(tmp_path, caplog):
    src = tmp_path / "broken.png"
    src.write_text("garbage")
    with caplog.at_level(logging.ERROR):
        assert main([str(src), "--out-dir", str(tmp_path / "out")]) == 1
    assert "broken.png" in caplog.text
