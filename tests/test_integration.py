"""Integration test: run every view and the CLI against a generated image."""

import json
from pathlib import Path

import numpy as np
import pytest
from bitdepth_viz.__main__ import main
from bitdepth_viz.core.codec import load_image
from bitdepth_viz.core.histogram import build_histogram
from bitdepth_viz.core.quantizer import quantize
from bitdepth_viz.core.report import format_json
from bitdepth_viz.core.session import Session
from bitdepth_viz.core.types import Report, ViewInput
from bitdepth_viz.registry import discover
from PIL import Image

WIDTH = 64
HEIGHT = 16


@pytest.fixture
def gradient_png(tmp_path: Path) -> Path:
    """Horizontal colour gradient with a black column and a translucent row."""
    x = np.linspace(0, 255, WIDTH, dtype=np.float64)
    arr = np.zeros((HEIGHT, WIDTH, 4), dtype=np.uint8)
    arr[:, :, 0] = x.astype(np.uint8)
    arr[:, :, 1] = (255 - x).astype(np.uint8)
    arr[:, :, 2] = (x / 2).astype(np.uint8)
    arr[:, :, 3] = 255
    arr[:, 0, :3] = 0
    arr[0, :, 3] = 100
    path = tmp_path / 'gradient.png'
    Image.fromarray(arr).save(path)
    return path


@pytest.fixture
def cli_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Isolate the CLI from any .env or BITDEPTH_* variables on this machine."""
    (tmp_path / '.git').mkdir()
    monkeypatch.chdir(tmp_path)
    for name in ('BITDEPTH_DEFAULT_DEPTH', 'BITDEPTH_ORIGINAL_DEPTH', 'BITDEPTH_OUT_DIR'):
        # setenv first so teardown also removes values a .env load adds
        monkeypatch.setenv(name, '')
        monkeypatch.delenv(name)
    return tmp_path


def _run(gradient_png: Path, view_name: str, bit_depth: int, out_dir: Path) -> Report:
    original = load_image(str(gradient_png))
    session = Session(original)
    session.bit_depth = bit_depth
    report = Report(
        image_path=str(gradient_png),
        image_width=original.width,
        image_height=original.height,
        bit_depth=bit_depth,
    )

    class Args:
        pass

    args = Args()
    args.out_dir = str(out_dir)
    args.json = False
    discover()[view_name].execute(ViewInput(path=str(gradient_png), session=session), report, args)
    return report


class TestRegistry:
    def test_all_views_discovered(self) -> None:
        assert set(discover()) == {'all', 'compare', 'histogram', 'quantize', 'sweep'}


class TestViews:
    def test_quantize_writes_tagged_png(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'quantize', 2, tmp_path / 'out')
        data = report.views['quantize']
        assert data['levels'] == 4
        assert data['step'] == 64.0
        assert Path(data['file']).name == 'processed-2bit.png'

        written = load_image(data['file'])
        expected = quantize(load_image(str(gradient_png)), 2)
        assert written == expected

    def test_quantize_preserves_alpha_on_disk(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'quantize', 1, tmp_path / 'out')
        written = load_image(report.views['quantize']['file'])
        assert np.all(written.alpha[0] == 100)
        assert np.all(written.alpha[1:] == 255)
        assert not written.rgb[:, 0].any()

    def test_histogram_counts(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'histogram', 3, tmp_path / 'out')
        data = report.views['histogram']
        assert len(data['counts']) == 256
        assert data['total'] == WIDTH * HEIGHT
        expected = build_histogram(quantize(load_image(str(gradient_png)), 3))
        assert data['counts'] == expected.to_list()

    def test_sweep_table(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'sweep', 8, tmp_path / 'out')
        rows = report.views['sweep']['depths']
        assert [r['bit_depth'] for r in rows] == [8, 7, 6, 5, 4, 3, 2, 1]
        used = [r['quantized_levels'] for r in rows]
        assert used == sorted(used, reverse=True)
        for r in rows:
            assert r['quantized_levels'] <= r['levels']
        assert not report.files

    def test_compare_side_by_side(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'compare', 1, tmp_path / 'out')
        data = report.views['compare']
        img = Image.open(data['file'])
        assert img.size == (WIDTH * 2 + 8, HEIGHT)
        assert 0 < data['changed_pct'] <= 100

    def test_all_produces_report(self, gradient_png: Path, tmp_path: Path) -> None:
        report = _run(gradient_png, 'all', 4, tmp_path / 'out')
        assert set(report.views) == {'compare', 'histogram', 'quantize', 'sweep'}
        assert len(report.files) == 2
        parsed = json.loads(format_json(report))
        assert parsed['dimensions']['width'] == WIDTH
        assert parsed['levels'] == 16


class TestCli:
    def test_quantize_text(self, gradient_png: Path, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        main(['quantize', str(cli_env / 'out'), str(gradient_png), '-b', '3'])
        out = capsys.readouterr().out
        assert '3-bit (8 levels) of 8' in out
        assert (cli_env / 'out' / 'processed-3bit.png').is_file()

    def test_histogram_json(self, gradient_png: Path, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        main(['histogram', str(cli_env / 'out'), str(gradient_png), '--bit-depth', '1', '--json'])
        parsed = json.loads(capsys.readouterr().out)
        assert parsed['bit_depth'] == 1
        assert sum(parsed['views']['histogram']['counts']) == WIDTH * HEIGHT

    def test_defaults_to_original_depth(self, gradient_png: Path, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        main(['quantize', str(cli_env / 'out'), str(gradient_png), '-j'])
        assert json.loads(capsys.readouterr().out)['bit_depth'] == 8

    def test_env_default_depth(self, gradient_png: Path, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        (cli_env / '.env').write_text('BITDEPTH_DEFAULT_DEPTH=2\nBITDEPTH_OUT_DIR=envout\n')
        main(['quantize', '-', str(gradient_png), '-j'])
        captured = capsys.readouterr()
        assert json.loads(captured.out)['bit_depth'] == 2
        assert 'loaded' in captured.err
        assert (cli_env / 'envout' / 'processed-2bit.png').is_file()

    def test_bad_bit_depth_exits_2(self, gradient_png: Path, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        with pytest.raises(SystemExit) as exc:
            main(['quantize', str(cli_env / 'out'), str(gradient_png), '-b', '9'])
        assert exc.value.code == 2
        assert 'bit_depth must be in [1, 8]' in capsys.readouterr().err

    def test_depth_above_original_exits_2(self, gradient_png: Path, cli_env: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(['quantize', str(cli_env / 'out'), str(gradient_png), '-b', '6', '-o', '5'])
        assert exc.value.code == 2

    def test_non_image_exits_2(self, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        bogus = cli_env / 'upload.png'
        bogus.write_bytes(b'not an image at all')
        with pytest.raises(SystemExit) as exc:
            main(['quantize', str(cli_env / 'out'), str(bogus)])
        assert exc.value.code == 2
        assert 'not a valid image' in capsys.readouterr().err

    def test_help_lists_views(self, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        main(['help'])
        out = capsys.readouterr().out
        for name in ('quantize', 'histogram', 'sweep', 'compare', 'all'):
            assert name in out

    def test_help_view_prints_docstring(self, cli_env: Path, capsys: pytest.CaptureFixture) -> None:
        main(['help', 'quantize'])
        assert 'processed-<N>bit.png' in capsys.readouterr().out

    def test_help_unknown_view(self, cli_env: Path) -> None:
        with pytest.raises(SystemExit) as exc:
            main(['help', 'nope'])
        assert exc.value.code == 1
