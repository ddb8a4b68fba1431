import json

from click.testing import CliRunner

from fractal_engine import ImageExporter
from fractal_engine.cli.main import main


def test_render_mandelbrot(tmp_path):
    output = tmp_path / "mandelbrot.png"
    result = CliRunner().invoke(main, [
        'render', str(output), '-w', '8', '-h', '8', '--max-iterations', '16'])
    assert result.exit_code == 0, result.output
    assert output.exists()
    assert ImageExporter.extract_metadata(output).max_iterations == 16


def test_render_julia_preset(tmp_path):
    output = tmp_path / "rabbit.png"
    result = CliRunner().invoke(main, [
        'render', str(output), '-f', 'julia', '--julia-c', 'rabbit',
        '-w', '8', '-h', '6', '--max-iters', '16'])
    assert result.exit_code == 0, result.output
    assert "Using Julia preset: rabbit" in result.output
    metadata = ImageExporter.extract_metadata(output)
    assert metadata.fractal_parameters['c_real'] == -0.123
    assert metadata.dimensions == (8, 6)


def test_render_multibrot_complex_exponent(tmp_path):
    output = tmp_path / "multibrot.png"
    result = CliRunner().invoke(main, [
        'render', str(output), '-f', 'multibrot', '--exponent', '3,0.5',
        '-w', '6', '-h', '6', '--max-iterations', '8'])
    assert result.exit_code == 0, result.output
    assert output.exists()


def test_render_from_config_file(tmp_path):
    config = tmp_path / "config.json"
    config.write_text(json.dumps({
        'width': 6, 'height': 4, 'max_iterations': 8,
        'fractal': 'newton', 'fractal_params': {'coefficients': [-1, 0, 1]},
    }))
    output = tmp_path / "newton.png"
    result = CliRunner().invoke(main, ['render', str(output), '--config', str(config)])
    assert result.exit_code == 0, result.output
    assert ImageExporter.extract_metadata(output).fractal_type == 'newton'


def test_render_invalid_settings(tmp_path):
    result = CliRunner().invoke(main, [
        'render', str(tmp_path / "x.png"), '--max-colors', '0', '-w', '4', '-h', '4'])
    assert result.exit_code == 1
    assert "max_colors" in result.output


def test_render_bad_center(tmp_path):
    result = CliRunner().invoke(main, [
        'render', str(tmp_path / "x.png"), '--center', 'abc'])
    assert result.exit_code != 0


def test_list():
    result = CliRunner().invoke(main, ['list'])
    assert result.exit_code == 0
    assert "mandelbrot" in result.output
    assert "rabbit" in result.output
    assert "wikipedia" in result.output
