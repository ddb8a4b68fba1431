import json

import numpy as np
import pytest

from fractal_engine import (
    BOUNDED,
    ConfigurationError,
    FractalFunction,
    FractalRenderer,
    Gradient,
    ImageExporter,
    RenderConfig,
)


class TestRenderConfig:

    def test_defaults(self):
        config = RenderConfig()
        config.validate()
        assert (config.width, config.height) == (680, 680)
        assert config.center == (0.0, 0.0)
        assert config.scale == (4.0, 4.0)
        assert config.max_iterations == 256
        assert config.max_colors == 64
        assert config.fractal == 'mandelbrot'
        assert config.gradient == 'rainbow'

    @pytest.mark.parametrize("overrides", [
        {'width': 0},
        {'max_iterations': 0},
        {'max_colors': -3},
        {'scale': (0.0, 4.0)},
        {'center': (float('nan'), 0.0)},
        {'processes': 0},
    ])
    def test_validate_rejects(self, overrides):
        with pytest.raises(ConfigurationError):
            RenderConfig(**overrides).validate()

    def test_from_dict(self):
        config = RenderConfig.from_dict({
            'width': 100, 'center': [-0.5, 0.25], 'fractal': 'julia',
            'fractal_params': {'c_real': -0.4, 'c_imag': 0.6},
        })
        assert config.width == 100
        assert config.center == (-0.5, 0.25)
        assert config.viewport.center_x == -0.5

    @pytest.mark.parametrize("data", [
        {'width': 4, 'height': 4, 'max_iterations': 32.0},
        {'width': "680"},
        {'max_colors': True},
        {'center': ["0", 0]},
    ])
    def test_from_dict_rejects_wrong_types(self, data):
        with pytest.raises(ConfigurationError):
            RenderConfig.from_dict(data)

    def test_from_dict_rejects_unknown_keys(self):
        with pytest.raises(ConfigurationError, match="colour"):
            RenderConfig.from_dict({'colour': 'red'})

    def test_from_json_file(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text(json.dumps({'height': 32, 'gradient': 'grayscale'}))
        config = RenderConfig.from_json_file(path)
        assert config.height == 32
        assert config.gradient == 'grayscale'

    def test_from_json_file_invalid(self, tmp_path):
        path = tmp_path / "config.json"
        path.write_text("{not json")
        with pytest.raises(ConfigurationError):
            RenderConfig.from_json_file(path)

        path.write_text("[1, 2]")
        with pytest.raises(ConfigurationError):
            RenderConfig.from_json_file(path)


class TestFractalRenderer:

    def test_render_resolves_colors(self, small_config):
        renderer = FractalRenderer(small_config)
        result = renderer.render()

        assert result.iterations.shape == (8, 8)
        assert result.colors.shape == (8, 8)
        for count, color in zip(result.iterations.ravel(), result.colors.ravel()):
            if count == BOUNDED:
                assert color == 0
            else:
                assert color == renderer.gradient.get(int(count))

    def test_origin_is_bounded(self, small_config):
        result = FractalRenderer(small_config).render()
        assert result.iterations[4, 4] == BOUNDED
        assert 0.0 < result.bounded_fraction < 1.0

    def test_color_point(self):
        gradient = Gradient([0x111111, 0x222222])
        renderer = FractalRenderer(RenderConfig(width=4, height=4, max_iterations=50),
                                   fractal=FractalFunction.mandelbrot(), gradient=gradient)
        assert renderer.color_point(0.0, 0.0) == 0
        assert renderer.color_point(2.0, 2.0) == 0x222222
        assert renderer.color_point(10.0, 10.0) == 0x222222
        assert renderer.color_point(0.5, 0.5) == 0x222222

    def test_fractal_from_registry(self):
        config = RenderConfig(width=4, height=4, fractal='julia',
                              fractal_params={'c_real': -0.123, 'c_imag': 0.745})
        renderer = FractalRenderer(config)
        assert renderer.fractal == FractalFunction.julia(-0.123, 0.745)

    def test_unknown_gradient(self):
        with pytest.raises(ConfigurationError):
            FractalRenderer(RenderConfig(width=4, height=4, gradient='no-such-map'))

    def test_parallel_matches_sequential(self, small_config):
        sequential = FractalRenderer(small_config).render()
        small_config.processes = 2
        parallel = FractalRenderer(small_config).render()
        assert np.array_equal(sequential.iterations, parallel.iterations)
        assert np.array_equal(sequential.colors, parallel.colors)

    def test_save_embeds_metadata(self, small_config, tmp_path):
        renderer = FractalRenderer(small_config)
        result = renderer.render()
        path = renderer.save(result, tmp_path / "mandelbrot.png")

        metadata = ImageExporter.extract_metadata(path)
        assert metadata.fractal_type == 'integerbrot'
        assert metadata.dimensions == (8, 8)
        assert metadata.max_iterations == 32
        assert metadata.gradient_size == 16


def test_mandelbrot_point_resolves_through_rainbow(rainbow):
    config = RenderConfig(width=4, height=4, max_iterations=256, max_colors=64)
    renderer = FractalRenderer(config, fractal=FractalFunction.integerbrot(2), gradient=rainbow)
    assert renderer.color_point(0.5, 0.5) == Gradient.rainbow(64).get(5)
    assert renderer.color_point(0.0, 0.0) == 0


def test_render_with_float_iterations_fails_before_rendering():
    with pytest.raises(ConfigurationError, match="max_iterations"):
        FractalRenderer(RenderConfig(width=4, height=4, max_iterations=32.0))
