"""
Command-line interface for fractal generation.

A thin driver around FractalRenderer: it builds a RenderConfig from a JSON
file and command-line overrides, renders one frame and writes it as PNG.
"""

import logging
import sys
import traceback
from pathlib import Path
from typing import Optional, Tuple

import click

from .. import __version__
from ..api import FractalRenderer, RenderConfig
from ..core.fractal_types import JULIA_PRESETS, FractalRegistry
from ..exceptions import ConfigurationError
from ..rendering.coloring import GRADIENT_NAMES

logger = logging.getLogger(__name__)


def _parse_pair(value: Optional[str], option: str) -> Optional[Tuple[float, float]]:
    if value is None:
        return None
    try:
        parts = [float(x.strip()) for x in value.split(',')]
    except ValueError:
        raise click.BadParameter(f"expected 'x,y', got '{value}'", param_hint=option)
    if len(parts) != 2:
        raise click.BadParameter(f"expected 'x,y', got '{value}'", param_hint=option)
    return parts[0], parts[1]


@click.group(invoke_without_command=True)
@click.option('--version', is_flag=True, help='Show version information')
@click.option('--verbose', '-v', is_flag=True, help='Enable verbose logging')
@click.option('--quiet', '-q', is_flag=True, help='Suppress most output')
@click.pass_context
def main(ctx, version, verbose, quiet):
    """
    Fractal Engine - escape-time and root-finding fractal renderer.
    """
    if quiet:
        logging.basicConfig(level=logging.ERROR)
    elif verbose:
        logging.basicConfig(level=logging.DEBUG,
                            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    else:
        logging.basicConfig(level=logging.INFO,
                            format='%(levelname)s: %(message)s')
    
    if version:
        click.echo(f"Fractal Engine v{__version__}")
        click.echo(f"Python: {sys.version}")
        if ctx.invoked_subcommand is None:
            ctx.exit(0)
    
    ctx.ensure_object(dict)
    ctx.obj['verbose'] = verbose


@main.command()
@click.argument('output', type=click.Path(dir_okay=False))
@click.option('--config', 'config_file', type=click.Path(exists=True, dir_okay=False),
              help='JSON configuration file')
@click.option('--fractal', '-f', type=click.Choice(sorted(FractalRegistry.list_fractals())),
              help='Fractal type')
@click.option('--width', '-w', type=int, help='Image width')
@click.option('--height', '-h', type=int, help='Image height')
@click.option('--center', type=str, help='Center point "x,y"')
@click.option('--scale', type=str, help='Plane extent shown "x,y"')
@click.option('--max-iterations', '--max-iters', type=int, help='Maximum iterations')
@click.option('--max-colors', type=int, help='Gradient size')
@click.option('--gradient', '-g', type=str,
              help=f"Gradient: {', '.join(GRADIENT_NAMES)} or a matplotlib colormap")
@click.option('--julia-c', type=str, help='Julia constant "real,imag" or preset name')
@click.option('--exponent', type=str, help='Power-map exponent: integer, or "real,imag"')
@click.option('--coefficients', type=str,
              help='Polynomial coefficients, constant term first, e.g. "-1,0,0,1"')
@click.option('--processes', '-p', type=int, help='Number of worker processes')
@click.pass_context
def render(ctx, output, config_file, fractal, center, scale, julia_c, exponent,
           coefficients, **overrides):
    """
    Render a single fractal image.
    
    OUTPUT: Output PNG file path
    """
    try:
        config = RenderConfig.from_json_file(config_file) if config_file else RenderConfig()
        
        for key, value in overrides.items():
            if value is not None:
                setattr(config, key, value)
        
        if center is not None:
            config.center = _parse_pair(center, '--center')
        if scale is not None:
            config.scale = _parse_pair(scale, '--scale')
        
        if fractal is not None and fractal != config.fractal:
            config.fractal = fractal
            config.fractal_params = {}
        config.fractal_params = dict(config.fractal_params)
        
        if julia_c is not None:
            if julia_c in JULIA_PRESETS:
                c_real, c_imag = JULIA_PRESETS[julia_c]
                click.echo(f"Using Julia preset: {julia_c}")
            else:
                c_real, c_imag = _parse_pair(julia_c, '--julia-c')
            config.fractal_params.update(c_real=c_real, c_imag=c_imag)
        
        if exponent is not None:
            if config.fractal == 'multibrot':
                real, imag = _parse_pair(exponent, '--exponent') if ',' in exponent \
                    else (float(exponent), 0.0)
                config.fractal_params.update(exponent_real=real, exponent_imag=imag)
            else:
                config.fractal_params['exponent'] = int(exponent)
        
        if coefficients is not None:
            config.fractal_params['coefficients'] = [
                float(x.strip()) for x in coefficients.split(',')]
        
        renderer = FractalRenderer(config)
        click.echo(f"Rendering {renderer.fractal.name} fractal...")
        result = renderer.render()
        path = renderer.save(result, Path(output))
        
        click.echo(f"Render complete: {result.render_time:.2f}s")
        click.echo(f"Saved: {path}")
    
    except (ConfigurationError, ValueError, OSError) as e:
        click.echo(f"Error: {e}", err=True)
        if ctx.obj.get('verbose'):
            traceback.print_exc()
        sys.exit(1)


@main.command(name='list')
def list_command():
    """List available fractals, Julia presets and gradients."""
    click.echo("Fractals:")
    for name, description in FractalRegistry.list_fractals().items():
        click.echo(f"  {name:<12} {description}")
    
    click.echo("Julia presets:")
    for name, (c_real, c_imag) in JULIA_PRESETS.items():
        click.echo(f"  {name:<12} c = {c_real} + {c_imag}i")
    
    click.echo("Gradients:")
    for name in GRADIENT_NAMES:
        click.echo(f"  {name}")


if __name__ == '__main__':
    main()
