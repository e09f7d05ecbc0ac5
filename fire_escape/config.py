"""Configuration dataclasses and YAML loader for the fire escape solver."""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional
from pathlib import Path
import yaml


@dataclass
class ExportConfig:
    csv: bool = True        # verdict log
    snapshot: bool = False  # one PNG per puzzle
    gif: bool = False       # hazard/agent animation per escapable puzzle


@dataclass
class RenderConfig:
    show_hazard_times: bool = True
    fps: int = 4
    dpi: int = 120


@dataclass
class EscapeConfig:
    input_path: Optional[Path] = None
    workers: int = 1
    export: ExportConfig = field(default_factory=ExportConfig)
    render: RenderConfig = field(default_factory=RenderConfig)

    # Can be overridden by CLI
    report: bool = True
    quiet: bool = False
    out_dir: Path = field(default_factory=lambda: Path("./output"))


def _require_bool(key: str, value: Any) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"{key} must be true or false, got {value!r}")
    return value


def _require_positive_int(key: str, value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValueError(f"{key} must be a positive integer, got {value!r}")
    return value


def _parse_export(export_raw: Dict) -> ExportConfig:
    """Parse export flags from raw YAML data."""
    defaults = ExportConfig()
    return ExportConfig(
        csv=_require_bool('export.csv', export_raw.get('csv', defaults.csv)),
        snapshot=_require_bool('export.snapshot', export_raw.get('snapshot', defaults.snapshot)),
        gif=_require_bool('export.gif', export_raw.get('gif', defaults.gif))
    )


def _parse_render(render_raw: Dict) -> RenderConfig:
    """Parse rendering options from raw YAML data."""
    defaults = RenderConfig()
    return RenderConfig(
        show_hazard_times=_require_bool(
            'render.show_hazard_times',
            render_raw.get('show_hazard_times', defaults.show_hazard_times)
        ),
        fps=_require_positive_int('render.fps', render_raw.get('fps', defaults.fps)),
        dpi=_require_positive_int('render.dpi', render_raw.get('dpi', defaults.dpi))
    )


def _resolve(config_path: Path, value: Any) -> Path:
    """Resolve a relative path from the config against the config file's directory."""
    path = Path(value)
    if not path.is_absolute():
        path = config_path.parent / path
    return path


def default_config() -> EscapeConfig:
    """Settings used when no config file is given."""
    return EscapeConfig()


def load_config(config_path: Path) -> EscapeConfig:
    """Load and validate YAML configuration file."""
    config_path = Path(config_path)
    with open(config_path) as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Top level of {config_path} must be a mapping")

    input_path = raw.get('input')
    if input_path is not None:
        input_path = _resolve(config_path, input_path)

    config = EscapeConfig(
        input_path=input_path,
        workers=_require_positive_int('workers', raw.get('workers', 1)),
        export=_parse_export(raw.get('export') or {}),
        render=_parse_render(raw.get('render') or {}),
        report=_require_bool('report', raw.get('report', True))
    )

    if 'out_dir' in raw:
        config.out_dir = _resolve(config_path, raw['out_dir'])
    return config
