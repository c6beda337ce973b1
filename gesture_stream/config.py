"""
Configuration management for the gesture event pipeline.
"""
import logging

import yaml
from pathlib import Path
from typing import Optional, Dict, Any, Tuple
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)


@dataclass
class CameraConfig:
    """Camera configuration settings."""
    index: int = 0
    width: int = 640
    height: int = 480
    fps: int = 30


@dataclass
class SegmentationConfig:
    """Skin color range (OpenCV HSV units, hue 0-179) and morphology settings."""
    lower_hsv: Tuple[int, int, int] = (0, 30, 60)
    upper_hsv: Tuple[int, int, int] = (20, 150, 255)
    kernel_radius: int = 4


@dataclass
class ShapeConfig:
    """Hand region and finger counting thresholds."""
    min_area: float = 5000.0
    min_contour_points: int = 10
    defect_depth_min: float = 20.0
    finger_depth_min: float = 30.0
    max_gap_angle_deg: float = 90.0


@dataclass
class GesturesConfig:
    """Motion classification and debounce settings."""
    motion_threshold_px: float = 30.0
    cooldown_ms: int = 500


@dataclass
class DisplayConfig:
    """Display configuration settings."""
    show_windows: bool = True
    show_mask: bool = True
    window_name: str = "Hand Detection"
    mask_window_name: str = "Mask"


@dataclass
class LoopConfig:
    """Outer loop pacing."""
    frame_interval_ms: int = 33


@dataclass
class LoggingConfig:
    """Logging settings."""
    level: str = "INFO"


@dataclass
class Cfg:
    """Main configuration class."""
    camera: CameraConfig = field(default_factory=CameraConfig)
    segmentation: SegmentationConfig = field(default_factory=SegmentationConfig)
    shape: ShapeConfig = field(default_factory=ShapeConfig)
    gestures: GesturesConfig = field(default_factory=GesturesConfig)
    display: DisplayConfig = field(default_factory=DisplayConfig)
    loop: LoopConfig = field(default_factory=LoopConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config.default.yaml"


def default_config() -> Cfg:
    """Return the built-in defaults without reading any file."""
    return Cfg()


def load_config(path: Optional[str] = None) -> Cfg:
    """
    Load configuration from YAML file.

    Args:
        path: Path to config file. If None, uses config.default.yaml from the
            project root, or the built-in defaults when that file is not
            present (e.g. an installed package)

    Returns:
        Configuration object with all settings
    """
    if path is None:
        if not DEFAULT_CONFIG_PATH.exists():
            logger.info(f"{DEFAULT_CONFIG_PATH} not found, using built-in defaults")
            return default_config()
        path = DEFAULT_CONFIG_PATH

    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    with open(config_path, 'r') as f:
        data = yaml.safe_load(f) or {}

    if not isinstance(data, dict):
        raise ValueError(f"Config file must contain a mapping: {config_path}")

    return _dict_to_config(data)


def _section(data: Dict[str, Any], name: str) -> Dict[str, Any]:
    section = data.get(name)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ValueError(f"{name} must be a mapping, got {section!r}")
    return section


def _number(value: Any, name: str, cast=float):
    if isinstance(value, bool):
        raise ValueError(f"{name} must be a number, got {value!r}")
    try:
        return cast(value)
    except (TypeError, ValueError):
        raise ValueError(f"{name} must be a number, got {value!r}") from None


def _hsv_triple(value: Any, name: str) -> Tuple[int, int, int]:
    if not isinstance(value, (list, tuple)) or len(value) != 3:
        raise ValueError(f"{name} must be a list of three integers, got {value!r}")
    h, s, v = (_number(x, name, int) for x in value)
    if not (0 <= h <= 179 and 0 <= s <= 255 and 0 <= v <= 255):
        raise ValueError(f"{name} out of range (H 0-179, S/V 0-255): {value!r}")
    return (h, s, v)


def _positive(value: Any, name: str, cast=float):
    value = _number(value, name, cast)
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value!r}")
    return value


def _non_negative(value: Any, name: str, cast=float):
    value = _number(value, name, cast)
    if value < 0:
        raise ValueError(f"{name} must not be negative, got {value!r}")
    return value


def _dict_to_config(data: Dict[str, Any]) -> Cfg:
    """Convert dictionary to configuration object. Missing keys keep defaults."""
    defaults = Cfg()

    camera_data = _section(data, 'camera')
    camera = CameraConfig(
        index=_non_negative(camera_data.get('index', defaults.camera.index), 'camera.index', int),
        width=_positive(camera_data.get('width', defaults.camera.width), 'camera.width', int),
        height=_positive(camera_data.get('height', defaults.camera.height), 'camera.height', int),
        fps=_positive(camera_data.get('fps', defaults.camera.fps), 'camera.fps', int)
    )

    seg_data = _section(data, 'segmentation')
    lower = _hsv_triple(seg_data.get('lower_hsv', defaults.segmentation.lower_hsv), 'segmentation.lower_hsv')
    upper = _hsv_triple(seg_data.get('upper_hsv', defaults.segmentation.upper_hsv), 'segmentation.upper_hsv')
    if any(lo > hi for lo, hi in zip(lower, upper)):
        raise ValueError(f"segmentation.lower_hsv {lower} exceeds upper_hsv {upper}")
    segmentation = SegmentationConfig(
        lower_hsv=lower,
        upper_hsv=upper,
        kernel_radius=_positive(seg_data.get('kernel_radius', defaults.segmentation.kernel_radius),
                                'segmentation.kernel_radius', int)
    )

    shape_data = _section(data, 'shape')
    shape = ShapeConfig(
        min_area=_positive(shape_data.get('min_area', defaults.shape.min_area), 'shape.min_area'),
        min_contour_points=_non_negative(shape_data.get('min_contour_points', defaults.shape.min_contour_points),
                                         'shape.min_contour_points', int),
        defect_depth_min=_non_negative(shape_data.get('defect_depth_min', defaults.shape.defect_depth_min),
                                       'shape.defect_depth_min'),
        finger_depth_min=_non_negative(shape_data.get('finger_depth_min', defaults.shape.finger_depth_min),
                                       'shape.finger_depth_min'),
        max_gap_angle_deg=_positive(shape_data.get('max_gap_angle_deg', defaults.shape.max_gap_angle_deg),
                                    'shape.max_gap_angle_deg')
    )

    gestures_data = _section(data, 'gestures')
    gestures = GesturesConfig(
        motion_threshold_px=_non_negative(gestures_data.get('motion_threshold_px', defaults.gestures.motion_threshold_px),
                                          'gestures.motion_threshold_px'),
        cooldown_ms=_non_negative(gestures_data.get('cooldown_ms', defaults.gestures.cooldown_ms),
                                  'gestures.cooldown_ms', int)
    )

    display_data = _section(data, 'display')
    display = DisplayConfig(
        show_windows=bool(display_data.get('show_windows', defaults.display.show_windows)),
        show_mask=bool(display_data.get('show_mask', defaults.display.show_mask)),
        window_name=str(display_data.get('window_name', defaults.display.window_name)),
        mask_window_name=str(display_data.get('mask_window_name', defaults.display.mask_window_name))
    )

    loop_data = _section(data, 'loop')
    loop = LoopConfig(
        frame_interval_ms=_non_negative(loop_data.get('frame_interval_ms', defaults.loop.frame_interval_ms),
                                        'loop.frame_interval_ms', int)
    )

    logging_data = _section(data, 'logging')
    logging_cfg = LoggingConfig(
        level=str(logging_data.get('level', defaults.logging.level)).upper()
    )

    return Cfg(
        camera=camera,
        segmentation=segmentation,
        shape=shape,
        gestures=gestures,
        display=display,
        loop=loop,
        logging=logging_cfg
    )
