"""
Configuration and constants for the globe navigator and site services.

Projection Model:
- Orthographic globe in a 400x400 viewport, translate (200, 200)
- Fit scale 190 (width / 2 - 10), clip angle 90
- Rotation angles are degrees (lambda, phi, gamma)
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, Any, List, Tuple
import json
from pathlib import Path

import yaml


@dataclass
class NavigatorConfig:
    """
    Globe navigation constants.

    Rotation targets are expressed the way the projection consumes them:
    a location at (lon, lat) is centred by rotating to (-lon, -lat).
    """

    # Viewport
    width: int = 400
    height: int = 400
    fit_scale: float = 190.0
    clip_angle: float = 90.0

    # Rotations (degrees)
    initial_rotation: Tuple[float, float] = (-40.0, -30.0)
    world_coords: Tuple[float, float] = (-30.0, -40.0)
    reset_coords: Tuple[float, float] = (-40.0, -30.0)

    # Timing (milliseconds)
    transition_delay_ms: float = 500.0
    transition_duration_ms: float = 2000.0
    poll_interval_ms: float = 10.0
    frame_interval_ms: float = 1000.0 / 60.0

    # Zoom range as multiples of the fit scale
    min_zoom: float = 0.7
    max_zoom: float = 10.0

    # Countries whose centroid is a poor focus point
    country_overrides: Dict[str, Tuple[float, float]] = field(
        default_factory=lambda: {"Russia": (77.0, 60.0)}
    )

    # Element awaited before the first country view; small countries
    # are inserted late, so wait for a large one
    country_wait_target: str = "AUS"

    # Lazy-loading trigger distance from the bottom of the page
    near_bottom_px: float = 500.0

    @property
    def translate(self) -> Tuple[float, float]:
        return (self.width / 2, self.height / 2)

    @property
    def scale_extent(self) -> Tuple[float, float]:
        return (self.min_zoom * self.fit_scale, self.max_zoom * self.fit_scale)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "width": self.width,
            "height": self.height,
            "fit_scale": self.fit_scale,
            "clip_angle": self.clip_angle,
            "initial_rotation": list(self.initial_rotation),
            "world_coords": list(self.world_coords),
            "reset_coords": list(self.reset_coords),
            "transition_delay_ms": self.transition_delay_ms,
            "transition_duration_ms": self.transition_duration_ms,
            "poll_interval_ms": self.poll_interval_ms,
            "frame_interval_ms": self.frame_interval_ms,
            "min_zoom": self.min_zoom,
            "max_zoom": self.max_zoom,
            "country_overrides": {k: list(v) for k, v in self.country_overrides.items()},
            "country_wait_target": self.country_wait_target,
            "near_bottom_px": self.near_bottom_px,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NavigatorConfig":
        data = dict(data)
        for key in ("initial_rotation", "world_coords", "reset_coords"):
            if key in data:
                data[key] = tuple(data[key])
        if "country_overrides" in data:
            data["country_overrides"] = {
                k: tuple(v) for k, v in data["country_overrides"].items()
            }
        return cls(**data)


@dataclass
class MailConfig:
    """Contact-form relay settings."""
    recipient: str = "tim@neophilus.net"
    sender: str = "Neophilus.net <noreply@neophilus.net>"
    subject_template: str = "Odyssey contact from {name}."
    smtp_host: str = "localhost"
    smtp_port: int = 25
    timezone: str = "Europe/Stockholm"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recipient": self.recipient,
            "sender": self.sender,
            "subject_template": self.subject_template,
            "smtp_host": self.smtp_host,
            "smtp_port": self.smtp_port,
            "timezone": self.timezone,
        }


@dataclass
class CaptchaConfig:
    """
    Verification image settings.

    backgrounds: PNG files, one picked at random per request. When empty a
    plain background of `size` is generated.
    """
    backgrounds: List[Path] = field(default_factory=list)
    size: Tuple[int, int] = (120, 40)
    text_colour: Tuple[int, int, int] = (130, 130, 130)
    token_length: int = 5
    cookie_max_age: int = 3600

    def to_dict(self) -> Dict[str, Any]:
        return {
            "backgrounds": [str(p) for p in self.backgrounds],
            "size": list(self.size),
            "text_colour": list(self.text_colour),
            "token_length": self.token_length,
            "cookie_max_age": self.cookie_max_age,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CaptchaConfig":
        data = dict(data)
        data["backgrounds"] = [Path(p) for p in data.get("backgrounds") or []]
        if "size" in data:
            data["size"] = tuple(data["size"])
        if "text_colour" in data:
            data["text_colour"] = tuple(data["text_colour"])
        return cls(**data)


@dataclass
class Config:
    """
    Global configuration.

    Loaded from JSON or YAML; every section is optional and falls back to
    the defaults above.
    """

    navigator: NavigatorConfig = field(default_factory=NavigatorConfig)
    mail: MailConfig = field(default_factory=MailConfig)
    captcha: CaptchaConfig = field(default_factory=CaptchaConfig)

    # Flask session signing key
    secret_key: Optional[str] = None

    # Identifies us to the geocoding service
    user_agent: str = "odyssey-globe/1.0.0"

    # Paths (relative to project root)
    world_path: Path = field(default_factory=lambda: Path("assets/world.json"))
    data_dir: Path = field(default_factory=lambda: Path("world"))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "navigator": self.navigator.to_dict(),
            "mail": self.mail.to_dict(),
            "captcha": self.captcha.to_dict(),
            "secret_key": self.secret_key,
            "user_agent": self.user_agent,
            "world_path": str(self.world_path),
            "data_dir": str(self.data_dir),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Config":
        data = dict(data)
        data["navigator"] = NavigatorConfig.from_dict(data.get("navigator") or {})
        data["mail"] = MailConfig(**(data.get("mail") or {}))
        data["captcha"] = CaptchaConfig.from_dict(data.get("captcha") or {})
        data["world_path"] = Path(data.get("world_path") or "assets/world.json")
        data["data_dir"] = Path(data.get("data_dir") or "world")
        return cls(**data)

    @classmethod
    def from_json(cls, path: Path) -> "Config":
        """Load config from JSON file."""
        with open(path) as f:
            return cls.from_dict(json.load(f))

    @classmethod
    def from_yaml(cls, path: Path) -> "Config":
        """Load config from YAML file."""
        with open(path) as f:
            return cls.from_dict(yaml.safe_load(f) or {})

    @classmethod
    def load(cls, path: Path) -> "Config":
        """Load config, picking the parser from the file suffix."""
        path = Path(path)
        if path.suffix in (".yaml", ".yml"):
            return cls.from_yaml(path)
        return cls.from_json(path)

    def save(self, path: Path) -> None:
        """Save config to JSON file."""
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, 'w') as f:
            json.dump(self.to_dict(), f, indent=2)


# Global default config
DEFAULT_CONFIG = Config()
