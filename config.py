"""
config.py

Typed configuration loading and validation for Nodefall.

Design goals
- Load at most one UTF-8 JSON config file
- Validate with pydantic (defaults included)
- Support environment variable overrides
- Reject configurations the game loop cannot run with (fatal at startup)
- No other I/O beyond reading the config file (no directory creation)

Config file location
- If NODEFALL_CONFIG_PATH is set, that file is used.
- Otherwise Nodefall searches these paths in order and uses the first one that exists:
  1) ./nodefall_config.json (current working directory)
  2) <user config dir>/Nodefall/nodefall_config.json
- If no file exists the built-in defaults are used.

Example config file (nodefall_config.json)
{
  "field": {
    "line_spacing": 100,
    "grid_count": 6,
    "x_margin": 30,
    "gravity": 0.49,
    "row_capacity": 14,
    "active_row_index": 5
  },
  "nodes": {
    "goal_node_percent": 40,
    "goal_types": [
      {"type": "blue", "color": "#3c8cf0", "score": 1},
      {"type": "red", "color": "#e8483c", "score": 1}
    ]
  },
  "goal": {"min_length": 3, "max_length": 7},
  "player": {"tolerance": 0.6},
  "seed": 1234
}
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Literal, Optional, Tuple

from platformdirs import user_config_dir
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

logger = logging.getLogger(__name__)


class FieldConfig(BaseModel):
    line_spacing: float = Field(default=100.0, gt=0, description="Grid cell size in pixels.")
    grid_count: int = Field(default=6, ge=1, description="Grid columns across the play field.")
    x_margin: float = Field(default=30.0, ge=0, description="Left and right margin in pixels.")
    gravity: float = Field(default=9.8 / 10 / 2, gt=0, description="Scroll and lateral speed per tick.")
    row_capacity: int = Field(default=14, ge=1, description="Rows kept in the on-screen window.")
    active_row_index: int = Field(default=5, ge=0, description="Window row eligible for collision tests.")
    first_layout: Literal["A", "B"] = Field(default="A", description="Layout of the first generated row.")

    def half_spacing(self) -> float:
        return float(self.line_spacing) / 2.0

    def canvas_size(self) -> float:
        return float(self.line_spacing) * int(self.grid_count) + 2.0 * float(self.x_margin)

    @model_validator(mode="after")
    def validate_geometry(self) -> "FieldConfig":
        if self.active_row_index >= self.row_capacity:
            raise ValueError(
                f"active_row_index {self.active_row_index} is outside a row window of {self.row_capacity} rows"
            )
        if self.gravity >= self.half_spacing():
            raise ValueError("gravity must be smaller than half the line spacing")
        return self


class NodeTypeConfig(BaseModel):
    type: str = Field(description="Type tag matched against goal patterns.")
    color: str = Field(default="#ffffff", description="Fill color used by the renderer.")
    score: int = Field(default=1, ge=0, description="Score value carried by the node.")

    @field_validator("type")
    @classmethod
    def normalize_type(cls, value: str) -> str:
        normalized = (value or "").strip().lower()
        if not normalized:
            raise ValueError("node type must not be empty")
        if normalized == "empty":
            raise ValueError("'empty' is reserved for empty nodes")
        return normalized


def _default_goal_types() -> List[NodeTypeConfig]:
    return [
        NodeTypeConfig(type="blue", color="#3c8cf0", score=1),
        NodeTypeConfig(type="red", color="#e8483c", score=1),
    ]


class NodesConfig(BaseModel):
    goal_node_percent: float = Field(default=40.0, ge=0, le=100, description="Chance in percent a slot is a goal node.")
    goal_types: List[NodeTypeConfig] = Field(default_factory=_default_goal_types)
    empty_color: str = Field(default="#c8c8c8", description="Fill color for empty nodes.")

    @field_validator("goal_types")
    @classmethod
    def validate_goal_types(cls, value: List[NodeTypeConfig]) -> List[NodeTypeConfig]:
        if not value:
            raise ValueError("at least one goal type is required")
        seen = set()
        for node_type in value:
            if node_type.type in seen:
                raise ValueError(f"duplicate goal type: {node_type.type}")
            seen.add(node_type.type)
        return value


class GoalConfig(BaseModel):
    min_length: int = Field(default=3, description="Shortest generated goal pattern.")
    max_length: int = Field(default=7, description="Longest generated goal pattern.")

    @model_validator(mode="after")
    def validate_lengths(self) -> "GoalConfig":
        if self.min_length <= 0:
            raise ValueError("goal pattern length must be positive")
        if self.max_length < self.min_length:
            raise ValueError("goal max_length must be >= min_length")
        return self


class PlayerConfig(BaseModel):
    start_x_fraction: float = Field(default=0.5, ge=0, le=1, description="Start x as a fraction of the canvas.")
    start_y_fraction: float = Field(default=0.3, ge=0, le=1, description="Start y as a fraction of the canvas.")
    tolerance: float = Field(default=0.6, gt=0, description="Hit tolerance in pixels.")


class DisplayConfig(BaseModel):
    frame_interval_ms: int = Field(default=16, ge=1, le=1000, description="Delay between scheduled ticks.")
    hud_offset_pixels: float = Field(default=25.0, ge=0, description="HUD text offset from the top edge.")
    sprite_path: str = Field(default="", description="Character sprite image. Empty uses assets/pc.png.")


class GameConfig(BaseModel):
    field: FieldConfig = Field(default_factory=FieldConfig)
    nodes: NodesConfig = Field(default_factory=NodesConfig)
    goal: GoalConfig = Field(default_factory=GoalConfig)
    player: PlayerConfig = Field(default_factory=PlayerConfig)
    display: DisplayConfig = Field(default_factory=DisplayConfig)
    seed: Optional[int] = Field(default=None, description="Random seed for reproducible fields.")

    def character_start_x(self) -> float:
        canvas_size = self.field.canvas_size()
        x = canvas_size * float(self.player.start_x_fraction)
        return min(max(x, float(self.field.x_margin)), canvas_size - float(self.field.x_margin))

    def character_start_y(self) -> float:
        # Snapped to the nearest row boundary.
        half = self.field.half_spacing()
        raw_y = self.field.canvas_size() * float(self.player.start_y_fraction)
        return float(round(raw_y / half)) * half

    @model_validator(mode="after")
    def validate_row_contact(self) -> "GameConfig":
        half = self.field.half_spacing()
        y = self.character_start_y()
        tolerance = float(self.player.tolerance)
        handover_y = (self.field.active_row_index - 1) * half
        if abs(y - handover_y) > tolerance:
            raise ValueError(
                f"character y {y} must sit where active row {self.field.active_row_index} "
                f"hands over to the next row (y={handover_y})"
            )
        # Arrival window and lateral hit band are both `tolerance` wide.
        if self.field.gravity > tolerance:
            raise ValueError(
                f"gravity {self.field.gravity} exceeds player tolerance {tolerance}; rows would pass without a hit"
            )
        return self


def _default_config_candidates() -> List[Path]:
    config_directory = Path(user_config_dir("Nodefall", "Nodefall"))
    return [
        Path.cwd() / "nodefall_config.json",
        config_directory / "nodefall_config.json",
    ]


def _resolve_config_path() -> Optional[Path]:
    explicit_path_text = os.environ.get("NODEFALL_CONFIG_PATH", "").strip()
    if explicit_path_text:
        return Path(explicit_path_text)

    for candidate_path in _default_config_candidates():
        if candidate_path.exists():
            return candidate_path

    return None


def _read_json_file_utf8(config_path: Path) -> Dict[str, Any]:
    try:
        raw_text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise
    except OSError as exception:
        raise OSError(f"Failed to read config file: {config_path}. Error: {exception}") from exception

    try:
        parsed = json.loads(raw_text)
    except json.JSONDecodeError as exception:
        raise ValueError(f"Config file is not valid JSON: {config_path}. Error: {exception}") from exception

    if not isinstance(parsed, dict):
        raise ValueError(f"Config file root must be a JSON object: {config_path}")

    return parsed


def _apply_environment_overrides(config_dict: Dict[str, Any]) -> Dict[str, Any]:
    """
    Environment overrides are optional. The config file is the primary source of truth.

    Override variables:
    - NODEFALL_SEED
    - NODEFALL_GOAL_NODE_PERCENT
    - NODEFALL_TOLERANCE
    - NODEFALL_FRAME_INTERVAL_MS
    """
    def ensure_nested(config_root: Dict[str, Any], section_name: str) -> Dict[str, Any]:
        section = config_root.get(section_name)
        if isinstance(section, dict):
            return section
        section = {}
        config_root[section_name] = section
        return section

    updated_config = dict(config_dict)

    nodes_section = ensure_nested(updated_config, "nodes")
    player_section = ensure_nested(updated_config, "player")
    display_section = ensure_nested(updated_config, "display")

    overrides: List[Tuple[str, Dict[str, Any], str, Callable[[str], Any]]] = [
        ("NODEFALL_SEED", updated_config, "seed", int),
        ("NODEFALL_GOAL_NODE_PERCENT", nodes_section, "goal_node_percent", float),
        ("NODEFALL_TOLERANCE", player_section, "tolerance", float),
        ("NODEFALL_FRAME_INTERVAL_MS", display_section, "frame_interval_ms", int),
    ]
    for env_name, target_dict, key_name, parse in overrides:
        value_text = os.environ.get(env_name, "").strip()
        if not value_text:
            continue
        try:
            target_dict[key_name] = parse(value_text)
        except ValueError:
            logger.warning("ignoring %s=%r: expected %s", env_name, value_text, parse.__name__)

    return updated_config


def load_config(config_path: Optional[Path] = None) -> Tuple[GameConfig, Optional[Path]]:
    resolved_path = config_path if config_path is not None else _resolve_config_path()
    json_dict: Dict[str, Any] = {}
    if resolved_path is not None:
        json_dict = _read_json_file_utf8(resolved_path)
    json_dict = _apply_environment_overrides(json_dict)

    try:
        config = GameConfig.model_validate(json_dict)
    except ValidationError as exception:
        source_text = str(resolved_path) if resolved_path is not None else "(defaults)"
        raise ValueError(f"Config validation failed for {source_text}:\n{exception}") from exception

    return config, resolved_path


def to_json(config: GameConfig) -> str:
    return json.dumps(config.model_dump(), ensure_ascii=False, indent=2)


def main() -> int:
    try:
        config, resolved_path = load_config()
    except Exception as exception:
        error_payload = {"ok": False, "error": str(exception)}
        print(json.dumps(error_payload, ensure_ascii=False, indent=2))
        return 2

    output_payload = {
        "ok": True,
        "config_path": str(resolved_path) if resolved_path is not None else None,
        "config": json.loads(to_json(config)),
    }
    print(json.dumps(output_payload, ensure_ascii=False, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
