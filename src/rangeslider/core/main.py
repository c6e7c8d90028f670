"""
Range slider playground - Main Entry Point.

This is the CLI entry point that uses tyro for argument parsing. It builds a
slider, replays drags on it and prints the resulting state.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Annotated

import tyro
import yaml

from src.rangeslider.config.io import export_slider_config, import_slider_config
from src.rangeslider.config.settings import GeometrySettings, SliderConfig
from src.rangeslider.core.slider import RangeSlider
from src.rangeslider.interaction.events import Event, EventBus, EventType
from src.rangeslider.interaction.gestures import GesturePhase
from src.rangeslider.state.thumb_coordinator import Thumb

logger = logging.getLogger(__name__)


def setup_logging(level: str = "INFO") -> None:
    """
    Setup logging configuration.

    Parameters
    ----------
    level : str
        Logging level (DEBUG, INFO, WARNING, ERROR)
    """
    logging.basicConfig(
        level=getattr(logging, level.upper()),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def replay_drag(slider: RangeSlider, thumb: Thumb, translations: tuple[float, ...]) -> None:
    """Replay pointer translations as one continuous drag on ``thumb``."""
    if not translations:
        return
    slider.drag(thumb, 0.0, GesturePhase.BEGAN)
    for translation in translations:
        slider.drag(thumb, translation, GesturePhase.CHANGED)
    slider.drag(thumb, 0.0, GesturePhase.ENDED)


def _describe(event: Event) -> dict[str, object]:
    data = {
        key: value.value if isinstance(value, Thumb) else value
        for key, value in event.data.items()
        if key in ("thumb", "value", "previous", "edge")
    }
    return {"event": event.type.name, **data}


def main(
    config: Annotated[Path | None, tyro.conf.Positional] = None,
    lower: float | None = None,
    upper: float | None = None,
    step: float | None = None,
    track_width: float | None = None,
    thumb_width: float | None = None,
    drag_lower: tuple[float, ...] = (),
    drag_upper: tuple[float, ...] = (),
    export: Path | None = None,
    log_level: str = "INFO",
) -> None:
    """
    Range slider playground.

    Parameters
    ----------
    config : Path | None
        YAML slider configuration (default: linear 0..1 slider)
    lower : float | None
        Value to assign to the lower thumb
    upper : float | None
        Value to assign to the upper thumb
    step : float | None
        Override the configured step
    track_width : float | None
        Override the configured track width, in points
    thumb_width : float | None
        Override the configured thumb width, in points
    drag_lower : tuple[float, ...]
        Pointer translations (points) replayed as one drag on the lower thumb
    drag_upper : tuple[float, ...]
        Pointer translations (points) replayed as one drag on the upper thumb
    export : Path | None
        Write the final configuration to this YAML file
    log_level : str
        Logging level: DEBUG, INFO, WARNING, ERROR (default: INFO)

    Examples
    --------
    Drag the upper thumb of a stepped slider:
        rangeslider slider.yaml --drag-upper -20 -15

    Set values and save the result:
        rangeslider --lower 0.1 --upper 0.4 --export out.yaml
    """
    setup_logging(log_level)

    slider_config = import_slider_config(config) if config is not None else SliderConfig()
    if step is not None:
        slider_config = replace(slider_config, step=step)
    if track_width is not None or thumb_width is not None:
        geometry = slider_config.geometry
        slider_config.geometry = GeometrySettings(
            track_width if track_width is not None else geometry.track_width,
            thumb_width if thumb_width is not None else geometry.thumb_width,
        )

    bus = EventBus(name="playground")
    events: list[dict[str, object]] = []
    for event_type in (EventType.VALUE_CHANGED, EventType.BOUNDARY_REACHED):
        bus.subscribe(event_type, lambda event: events.append(_describe(event)))
    slider = RangeSlider.from_config(slider_config, event_bus=bus)
    logger.info(f"Created slider: {slider.state().to_dict()}")

    if lower is not None:
        slider.lower_value = lower
    if upper is not None:
        slider.upper_value = upper
    if (drag_lower or drag_upper) and slider.track_width == 0:
        logger.warning("Track width is 0, drags will not move the thumbs")
    replay_drag(slider, Thumb.LOWER, drag_lower)
    replay_drag(slider, Thumb.UPPER, drag_upper)

    print(yaml.safe_dump({"state": slider.state().to_dict(), "events": events}, sort_keys=False))

    if export is not None:
        export_slider_config(slider, export)


def cli() -> None:
    """Console script entry point."""
    tyro.cli(main)


if __name__ == "__main__":
    cli()
