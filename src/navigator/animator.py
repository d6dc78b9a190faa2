"""
Animated view changes.

`goto_view` tweens the projection from its current orientation to a target
along the shortest great circle while easing the scale back to the fit
scale, redrawing every map path on each frame.
"""

import logging
from typing import Sequence

from common.config import NavigatorConfig
from geo.path import Renderer
from geo.rotation import GreatCircleInterpolator, interpolate_number

from .clock import FrameClock, Transition
from .document import MapDocument
from .state import NavigatorState

logger = logging.getLogger(__name__)


class ViewAnimator:
    """
    Drive projection transitions.

    Overlapping calls are resolved by the clock's transition rules: the
    most recent goto_view supersedes any in flight.
    """

    def __init__(
        self,
        state: NavigatorState,
        clock: FrameClock,
        document: MapDocument,
        renderer: Renderer,
        config: NavigatorConfig
    ):
        self.state = state
        self.clock = clock
        self.document = document
        self.renderer = renderer
        self.config = config

    def redraw(self) -> None:
        self.renderer.redraw(self.document.paths(), self.state.projection)

    def goto_view(self, coords: Sequence[float]) -> Transition:
        """
        Rotate the globe to `coords` (a projection rotation).

        Source rotation and scale are read when the transition starts, not
        when it is scheduled. A zero-distance move produces no tween.

        Args:
            coords: Target (lambda, phi) in degrees

        Returns:
            The scheduled Transition
        """
        target = (float(coords[0]), float(coords[1]))
        interp = GreatCircleInterpolator()

        def rotate_tween():
            projection = self.state.projection
            if tuple(projection.rotation[:2]) == target:
                logger.debug(f"Already at {target}, no rotation")
                return None
            scale = interpolate_number(projection.scale, self.config.fit_scale)
            interp.source = projection.rotation[:2]
            interp.target = target
            if not interp.distance() > 0:
                logger.debug(f"Already at {target}, no rotation")
                return None

            def tick(t: float) -> None:
                projection.rotate(interp(t))
                projection.scale = scale(t)
                self.redraw()

            return tick

        logger.debug(f"goto_view {target}")
        return self.clock.transition(
            delay_ms=self.config.transition_delay_ms,
            duration_ms=self.config.transition_duration_ms,
        ).tween("rotate", rotate_tween)
