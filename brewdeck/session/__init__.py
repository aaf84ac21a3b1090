"""Dashboard session package.

The session is split into a pure core and an effectful shell:

- ``controller.transition`` maps (state, event) to (state, work)
- ``render.render_dashboard`` maps state to a layout description
- ``runtime.WorkExecutor`` runs the work and posts completion events

Only the runtime performs I/O, so the controller and renderer are tested
without a terminal or a brew installation.
"""

from brewdeck.session.controller import SessionController, initial_state, transition
from brewdeck.session.render import DashboardLayout, render_dashboard
from brewdeck.session.runtime import WorkExecutor
from brewdeck.session.state import PanelFocus, SessionState

__all__ = [
    "DashboardLayout",
    "PanelFocus",
    "SessionController",
    "SessionState",
    "WorkExecutor",
    "initial_state",
    "render_dashboard",
    "transition",
]
